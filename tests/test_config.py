import json
import logging

import pytest

from pyntfs.config import DEFAULT_EPOCH, VFSConfig, default_folders
from pyntfs.logger import ColorFormatter, format_api_call, setup_logging


def test_defaults():
    config = VFSConfig()
    assert config.autovivify is True
    assert config.epoch == DEFAULT_EPOCH
    assert config.get_env("PATH") == "C:\\Users\\admin\\Desktop"
    assert config.get_env("missing") is None


def test_environment_is_case_insensitive():
    config = VFSConfig(environment={"WinDir": "C:\\WINNT"})
    assert config.get_env("windir") == "C:\\WINNT"
    config.set_env("TEMP", "C:\\t")
    assert config.get_env("temp") == "C:\\t"


def test_from_dict_merges_environment():
    config = VFSConfig.from_dict({"username": "bob", "environment": {"Path": "C:\\work"}})
    assert config.get_env("path") == "C:\\work"
    assert config.get_env("userprofile") == "C:\\Users\\bob"
    assert config.default_folders == default_folders("bob")


def test_from_dict_rejects_unknown_keys():
    with pytest.raises(ValueError):
        VFSConfig.from_dict({"autovivfy": False})


def test_from_json(tmp_path):
    path = tmp_path / "vfs.json"
    path.write_text(json.dumps({"autovivify": False, "epoch": 0}))
    config = VFSConfig.from_json(str(path))
    assert config.autovivify is False
    assert config.epoch == 0


def test_format_api_call():
    text = format_api_call("AddFile", ["C:\\a.txt", b"x"])
    lines = text.splitlines()
    assert "AddFile" in lines[0]
    assert "[str] > 'C:\\\\a.txt'" in lines[1]
    assert "[bytes] > b'x'" in lines[2]


def test_setup_logging_replaces_its_handler():
    logger = setup_logging(logging.DEBUG)
    setup_logging(logging.INFO)
    handlers = [h for h in logger.handlers if getattr(h, "_pyntfs_console", False)]
    assert len(handlers) == 1
    assert isinstance(handlers[0].formatter, ColorFormatter)
    assert logger.level == logging.INFO
    logger.removeHandler(handlers[0])
