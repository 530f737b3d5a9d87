# Shared fixtures for the pyntfs test-suite

import pytest

from pyntfs.config import VFSConfig
from pyntfs.emu_fs import VirtualFileSystem


@pytest.fixture
def config():
    return VFSConfig()


@pytest.fixture
def vfs(config):
    return VirtualFileSystem(config)


@pytest.fixture
def strict_vfs():
    """A volume with autovivification switched off."""
    return VirtualFileSystem(VFSConfig(autovivify=False))


@pytest.fixture
def events(vfs):
    seen = []
    vfs.emitter.on("*", lambda event, *args: seen.append((event, args)))
    return seen
