import pytest

from pyntfs.config import VFSConfig
from pyntfs.errors import InvalidPath, PathNotFound, VFSError
from pyntfs.fsmanager.fs_emu_util import convert_winpath_to_emupath, parse_file_fullpath, splitdrive
from pyntfs.fsmanager.path_resolver import PathResolver, normalise, parse


@pytest.fixture
def resolver():
    return PathResolver(VFSConfig().get_env)


@pytest.mark.parametrize("path, expected", [
    ("C:\\foo\\.\\bar\\..\\baz", "C:\\foo\\baz"),
    ("C:/foo//bar/", "C:\\foo\\bar\\"),
    ("C:\\..\\..\\foo", "C:\\foo"),
    ("..\\foo", "..\\foo"),
    ("foo\\..\\..\\bar", "..\\bar"),
    ("\\\\?\\C:\\foo\\.\\bar", "\\\\?\\C:\\foo\\bar"),
    ("", "."),
])
def test_normalise(path, expected):
    assert normalise(path) == expected


def test_parse():
    assert parse("C:\\path\\dir\\file.txt") == {
        "root": "C:\\", "dir": "C:\\path\\dir", "base": "file.txt", "ext": ".txt", "name": "file",
    }
    assert parse("C:\\file")["dir"] == "C:\\"
    assert parse(".profile")["ext"] == ''


@pytest.mark.parametrize("path", ["C:\\foo", "c:\\", "\\\\?\\C:\\foo", "\\\\server\\share"])
def test_absolute_paths(path):
    assert PathResolver.path_is_absolute(path)
    assert not PathResolver.path_is_relative(path)


@pytest.mark.parametrize("path", ["foo", "C:foo", "\\foo", "..\\foo", "C:"])
def test_relative_paths(path):
    assert PathResolver.path_is_relative(path)


def test_build_path():
    assert PathResolver.build_path("C:\\foo", "bar.txt") == "C:\\foo\\bar.txt"
    assert PathResolver.build_path("C:\\foo\\", "bar.txt") == "C:\\foo\\bar.txt"
    assert PathResolver.build_path("C:", "bar.txt") == "C:bar.txt"


def test_environment_expansion(resolver):
    assert resolver.expand_environment_strings("%WINDIR%\\system32") == "C:\\Windows\\system32"
    assert resolver.expand_environment_strings("%AppData%") == "C:\\Users\\admin\\AppData\\Roaming"
    assert resolver.expand_environment_strings("%NOPE%\\x") == "%NOPE%\\x"


@pytest.mark.parametrize("path, expected", [
    ("foo.txt", "C:\\Users\\admin\\Desktop\\foo.txt"),
    ("C:foo.txt", "C:\\Users\\admin\\Desktop\\foo.txt"),
    ("..\\foo.txt", "C:\\Users\\admin\\foo.txt"),
    ("\\foo.txt", "C:\\foo.txt"),
    ("%TEMP%\\x.js", "C:\\Users\\admin\\AppData\\Local\\Temp\\x.js"),
    ("C:\\a\\..\\b\\*.txt", "C:\\b\\*.txt"),
])
def test_resolve(resolver, path, expected):
    assert resolver.resolve(path) == expected


def test_resolve_without_cwd():
    resolver = PathResolver(lambda name: None)
    with pytest.raises(VFSError):
        resolver.resolve("foo.txt")


def test_splitdrive():
    assert splitdrive("c:\\dir") == ("c:", "\\dir")
    assert splitdrive("\\\\host\\share\\dir") == ("\\\\host\\share", "\\dir")
    assert splitdrive("dir") == ('', "dir")


def test_convert_winpath_to_emupath():
    assert convert_winpath_to_emupath("C:\\Foo\\BAR.TXT") == "/foo/bar.txt"
    assert convert_winpath_to_emupath("\\\\?\\C:\\Foo\\") == "/foo"
    assert convert_winpath_to_emupath("C:\\") == "/"


@pytest.mark.parametrize("path", ["\\\\server\\share\\x", "\\\\.\\PhysicalDrive0"])
def test_unc_and_device_paths_are_rejected(path):
    with pytest.raises(InvalidPath):
        convert_winpath_to_emupath(path)


def test_other_volumes_do_not_exist():
    with pytest.raises(PathNotFound):
        convert_winpath_to_emupath("D:\\foo")


def test_parse_file_fullpath():
    assert parse_file_fullpath("C:\\foo\\Bar.txt") == ("C:", "\\foo\\", "Bar.txt")
    assert parse_file_fullpath("C:\\foo") == ("C:", "\\", "foo")
    assert parse_file_fullpath("foo") == ('', '', '')
