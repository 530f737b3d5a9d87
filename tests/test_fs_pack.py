import lz4.frame
import pytest

import pyntfs.fs_structure as fc
from pyntfs.config import VFSConfig
from pyntfs.emu_fs import VirtualFileSystem
from pyntfs.errors import VFSError
from pyntfs.fsmanager.fs_pack import pack_files, unpack_files
from pyntfs.windef.file_defs import FileAttribute


def test_header_layout():
    assert fc._FILE_CONTAINER_HDR.sizeof() == 16


def test_pack_and_seed_a_fresh_volume(vfs):
    vfs.AddFile("C:\\Users\\admin\\Documents\\Invoice 2021.docx", b"PK\x03\x04")
    vfs.AddFile("C:\\decoy.txt", "hello")
    vfs.GetFile("C:\\decoy.txt").attributes |= FileAttribute.FILE_ATTRIBUTE_HIDDEN

    other = VirtualFileSystem(VFSConfig(autovivify=False))
    assert unpack_files(other, pack_files(vfs)) == 2

    doc = other.GetFile("C:\\Users\\admin\\Documents\\Invoice 2021.docx")
    assert doc.contents == b"PK\x03\x04"
    assert doc.win_path == "C:\\Users\\admin\\Documents\\Invoice 2021.docx"
    assert other.GetShortName(doc.win_path) == "INVOIC~1.DOC"
    assert other.GetFile("C:\\decoy.txt").attributes & FileAttribute.FILE_ATTRIBUTE_HIDDEN


def test_seed_path(tmp_path):
    source = VirtualFileSystem()
    source.AddFile("C:\\Windows\\Temp\\note.txt", b"seeded")
    seed = tmp_path / "seed.bin"
    seed.write_bytes(pack_files(source))

    vfs = VirtualFileSystem(VFSConfig(seed_path=str(seed)))
    assert vfs.ReadFileContents("C:\\Windows\\Temp\\note.txt") == b"seeded"


def test_not_lz4(vfs):
    with pytest.raises(VFSError):
        unpack_files(vfs, b"definitely not a pack")


def test_bad_signature(vfs):
    with pytest.raises(VFSError):
        unpack_files(vfs, lz4.frame.compress(b"\x00" * 32))


def test_truncated_entry(vfs):
    hdr = fc._FILE_CONTAINER_HDR(sig=fc.FILE_SIGNATURE, attributes=0, size_of_file=100, size_of_name=4)
    blob = lz4.frame.compress(bytes(hdr) + "C:".encode("utf-16le") + b"abc")
    with pytest.raises(VFSError):
        unpack_files(vfs, blob)
