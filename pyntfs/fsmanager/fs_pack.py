"""
lz4-framed file packs used to seed a sandbox volume with decoy files.

Layout of the decompressed stream, repeated once per file:

    _FILE_CONTAINER_HDR | UTF-16LE win path | file contents
"""
import logging

import lz4.frame

import pyntfs.fs_structure as fc
from pyntfs.errors import VFSError

logger = logging.getLogger(__name__)


def pack_files(vfs) -> bytes:
    """Serialise every file of `vfs` into one compressed blob."""
    chunks = []
    for node in vfs.root.walk():
        if node.is_folder:
            continue
        name = node.win_path.encode("utf-16le")
        hdr = fc._FILE_CONTAINER_HDR(
            sig=fc.FILE_SIGNATURE,
            attributes=node.attributes,
            size_of_file=node.size,
            size_of_name=len(name),
        )
        chunks += [bytes(hdr), name, node.contents]
    return lz4.frame.compress(b''.join(chunks))


def unpack_files(vfs, blob:bytes) -> int:
    """
    Load a pack produced by `pack_files` into `vfs`, creating parent
    folders as needed.  Returns the number of files written.
    """
    try:
        buf = lz4.frame.decompress(blob)
    except RuntimeError as e:
        raise VFSError(msg="corrupt file pack: %s" % e)

    offset = 0
    count = 0
    hdr_size = fc._FILE_CONTAINER_HDR.sizeof()
    while offset < len(buf):
        if len(buf) - offset < hdr_size:
            raise VFSError(msg="truncated file pack header at offset %d" % offset)
        hdr = fc._FILE_CONTAINER_HDR.cast(buf, offset)
        if hdr.sig != fc.FILE_SIGNATURE:
            raise VFSError(msg="bad file pack signature at offset %d" % offset)
        end = offset + hdr_size + hdr.size_of_name + hdr.size_of_file
        if end > len(buf):
            raise VFSError(msg="truncated file pack entry at offset %d" % offset)

        file_name = hdr.get_file_name(buf, offset)
        vfs.add_file(file_name, hdr.get_file_contents(buf, offset), autovivify=True)
        node = vfs.GetFile(file_name)
        node.attributes = hdr.attributes
        logger.debug("unpacked %s (%d bytes)", file_name, hdr.size_of_file)

        offset = end
        count += 1
    return count
