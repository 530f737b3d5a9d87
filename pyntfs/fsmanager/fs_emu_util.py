import logging
from typing import List, NamedTuple, Optional, Tuple

from pyntfs.errors import InvalidPath, PathNotFound
from pyntfs.fs_nodes import FolderNode, Node
from pyntfs.windef.file_defs import PathChars, VOLUME_LETTER

logger = logging.getLogger(__name__)


def splitdrive(p:str) -> Tuple[str, str]:
    # modify splitdrive of https://github.com/python/cpython/blob/3.10/Lib/ntpath.py
    """Split a pathname into drive/UNC sharepoint and relative path specifiers.
    Returns a 2-tuple (drive_or_unc, path); either part may be empty.
    It is always true that:
        result[0] + result[1] == p
    If the path contained a drive letter, drive_or_unc will contain everything
    up to and including the colon.  e.g. splitdrive("c:/dir") returns ("c:", "/dir")
    If the path contained a UNC path, the drive_or_unc will contain the host name
    and share up to but not including the fourth directory separator character.
    e.g. splitdrive("//host/computer/dir") returns ("//host/computer", "/dir")
    """
    if len(p) >= 2:
        sep = '/'
        normp = p.replace(PathChars.SEP, sep)
        if (normp[0:2] == sep*2) and (normp[2:3] != sep):
            # is a UNC path:
            # vvvvvvvvvvvvvvvvvvvv drive letter or UNC path
            # \\machine\mountpoint\directory\etc\...
            #           directory ^^^^^^^^^^^^^^^
            index = normp.find(sep, 2)
            if index == -1:
                return p[:0], p
            index2 = normp.find(sep, index + 1)
            # a UNC path can't have two slashes in a row
            # (after the initial two)
            if index2 == index + 1:
                return p[:0], p
            if index2 == -1:
                index2 = len(p)
            return p[:index2], p[index2:]
        if normp[1:2] == ':':
            return p[:2], p[2:]
    return p[:0], p


def strip_extended_prefix(path:str) -> str:
    if path.startswith(PathChars.EXTENDED_PREFIX):
        return path[len(PathChars.EXTENDED_PREFIX):]
    return path


def convert_winpath_to_emupath(path:str) -> str:
    """
    Convert a Windows path to the emulation key format without looking at
    the node tree:  'C:\\Foo\\BAR.TXT' -> '/foo/bar.txt'

    Args:
        path (str): extended ('\\\\?\\C:\\...') or plain ('C:\\...') absolute
            path; a path without a disk designator is taken from the root

    Raises:
        InvalidPath: UNC paths and device namespaces
        PathNotFound: any volume other than C:
    """
    path = strip_extended_prefix(path)
    if path.startswith(PathChars.DEVICE_PREFIX) or path.replace("/", "\\").startswith("\\\\"):
        raise InvalidPath(path=path)

    volume_letter, path_string = splitdrive(path)
    if volume_letter and volume_letter.lower() != VOLUME_LETTER:
        raise PathNotFound(path=path)

    paths = []
    for part in path_string.lower().replace("\\", "/").split("/"):
        if part in ('', '.'):
            continue
        if part == '..':
            if paths:
                paths.pop()
            continue
        paths.append(part)
    return "/" + "/".join(paths)


def iterate_emupath(emu_path:str) -> List[str]:
    return [p for p in emu_path.split("/") if p]


def parse_file_fullpath(abs_full_path:str) -> Tuple[str, str, str]:
    """
    parse input string to (volume_letter, path, file_name)

    Args:
        abs_full_path (str): string which indicate full path of file

    Returns:
        Tuple[str, str, str]: (volume_letter, path, file_name), file_name
            keeping its original casing
    """
    volume_letter, path = splitdrive(strip_extended_prefix(abs_full_path))
    if not volume_letter:
        return ('', '', '')
    path = path.replace("/", "\\").rstrip("\\")
    idx = path.rfind("\\")
    base_name = path[idx + 1:]
    path = path[:idx + 1] or "\\"

    return (volume_letter, path, base_name)


class ResolvedPath(NamedTuple):
    internal_path: str
    exists: bool
    node: Optional[Node] = None
    parent: Optional[FolderNode] = None


class PathTranslator:
    """
    Maps externally visible Windows paths onto the node tree, following
    short name aliases segment by segment.
    """
    def __init__(self, root:FolderNode, alias_index):
        self.root = root
        self.alias_index = alias_index

    def lookup(self, path:str) -> ResolvedPath:
        parts = iterate_emupath(convert_winpath_to_emupath(path))

        real = []
        parent = None
        node = self.root
        for part in parts:
            if node is None or node.kind != "folder":
                parent = None
                node = None
                real.append(part)
                continue
            child = node.get_child(part)
            if child is None:
                target = self.alias_index.resolve(node, part)
                if target is not None:
                    part = target
                    child = node.get_child(target)
            real.append(part)
            parent = node
            node = child

        internal_path = "/" + "/".join(real)
        logger.debug("%s -> %s", path, internal_path)
        return ResolvedPath(internal_path, node is not None, node, parent)

    def external_to_internal(self, path:str) -> str:
        return self.lookup(path).internal_path
