import logging
from typing import List, Optional, Tuple

from pyntfs.api_handler import ApiHandler
from pyntfs.config import VFSConfig
from pyntfs.errors import (DestinationAmbiguous, EntryNotFound, FileAlreadyExists,
                           InvalidPath, PathNotFound)
from pyntfs.fs_nodes import FileNode, FolderNode, Node
from pyntfs.fsmanager import fs_pack, wildcard
from pyntfs.fsmanager.alias_index import AliasIndex
from pyntfs.fsmanager.fs_emu_util import (PathTranslator, ResolvedPath, convert_winpath_to_emupath,
                                          parse_file_fullpath, splitdrive, strip_extended_prefix)
from pyntfs.fsmanager.path_resolver import PathResolver
from pyntfs.windef.file_defs import PathChars, VOLUME_LETTER

logger = logging.getLogger(__name__)


class VirtualFileSystem(ApiHandler):
    """
    The single C: volume a sandboxed script sees.

    Owns the node tree and the alias index; every mutation goes through
    `_insert` / `_detach` so a node never changes place without its
    short name alias following it.
    """
    name = "VFS"
    api_call = ApiHandler.api_call
    constructors = {"VFSConfig": VFSConfig}

    def __init__(self, config:Optional[VFSConfig]=None, get_env=None, emitter=None):
        self.config = config or VFSConfig()
        self.get_env = get_env or self.config.get_env
        self.root = FolderNode(VOLUME_LETTER.upper(), None, self.config.epoch)
        self.alias_index = AliasIndex()
        self.translator = PathTranslator(self.root, self.alias_index)
        self.resolver = PathResolver(self.get_env)
        super().__init__(emitter)

        self.init_windows_default()
        if self.config.seed_path:
            self.unpack_mock_files(self.config.seed_path)

    @property
    def epoch(self) -> int:
        return self.config.epoch

    def init_windows_default(self):
        for folder in self.config.default_folders:
            self.make_path(self.resolve(folder))

    def unpack_mock_files(self, seed_path:str) -> int:
        with open(seed_path, "rb") as fp:
            count = fs_pack.unpack_files(self, fp.read())
        logger.info("seeded %d file(s) from %s", count, seed_path)
        return count

    # ---- path plumbing ---------------------------------------------------

    def resolve(self, path:str) -> str:
        if not isinstance(path, str) or not path:
            raise InvalidPath(path=repr(path))
        return self.resolver.resolve(path)

    def split_path(self, path:str) -> Tuple[str, str, str]:
        """-> (absolute path, absolute parent path, basename)"""
        abs_path = self.resolve(path)
        # rejects UNC paths, device paths and foreign volumes
        convert_winpath_to_emupath(abs_path)
        volume_letter, dir_path, base_name = parse_file_fullpath(abs_path)
        return abs_path, volume_letter + dir_path, base_name

    def split_pattern(self, path:str) -> Tuple[str, str, str]:
        """Like `split_path`, but only the basename may hold wildcards."""
        abs_path, parent_path, base_name = self.split_path(path)
        if wildcard.contains_wildcard(parent_path):
            raise InvalidPath(path=abs_path)
        return abs_path, parent_path, base_name

    def segments(self, abs_path:str) -> List[str]:
        convert_winpath_to_emupath(abs_path)
        _, rest = splitdrive(strip_extended_prefix(abs_path))
        return [p for p in rest.split(PathChars.SEP) if p]

    def lookup(self, path:str) -> ResolvedPath:
        return self.translator.lookup(self.resolve(path))

    @staticmethod
    def check_name(name:str, path:str):
        if not name or any(c in PathChars.ILLEGAL for c in name):
            raise InvalidPath(path=path)

    def find_child(self, folder:FolderNode, name:str) -> Optional[Node]:
        child = folder.get_child(name)
        if child is None:
            target = self.alias_index.resolve(folder, name)
            if target is not None:
                child = folder.get_child(target)
        return child

    def get_node(self, path:str) -> Node:
        abs_path = self.resolve(path)
        res = self.translator.lookup(abs_path)
        if res.exists:
            return res.node
        if res.parent is None:
            raise PathNotFound(path=abs_path)
        raise EntryNotFound(path=abs_path)

    def existing_folder(self, abs_path:str) -> FolderNode:
        res = self.translator.lookup(abs_path)
        if not res.exists or not res.node.is_folder:
            raise PathNotFound(path=abs_path)
        return res.node

    def get_parent_folder(self, abs_path:str, autovivify:Optional[bool]=None) -> FolderNode:
        if autovivify is None:
            autovivify = self.config.autovivify
        volume_letter, dir_path, _ = parse_file_fullpath(abs_path)
        parent_path = volume_letter + dir_path
        res = self.translator.lookup(parent_path)
        if res.exists:
            if not res.node.is_folder:
                raise PathNotFound(path=abs_path)
            return res.node
        if not autovivify:
            raise PathNotFound(path=abs_path)
        return self.make_path(parent_path)

    def make_path(self, abs_path:str) -> FolderNode:
        """Create every missing folder along `abs_path`."""
        folder = self.root
        for seg in self.segments(abs_path):
            child = self.find_child(folder, seg)
            if child is None:
                self.check_name(seg, abs_path)
                child = self._insert(folder, FolderNode(seg, epoch=self.epoch))
            elif not child.is_folder:
                raise PathNotFound(path=abs_path)
            folder = child
        return folder

    def expand_wildcard(self, path:str) -> List[Node]:
        abs_path, parent_path, pattern = self.split_pattern(path)
        folder = self.existing_folder(parent_path)
        names = wildcard.filter_names([n.name for n in folder.listing()], pattern)
        if not names:
            raise EntryNotFound(path=abs_path)
        return [folder.get_child(n) for n in names]

    # ---- tree mutation ---------------------------------------------------

    def _insert(self, folder:FolderNode, node:Node) -> Node:
        folder.add_child(node)
        self.alias_index.link(folder, node.name)
        logger.debug("created %s", node.win_path)
        return node

    def _detach(self, node:Node) -> Node:
        folder = node.parent_folder
        self.alias_index.unlink(folder, node.name)
        folder.remove_child(node.name)
        return node

    def _relocate(self, node:Node, folder:FolderNode, name:str) -> Node:
        if node.is_folder:
            f = folder
            while f is not None:
                if f is node:
                    raise InvalidPath(path=folder.win_path)
                f = f.parent_folder

        existing = self.find_child(folder, name)
        if existing is not None and existing is not node:
            if existing.is_folder != node.is_folder:
                raise DestinationAmbiguous(path=existing.win_path)
            raise FileAlreadyExists(path=existing.win_path)

        self._detach(node)
        node.name = name
        return self._insert(folder, node)

    def _copy_file(self, node:FileNode, folder:FolderNode, name:str, overwrite:bool,
                   data:Optional[bytes]=None) -> FileNode:
        if data is None:
            data = node.contents
        existing = self.find_child(folder, name)
        if existing is not None:
            if existing is node:
                raise InvalidPath(path=existing.win_path)
            if existing.is_folder:
                raise DestinationAmbiguous(path=existing.win_path)
            if not overwrite:
                raise FileAlreadyExists(path=existing.win_path)
            existing.contents = data
            existing.touch(self.epoch)
            return existing
        copy = FileNode(name, epoch=self.epoch, data=data)
        copy.attributes = node.attributes
        return self._insert(folder, copy)

    @staticmethod
    def _snapshot(node:Node):
        # (source node, contents or None for folders, children)
        if node.is_folder:
            return (node, None, [VirtualFileSystem._snapshot(c) for c in node.listing()])
        return (node, node.contents, [])

    def _graft(self, snap, folder:FolderNode, overwrite:bool) -> Node:
        node, contents, children = snap
        if contents is not None:
            return self._copy_file(node, folder, node.name, overwrite, contents)
        existing = self.find_child(folder, node.name)
        if existing is None:
            existing = self._insert(folder, FolderNode(node.name, epoch=self.epoch))
        elif existing is node:
            raise InvalidPath(path=existing.win_path)
        elif not existing.is_folder:
            raise DestinationAmbiguous(path=existing.win_path)
        for child in children:
            self._graft(child, existing, overwrite)
        return existing

    def _delete(self, path:str, kind:Optional[str]) -> List[str]:
        abs_path, _, base_name = self.split_pattern(path)
        if wildcard.contains_wildcard(base_name):
            targets = [n for n in self.expand_wildcard(path) if kind is None or n.kind == kind]
            if not targets:
                raise EntryNotFound(path=abs_path)
        else:
            node = self.get_node(abs_path)
            if kind is not None and node.kind != kind:
                raise EntryNotFound(path=abs_path)
            targets = [node]

        deleted = []
        for node in targets:
            if node.is_root_folder:
                raise InvalidPath(path=abs_path)
            deleted.append(node.win_path)
            self._detach(node)
        return deleted

    def add_file(self, path:str, data=b'', overwrite:bool=True, autovivify:Optional[bool]=None) -> FileNode:
        if isinstance(data, str):
            data = data.encode(self.config.encoding)
        abs_path, _, name = self.split_path(path)
        if abs_path.endswith(PathChars.SEP):
            raise InvalidPath(path=abs_path)
        self.check_name(name, abs_path)

        folder = self.get_parent_folder(abs_path, autovivify)
        node = self.find_child(folder, name)
        if node is not None:
            if node.is_folder:
                raise DestinationAmbiguous(path=node.win_path)
            if not overwrite:
                raise FileAlreadyExists(path=node.win_path)
            node.contents = bytes(data)
            node.touch(self.epoch)
            return node
        return self._insert(folder, FileNode(name, epoch=self.epoch, data=data))

    # ---- path operations -------------------------------------------------

    @api_call("BuildPath", argc=2)
    def BuildPath(self, existing_path, new_path_part):
        return self.resolver.build_path(existing_path, new_path_part)

    @api_call("PathIsAbsolute", argc=1)
    def PathIsAbsolute(self, path):
        return self.resolver.path_is_absolute(path)

    @api_call("PathIsRelative", argc=1)
    def PathIsRelative(self, path):
        return self.resolver.path_is_relative(path)

    @api_call("ExpandEnvironmentStrings", argc=1)
    def ExpandEnvironmentStrings(self, s):
        return self.resolver.expand_environment_strings(s)

    @api_call("Normalise", argc=1)
    def Normalise(self, path):
        return self.resolver.normalise(path)

    @api_call("Parse", argc=1)
    def Parse(self, path):
        return self.resolver.parse(path)

    @api_call("Resolve", argc=1)
    def Resolve(self, path):
        return self.resolve(path)

    @api_call("IsWildcard", argc=1)
    def IsWildcard(self, path):
        return wildcard.contains_wildcard(path)

    # ---- queries ---------------------------------------------------------

    def _exists(self, path, kind=None) -> bool:
        try:
            res = self.lookup(path)
        except (PathNotFound, InvalidPath):
            return False
        return res.exists and (kind is None or res.node.kind == kind)

    @api_call("FileExists", argc=1)
    def FileExists(self, path):
        return self._exists(path, "file")

    @api_call("FolderExists", argc=1)
    def FolderExists(self, path):
        return self._exists(path, "folder")

    @api_call("Exists", argc=1)
    def Exists(self, path):
        return self._exists(path)

    @api_call("IsFolder", argc=1)
    def IsFolder(self, path):
        return self.get_node(path).is_folder

    @api_call("VolumeExists", argc=1)
    def VolumeExists(self, name):
        return name.rstrip("\\/").rstrip(":").lower() + ":" == VOLUME_LETTER

    @api_call("GetVolume", argc=1)
    def GetVolume(self, name):
        if not self.VolumeExists(name):
            raise PathNotFound(path=name)
        return self.root

    @api_call("GetFile", argc=1)
    def GetFile(self, path):
        node = self.get_node(path)
        if node.is_folder:
            raise EntryNotFound(path=node.win_path)
        return node

    @api_call("GetFolder", argc=1)
    def GetFolder(self, path):
        node = self.get_node(path)
        if not node.is_folder:
            raise EntryNotFound(path=node.win_path)
        return node

    @api_call("FolderListContents", argc=1)
    def FolderListContents(self, path):
        return [n.name for n in self.GetFolder(path).listing()]

    @api_call("FindFiles", argc=2)
    def FindFiles(self, path, pattern):
        """Display names of the entries of folder `path` matching `pattern`."""
        folder = self.GetFolder(path)
        return wildcard.filter_names([n.name for n in folder.listing()], pattern)

    @api_call("GetShortName", argc=1)
    def GetShortName(self, path):
        node = self.get_node(path)
        if node.is_root_folder:
            return node.win_path
        return self.alias_index.get_short_name(node.parent_folder, node.name)

    @api_call("GetShortPath", argc=1)
    def GetShortPath(self, path):
        node = self.get_node(path)
        parts = []
        while not node.is_root_folder:
            parts.append(self.alias_index.get_short_name(node.parent_folder, node.name))
            node = node.parent_folder
        return node.win_path + PathChars.SEP.join(reversed(parts))

    @api_call("Stats", argc=1)
    def Stats(self, path):
        node = self.get_node(path)
        stats = {
            "name": node.name,
            "short_name": self.GetShortName(node.win_path),
            "path": node.win_path,
            "is_folder": node.is_folder,
            "size": node.size,
            "attributes": node.attributes,
        }
        stats.update(node.filetimes())
        return stats

    @api_call("FolderContentsSize", argc=1)
    def FolderContentsSize(self, path):
        return self.GetFolder(path).size

    @api_call("GetVFS", argc=0)
    def GetVFS(self):
        return self.root.to_dict()

    # ---- content access --------------------------------------------------

    @api_call("ReadFileContents", argc=2)
    def ReadFileContents(self, path, encoding=None):
        node = self.GetFile(path)
        if encoding:
            return node.contents.decode(encoding)
        return node.contents

    @api_call("WriteFileContents", argc=2, mutates=True)
    def WriteFileContents(self, path, data):
        return self.add_file(path, data, overwrite=True)

    @api_call("AppendFileContents", argc=2, mutates=True)
    def AppendFileContents(self, path, data):
        if isinstance(data, str):
            data = data.encode(self.config.encoding)
        if not self.FileExists(path):
            return self.add_file(path, data)
        node = self.GetFile(path)
        node.contents += data
        node.touch(self.epoch)
        return node

    # ---- mutators --------------------------------------------------------

    @api_call("AddFile", argc=3, mutates=True)
    def AddFile(self, path, data=b'', overwrite=True):
        """
        Create or replace a file.  Missing ancestors are created when
        autovivification is on, otherwise PathNotFound is raised.
        """
        return self.add_file(path, data, overwrite)

    @api_call("AddFolder", argc=1, mutates=True)
    def AddFolder(self, path):
        """Create a folder; adding an existing folder returns it unchanged."""
        abs_path, _, name = self.split_path(path)
        if not name:
            return self.root
        self.check_name(name, abs_path)
        folder = self.get_parent_folder(abs_path)
        node = self.find_child(folder, name)
        if node is None:
            return self._insert(folder, FolderNode(name, epoch=self.epoch))
        if not node.is_folder:
            raise DestinationAmbiguous(path=node.win_path)
        return node

    @api_call("CopyFile", argc=3, mutates=True)
    def CopyFile(self, src, dst, overwrite=True):
        """
        Copy one file to `dst`, or every file a wildcard `src` matches into
        the folder `dst`.  Returns the destination paths written.
        """
        abs_src, _, pattern = self.split_pattern(src)
        if wildcard.contains_wildcard(pattern):
            matches = [n for n in self.expand_wildcard(src) if not n.is_folder]
            if not matches:
                raise EntryNotFound(path=abs_src)
            folder = self.existing_folder(self.resolve(dst))
            return [self._copy_file(n, folder, n.name, overwrite).win_path for n in matches]

        node = self.GetFile(abs_src)
        abs_dst, _, name = self.split_path(dst)
        if not name or abs_dst.endswith(PathChars.SEP):
            folder = self.existing_folder(abs_dst)
            name = node.name
        else:
            self.check_name(name, abs_dst)
            folder = self.get_parent_folder(abs_dst, autovivify=False)
        return [self._copy_file(node, folder, name, overwrite).win_path]

    @api_call("CopyFolder", argc=3, mutates=True)
    def CopyFolder(self, src, dst, overwrite=True):
        """
        Copy a folder tree into `dst`.  A trailing separator on `src` copies
        the folder's contents rather than the folder; a wildcard `src`
        copies every matching entry.  Not transactional: entries copied
        before a failure stay copied.
        """
        abs_src, _, pattern = self.split_pattern(src)
        if wildcard.contains_wildcard(pattern):
            snaps = [self._snapshot(n) for n in self.expand_wildcard(src)]
        else:
            snap = self._snapshot(self.GetFolder(abs_src))
            snaps = snap[2] if abs_src.endswith(PathChars.SEP) else [snap]
        dest = self.AddFolder(dst)

        copied = []
        for snap in snaps:
            if snap[0] is dest:
                raise InvalidPath(path=dest.win_path)
            copied.append(self._graft(snap, dest, overwrite).win_path)
        return copied

    @api_call("Rename", argc=2, mutates=True)
    def Rename(self, src, dst):
        node = self.get_node(src)
        if node.is_root_folder:
            raise InvalidPath(path=node.win_path)
        abs_dst, _, name = self.split_path(dst)
        self.check_name(name, abs_dst)
        folder = self.get_parent_folder(abs_dst, autovivify=False)
        return self._relocate(node, folder, name)

    @api_call("Move", argc=2, mutates=True)
    def Move(self, src, dst):
        node = self.get_node(src)
        if node.is_root_folder:
            raise InvalidPath(path=node.win_path)
        abs_dst = self.resolve(dst)
        res = self.translator.lookup(abs_dst)
        if abs_dst.endswith(PathChars.SEP) or (res.exists and res.node.is_folder and res.node is not node):
            return self._relocate(node, self.existing_folder(abs_dst), node.name)
        return self.Rename(src, dst)

    @api_call("DeleteFile", argc=1, mutates=True)
    def DeleteFile(self, path):
        return self._delete(path, "file")

    @api_call("DeleteFolder", argc=1, mutates=True)
    def DeleteFolder(self, path):
        return self._delete(path, "folder")

    @api_call("Delete", argc=1, mutates=True)
    def Delete(self, path):
        return self._delete(path, None)
