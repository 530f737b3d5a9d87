"""
In-memory node tree backing the virtual C: volume.

Every folder owns an insertion-ordered mapping of case-folded basename to
child node, plus a side table of 8.3 aliases (short name -> real basename).
Display names keep their original casing; lookups always go through the
case-folded key.
"""
from typing import Dict, Iterator, List, NamedTuple, Optional

from fs import path as fspath

from pyntfs.windef.file_defs import FileAttribute, FileTime, VOLUME_LETTER


class Alias(NamedTuple):
    name: str    # short name, upper-case as Windows reports it
    target: str  # case-folded basename of the aliased entry


def find_alias_for(folder:"FolderNode", key:str) -> Optional[Alias]:
    key = key.lower()
    for alias in folder.aliases.values():
        if alias.target.lower() == key:
            return alias
    return None


class Node:
    kind = ''

    def __init__(self, name:str, parent:Optional["FolderNode"]=None, epoch:int=0):
        self.name = name
        self.parent_folder = parent
        self.created = epoch
        self.accessed = epoch
        self.modified = epoch
        self.attributes = 0

    @property
    def key(self) -> str:
        return self.name.lower()

    @property
    def is_folder(self) -> bool:
        return self.kind == "folder"

    @property
    def is_root_folder(self) -> bool:
        return False

    @property
    def path(self) -> str:
        """Internal key: case-folded, '/' separated, no disk designator."""
        if self.parent_folder is None:
            return "/"
        return fspath.join(self.parent_folder.path, self.key)

    @property
    def win_path(self) -> str:
        """Display path, original casing, e.g. 'C:\\Users\\Foo.txt'."""
        if self.parent_folder is None:
            return VOLUME_LETTER.upper() + "\\"
        parent = self.parent_folder.win_path
        if not parent.endswith("\\"):
            parent += "\\"
        return parent + self.name

    @property
    def short_name(self) -> str:
        if self.parent_folder is None:
            return ''
        alias = find_alias_for(self.parent_folder, self.key)
        if alias is not None:
            return alias.name
        return self.name.upper()

    def touch(self, epoch:int):
        self.accessed = epoch
        self.modified = epoch

    def filetimes(self) -> Dict[str, int]:
        return {
            "created": FileTime.from_epoch_ms(self.created),
            "accessed": FileTime.from_epoch_ms(self.accessed),
            "modified": FileTime.from_epoch_ms(self.modified),
        }

    def __repr__(self) -> str:
        return "<%s %r>" % (type(self).__name__, self.win_path)


class FileNode(Node):
    kind = "file"

    def __init__(self, name:str, parent:Optional["FolderNode"]=None, epoch:int=0, data:bytes=b''):
        super().__init__(name, parent, epoch)
        self.contents = bytes(data)
        self.attributes = FileAttribute.FILE_ATTRIBUTE_ARCHIVE

    @property
    def size(self) -> int:
        return len(self.contents)

    def to_dict(self) -> dict:
        return {"type": "file", "name": self.name, "size": self.size}


class FolderNode(Node):
    kind = "folder"

    def __init__(self, name:str, parent:Optional["FolderNode"]=None, epoch:int=0):
        super().__init__(name, parent, epoch)
        self.children:Dict[str, Node] = {}
        self.aliases:Dict[str, Alias] = {}
        self.attributes = FileAttribute.FILE_ATTRIBUTE_DIRECTORY

    @property
    def is_root_folder(self) -> bool:
        return self.parent_folder is None

    def get_child(self, name:str) -> Optional[Node]:
        return self.children.get(name.lower())

    def add_child(self, node:Node) -> Node:
        node.parent_folder = self
        self.children[node.key] = node
        return node

    def remove_child(self, name:str) -> Node:
        node = self.children.pop(name.lower())
        node.parent_folder = None
        return node

    def listing(self) -> List[Node]:
        """Real entries in NTFS enumeration order (case-insensitive sort)."""
        return [self.children[k] for k in sorted(self.children)]

    @property
    def files(self) -> List[FileNode]:
        return [n for n in self.listing() if n.kind == "file"]

    @property
    def sub_folders(self) -> List["FolderNode"]:
        return [n for n in self.listing() if n.kind == "folder"]

    @property
    def size(self) -> int:
        return sum(child.size for child in self.children.values())

    def walk(self) -> Iterator[Node]:
        for child in self.listing():
            yield child
            if child.kind == "folder":
                yield from child.walk()

    def to_dict(self) -> dict:
        return {
            "type": "folder",
            "name": self.name,
            "aliases": {a.name: a.target for a in self.aliases.values()},
            "children": [child.to_dict() for child in self.listing()],
        }
