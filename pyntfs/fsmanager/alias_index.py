"""
SFN -> LFN alias bookkeeping.

Aliases live in a side table on each folder node (``FolderNode.aliases``)
keyed by the case-folded short name.  They are never children of the
folder, so they never show up in a listing, yet any path segment can be
given in its short form and still resolve.
"""
import logging
from typing import List, Optional

from pyntfs.fs_nodes import Alias, FolderNode, find_alias_for
from pyntfs.fsmanager.shortname import ShortNameAllocator, is_shortname

logger = logging.getLogger(__name__)


class AliasIndex:
    def __init__(self, allocator:Optional[ShortNameAllocator]=None):
        self.allocator = allocator or ShortNameAllocator()
        # win paths of entries that were left without an alias
        self.exhausted:List[str] = []

    def is_taken(self, folder:FolderNode, name:str) -> bool:
        key = name.lower()
        return key in folder.children or key in folder.aliases

    def link(self, folder:FolderNode, basename:str) -> Optional[str]:
        """
        Give the entry `basename` of `folder` a short name alias, unless
        the name is already short or an alias already points at it.
        Returns the short name in effect, or None when allocation ran out.
        """
        if is_shortname(basename):
            return None
        existing = find_alias_for(folder, basename)
        if existing is not None:
            return existing.name

        short = self.allocator.allocate(basename, lambda n: self.is_taken(folder, n))
        if short is None:
            node = folder.get_child(basename)
            self.exhausted.append(node.win_path if node is not None else basename)
            return None

        folder.aliases[short.lower()] = Alias(short, basename.lower())
        logger.debug("alias %s -> %s in %s", short, basename, folder.path)
        return short

    def unlink(self, folder:FolderNode, basename:str) -> List[str]:
        """Drop every alias in `folder` that targets `basename`."""
        key = basename.lower()
        dropped = [k for k, alias in folder.aliases.items() if alias.target.lower() == key]
        for k in dropped:
            logger.debug("unlink alias %s -> %s in %s", folder.aliases[k].name, basename, folder.path)
            del folder.aliases[k]
        return dropped

    def resolve(self, folder:FolderNode, segment:str) -> Optional[str]:
        """Map a short name segment to the real (case-folded) basename."""
        alias = folder.aliases.get(segment.lower())
        if alias is None or alias.target not in folder.children:
            return None
        return alias.target

    def get_short_name(self, folder:FolderNode, basename:str) -> str:
        alias = find_alias_for(folder, basename)
        if alias is not None:
            return alias.name
        child = folder.get_child(basename)
        return (child.name if child is not None else basename).upper()
