"""
8.3 short file name (SFN) generation for long file names (LFN).

Allocation runs in two phases.  The numeric phase tries ``NAMEPA~1.EXT``
through ``NAMEPA~4.EXT``; once those are taken the hashed phase tries
``NA1B2C~1.EXT`` where the four hex digits come from an md5 of the
lower-cased long name, salted with the attempt number.
"""
import hashlib
import logging
import ntpath
import re
from typing import Callable, Iterator, Optional

logger = logging.getLogger(__name__)

MAX_NUMERIC_ATTEMPTS = 4
MAX_HASHED_ATTEMPTS = 10

_REPLACED_CHARS = re.compile(r"[,\[\];=+]")
_STRIPPED_CHARS = re.compile(r"\s+")


def is_shortname(filename:str) -> bool:
    """
    True when `filename` is already in 8.3 form: at most one dot, a
    non-empty name part of up to 8 characters and an optional extension
    of up to 3.
    """
    if filename.count(".") > 1:
        return False
    if "." in filename:
        namepart, extpart = filename.split(".")
        return 0 < len(namepart) <= 8 and len(extpart) <= 3
    return 0 < len(filename) <= 8


def split_name(filename:str):
    """Split into (name part, extension including the dot)."""
    # leading dots never start an extension: '.profile' -> ('.profile', '')
    return ntpath.splitext(filename)


def _clean(part:str) -> str:
    part = _REPLACED_CHARS.sub("_", part)
    return _STRIPPED_CHARS.sub("", part)


def generate_shortname(filename:str, index:int=1, hashed:bool=False, salt:str='') -> str:
    """
    Build one candidate short name for `filename`.  Knows nothing about
    the folder it will live in.
    """
    namepart, ext = split_name(filename)
    namepart = _clean(namepart).replace(".", "")
    ext = _clean(ext)[:4]
    if ext == ".":
        ext = ''

    if hashed:
        digest = hashlib.md5((filename + salt).lower().encode("utf-8")).hexdigest()
        return (namepart[:2] + digest[:4] + "~1" + ext).upper()

    return (namepart[:6] + "~" + str(index) + ext).upper()


def candidates(filename:str) -> Iterator[str]:
    for index in range(1, MAX_NUMERIC_ATTEMPTS + 1):
        yield generate_shortname(filename, index=index)
    for attempt in range(MAX_HASHED_ATTEMPTS):
        yield generate_shortname(filename, hashed=True, salt=str(attempt))


class ShortNameAllocator:

    def allocate(self, filename:str, is_taken:Callable[[str], bool]) -> Optional[str]:
        """
        Return a short name for `filename` that `is_taken` rejects, the
        name itself when it is already short, or None once every candidate
        collides.

        Args:
            filename (str): long basename, original casing
            is_taken (Callable[[str], bool]): case-insensitive collision
                test against the entries of the parent folder
        """
        if is_shortname(filename):
            return filename
        for candidate in candidates(filename):
            if not is_taken(candidate):
                return candidate
        logger.warning("short name space exhausted for '%s'", filename)
        return None
