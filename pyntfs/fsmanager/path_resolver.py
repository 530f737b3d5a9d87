"""
Windows path string handling: environment expansion, normalisation,
absolute/relative classification and resolution against the CWD.

Nothing here touches the node tree.  Wildcard characters are ordinary
characters as far as this module is concerned.
"""
import logging
import re
from typing import Callable, Dict, Optional

from pyntfs.errors import VFSError
from pyntfs.fsmanager.fs_emu_util import splitdrive
from pyntfs.windef.file_defs import PathChars

logger = logging.getLogger(__name__)

ENV_VAR_RE = re.compile(r"%([a-z0-9_]+)%", re.IGNORECASE)
ABSOLUTE_RE = re.compile(r"^(\\\\\?\\|\\\\.|[a-z]:\\)", re.IGNORECASE)
DRIVE_RELATIVE_RE = re.compile(r"^[a-z]:(?=[^\\])", re.IGNORECASE)
DRIVE_ONLY_RE = re.compile(r"^[a-z]:$", re.IGNORECASE)


def normalise(path:str) -> str:
    """
    Collapse '.' and '..' segments and duplicate separators and switch
    every '/' to '\\'.  A trailing separator is kept, as is the
    '\\\\?\\' prefix of an extended path.
    """
    if path == '':
        return "."
    path = path.replace(PathChars.ALTSEP, PathChars.SEP)

    prefix = ''
    if path.startswith(PathChars.EXTENDED_PREFIX):
        prefix = PathChars.EXTENDED_PREFIX
        path = path[len(prefix):]

    drive, rest = splitdrive(path)
    rooted = rest.startswith(PathChars.SEP)
    trailing = rest.endswith(PathChars.SEP) and rest.strip(PathChars.SEP) != ''

    parts = []
    for part in rest.split(PathChars.SEP):
        if part in ('', '.'):
            continue
        if part == '..':
            if parts and parts[-1] != '..':
                parts.pop()
            elif not rooted:
                parts.append(part)
            continue
        parts.append(part)

    tail = PathChars.SEP.join(parts)
    if rooted:
        tail = PathChars.SEP + tail
    elif not tail:
        tail = "."
    if trailing and parts:
        tail += PathChars.SEP
    return prefix + drive + tail


def parse(path:str) -> Dict[str, str]:
    """
    Split `path` into root, dir, base, name and ext, e.g.
    'C:\\path\\dir\\file.txt' -> {'root': 'C:\\', 'dir': 'C:\\path\\dir',
    'base': 'file.txt', 'ext': '.txt', 'name': 'file'}.
    """
    ret = {"root": '', "dir": '', "base": '', "ext": '', "name": ''}
    if not path:
        return ret
    drive, rest = splitdrive(path.replace(PathChars.ALTSEP, PathChars.SEP))
    root = drive
    if rest.startswith(PathChars.SEP):
        root += PathChars.SEP
    ret["root"] = root

    stripped = rest.rstrip(PathChars.SEP)
    idx = stripped.rfind(PathChars.SEP)
    base = stripped[idx + 1:]
    if idx <= 0:
        ret["dir"] = root
    else:
        ret["dir"] = drive + stripped[:idx]
    ret["base"] = base

    dot = base.rfind(".")
    if dot <= 0 or base in ('.', '..'):
        ret["name"] = base
    else:
        ret["name"] = base[:dot]
        ret["ext"] = base[dot:]
    return ret


class PathResolver:
    def __init__(self, get_env:Callable[[str], Optional[str]]):
        self.get_env = get_env

    @staticmethod
    def build_path(existing_path:str, new_path_part:str) -> str:
        """Plain string concatenation, a separator added only when needed."""
        if DRIVE_ONLY_RE.match(existing_path) or existing_path.endswith((PathChars.SEP, PathChars.ALTSEP)):
            return existing_path + new_path_part
        return existing_path + PathChars.SEP + new_path_part

    @staticmethod
    def path_is_absolute(path:str) -> bool:
        return ABSOLUTE_RE.match(path) is not None

    @staticmethod
    def path_is_relative(path:str) -> bool:
        return not PathResolver.path_is_absolute(path)

    def expand_environment_strings(self, s:str) -> str:
        """Replace %NAME% tokens; unknown variables are left untouched."""
        def expand(match):
            value = self.get_env(match.group(1).lower())
            return match.group(0) if value is None else value
        return ENV_VAR_RE.sub(expand, s)

    normalise = staticmethod(normalise)
    parse = staticmethod(parse)

    def get_cwd(self) -> str:
        cwd = self.get_env("path")
        if not cwd:
            raise VFSError(msg="no current working directory in the environment")
        return cwd

    def join_cwd(self, path:str) -> str:
        cwd = self.get_cwd()
        if path.startswith(PathChars.SEP):
            # rooted on the current drive
            drive, _ = splitdrive(cwd)
            return drive + path
        return self.build_path(cwd, path)

    def resolve(self, path:str) -> str:
        """
        Best-effort conversion of any path to an absolute one:

            1. expand environment variables
            2. normalise
            3. relative paths (including 'C:foo' forms) are joined to the CWD
            4. normalise again
        """
        path = self.expand_environment_strings(path)
        path = normalise(path)

        if self.path_is_relative(path):
            if DRIVE_RELATIVE_RE.match(path):
                # only one volume exists, so 'X:foo' is just 'foo'
                path = path[2:]
            path = self.join_cwd(path)

        resolved = normalise(path)
        logger.debug("resolve -> %s", resolved)
        return resolved
