"""
DOS wildcard matching as done by FindFirstFile.

Patterns are first translated from the modern wildcard characters
(``*``, ``?``) into the DOS primitives the kernel actually matches with:

    <   DOS_STAR   like ``*`` but keeps the last dot of a name
    >   DOS_QM     one character; none at the end of the name, or at a
                   dot unless a literal follows the run (so "f??.txt"
                   matches neither "fo.txt" nor "f.txt")
    "   DOS_DOT    a dot, or nothing at the end of the name

then lexed and matched recursively against the lexed filename.
"""
import enum
import logging
from functools import lru_cache
from typing import Iterable, List, NamedTuple

from pyntfs.windef.file_defs import PathChars

logger = logging.getLogger(__name__)


class TokenType(enum.Enum):
    LITERAL = 0
    ASTERISK = 1
    QMARK = 2
    DOS_STAR = 3
    DOS_QM = 4
    DOS_DOT = 5


SYMBOLS = {
    "*": TokenType.ASTERISK,
    "?": TokenType.QMARK,
    "<": TokenType.DOS_STAR,
    ">": TokenType.DOS_QM,
    '"': TokenType.DOS_DOT,
}


class Token(NamedTuple):
    type: TokenType
    value: str


class NameChar(NamedTuple):
    value: str
    is_last_dot: bool


def contains_wildcard(s:str) -> bool:
    return any(c in PathChars.WILDCARDS for c in s)


def normalise(name:str) -> str:
    # NTFS drops trailing dots and spaces from names and patterns alike
    return name.rstrip(". \t")


def translate_pattern(pattern:str) -> str:
    """
    'notepad.??' -> 'notepad">>', '*.' -> '<', '*.*' -> '*"*'
    """
    transpat = normalise(pattern).replace(".?", '"?').replace(".*", '"*').replace("?", ">")
    if transpat.endswith("*") and pattern.endswith("."):
        transpat = transpat[:-1] + "<"
    return transpat


def lex_pattern(pattern:str) -> List[Token]:
    return [Token(SYMBOLS.get(ch, TokenType.LITERAL), ch) for ch in pattern]


def lex_filename(filename:str) -> List[NameChar]:
    last_dot = filename.rfind(".")
    return [NameChar(ch, i == last_dot) for i, ch in enumerate(filename)]


def is_literal_pattern(tokens:List[Token]) -> bool:
    return all(tok.type is TokenType.LITERAL for tok in tokens)


def _next_significant(tokens:List[Token], j:int):
    """First token at or after `j` that is not a DOS_QM."""
    while j < len(tokens) and tokens[j].type is TokenType.DOS_QM:
        j += 1
    return tokens[j] if j < len(tokens) else None


def match_tokens(name:List[NameChar], tokens:List[Token]) -> bool:
    """
    Recursive matcher over lexed input.  Both lists are expected to be
    lower-cased already.  Sub-results are memoised on (name index,
    pattern index) so backtracking stays bounded by len(name) * len(tokens).
    """
    n_len = len(name)
    t_len = len(tokens)

    @lru_cache(maxsize=None)
    def m(i:int, j:int) -> bool:
        if j == t_len:
            return i == n_len
        tok = tokens[j]
        ch = name[i] if i < n_len else None

        if tok.type is TokenType.LITERAL:
            return ch is not None and ch.value == tok.value and m(i + 1, j + 1)

        if tok.type is TokenType.ASTERISK:
            if ch is None:
                return m(i, j + 1)
            return m(i + 1, j) or m(i, j + 1)

        if tok.type is TokenType.QMARK:
            return ch is not None and m(i + 1, j + 1)

        if tok.type is TokenType.DOS_STAR:
            if ch is None:
                return m(i, j + 1)
            if ch.is_last_dot:
                # stop before the last dot unless the rest needs it eaten
                return m(i, j + 1) or m(i + 1, j + 1)
            return m(i, j + 1) or m(i + 1, j)

        if tok.type is TokenType.DOS_QM:
            if ch is None:
                return m(i, j + 1)
            if ch.value == ".":
                nxt = _next_significant(tokens, j)
                if nxt is not None and nxt.type is TokenType.LITERAL:
                    # a literal after the run must line up with a real char
                    return False
                return m(i, j + 1)
            return m(i + 1, j + 1)

        if tok.type is TokenType.DOS_DOT:
            if ch is None:
                return m(i, j + 1)
            if ch.value == ".":
                return m(i + 1, j + 1) or m(i, j + 1)
            return False

        return False

    return m(0, 0)


def match(pattern:str, filename:str, translate:bool=True) -> bool:
    """
    Case-insensitive FindFirstFile-style match of `filename` against
    `pattern`.  With `translate` off the pattern is taken as already
    written in DOS primitives and '?' keeps its plain one-char meaning.
    """
    pattern = pattern.lower()
    if translate:
        pattern = translate_pattern(pattern)
    tokens = lex_pattern(pattern)

    if is_literal_pattern(tokens):
        return filename.lower() == pattern

    return match_tokens(lex_filename(normalise(filename).lower()), tokens)


def filter_names(names:Iterable[str], pattern:str) -> List[str]:
    """Keep the names `pattern` matches, order and casing untouched."""
    matches = [name for name in names if match(pattern, name)]
    logger.debug("expand %r -> %d match(es)", pattern, len(matches))
    return matches
