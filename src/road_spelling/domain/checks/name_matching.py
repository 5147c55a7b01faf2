# road_spelling/domain/checks/name_matching.py
import re
import unicodedata
from dataclasses import dataclass
from enum import Enum, IntEnum


class CJKNumeral(IntEnum):
    """CJK ideographic numerals. Not in Unicode category Nd, so listed explicitly."""

    ZERO = 0x3007
    ONE = 0x4E00
    TWO = 0x4E8C
    THREE = 0x4E09
    FOUR = 0x56DB
    FIVE = 0x4E94
    SIX = 0x516D
    SEVEN = 0x4E03
    EIGHT = 0x516B
    NINE = 0x4E5D
    TEN = 0x5341
    TWENTY = 0x5EFF  # 廿
    THIRTY = 0x5345  # 卅


CJK_NUMERAL_CHARS = frozenset(chr(n) for n in CJKNumeral)

# str patterns: \d matches any Unicode Nd digit
_HAS_DIGIT = re.compile(r"\d")


class TokenKind(Enum):
    IDENTIFIER = "identifier"
    WORD = "word"


@dataclass(frozen=True)
class Token:
    text: str
    kind: TokenKind


def _is_punct(ch: str) -> bool:
    return unicodedata.category(ch).startswith("P")


def _is_short_identifier(token: str) -> bool:
    # "A", "A.", "(A", "(A)" -- a lone character with at most one punctuation mark each side
    n = len(token)
    if n == 1:
        return True
    if n == 2:
        return _is_punct(token[0]) or _is_punct(token[1])
    if n == 3:
        return _is_punct(token[0]) and _is_punct(token[2])
    return False


def is_identifier(token: str) -> bool:
    """
    True if `token` looks like a road designator rather than spelling content:
    the '12c' in '12c Street', the 'A' in 'Road A', the '三' in '三号线'.
    """
    if not token:
        return False
    return (
        _HAS_DIGIT.search(token) is not None
        or _is_short_identifier(token)
        or not CJK_NUMERAL_CHARS.isdisjoint(token)
    )


def tokenize(name: str | None) -> list[Token]:
    if not name:
        return []
    # str.split() breaks on any Unicode whitespace, NBSP and U+3000 included
    return [
        Token(t, TokenKind.IDENTIFIER if is_identifier(t) else TokenKind.WORD) for t in name.split()
    ]


def identifier_tokens(name: str | None) -> list[str]:
    return [t.text for t in tokenize(name) if t.kind is TokenKind.IDENTIFIER]


def same_identifiers(a: str, b: str) -> bool:
    """Names with any identifier not shared by the other belong to different roads."""
    ia, ib = identifier_tokens(a), identifier_tokens(b)
    combined = len(set(ia) | set(ib))
    return combined <= len(ia) and combined <= len(ib)


def _one_substitution(a: str, b: str) -> bool:
    mismatches = 0
    for ca, cb in zip(a, b):
        if ca != cb:
            mismatches += 1
            if mismatches > 1:
                return False
    return mismatches == 1


def _one_indel(shorter: str, longer: str) -> bool:
    i = j = 0
    edits = 0
    while i < len(shorter):
        if shorter[i] != longer[j]:
            edits += 1
            if edits > 1:
                return False
            j += 1
            if shorter[i] != longer[j]:
                return False
        i += 1
        j += 1
    # no mismatch inside the shorter string: the extra character is the last one
    return True


def edit_distance_is_one(a: str, b: str) -> bool:
    """
    Restricted edit distance: exactly one substitution (equal lengths) or one
    insertion/deletion (lengths differ by one). Anything else is False.
    """
    if len(a) == len(b):
        return _one_substitution(a, b)
    if abs(len(a) - len(b)) != 1:
        return False
    return _one_indel(a, b) if len(a) < len(b) else _one_indel(b, a)


def is_spelling_inconsistent(name_a: str | None, name_b: str | None) -> bool:
    if not name_a or not name_b:
        return False
    if abs(len(name_a) - len(name_b)) > 1:
        return False
    if name_a == name_b:
        return False
    if not same_identifiers(name_a, name_b):
        return False
    return edit_distance_is_one(name_a, name_b)
