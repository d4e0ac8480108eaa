# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Text normalization, the Unicode-level cleanup that runs before any splitting.

Everything here is a pure function over code points. The exact character
classes matter more than anything else in the pipeline: if "control" or
"punctuation" means something slightly different here than it did when the
vocabulary was built, tokens silently drift away from the ids the model
expects. So every check goes through `unicodedata` general categories and
explicit code point ranges, never through str.isspace() / str.isprintable()
and friends, whose definitions are looser.
"""

import re
import unicodedata

# Categories that count as "control" for cleaning: Cc, Cf, Co, Cs, Cn.
CONTROL_CATEGORIES = frozenset({"Cc", "Cf", "Co", "Cs", "Cn"})

# Every punctuation category (P*).
PUNCTUATION_CATEGORIES = frozenset({"Pc", "Pd", "Pe", "Pf", "Pi", "Po", "Ps"})

# Tab, newline and carriage return are Cc but are whitespace, not noise.
SAFE_CONTROL_CHARACTERS = frozenset({"\t", "\n", "\r"})

STRIP_CHARACTERS = frozenset({"\x00", "\ufffd"})

WHITESPACE_CHARACTERS = frozenset({" ", "\t", "\n", "\r"})

# Everything at or below U+0020 is trimmed from the ends of a string.
TRIM_CHARACTERS = "".join(chr(code_point) for code_point in range(0x21))

_WHITESPACE_RUN = re.compile(r"[ \t\n\x0b\f\r]+")

_CJK_RANGES = (
    (0x4E00, 0x9FFF),
    (0x3400, 0x4DBF),
    (0x20000, 0x2A6DF),
    (0x2A700, 0x2B73F),
    (0x2B740, 0x2B81F),
    (0x2B820, 0x2CEAF),
    (0xF900, 0xFAFF),
    (0x2F800, 0x2FA1F),
)

_ASCII_PUNCTUATION_RANGES = (
    (33, 47),
    (58, 64),
    (91, 96),
    (123, 126),
)


def is_control(char: str) -> bool:
    """True for Cc/Cf/Co/Cs/Cn code points other than tab, newline, CR."""
    if char in SAFE_CONTROL_CHARACTERS:
        return False
    return unicodedata.category(char) in CONTROL_CATEGORIES


def is_whitespace(char: str) -> bool:
    """True for space, tab, newline, CR, and anything in category Zs."""
    if char in WHITESPACE_CHARACTERS:
        return True
    return unicodedata.category(char) == "Zs"


def is_punctuation(char: str) -> bool:
    """
    True for ASCII symbol ranges and every Unicode P* category.

    The ASCII ranges pull in characters like "$", "^" and "`" that Unicode
    files under symbols rather than punctuation. BERT vocabularies were built
    treating them as punctuation, so we do too.
    """
    code_point = ord(char)
    for low, high in _ASCII_PUNCTUATION_RANGES:
        if low <= code_point <= high:
            return True
    return unicodedata.category(char) in PUNCTUATION_CATEGORIES


def is_cjk_character(char: str) -> bool:
    """True for code points in the CJK Unified Ideograph blocks and extensions."""
    code_point = ord(char)
    for low, high in _CJK_RANGES:
        if low <= code_point <= high:
            return True
    return False


def clean_text(text: str) -> str:
    """
    Drop NUL, U+FFFD and control characters, and turn all whitespace into " ".

    Output is the surviving code points in their original order. Runs of
    whitespace are NOT collapsed here; whitespace_split takes care of that.
    """
    output: list[str] = []
    for char in text:
        if char in STRIP_CHARACTERS or is_control(char):
            continue
        output.append(" " if is_whitespace(char) else char)
    return "".join(output)


def isolate_cjk(text: str) -> str:
    """Put a space on both sides of every CJK ideograph so each becomes its own token."""
    output: list[str] = []
    for char in text:
        if is_cjk_character(char):
            output.append(" ")
            output.append(char)
            output.append(" ")
        else:
            output.append(char)
    return "".join(output)


def lowercase_and_strip_accents(text: str) -> str:
    """
    Lowercase, decompose to NFD, and drop non-spacing marks (Mn).

    There's no recomposition afterwards. The result stays decomposed minus
    its marks, which is what uncased BERT vocabularies were built from.
    """
    decomposed = unicodedata.normalize("NFD", text.lower())
    return "".join(char for char in decomposed if unicodedata.category(char) != "Mn")


def split_on_punctuation(token: str) -> list[str]:
    """
    Split a token so every punctuation code point stands alone.

    Runs between punctuation marks come out as single tokens. Consecutive
    punctuation (or punctuation at the very start) produces empty strings in
    between; the caller re-runs whitespace_split, which throws them away.
    """
    pieces: list[str] = []
    current: list[str] = []
    for char in token:
        if is_punctuation(char):
            pieces.append("".join(current))
            current = []
            pieces.append(char)
        else:
            current.append(char)
    if current:
        pieces.append("".join(current))
    return pieces


def whitespace_split(text: str) -> list[str]:
    """
    Trim the ends, then split on runs of ASCII whitespace.

    Trimming removes every character at or below U+0020; splitting only
    considers space, tab, newline, vertical tab, form feed and CR. Empty
    fragments never make it into the result.
    """
    stripped = text.strip(TRIM_CHARACTERS)
    if not stripped:
        return []
    return [piece for piece in _WHITESPACE_RUN.split(stripped) if piece]
