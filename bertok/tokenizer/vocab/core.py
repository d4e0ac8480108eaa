# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Vocabulary management: loading, looking up, and writing vocab files.

A vocab file is one sub-word per line, and the line number is the id. That's
the whole format. The one subtle part is duplicates: if the same token shows
up on two lines, the later line wins and the earlier id simply stops being
reachable by token. Real BERT vocab files don't have duplicates, but the ids
a model was trained against depend on this rule, so we reproduce it exactly
instead of "fixing" it.

The Vocabulary object is read-only after construction. Build one, then share
it between every tokenizer and encoder that needs it. There is no global.
"""

from pathlib import Path
from typing import Iterable, Iterator

from bertok.logging.logger import get_logger
from bertok.tokenizer.exceptions import UnknownTokenError, VocabularyLoadError
from bertok.tokenizer.normalizer.core import TRIM_CHARACTERS
from bertok.utils.filesystem import atomic_write


class Vocabulary:
    """
    Immutable token -> id table built from ordered lines.

    Besides the mapping we keep the original line list. It lets us map an id
    back to the token written on that line, and write the file back out
    without renumbering anything when duplicates left gaps in the id space.
    """

    __slots__ = ("_token_to_id", "_lines")

    def __init__(self, lines: Iterable[str]) -> None:
        token_to_id: dict[str, int] = {}
        ordered: list[str] = []
        for index, line in enumerate(lines):
            token = line.strip(TRIM_CHARACTERS)
            token_to_id[token] = index
            ordered.append(token)
        self._token_to_id = token_to_id
        self._lines = tuple(ordered)

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> "Vocabulary":
        """Build a vocabulary from in-memory lines (same rules as a file)."""
        return cls(lines)

    @classmethod
    def load(cls, vocab_path: Path) -> "Vocabulary":
        """
        Read a UTF-8 vocab file from disk.

        Lines are split on \\n, \\r or \\r\\n and trimmed of surrounding
        whitespace and control characters before they become entries.

        Raises:
            VocabularyLoadError: If the file is missing, unreadable, or not UTF-8.
        """
        logger = get_logger("bertok.tokenizer.vocab")
        vocab_path = Path(vocab_path)

        try:
            with open(vocab_path, "r", encoding="utf-8", newline=None) as handle:
                vocabulary = cls(handle)
        except (OSError, UnicodeDecodeError) as err:
            raise VocabularyLoadError(f"Cannot read vocabulary file {vocab_path}: {err}") from err

        logger.info(
            "Loaded vocabulary",
            extra={
                "path": str(vocab_path),
                "lines": vocabulary.line_count,
                "vocab_size": len(vocabulary),
            },
        )
        return vocabulary

    def __len__(self) -> int:
        return len(self._token_to_id)

    def __contains__(self, token: object) -> bool:
        return token in self._token_to_id

    def __iter__(self) -> Iterator[str]:
        return iter(self._token_to_id)

    def __repr__(self) -> str:
        return f"Vocabulary(size={len(self)}, lines={self.line_count})"

    @property
    def line_count(self) -> int:
        """Number of source lines, including ones shadowed by later duplicates."""
        return len(self._lines)

    def id_of(self, token: str) -> int:
        """
        Look up the id for a token.

        Raises:
            UnknownTokenError: If the token isn't in the vocabulary.
        """
        try:
            return self._token_to_id[token]
        except KeyError:
            raise UnknownTokenError(token) from None

    def ids_of(self, tokens: Iterable[str]) -> list[int]:
        """Look up ids for many tokens, in order. Fails on the first miss."""
        return [self.id_of(token) for token in tokens]

    def token_of(self, token_id: int) -> str:
        """
        Return the token written on line `token_id`.

        Raises:
            IndexError: If the id is outside the file's line range.
        """
        if token_id < 0:
            raise IndexError(f"Token id must be non-negative, got {token_id}")
        return self._lines[token_id]

    def tokens(self) -> tuple[str, ...]:
        """The trimmed source lines in file order."""
        return self._lines

    def as_dict(self) -> dict[str, int]:
        """A fresh copy of the token -> id mapping, safe for callers to mutate."""
        return dict(self._token_to_id)


def write_vocab_file(vocabulary: Vocabulary, output_path: Path) -> None:
    """
    Write a vocab file with one token per line, in the original line order.

    Re-loading the written file gives back exactly the same mapping, gaps
    from duplicates included.
    """
    lines = vocabulary.tokens()
    content = "\n".join(lines) + "\n" if lines else ""
    atomic_write(output_path, content)
