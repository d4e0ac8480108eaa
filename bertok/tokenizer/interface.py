# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
The shared tokenizer shape.

Basic, WordPiece and Full tokenizers all take one sequence or many and hand
back string tokens. They don't share any code, so this is a structural
Protocol rather than a base class: anything with these two methods fits.
"""

from typing import Iterable, Protocol, runtime_checkable


@runtime_checkable
class Tokenizer(Protocol):
    """Anything that can split one sequence, or a batch of them, into tokens."""

    def tokenize(self, sequence: str) -> list[str]:
        ...

    def tokenize_batch(self, sequences: Iterable[str]) -> list[list[str]]:
        ...
