# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
WordPiece segmentation: greedy longest-match-first sub-word splitting.

Given a word and a closed vocabulary, we start at the first character and
take the longest prefix that's in the vocabulary, then repeat from where it
ended. Every piece after the first is looked up with a "##" prefix, which is
how BERT vocabularies mark word continuations:

    "unaffable" -> ["un", "##aff", "##able"]

If we ever reach an offset where no piece of any length matches, the whole
word becomes the unknown token. Pieces found before the dead end are thrown
away too, there's no partial output and no backtracking to try a shorter
earlier piece.
"""

from typing import Iterable

from bertok.tokenizer.normalizer.core import whitespace_split
from bertok.tokenizer.vocab.core import Vocabulary

DEFAULT_UNKNOWN_TOKEN = "[UNK]"
DEFAULT_MAX_CHARACTERS_PER_WORD = 200
CONTINUATION_PREFIX = "##"


class WordpieceTokenizer:
    """
    Sub-word segmenter over a fixed vocabulary.

    Args:
        vocabulary: Shared read-only vocabulary.
        unknown_token: What to emit for words that can't be segmented.
        max_characters_per_word: Words longer than this (in code points) are
            emitted as the unknown token without even trying.
    """

    def __init__(
        self,
        vocabulary: Vocabulary,
        unknown_token: str = DEFAULT_UNKNOWN_TOKEN,
        max_characters_per_word: int = DEFAULT_MAX_CHARACTERS_PER_WORD,
    ) -> None:
        self.vocabulary = vocabulary
        self.unknown_token = unknown_token
        self.max_characters_per_word = max_characters_per_word

    def split_token(self, token: str) -> list[str]:
        """Segment a single whitespace-free token into vocabulary pieces."""
        if len(token) > self.max_characters_per_word:
            return [self.unknown_token]

        pieces: list[str] = []
        start = 0
        while start < len(token):
            end = len(token)
            match = None
            while start < end:
                candidate = token[start:end]
                if start > 0:
                    candidate = CONTINUATION_PREFIX + candidate
                if candidate in self.vocabulary:
                    match = candidate
                    break
                end -= 1
            if match is None:
                return [self.unknown_token]
            pieces.append(match)
            start = end
        return pieces

    def tokenize(self, sequence: str) -> list[str]:
        """Whitespace-split a sequence and segment every piece."""
        tokens: list[str] = []
        for token in whitespace_split(sequence):
            tokens.extend(self.split_token(token))
        return tokens

    def tokenize_batch(self, sequences: Iterable[str]) -> list[list[str]]:
        """One result per input sequence, in input order."""
        return [self.tokenize(sequence) for sequence in sequences]
