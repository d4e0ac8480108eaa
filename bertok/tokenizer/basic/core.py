# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Basic segmentation. Turns raw text into coarse, word-level tokens.

The flow for one sequence:
  1. clean_text: drop control characters, canonicalize whitespace
  2. isolate_cjk: give every CJK ideograph its own token
  3. whitespace_split
  4. per token: optionally lowercase + strip accents, split off punctuation,
     then whitespace_split again to drop the empty pieces that leaves behind

The output feeds the WordPiece segmenter, which never sees whitespace or
punctuation glued to a word.
"""

from typing import Iterable

from bertok.tokenizer.normalizer.core import (
    clean_text,
    isolate_cjk,
    lowercase_and_strip_accents,
    split_on_punctuation,
    whitespace_split,
)


class BasicTokenizer:
    """
    Whitespace and punctuation segmenter.

    Args:
        do_lower_case: Lowercase and strip accents from every token. Use this
            with uncased vocabularies.
        deduplicate_batches: Collapse identical sequences in tokenize_batch to
            one result each (first occurrence order). This is how stock
            BERT tooling behaves, so it's on by default; turn it off to get
            one row per input position.
    """

    def __init__(self, do_lower_case: bool = False, deduplicate_batches: bool = True) -> None:
        self.do_lower_case = do_lower_case
        self.deduplicate_batches = deduplicate_batches

    def _strip_and_split(self, token: str) -> list[str]:
        if self.do_lower_case:
            token = lowercase_and_strip_accents(token)
        return whitespace_split(" ".join(split_on_punctuation(token)))

    def tokenize(self, sequence: str) -> list[str]:
        """Split one sequence into coarse tokens, in left-to-right order."""
        tokens: list[str] = []
        for token in whitespace_split(isolate_cjk(clean_text(sequence))):
            tokens.extend(self._strip_and_split(token))
        return tokens

    def tokenize_batch(self, sequences: Iterable[str]) -> list[list[str]]:
        """
        Tokenize many sequences.

        With deduplicate_batches on, ["a", "a", "b"] gives two rows (for "a"
        and "b"), not three. Callers that need rows aligned with their input
        should either turn the flag off or call tokenize() per sequence.
        """
        if self.deduplicate_batches:
            sequences = dict.fromkeys(sequences)
        return [self.tokenize(sequence) for sequence in sequences]
