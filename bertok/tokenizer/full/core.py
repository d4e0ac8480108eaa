# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
The full tokenizer: basic segmentation, then WordPiece, then ids.

This is the object most callers want. It owns one BasicTokenizer and one
WordpieceTokenizer that share a single Vocabulary. Tokenizing is pure, so one
instance can be used from many threads at once.
"""

from pathlib import Path
from typing import Iterable, Optional

from bertok.config.schema import TokenizerConfig
from bertok.tokenizer.basic.core import BasicTokenizer
from bertok.tokenizer.vocab.core import Vocabulary
from bertok.tokenizer.wordpiece.core import (
    DEFAULT_MAX_CHARACTERS_PER_WORD,
    DEFAULT_UNKNOWN_TOKEN,
    WordpieceTokenizer,
)


class FullTokenizer:
    """
    BERT tokenizer over a fixed vocabulary.

    Args:
        vocabulary: The loaded vocabulary. Not copied, not mutated.
        do_lower_case: Lowercase and strip accents (uncased models).
        unknown_token: Sentinel for words WordPiece can't segment. Must be a
            vocabulary entry, or convert_to_ids will fail on it.
        max_characters_per_word: Longest word WordPiece will try to segment.
        deduplicate_batches: Passed to the basic segmenter, see
            BasicTokenizer.tokenize_batch.
    """

    def __init__(
        self,
        vocabulary: Vocabulary,
        do_lower_case: bool = False,
        unknown_token: str = DEFAULT_UNKNOWN_TOKEN,
        max_characters_per_word: int = DEFAULT_MAX_CHARACTERS_PER_WORD,
        deduplicate_batches: bool = True,
    ) -> None:
        self.vocabulary = vocabulary
        self.do_lower_case = do_lower_case
        self.unknown_token = unknown_token
        self.basic = BasicTokenizer(
            do_lower_case=do_lower_case,
            deduplicate_batches=deduplicate_batches,
        )
        self.wordpiece = WordpieceTokenizer(
            vocabulary,
            unknown_token=unknown_token,
            max_characters_per_word=max_characters_per_word,
        )

    @classmethod
    def from_file(cls, vocab_path: Path, **kwargs) -> "FullTokenizer":
        """Load the vocabulary from disk and build a tokenizer around it."""
        return cls(Vocabulary.load(Path(vocab_path)), **kwargs)

    @classmethod
    def from_config(
        cls,
        config: TokenizerConfig,
        project_root: Optional[Path] = None,
    ) -> "FullTokenizer":
        """
        Build a tokenizer from the `tokenizer:` config section.

        A relative vocab_file is resolved against project_root when given,
        otherwise against the current working directory.
        """
        vocab_path = Path(config.vocab_file)
        if project_root is not None and not vocab_path.is_absolute():
            vocab_path = project_root / vocab_path

        return cls.from_file(
            vocab_path,
            do_lower_case=config.do_lower_case,
            unknown_token=config.unknown_token,
            max_characters_per_word=config.max_characters_per_word,
            deduplicate_batches=config.deduplicate_batches,
        )

    @property
    def max_characters_per_word(self) -> int:
        return self.wordpiece.max_characters_per_word

    @property
    def deduplicate_batches(self) -> bool:
        return self.basic.deduplicate_batches

    def _split_words(self, words: Iterable[str]) -> list[str]:
        tokens: list[str] = []
        for word in words:
            tokens.extend(self.wordpiece.split_token(word))
        return tokens

    def tokenize(self, sequence: str) -> list[str]:
        """Text in, WordPiece tokens out, in order."""
        return self._split_words(self.basic.tokenize(sequence))

    def tokenize_batch(self, sequences: Iterable[str]) -> list[list[str]]:
        """
        Tokenize many sequences.

        Row alignment follows the basic segmenter: with batch de-duplication
        on, repeated inputs only get one row.
        """
        return [self._split_words(words) for words in self.basic.tokenize_batch(sequences)]

    def convert_to_ids(self, tokens: Iterable[str]) -> list[int]:
        """
        Map tokens to vocabulary ids.

        Raises:
            UnknownTokenError: On the first token that isn't in the vocabulary.
                No default id is ever substituted.
        """
        return self.vocabulary.ids_of(tokens)

    def convert_to_tokens(self, ids: Iterable[int]) -> list[str]:
        """Map ids back to the tokens on those vocabulary lines."""
        return [self.vocabulary.token_of(token_id) for token_id in ids]
