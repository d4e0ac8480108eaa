# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Sequence encoding. Packs token ids into fixed-length model inputs.

Every row looks like this, for max_sequence_length = 8 and three tokens:

    input_ids       [CLS]  t1  t2  t3  [SEP]  0  0  0
    attention_mask    1    1   1   1    1     0  0  0
    segment_ids       0    0   0   0    0     0  0  0

Sequences with more than max_sequence_length - 2 tokens are cut down to fit.
Truncation is silent: the tail is dropped, nothing is raised, and only a
DEBUG log line records it. The row length itself never changes and is
never inferred from the input.
"""

from dataclasses import dataclass, field
from typing import Iterable

from bertok.config.schema import EncoderConfig, TokenizerConfig
from bertok.logging.logger import get_logger
from bertok.tokenizer.full.core import FullTokenizer

DEFAULT_START_TOKEN = "[CLS]"
DEFAULT_SEPARATOR_TOKEN = "[SEP]"
PADDING_ID = 0
SEGMENT_ID = 0

# [CLS] and [SEP] always take two positions.
RESERVED_POSITIONS = 2


@dataclass(frozen=True)
class EncodedSequence:
    """
    One packed row.

    token_count is how many sub-word tokens the text produced before
    truncation, so callers can tell how much got dropped.
    """

    input_ids: list[int]
    attention_mask: list[int]
    segment_ids: list[int]
    token_count: int = 0

    @property
    def truncated(self) -> bool:
        return self.token_count > len(self.input_ids) - RESERVED_POSITIONS


@dataclass(frozen=True)
class EncodedBatch:
    """Rows stacked in input order. Every row has length max_sequence_length."""

    max_sequence_length: int
    rows: list[EncodedSequence] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)

    @property
    def input_ids(self) -> list[list[int]]:
        return [row.input_ids for row in self.rows]

    @property
    def attention_mask(self) -> list[list[int]]:
        return [row.attention_mask for row in self.rows]

    @property
    def segment_ids(self) -> list[list[int]]:
        return [row.segment_ids for row in self.rows]


class SequenceEncoder:
    """
    Turns text into fixed-length id/mask/segment rows.

    Args:
        tokenizer: Full tokenizer used for every sequence.
        start_token_id: Id written at position 0 (normally [CLS]).
        separator_token_id: Id written right after the last kept token
            (normally [SEP]).
        max_sequence_length: Row length. Must leave room for both reserved
            tokens, so at least 2.
    """

    def __init__(
        self,
        tokenizer: FullTokenizer,
        start_token_id: int,
        separator_token_id: int,
        max_sequence_length: int,
    ) -> None:
        if max_sequence_length < RESERVED_POSITIONS:
            raise ValueError(
                f"max_sequence_length must be at least {RESERVED_POSITIONS}, "
                f"got {max_sequence_length}"
            )
        self.tokenizer = tokenizer
        self.start_token_id = start_token_id
        self.separator_token_id = separator_token_id
        self.max_sequence_length = max_sequence_length

    @classmethod
    def from_tokenizer(
        cls,
        tokenizer: FullTokenizer,
        max_sequence_length: int,
        start_token: str = DEFAULT_START_TOKEN,
        separator_token: str = DEFAULT_SEPARATOR_TOKEN,
    ) -> "SequenceEncoder":
        """
        Resolve the reserved token ids once through the tokenizer's vocabulary.

        Raises:
            UnknownTokenError: If either reserved token isn't in the vocabulary.
        """
        start_token_id, separator_token_id = tokenizer.convert_to_ids([start_token, separator_token])
        return cls(tokenizer, start_token_id, separator_token_id, max_sequence_length)

    @classmethod
    def from_config(
        cls,
        tokenizer: FullTokenizer,
        tokenizer_config: TokenizerConfig,
        encoder_config: EncoderConfig,
    ) -> "SequenceEncoder":
        return cls.from_tokenizer(
            tokenizer,
            encoder_config.max_sequence_length,
            start_token=tokenizer_config.start_token,
            separator_token=tokenizer_config.separator_token,
        )

    def pack(self, token_ids: list[int]) -> EncodedSequence:
        """Lay out one row from already-converted token ids."""
        kept = token_ids[: self.max_sequence_length - RESERVED_POSITIONS]
        input_ids = [self.start_token_id, *kept, self.separator_token_id]
        real_length = len(input_ids)
        padding = self.max_sequence_length - real_length

        if len(kept) < len(token_ids):
            get_logger("bertok.encoder").debug(
                "Sequence truncated",
                extra={
                    "token_count": len(token_ids),
                    "kept": len(kept),
                    "max_sequence_length": self.max_sequence_length,
                },
            )

        return EncodedSequence(
            input_ids=input_ids + [PADDING_ID] * padding,
            attention_mask=[1] * real_length + [0] * padding,
            segment_ids=[SEGMENT_ID] * self.max_sequence_length,
            token_count=len(token_ids),
        )

    def encode(self, sequence: str) -> EncodedSequence:
        """Tokenize, convert to ids, and pack a single sequence."""
        tokens = self.tokenizer.tokenize(sequence)
        return self.pack(self.tokenizer.convert_to_ids(tokens))

    def encode_batch(self, sequences: Iterable[str]) -> EncodedBatch:
        """
        Encode every sequence on its own and stack the rows in input order.

        Unlike FullTokenizer.tokenize_batch, repeated sequences are NOT
        collapsed here: row i always belongs to input i.
        """
        rows = [self.encode(sequence) for sequence in sequences]
        return EncodedBatch(max_sequence_length=self.max_sequence_length, rows=rows)
