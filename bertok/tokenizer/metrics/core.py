# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tokenizer coverage metrics.

Before pointing a vocabulary at a new corpus you want to know two things:
how often words fall through to [UNK], and how often sequences are too long
for the model and will get truncated. Both are silent during encoding, so
this is the place to see them.
"""

from typing import Iterable, NamedTuple, Optional

from bertok.logging.logger import get_logger
from bertok.tokenizer.full.core import FullTokenizer


class TokenizerMetrics(NamedTuple):
    """Coverage numbers for a tokenizer over a sample of text."""

    vocab_size: int
    total_sequences: int
    total_tokens: int
    avg_tokens_per_sequence: float
    unk_rate: float
    truncated_sequences: int


def compute_metrics(
    tokenizer: FullTokenizer,
    sample_texts: Iterable[str],
    max_sequence_length: Optional[int] = None,
) -> TokenizerMetrics:
    """
    Tokenize every sample and summarize.

    Each text is tokenized on its own, so repeated lines count every time
    they appear. truncated_sequences counts texts whose sub-word count won't
    fit in max_sequence_length next to [CLS] and [SEP]; it stays 0 when no
    length is given.
    """
    logger = get_logger("bertok.tokenizer.metrics")

    total_sequences = 0
    total_tokens = 0
    total_unk = 0
    truncated = 0
    capacity = None if max_sequence_length is None else max(max_sequence_length - 2, 0)

    for text in sample_texts:
        tokens = tokenizer.tokenize(text)
        total_sequences += 1
        total_tokens += len(tokens)
        total_unk += tokens.count(tokenizer.unknown_token)
        if capacity is not None and len(tokens) > capacity:
            truncated += 1

    if total_sequences == 0:
        logger.warning("No sample texts provided for metrics computation")

    metrics = TokenizerMetrics(
        vocab_size=len(tokenizer.vocabulary),
        total_sequences=total_sequences,
        total_tokens=total_tokens,
        avg_tokens_per_sequence=total_tokens / total_sequences if total_sequences else 0.0,
        unk_rate=total_unk / total_tokens if total_tokens else 0.0,
        truncated_sequences=truncated,
    )

    logger.info("Tokenizer metrics computed", extra=metrics._asdict())
    return metrics
