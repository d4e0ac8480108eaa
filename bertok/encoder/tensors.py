# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tensor hand-off for an encoded batch.

The model runner is somebody else's problem; all it needs from us is three
int32 tensors of shape (batch, max_sequence_length) under the feed names the
exported graph expects. Those names differ between exports, so they're
parameters with the classic BERT defaults.
"""

import torch

from bertok.config.schema import EncoderConfig
from bertok.encoder.core import EncodedBatch

DEFAULT_INPUT_IDS_NAME = "input_ids"
DEFAULT_INPUT_MASK_NAME = "input_mask"
DEFAULT_SEGMENT_IDS_NAME = "segment_ids"


def to_tensors(
    batch: EncodedBatch,
    input_ids_name: str = DEFAULT_INPUT_IDS_NAME,
    input_mask_name: str = DEFAULT_INPUT_MASK_NAME,
    segment_ids_name: str = DEFAULT_SEGMENT_IDS_NAME,
) -> dict[str, torch.Tensor]:
    """
    Convert a batch to a feed dict of int32 tensors.

    An empty batch still yields (0, max_sequence_length) tensors so the
    shapes stay consistent for the caller.
    """
    shape = (len(batch), batch.max_sequence_length)

    def _tensor(rows: list[list[int]]) -> torch.Tensor:
        return torch.tensor(rows, dtype=torch.int32).reshape(shape)

    return {
        input_ids_name: _tensor(batch.input_ids),
        input_mask_name: _tensor(batch.attention_mask),
        segment_ids_name: _tensor(batch.segment_ids),
    }


def to_tensors_for_config(batch: EncodedBatch, config: EncoderConfig) -> dict[str, torch.Tensor]:
    """Same as to_tensors, with feed names taken from the encoder config."""
    return to_tensors(
        batch,
        input_ids_name=config.input_ids_name,
        input_mask_name=config.input_mask_name,
        segment_ids_name=config.segment_ids_name,
    )
