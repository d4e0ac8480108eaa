# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Type-safe configuration schemas for bertok.

Every config section gets its own frozen pydantic model. Frozen means once
you create it, you cannot mutate it. A tokenizer whose lowercase flag or
sequence length changes halfway through a run would produce ids that don't
line up with anything, so runtime mutation is treated as a bug.

The models use pydantic v2's ConfigDict with:
  - frozen=True: immutability after construction
  - extra="forbid": unknown fields cause immediate failure
  - validate_default=True: even defaults get type-checked
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

MIN_SEQUENCE_LENGTH = 2
MAX_SEQUENCE_LENGTH = 8192


class GlobalConfig(BaseModel):
    """Cross-cutting settings: project identity and observability."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    config_version: str = Field(
        description="Schema version for compatibility tracking, e.g. '1.0.0'"
    )
    project_name: str = Field(
        default="bertok", description="Human-readable project identifier"
    )
    log_level: str = Field(
        default="INFO",
        description="One of DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )
    log_file: Optional[str] = Field(
        default=None,
        description="Optional path for file-based log output",
    )

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        upper = value.upper()
        if upper not in _VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_VALID_LOG_LEVELS)}")
        return upper


class TokenizerConfig(BaseModel):
    """
    Everything the tokenizer needs: where the vocabulary lives, whether the
    model is cased, and the names of the reserved tokens.

    do_lower_case has to match how the vocabulary was built. Uncased BERT
    vocabularies want True, cased ones want False.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    config_version: str = Field(description="Schema version")
    vocab_file: str = Field(
        description="Path to the vocab.txt file, relative to project root unless absolute",
    )
    do_lower_case: bool = Field(
        default=False,
        description="Lowercase and strip accents before WordPiece (uncased models)",
    )
    unknown_token: str = Field(
        default="[UNK]",
        min_length=1,
        description="Emitted for words WordPiece cannot segment; must be in the vocabulary",
    )
    start_token: str = Field(
        default="[CLS]",
        min_length=1,
        description="Reserved token written at position 0 of every row",
    )
    separator_token: str = Field(
        default="[SEP]",
        min_length=1,
        description="Reserved token written after the last kept token",
    )
    max_characters_per_word: int = Field(
        default=200,
        ge=1,
        description="Words longer than this become the unknown token outright",
    )
    deduplicate_batches: bool = Field(
        default=True,
        description="Collapse repeated sequences in batch tokenization",
    )


class EncoderConfig(BaseModel):
    """
    Fixed-length packing parameters and the model's feed names.

    max_sequence_length comes from the model, not the data: a BERT-base
    export typically takes 128 or 512 positions.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    config_version: str = Field(description="Schema version")
    max_sequence_length: int = Field(
        default=128,
        ge=MIN_SEQUENCE_LENGTH,
        le=MAX_SEQUENCE_LENGTH,
        description="Row length, including the [CLS] and [SEP] positions",
    )
    input_ids_name: str = Field(default="input_ids", description="Feed name for token ids")
    input_mask_name: str = Field(default="input_mask", description="Feed name for the attention mask")
    segment_ids_name: str = Field(default="segment_ids", description="Feed name for segment ids")


class ExportConfig(BaseModel):
    """Where the tokenizer artifact bundle gets written."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    config_version: str = Field(description="Schema version")
    output_directory: str = Field(
        default="data/tokenizer",
        description="Bundle output directory, relative to project root",
    )


class BertokConfig(BaseModel):
    """
    Top-level config container.

    Only `global:` is required. Commands check for the sections they need and
    fail with a config error when one is missing.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    global_config: GlobalConfig = Field(alias="global")
    tokenizer: Optional[TokenizerConfig] = Field(default=None)
    encoder: Optional[EncoderConfig] = Field(default=None)
    export: Optional[ExportConfig] = Field(default=None)
