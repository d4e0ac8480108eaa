# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Schema-level validation tests.

These focus on the pydantic models themselves: boundary values, constraint
enforcement, and defaults.
"""

import pytest
from pydantic import ValidationError

from bertok.config.schema import (
    BertokConfig,
    EncoderConfig,
    ExportConfig,
    GlobalConfig,
    TokenizerConfig,
)


class TestGlobalConfigSchema:
    def test_defaults(self) -> None:
        config = GlobalConfig(config_version="1.0.0")
        assert config.project_name == "bertok"
        assert config.log_level == "INFO"
        assert config.log_file is None

    def test_log_level_is_normalized_to_uppercase(self) -> None:
        assert GlobalConfig(config_version="1.0.0", log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            GlobalConfig(config_version="1.0.0", log_level="LOUD")

    def test_config_version_is_required(self) -> None:
        with pytest.raises(ValidationError):
            GlobalConfig()  # type: ignore[call-arg]


class TestTokenizerConfigSchema:
    def test_defaults(self) -> None:
        config = TokenizerConfig(config_version="1.0.0", vocab_file="vocab.txt")
        assert config.do_lower_case is False
        assert config.unknown_token == "[UNK]"
        assert config.start_token == "[CLS]"
        assert config.separator_token == "[SEP]"
        assert config.max_characters_per_word == 200
        assert config.deduplicate_batches is True

    def test_vocab_file_is_required(self) -> None:
        with pytest.raises(ValidationError):
            TokenizerConfig(config_version="1.0.0")  # type: ignore[call-arg]

    def test_max_characters_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            TokenizerConfig(config_version="1.0.0", vocab_file="v.txt", max_characters_per_word=0)

    def test_empty_special_token_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            TokenizerConfig(config_version="1.0.0", vocab_file="v.txt", unknown_token="")


class TestEncoderConfigSchema:
    def test_defaults(self) -> None:
        config = EncoderConfig(config_version="1.0.0")
        assert config.max_sequence_length == 128
        assert config.input_ids_name == "input_ids"
        assert config.input_mask_name == "input_mask"
        assert config.segment_ids_name == "segment_ids"

    def test_minimum_length_is_two(self) -> None:
        assert EncoderConfig(config_version="1.0.0", max_sequence_length=2).max_sequence_length == 2
        with pytest.raises(ValidationError):
            EncoderConfig(config_version="1.0.0", max_sequence_length=1)

    def test_unknown_field_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            EncoderConfig(config_version="1.0.0", batch_size=4)  # type: ignore[call-arg]


class TestBertokConfigSchema:
    def test_global_alias(self) -> None:
        config = BertokConfig.model_validate({"global": {"config_version": "1.0.0"}})
        assert config.global_config.config_version == "1.0.0"

    def test_global_section_is_required(self) -> None:
        with pytest.raises(ValidationError):
            BertokConfig.model_validate({})

    def test_export_default_directory(self) -> None:
        assert ExportConfig(config_version="1.0.0").output_directory == "data/tokenizer"
