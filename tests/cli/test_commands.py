# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Handler-level tests for the CLI subcommands.

These call the handlers directly with a fake argparse.Namespace, so they
test the wiring (config checks, input handling, exit codes) without a
subprocess.
"""

import argparse
import json
from pathlib import Path
from unittest.mock import patch

import pytest

from bertok.cli.commands import (
    handle_encode,
    handle_export,
    handle_info,
    handle_stats,
    handle_tokenize,
    handle_verify,
)
from bertok.cli.exit_codes import CONFIG_ERROR, SUCCESS, USER_ERROR, VALIDATION_ERROR


def _make_args(**kwargs) -> argparse.Namespace:
    """Build a fake argparse.Namespace for testing CLI handlers."""
    defaults = {
        "config": None,
        "log_level": "DEBUG",
        "dry_run": False,
        "text": None,
        "input_file": None,
        "max_length": None,
        "output_file": None,
        "output_dir": None,
        "bundle_dir": None,
    }
    defaults.update(kwargs)
    return argparse.Namespace(**defaults)


@pytest.fixture()
def project_root(tmp_path: Path):
    with patch("bertok.cli.commands._resolve_project_root", return_value=tmp_path):
        yield tmp_path


class TestTokenize:
    def test_requires_config(self) -> None:
        assert handle_tokenize(_make_args(text="hello")) == CONFIG_ERROR

    def test_requires_input(self, tokenizer_config_file: Path, project_root: Path) -> None:
        args = _make_args(config=str(tokenizer_config_file))
        assert handle_tokenize(args) == USER_ERROR

    def test_missing_input_file_is_user_error(
        self, tokenizer_config_file: Path, project_root: Path
    ) -> None:
        args = _make_args(config=str(tokenizer_config_file), input_file=str(project_root / "nope.txt"))
        assert handle_tokenize(args) == USER_ERROR

    def test_tokenizes_text(self, tokenizer_config_file: Path, project_root: Path) -> None:
        args = _make_args(config=str(tokenizer_config_file), text="hello world")
        assert handle_tokenize(args) == SUCCESS

    def test_missing_vocab_is_validation_error(
        self, tokenizer_config_file: Path, project_root: Path
    ) -> None:
        (project_root / "vocab.txt").unlink()
        args = _make_args(config=str(tokenizer_config_file), text="hello")
        assert handle_tokenize(args) == VALIDATION_ERROR

    def test_non_utf8_input_file_is_user_error(
        self, tokenizer_config_file: Path, project_root: Path
    ) -> None:
        input_file = project_root / "latin1.txt"
        input_file.write_bytes(b"hello\n\xff\xfe world\n")

        args = _make_args(config=str(tokenizer_config_file), input_file=str(input_file))
        assert handle_tokenize(args) == USER_ERROR

    def test_directory_as_input_file_is_user_error(
        self, tokenizer_config_file: Path, project_root: Path
    ) -> None:
        args = _make_args(config=str(tokenizer_config_file), input_file=str(project_root))
        assert handle_tokenize(args) == USER_ERROR

    def test_error_log_level_silences_library_loggers(
        self, tokenizer_config_file: Path, project_root: Path, log_records
    ) -> None:
        args = _make_args(config=str(tokenizer_config_file), text="hello", log_level="ERROR")
        assert handle_tokenize(args) == SUCCESS
        assert log_records.messages("bertok.tokenizer.vocab") == []
        assert log_records.messages("bertok.cli.tokenize") == []

    def test_info_log_level_reaches_library_loggers(
        self, tokenizer_config_file: Path, project_root: Path, log_records
    ) -> None:
        args = _make_args(config=str(tokenizer_config_file), text="hello", log_level="INFO")
        assert handle_tokenize(args) == SUCCESS
        assert log_records.messages("bertok.tokenizer.vocab") == ["Loaded vocabulary"]


class TestEncode:
    def test_writes_rows_for_every_input_line(
        self, tokenizer_config_file: Path, project_root: Path
    ) -> None:
        input_file = project_root / "corpus.txt"
        input_file.write_text("hello\nhello\nworld hello\n", encoding="utf-8")
        output_file = project_root / "rows.jsonl"

        args = _make_args(
            config=str(tokenizer_config_file),
            input_file=str(input_file),
            output_file=str(output_file),
        )
        assert handle_encode(args) == SUCCESS

        rows = [json.loads(line) for line in output_file.read_text(encoding="utf-8").splitlines()]
        assert len(rows) == 3
        assert rows[2]["input_ids"] == [1, 4, 3, 2, 0, 0, 0, 0]
        assert rows[2]["segment_ids"] == [0] * 8

    def test_max_length_override(self, tokenizer_config_file: Path, project_root: Path) -> None:
        output_file = project_root / "rows.jsonl"
        args = _make_args(
            config=str(tokenizer_config_file),
            text="hello world",
            max_length=3,
            output_file=str(output_file),
        )
        assert handle_encode(args) == SUCCESS

        row = json.loads(output_file.read_text(encoding="utf-8"))
        assert row["input_ids"] == [1, 3, 2]

    def test_dry_run_writes_nothing(self, tokenizer_config_file: Path, project_root: Path) -> None:
        output_file = project_root / "rows.jsonl"
        args = _make_args(
            config=str(tokenizer_config_file),
            text="hello",
            output_file=str(output_file),
            dry_run=True,
        )
        assert handle_encode(args) == SUCCESS
        assert not output_file.exists()

    def test_logs_rows_without_output_file(
        self, tokenizer_config_file: Path, project_root: Path
    ) -> None:
        args = _make_args(config=str(tokenizer_config_file), text="hello")
        assert handle_encode(args) == SUCCESS

    @pytest.mark.parametrize("max_length", [0, 1, 8193])
    def test_out_of_range_max_length_is_user_error(
        self, tokenizer_config_file: Path, project_root: Path, max_length: int
    ) -> None:
        args = _make_args(config=str(tokenizer_config_file), text="hello", max_length=max_length)
        assert handle_encode(args) == USER_ERROR

    def test_non_utf8_input_file_is_user_error(
        self, tokenizer_config_file: Path, project_root: Path
    ) -> None:
        input_file = project_root / "latin1.txt"
        input_file.write_bytes(b"hello\n\xff\xfe world\n")

        args = _make_args(config=str(tokenizer_config_file), input_file=str(input_file))
        assert handle_encode(args) == USER_ERROR

    def test_debug_log_level_records_truncation(
        self, tokenizer_config_file: Path, project_root: Path, log_records
    ) -> None:
        args = _make_args(
            config=str(tokenizer_config_file),
            text="hello world hello world",
            max_length=3,
            log_level="DEBUG",
        )
        assert handle_encode(args) == SUCCESS
        assert log_records.messages("bertok.encoder") == ["Sequence truncated"]

    def test_config_log_level_applies_without_flag(
        self, tokenizer_config_file: Path, project_root: Path, log_records
    ) -> None:
        args = _make_args(
            config=str(tokenizer_config_file),
            text="hello world hello world",
            max_length=3,
            log_level=None,
        )
        assert handle_encode(args) == SUCCESS
        assert log_records.messages("bertok.encoder") == ["Sequence truncated"]


class TestStats:
    def test_reports_metrics(self, tokenizer_config_file: Path, project_root: Path) -> None:
        input_file = project_root / "corpus.jsonl"
        input_file.write_text('{"text": "hello"}\n{"text": "nope"}\n', encoding="utf-8")

        args = _make_args(config=str(tokenizer_config_file), input_file=str(input_file))
        assert handle_stats(args) == SUCCESS

    def test_requires_config(self) -> None:
        assert handle_stats(_make_args(text="hello")) == CONFIG_ERROR

    def test_max_length_below_reserved_positions_is_user_error(
        self, tokenizer_config_file: Path, project_root: Path
    ) -> None:
        args = _make_args(config=str(tokenizer_config_file), text="hello", max_length=1)
        assert handle_stats(args) == USER_ERROR

    def test_non_utf8_jsonl_is_user_error(
        self, tokenizer_config_file: Path, project_root: Path
    ) -> None:
        input_file = project_root / "corpus.jsonl"
        input_file.write_bytes(b'{"text": "hello"}\n{"text": "\xff"}\n')

        args = _make_args(config=str(tokenizer_config_file), input_file=str(input_file))
        assert handle_stats(args) == USER_ERROR


class TestExportAndVerify:
    def test_export_uses_configured_directory(
        self, tokenizer_config_file: Path, project_root: Path
    ) -> None:
        args = _make_args(config=str(tokenizer_config_file))
        assert handle_export(args) == SUCCESS
        assert (project_root / "bundle" / "checksum.txt").is_file()

        verify_args = _make_args(config=str(tokenizer_config_file))
        assert handle_verify(verify_args) == SUCCESS

    def test_export_dry_run_writes_nothing(
        self, tokenizer_config_file: Path, project_root: Path
    ) -> None:
        args = _make_args(config=str(tokenizer_config_file), dry_run=True)
        assert handle_export(args) == SUCCESS
        assert not (project_root / "bundle").exists()

    def test_export_requires_config(self) -> None:
        assert handle_export(_make_args()) == CONFIG_ERROR

    def test_verify_detects_tampering(
        self, tokenizer_config_file: Path, project_root: Path
    ) -> None:
        bundle_dir = project_root / "out"
        assert handle_export(_make_args(config=str(tokenizer_config_file), output_dir=str(bundle_dir))) == SUCCESS

        (bundle_dir / "vocab.txt").write_text("changed\n", encoding="utf-8")
        assert handle_verify(_make_args(bundle_dir=str(bundle_dir))) == VALIDATION_ERROR

    def test_verify_missing_directory(self, project_root: Path) -> None:
        args = _make_args(bundle_dir=str(project_root / "missing"))
        assert handle_verify(args) == VALIDATION_ERROR


def test_info_succeeds() -> None:
    assert handle_info(_make_args()) == SUCCESS


def test_info_reports_unicode_and_library_versions(log_records) -> None:
    assert handle_info(_make_args(log_level="INFO")) == SUCCESS

    record = next(r for r in log_records.records if r.getMessage() == "System information")
    assert record.unicode_version
    assert "tokenizers" in record.library_versions
