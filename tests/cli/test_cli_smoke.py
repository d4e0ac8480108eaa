# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
CLI smoke tests.

CLI tests verify that:
  - commands execute
  - exit codes are correct
  - help text exists

We use subprocess to run the actual CLI entrypoint the way a user would.
This catches issues that unit tests miss, like broken imports or entrypoint
registration.
"""

import json
import subprocess
import sys
import textwrap
from pathlib import Path

import pytest


def _run_cli(*args: str) -> subprocess.CompletedProcess[str]:
    """Run `bertok` with the given arguments and capture output."""
    return subprocess.run(
        [sys.executable, "-m", "bertok.cli.main", *args],
        capture_output=True,
        text=True,
        timeout=60,
    )


def _absolute_vocab_config(tmp_path: Path, small_vocab_file: Path) -> Path:
    """A config whose vocab path doesn't depend on the subprocess's working directory."""
    content = textwrap.dedent(f"""\
        global:
          config_version: "1.0.0"
          log_level: "INFO"
        tokenizer:
          config_version: "1.0.0"
          vocab_file: "{small_vocab_file.resolve().as_posix()}"
        encoder:
          config_version: "1.0.0"
          max_sequence_length: 8
    """)
    config_file = tmp_path / "absolute.yaml"
    config_file.write_text(content, encoding="utf-8")
    return config_file


def _log_lines(stdout: str) -> list[dict]:
    return [json.loads(line) for line in stdout.splitlines() if line.strip()]


class TestHelpTexts:
    """Every subcommand must have working --help output."""

    @pytest.mark.parametrize(
        "subcommand",
        ["tokenize", "encode", "stats", "export", "verify", "info"],
    )
    def test_subcommand_help_exits_zero(self, subcommand: str) -> None:
        result = _run_cli(subcommand, "--help")
        assert result.returncode == 0
        assert subcommand in result.stdout.lower() or "usage" in result.stdout.lower()

    def test_root_help_exits_with_user_error(self) -> None:
        """Running bertok with no args should show help and exit with USER_ERROR (1)."""
        result = _run_cli()
        assert result.returncode == 1


class TestSubcommandExecution:
    def test_info_runs_without_config(self) -> None:
        result = _run_cli("info")
        assert result.returncode == 0

    def test_tokenize_requires_config(self) -> None:
        result = _run_cli("tokenize", "--text", "hello")
        assert result.returncode == 2  # CONFIG_ERROR

    def test_verify_missing_bundle_is_validation_error(self, tmp_path: Path) -> None:
        result = _run_cli("verify", "--bundle-dir", str(tmp_path / "nowhere"))
        assert result.returncode == 4  # VALIDATION_ERROR

    def test_tokenize_logs_tokens_and_ids(self, tmp_path: Path, small_vocab_file: Path) -> None:
        config_file = _absolute_vocab_config(tmp_path, small_vocab_file)
        result = _run_cli("tokenize", "--config", str(config_file), "--text", "hello world")

        assert result.returncode == 0
        tokenized = [entry for entry in _log_lines(result.stdout) if entry["msg"] == "Tokenized"]
        assert tokenized[0]["tokens"] == ["hello", "world"]
        assert tokenized[0]["ids"] == [3, 4]

    def test_encode_writes_jsonl(self, tmp_path: Path, small_vocab_file: Path) -> None:
        config_file = _absolute_vocab_config(tmp_path, small_vocab_file)
        output_file = tmp_path / "rows.jsonl"
        result = _run_cli(
            "encode",
            "--config", str(config_file),
            "--text", "hello",
            "--output-file", str(output_file),
        )

        assert result.returncode == 0
        row = json.loads(output_file.read_text(encoding="utf-8").splitlines()[0])
        assert row["input_ids"] == [1, 3, 2, 0, 0, 0, 0, 0]
        assert row["input_mask"] == [1, 1, 1, 0, 0, 0, 0, 0]

    def test_export_then_verify(self, tmp_path: Path, small_vocab_file: Path) -> None:
        config_file = _absolute_vocab_config(tmp_path, small_vocab_file)
        bundle_dir = tmp_path / "bundle"

        export = _run_cli("export", "--config", str(config_file), "--output-dir", str(bundle_dir))
        assert export.returncode == 0

        verify = _run_cli("verify", "--bundle-dir", str(bundle_dir))
        assert verify.returncode == 0

    def test_debug_level_shows_truncation(self, tmp_path: Path, small_vocab_file: Path) -> None:
        config_file = _absolute_vocab_config(tmp_path, small_vocab_file)
        result = _run_cli(
            "encode",
            "--config", str(config_file),
            "--log-level", "DEBUG",
            "--max-length", "3",
            "--text", "hello world hello",
        )

        assert result.returncode == 0
        entries = _log_lines(result.stdout)
        truncated = [entry for entry in entries if entry["msg"] == "Sequence truncated"]
        assert truncated[0]["module"] == "bertok.encoder"
        assert truncated[0]["kept"] == 1

    def test_error_level_silences_info_everywhere(
        self, tmp_path: Path, small_vocab_file: Path
    ) -> None:
        config_file = _absolute_vocab_config(tmp_path, small_vocab_file)
        result = _run_cli(
            "tokenize", "--config", str(config_file), "--log-level", "ERROR", "--text", "hello"
        )

        assert result.returncode == 0
        assert _log_lines(result.stdout) == []

    def test_max_length_below_two_is_user_error(
        self, tmp_path: Path, small_vocab_file: Path
    ) -> None:
        config_file = _absolute_vocab_config(tmp_path, small_vocab_file)
        result = _run_cli(
            "encode", "--config", str(config_file), "--max-length", "1", "--text", "hello"
        )
        assert result.returncode == 1  # USER_ERROR


class TestConfigLoading:
    """Subcommands should handle config loading failures gracefully."""

    def test_nonexistent_config_returns_config_error(self) -> None:
        result = _run_cli("tokenize", "--config", "/nonexistent/path.yaml", "--text", "x")
        assert result.returncode == 2  # CONFIG_ERROR

    def test_invalid_config_returns_config_error(self, invalid_config_file: Path) -> None:
        result = _run_cli("stats", "--config", str(invalid_config_file), "--text", "x")
        assert result.returncode == 2

    def test_config_without_tokenizer_section(self, tmp_config_file: Path) -> None:
        result = _run_cli("encode", "--config", str(tmp_config_file), "--text", "x")
        assert result.returncode == 2
