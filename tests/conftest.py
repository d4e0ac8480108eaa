# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Shared pytest fixtures for bertok tests.

Fixtures here are available to every test file automatically.
We keep them minimal, just the stuff that multiple test modules need.
"""

import logging
import textwrap
from pathlib import Path

import pytest

from bertok.logging.logger import PACKAGE_LOGGER_NAME
from bertok.tokenizer.full.core import FullTokenizer
from bertok.tokenizer.vocab.core import Vocabulary

# The six-entry vocabulary used throughout: ids 0..5 in this order.
SMALL_VOCAB = ["[UNK]", "[CLS]", "[SEP]", "hello", "world", "##lo"]

# A slightly richer vocabulary for segmentation tests.
WORDPIECE_VOCAB = [
    "[PAD]",
    "[UNK]",
    "[CLS]",
    "[SEP]",
    "un",
    "##aff",
    "##able",
    "he",
    "##llo",
    "the",
    ",",
    "!",
    "中",
    "文",
]


def _write_vocab(path: Path, tokens: list[str]) -> Path:
    path.write_text("\n".join(tokens) + "\n", encoding="utf-8")
    return path


@pytest.fixture()
def small_vocab_file(tmp_path: Path) -> Path:
    """vocab.txt holding SMALL_VOCAB."""
    return _write_vocab(tmp_path / "vocab.txt", SMALL_VOCAB)


@pytest.fixture()
def small_vocab() -> Vocabulary:
    return Vocabulary.from_lines(SMALL_VOCAB)


@pytest.fixture()
def wordpiece_vocab() -> Vocabulary:
    return Vocabulary.from_lines(WORDPIECE_VOCAB)


@pytest.fixture()
def small_tokenizer(small_vocab: Vocabulary) -> FullTokenizer:
    return FullTokenizer(small_vocab)


@pytest.fixture()
def tmp_config_file(tmp_path: Path) -> Path:
    """
    Create a minimal valid config YAML file in a temp directory.

    This is the smallest config that passes schema validation.
    Tests that need specific config values should write their own files.
    """
    config_content = textwrap.dedent("""\
        global:
          config_version: "1.0.0"
          project_name: "bertok-test"
          log_level: "DEBUG"
    """)
    config_file = tmp_path / "test_config.yaml"
    config_file.write_text(config_content, encoding="utf-8")
    return config_file


@pytest.fixture()
def tokenizer_config_file(tmp_path: Path, small_vocab_file: Path) -> Path:
    """A config with every section, pointing at small_vocab_file."""
    config_content = textwrap.dedent(f"""\
        global:
          config_version: "1.0.0"
          project_name: "bertok-test"
          log_level: "DEBUG"
        tokenizer:
          config_version: "1.0.0"
          vocab_file: "{small_vocab_file.name}"
        encoder:
          config_version: "1.0.0"
          max_sequence_length: 8
        export:
          config_version: "1.0.0"
          output_directory: "bundle"
    """)
    config_file = tmp_path / "bertok.yaml"
    config_file.write_text(config_content, encoding="utf-8")
    return config_file


@pytest.fixture()
def invalid_config_file(tmp_path: Path) -> Path:
    """A config file that's valid YAML but fails schema validation (missing required field)."""
    config_content = textwrap.dedent("""\
        global:
          project_name: "bertok-test"
    """)
    config_file = tmp_path / "invalid_config.yaml"
    config_file.write_text(config_content, encoding="utf-8")
    return config_file


@pytest.fixture()
def broken_yaml_file(tmp_path: Path) -> Path:
    """A file that isn't valid YAML at all."""
    config_file = tmp_path / "broken.yaml"
    config_file.write_text("{{not: yaml: at: all:::", encoding="utf-8")
    return config_file


class RecordCollector(logging.Handler):
    """Keeps every record that reaches the package logger."""

    def __init__(self) -> None:
        super().__init__()
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)

    def messages(self, logger_name: str) -> list[str]:
        return [record.getMessage() for record in self.records if record.name == logger_name]


@pytest.fixture(autouse=True)
def _reset_package_logger():
    """
    Drop the package logger's handlers after each test, so a handler bound to
    one test's captured stdout never leaks into the next.
    """
    yield
    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture()
def log_records():
    collector = RecordCollector()
    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    package_logger.addHandler(collector)
    yield collector
    package_logger.removeHandler(collector)
