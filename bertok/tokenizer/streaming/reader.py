# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Streaming sequence reader.

Feeds the encode and stats commands from a file without loading it all into
memory. Two formats are understood:

  - .jsonl: one JSON object per line, the sequence is its "text" field
  - anything else: plain text, one sequence per non-blank line
"""

import json
from pathlib import Path
from typing import Iterator

from bertok.logging.logger import get_logger

TEXT_FIELD = "text"


def _stream_jsonl(input_path: Path) -> Iterator[str]:
    logger = get_logger("bertok.tokenizer.streaming")
    with open(input_path, "r", encoding="utf-8") as f:
        for line_number, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                record = json.loads(line)
            except json.JSONDecodeError:
                logger.warning(
                    "Skipping malformed JSONL line",
                    extra={"path": str(input_path), "line": line_number},
                )
                continue
            text = record.get(TEXT_FIELD) if isinstance(record, dict) else None
            if isinstance(text, str):
                yield text
            else:
                logger.warning(
                    "Skipping JSONL line without a text field",
                    extra={"path": str(input_path), "line": line_number},
                )


def _stream_lines(input_path: Path) -> Iterator[str]:
    with open(input_path, "r", encoding="utf-8") as f:
        for line in f:
            line = line.rstrip("\r\n")
            if line.strip():
                yield line


def stream_sequences(input_path: Path) -> Iterator[str]:
    """
    Lazily yield sequences from a text or JSONL file, in file order.

    Raises:
        FileNotFoundError: If the path doesn't exist (raised on first iteration).
        UnicodeDecodeError: When iteration reaches bytes that aren't UTF-8.
    """
    input_path = Path(input_path)
    if input_path.suffix == ".jsonl":
        yield from _stream_jsonl(input_path)
    else:
        yield from _stream_lines(input_path)
