# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tokenizer artifact bundle.

Packages a loaded tokenizer into a self-contained directory that can be
shipped next to a model export:

  - vocab.txt            the vocabulary, line order preserved
  - tokenizer.json       the same pipeline as a Hugging Face tokenizers file
  - config_snapshot.yaml frozen copy of the tokenizer config
  - metadata.json        version hash, config hash, vocab stats
  - checksum.txt         SHA256 of every other file, "hash  filename" per line

tokenizer.json lets serving code that only knows the tokenizers library load
an equivalent tokenizer without importing bertok. The one known difference is
the line and paragraph separators U+2028 and U+2029: bertok keeps them as
ordinary characters inside a word, while BertNormalizer treats them as
whitespace and splits there. "a\u2028b" is one unknown word to bertok and
two words to tokenizer.json.

metadata.json also records the Unicode database and tokenizers versions the
bundle was built with.
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import NamedTuple

import yaml
from tokenizers import Tokenizer, decoders, models, normalizers, pre_tokenizers, processors

from bertok import __version__
from bertok.config.schema import TokenizerConfig
from bertok.logging.logger import get_logger
from bertok.runtime.environment import get_system_info
from bertok.tokenizer.full.core import FullTokenizer
from bertok.tokenizer.vocab.core import write_vocab_file
from bertok.tokenizer.wordpiece.core import CONTINUATION_PREFIX
from bertok.utils.filesystem import atomic_write
from bertok.utils.hashing import compute_sha256, compute_sha256_bytes, verify_checksum
from bertok.utils.paths import ensure_directory

CHECKSUM_FILENAME = "checksum.txt"
CONTENT_FILES = ("vocab.txt", "tokenizer.json", "config_snapshot.yaml")


class BundleResult(NamedTuple):
    """What you get back after writing a tokenizer bundle."""

    output_directory: str
    version_hash: str
    vocab_size: int
    file_count: int


def build_hf_tokenizer(tokenizer: FullTokenizer, config: TokenizerConfig) -> Tokenizer:
    """
    Mirror a FullTokenizer as a tokenizers.Tokenizer.

    The post-processor wraps single sequences as [CLS] $A [SEP], the same
    framing SequenceEncoder applies.

    Raises:
        UnknownTokenError: If the start or separator token isn't in the vocabulary.
    """
    vocabulary = tokenizer.vocabulary
    start_id = vocabulary.id_of(config.start_token)
    separator_id = vocabulary.id_of(config.separator_token)

    hf_tokenizer = Tokenizer(
        models.WordPiece(
            vocab=vocabulary.as_dict(),
            unk_token=tokenizer.unknown_token,
            max_input_chars_per_word=tokenizer.max_characters_per_word,
        )
    )
    hf_tokenizer.normalizer = normalizers.BertNormalizer(
        clean_text=True,
        handle_chinese_chars=True,
        strip_accents=tokenizer.do_lower_case,
        lowercase=tokenizer.do_lower_case,
    )
    hf_tokenizer.pre_tokenizer = pre_tokenizers.BertPreTokenizer()
    hf_tokenizer.decoder = decoders.WordPiece(prefix=CONTINUATION_PREFIX)
    hf_tokenizer.post_processor = processors.TemplateProcessing(
        single=f"{config.start_token} $A {config.separator_token}",
        special_tokens=[
            (config.start_token, start_id),
            (config.separator_token, separator_id),
        ],
    )
    return hf_tokenizer


def _write_config_snapshot(config: TokenizerConfig, output_path: Path) -> None:
    content = yaml.dump(config.model_dump(), default_flow_style=False, sort_keys=True)
    atomic_write(output_path, content)


def _write_metadata(
    config: TokenizerConfig,
    tokenizer: FullTokenizer,
    version_hash: str,
    output_path: Path,
) -> None:
    config_bytes = json.dumps(config.model_dump(), sort_keys=True).encode("utf-8")
    system_info = get_system_info()

    metadata = {
        "version_hash": version_hash,
        "config_hash": compute_sha256_bytes(config_bytes),
        "vocab_size": len(tokenizer.vocabulary),
        "vocab_lines": tokenizer.vocabulary.line_count,
        "do_lower_case": tokenizer.do_lower_case,
        "special_tokens": [config.unknown_token, config.start_token, config.separator_token],
        "bertok_version": __version__,
        "unicode_version": system_info.unicode_version,
        "tokenizers_version": system_info.library_versions.get("tokenizers"),
        "created_at": datetime.now(tz=timezone.utc).isoformat(),
    }

    content = json.dumps(metadata, indent=2, sort_keys=True, ensure_ascii=False) + "\n"
    atomic_write(output_path, content)


def _write_checksums(output_dir: Path, files_to_hash: list[str]) -> None:
    lines: list[str] = []
    for filename in sorted(files_to_hash):
        file_path = output_dir / filename
        if file_path.is_file():
            lines.append(f"{compute_sha256(file_path)}  {filename}")

    atomic_write(output_dir / CHECKSUM_FILENAME, "\n".join(lines) + "\n")


def _compute_version_hash(output_dir: Path, files: list[str]) -> str:
    """Hash of the per-file hashes in sorted filename order."""
    file_hashes = [
        compute_sha256(output_dir / filename)
        for filename in sorted(files)
        if (output_dir / filename).is_file()
    ]
    return compute_sha256_bytes("\n".join(file_hashes).encode("utf-8"))


def export_bundle(
    tokenizer: FullTokenizer,
    config: TokenizerConfig,
    output_dir: Path,
) -> BundleResult:
    """
    Write a complete tokenizer bundle into output_dir.

    Existing files with the same names are replaced. Every write is atomic,
    so an interrupted export never leaves a truncated vocab.txt behind.
    """
    logger = get_logger("bertok.tokenizer.artifacts")
    output_dir = ensure_directory(Path(output_dir))

    logger.info("Creating tokenizer bundle", extra={"output_dir": str(output_dir)})

    write_vocab_file(tokenizer.vocabulary, output_dir / "vocab.txt")
    build_hf_tokenizer(tokenizer, config).save(str(output_dir / "tokenizer.json"))
    _write_config_snapshot(config, output_dir / "config_snapshot.yaml")

    content_files = list(CONTENT_FILES)
    version_hash = _compute_version_hash(output_dir, content_files)
    _write_metadata(config, tokenizer, version_hash, output_dir / "metadata.json")

    all_files = content_files + ["metadata.json"]
    _write_checksums(output_dir, all_files)
    file_count = len(all_files) + 1

    logger.info(
        "Tokenizer bundle created",
        extra={
            "version_hash": version_hash,
            "vocab_size": len(tokenizer.vocabulary),
            "file_count": file_count,
            "output_dir": str(output_dir),
        },
    )

    return BundleResult(
        output_directory=str(output_dir),
        version_hash=version_hash,
        vocab_size=len(tokenizer.vocabulary),
        file_count=file_count,
    )


def parse_checksum_file(checksum_path: Path) -> dict[str, str]:
    """
    Parse checksum.txt into {filename: sha256_hex}.

    Raises:
        ValueError: If a line isn't "<64 hex chars>  <filename>".
    """
    checksums: dict[str, str] = {}
    content = checksum_path.read_text(encoding="utf-8")

    for line_num, line in enumerate(content.splitlines(), start=1):
        line = line.strip()
        if not line:
            continue
        parts = line.split("  ", maxsplit=1)
        if len(parts) != 2 or len(parts[0]) != 64:
            raise ValueError(f"Invalid checksum line {line_num}: {line!r}")
        sha256_hex, filename = parts
        checksums[filename] = sha256_hex

    return checksums


def verify_bundle(output_dir: Path) -> bool:
    """
    Check every file listed in checksum.txt against its recorded hash.

    Reports all problems in the log, not just the first. Returns False when
    checksum.txt is missing or malformed, a listed file is gone, or any hash
    differs.
    """
    logger = get_logger("bertok.tokenizer.artifacts")
    output_dir = Path(output_dir)
    checksum_path = output_dir / CHECKSUM_FILENAME

    if not checksum_path.is_file():
        logger.error("checksum.txt not found", extra={"output_dir": str(output_dir)})
        return False

    try:
        expected = parse_checksum_file(checksum_path)
    except ValueError as err:
        logger.error("Failed to parse checksum.txt", extra={"error": str(err)})
        return False

    is_valid = True
    for filename, expected_hash in sorted(expected.items()):
        file_path = output_dir / filename
        if not file_path.is_file():
            logger.error("File missing during verification", extra={"file": filename})
            is_valid = False
            continue

        if not verify_checksum(file_path, expected_hash):
            logger.error(
                "Checksum mismatch",
                extra={
                    "file": filename,
                    "expected": expected_hash[:16] + "...",
                },
            )
            is_valid = False

    if is_valid:
        logger.info("Bundle verified", extra={"files": len(expected)})
    return is_valid
