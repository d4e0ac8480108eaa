# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Subcommand handlers for the bertok CLI.

Each function here corresponds to one CLI subcommand and returns an exit
code. Results are reported through the structured logger, one JSON object
per line; the encode command can also write its rows to a JSONL file.

No print() calls. Everything goes through the structured logger.
"""

import argparse
import json
import logging
from pathlib import Path
from typing import Optional

from bertok.cli.exit_codes import CONFIG_ERROR, RUNTIME_ERROR, SUCCESS, USER_ERROR, VALIDATION_ERROR
from bertok.config.exceptions import ConfigError
from bertok.config.loader import load_config
from bertok.config.schema import MAX_SEQUENCE_LENGTH, MIN_SEQUENCE_LENGTH, BertokConfig, EncoderConfig
from bertok.logging.logger import get_logger
from bertok.runtime.bootstrap import bootstrap
from bertok.tokenizer.exceptions import VocabularyLoadError

DEFAULT_BUNDLE_DIRECTORY = "data/tokenizer"


def _load_and_bootstrap(
    args: argparse.Namespace,
    command_name: str,
) -> tuple[int, Optional[BertokConfig], logging.Logger]:
    """
    The shared setup that every command needs: load config, run bootstrap.

    Returns a tuple of (exit_code, config, logger). If exit_code is not SUCCESS,
    the caller should return it immediately.
    """
    logger = get_logger(f"bertok.cli.{command_name}", log_level=args.log_level or "INFO")

    config = None
    if args.config is not None:
        try:
            config = load_config(Path(args.config))
        except ConfigError as err:
            logger.error(
                "Configuration error",
                extra={"command": command_name, "error": str(err)},
            )
            return CONFIG_ERROR, None, logger

    if config is not None:
        bootstrap(config.global_config, log_level=args.log_level)
    else:
        logger.debug(
            "No config provided, running with defaults",
            extra={"command": command_name},
        )

    return SUCCESS, config, logger


def _resolve_project_root() -> Path:
    """Find the project root so relative config paths resolve consistently."""
    from bertok.utils.paths import resolve_project_root

    return resolve_project_root()


def _require_tokenizer_config(
    config: Optional[BertokConfig],
    logger: logging.Logger,
    command_name: str,
) -> bool:
    if config is None or config.tokenizer is None:
        logger.error(
            "A config with a tokenizer section is required, use --config",
            extra={"command": command_name},
        )
        return False
    return True


def _read_sequences(args: argparse.Namespace) -> Optional[list[str]]:
    """
    Collect input sequences from --text or --input-file.

    Returns None when neither was given, or the input file doesn't exist.
    """
    from bertok.tokenizer.streaming.reader import stream_sequences

    text = getattr(args, "text", None)
    input_file = getattr(args, "input_file", None)

    if input_file:
        input_path = Path(input_file)
        if not input_path.is_file():
            return None
        return list(stream_sequences(input_path))

    if text is not None:
        return [text]

    return None


def _collect_sequences(
    args: argparse.Namespace,
    logger: logging.Logger,
) -> tuple[int, list[str]]:
    """Read the input, mapping unreadable or non-UTF-8 files to USER_ERROR."""
    try:
        sequences = _read_sequences(args)
    except (OSError, UnicodeDecodeError) as err:
        logger.error(
            "Cannot read input",
            extra={"input_file": getattr(args, "input_file", None), "error": str(err)},
        )
        return USER_ERROR, []

    if sequences is None:
        logger.error("No input provided, use --text or an existing --input-file")
        return USER_ERROR, []
    return SUCCESS, sequences


def _check_max_length(args: argparse.Namespace, logger: logging.Logger) -> bool:
    max_length = getattr(args, "max_length", None)
    if max_length is not None and not MIN_SEQUENCE_LENGTH <= max_length <= MAX_SEQUENCE_LENGTH:
        logger.error(
            f"--max-length must be between {MIN_SEQUENCE_LENGTH} and {MAX_SEQUENCE_LENGTH}",
            extra={"max_length": max_length},
        )
        return False
    return True


def _build_tokenizer(config: BertokConfig):
    from bertok.tokenizer.full.core import FullTokenizer

    return FullTokenizer.from_config(config.tokenizer, project_root=_resolve_project_root())


def _encoder_config(config: BertokConfig, args: argparse.Namespace) -> EncoderConfig:
    """The config's encoder section, or defaults, with --max-length applied on top."""
    encoder_config = config.encoder
    if encoder_config is None:
        encoder_config = EncoderConfig(config_version=config.tokenizer.config_version)

    max_length = getattr(args, "max_length", None)
    if max_length is not None:
        encoder_config = EncoderConfig.model_validate(
            {**encoder_config.model_dump(), "max_sequence_length": max_length}
        )
    return encoder_config


def handle_tokenize(args: argparse.Namespace) -> int:
    """Split text into WordPiece tokens and their ids."""
    exit_code, config, logger = _load_and_bootstrap(args, "tokenize")
    if exit_code != SUCCESS:
        return exit_code

    if not _require_tokenizer_config(config, logger, "tokenize"):
        return CONFIG_ERROR

    exit_code, sequences = _collect_sequences(args, logger)
    if exit_code != SUCCESS:
        return exit_code

    try:
        tokenizer = _build_tokenizer(config)

        for index, sequence in enumerate(sequences):
            tokens = tokenizer.tokenize(sequence)
            logger.info(
                "Tokenized",
                extra={
                    "index": index,
                    "tokens": tokens,
                    "ids": tokenizer.convert_to_ids(tokens),
                },
            )

        logger.info("Tokenization complete", extra={"sequences": len(sequences)})
        return SUCCESS

    except VocabularyLoadError as err:
        logger.error("Vocabulary could not be loaded", extra={"error": str(err)})
        return VALIDATION_ERROR
    except Exception as err:
        logger.error("Tokenization failed", extra={"error": str(err)}, exc_info=True)
        return RUNTIME_ERROR


def handle_encode(args: argparse.Namespace) -> int:
    """Encode text into fixed-length input_ids / input_mask / segment_ids rows."""
    exit_code, config, logger = _load_and_bootstrap(args, "encode")
    if exit_code != SUCCESS:
        return exit_code

    if not _require_tokenizer_config(config, logger, "encode"):
        return CONFIG_ERROR

    if not _check_max_length(args, logger):
        return USER_ERROR

    exit_code, sequences = _collect_sequences(args, logger)
    if exit_code != SUCCESS:
        return exit_code

    try:
        from bertok.encoder.core import SequenceEncoder
        from bertok.utils.filesystem import atomic_write

        encoder_config = _encoder_config(config, args)
        tokenizer = _build_tokenizer(config)
        encoder = SequenceEncoder.from_config(tokenizer, config.tokenizer, encoder_config)
        batch = encoder.encode_batch(sequences)

        truncated = sum(1 for row in batch.rows if row.truncated)
        output_file = getattr(args, "output_file", None)

        if output_file:
            if args.dry_run:
                logger.info("Dry run, would write encoded rows", extra={"path": output_file})
            else:
                lines = [
                    json.dumps(
                        {
                            encoder_config.input_ids_name: row.input_ids,
                            encoder_config.input_mask_name: row.attention_mask,
                            encoder_config.segment_ids_name: row.segment_ids,
                        }
                    )
                    for row in batch.rows
                ]
                atomic_write(Path(output_file), "".join(line + "\n" for line in lines))
        else:
            for index, row in enumerate(batch.rows):
                logger.info(
                    "Encoded",
                    extra={
                        "index": index,
                        encoder_config.input_ids_name: row.input_ids,
                        encoder_config.input_mask_name: row.attention_mask,
                        encoder_config.segment_ids_name: row.segment_ids,
                    },
                )

        logger.info(
            "Encoding complete",
            extra={
                "rows": len(batch),
                "max_sequence_length": batch.max_sequence_length,
                "truncated": truncated,
                "output_file": output_file,
            },
        )
        return SUCCESS

    except VocabularyLoadError as err:
        logger.error("Vocabulary could not be loaded", extra={"error": str(err)})
        return VALIDATION_ERROR
    except Exception as err:
        logger.error("Encoding failed", extra={"error": str(err)}, exc_info=True)
        return RUNTIME_ERROR


def handle_stats(args: argparse.Namespace) -> int:
    """Report vocabulary coverage and truncation over a sample of text."""
    exit_code, config, logger = _load_and_bootstrap(args, "stats")
    if exit_code != SUCCESS:
        return exit_code

    if not _require_tokenizer_config(config, logger, "stats"):
        return CONFIG_ERROR

    if not _check_max_length(args, logger):
        return USER_ERROR

    exit_code, sequences = _collect_sequences(args, logger)
    if exit_code != SUCCESS:
        return exit_code

    try:
        from bertok.tokenizer.metrics.core import compute_metrics

        tokenizer = _build_tokenizer(config)
        max_length = _encoder_config(config, args).max_sequence_length
        metrics = compute_metrics(tokenizer, sequences, max_sequence_length=max_length)

        logger.info("Tokenizer stats", extra=metrics._asdict())
        return SUCCESS

    except VocabularyLoadError as err:
        logger.error("Vocabulary could not be loaded", extra={"error": str(err)})
        return VALIDATION_ERROR
    except Exception as err:
        logger.error("Stats failed", extra={"error": str(err)}, exc_info=True)
        return RUNTIME_ERROR


def _resolve_bundle_dir(
    args: argparse.Namespace,
    config: Optional[BertokConfig],
) -> Path:
    """--output-dir / --bundle-dir first, then the export config, then the default."""
    explicit = getattr(args, "output_dir", None) or getattr(args, "bundle_dir", None)
    if explicit:
        return Path(explicit)

    project_root = _resolve_project_root()
    if config is not None and config.export is not None:
        return project_root / config.export.output_directory
    return project_root / DEFAULT_BUNDLE_DIRECTORY


def handle_export(args: argparse.Namespace) -> int:
    """Write the tokenizer artifact bundle."""
    exit_code, config, logger = _load_and_bootstrap(args, "export")
    if exit_code != SUCCESS:
        return exit_code

    if not _require_tokenizer_config(config, logger, "export"):
        return CONFIG_ERROR

    try:
        output_dir = _resolve_bundle_dir(args, config)
        logger.info(
            "Starting export",
            extra={"command": "export", "dry_run": args.dry_run, "output_dir": str(output_dir)},
        )

        if args.dry_run:
            logger.info("Dry run, would export tokenizer bundle")
            return SUCCESS

        from bertok.tokenizer.artifacts.bundle import export_bundle

        tokenizer = _build_tokenizer(config)
        result = export_bundle(tokenizer, config.tokenizer, output_dir)

        logger.info(
            "Export complete",
            extra={
                "output_dir": result.output_directory,
                "version_hash": result.version_hash[:16] + "...",
                "vocab_size": result.vocab_size,
            },
        )
        return SUCCESS

    except VocabularyLoadError as err:
        logger.error("Vocabulary could not be loaded", extra={"error": str(err)})
        return VALIDATION_ERROR
    except Exception as err:
        logger.error("Export failed", extra={"error": str(err)}, exc_info=True)
        return RUNTIME_ERROR


def handle_verify(args: argparse.Namespace) -> int:
    """Validate a tokenizer bundle against its checksums."""
    exit_code, config, logger = _load_and_bootstrap(args, "verify")
    if exit_code != SUCCESS:
        return exit_code

    try:
        from bertok.tokenizer.artifacts.bundle import verify_bundle

        bundle_dir = _resolve_bundle_dir(args, config)
        if not bundle_dir.is_dir():
            logger.error("Bundle directory not found", extra={"path": str(bundle_dir)})
            return VALIDATION_ERROR

        if not verify_bundle(bundle_dir):
            logger.error("Integrity check failed", extra={"path": str(bundle_dir)})
            return VALIDATION_ERROR

        logger.info("Integrity check passed", extra={"path": str(bundle_dir)})
        return SUCCESS

    except Exception as err:
        logger.error("Verification failed", extra={"error": str(err)}, exc_info=True)
        return RUNTIME_ERROR


def handle_info(args: argparse.Namespace) -> int:
    """Display environment and configuration information."""
    logger = get_logger("bertok.cli.info", log_level=args.log_level or "INFO")

    from bertok import __version__
    from bertok.runtime.environment import get_system_info

    system_info = get_system_info()

    logger.info(
        "System information",
        extra={
            "bertok_version": __version__,
            "python_version": system_info.python_version,
            "unicode_version": system_info.unicode_version,
            "platform": system_info.platform,
            "architecture": system_info.architecture,
            "library_versions": system_info.library_versions,
            "config": args.config,
        },
    )
    return SUCCESS
