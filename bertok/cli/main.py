# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
CLI entrypoint for bertok.

This is the single root command; every operation is a subcommand of `bertok`.
The global options (--config, --log-level, --dry-run) are inherited by every
subcommand through argparse's parent parser mechanism.

Usage:
    bertok <subcommand> [options]
    bertok tokenize --config configs/bertok.yaml --text "Hello world"
    bertok encode --config configs/bertok.yaml --input-file corpus.jsonl --output-file rows.jsonl
    bertok verify --bundle-dir data/tokenizer
"""

import argparse
import sys

from bertok.cli.commands import (
    handle_encode,
    handle_export,
    handle_info,
    handle_stats,
    handle_tokenize,
    handle_verify,
)
from bertok.cli.exit_codes import USER_ERROR


def _build_global_parser() -> argparse.ArgumentParser:
    """
    Build the parent parser with global options.

    add_help=False keeps its help text from colliding with the subcommand
    parsers that inherit from it.
    """
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to YAML configuration file.",
    )
    parent.add_argument(
        "--log-level",
        type=str,
        default=None,
        dest="log_level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging verbosity for every bertok logger. Overrides global.log_level; INFO when neither is set.",
    )
    parent.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        dest="dry_run",
        help="Simulate the command without writing files.",
    )
    return parent


def _add_input_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--text", type=str, default=None, help="A single sequence to process.")
    parser.add_argument(
        "--input-file",
        type=str,
        default=None,
        dest="input_file",
        help="A .txt (one sequence per line) or .jsonl (\"text\" field) file.",
    )


def _register_subcommands(
    subparsers: argparse._SubParsersAction,  # type: ignore[type-arg]
    parent: argparse.ArgumentParser,
) -> None:
    """
    Register all subcommands with their handler functions.

    Each subcommand gets the global options from the parent parser and sets
    its handler via set_defaults(func=...).
    """
    commands = [
        ("tokenize", "Split text into WordPiece tokens and ids.", handle_tokenize),
        ("encode", "Encode text into fixed-length model inputs.", handle_encode),
        ("stats", "Report unknown-token rate and truncation over text.", handle_stats),
        ("export", "Write the tokenizer artifact bundle.", handle_export),
        ("verify", "Validate a tokenizer bundle's checksums.", handle_verify),
        ("info", "Display environment and config info.", handle_info),
    ]

    for name, help_text, handler in commands:
        parser = subparsers.add_parser(name, parents=[parent], help=help_text)
        parser.set_defaults(func=handler)

    for name in ("tokenize", "encode", "stats"):
        _add_input_arguments(subparsers.choices[name])

    for name in ("encode", "stats"):
        subparsers.choices[name].add_argument(
            "--max-length",
            type=int,
            default=None,
            dest="max_length",
            help="Override encoder.max_sequence_length.",
        )

    subparsers.choices["encode"].add_argument(
        "--output-file",
        type=str,
        default=None,
        dest="output_file",
        help="Write encoded rows as JSONL instead of logging them.",
    )
    subparsers.choices["export"].add_argument(
        "--output-dir",
        type=str,
        default=None,
        dest="output_dir",
        help="Bundle directory (overrides export.output_directory).",
    )
    subparsers.choices["verify"].add_argument(
        "--bundle-dir",
        type=str,
        default=None,
        dest="bundle_dir",
        help="Path to a tokenizer bundle to verify.",
    )


def main() -> None:
    """
    Main CLI entrypoint, referenced by pyproject.toml's [project.scripts].

    If no subcommand is given, we show help and exit with USER_ERROR.
    """
    parent = _build_global_parser()

    root_parser = argparse.ArgumentParser(
        prog="bertok",
        description="bertok: BERT WordPiece tokenization and sequence encoding.",
        parents=[parent],
    )
    subparsers = root_parser.add_subparsers(dest="command")
    _register_subcommands(subparsers, parent)

    args = root_parser.parse_args()

    if not hasattr(args, "func") or args.func is None:
        root_parser.print_help()
        sys.exit(USER_ERROR)

    exit_code = args.func(args)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
