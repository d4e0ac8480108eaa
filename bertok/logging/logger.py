# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Structured JSON logger for bertok.

Every log entry is one JSON object per line: timestamped, leveled, tagged
with the logger name, plus whatever context the caller attached via `extra`.
Nothing in the package calls print().

How this works:
  - Python's standard `logging` module does the plumbing; JsonFormatter
    replaces the default formatter.
  - Handlers live on the "bertok" package logger only: one for stdout,
    and optionally one for a file. Module loggers propagate up to it.
  - `get_logger` is the only way modules get a logger.

The JSON structure looks like:
  {"ts": "2026-...", "level": "INFO", "module": "bertok.tokenizer.vocab", "msg": "Loaded vocabulary", ...}
"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

# LogRecord attributes that are plumbing, not caller context.
_STANDARD_ATTRS = frozenset({
    "name",
    "msg",
    "args",
    "created",
    "relativeCreated",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "pathname",
    "filename",
    "module",
    "levelno",
    "levelname",
    "processName",
    "process",
    "threadName",
    "thread",
    "message",
    "msecs",
    "taskName",
})


class JsonFormatter(logging.Formatter):
    """
    Formats log records as single-line JSON objects.

    Mandatory fields:
      ts     ISO 8601 UTC timestamp
      level  log level name
      module the logger name
      msg    the formatted message string

    Fields passed through `extra` are merged in as additional keys, and an
    exception traceback (when logged with exc_info) lands under "exc".
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "ts": datetime.now(tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "module": record.name,
            "msg": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS and not key.startswith("_"):
                entry[key] = value

        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str, ensure_ascii=False)


_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _resolve_log_level(level_name: str) -> int:
    """Turn a level name string into the corresponding logging constant."""
    upper = level_name.upper()
    if upper not in _VALID_LOG_LEVELS:
        raise ValueError(
            f"Invalid log level '{level_name}'. Must be one of: {', '.join(sorted(_VALID_LOG_LEVELS))}"
        )
    return getattr(logging, upper)


# The package logger. Every module logger is a child of it and inherits its
# level and handlers.
PACKAGE_LOGGER_NAME = "bertok"

# Handlers installed by configure_logging carry this name prefix. Anything
# else attached to the package logger is left in place on reconfiguration.
_HANDLER_NAME_PREFIX = "bertok."


def _is_installed(handler: logging.Handler) -> bool:
    name = handler.get_name()
    return name is not None and name.startswith(_HANDLER_NAME_PREFIX)


def configure_logging(
    log_level: str = "INFO",
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """
    (Re)configure the package logger.

    Replaces the handlers installed by an earlier call, so the last
    configuration wins and handlers never stack. Handlers attached by
    other code are kept.

    Args:
        log_level: One of DEBUG, INFO, WARNING, ERROR, CRITICAL.
        log_file: Optional path to a log file. If provided, logs go to both
                  stdout and the file.

    Returns:
        The configured package logger.
    """
    level = _resolve_log_level(log_level)
    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    package_logger.setLevel(level)

    for handler in list(package_logger.handlers):
        if _is_installed(handler):
            package_logger.removeHandler(handler)
            handler.close()

    formatter = JsonFormatter()

    stdout_handler = logging.StreamHandler(stream=sys.stdout)
    stdout_handler.set_name(_HANDLER_NAME_PREFIX + "stdout")
    stdout_handler.setFormatter(formatter)
    package_logger.addHandler(stdout_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
        file_handler.set_name(_HANDLER_NAME_PREFIX + "file")
        file_handler.setFormatter(formatter)
        package_logger.addHandler(file_handler)

    package_logger.propagate = False

    return package_logger


def get_logger(
    name: str,
    log_level: Optional[str] = None,
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """
    Get a structured JSON logger under the `bertok` package logger.

    Module loggers carry no handlers or level of their own; output and
    verbosity come from the package logger. Passing log_level or log_file
    reconfigures the package logger for every module at once. Without them
    the current configuration is left alone, and an unconfigured package
    logger gets INFO to stdout.

    Args:
        name: Logger name, typically the dotted module path under "bertok".
        log_level: One of DEBUG, INFO, WARNING, ERROR, CRITICAL.
        log_file: Optional path to a log file.

    Returns:
        A logging.Logger that outputs structured JSON.
    """
    if log_level is not None or log_file is not None:
        configure_logging(log_level or "INFO", log_file)
    elif not any(_is_installed(handler) for handler in logging.getLogger(PACKAGE_LOGGER_NAME).handlers):
        configure_logging()

    return logging.getLogger(name)
