# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Runtime bootstrap for bertok.

The one-time setup every CLI command runs before doing real work:
  1. Validate the environment (Python version)
  2. Configure the package logger from the global config
  3. Log what we're running on

Tokenization itself needs no setup at all; this only exists so that every
command starts from the same logging configuration.
"""

from pathlib import Path
from typing import Optional

from bertok.config.schema import GlobalConfig
from bertok.logging.logger import get_logger
from bertok.runtime.environment import check_minimum_python, get_system_info


def bootstrap(config: GlobalConfig, log_level: Optional[str] = None) -> None:
    """
    Run the bootstrap sequence.

    Args:
        config: The validated global configuration.
        log_level: Overrides config.log_level when given (the CLI's
            --log-level flag).

    Raises:
        RuntimeError: If the interpreter is too old.
    """
    check_minimum_python()

    log_file = None
    if config.log_file is not None:
        log_file = Path(config.log_file)

    logger = get_logger(
        "bertok.runtime",
        log_level=log_level or config.log_level,
        log_file=log_file,
    )

    system_info = get_system_info()
    logger.info(
        "bertok bootstrap complete",
        extra={
            "project_name": config.project_name,
            "python_version": system_info.python_version,
            "unicode_version": system_info.unicode_version,
            "platform": system_info.platform,
            "architecture": system_info.architecture,
        },
    )
