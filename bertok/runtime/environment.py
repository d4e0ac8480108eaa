# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
What the tokenizer's output depends on, besides the vocabulary.

Segmentation reads Unicode categories straight from `unicodedata`, so the
interpreter's Unicode database version decides how rare characters are
split. Bundles exported with `tokenizers` and tensors built with `torch`
depend on those library versions too. This module gathers all of that for
`bertok info` and the bootstrap log line, and refuses to run on an
interpreter older than the package supports.
"""

import platform
import sys
import unicodedata
from importlib import metadata
from typing import NamedTuple, Optional

MINIMUM_PYTHON_MAJOR = 3
MINIMUM_PYTHON_MINOR = 10

# Distributions whose versions change exported artifacts or tensors.
TRACKED_DISTRIBUTIONS = ("tokenizers", "torch", "pydantic", "PyYAML")


class SystemInfo(NamedTuple):
    python_version: str
    unicode_version: str
    platform: str
    architecture: str
    library_versions: dict[str, Optional[str]]


def get_python_version() -> tuple[int, int, int]:
    """Return the current Python version as a (major, minor, micro) tuple."""
    return tuple(sys.version_info[:3])  # type: ignore[return-value]


def check_minimum_python() -> None:
    """
    Raises:
        RuntimeError: If the interpreter is older than 3.10.
    """
    major, minor, _ = get_python_version()
    if (major, minor) < (MINIMUM_PYTHON_MAJOR, MINIMUM_PYTHON_MINOR):
        raise RuntimeError(
            f"bertok requires Python >= {MINIMUM_PYTHON_MAJOR}.{MINIMUM_PYTHON_MINOR}, "
            f"but you're running {major}.{minor}. Please upgrade."
        )


def get_library_versions(
    distributions: tuple[str, ...] = TRACKED_DISTRIBUTIONS,
) -> dict[str, Optional[str]]:
    """Installed version per distribution name, None where it isn't installed."""
    versions: dict[str, Optional[str]] = {}
    for name in distributions:
        try:
            versions[name] = metadata.version(name)
        except metadata.PackageNotFoundError:
            versions[name] = None
    return versions


def get_system_info() -> SystemInfo:
    return SystemInfo(
        python_version=platform.python_version(),
        unicode_version=unicodedata.unidata_version,
        platform=platform.system(),
        architecture=platform.machine(),
        library_versions=get_library_versions(),
    )
