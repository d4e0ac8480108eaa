# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Path utilities for bertok.

Relative paths in a config (the vocab file, the export directory) are
resolved against a project root, so commands behave the same no matter
which subdirectory they're launched from.
"""

from pathlib import Path
from typing import Optional


def resolve_project_root(start: Optional[Path] = None) -> Path:
    """
    Walk up from `start` (default: the working directory) to the nearest
    directory containing pyproject.toml.

    If there isn't one, the starting directory itself is the root. bertok is
    usually installed as a library, so a missing marker is normal.
    """
    origin = (start or Path.cwd()).resolve()
    current = origin
    while current != current.parent:
        if (current / "pyproject.toml").exists():
            return current
        current = current.parent
    return origin


def ensure_directory(path: Path) -> Path:
    """Create a directory (and parents) if it doesn't exist. Returns the path for chaining."""
    path.mkdir(parents=True, exist_ok=True)
    return path
