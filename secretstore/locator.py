"""
Key directory discovery.

Walks from a starting directory towards the filesystem root looking for
the marker directory. Nothing here creates directories or changes the
process working directory.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, Optional

from .config import DEFAULT_MARKER


def find_key_directory(
    start: str | Path,
    marker: str = DEFAULT_MARKER,
    is_dir: Callable[[Path], bool] = os.path.isdir,
) -> Path:
    """
    Return the closest ``marker`` directory at or above ``start``.

    Falls back to ``start/marker`` when no ancestor has one. The result
    is always absolute.
    """

    start = Path(start).absolute()

    for directory in (start, *start.parents):
        candidate = directory / marker
        if is_dir(candidate):
            return candidate

    return start / marker


def resolve_key_directory(
    start: str | Path,
    marker: str = DEFAULT_MARKER,
    override: Optional[str | Path] = None,
) -> Path:
    """Honour an explicit override, otherwise search upwards."""
    if override:
        return Path(override).expanduser().absolute()
    return find_key_directory(start, marker)
