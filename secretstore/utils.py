"""
Shared utility helpers.

This module contains small, reusable helpers that do not belong
to keylist bookkeeping or keyring orchestration.
"""

from __future__ import annotations

from pathlib import Path


# ---------------------------------------------------------------------------
# Naming helpers
# ---------------------------------------------------------------------------


def add_suffix(path: Path, suffix: str) -> Path:
    """Return ``path`` with ``suffix`` appended to its full name."""
    return path.with_name(path.name + suffix)


def strip_suffix(path: Path, suffix: str) -> Path:
    """Return ``path`` without a trailing ``suffix``."""
    if not path.name.endswith(suffix):
        raise ValueError(f"{path} does not end with {suffix}")
    return path.with_name(path.name[: -len(suffix)])


def has_suffix(path: Path, suffix: str) -> bool:
    return path.name.endswith(suffix) and path.name != suffix


# ---------------------------------------------------------------------------
# Filesystem helpers
# ---------------------------------------------------------------------------


def ensure_dir(path: Path) -> None:
    """Ensure a directory exists."""
    path.mkdir(parents=True, exist_ok=True)
