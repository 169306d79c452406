"""
Global configuration and environment handling.

This module is responsible for:
- Defining global constants and defaults (file names, suffixes)
- Naming the environment variables the tool honours
- Providing the StoreConfig context value threaded into every operation

Nothing in this file should depend on:
- the external keyring tool
- the settings file structure
- CLI arguments

If something here changes, the on-disk layout of every key directory changes.
"""

from __future__ import annotations

import getpass
import os
import socket
from dataclasses import dataclass
from pathlib import Path
from typing import Final, Optional

# ---------------------------------------------------------------------------
# Tool / format versioning
# ---------------------------------------------------------------------------

SUPPORTED_SETTINGS_VERSION: Final[int] = 1
TOOL_VERSION: Final[str] = "0.1.0"

# ---------------------------------------------------------------------------
# Key directory layout
# ---------------------------------------------------------------------------

DEFAULT_MARKER: Final[str] = ".secretstore"
DEFAULT_KEYLIST: Final[str] = "keylist"
KEY_SUFFIX: Final[str] = ".pub"
CIPHER_SUFFIX: Final[str] = ".gpg"

# ---------------------------------------------------------------------------
# External tool defaults
# ---------------------------------------------------------------------------

DEFAULT_GPG_BINARY: Final[str] = "gpg"
DEFAULT_ALWAYS_TRUST: Final[bool] = True

# ---------------------------------------------------------------------------
# Environment variable names
# ---------------------------------------------------------------------------

ENV_KEYDIR: Final[str] = "SECRETSTORE_KEYDIR"
ENV_CONFIG: Final[str] = "SECRETSTORE_CONFIG"
ENV_GPG: Final[str] = "SECRETSTORE_GPG"


# ---------------------------------------------------------------------------
# Store context
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StoreConfig:
    key_directory: Path
    registry_path: Path
    key_suffix: str = KEY_SUFFIX
    cipher_suffix: str = CIPHER_SUFFIX

    @classmethod
    def for_directory(
        cls, key_directory: str | Path, keylist: str = DEFAULT_KEYLIST
    ) -> "StoreConfig":
        """Build a config rooted at an (absolute) key directory."""
        key_directory = Path(key_directory).absolute()
        return cls(
            key_directory=key_directory,
            registry_path=key_directory / keylist,
        )

    def key_file(self, key_name: str) -> Path:
        return self.key_directory / f"{key_name}{self.key_suffix}"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def get_keydir_override() -> Optional[str]:
    """
    Return the key directory forced through the environment, if any.
    """

    return os.getenv(ENV_KEYDIR) or None


def get_settings_path() -> Optional[str]:
    """Return the settings file named in the environment, if any."""
    return os.getenv(ENV_CONFIG) or None


def get_gpg_binary(default: str = DEFAULT_GPG_BINARY) -> str:
    return os.getenv(ENV_GPG) or default


def default_key_name() -> str:
    """
    Derive a key name from the current user and host.

    This is a convenience default, not a uniqueness guarantee.

    Returns:
        str: "<user>@<host>"
    """

    return f"{getpass.getuser()}@{socket.gethostname()}"
