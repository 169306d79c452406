"""
Settings file loading, validation, and normalization.

This module answers one question:
    "How does the user want this machine's store to behave?"

Responsibilities:
- Load the optional settings YAML file
- Validate structure and version
- Normalize defaults
- Expose a clean Python representation

This module does NOT:
- Locate the key directory
- Touch the keylist or key files
- Run the external keyring tool
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .config import (
    SUPPORTED_SETTINGS_VERSION,
    DEFAULT_MARKER,
    DEFAULT_KEYLIST,
    DEFAULT_GPG_BINARY,
    DEFAULT_ALWAYS_TRUST,
)
from .errors import SettingsError


# ---------------------------------------------------------------------------
# Data models
# ---------------------------------------------------------------------------


@dataclass
class StoreSettings:
    marker: str = DEFAULT_MARKER
    keylist: str = DEFAULT_KEYLIST
    key_directory: Optional[str] = None


@dataclass
class GpgSettings:
    binary: str = DEFAULT_GPG_BINARY
    homedir: Optional[str] = None
    always_trust: bool = DEFAULT_ALWAYS_TRUST
    extra_args: List[str] = field(default_factory=list)


@dataclass
class Settings:
    version: int = SUPPORTED_SETTINGS_VERSION
    store: StoreSettings = field(default_factory=StoreSettings)
    gpg: GpgSettings = field(default_factory=GpgSettings)

    # ------------------------------------------------------------------
    # Loading API
    # ------------------------------------------------------------------

    @classmethod
    def load(cls, path: Optional[str | Path]) -> "Settings":
        """
        Load and validate a settings file.

        A path of None means "no settings file" and yields defaults.

        Args:
            path: Path to the settings YAML file

        Raises:
            SettingsError: if the file is missing or invalid

        Returns:
            Settings
        """

        if path is None:
            return cls()

        path = Path(path)
        if not path.exists():
            raise SettingsError(f"Settings file not found: {path}")

        try:
            with path.open("r", encoding="utf-8") as fh:
                raw = yaml.safe_load(fh) or {}
        except yaml.YAMLError as e:
            raise SettingsError(f"Invalid YAML in {path}: {e}") from e

        if not isinstance(raw, dict):
            raise SettingsError(f"Settings file must contain a mapping: {path}")

        return cls._from_dict(raw)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "Settings":
        version = data.get("version", SUPPORTED_SETTINGS_VERSION)
        if version != SUPPORTED_SETTINGS_VERSION:
            raise SettingsError(f"Unsupported settings version: {version}")

        return cls(
            version=version,
            store=cls._parse_store(cls._section(data, "store")),
            gpg=cls._parse_gpg(cls._section(data, "gpg")),
        )

    @staticmethod
    def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
        section = data.get(name) or {}
        if not isinstance(section, dict):
            raise SettingsError(f"Section '{name}' must be a mapping")
        return section

    @staticmethod
    def _parse_store(data: Dict[str, Any]) -> StoreSettings:
        marker = str(data.get("marker", DEFAULT_MARKER))
        keylist = str(data.get("keylist", DEFAULT_KEYLIST))

        for name, value in (("marker", marker), ("keylist", keylist)):
            if not value or "/" in value:
                raise SettingsError(f"store.{name} must be a plain file name")

        key_directory = data.get("key_directory")
        return StoreSettings(
            marker=marker,
            keylist=keylist,
            key_directory=str(key_directory) if key_directory else None,
        )

    @staticmethod
    def _parse_gpg(data: Dict[str, Any]) -> GpgSettings:
        extra_args = data.get("extra_args", [])
        if not isinstance(extra_args, list):
            raise SettingsError("gpg.extra_args must be a list")

        always_trust = data.get("always_trust", DEFAULT_ALWAYS_TRUST)
        if not isinstance(always_trust, bool):
            raise SettingsError("gpg.always_trust must be true or false")

        homedir = data.get("homedir")
        return GpgSettings(
            binary=str(data.get("binary", DEFAULT_GPG_BINARY)),
            homedir=str(homedir) if homedir else None,
            always_trust=always_trust,
            extra_args=[str(arg) for arg in extra_args],
        )
