"""
SecretStore

Coordinates multi-recipient gpg encryption for a small group of users
sharing a directory of exported public keys and a keylist.
"""

__version__ = "0.1.0"

from .config import StoreConfig, default_key_name
from .errors import (
    SecretStoreError,
    UsageError,
    PreconditionError,
    KeyringError,
    SettingsError,
)
from .keyring import KeyringClient, GpgKeyring
from .locator import find_key_directory
from .registry import Registry, RegistryEntry
from .settings import Settings
from .store import SecretStore

__all__ = [
    "StoreConfig",
    "default_key_name",
    "SecretStoreError",
    "UsageError",
    "PreconditionError",
    "KeyringError",
    "SettingsError",
    "KeyringClient",
    "GpgKeyring",
    "find_key_directory",
    "Registry",
    "RegistryEntry",
    "Settings",
    "SecretStore",
]
