"""
Error taxonomy.

Every failure the tool reports on purpose derives from SecretStoreError.
The CLI dispatcher is the only place these are caught.
"""

from __future__ import annotations


class SecretStoreError(RuntimeError):
    pass


class UsageError(SecretStoreError):
    """Missing or invalid command-line arguments."""


class PreconditionError(SecretStoreError):
    """A check failed before any work was done."""


class SettingsError(SecretStoreError):
    pass


class KeyringError(SecretStoreError):
    """gpg failed; ``detail`` carries its own diagnostics."""

    def __init__(self, operation: str, detail: str = "", status: str = ""):
        self.operation = operation
        self.detail = detail
        self.status = status or ""
        msg = f"gpg {operation} failed"
        if self.status:
            msg = f"{msg} ({self.status})"
        if detail:
            msg = f"{msg}:\n{detail}"
        super().__init__(msg)
