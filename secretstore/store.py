"""
Store orchestration: export, import, encrypt, decrypt and clean.

SecretStore glues the keylist, the key directory and a KeyringClient
together. It performs no console output; per-file operations return (or
yield) what they did so the caller can report progress.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Iterator, List, Optional

from .config import StoreConfig, default_key_name
from .errors import PreconditionError, UsageError
from .file_scanner import FileScanner
from .keyring import KeyringClient
from .registry import Registry, RegistryEntry
from .utils import add_suffix, ensure_dir, has_suffix, strip_suffix


class SecretStore:
    def __init__(self, config: StoreConfig, keyring: KeyringClient):
        self.config = config
        self.keyring = keyring
        self.registry = Registry(config.registry_path)

    # ------------------------------------------------------------------
    # Keys
    # ------------------------------------------------------------------

    def export_key(self, key_id: str, key_name: Optional[str] = None) -> Path:
        """
        Export a public key into the key directory and register it.

        Raises:
            UsageError: if key_id is empty or contains whitespace,
                or key_name is not a plain file name
            PreconditionError: if the key file already exists
            KeyringError: if the keyring export fails

        Returns:
            Path: the written key file
        """

        if not key_id:
            raise UsageError("A key id is required")
        if any(ch.isspace() for ch in key_id):
            raise UsageError(
                f"Key id must not contain whitespace: {key_id!r} (use the key fingerprint)"
            )

        key_name = key_name or default_key_name()
        self._check_key_name(key_name)

        ensure_dir(self.config.key_directory)
        key_file = self.config.key_file(key_name)

        # Not atomic: a concurrent export may pass the same check
        if key_file.exists():
            raise PreconditionError(
                f"Key file already exists: {key_file} "
                f"(delete it and its line in {self.config.registry_path} to re-export)"
            )

        self.keyring.export_key(key_id, key_file)
        self.registry.append(key_id, key_name)
        return key_file

    @staticmethod
    def _check_key_name(key_name: str) -> None:
        # The name becomes a file inside the key directory and a keylist column
        separators = {"/", os.sep, os.altsep} - {None}
        if (
            key_name in (".", "..")
            or any(sep in key_name for sep in separators)
            or any(ch in key_name for ch in "\r\n\0")
        ):
            raise UsageError(f"Key name must be a plain file name: {key_name!r}")

    def key_files(self) -> List[Path]:
        directory = self.config.key_directory
        if not directory.is_dir():
            return []
        return sorted(
            path
            for path in directory.glob(f"*{self.config.key_suffix}")
            if path.is_file()
        )

    def import_keys(self) -> Iterator[Path]:
        """
        Import every exported key file into the local keyring.

        Yields each file after it has been imported. Stops at the first
        failure by letting the KeyringError propagate.
        """

        for key_file in self.key_files():
            self.keyring.import_key(key_file)
            yield key_file

    def entries(self) -> List[RegistryEntry]:
        return self.registry.entries()

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------

    def recipients(self) -> List[str]:
        if not self.registry.exists():
            raise PreconditionError(f"Keylist not found: {self.config.registry_path}")

        key_ids = self.registry.key_ids()
        if not key_ids:
            raise PreconditionError(f"Keylist is empty: {self.config.registry_path}")

        return key_ids

    def check_encrypt(self, paths: Iterable[Path]) -> List[str]:
        """
        Validate an encrypt batch before any keyring call.

        Returns:
            List[str]: recipient key ids, in keylist order
        """

        paths = list(paths)
        if not paths:
            raise UsageError("At least one file is required")

        for path in paths:
            if not path.is_file():
                raise PreconditionError(f"File not found: {path}")

        return self.recipients()

    def encrypt_file(self, path: Path, recipients: List[str]) -> Path:
        output_path = add_suffix(path, self.config.cipher_suffix)
        self.keyring.encrypt_to(recipients, path, output_path)
        return output_path

    def check_decrypt(self, paths: Iterable[Path]) -> None:
        paths = list(paths)
        if not paths:
            raise UsageError("At least one file is required")

        for path in paths:
            if not path.is_file():
                raise PreconditionError(f"File not found: {path}")
            if not has_suffix(path, self.config.cipher_suffix):
                raise PreconditionError(
                    f"Not a {self.config.cipher_suffix} file: {path}"
                )

    def decrypt_file(self, path: Path) -> Path:
        output_path = strip_suffix(path, self.config.cipher_suffix)
        self.keyring.decrypt(path, output_path)
        return output_path

    def clean(self, root: Path, dry_run: bool = False) -> Iterator[Path]:
        """
        Delete plaintext files that have a ciphertext sibling under root.

        Yields each plaintext path removed (or that would be, in dry-run).
        """

        scanner = FileScanner(root, self.config.cipher_suffix)
        for _, plaintext in scanner.scan_pairs():
            if not dry_run:
                plaintext.unlink()
            yield plaintext
