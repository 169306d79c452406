"""
Keyring access: the only place gpg is driven.

KeyringClient is the narrow interface the store orchestrates against.
GpgKeyring implements it with python-gnupg. It is intentionally dumb
about key directories, keylists and batching.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional, Sequence

import gnupg

from .config import DEFAULT_GPG_BINARY, DEFAULT_ALWAYS_TRUST
from .errors import KeyringError


class KeyringClient:
    """Operations the store needs from a keyring."""

    def export_key(self, key_id: str, destination: Path) -> None:
        raise NotImplementedError

    def import_key(self, source: Path) -> None:
        raise NotImplementedError

    def encrypt_to(self, recipients: Sequence[str], source: Path, destination: Path) -> None:
        raise NotImplementedError

    def decrypt(self, source: Path, destination: Path) -> None:
        raise NotImplementedError


class GpgKeyring(KeyringClient):
    def __init__(
        self,
        binary: str = DEFAULT_GPG_BINARY,
        homedir: Optional[str] = None,
        always_trust: bool = DEFAULT_ALWAYS_TRUST,
        extra_args: Sequence[str] = (),
        echo: Optional[Callable[[str], None]] = None,
    ):
        self.binary = binary
        self.homedir = homedir
        self.always_trust = always_trust
        self.extra_args = list(extra_args)
        self.echo = echo

        # Lazy-loaded
        self._gpg: Optional[gnupg.GPG] = None

    @property
    def gpg(self) -> gnupg.GPG:
        """Create the gnupg handle lazily; constructing it runs gpg --version."""
        if self._gpg is None:
            try:
                self._gpg = gnupg.GPG(
                    gpgbinary=self.binary,
                    gnupghome=self.homedir,
                    options=self.extra_args or None,
                )
            except (OSError, ValueError) as e:
                raise KeyringError("start", f"unable to run {self.binary}: {e}") from e
        return self._gpg

    # ------------------------------------------------------------------
    # KeyringClient API
    # ------------------------------------------------------------------

    def export_key(self, key_id: str, destination: Path) -> None:
        """
        Write the armored public key for ``key_id`` to ``destination``.

        gpg succeeds when the selector matches nothing, so empty output is
        treated as a failure as well. Nothing is written on failure.
        """

        self._echo(f"export {key_id}")
        armored = self.gpg.export_keys(key_id, armor=True)

        if not armored or not armored.strip():
            raise KeyringError("export", f"no public key exported for {key_id}")

        destination.write_text(armored, encoding="utf-8")

    def import_key(self, source: Path) -> None:
        self._echo(f"import {source}")
        result = self.gpg.import_keys_file(str(source))

        if not result:
            raise KeyringError("import", self._stderr(result), getattr(result, "status", ""))

    def encrypt_to(self, recipients: Sequence[str], source: Path, destination: Path) -> None:
        self._echo(f"encrypt {source} -> {destination} for {', '.join(recipients)}")
        with source.open("rb") as fh:
            result = self.gpg.encrypt_file(
                fh,
                list(recipients),
                always_trust=self.always_trust,
                armor=False,
                output=str(destination),
            )

        if not result.ok:
            raise KeyringError("encrypt", self._stderr(result), result.status)

    def decrypt(self, source: Path, destination: Path) -> None:
        self._echo(f"decrypt {source} -> {destination}")
        with source.open("rb") as fh:
            result = self.gpg.decrypt_file(fh, output=str(destination))

        if not result.ok:
            raise KeyringError("decrypt", self._stderr(result), result.status)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _echo(self, msg: str) -> None:
        if self.echo:
            self.echo(f"{self.binary} {msg}")

    @staticmethod
    def _stderr(result) -> str:
        return (getattr(result, "stderr", "") or "").strip()
