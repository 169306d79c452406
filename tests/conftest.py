from pathlib import Path

import pytest

from secretstore.config import StoreConfig
from secretstore.errors import KeyringError
from secretstore.keyring import KeyringClient
from secretstore.store import SecretStore


class FakeKeyring(KeyringClient):
    """In-memory keyring: 'ciphertext' is the plaintext prefixed by its recipients."""

    def __init__(self, secret_keys=(), public_keys=()):
        self.secret_keys = set(secret_keys)
        self.public_keys = set(public_keys) | self.secret_keys
        self.calls = []

    def export_key(self, key_id, destination):
        self.calls.append(("export", key_id))
        if key_id not in self.public_keys:
            raise KeyringError("export", f"no public key exported for {key_id}")
        destination.write_text(f"-----BEGIN PGP PUBLIC KEY BLOCK-----\n{key_id}\n")

    def import_key(self, source):
        self.calls.append(("import", source.name))
        lines = source.read_text().splitlines()
        if len(lines) < 2 or not lines[0].startswith("-----BEGIN"):
            raise KeyringError("import", f"no valid OpenPGP data found in {source.name}")
        self.public_keys.add(lines[1])

    def encrypt_to(self, recipients, source, destination):
        self.calls.append(("encrypt", list(recipients), source.name))
        unknown = [r for r in recipients if r not in self.public_keys]
        if unknown:
            raise KeyringError("encrypt", f"unknown recipient {unknown[0]}", "INV_RECP")
        header = ",".join(recipients).encode() + b"\n"
        destination.write_bytes(header + source.read_bytes())

    def decrypt(self, source, destination):
        self.calls.append(("decrypt", source.name))
        header, _, body = source.read_bytes().partition(b"\n")
        recipients = set(header.decode().split(","))
        if not recipients & self.secret_keys:
            raise KeyringError("decrypt", "no secret key", "NO_SECKEY")
        destination.write_bytes(body)

    def recipients_of(self, path):
        header = Path(path).read_bytes().partition(b"\n")[0]
        return header.decode().split(",")


@pytest.fixture
def keyring():
    return FakeKeyring(secret_keys={"AAAA111"}, public_keys={"BBBB222"})


@pytest.fixture
def config(tmp_path):
    return StoreConfig.for_directory(tmp_path / ".secretstore")


@pytest.fixture
def store(config, keyring):
    return SecretStore(config, keyring)


@pytest.fixture
def workdir(tmp_path):
    path = tmp_path / "work"
    path.mkdir()
    return path


@pytest.fixture
def make_keyring():
    return FakeKeyring
