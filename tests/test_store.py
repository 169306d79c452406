import pytest

from secretstore.config import StoreConfig
from secretstore.errors import KeyringError, PreconditionError, UsageError
from secretstore.store import SecretStore


# ---------------------------------------------------------------------------
# export
# ---------------------------------------------------------------------------


def test_export_creates_directory_key_file_and_entry(store, config):
    key_file = store.export_key("AAAA111", "alice")

    assert key_file == config.key_directory / "alice.pub"
    assert "AAAA111" in key_file.read_text()
    assert config.registry_path.read_text() == "AAAA111 alice\n"


def test_export_default_name(store, monkeypatch):
    monkeypatch.setattr("secretstore.store.default_key_name", lambda: "me@box")

    key_file = store.export_key("AAAA111")

    assert key_file.name == "me@box.pub"
    assert store.entries()[0].key_name == "me@box"


def test_export_requires_key_id(store):
    with pytest.raises(UsageError):
        store.export_key("", "alice")


def test_export_refuses_existing_key_file(store, config):
    store.export_key("AAAA111", "alice")

    with pytest.raises(PreconditionError, match="already exists"):
        store.export_key("BBBB222", "alice")

    assert config.registry_path.read_text() == "AAAA111 alice\n"
    assert "AAAA111" in config.key_file("alice").read_text()


def test_export_failure_writes_nothing(store, config):
    with pytest.raises(KeyringError):
        store.export_key("FFFF999", "mallory")

    assert not config.key_file("mallory").exists()
    assert not config.registry_path.exists()


# ---------------------------------------------------------------------------
# import
# ---------------------------------------------------------------------------


def test_export_then_import_elsewhere(store, config, make_keyring):
    store.export_key("AAAA111", "alice")
    store.export_key("BBBB222", "bob")

    other = make_keyring()
    imported = list(SecretStore(config, other).import_keys())

    assert [p.name for p in imported] == ["alice.pub", "bob.pub"]
    assert other.public_keys == {"AAAA111", "BBBB222"}


def test_import_without_key_directory(tmp_path, keyring):
    store = SecretStore(StoreConfig.for_directory(tmp_path / "missing"), keyring)
    assert list(store.import_keys()) == []


def test_import_ignores_keylist_and_other_files(store, config, keyring):
    store.export_key("AAAA111", "alice")
    (config.key_directory / "notes.txt").write_text("hello")

    list(store.import_keys())

    assert [c for c in keyring.calls if c[0] == "import"] == [("import", "alice.pub")]


def test_import_aborts_on_first_failure(store, config, keyring):
    config.key_directory.mkdir(parents=True)
    (config.key_directory / "a.pub").write_text("garbage")
    (config.key_directory / "b.pub").write_text("-----BEGIN PGP PUBLIC KEY BLOCK-----\nBBBB222\n")

    with pytest.raises(KeyringError):
        list(store.import_keys())

    assert [c for c in keyring.calls if c[0] == "import"] == [("import", "a.pub")]


# ---------------------------------------------------------------------------
# encrypt / decrypt
# ---------------------------------------------------------------------------


@pytest.fixture
def registered(store, config):
    config.key_directory.mkdir(parents=True)
    config.registry_path.write_text("AAAA111 alice\nBBBB222 bob\n")
    return store


def test_encrypt_to_all_registered_recipients(registered, keyring, workdir):
    secret = workdir / "secret.txt"
    secret.write_text("top secret")

    recipients = registered.check_encrypt([secret])
    output = registered.encrypt_file(secret, recipients)

    assert output == workdir / "secret.txt.gpg"
    assert keyring.recipients_of(output) == ["AAAA111", "BBBB222"]
    assert secret.read_text() == "top secret"


def test_encrypt_decrypt_roundtrip(registered, keyring, workdir):
    secret = workdir / "data.bin"
    payload = bytes(range(256)) * 4
    secret.write_bytes(payload)

    output = registered.encrypt_file(secret, registered.check_encrypt([secret]))
    secret.unlink()

    registered.check_decrypt([output])
    restored = registered.decrypt_file(output)

    assert restored == secret
    assert restored.read_bytes() == payload
    assert output.exists()


def test_ciphertext_only_readable_by_recipients(registered, config, make_keyring, workdir):
    secret = workdir / "secret.txt"
    secret.write_text("x")
    output = registered.encrypt_file(secret, registered.check_encrypt([secret]))
    secret.unlink()

    bob = SecretStore(config, make_keyring(secret_keys={"BBBB222"}))
    bob.decrypt_file(output)
    assert secret.read_text() == "x"

    outsider = SecretStore(config, make_keyring(secret_keys={"CCCC333"}))
    with pytest.raises(KeyringError):
        outsider.decrypt_file(output)


def test_encrypt_requires_files(registered):
    with pytest.raises(UsageError):
        registered.check_encrypt([])


def test_encrypt_missing_input(registered, keyring, workdir):
    with pytest.raises(PreconditionError, match="File not found"):
        registered.check_encrypt([workdir / "nope.txt"])
    assert keyring.calls == []


def test_encrypt_without_keylist(store, keyring, workdir):
    secret = workdir / "secret.txt"
    secret.write_text("x")

    with pytest.raises(PreconditionError, match="Keylist not found"):
        store.check_encrypt([secret])
    assert keyring.calls == []


def test_encrypt_with_empty_keylist(store, config, keyring, workdir):
    config.key_directory.mkdir(parents=True)
    config.registry_path.write_text("\n")
    secret = workdir / "secret.txt"
    secret.write_text("x")

    with pytest.raises(PreconditionError, match="empty"):
        store.check_encrypt([secret])

    assert keyring.calls == []
    assert not (workdir / "secret.txt.gpg").exists()


def test_decrypt_requires_cipher_suffix(registered, workdir):
    plain = workdir / "plain.txt"
    plain.write_text("x")

    with pytest.raises(PreconditionError, match="Not a .gpg file"):
        registered.check_decrypt([plain])


def test_decrypt_missing_input(registered, workdir):
    with pytest.raises(PreconditionError):
        registered.check_decrypt([workdir / "gone.txt.gpg"])


# ---------------------------------------------------------------------------
# clean
# ---------------------------------------------------------------------------


def test_clean_removes_only_paired_plaintexts(store, workdir):
    (workdir / "a.txt").write_text("a")
    (workdir / "a.txt.gpg").write_text("c")
    (workdir / "lonely.txt").write_text("keep")
    (workdir / "orphan.txt.gpg").write_text("c")
    nested = workdir / "sub" / "deeper"
    nested.mkdir(parents=True)
    (nested / "b.md").write_text("b")
    (nested / "b.md.gpg").write_text("c")

    removed = list(store.clean(workdir))

    assert sorted(removed) == sorted([workdir / "a.txt", nested / "b.md"])
    assert not (workdir / "a.txt").exists()
    assert not (nested / "b.md").exists()
    assert (workdir / "lonely.txt").exists()
    assert (workdir / "a.txt.gpg").exists()
    assert (workdir / "orphan.txt.gpg").exists()


def test_clean_dry_run_keeps_files(store, workdir):
    (workdir / "a.txt").write_text("a")
    (workdir / "a.txt.gpg").write_text("c")

    assert list(store.clean(workdir, dry_run=True)) == [workdir / "a.txt"]
    assert (workdir / "a.txt").exists()


def test_clean_empty_tree(store, workdir):
    assert list(store.clean(workdir)) == []


# ---------------------------------------------------------------------------
# export argument checks
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("key_id", ["Alice Smith", "AAAA111\n", "AAAA\t111"])
def test_export_rejects_key_id_with_whitespace(store, config, keyring, key_id):
    with pytest.raises(UsageError, match="whitespace"):
        store.export_key(key_id, "alice")

    assert keyring.calls == []
    assert not config.registry_path.exists()
    assert not config.key_file("alice").exists()


def test_key_id_roundtrips_through_keylist(store, workdir):
    store.export_key("AAAA111", "alice")
    secret = workdir / "f.txt"
    secret.write_text("x")

    assert store.check_encrypt([secret]) == ["AAAA111"]


@pytest.mark.parametrize("key_name", ["../escaped", "sub/alice", "..", ".", "bad\nname"])
def test_export_rejects_key_name_outside_key_directory(store, config, keyring, key_name):
    with pytest.raises(UsageError, match="plain file name"):
        store.export_key("AAAA111", key_name)

    assert keyring.calls == []
    assert not config.registry_path.exists()
    assert not (config.key_directory.parent / "escaped.pub").exists()


def test_export_allows_spaces_and_dots_in_key_name(store, config):
    key_file = store.export_key("AAAA111", "alice smith.work")

    assert key_file.parent == config.key_directory
    assert store.entries()[0].key_name == "alice smith.work"
