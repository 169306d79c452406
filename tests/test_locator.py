from pathlib import Path

from secretstore.locator import find_key_directory, resolve_key_directory


def test_finds_marker_in_start_directory(tmp_path):
    (tmp_path / ".secretstore").mkdir()
    assert find_key_directory(tmp_path) == tmp_path / ".secretstore"


def test_closest_ancestor_wins(tmp_path):
    (tmp_path / ".secretstore").mkdir()
    nested = tmp_path / "a" / "b"
    (tmp_path / "a" / ".secretstore").mkdir(parents=True)
    nested.mkdir()

    assert find_key_directory(nested) == tmp_path / "a" / ".secretstore"


def test_marker_must_be_a_directory(tmp_path):
    (tmp_path / "a").mkdir()
    (tmp_path / "a" / ".secretstore").write_text("not a dir")
    (tmp_path / ".secretstore").mkdir()

    assert find_key_directory(tmp_path / "a") == tmp_path / ".secretstore"


def test_falls_back_to_start_without_creating(tmp_path):
    result = find_key_directory(tmp_path, is_dir=lambda p: False)

    assert result == tmp_path / ".secretstore"
    assert not result.exists()


def test_result_is_absolute(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert find_key_directory(".", is_dir=lambda p: False).is_absolute()


def test_searches_up_to_root():
    seen = []

    def is_dir(path):
        seen.append(path)
        return False

    find_key_directory(Path("/x/y"), marker="keys", is_dir=is_dir)
    assert seen == [Path("/x/y/keys"), Path("/x/keys"), Path("/keys")]


def test_override_skips_search(tmp_path):
    (tmp_path / ".secretstore").mkdir()
    other = tmp_path / "elsewhere"

    assert resolve_key_directory(tmp_path, override=str(other)) == other
