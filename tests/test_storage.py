import pytest

from bookshelf.core.errors import StorageError
from bookshelf.core.storage import KeyValueStorage


@pytest.fixture
def kv(tmp_path):
    s = KeyValueStorage(tmp_path / "kv.db")
    yield s
    s.close()


def test_missing_key_returns_none(kv):
    assert kv.get_item("nothing") is None


def test_set_replaces_previous_value(kv):
    kv.set_item("books", "[]")
    kv.set_item("books", '[{"id": "1"}]')
    assert kv.get_item("books") == '[{"id": "1"}]'


def test_remove_item(kv):
    kv.set_item("books", "[]")
    kv.remove_item("books")
    assert kv.get_item("books") is None


def test_values_survive_reopen(tmp_path):
    first = KeyValueStorage(tmp_path / "kv.db")
    first.set_item("books", "[]")
    first.close()

    second = KeyValueStorage(tmp_path / "kv.db")
    assert second.get_item("books") == "[]"
    second.close()


def test_default_path_uses_data_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("BOOKSHELF_DATA_DIR", str(tmp_path / "data"))
    s = KeyValueStorage()
    assert s.db_path == tmp_path / "data" / "bookshelf.db"
    assert not s.db_path.exists()

    s.set_item("books", "[]")
    assert s.db_path.exists()
    s.close()


def test_closed_connection_raises_storage_error(tmp_path):
    s = KeyValueStorage(tmp_path / "kv.db")
    s.close()
    with pytest.raises(StorageError):
        s.set_item("books", "[]")


def test_unreadable_file_fails_on_use_not_on_construction(tmp_path):
    path = tmp_path / "kv.db"
    path.write_bytes(b"this is not an sqlite database" * 100)

    s = KeyValueStorage(path)
    with pytest.raises(StorageError, match="Cannot open storage"):
        s.get_item("books")
    with pytest.raises(StorageError):
        s.set_item("books", "[]")
    s.close()


def test_directory_that_cannot_be_created_raises_storage_error(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory")

    s = KeyValueStorage(blocker / "data" / "kv.db")
    with pytest.raises(StorageError):
        s.get_item("books")
