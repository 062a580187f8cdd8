import pytest

from services.storage import MemoryStore, SqliteStore, StorageError, StorageQuotaExceeded


@pytest.fixture(params=["memory", "sqlite"])
def store(request, tmp_path):
    if request.param == "memory":
        return MemoryStore()
    return SqliteStore(tmp_path / "kv.db")


def test_get_set_remove(store):
    assert store.get("k") is None
    assert store.set("k", "v") is True
    assert store.get("k") == "v"

    store.set("k", "v2")
    assert store.get("k") == "v2"

    store.remove("k")
    assert store.get("k") is None
    store.remove("k")


def test_keys(store):
    store.set("b", "1")
    store.set("a", "2")
    assert sorted(store.keys()) == ["a", "b"]


def test_unicode_values(store):
    store.set("doc", "héllo 世界")
    assert store.get("doc") == "héllo 世界"


@pytest.mark.parametrize("kind", ["memory", "sqlite"])
def test_quota(kind, tmp_path):
    if kind == "memory":
        store = MemoryStore(max_bytes=10)
    else:
        store = SqliteStore(tmp_path / "kv.db", max_bytes=10)

    store.set("a", "12345")
    # Overwriting replaces the old value's share of the quota
    store.set("a", "1234567890")

    with pytest.raises(StorageQuotaExceeded):
        store.set("b", "1")
    assert store.get("b") is None

    # Multi-byte characters count by encoded size
    store.remove("a")
    with pytest.raises(StorageQuotaExceeded):
        store.set("c", "ééééé é")


def test_quota_error_is_storage_error():
    assert issubclass(StorageQuotaExceeded, StorageError)


def test_sqlite_persists(tmp_path):
    SqliteStore(tmp_path / "kv.db").set("k", "v")
    assert SqliteStore(tmp_path / "kv.db").get("k") == "v"


def test_sqlite_creates_parent_directory(tmp_path):
    store = SqliteStore(tmp_path / "nested" / "dir" / "kv.db")
    store.set("k", "v")
    assert (tmp_path / "nested" / "dir" / "kv.db").exists()


def test_sqlite_unopenable_path(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("not a directory")

    with pytest.raises(StorageError):
        SqliteStore(blocker / "kv.db")
