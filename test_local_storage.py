import json
from unittest.mock import MagicMock

from pymongo.errors import ServerSelectionTimeoutError

from local_storage import (
    MOCK_STORAGE_KEY,
    BookingCache,
    MemoryStorage,
    SqliteStorage,
    is_mongodb_connected,
)


def test_cache_seeds_once():
    storage = MemoryStorage()
    cache = BookingCache(storage)

    first = cache.load()
    cache.save(first[:1])

    assert [b["id"] for b in first] == ["mock-1", "mock-2", "mock-3"]
    assert [b["id"] for b in cache.load()] == ["mock-1"]


def test_cache_is_one_json_list_under_fixed_key():
    storage = MemoryStorage()
    BookingCache(storage).append({"id": "local-1", "status": "PENDING"})

    stored = json.loads(storage.get(MOCK_STORAGE_KEY))
    assert isinstance(stored, list)
    assert stored[-1] == {"id": "local-1", "status": "PENDING"}


def test_cache_update_missing_record():
    cache = BookingCache(MemoryStorage())
    assert cache.update("nope", {"status": "REJECTED"}) is None


def test_cache_update_merges_fields():
    cache = BookingCache(MemoryStorage())

    updated = cache.update("mock-1", {"status": "REJECTED", "admin_note": "duplicate"})

    assert updated["status"] == "REJECTED"
    assert updated["customer_name"] == "John Doe"
    assert cache.load()[0]["admin_note"] == "duplicate"


def test_sqlite_storage_round_trip(tmp_path):
    path = str(tmp_path / "local_data.db")
    SqliteStorage(path).set("k", "v1")
    SqliteStorage(path).set("k", "v2")

    assert SqliteStorage(path).get("k") == "v2"
    assert SqliteStorage(path).get("missing") is None


def test_sqlite_backed_cache_survives_restart(tmp_path):
    path = str(tmp_path / "local_data.db")
    BookingCache(SqliteStorage(path)).update("mock-2", {"status": "APPROVED"})

    records = BookingCache(SqliteStorage(path)).load()

    assert next(b for b in records if b["id"] == "mock-2")["status"] == "APPROVED"


def test_is_mongodb_connected():
    db = MagicMock()
    assert is_mongodb_connected(db)

    db.command.side_effect = ServerSelectionTimeoutError("timed out")
    assert not is_mongodb_connected(db)


def test_cache_find():
    cache = BookingCache(MemoryStorage())

    assert cache.find("mock-3")["vehicle_id"] == "toyota-hiace"
    assert cache.find("missing") is None
