import json
import pytest
from unittest.mock import MagicMock
from redis.exceptions import ConnectionError as RedisConnectionError, ResponseError

from rentmzansi.core.config import Settings, StorageKeys
from rentmzansi.core.exceptions import StorageQuotaExceededError, StorageUnavailableError
from rentmzansi.core.storage import (
    LocalStore,
    MemoryStorage,
    RedisStorage,
    create_storage_backend,
    validate_record
)
from rentmzansi.schemas.engagement import ListingSnapshot


def test_missing_key_returns_default(store: LocalStore):
    """Test reading a key that was never written"""
    assert store.read_json("favorites", []) == []
    assert store.read_json("view-counts", {}) == {}


def test_write_then_read(store: LocalStore):
    assert store.write_json("favorites", ["L1", "L2"]) is True
    assert store.read_json("favorites", []) == ["L1", "L2"]


def test_corrupt_json_returns_default(store: LocalStore, backend: MemoryStorage):
    """Test that unparseable data degrades to the default"""
    backend.set_item(store.full_key("notifications"), "{not json")

    assert store.read_json("notifications", []) == []


def test_unexpected_json_type_returns_default(store: LocalStore, backend: MemoryStorage):
    backend.set_item(store.full_key("view-counts"), json.dumps(["L1"]))

    assert store.read_json("view-counts", {}) == {}


def test_namespaces_are_isolated(backend: MemoryStorage):
    root = LocalStore(backend, StorageKeys(), prefix="rm:")
    alice = root.for_namespace("alice")
    bob = root.for_namespace("bob")

    alice.write_json("favorites", ["L1"])

    assert bob.read_json("favorites", []) == []
    assert alice.full_key("favorites") == "rm:alice:favorites"
    assert backend.keys("rm:alice:") == ["rm:alice:favorites"]


def test_quota_exceeded_write_returns_false():
    """Test that a write over quota is dropped and earlier data survives"""
    backend = MemoryStorage(quota_bytes=64)
    store = LocalStore(backend, StorageKeys())

    assert store.write_json("favorites", ["L1"]) is True
    assert store.write_json("notifications", ["x" * 100]) is False
    assert store.read_json("favorites", []) == ["L1"]
    assert store.read_json("notifications", []) == []


def test_quota_counts_replaced_value_once():
    backend = MemoryStorage(quota_bytes=40)
    backend.set_item("key", "a" * 30)
    backend.set_item("key", "b" * 30)

    assert backend.get_item("key") == "b" * 30

    with pytest.raises(StorageQuotaExceededError):
        backend.set_item("other", "c" * 10)


def test_disabled_backend_degrades(store: LocalStore, backend: MemoryStorage):
    """Test that an unavailable backend turns reads into defaults and writes into False"""
    store.write_json("favorites", ["L1"])
    backend.enabled = False

    assert store.read_json("favorites", []) == []
    assert store.write_json("favorites", ["L2"]) is False
    assert store.remove("favorites") is False

    with pytest.raises(StorageUnavailableError):
        backend.get_item("anything")


def test_unserializable_value_is_not_written(store: LocalStore):
    assert store.write_json("favorites", {1, 2}) is False
    assert store.read_json("favorites", []) == []


def test_values_are_not_stringified_on_write(store: LocalStore, clock):
    """Test that a non-JSON value is refused instead of being stored as its str()"""
    assert store.write_json("landlord-response-times", {"LL1": [clock()]}) is False
    assert store.read_json("landlord-response-times", {}) == {}


def test_read_models_drops_invalid_records(store: LocalStore):
    store.write_json("snapshots", [
        {"price": 4500, "timestamp": "2024-03-01T09:00:00+00:00"},
        {"price": "cheap"},
        "garbage"
    ])

    snapshots = store.read_models("snapshots", ListingSnapshot)

    assert len(snapshots) == 1
    assert snapshots[0].price == 4500


def test_validate_record_returns_none_for_malformed():
    assert validate_record(ListingSnapshot, {"price": -1}) is None


def test_create_storage_backend_memory():
    backend = create_storage_backend(Settings(STORAGE_BACKEND="memory", STORAGE_QUOTA_BYTES=1024))

    assert isinstance(backend, MemoryStorage)
    assert backend.quota_bytes == 1024


def test_invalid_storage_backend_rejected():
    with pytest.raises(ValueError):
        Settings(STORAGE_BACKEND="sqlite")


# ============ REDIS ============

def test_redis_storage_round_trip():
    """Test Redis backend against a mocked client"""
    client = MagicMock()
    client.get.return_value = '["L1"]'
    storage = RedisStorage("redis://test", client=client)
    store = LocalStore(storage, StorageKeys(), prefix="rm:")

    assert store.read_json("favorites", []) == ["L1"]
    client.get.assert_called_once_with("rm:favorites")

    assert store.write_json("favorites", ["L1", "L2"]) is True
    client.set.assert_called_once_with("rm:favorites", '["L1", "L2"]')


def test_redis_connection_error_degrades():
    client = MagicMock()
    client.get.side_effect = RedisConnectionError("refused")
    client.set.side_effect = RedisConnectionError("refused")
    client.ping.side_effect = RedisConnectionError("refused")
    storage = RedisStorage("redis://test", client=client)
    store = LocalStore(storage, StorageKeys())

    assert store.read_json("favorites", ["fallback"]) == ["fallback"]
    assert store.write_json("favorites", []) is False
    assert storage.is_available() is False
    assert storage.connect() is False


def test_redis_oom_maps_to_quota_error():
    client = MagicMock()
    client.set.side_effect = ResponseError("OOM command not allowed when used memory > 'maxmemory'.")
    storage = RedisStorage("redis://test", client=client)

    with pytest.raises(StorageQuotaExceededError):
        storage.set_item("rm:notifications", "[]")


def test_redis_keys_uses_scan():
    client = MagicMock()
    client.scan_iter.return_value = iter(["rm:b", "rm:a"])
    storage = RedisStorage("redis://test", client=client)

    assert storage.keys("rm:") == ["rm:a", "rm:b"]
    client.scan_iter.assert_called_once_with(match="rm:*", count=100)
