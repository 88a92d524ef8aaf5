"""Tests for store backends, the unit of work and the cart lock."""

import json
from unittest.mock import MagicMock

import pytest

from storefront.data.seed import ensure_defaults
from storefront.data.store import MemoryStore, RedisStore, SqlStore, StoreSession, create_store
from storefront.services.lock_service import LockService


class TestMemoryStore:
    def test_missing_key_returns_default(self):
        assert MemoryStore().get("nope", []) == []

    def test_corrupted_value_returns_default(self):
        store = MemoryStore()
        store._data["carts"] = "{not json"

        assert store.get("carts", {}) == {}

    def test_values_are_copies(self):
        store = MemoryStore({"carts": {}})
        carts = store.get("carts")
        carts["1"] = {"items": []}

        assert store.get("carts") == {}

    def test_set_many_writes_everything(self):
        store = MemoryStore()
        store.set_many({"a": 1, "b": [1, 2]})

        assert sorted(store.keys()) == ["a", "b"]
        assert store.get("b") == [1, 2]

    def test_unencodable_batch_leaves_store_untouched(self):
        store = MemoryStore({"a": 1})

        with pytest.raises(TypeError):
            store.set_many({"a": 2, "b": object()})

        assert store.get("a") == 1
        assert store.get("b") is None


class TestStoreSession:
    def test_reads_are_cached(self):
        store = MemoryStore({"orders": []})
        db = StoreSession(store)

        assert db.get("orders") == []
        store.set("orders", [{"id": 1}])

        assert db.get("orders") == []

    def test_writes_are_staged_until_commit(self):
        store = MemoryStore({"orders": []})
        db = StoreSession(store)

        db.set("orders", [{"id": 1}])

        assert db.get("orders") == [{"id": 1}]
        assert store.get("orders") == []
        assert list(db.pending) == ["orders"]

        db.commit()

        assert store.get("orders") == [{"id": 1}]
        assert db.pending == {}

    def test_rollback_discards_writes(self):
        store = MemoryStore({"orders": []})
        db = StoreSession(store)

        db.set("orders", [{"id": 1}])
        db.rollback()
        db.commit()

        assert store.get("orders") == []

    def test_commit_is_a_single_batch(self):
        store = MagicMock()
        store.get.return_value = None
        db = StoreSession(store)

        db.set("orders", [])
        db.set("members", [])
        db.commit()

        store.set_many.assert_called_once_with({"orders": [], "members": []})


class TestSqlStore:
    def test_roundtrip_and_overwrite(self):
        store = SqlStore("sqlite://")

        assert store.get("carts", {}) == {}
        store.set("carts", {"1": {"items": []}})
        store.set_many({"carts": {}, "orders": [{"id": 7}]})

        assert store.get("carts") == {}
        assert store.get("orders") == [{"id": 7}]
        assert sorted(store.keys()) == ["carts", "orders"]


class TestRedisStore:
    def test_get_uses_prefix(self):
        client = MagicMock()
        client.get.return_value = json.dumps([1, 2])
        store = RedisStore(prefix="shop:", client=client)

        assert store.get("orders") == [1, 2]
        client.get.assert_called_once_with("shop:orders")

    def test_set_many_runs_in_one_transaction(self):
        client = MagicMock()
        pipe = client.pipeline.return_value
        store = RedisStore(prefix="shop:", client=client)

        store.set_many({"orders": [], "carts": {}})

        client.pipeline.assert_called_once_with(transaction=True)
        pipe.set.assert_any_call("shop:orders", "[]")
        pipe.set.assert_any_call("shop:carts", "{}")
        pipe.execute.assert_called_once()


class TestBootstrap:
    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            create_store("mongo")

    def test_memory_backend(self):
        assert isinstance(create_store("memory"), MemoryStore)

    def test_seeded_prices_are_numbers(self):
        store = MemoryStore()
        ensure_defaults(store)

        course = store.get("courses")[0]

        assert course["price"] == 120
        assert isinstance(course["price"], int)
        assert course["priceOffer"] == 99

    def test_seed_only_fills_missing_keys(self):
        store = MemoryStore({"categories": ["Otros"]})

        seeded = ensure_defaults(store)

        assert "categories" not in seeded
        assert "courses" in seeded
        assert store.get("categories") == ["Otros"]
        assert ensure_defaults(store) == []


class TestLockService:
    def test_lock_is_held_inside_context(self, run):
        locks = LockService()

        async def use():
            async with locks.cart_lock("7"):
                return locks.is_locked("7")

        assert run(use()) is True
        assert locks.is_locked("7") is False

    def test_release_without_acquire(self):
        assert LockService().release_cart_lock("7") is False
