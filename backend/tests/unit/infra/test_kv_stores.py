"""Key-value store backends: in-process and Redis (via fakeredis)."""

from __future__ import annotations

import fakeredis
import pytest
import redis
from freezegun import freeze_time

from authgate.core.extensions import build_kv_store
from authgate.infra.redis.redis_kv_store import RedisKeyValueStore
from authgate.services._shared.errors import StoreUnavailableError
from authgate.services._shared.ports import InMemoryKeyValueStore


class FakeClock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture(params=["memory", "redis"])
def store(request):
    """Run the shared contract against both backends."""
    if request.param == "memory":
        return InMemoryKeyValueStore()
    return RedisKeyValueStore(fakeredis.FakeRedis())


class TestKeyValueContract:
    def test_set_and_get_roundtrip(self, store):
        store.set_json("k", {"uid": "u1"}, ttl=60)
        assert store.get_json("k") == {"uid": "u1"}

    def test_missing_key_returns_none(self, store):
        assert store.get_json("nope") is None

    def test_delete_reports_existence_once(self, store):
        store.set_json("k", {"uid": "u1"}, ttl=60)

        assert store.delete("k") is True
        assert store.delete("k") is False
        assert store.get_json("k") is None

    def test_non_positive_ttl_rejected(self, store):
        with pytest.raises(ValueError):
            store.set_json("k", {"a": 1}, ttl=0)

    def test_ping(self, store):
        assert store.ping() is True


class TestInMemoryKeyValueStore:
    def test_entries_expire_lazily(self):
        clock = FakeClock()
        kv = InMemoryKeyValueStore(clock=clock)
        kv.set_json("short", {"v": 1}, ttl=10)
        kv.set_json("forever", {"v": 2})

        clock.now += 10

        assert kv.get_json("short") is None
        assert kv.delete("short") is False
        assert kv.get_json("forever") == {"v": 2}
        assert len(kv) == 1

    def test_default_clock_follows_frozen_time(self):
        with freeze_time("2030-01-01 00:00:00") as frozen:
            kv = InMemoryKeyValueStore()
            kv.set_json("k", {"v": 1}, ttl=10)

            frozen.tick(9)
            assert kv.get_json("k") == {"v": 1}

            frozen.tick(2)
            assert kv.get_json("k") is None

    def test_returns_copies(self):
        kv = InMemoryKeyValueStore()
        value = {"uid": "u1"}
        kv.set_json("k", value, ttl=5)

        value["uid"] = "mutated"
        kv.get_json("k")["uid"] = "mutated"

        assert kv.get_json("k") == {"uid": "u1"}


class TestRedisKeyValueStore:
    def test_sets_expiry_in_redis(self):
        client = fakeredis.FakeRedis()
        RedisKeyValueStore(client).set_json("auth:blacklist:t", {"uid": "u1"}, ttl=120)

        assert 0 < client.ttl("auth:blacklist:t") <= 120

    def test_redis_errors_become_store_unavailable(self, monkeypatch):
        client = fakeredis.FakeRedis()
        store = RedisKeyValueStore(client)

        def _boom(*args, **kwargs):
            raise redis.ConnectionError("down")

        monkeypatch.setattr(client, "get", _boom)
        monkeypatch.setattr(client, "ping", _boom)

        with pytest.raises(StoreUnavailableError):
            store.get_json("k")
        assert store.ping() is False

    def test_corrupt_value_becomes_store_unavailable(self):
        client = fakeredis.FakeRedis()
        client.set("auth:blacklist:t", b"not-json{")

        with pytest.raises(StoreUnavailableError):
            RedisKeyValueStore(client).get_json("auth:blacklist:t")


class TestBuildKvStore:
    def test_without_redis_url_uses_memory(self):
        assert isinstance(build_kv_store({"REDIS_URL": None}), InMemoryKeyValueStore)

    def test_with_redis_url_pings(self, monkeypatch):
        fake = fakeredis.FakeRedis()
        monkeypatch.setattr(redis.Redis, "from_url", classmethod(lambda cls, url: fake))

        store = build_kv_store({"REDIS_URL": "redis://example:6379/0"})

        assert isinstance(store, RedisKeyValueStore)
        assert store.r is fake

    def test_unreachable_redis_fails_fast(self, monkeypatch):
        class _Down:
            def ping(self):
                raise redis.ConnectionError("refused")

        monkeypatch.setattr(redis.Redis, "from_url", classmethod(lambda cls, url: _Down()))

        with pytest.raises(RuntimeError, match="Failed to connect to Redis"):
            build_kv_store({"REDIS_URL": "redis://example:6379/0"})
