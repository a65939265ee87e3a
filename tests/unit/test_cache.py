"""
Unit Tests - Dashboard Cache
"""
import fnmatch
import json

import pytest

from seller_dashboard.serving import cache
from seller_dashboard.serving.cache import CacheManager, dashboard_cache_key


class InMemoryRedis:
    """Subset of the redis.asyncio client used by the cache module"""

    def __init__(self):
        self.data = {}
        self.ttls = {}

    async def get(self, key):
        return self.data.get(key)

    async def set(self, key, value):
        self.data[key] = value

    async def setex(self, key, ttl, value):
        self.data[key] = value
        self.ttls[key] = ttl

    async def delete(self, *keys):
        return sum(1 for key in keys if self.data.pop(key, None) is not None)

    async def scan_iter(self, match=None):
        for key in list(self.data):
            if match is None or fnmatch.fnmatch(key, match):
                yield key


@pytest.fixture
def redis_client(monkeypatch) -> InMemoryRedis:
    client = InMemoryRedis()
    monkeypatch.setattr(cache, "_redis_client", client)
    return client


class TestWithoutRedis:
    """Caching degrades to a no-op when redis is not initialized"""

    async def test_get_misses(self):
        assert cache.is_redis_available() is False
        assert await CacheManager("dashboard").get("anything") is None

    async def test_set_is_skipped(self):
        assert await CacheManager("dashboard").set("key", {"a": 1}) is False

    async def test_get_or_set_always_computes(self):
        calls = []

        async def compute():
            calls.append(1)
            return {"value": len(calls)}

        manager = CacheManager("dashboard")
        assert await manager.get_or_set("key", compute) == {"value": 1}
        assert await manager.get_or_set("key", compute) == {"value": 2}

    async def test_invalidate_is_noop(self):
        assert await CacheManager("dashboard").invalidate_prefix("seller") == 0


class TestWithRedis:
    """Cache behaviour against an in-memory client"""

    async def test_round_trip_with_ttl(self, redis_client):
        manager = CacheManager("dashboard", default_ttl=60)
        await manager.set("s1:dashboard:7d:2024-12-16", {"overview": {"totalViews": 60}})

        assert await manager.get("s1:dashboard:7d:2024-12-16") == {"overview": {"totalViews": 60}}
        assert redis_client.ttls["dashboard:s1:dashboard:7d:2024-12-16"] == 60

    async def test_arabic_text_stored_unescaped(self, redis_client):
        await CacheManager("dashboard").set("k", {"title": "محرك"})

        assert "محرك" in redis_client.data["dashboard:k"]
        assert json.loads(redis_client.data["dashboard:k"]) == {"title": "محرك"}

    async def test_get_or_set_uses_cached_value(self, redis_client):
        calls = []

        async def compute():
            calls.append(1)
            return {"value": 1}

        manager = CacheManager("dashboard")
        await manager.get_or_set("key", compute)
        await manager.get_or_set("key", compute)

        assert len(calls) == 1

    async def test_invalidate_prefix_only_hits_one_seller(self, redis_client):
        manager = CacheManager("dashboard")
        await manager.set(dashboard_cache_key("s1", "dashboard", "7d", "2024-12-16"), {"a": 1})
        await manager.set(dashboard_cache_key("s1", "analytics", "30d", "2024-12-16"), {"a": 2})
        await manager.set(dashboard_cache_key("s2", "dashboard", "7d", "2024-12-16"), {"a": 3})

        assert await manager.invalidate_prefix("s1:") == 2
        assert list(redis_client.data) == ["dashboard:s2:dashboard:7d:2024-12-16"]

    async def test_undecodable_entry_is_a_miss(self, redis_client):
        redis_client.data["dashboard:bad"] = "{not json"

        assert await CacheManager("dashboard").get("bad") is None

    def test_cache_key_layout(self):
        assert dashboard_cache_key("s1", "dashboard", "7d", "2024-12-16") == "s1:dashboard:7d:2024-12-16"


class TestRedisErrors:
    """Runtime redis failures behave like an unavailable cache"""

    async def test_get_is_a_miss(self, unreachable_redis):
        assert await CacheManager("dashboard").get("key") is None

    async def test_set_reports_not_stored(self, unreachable_redis):
        assert await CacheManager("dashboard").set("key", {"a": 1}) is False

    async def test_invalidate_deletes_nothing(self, unreachable_redis):
        assert await CacheManager("dashboard").invalidate_prefix("s1:") == 0

    async def test_get_or_set_still_computes(self, unreachable_redis):
        async def compute():
            return {"value": 1}

        assert await CacheManager("dashboard").get_or_set("key", compute) == {"value": 1}
