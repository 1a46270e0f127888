import json
from unittest.mock import AsyncMock, patch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from gymdesk.core import redis as cache


class TestCacheWithoutClient:
    @pytest.mark.asyncio
    async def test_reads_miss_and_writes_are_dropped(self):
        with patch.object(cache, "redis_client", None):
            await cache.set_cached_json("instructors", [{"id": "1"}], 60)
            await cache.invalidate("instructors")

            assert await cache.get_cached_json("instructors") is None


class TestCacheWithClient:
    @pytest.mark.asyncio
    async def test_round_trips_json(self):
        client = AsyncMock()
        client.get.return_value = json.dumps({"active_members": 3})

        with patch.object(cache, "redis_client", client):
            await cache.set_cached_json("usage_stats:abc", {"active_members": 3}, 300)
            cached = await cache.get_cached_json("usage_stats:abc")

        client.set.assert_awaited_once_with("usage_stats:abc", '{"active_members": 3}', ex=300)
        assert cached == {"active_members": 3}

    @pytest.mark.asyncio
    async def test_redis_errors_are_treated_as_misses(self):
        client = AsyncMock()
        client.get.side_effect = RedisConnectionError("down")
        client.delete.side_effect = RedisConnectionError("down")

        with patch.object(cache, "redis_client", client):
            assert await cache.get_cached_json("instructors") is None
            await cache.invalidate("instructors")

    @pytest.mark.asyncio
    async def test_invalidate_without_keys_skips_redis(self):
        client = AsyncMock()

        with patch.object(cache, "redis_client", client):
            await cache.invalidate()

        client.delete.assert_not_called()
