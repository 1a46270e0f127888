"""Best-effort JSON cache on top of the shared Redis connection.

The client is opened in the application lifespan. Without it, or when Redis
errors, reads miss and writes are dropped so callers fall back to the database.
"""

import json
import logging
from typing import Any

from redis.asyncio import Redis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)

redis_client: Redis | None = None


async def get_cached_json(key: str) -> Any | None:
    if redis_client is None:
        return None
    try:
        raw = await redis_client.get(key)
    except RedisError:
        logger.warning("Cache read failed for %s", key, exc_info=True)
        return None
    return json.loads(raw) if raw else None


async def set_cached_json(key: str, value: Any, ttl_seconds: int) -> None:
    """Store ``value`` for ``ttl_seconds``; Decimal, UUID and dates are written as strings."""
    if redis_client is None:
        return
    try:
        await redis_client.set(key, json.dumps(value, default=str), ex=ttl_seconds)
    except RedisError:
        logger.warning("Cache write failed for %s", key, exc_info=True)


async def invalidate(*keys: str) -> None:
    if redis_client is None or not keys:
        return
    try:
        await redis_client.delete(*keys)
    except RedisError:
        logger.warning("Cache invalidation failed for %s", ", ".join(keys), exc_info=True)
