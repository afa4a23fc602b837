"""
Redis caching service for the event listing.

CACHING STRATEGY
================

What we cache:
  - The full event listing response (JSON-serialized), keyed by a generation
    number (`tigertix:events:list:v<N>`)

Invalidation:
  - After every confirmed booking or purchase (tickets changed)
  - After admin create/update
  - Invalidation increments the generation instead of deleting a key. A listing
    request reads the generation before it queries the database and stores its
    result under that generation, so a read that raced a write lands under a
    generation nobody reads any more.
  - TTL-based expiry cleans up old generations

Why NOT cache single events:
  - The event page shows live ticket counts before a purchase
  - The booking core always reads the row under a lock, never from cache

Redis is optional. When it is disabled or unreachable every call degrades to
a cache miss / no-op and the database answers.
"""

import json
from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from tigertix.core.config import get_settings
from tigertix.core.logging import get_logger
from tigertix.core.metrics import record_cache_operation

logger = get_logger(__name__)
settings = get_settings()

EVENT_LIST_KEY = "tigertix:events:list"
EVENT_LIST_VERSION_KEY = "tigertix:events:version"

_redis_client: Optional[redis.Redis] = None


async def get_redis() -> Optional[redis.Redis]:
    """Get or create Redis connection. Returns None if Redis is disabled or down."""
    global _redis_client

    if not settings.REDIS_ENABLED:
        return None

    if _redis_client is None:
        client = redis.from_url(
            settings.REDIS_URL,
            encoding="utf-8",
            decode_responses=True,
            socket_connect_timeout=2,
            socket_timeout=2,
        )
        try:
            await client.ping()
        except RedisError as e:
            logger.error("redis_connection_failed", error=str(e))
            await client.aclose()
            return None
        _redis_client = client
        logger.info("redis_connected", url=settings.REDIS_URL)

    return _redis_client


async def close_redis() -> None:
    global _redis_client
    if _redis_client:
        await _redis_client.aclose()
        _redis_client = None


async def get_event_list_version() -> Optional[int]:
    """
    Current listing generation, or None when caching is unavailable.
    Callers read it before querying the database and store under it afterwards.
    """
    client = await get_redis()
    if not client:
        return None

    try:
        return int(await client.get(EVENT_LIST_VERSION_KEY) or 0)
    except RedisError as e:
        record_cache_operation("version", "error")
        logger.error("cache_version_error", key=EVENT_LIST_VERSION_KEY, error=str(e))
        return None


def _list_key(version: int) -> str:
    return f"{EVENT_LIST_KEY}:v{version}"


async def get_cached_events(version: Optional[int]) -> Optional[list[dict]]:
    client = await get_redis()
    if not client or version is None:
        return None

    key = _list_key(version)
    try:
        data = await client.get(key)
    except RedisError as e:
        record_cache_operation("get", "error")
        logger.error("cache_get_error", key=key, error=str(e))
        return None

    if data:
        record_cache_operation("get", "hit")
        return json.loads(data)
    record_cache_operation("get", "miss")
    return None


async def set_cached_events(events: list[dict], version: Optional[int]) -> None:
    client = await get_redis()
    if not client or version is None:
        return

    key = _list_key(version)
    try:
        await client.setex(key, settings.REDIS_CACHE_TTL, json.dumps(events, default=str))
        record_cache_operation("set", "ok")
    except RedisError as e:
        record_cache_operation("set", "error")
        logger.error("cache_set_error", key=key, error=str(e))


async def invalidate_event_cache() -> None:
    """Move readers to a new generation; entries stored under older ones are never read again."""
    client = await get_redis()
    if not client:
        return

    try:
        await client.incr(EVENT_LIST_VERSION_KEY)
        record_cache_operation("invalidate", "ok")
    except RedisError as e:
        record_cache_operation("invalidate", "error")
        logger.error("cache_invalidation_error", error=str(e))


async def get_cache_stats() -> dict:
    client = await get_redis()
    if not client:
        return {"status": "disabled"}

    try:
        info = await client.info("stats")
    except RedisError as e:
        return {"status": "error", "error": str(e)}

    hits = info.get("keyspace_hits", 0)
    misses = info.get("keyspace_misses", 0)
    return {
        "status": "connected",
        "hits": hits,
        "misses": misses,
        "hit_rate": round(hits / max(hits + misses, 1) * 100, 2),
    }
