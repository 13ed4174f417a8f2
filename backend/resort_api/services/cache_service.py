"""
Redis caching service for aggregate catalog payloads.

CACHING STRATEGY
================

What we cache:
  - The /api/all catalog bundle and the /api/images union
  - Keys: "catalog:all" and "catalog:images"

Why:
  - These are the heaviest reads (eight and six tables respectively)
  - The catalog is edited by hand outside this API, rarely

Invalidation:
  - TTL only (REDIS_CACHE_TTL). Nothing in this API writes catalog tables,
    so there is no write path to hook an explicit invalidation into.

Availability is never cached: the booking transaction always reads the
database under a row lock.

Redis is optional. When it is disabled or unreachable every helper here
degrades to a no-op and callers fall through to the database.
"""

import json
from typing import Optional

import redis.asyncio as redis
from resort_api.core.config import get_settings
from resort_api.core.logging import get_logger
from resort_api.core.metrics import record_cache_operation, redis_errors

logger = get_logger(__name__)
settings = get_settings()

CATALOG_ALL_KEY = "catalog:all"
CATALOG_IMAGES_KEY = "catalog:images"

_redis_client: Optional[redis.Redis] = None


async def get_redis() -> Optional[redis.Redis]:
    """Get or create Redis connection. Returns None if Redis is disabled."""
    global _redis_client

    if not settings.REDIS_ENABLED:
        return None

    if _redis_client is None:
        try:
            _redis_client = redis.from_url(
                settings.REDIS_URL,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=2,
                socket_timeout=2,
                retry_on_timeout=True,
            )
            await _redis_client.ping()
            logger.info("redis_connected", url=settings.REDIS_URL)
        except Exception as e:
            logger.error("redis_connection_failed", error=str(e))
            redis_errors.inc()
            _redis_client = None
            return None

    return _redis_client


async def close_redis() -> None:
    """Close Redis connection on shutdown."""
    global _redis_client
    if _redis_client:
        await _redis_client.aclose()
        _redis_client = None


async def get_cached(key: str) -> Optional[dict | list]:
    client = await get_redis()
    if not client:
        return None

    try:
        data = await client.get(key)
        if data is not None:
            record_cache_operation("get", "hit")
            logger.debug("cache_hit", cache_key=key)
            return json.loads(data)
        record_cache_operation("get", "miss")
        logger.debug("cache_miss", cache_key=key)
    except Exception as e:
        record_cache_operation("get", "error")
        redis_errors.inc()
        logger.error("cache_get_error", cache_key=key, error=str(e))

    return None


async def set_cached(key: str, data: dict | list) -> None:
    """Store a JSON-serializable payload with the configured TTL."""
    client = await get_redis()
    if not client:
        return

    try:
        await client.setex(key, settings.REDIS_CACHE_TTL, json.dumps(data, default=str))
        record_cache_operation("set", "ok")
        logger.debug("cache_set", cache_key=key, ttl=settings.REDIS_CACHE_TTL)
    except Exception as e:
        record_cache_operation("set", "error")
        redis_errors.inc()
        logger.error("cache_set_error", cache_key=key, error=str(e))


async def get_cache_stats() -> dict:
    """Redis status summary for the health endpoint."""
    client = await get_redis()
    if not client:
        return {"status": "disabled"}

    try:
        info = await client.info("stats")
        hits = info.get("keyspace_hits", 0)
        misses = info.get("keyspace_misses", 0)
        return {
            "status": "connected",
            "hits": hits,
            "misses": misses,
            "hit_rate": round(hits / max(hits + misses, 1) * 100, 2),
        }
    except Exception as e:
        redis_errors.inc()
        return {"status": "error", "error": str(e)}
