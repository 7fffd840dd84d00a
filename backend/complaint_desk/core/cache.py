"""Redis caching utilities with in-memory fallback.

Used for two things: the shared store of complaint result pages (so repeated
identical list queries from the same user reuse a fresh result) and the parsed
filter vocabulary.
"""

import asyncio
import fnmatch
import hashlib
import json
import time
from typing import Any, Dict, Optional, Tuple

import redis.asyncio as redis
from loguru import logger

from complaint_desk.core.config import settings


# Global Redis client (initialized on first use)
_redis_client: Optional[redis.Redis] = None
_redis_available: bool = False
_redis_checked: bool = False

# In-memory cache fallback (when Redis is unavailable)
# Structure: {key: (value, expiry_timestamp)}
_memory_cache: Dict[str, Tuple[Any, float]] = {}
_memory_cache_max_size: int = 1000


async def get_redis_client() -> Optional[redis.Redis]:
    """Get or create the Redis client; None when Redis is disabled or unreachable."""
    global _redis_client, _redis_available, _redis_checked

    if not settings.REDIS_ENABLED:
        return None

    # Only try to connect once per process
    if not _redis_checked:
        _redis_checked = True
        try:
            _redis_client = redis.Redis(
                host=settings.REDIS_HOST,
                port=settings.REDIS_PORT,
                db=settings.REDIS_DB,
                password=settings.REDIS_PASSWORD,
                decode_responses=True,
                socket_connect_timeout=0.5,
                socket_timeout=0.5,
            )
            await asyncio.wait_for(_redis_client.ping(), timeout=0.5)
            _redis_available = True
            logger.info("redis_connected")
        except (redis.RedisError, OSError, asyncio.TimeoutError) as exc:
            _redis_client = None
            _redis_available = False
            logger.bind(error=str(exc)).warning("redis_unavailable_using_memory_cache")

    return _redis_client if _redis_available else None


async def close_redis_client() -> None:
    """Close Redis client connection."""
    global _redis_client, _redis_available, _redis_checked
    if _redis_client:
        await _redis_client.aclose()
    _redis_client = None
    _redis_available = False
    _redis_checked = False


def generate_cache_key(prefix: str, **kwargs) -> str:
    """Generate a cache key from prefix and keyword arguments."""
    # Sort kwargs for consistent key generation
    sorted_kwargs = sorted(kwargs.items())
    key_str = f"{prefix}:{json.dumps(sorted_kwargs, sort_keys=True, default=str)}"
    # Hash long keys to keep them short
    if len(key_str) > 200:
        key_str = f"{prefix}:{hashlib.sha256(key_str.encode()).hexdigest()}"
    return key_str


def _get_memory_cache(key: str) -> Optional[Any]:
    if key not in _memory_cache:
        return None

    value, expiry = _memory_cache[key]
    if expiry > 0 and time.time() > expiry:
        del _memory_cache[key]
        return None
    return value


def _set_memory_cache(key: str, value: Any, ttl: int) -> bool:
    expiry = time.time() + ttl if ttl > 0 else 0

    # If cache is too large, drop the oldest 10% (insertion order)
    if len(_memory_cache) >= _memory_cache_max_size:
        keys_to_remove = list(_memory_cache.keys())[: int(_memory_cache_max_size * 0.1)]
        for k in keys_to_remove:
            del _memory_cache[k]

    _memory_cache[key] = (value, expiry)
    return True


async def get_cache(key: str) -> Optional[Any]:
    """Get value from cache (Redis or in-memory fallback)."""
    client = await get_redis_client()

    if client:
        try:
            value = await asyncio.wait_for(client.get(key), timeout=0.1)
            if value:
                return json.loads(value)
        except (redis.RedisError, asyncio.TimeoutError, ValueError) as exc:
            logger.bind(key=key, error=str(exc)).debug("redis_get_failed")

    return _get_memory_cache(key)


async def set_cache(key: str, value: Any, ttl: int = 900) -> bool:
    """Set value in cache with TTL; values must be JSON-serializable."""
    client = await get_redis_client()

    if client:
        try:
            await client.setex(key, ttl, json.dumps(value))
            # Also store in memory cache as backup
            _set_memory_cache(key, value, ttl)
            return True
        except (redis.RedisError, asyncio.TimeoutError) as exc:
            logger.bind(key=key, error=str(exc)).debug("redis_set_failed")

    return _set_memory_cache(key, value, ttl)


async def delete_cache(key: str) -> bool:
    """Delete a key from cache (Redis and/or in-memory)."""
    deleted = False

    client = await get_redis_client()
    if client:
        try:
            deleted = bool(await client.delete(key))
        except redis.RedisError as exc:
            logger.bind(key=key, error=str(exc)).debug("redis_delete_failed")

    if key in _memory_cache:
        del _memory_cache[key]
        deleted = True

    return deleted


async def clear_cache_pattern(pattern: str) -> int:
    """Clear all cache keys matching a glob pattern (Redis and/or in-memory)."""
    deleted_count = 0

    client = await get_redis_client()
    if client:
        try:
            keys = [key async for key in client.scan_iter(match=pattern)]
            if keys:
                deleted_count += await client.delete(*keys)
        except redis.RedisError as exc:
            logger.bind(pattern=pattern, error=str(exc)).debug("redis_clear_failed")

    keys_to_delete = [k for k in _memory_cache if fnmatch.fnmatch(k, pattern)]
    for key in keys_to_delete:
        del _memory_cache[key]
        deleted_count += 1

    return deleted_count
