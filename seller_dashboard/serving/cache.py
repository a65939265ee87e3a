"""
Redis Cache Module

Read-through caching for dashboard payloads with:
- Connection pooling
- JSON serialization
- TTL management
- Namespace and prefix invalidation

Caching is optional. When redis is disabled or was never initialized every
operation is a no-op miss, and redis errors at runtime are logged and
treated the same way, so callers always fall back to computing.
"""

import json
from datetime import timedelta
from typing import Any, Awaitable, Callable, Optional, Union

import structlog
from redis.asyncio import ConnectionPool, Redis
from redis.exceptions import RedisError

from seller_dashboard.config import get_settings

logger = structlog.get_logger(__name__)

# Global Redis connection
_redis_pool: Optional[ConnectionPool] = None
_redis_client: Optional[Redis] = None


async def init_redis() -> Redis:
    """Initialize Redis connection pool"""
    global _redis_pool, _redis_client

    if _redis_client is not None:
        return _redis_client

    settings = get_settings()
    pool = ConnectionPool.from_url(
        settings.redis.get_url(),
        max_connections=settings.redis.max_connections,
        socket_timeout=settings.redis.socket_timeout,
        decode_responses=settings.redis.decode_responses,
    )
    client = Redis(connection_pool=pool)

    try:
        await client.ping()
    except Exception as e:
        logger.error("Redis connection failed", error=str(e))
        await pool.disconnect()
        raise

    _redis_pool, _redis_client = pool, client
    logger.info("Redis connection established")
    return _redis_client


async def close_redis() -> None:
    """Close Redis connection pool"""
    global _redis_pool, _redis_client

    if _redis_client is not None:
        await _redis_client.aclose()
        _redis_client = None

    if _redis_pool is not None:
        await _redis_pool.disconnect()
        _redis_pool = None
        logger.info("Redis connection closed")


def get_redis() -> Redis:
    """Get Redis client instance"""
    if _redis_client is None:
        raise RuntimeError("Redis not initialized. Call init_redis() first.")
    return _redis_client


def is_redis_available() -> bool:
    return _redis_client is not None


async def cache_get(key: str) -> Optional[Any]:
    """
    Get value from cache.

    Args:
        key: Cache key

    Returns:
        Cached value or None if not found or caching is unavailable
    """
    if _redis_client is None:
        return None

    try:
        value = await _redis_client.get(key)
    except RedisError as e:
        logger.warning("Cache read failed", key=key, error=str(e))
        return None

    if value is None:
        return None

    try:
        return json.loads(value)
    except json.JSONDecodeError:
        logger.warning("Discarding undecodable cache entry", key=key)
        return None


async def cache_set(
    key: str,
    value: Any,
    ttl: Optional[Union[int, timedelta]] = None,
) -> bool:
    """
    Set value in cache.

    Args:
        key: Cache key
        value: JSON-compatible value
        ttl: Time-to-live in seconds or timedelta

    Returns:
        True if stored
    """
    if _redis_client is None:
        return False

    try:
        serialized = json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError) as e:
        logger.warning("Failed to serialize value for cache", key=key, error=str(e))
        return False

    if isinstance(ttl, timedelta):
        ttl = int(ttl.total_seconds())

    try:
        if ttl:
            await _redis_client.setex(key, ttl, serialized)
        else:
            await _redis_client.set(key, serialized)
    except RedisError as e:
        logger.warning("Cache write failed", key=key, error=str(e))
        return False
    return True


async def cache_delete_pattern(pattern: str) -> int:
    """Delete all keys matching a glob pattern"""
    if _redis_client is None:
        return 0

    try:
        keys = [key async for key in _redis_client.scan_iter(match=pattern)]
        if not keys:
            return 0
        return await _redis_client.delete(*keys)
    except RedisError as e:
        logger.warning("Cache invalidation failed", pattern=pattern, error=str(e))
        return 0


class CacheManager:
    """
    Cache manager with namespace support.

    Example:
        cache = CacheManager("dashboard")
        payload = await cache.get_or_set(key, compute, ttl=300)
        await cache.invalidate_prefix(str(seller_id))
    """

    def __init__(self, namespace: str, default_ttl: int = 300):
        self.namespace = namespace
        self.default_ttl = default_ttl

    def _key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    async def get(self, key: str) -> Optional[Any]:
        return await cache_get(self._key(key))

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        return await cache_set(self._key(key), value, self.default_ttl if ttl is None else ttl)

    async def invalidate_prefix(self, prefix: str) -> int:
        """Drop every key in the namespace starting with ``prefix``"""
        deleted = await cache_delete_pattern(f"{self.namespace}:{prefix}*")
        if deleted:
            logger.debug("Cache invalidated", namespace=self.namespace, prefix=prefix, keys=deleted)
        return deleted

    async def get_or_set(
        self,
        key: str,
        factory: Callable[[], Awaitable[Any]],
        ttl: Optional[int] = None,
    ) -> Any:
        """
        Get from cache or compute and cache.

        Args:
            key: Cache key
            factory: Async function computing a JSON-compatible value
            ttl: Time-to-live

        Returns:
            Cached or computed value
        """
        value = await self.get(key)
        if value is not None:
            return value

        value = await factory()
        await self.set(key, value, ttl)
        return value


def dashboard_cache_key(seller_id: Any, view: str, period: str, day: Any) -> str:
    """Key of a cached seller view: ``<seller>:<view>:<period>:<calendar day>``"""
    return f"{seller_id}:{view}:{period}:{day}"


dashboard_cache = CacheManager("dashboard")
