"""
Serving Module
"""
from .cache import (
    CacheManager,
    close_redis,
    dashboard_cache,
    dashboard_cache_key,
    get_redis,
    init_redis,
    is_redis_available,
)

__all__ = [
    "CacheManager",
    "close_redis",
    "dashboard_cache",
    "dashboard_cache_key",
    "get_redis",
    "init_redis",
    "is_redis_available",
]
