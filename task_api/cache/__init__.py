"""Task cache implementations and the factory that picks one."""

from task_api.cache.base import NullCache, TaskCache
from task_api.cache.redis_cache import RedisTaskCache
from task_api.config import Settings


def build_cache(settings: Settings) -> TaskCache:
    """Return a Redis cache when caching is enabled, otherwise a no-op cache."""
    if not settings.cache_enabled:
        return NullCache()
    return RedisTaskCache.from_url(
        settings.redis_url,
        ttl_seconds=settings.cache_ttl_seconds,
        key_prefix=settings.cache_key_prefix,
        timeout_seconds=settings.cache_timeout_seconds,
    )


__all__ = [
    "NullCache",
    "RedisTaskCache",
    "TaskCache",
    "build_cache",
]
