"""
Redis-backed task cache.

Entries are the JSON form of ``TaskRead`` stored with SETEX under
``<prefix><task id>``, so they expire on their own even when an eviction is
missed.
"""

from __future__ import annotations

import pydantic
from redis import asyncio as aioredis
from redis.exceptions import RedisError

from task_api.cache.base import TaskCache
from task_api.core.exceptions import CacheUnavailableError
from task_api.core.logging import get_logger
from task_api.schemas.task import TaskRead

logger = get_logger("cache.redis", component="cache")


class RedisTaskCache(TaskCache):
    """
    Cache-aside store for single tasks.

    Read:  service -> cache (miss) -> database -> cache -> service
    Write: service -> database -> evict cache entry
    """

    def __init__(
        self,
        client: aioredis.Redis,
        ttl_seconds: int = 600,
        key_prefix: str = "tasks::",
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.client = client
        self.ttl_seconds = ttl_seconds
        self.key_prefix = key_prefix

    @classmethod
    def from_url(
        cls,
        url: str,
        *,
        ttl_seconds: int = 600,
        key_prefix: str = "tasks::",
        timeout_seconds: float = 2.0,
    ) -> RedisTaskCache:
        """Build a cache around a new client for ``url``."""
        client = aioredis.Redis.from_url(
            url,
            decode_responses=True,
            socket_timeout=timeout_seconds,
            socket_connect_timeout=timeout_seconds,
        )
        return cls(client, ttl_seconds=ttl_seconds, key_prefix=key_prefix)

    @property
    def enabled(self) -> bool:
        return True

    def key_for(self, task_id: int) -> str:
        """Cache key for a task id."""
        return f"{self.key_prefix}{task_id}"

    async def get(self, task_id: int) -> TaskRead | None:
        key = self.key_for(task_id)
        try:
            raw = await self.client.get(key)
        except (RedisError, OSError) as exc:
            raise CacheUnavailableError(f"Cache read failed for {key}") from exc

        if raw is None:
            return None

        try:
            return TaskRead.model_validate_json(raw)
        except pydantic.ValidationError as exc:
            raise CacheUnavailableError(f"Undecodable cache entry at {key}") from exc

    async def set(self, task: TaskRead) -> None:
        key = self.key_for(task.id)
        try:
            await self.client.setex(key, self.ttl_seconds, task.model_dump_json())
        except (RedisError, OSError) as exc:
            raise CacheUnavailableError(f"Cache write failed for {key}") from exc

    async def delete(self, task_id: int) -> None:
        key = self.key_for(task_id)
        try:
            await self.client.delete(key)
        except (RedisError, OSError) as exc:
            raise CacheUnavailableError(f"Cache eviction failed for {key}") from exc

    async def ping(self) -> bool:
        try:
            return bool(await self.client.ping())
        except (RedisError, OSError):
            logger.warning("Redis ping failed", exc_info=True)
            return False

    async def close(self) -> None:
        await self.client.aclose()
