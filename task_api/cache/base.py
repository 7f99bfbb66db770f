"""
Task cache interface.

The task service talks to the cache only through this interface, so its
read/invalidate logic is the same whether caching is on or off.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from task_api.schemas.task import TaskRead


class TaskCache(ABC):
    """
    Key-value cache of single tasks, keyed by task id.

    ``get``, ``set`` and ``delete`` raise ``CacheUnavailableError`` when the
    backing cache cannot be reached; callers decide whether that matters.
    """

    @property
    @abstractmethod
    def enabled(self) -> bool:
        """Whether lookups can ever hit."""
        ...

    @abstractmethod
    async def get(self, task_id: int) -> TaskRead | None:
        """Return the cached task, or None on a miss."""
        ...

    @abstractmethod
    async def set(self, task: TaskRead) -> None:
        """Store ``task`` under its id with the configured time-to-live."""
        ...

    @abstractmethod
    async def delete(self, task_id: int) -> None:
        """Evict the entry for ``task_id`` if there is one."""
        ...

    async def ping(self) -> bool:
        """Check that the cache is reachable."""
        return True

    async def close(self) -> None:
        """Release connections held by the cache."""
        return None


class NullCache(TaskCache):
    """Cache used when caching is disabled: every lookup misses."""

    @property
    def enabled(self) -> bool:
        return False

    async def get(self, task_id: int) -> TaskRead | None:
        return None

    async def set(self, task: TaskRead) -> None:
        return None

    async def delete(self, task_id: int) -> None:
        return None
