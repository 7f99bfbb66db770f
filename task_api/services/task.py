"""Task service for business logic.

Reads of a single task go through the cache (read-through on a miss); every
mutation commits to the database and then evicts the task's cache entry.
Collection reads always go to the database.
"""

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, TypeVar

import pydantic
from sqlalchemy.ext.asyncio import AsyncSession

from task_api.cache.base import NullCache, TaskCache
from task_api.core.exceptions import (
    CacheUnavailableError,
    ErrorCode,
    NotFoundError,
    ValidationError,
)
from task_api.core.logging import get_logger
from task_api.core.metrics import record_cache
from task_api.models.task import MAX_TASK_ID, Task, TaskStatus
from task_api.repositories.task import TaskRepository
from task_api.schemas.task import TaskBase, TaskCreate, TaskRead, TaskUpdate

logger = get_logger("services.task", component="task_service")

SchemaType = TypeVar("SchemaType", bound=TaskBase)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _validate(schema: type[SchemaType], data: Any) -> SchemaType:
    """Validate ``data`` (a schema instance or a plain mapping) against ``schema``.

    Raises:
        ValidationError: With one detail entry per offending field.
    """
    payload = data.model_dump() if isinstance(data, pydantic.BaseModel) else data
    if not isinstance(payload, Mapping):
        raise ValidationError("Task data must be an object")
    try:
        return schema.model_validate(dict(payload))
    except pydantic.ValidationError as exc:
        details = [
            {
                "field": ".".join(str(part) for part in error["loc"]) or "body",
                "message": error["msg"],
            }
            for error in exc.errors()
        ]
        raise ValidationError("Invalid task data", details=details) from exc


class TaskService:
    """Service for task business logic.

    Handles validation, timestamps and the cache protocol around the task
    repository. Cache failures never fail an operation: they are logged and
    the database is used instead.
    """

    def __init__(self, session: AsyncSession, cache: TaskCache | None = None) -> None:
        """Initialize service with database session and cache.

        Args:
            session: Async database session.
            cache: Task cache; a no-op cache is used when omitted.
        """
        self.session = session
        self.repository = TaskRepository(session)
        self.cache = cache if cache is not None else NullCache()

    async def create(self, data: TaskCreate | Mapping[str, Any]) -> TaskRead:
        """Create a new task.

        The cache is not touched; it is filled on the first read.

        Args:
            data: Task creation data.

        Returns:
            Created task with its assigned id.

        Raises:
            ValidationError: If the title is empty or status/priority invalid.
        """
        validated = _validate(TaskCreate, data)
        now = _utcnow()

        task = await self.repository.create(
            **validated.model_dump(),
            created_at=now,
            updated_at=now,
        )
        await self.repository.commit()

        logger.info("Created task %s", task.id, extra={"task_id": task.id})
        return self._to_read_schema(task)

    async def get_by_id(self, task_id: int) -> TaskRead:
        """Get a task by ID, consulting the cache first.

        Args:
            task_id: Task's id.

        Returns:
            Task data.

        Raises:
            NotFoundError: If the task does not exist.
        """
        self._check_task_id(task_id)
        cached = await self._cache_get(task_id)
        if cached is not None:
            return cached

        task = await self._get_or_404(task_id)
        result = self._to_read_schema(task)
        await self._cache_set(result)
        return result

    async def get_all(self) -> list[TaskRead]:
        """List every task, ordered by id."""
        tasks = await self.repository.get_all()
        return [self._to_read_schema(t) for t in tasks]

    async def get_by_status(self, status: TaskStatus | str) -> list[TaskRead]:
        """List tasks with exactly ``status``.

        Raises:
            ValidationError: If ``status`` is not a known status.
        """
        try:
            status = TaskStatus(status)
        except ValueError:
            allowed = ", ".join(s.value for s in TaskStatus)
            raise ValidationError(
                f"Invalid status '{status}'",
                details=[{"field": "status", "message": f"Must be one of: {allowed}"}],
            ) from None

        tasks = await self.repository.get_by_status(status)
        return [self._to_read_schema(t) for t in tasks]

    async def search_by_title(self, text: str) -> list[TaskRead]:
        """List tasks whose title contains ``text``, case-insensitively."""
        tasks = await self.repository.search_by_title(text)
        return [self._to_read_schema(t) for t in tasks]

    async def count(self) -> int:
        """Total number of tasks."""
        return await self.repository.count()

    async def update(self, task_id: int, data: TaskUpdate | Mapping[str, Any]) -> TaskRead:
        """Replace a task's title, description, status and priority.

        Any status may follow any other. The cache entry for the task is
        evicted once the change is committed.

        Args:
            task_id: Task's id.
            data: Replacement field values.

        Returns:
            Updated task.

        Raises:
            NotFoundError: If the task does not exist.
            ValidationError: If the new values are invalid.
        """
        task = await self._get_or_404(task_id)
        validated = _validate(TaskUpdate, data)

        task = await self.repository.update(
            task,
            **validated.model_dump(),
            updated_at=_utcnow(),
        )
        await self.repository.commit()
        await self._cache_evict(task_id)

        logger.info("Updated task %s", task_id, extra={"task_id": task_id})
        return self._to_read_schema(task)

    async def delete(self, task_id: int) -> None:
        """Delete a task and evict it from the cache.

        Raises:
            NotFoundError: If the task does not exist, including when it was
                already deleted.
        """
        task = await self._get_or_404(task_id)

        await self.repository.delete(task)
        await self.repository.commit()
        await self._cache_evict(task_id)

        logger.info("Deleted task %s", task_id, extra={"task_id": task_id})

    @staticmethod
    def _not_found(task_id: int) -> NotFoundError:
        return NotFoundError(
            resource="Task",
            resource_id=task_id,
            code=ErrorCode.TASK_NOT_FOUND,
        )

    def _check_task_id(self, task_id: int) -> None:
        """Ids the store cannot hold can never name a task."""
        if not 1 <= task_id <= MAX_TASK_ID:
            raise self._not_found(task_id)

    async def _get_or_404(self, task_id: int) -> Task:
        self._check_task_id(task_id)
        task = await self.repository.get_by_id(task_id)
        if task is None:
            raise self._not_found(task_id)
        return task

    async def _cache_get(self, task_id: int) -> TaskRead | None:
        if not self.cache.enabled:
            return None
        try:
            cached = await self.cache.get(task_id)
        except CacheUnavailableError as exc:
            record_cache("get", "error")
            logger.warning(
                "Cache unavailable, reading task %s from database: %s",
                task_id,
                exc.message,
                extra={"task_id": task_id},
            )
            return None

        if cached is None:
            record_cache("get", "miss")
            logger.debug("Cache miss for task %s", task_id, extra={"task_id": task_id})
        else:
            record_cache("get", "hit")
            logger.debug("Cache hit for task %s", task_id, extra={"task_id": task_id})
        return cached

    async def _cache_set(self, task: TaskRead) -> None:
        if not self.cache.enabled:
            return
        try:
            await self.cache.set(task)
        except CacheUnavailableError as exc:
            record_cache("set", "error")
            logger.warning(
                "Could not cache task %s: %s",
                task.id,
                exc.message,
                extra={"task_id": task.id},
            )

    async def _cache_evict(self, task_id: int) -> None:
        if not self.cache.enabled:
            return
        try:
            await self.cache.delete(task_id)
        except CacheUnavailableError as exc:
            # The entry's TTL still bounds how long a stale copy can live
            record_cache("delete", "error")
            logger.warning(
                "Could not evict task %s from cache: %s",
                task_id,
                exc.message,
                extra={"task_id": task_id},
            )
            return
        record_cache("delete", "evicted")

    @staticmethod
    def _to_read_schema(task: Task) -> TaskRead:
        return TaskRead.model_validate(task)
