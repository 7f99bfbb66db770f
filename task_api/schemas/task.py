"""Task schemas for request/response validation."""

from datetime import datetime

from pydantic import Field

from task_api.models.task import (
    DESCRIPTION_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    TaskPriority,
    TaskStatus,
)
from task_api.schemas.base import BaseSchema


class TaskBase(BaseSchema):
    """Fields a client supplies for a task."""

    title: str = Field(
        ...,
        min_length=1,
        max_length=TITLE_MAX_LENGTH,
        description="Task title",
        examples=["Learn Kubernetes"],
    )
    description: str | None = Field(
        default=None,
        max_length=DESCRIPTION_MAX_LENGTH,
        description="Optional longer description",
    )
    status: TaskStatus = Field(
        default=TaskStatus.TODO,
        description="Lifecycle state",
        examples=["TODO"],
    )
    priority: TaskPriority = Field(
        default=TaskPriority.MEDIUM,
        description="Task priority",
        examples=["HIGH"],
    )


class TaskCreate(TaskBase):
    """Schema for creating a new task."""

    pass


class TaskUpdate(TaskBase):
    """Schema for updating a task.

    Updates replace every mutable field; omitted optional fields fall back to
    their defaults rather than keeping the stored value.
    """

    pass


class TaskRead(TaskBase):
    """Schema for reading task data.

    This is also the payload stored in the cache.
    """

    id: int
    created_at: datetime
    updated_at: datetime
