"""SQLAlchemy models package."""

from task_api.models.base import Base
from task_api.models.task import Task, TaskPriority, TaskStatus

__all__ = [
    "Base",
    "Task",
    "TaskPriority",
    "TaskStatus",
]
