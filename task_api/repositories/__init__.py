"""Repository package for data access layer."""

from task_api.repositories.base import BaseRepository
from task_api.repositories.task import TaskRepository

__all__ = [
    "BaseRepository",
    "TaskRepository",
]
