"""Pydantic schemas package."""

from task_api.schemas.base import BaseSchema, CountResponse
from task_api.schemas.task import TaskCreate, TaskRead, TaskUpdate

__all__ = [
    "BaseSchema",
    "CountResponse",
    "TaskCreate",
    "TaskRead",
    "TaskUpdate",
]
