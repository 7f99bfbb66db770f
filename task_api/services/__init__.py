"""Services package for business logic."""

from task_api.services.task import TaskService

__all__ = [
    "TaskService",
]
