"""Task endpoints."""

from typing import Annotated

from fastapi import APIRouter, Query, status

from task_api.api.deps import TaskServiceDep
from task_api.schemas.base import CountResponse
from task_api.schemas.task import TaskCreate, TaskRead, TaskUpdate

router = APIRouter()


@router.get(
    "",
    response_model=list[TaskRead],
    summary="List tasks",
    description="Get every task, ordered by id.",
)
async def list_tasks(service: TaskServiceDep) -> list[TaskRead]:
    """List all tasks. Never served from the cache."""
    return await service.get_all()


@router.get(
    "/search",
    response_model=list[TaskRead],
    summary="Search tasks",
    description="Find tasks whose title contains the given text (case-insensitive).",
)
async def search_tasks(
    service: TaskServiceDep,
    title: Annotated[str, Query(min_length=1, max_length=255, description="Text to find")],
) -> list[TaskRead]:
    """Search tasks by title.

    - **title**: substring to match, ignoring case
    """
    return await service.search_by_title(title)


@router.get(
    "/count",
    response_model=CountResponse,
    summary="Count tasks",
)
async def count_tasks(service: TaskServiceDep) -> CountResponse:
    """Get the total number of tasks."""
    return CountResponse(count=await service.count())


@router.get(
    "/status/{task_status}",
    response_model=list[TaskRead],
    summary="List tasks by status",
)
async def list_tasks_by_status(task_status: str, service: TaskServiceDep) -> list[TaskRead]:
    """List tasks with exactly the given status.

    An unknown status is rejected with 400.
    """
    return await service.get_by_status(task_status)


@router.get(
    "/{task_id}",
    response_model=TaskRead,
    summary="Get task",
    description="Get a task by its ID.",
)
async def get_task(task_id: int, service: TaskServiceDep) -> TaskRead:
    """Get a specific task by ID.

    Served from the cache when caching is enabled and the entry is present.
    """
    return await service.get_by_id(task_id)


@router.post(
    "",
    response_model=TaskRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create task",
)
async def create_task(data: TaskCreate, service: TaskServiceDep) -> TaskRead:
    """Create a new task.

    - **title**: required, non-empty
    - **description**: optional
    - **status**: TODO, IN_PROGRESS, COMPLETED or CANCELLED (default TODO)
    - **priority**: LOW, MEDIUM, HIGH or CRITICAL (default MEDIUM)
    """
    return await service.create(data)


@router.put(
    "/{task_id}",
    response_model=TaskRead,
    summary="Update task",
    description="Replace a task's title, description, status and priority.",
)
async def update_task(task_id: int, data: TaskUpdate, service: TaskServiceDep) -> TaskRead:
    """Update a task. Evicts the task's cache entry."""
    return await service.update(task_id, data)


@router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete task",
)
async def delete_task(task_id: int, service: TaskServiceDep) -> None:
    """Delete a task. Evicts the task's cache entry."""
    await service.delete(task_id)
