"""API dependencies for dependency injection."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from task_api.cache.base import TaskCache
from task_api.config import Settings
from task_api.database import Database, get_db
from task_api.services.task import TaskService

# Type alias for database session dependency
DBSession = Annotated[AsyncSession, Depends(get_db)]


def get_settings_dep(request: Request) -> Settings:
    """Settings the running application was built with."""
    return request.app.state.settings


def get_database(request: Request) -> Database:
    """Database owned by the running application."""
    return request.app.state.database


def get_cache(request: Request) -> TaskCache:
    """Task cache owned by the running application."""
    return request.app.state.cache


CacheDep = Annotated[TaskCache, Depends(get_cache)]
DatabaseDep = Annotated[Database, Depends(get_database)]
SettingsDep = Annotated[Settings, Depends(get_settings_dep)]


async def get_task_service(
    session: DBSession,
    cache: CacheDep,
) -> AsyncGenerator[TaskService, None]:
    """Get task service instance.

    Args:
        session: Database session.
        cache: Application task cache.

    Yields:
        TaskService instance.
    """
    yield TaskService(session, cache)


TaskServiceDep = Annotated[TaskService, Depends(get_task_service)]
