"""Task repository for database operations."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from task_api.models.task import Task, TaskStatus
from task_api.repositories.base import BaseRepository, store_errors


def _escape_like(value: str) -> str:
    """Escape LIKE wildcards so user input matches literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class TaskRepository(BaseRepository[Task]):
    """Repository for Task entity operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize task repository.

        Args:
            session: Async database session.
        """
        super().__init__(Task, session)

    async def get_by_status(self, status: TaskStatus) -> list[Task]:
        """Get tasks with exactly the given status, ordered by id.

        Args:
            status: Status to match.

        Returns:
            List of tasks.
        """
        with store_errors(f"list tasks with status {status}"):
            result = await self.session.execute(
                select(Task).where(Task.status == status).order_by(Task.id)
            )
            return list(result.scalars().all())

    async def search_by_title(self, text: str) -> list[Task]:
        """Get tasks whose title contains ``text``, ignoring case.

        Args:
            text: Substring to look for.

        Returns:
            List of tasks ordered by id.
        """
        pattern = f"%{_escape_like(text)}%"
        with store_errors("search tasks by title"):
            result = await self.session.execute(
                select(Task).where(Task.title.ilike(pattern, escape="\\")).order_by(Task.id)
            )
            return list(result.scalars().all())
