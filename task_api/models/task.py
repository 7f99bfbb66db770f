"""Task model and its enumerations."""

from enum import StrEnum

from sqlalchemy import Enum, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from task_api.models.base import Base, TimestampMixin


class TaskStatus(StrEnum):
    """Lifecycle state of a task.

    Any value may replace any other; there is no enforced transition graph.
    """

    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class TaskPriority(StrEnum):
    """Priority of a task."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


TITLE_MAX_LENGTH = 255
DESCRIPTION_MAX_LENGTH = 2000

# Largest value a 64-bit signed INTEGER/BIGINT primary key can hold
MAX_TASK_ID = 2**63 - 1


class Task(Base, TimestampMixin):
    """A single task record.

    Attributes:
        id: Integer identifier assigned by the database, never reused.
        title: Non-empty title.
        description: Optional free text.
        status: One of ``TaskStatus``.
        priority: One of ``TaskPriority``.
    """

    # AUTOINCREMENT keeps SQLite from handing out the id of a deleted last row
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(
        String(TITLE_MAX_LENGTH),
        nullable=False,
        index=True,
    )

    description: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )

    status: Mapped[TaskStatus] = mapped_column(
        Enum(TaskStatus, name="task_status", native_enum=False, length=20),
        nullable=False,
        default=TaskStatus.TODO,
        index=True,
    )

    priority: Mapped[TaskPriority] = mapped_column(
        Enum(TaskPriority, name="task_priority", native_enum=False, length=20),
        nullable=False,
        default=TaskPriority.MEDIUM,
    )

    def __repr__(self) -> str:
        return f"<Task {self.id} {self.title!r} [{self.status}]>"
