"""Base model class and mixins for SQLAlchemy models."""

import re
from datetime import datetime

from sqlalchemy import DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, declared_attr, mapped_column


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models.

    Provides common functionality and configuration for all models.
    """

    @declared_attr.directive
    def __tablename__(cls) -> str:
        """Generate table name from class name (e.g., TaskNote -> task_notes)."""
        snake_case = re.sub(r"(?<!^)(?=[A-Z])", "_", cls.__name__).lower()
        if snake_case.endswith("y"):
            return snake_case[:-1] + "ies"
        return snake_case + "s"


class TimestampMixin:
    """Mixin for created_at and updated_at columns.

    Values are assigned by the service layer, not by the database.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
