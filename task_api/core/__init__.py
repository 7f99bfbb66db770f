"""Core module exports."""

from task_api.core.exceptions import (
    AppException,
    CacheUnavailableError,
    ErrorCode,
    ErrorKind,
    NotFoundError,
    StoreError,
    ValidationError,
)
from task_api.core.logging import get_logger, setup_logging

__all__ = [
    "AppException",
    "CacheUnavailableError",
    "ErrorCode",
    "ErrorKind",
    "NotFoundError",
    "StoreError",
    "ValidationError",
    "get_logger",
    "setup_logging",
]
