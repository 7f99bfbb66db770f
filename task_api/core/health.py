"""
Readiness checks for the database and the cache.

The database is required; the cache is optional, so a cache outage only
degrades the service.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from task_api.cache.base import TaskCache
from task_api.core.logging import get_logger
from task_api.database import Database

logger = get_logger("core.health")


class HealthStatus(str, Enum):
    """Health check status levels."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"
    DISABLED = "disabled"


@dataclass
class HealthCheckResult:
    """Result of a single health check."""

    name: str
    status: HealthStatus
    message: str | None = None
    latency_ms: float | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "status": self.status.value,
            "message": self.message,
            "latency_ms": round(self.latency_ms, 2) if self.latency_ms is not None else None,
        }


@dataclass
class OverallHealth:
    """Overall service health."""

    status: HealthStatus
    checks: list[HealthCheckResult] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "status": self.status.value,
            "checks": [c.to_dict() for c in self.checks],
        }


async def check_database(database: Database) -> HealthCheckResult:
    """Verify the database answers ``SELECT 1``."""
    start = time.perf_counter()
    try:
        await database.ping()
    except (SQLAlchemyError, OSError) as exc:
        logger.warning("Database health check failed: %r", exc)
        return HealthCheckResult(
            name="database",
            status=HealthStatus.UNHEALTHY,
            message=str(exc),
        )
    return HealthCheckResult(
        name="database",
        status=HealthStatus.HEALTHY,
        latency_ms=(time.perf_counter() - start) * 1000,
    )


async def check_cache(cache: TaskCache) -> HealthCheckResult:
    """Ping the cache; a disabled cache is reported as such."""
    if not cache.enabled:
        return HealthCheckResult(name="cache", status=HealthStatus.DISABLED)

    start = time.perf_counter()
    if not await cache.ping():
        return HealthCheckResult(
            name="cache",
            status=HealthStatus.DEGRADED,
            message="Cache unreachable; serving from database",
        )
    return HealthCheckResult(
        name="cache",
        status=HealthStatus.HEALTHY,
        latency_ms=(time.perf_counter() - start) * 1000,
    )


async def check_readiness(database: Database, cache: TaskCache) -> OverallHealth:
    """Run all checks and combine them into one status."""
    checks = [await check_database(database), await check_cache(cache)]
    statuses = {c.status for c in checks}

    if HealthStatus.UNHEALTHY in statuses:
        overall = HealthStatus.UNHEALTHY
    elif HealthStatus.DEGRADED in statuses:
        overall = HealthStatus.DEGRADED
    else:
        overall = HealthStatus.HEALTHY

    return OverallHealth(status=overall, checks=checks)
