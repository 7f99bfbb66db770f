"""Liveness, readiness and metrics endpoints (outside the versioned API)."""

from fastapi import APIRouter, Response, status
from fastapi.responses import JSONResponse

from task_api.api.deps import CacheDep, DatabaseDep
from task_api.core.health import HealthStatus, check_readiness
from task_api.core.metrics import metrics_response

router = APIRouter(tags=["System"])


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Liveness probe for container orchestration."""
    return {"status": HealthStatus.HEALTHY.value}


@router.get("/health/ready")
async def readiness_check(database: DatabaseDep, cache: CacheDep) -> JSONResponse:
    """Readiness probe: 503 when the database is down, 200 otherwise."""
    health = await check_readiness(database, cache)
    status_code = (
        status.HTTP_503_SERVICE_UNAVAILABLE
        if health.status == HealthStatus.UNHEALTHY
        else status.HTTP_200_OK
    )
    return JSONResponse(status_code=status_code, content=health.to_dict())


@router.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    """Expose Prometheus metrics."""
    return metrics_response()
