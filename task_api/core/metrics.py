"""Prometheus metrics for the task API."""

import time
from collections.abc import Callable
from typing import Any

from fastapi import Request, Response
from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, Counter, Histogram, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
)

REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2.5, 5, 10],
)

CACHE_OPERATIONS = Counter(
    "task_cache_operations_total",
    "Task cache lookups and evictions by outcome",
    ["operation", "result"],
)


def record_cache(operation: str, result: str) -> None:
    """Count one cache operation, e.g. ``("get", "hit")`` or ``("delete", "error")``."""
    CACHE_OPERATIONS.labels(operation=operation, result=result).inc()


UNMATCHED_ENDPOINT = "unmatched"


def route_template(request: Request) -> str:
    """Path template of the route that served ``request``, e.g. ``/api/v1/tasks/{task_id}``.

    Requests no route matched share one label.
    """
    route = request.scope.get("route")
    return getattr(route, "path", UNMATCHED_ENDPOINT)


class MetricsMiddleware(BaseHTTPMiddleware):
    """Collect request count and latency for every request except /metrics."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Any],
    ) -> Response:
        """Time the request and record it."""
        if request.url.path == "/metrics":
            return await call_next(request)

        method = request.method
        start_time = time.perf_counter()

        response: Response = await call_next(request)
        endpoint = route_template(request)

        REQUEST_COUNT.labels(
            method=method, endpoint=endpoint, status=str(response.status_code)
        ).inc()
        REQUEST_LATENCY.labels(method=method, endpoint=endpoint).observe(
            time.perf_counter() - start_time
        )
        return response


def metrics_response() -> Response:
    """Render the default registry in Prometheus text format."""
    return Response(generate_latest(REGISTRY), media_type=CONTENT_TYPE_LATEST)
