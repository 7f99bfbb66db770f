"""API v1 router aggregating all endpoints."""

from fastapi import APIRouter

from task_api.api.v1 import health, tasks

api_router = APIRouter()

api_router.include_router(
    health.router,
    prefix="",
    tags=["System"],
)

api_router.include_router(
    tasks.router,
    prefix="/tasks",
    tags=["Tasks"],
)
