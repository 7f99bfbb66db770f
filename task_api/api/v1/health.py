"""Version endpoint for the versioned API."""

from fastapi import APIRouter

from task_api import __version__
from task_api.api.deps import SettingsDep

router = APIRouter()


@router.get("/version")
async def get_version(settings: SettingsDep) -> dict[str, str]:
    """Get API version information.

    Returns:
        Version information including API version and environment.
    """
    return {
        "version": __version__,
        "api_version": settings.api_version,
        "environment": settings.environment,
    }
