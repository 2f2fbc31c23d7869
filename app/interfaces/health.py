"""
Liveness endpoint.

Reports the running version so health checks and deploys can confirm
which build answers. Touches neither the database nor the cache.
"""

from fastapi import APIRouter, Depends

from app.core.config import Settings
from app.interfaces.members.dependencies import get_app_settings
from app.interfaces.members.schemas import HealthResponse

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Returns application health status and version.",
)
async def health_check(settings: Settings = Depends(get_app_settings)) -> HealthResponse:
    """Return current application health status."""
    return HealthResponse(status="ok", version=settings.version)
