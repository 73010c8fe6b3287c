"""System endpoints."""

from fastapi import APIRouter  # type: ignore[import-untyped]

from time_manager.api.models import HealthResponse
from time_manager.core.models import utcnow

SERVICE_NAME = "timemanager-backend"

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check endpoint.

    Note:
        This endpoint is public (no authentication required).

    Example:
        >>> GET /api/health
        {
            "status": "ok",
            "service": "timemanager-backend",
            "timestamp": "2025-11-16T10:30:00Z"
        }
    """
    return HealthResponse(status="ok", service=SERVICE_NAME, timestamp=utcnow())
