"""Health check endpoint."""

from fastapi import APIRouter

from staybook import __version__
from staybook_api.models.common import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse, summary="Liveness check")
async def health() -> HealthResponse:
    return HealthResponse(status="healthy", version=__version__)
