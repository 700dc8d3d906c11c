"""Health endpoint."""

from fastapi import APIRouter, Depends

from src.api.dependencies import get_engine
from src.api.models import HealthResponse
from src.config.settings import Settings, get_settings
from src.orchestrator.engine import VerificationEngine

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(
    engine: VerificationEngine = Depends(get_engine),  # noqa: B008
    settings: Settings = Depends(get_settings),  # noqa: B008
) -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(status="healthy", version=settings.app_version, gateway=engine.gateway.name)
