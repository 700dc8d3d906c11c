"""Cache management endpoints."""

import logging

from fastapi import APIRouter, Depends

from src.api.dependencies import get_engine
from src.api.models import CacheStatsResponse
from src.orchestrator.engine import VerificationEngine

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/stats", response_model=CacheStatsResponse)
async def get_cache_stats(
    engine: VerificationEngine = Depends(get_engine),  # noqa: B008
) -> CacheStatsResponse:
    """Return result cache hit/miss statistics and in-flight counters."""
    return CacheStatsResponse(**engine.cache_stats())


@router.delete("")
async def clear_cache(
    engine: VerificationEngine = Depends(get_engine),  # noqa: B008
) -> dict[str, str]:
    """Invalidate all cached verification results."""
    logger.warning("Result cache cleared via API request")
    engine.clear_cache()
    return {"message": "Cache cleared successfully", "status": "success"}
