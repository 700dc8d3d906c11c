"""Verification endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from src.api.dependencies import get_engine
from src.api.models import CrossVerifyRequest, VerifyRequest
from src.config.settings import Settings, get_settings
from src.orchestrator.engine import VerificationEngine
from src.services.verification.models import (
    ApiResponse,
    CrossVerificationResult,
    VerificationResult,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/verify", response_model=ApiResponse[VerificationResult])
async def verify(
    request: VerifyRequest,
    engine: VerificationEngine = Depends(get_engine),  # noqa: B008
) -> ApiResponse[VerificationResult]:
    """
    Verify a single query.

    Failures of the verification itself come back as ``success: false``
    in the envelope; only unexpected errors produce a 500.
    """
    query = request.to_query()
    try:
        return await engine.verify(query)
    except Exception as e:
        logger.error(f"Error verifying query {query.id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e)) from e


@router.post("/cross-verify", response_model=ApiResponse[CrossVerificationResult])
async def cross_verify(
    request: CrossVerifyRequest,
    engine: VerificationEngine = Depends(get_engine),  # noqa: B008
    settings: Settings = Depends(get_settings),  # noqa: B008
) -> ApiResponse[CrossVerificationResult]:
    """Verify several queries together and aggregate the outcome."""
    cross_request = request.to_request(settings.default_cross_timeout_ms)
    try:
        return await engine.verify_all(cross_request)
    except Exception as e:
        logger.error(f"Error in cross verification {cross_request.id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e)) from e
