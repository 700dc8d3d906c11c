"""Request/Response models for API endpoints."""

from typing import Any, Literal

from pydantic import BaseModel, Field

from src.config.constants import CombinationLogic, FailureStrategy
from src.services.verification.models import (
    CrossVerificationRequest,
    QueryMetadata,
    RequestMetadata,
    VerificationQuery,
    generate_request_id,
)


class VerifyRequest(BaseModel):
    """Request model for the single verification endpoint."""

    id: str | None = Field(None, description="Query id; generated when omitted")
    query: str = Field(..., min_length=1, description="Free-text verification question")
    query_type: Literal["simple", "complex", "cross-verification"] = "simple"
    board_id: str | None = Field(None, description="Restrict the search to one board")
    organization_id: str | None = Field(None, description="Organization whose boards are searched")
    requester_id: str = Field(..., description="Requester identifier, billed for the verification")
    requester_type: Literal["individual", "organization", "system"] = "individual"
    anonymous_mode: bool = False
    urgency: Literal["low", "normal", "high", "critical"] = "normal"
    expires_at: int | None = None
    metadata: QueryMetadata | None = None

    def to_query(self) -> VerificationQuery:
        fields = self.model_dump(exclude={"id"})
        return VerificationQuery(id=self.id or generate_request_id(), **fields)


class CrossVerifyRequest(BaseModel):
    """Request model for the cross verification endpoint."""

    id: str | None = Field(None, description="Request id; generated when omitted")
    queries: list[VerifyRequest] = Field(..., min_length=1)
    logic: CombinationLogic = CombinationLogic.CUSTOM
    weights: dict[str, float] | None = Field(None, description="Query id -> weight (WEIGHTED logic)")
    minimum_confidence: float = Field(70, ge=0, le=100)
    minimum_sources: int = Field(1, ge=0)
    timeout: int | None = Field(None, gt=0, description="Global timeout in milliseconds")
    failure_strategy: FailureStrategy = FailureStrategy.BEST_EFFORT
    requester_id: str
    metadata: RequestMetadata | None = None

    def to_request(self, default_timeout_ms: int) -> CrossVerificationRequest:
        return CrossVerificationRequest(
            id=self.id or generate_request_id(),
            queries=[query.to_query() for query in self.queries],
            logic=self.logic,
            weights=self.weights,
            minimum_confidence=self.minimum_confidence,
            minimum_sources=self.minimum_sources,
            timeout=self.timeout or default_timeout_ms,
            failure_strategy=self.failure_strategy,
            requester_id=self.requester_id,
            metadata=self.metadata,
        )


class HealthResponse(BaseModel):
    """Response model for health endpoint."""

    status: str = Field(..., description="Service status")
    version: str = Field(..., description="Application version")
    gateway: str = Field(..., description="Active trust gateway variant")


class CacheStatsResponse(BaseModel):
    """Response model for cache statistics."""

    results: dict[str, Any]
    in_flight: dict[str, int]
