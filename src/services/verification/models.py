"""Verification domain models shared by TrustGate, TrustBridge and the API."""

import secrets
import time
from dataclasses import dataclass
from typing import Any, Generic, Literal, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.config.constants import (
    AuditResult,
    CombinationLogic,
    EvidenceType,
    FailureStrategy,
    OverallResult,
    RiskLevel,
    VerificationLevel,
    VerificationMethod,
)

T = TypeVar("T")


def now_ms() -> int:
    """Wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def generate_request_id(timestamp_ms: int | None = None) -> str:
    """Build a request id of the form ``req_<ms>_<7 chars>``."""
    stamp = timestamp_ms if timestamp_ms is not None else now_ms()
    return f"req_{stamp}_{secrets.token_hex(4)[:7]}"


# =============================================================================
# QUERIES
# =============================================================================


class QueryMetadata(BaseModel):
    """Caller-provided context for a query."""

    purpose: str = ""
    context: str = ""
    reference_id: str | None = None


class VerificationQuery(BaseModel):
    """A single yes/no verification question. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    id: str
    query: str
    query_type: Literal["simple", "complex", "cross-verification"] = "simple"
    board_id: str | None = None
    organization_id: str | None = None
    requester_id: str
    requester_type: Literal["individual", "organization", "system"] = "individual"
    anonymous_mode: bool = False
    urgency: Literal["low", "normal", "high", "critical"] = "normal"
    expires_at: int | None = None
    metadata: QueryMetadata | None = None


# =============================================================================
# EVIDENCE AND SOURCES
# =============================================================================


class Evidence(BaseModel):
    """One piece of evidence contributed by a trust source."""

    type: EvidenceType
    source: str
    timestamp: int
    confidence: int = Field(ge=0, le=100)
    details: str | None = None
    verifiable: bool = True


@dataclass
class VerificationSource:
    """Candidate trust source; collection marks it verified on a match."""

    board_id: str
    organization_id: str
    organization_name: str
    board_name: str = ""
    category: str | None = None
    verified: bool = False
    confidence: int = 0
    timestamp: int = 0


# =============================================================================
# SINGLE RESULT
# =============================================================================


class SourceDescriptor(BaseModel):
    """Attribution of a verification result."""

    organization_id: str
    organization_name: str
    board_id: str
    board_name: str
    verification_level: VerificationLevel


class VerificationDetails(BaseModel):
    method: VerificationMethod
    evidence: list[Evidence] = Field(default_factory=list)
    audit_trail: list[str] = Field(default_factory=list)


class PrivacyDescriptor(BaseModel):
    data_shared: Literal["none", "minimal", "full"]
    anonymized: bool
    encryption_used: bool = True


class VerificationCost(BaseModel):
    amount: float
    currency: str = "USD"
    billed_to: str


class VerificationResult(BaseModel):
    """Outcome of one TrustGate verification."""

    query_id: str
    verified: bool
    confidence: int = Field(ge=0, le=100)
    timestamp: int
    responded_at: int
    response_time: int
    source: SourceDescriptor
    verification: VerificationDetails
    privacy: PrivacyDescriptor
    cost: VerificationCost | None = None

    @property
    def evidence(self) -> list[Evidence]:
        return self.verification.evidence


# =============================================================================
# CROSS VERIFICATION
# =============================================================================


class RequestMetadata(BaseModel):
    purpose: str = ""
    importance: Literal["low", "medium", "high", "critical"] = "medium"
    deadline_at: int | None = None


class CrossVerificationRequest(BaseModel):
    """A bundle of queries verified together under one combination logic."""

    model_config = ConfigDict(frozen=True)

    id: str
    queries: list[VerificationQuery]
    logic: CombinationLogic = CombinationLogic.CUSTOM
    weights: dict[str, float] | None = None
    minimum_confidence: float = Field(default=70, ge=0, le=100)
    minimum_sources: int = Field(default=1, ge=0)
    timeout: int = Field(default=30_000, gt=0, description="Global timeout in milliseconds")
    failure_strategy: FailureStrategy = FailureStrategy.BEST_EFFORT
    requester_id: str
    metadata: RequestMetadata | None = None

    @field_validator("weights")
    @classmethod
    def validate_weights(cls, v: dict[str, float] | None) -> dict[str, float] | None:
        if v is not None and any(weight < 0 for weight in v.values()):
            raise ValueError("weights must be non-negative")
        return v


class AggregationStats(BaseModel):
    total_sources: int
    successful_sources: int
    average_confidence: float
    processing_time: int
    timed_out: bool = False


class RiskAssessment(BaseModel):
    risk_level: RiskLevel
    risk_factors: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


class CostBreakdown(BaseModel):
    total_amount: float
    currency: str = "USD"
    breakdown: dict[str, float] = Field(default_factory=dict)


class AuditStep(BaseModel):
    timestamp: int
    action: str
    source: str
    duration: int
    result: AuditResult
    details: str | None = None


class AuditTrail(BaseModel):
    start_time: int
    end_time: int
    steps: list[AuditStep] = Field(default_factory=list)


class BridgeError(BaseModel):
    """A per-query problem recorded on a cross verification."""

    code: str
    message: str
    source: str
    timestamp: int
    severity: RiskLevel = RiskLevel.MEDIUM
    recoverable: bool = True


class CrossVerificationResult(BaseModel):
    """Aggregated outcome of a TrustBridge request."""

    request_id: str
    overall_result: OverallResult
    confidence: float
    consensus: float
    responses: list[VerificationResult] = Field(default_factory=list)
    aggregation: AggregationStats
    risk_assessment: RiskAssessment
    cost: CostBreakdown
    audit_trail: AuditTrail
    errors: list[BridgeError] = Field(default_factory=list)


# =============================================================================
# ENVELOPE
# =============================================================================


class ApiResponse(BaseModel, Generic[T]):
    """Response envelope returned by every engine operation."""

    success: bool
    data: Optional[T] = None
    error: str | None = None
    timestamp: int = Field(default_factory=now_ms)
    request_id: str = Field(default_factory=generate_request_id)

    @classmethod
    def ok(cls, data: Any) -> "ApiResponse":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, message: str, error: BaseException | None = None) -> "ApiResponse":
        detail = f"{message}: {error}" if error is not None else message
        return cls(success=False, error=detail)
