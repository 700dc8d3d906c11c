"""Audit trail construction for cross verification."""

from src.config.constants import AUDIT_STEP_OFFSET_MS, AuditResult
from src.services.verification.models import AuditStep, AuditTrail, VerificationResult


def build_audit_trail(
    query_count: int,
    responses: list[VerificationResult],
    start_time: int,
    end_time: int,
    substituted: set[str] | None = None,
) -> AuditTrail:
    """
    Build the audit trail for one cross verification.

    Args:
        query_count: Number of queries in the request
        responses: Responses that took part in aggregation, in request order
        start_time: Request start (epoch ms)
        end_time: Aggregation end (epoch ms)
        substituted: Query ids answered by a fallback substitute
    """
    substituted = substituted or set()
    steps = [
        AuditStep(
            timestamp=start_time,
            action="cross_verification_started",
            source="system",
            duration=0,
            result=AuditResult.SUCCESS,
            details=f"Processing {query_count} queries",
        )
    ]

    for index, response in enumerate(responses):
        if response.query_id in substituted:
            result = AuditResult.TIMEOUT
        elif response.verified:
            result = AuditResult.SUCCESS
        else:
            result = AuditResult.FAILURE
        steps.append(
            AuditStep(
                timestamp=start_time + index * AUDIT_STEP_OFFSET_MS,
                action="individual_verification",
                source=response.source.organization_name,
                duration=response.response_time,
                result=result,
                details=f"Confidence: {response.confidence}%",
            )
        )

    steps.append(
        AuditStep(
            timestamp=end_time,
            action="aggregation_completed",
            source="system",
            duration=end_time - start_time,
            result=AuditResult.SUCCESS,
            details="Cross-verification completed",
        )
    )
    return AuditTrail(start_time=start_time, end_time=end_time, steps=steps)
