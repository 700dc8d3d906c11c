"""Risk assessment over a set of settled verification results."""

from src.config.constants import (
    CONTRADICTION_RATIO_THRESHOLD,
    LOW_CONFIDENCE_RISK_THRESHOLD,
    MANUAL_REVIEW_THRESHOLD,
    SLOW_RESPONSE_MS,
    RiskLevel,
)
from src.services.verification.models import (
    CrossVerificationRequest,
    RiskAssessment,
    VerificationResult,
)

LOW_CONFIDENCE_POINTS = 20
CONTRADICTION_POINTS = 30
SLOW_RESPONSE_POINTS = 10


def risk_level(score: int) -> RiskLevel:
    if score <= 20:
        return RiskLevel.LOW
    if score <= 40:
        return RiskLevel.MEDIUM
    if score <= 60:
        return RiskLevel.HIGH
    return RiskLevel.CRITICAL


class RiskAssessor:
    """Scores the risk of acting on an aggregated verification."""

    def assess(
        self,
        responses: list[VerificationResult],
        request: CrossVerificationRequest,
        settled_count: int | None = None,
    ) -> RiskAssessment:
        if not responses:
            recommendations = ["Increase number of verification sources"]
            return RiskAssessment(
                risk_level=RiskLevel.CRITICAL,
                risk_factors=["No verification sources responded"],
                recommendations=recommendations,
            )

        factors: list[str] = []
        recommendations: list[str] = []
        score = 0

        total = len(responses)
        avg_confidence = sum(r.confidence for r in responses) / total
        if avg_confidence < LOW_CONFIDENCE_RISK_THRESHOLD:
            factors.append("Low average confidence across sources")
            score += LOW_CONFIDENCE_POINTS

        # Flags when verified and not-verified counts are close to each other.
        # A single response always has ratio 1.0.
        verified_count = sum(1 for r in responses if r.verified)
        ratio = abs(verified_count - (total - verified_count)) / total
        if ratio < CONTRADICTION_RATIO_THRESHOLD:
            factors.append("Contradictory verification results")
            score += CONTRADICTION_POINTS
            recommendations.append("Investigate conflicting sources")

        avg_response_time = sum(r.response_time for r in responses) / total
        if avg_response_time > SLOW_RESPONSE_MS:
            factors.append("Slow verification response times")
            score += SLOW_RESPONSE_POINTS

        settled = total if settled_count is None else settled_count
        if settled < request.minimum_sources:
            recommendations.append("Increase number of verification sources")
        if avg_confidence < MANUAL_REVIEW_THRESHOLD:
            recommendations.append("Consider manual review for low-confidence results")

        return RiskAssessment(
            risk_level=risk_level(score),
            risk_factors=factors,
            recommendations=recommendations,
        )
