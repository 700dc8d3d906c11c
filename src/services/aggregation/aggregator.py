"""
Result aggregation for cross verification.

LOGIC:
    AND       verified iff every response is verified; confidence = min
    OR        verified iff any response is verified; confidence = max
    WEIGHTED  sum(w * (conf if verified else 0)) / sum(w); verified iff
              the weighted score reaches minimum_confidence
    CUSTOM    verified iff consensus >= 50; confidence = mean

Fewer settled responses than minimum_sources forces "partial"; no settled
responses at all is "inconclusive" with confidence 0.
"""

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from src.config.constants import CONSENSUS_THRESHOLD, CombinationLogic, OverallResult
from src.services.verification.models import CrossVerificationRequest, VerificationResult

logger = logging.getLogger(__name__)

DEFAULT_WEIGHT = 1.0


def round_to(value: float, places: int = 2) -> float:
    """Round half up to a fixed number of decimal places."""
    exponent = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(exponent, rounding=ROUND_HALF_UP))


@dataclass
class AggregationOutcome:
    overall_result: OverallResult
    confidence: float
    consensus: float


class ResultAggregator:
    """Combines settled verification results under a combination logic."""

    def aggregate(
        self,
        responses: list[VerificationResult],
        request: CrossVerificationRequest,
        settled_count: int | None = None,
    ) -> AggregationOutcome:
        """
        Combine responses under the request logic.

        settled_count is the number of genuinely settled responses when the
        list also carries fallback substitutes; the partial rule applies to it.
        """
        if not responses:
            return AggregationOutcome(OverallResult.INCONCLUSIVE, 0.0, 0.0)

        verified_count = sum(1 for r in responses if r.verified)
        consensus = verified_count / len(responses) * 100
        confidences = [r.confidence for r in responses]

        if request.logic == CombinationLogic.AND:
            verified = verified_count == len(responses)
            confidence = float(min(confidences))
        elif request.logic == CombinationLogic.OR:
            verified = verified_count > 0
            confidence = float(max(confidences))
        elif request.logic == CombinationLogic.WEIGHTED:
            confidence = self.weighted_score(responses, request.weights or {})
            verified = confidence >= request.minimum_confidence
        else:
            verified = consensus >= CONSENSUS_THRESHOLD
            confidence = sum(confidences) / len(confidences)

        overall = OverallResult.VERIFIED if verified else OverallResult.NOT_VERIFIED
        settled = len(responses) if settled_count is None else settled_count
        if settled < request.minimum_sources:
            logger.info(
                f"Only {settled} of {request.minimum_sources} required sources "
                f"settled for {request.id}; result is partial"
            )
            overall = OverallResult.PARTIAL

        return AggregationOutcome(overall, round_to(confidence), round_to(consensus))

    @staticmethod
    def weighted_score(responses: list[VerificationResult], weights: dict[str, float]) -> float:
        total_score = 0.0
        total_weight = 0.0
        for response in responses:
            weight = weights.get(response.query_id, DEFAULT_WEIGHT)
            total_score += (response.confidence if response.verified else 0) * weight
            total_weight += weight
        return total_score / total_weight if total_weight > 0 else 0.0
