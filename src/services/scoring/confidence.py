"""
Confidence Scorer Service.

Turns collected evidence into a 0-100 confidence score.

FORMULA:
    base       = mean(evidence confidences)
    adjustment = +5 simple, 0 medium, -10 complex
    diversity  = 2 x number of distinct evidence kinds
    score      = round(clamp(base + adjustment + diversity, 0, 100))

EXAMPLE:
    Two document evidence items at 85, medium complexity query:
    85 + 0 + 2 = 87
"""

import logging
from decimal import ROUND_HALF_UP, Decimal

from src.config.constants import COMPLEXITY_ADJUSTMENT, DIVERSITY_BONUS_PER_KIND
from src.services.analysis.models import QueryAnalysis
from src.services.verification.models import Evidence

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class ConfidenceScorer:
    """Evidence-based confidence scoring."""

    def score(self, evidence: list[Evidence], analysis: QueryAnalysis) -> int:
        """
        Score a set of evidence.

        Returns:
            Integer confidence between 0 and 100; 0 when there is no evidence
        """
        if not evidence:
            return 0

        base = sum(item.confidence for item in evidence) / len(evidence)
        adjustment = COMPLEXITY_ADJUSTMENT.get(analysis.complexity, 0)
        diversity_bonus = len({item.type for item in evidence}) * DIVERSITY_BONUS_PER_KIND

        raw = base + adjustment + diversity_bonus
        score = round_half_up(min(100.0, max(0.0, raw)))
        logger.debug(
            f"Confidence: base={base:.2f} adjustment={adjustment} "
            f"diversity={diversity_bonus} -> {score}"
        )
        return score
