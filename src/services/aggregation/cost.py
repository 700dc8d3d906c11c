"""Cost breakdown for a cross verification."""

from collections import defaultdict
from decimal import ROUND_HALF_UP, Decimal

from src.config.constants import COST_CURRENCY, DEFAULT_RESPONSE_COST
from src.services.verification.models import CostBreakdown, VerificationResult

CENT = Decimal("0.01")


def calculate_cost_breakdown(responses: list[VerificationResult]) -> CostBreakdown:
    """Sum response costs per organization name; responses without a cost count 0.01."""
    per_source: dict[str, Decimal] = defaultdict(Decimal)
    for response in responses:
        amount = Decimal(str(response.cost.amount)) if response.cost else Decimal(DEFAULT_RESPONSE_COST)
        per_source[response.source.organization_name] += amount

    total = sum(per_source.values(), Decimal(0))
    return CostBreakdown(
        total_amount=float(total.quantize(CENT, rounding=ROUND_HALF_UP)),
        currency=COST_CURRENCY,
        breakdown={
            name: float(amount.quantize(CENT, rounding=ROUND_HALF_UP))
            for name, amount in per_source.items()
        },
    )
