"""Cross verification aggregation: consensus, risk, cost and audit."""

from src.services.aggregation.aggregator import AggregationOutcome, ResultAggregator, round_to
from src.services.aggregation.audit import build_audit_trail
from src.services.aggregation.cost import calculate_cost_breakdown
from src.services.aggregation.risk import RiskAssessor, risk_level

__all__ = [
    "AggregationOutcome",
    "ResultAggregator",
    "RiskAssessor",
    "build_audit_trail",
    "calculate_cost_breakdown",
    "risk_level",
    "round_to",
]
