"""
Constants, enums, and static values.
"""

from enum import Enum


class Complexity(str, Enum):
    """Query complexity derived from keyword count."""

    SIMPLE = "simple"
    MEDIUM = "medium"
    COMPLEX = "complex"


class QueryIntent(str, Enum):
    """Intent classification for verification queries."""

    VERIFICATION = "verification"
    LOOKUP = "lookup"
    COMPARISON = "comparison"
    EXISTENCE = "existence"


class EvidenceType(str, Enum):
    """Kinds of evidence a source can contribute."""

    DOCUMENT = "document"
    WITNESS = "witness"
    BIOMETRIC = "biometric"
    LEDGER = "ledger"
    CROSS_REFERENCE = "cross-reference"


class VerificationMethod(str, Enum):
    """How a verification decision was reached."""

    DIRECT = "direct"
    CROSS_REFERENCE = "cross-reference"
    ASSISTED = "assisted"


class VerificationLevel(str, Enum):
    """Confidence-derived quality tier attached to a result."""

    BASIC = "basic"
    ENHANCED = "enhanced"
    PREMIUM = "premium"


class CombinationLogic(str, Enum):
    """How several verification results are combined."""

    AND = "AND"
    OR = "OR"
    WEIGHTED = "WEIGHTED"
    CUSTOM = "CUSTOM"


class FailureStrategy(str, Enum):
    """What to do with failed or unresolved queries in a cross verification."""

    FAIL_FAST = "fail-fast"
    BEST_EFFORT = "best-effort"
    FALLBACK = "fallback"


class OverallResult(str, Enum):
    """Final verdict of a cross verification."""

    VERIFIED = "verified"
    NOT_VERIFIED = "not-verified"
    PARTIAL = "partial"
    INCONCLUSIVE = "inconclusive"


class RiskLevel(str, Enum):
    """Risk levels for a cross verification."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class AuditResult(str, Enum):
    """Outcome recorded on an audit step."""

    SUCCESS = "success"
    FAILURE = "failure"
    TIMEOUT = "timeout"


class BridgeStatus(str, Enum):
    """Cross verification lifecycle states."""

    PENDING = "pending"
    FANNING_OUT = "fanning_out"
    AGGREGATING = "aggregating"
    TIMED_OUT = "timed_out"
    COMPLETED = "completed"
    FAILED = "failed"


class PipelineStep(str, Enum):
    """Pipeline execution steps."""
    ANALYZE = "analyze"
    DISCOVER = "discover"
    COLLECT = "collect"
    SCORE = "score"

class PipelineStepDescription(str, Enum):
    """Pipeline execution step descriptions."""
    ANALYZE = "Extract keywords, entities, intent and complexity from the query"
    DISCOVER = "Resolve candidate trust sources from the registry"
    COLLECT = "Search each candidate source for matching records"
    SCORE = "Turn collected evidence into a confidence score"


# Scoring
VERIFIED_THRESHOLD = 70
ENHANCED_THRESHOLD = 70
PREMIUM_THRESHOLD = 90
DOCUMENT_EVIDENCE_CONFIDENCE = 85
COMPLEXITY_ADJUSTMENT = {
    Complexity.SIMPLE: 5,
    Complexity.MEDIUM: 0,
    Complexity.COMPLEX: -10,
}
DIVERSITY_BONUS_PER_KIND = 2

# Cost (USD)
COST_CURRENCY = "USD"
BASE_VERIFICATION_COST = "0.01"
EVIDENCE_UNIT_COST = "0.005"
PREMIUM_CONFIDENCE_SURCHARGE = "0.02"
ENHANCED_CONFIDENCE_SURCHARGE = "0.01"
DEFAULT_RESPONSE_COST = "0.01"

# Aggregation / risk
CONSENSUS_THRESHOLD = 50
LOW_CONFIDENCE_RISK_THRESHOLD = 70
MANUAL_REVIEW_THRESHOLD = 80
CONTRADICTION_RATIO_THRESHOLD = 0.6
SLOW_RESPONSE_MS = 5000
AUDIT_STEP_OFFSET_MS = 100

# Attribution defaults
NETWORK_ORGANIZATION_ID = "system"
NETWORK_ORGANIZATION_NAME = "TrustChain Network"
NETWORK_BOARD_ID = "multiple"
NETWORK_BOARD_NAME = "Cross-Board Verification"
