"""Pipeline and cross verification state models."""

import logging
from dataclasses import dataclass, field
from typing import Optional, Dict, List

from src.config.constants import BridgeStatus
from src.services.analysis.models import QueryAnalysis
from src.services.verification.models import (
    Evidence,
    VerificationQuery,
    VerificationResult,
    VerificationSource,
)

logger = logging.getLogger(__name__)


@dataclass
class PipelineState:
    """State object passed through the verification pipeline."""

    # Input
    query: VerificationQuery
    started_at: int

    # Step 1: Analyze
    analysis: Optional[QueryAnalysis] = None

    # Step 2: Discover
    sources: List[VerificationSource] = field(default_factory=list)

    # Step 3: Collect
    evidence: List[Evidence] = field(default_factory=list)

    # Step 4: Score
    confidence: int = 0

    # Timings per step, in milliseconds
    step_durations: Dict[str, float] = field(default_factory=dict)

    @property
    def verified_sources(self) -> List[VerificationSource]:
        return [source for source in self.sources if source.verified]


_ALLOWED_TRANSITIONS: dict[BridgeStatus, frozenset[BridgeStatus]] = {
    BridgeStatus.PENDING: frozenset({BridgeStatus.FANNING_OUT, BridgeStatus.FAILED}),
    BridgeStatus.FANNING_OUT: frozenset(
        {BridgeStatus.AGGREGATING, BridgeStatus.TIMED_OUT, BridgeStatus.FAILED}
    ),
    BridgeStatus.AGGREGATING: frozenset({BridgeStatus.COMPLETED, BridgeStatus.FAILED}),
    BridgeStatus.TIMED_OUT: frozenset({BridgeStatus.COMPLETED, BridgeStatus.FAILED}),
    BridgeStatus.COMPLETED: frozenset(),
    BridgeStatus.FAILED: frozenset(),
}


@dataclass
class BridgeState:
    """Lifecycle of one cross verification request.

    Pending -> FanningOut -> (Aggregating | TimedOut) -> Completed | Failed.
    Terminal states accept no further transitions.
    """

    request_id: str
    started_at: int
    status: BridgeStatus = BridgeStatus.PENDING
    history: List[BridgeStatus] = field(default_factory=lambda: [BridgeStatus.PENDING])

    # Settled responses keyed by query id
    responses: Dict[str, VerificationResult] = field(default_factory=dict)
    # Queries that answered with a failure envelope: query id -> error
    failed: Dict[str, str] = field(default_factory=dict)
    # Queries still running when the timeout fired
    unresolved: List[str] = field(default_factory=list)
    # Queries answered by a substituted fallback result
    substituted: List[str] = field(default_factory=list)

    @property
    def timed_out(self) -> bool:
        return BridgeStatus.TIMED_OUT in self.history

    @property
    def is_terminal(self) -> bool:
        return not _ALLOWED_TRANSITIONS[self.status]

    def transition(self, target: BridgeStatus) -> None:
        if target not in _ALLOWED_TRANSITIONS[self.status]:
            raise RuntimeError(
                f"Illegal cross verification transition {self.status.value} -> {target.value}"
            )
        logger.debug(f"Request {self.request_id}: {self.status.value} -> {target.value}")
        self.status = target
        self.history.append(target)
