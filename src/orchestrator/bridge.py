"""
TrustBridge - cross verification over many queries.

FLOW:
    1. Fan out: every query becomes a TrustGate task
    2. Race joint completion against the request timeout
    3. Apply the failure strategy (fail-fast, best-effort, fallback)
    4. Aggregate, assess risk, price and audit the settled responses

A timeout only stops waiting: the shared pipeline tasks behind TrustGate are
shielded and keep running, so their results still land in the cache.
"""

import asyncio
import logging

from src.config.constants import (
    NETWORK_BOARD_ID,
    NETWORK_BOARD_NAME,
    NETWORK_ORGANIZATION_ID,
    NETWORK_ORGANIZATION_NAME,
    BridgeStatus,
    FailureStrategy,
    RiskLevel,
    VerificationLevel,
    VerificationMethod,
)
from src.infrastructure.cache.bounded_cache import Clock, system_clock_ms
from src.orchestrator.state import BridgeState
from src.services.aggregation import (
    ResultAggregator,
    RiskAssessor,
    build_audit_trail,
    calculate_cost_breakdown,
    round_to,
)
from src.services.verification.errors import TimeoutExceededError, VerificationError
from src.services.verification.models import (
    AggregationStats,
    ApiResponse,
    BridgeError,
    CrossVerificationRequest,
    CrossVerificationResult,
    PrivacyDescriptor,
    SourceDescriptor,
    VerificationDetails,
    VerificationQuery,
    VerificationResult,
)
from src.services.verification.verifier import TrustGate

logger = logging.getLogger(__name__)


class FailFastAbort(VerificationError):
    """A query failed under the fail-fast strategy."""

    def __init__(self, query_id: str, reason: str):
        self.query_id = query_id
        self.reason = reason
        super().__init__(f"Query {query_id} failed: {reason}")


class TrustBridge:
    """Concurrent multi-query verification with aggregation."""

    def __init__(
        self,
        gate: TrustGate,
        aggregator: ResultAggregator | None = None,
        risk_assessor: RiskAssessor | None = None,
        clock: Clock | None = None,
    ):
        self.gate = gate
        self.aggregator = aggregator or ResultAggregator()
        self.risk_assessor = risk_assessor or RiskAssessor()
        self._clock = clock or system_clock_ms

    def _now(self) -> int:
        return int(self._clock())

    async def verify_all(
        self, request: CrossVerificationRequest
    ) -> ApiResponse[CrossVerificationResult]:
        """Verify every query of the request and aggregate the outcome."""
        state = BridgeState(request_id=request.id, started_at=self._now())
        logger.info(
            f"Cross verification {request.id}: {len(request.queries)} queries, "
            f"logic={request.logic.value}, strategy={request.failure_strategy.value}, "
            f"timeout={request.timeout} ms"
        )

        try:
            state.transition(BridgeStatus.FANNING_OUT)
            await self._fan_out(request, state)

            if state.timed_out and request.failure_strategy == FailureStrategy.FAIL_FAST:
                raise TimeoutExceededError(request.id, request.timeout, len(state.unresolved))
            if not state.timed_out:
                state.transition(BridgeStatus.AGGREGATING)

            result = self._aggregate(request, state)
            state.transition(BridgeStatus.COMPLETED)
        except VerificationError as e:
            logger.warning(f"Cross verification {request.id} aborted: {e}")
            state.transition(BridgeStatus.FAILED)
            return ApiResponse.fail("Cross-verification failed", e)
        except Exception as e:
            logger.exception(f"Cross verification {request.id} failed unexpectedly")
            if not state.is_terminal:
                state.transition(BridgeStatus.FAILED)
            return ApiResponse.fail("Cross-verification failed", e)

        logger.info(
            f"Cross verification {request.id} completed: {result.overall_result.value} "
            f"confidence={result.confidence} consensus={result.consensus} "
            f"in {result.aggregation.processing_time} ms"
        )
        return ApiResponse.ok(result)

    # =========================================================================
    # FAN-OUT
    # =========================================================================

    def _timeout_seconds(self, request: CrossVerificationRequest, started_at: int) -> float:
        timeout_ms = request.timeout
        if request.metadata and request.metadata.deadline_at is not None:
            timeout_ms = min(timeout_ms, max(0, request.metadata.deadline_at - started_at))
        return timeout_ms / 1000

    async def _fan_out(self, request: CrossVerificationRequest, state: BridgeState) -> None:
        loop = asyncio.get_running_loop()
        tasks: dict[asyncio.Task, VerificationQuery] = {
            asyncio.ensure_future(self.gate.verify(query)): query for query in request.queries
        }
        pending: set[asyncio.Task] = set(tasks)
        deadline = loop.time() + self._timeout_seconds(request, state.started_at)

        try:
            while pending:
                remaining = deadline - loop.time()
                if remaining <= 0:
                    break
                done, pending = await asyncio.wait(
                    pending, timeout=remaining, return_when=asyncio.FIRST_COMPLETED
                )
                for task in done:
                    query = tasks[task]
                    self._record(task, query, state)
                    if query.id in state.failed and request.failure_strategy == FailureStrategy.FAIL_FAST:
                        raise FailFastAbort(query.id, state.failed[query.id])
        finally:
            if pending:
                await self._cancel_waiters(pending)

        if pending:
            state.unresolved = [query.id for task, query in tasks.items() if task in pending]
            logger.warning(
                f"Cross verification {request.id} timed out with "
                f"{len(state.unresolved)} unresolved queries"
            )
            state.transition(BridgeStatus.TIMED_OUT)

    @staticmethod
    def _record(task: asyncio.Task, query: VerificationQuery, state: BridgeState) -> None:
        error = task.exception()
        if error is not None:
            state.failed[query.id] = str(error)
            return
        response: ApiResponse[VerificationResult] = task.result()
        if response.success and response.data is not None:
            state.responses[query.id] = response.data
        else:
            state.failed[query.id] = response.error or "Verification failed"

    @staticmethod
    async def _cancel_waiters(pending: set[asyncio.Task]) -> None:
        # Only the waiters are cancelled; the shielded pipeline tasks keep running
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)

    # =========================================================================
    # AGGREGATION
    # =========================================================================

    def _aggregate(
        self, request: CrossVerificationRequest, state: BridgeState
    ) -> CrossVerificationResult:
        responses: list[VerificationResult] = []
        for query in request.queries:
            if query.id in state.responses:
                responses.append(state.responses[query.id])
            elif request.failure_strategy == FailureStrategy.FALLBACK:
                responses.append(self._substitute(query, state))
                state.substituted.append(query.id)

        settled = len(state.responses)
        outcome = self.aggregator.aggregate(responses, request, settled)
        end_time = self._now()

        average_confidence = (
            sum(r.confidence for r in responses) / len(responses) if responses else 0.0
        )
        return CrossVerificationResult(
            request_id=request.id,
            overall_result=outcome.overall_result,
            confidence=outcome.confidence,
            consensus=outcome.consensus,
            responses=responses,
            aggregation=AggregationStats(
                total_sources=len(request.queries),
                successful_sources=settled,
                average_confidence=round_to(average_confidence),
                processing_time=end_time - state.started_at,
                timed_out=state.timed_out,
            ),
            risk_assessment=self.risk_assessor.assess(responses, request, settled),
            cost=calculate_cost_breakdown(responses),
            audit_trail=build_audit_trail(
                len(request.queries),
                responses,
                state.started_at,
                end_time,
                substituted=set(state.substituted),
            ),
            errors=self._errors(state),
        )

    def _substitute(self, query: VerificationQuery, state: BridgeState) -> VerificationResult:
        cached = self.gate.cached_result(query)
        if cached is not None:
            logger.info(f"Fallback for query {query.id}: using cached result")
            return cached
        logger.info(f"Fallback for query {query.id}: using default not-verified result")
        return self._default_result(query, state)

    def _default_result(self, query: VerificationQuery, state: BridgeState) -> VerificationResult:
        now = self._now()
        reason = state.failed.get(query.id, "verification timed out")
        return VerificationResult(
            query_id=query.id,
            verified=False,
            confidence=0,
            timestamp=state.started_at,
            responded_at=now,
            response_time=now - state.started_at,
            source=SourceDescriptor(
                organization_id=query.organization_id or NETWORK_ORGANIZATION_ID,
                organization_name=NETWORK_ORGANIZATION_NAME,
                board_id=query.board_id or NETWORK_BOARD_ID,
                board_name=NETWORK_BOARD_NAME,
                verification_level=VerificationLevel.BASIC,
            ),
            verification=VerificationDetails(
                method=VerificationMethod.DIRECT,
                evidence=[],
                audit_trail=[f"Fallback result: {reason}"],
            ),
            privacy=PrivacyDescriptor(
                data_shared="none" if query.anonymous_mode else "minimal",
                anonymized=query.anonymous_mode,
                encryption_used=True,
            ),
        )

    def _errors(self, state: BridgeState) -> list[BridgeError]:
        now = self._now()
        errors = [
            BridgeError(
                code="VERIFICATION_FAILED",
                message=reason,
                source=query_id,
                timestamp=now,
                severity=RiskLevel.MEDIUM,
                recoverable=True,
            )
            for query_id, reason in state.failed.items()
        ]
        errors.extend(
            BridgeError(
                code="VERIFICATION_TIMEOUT",
                message="Verification did not complete before the request timeout",
                source=query_id,
                timestamp=now,
                severity=RiskLevel.HIGH,
                recoverable=True,
            )
            for query_id in state.unresolved
        )
        return errors
