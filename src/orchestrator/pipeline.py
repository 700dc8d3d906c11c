"""
Verification Pipeline: Analyze -> Discover -> Collect -> Score.

Runs the four stages for a single query and returns the filled PipelineState.
Any exception raised inside a stage is re-raised as PipelineFailureError
carrying the stage name; the verifier turns it into a failure envelope.

USAGE:
    pipeline = VerificationPipeline(analyzer, discovery, collector, scorer)
    state = await pipeline.run(query, started_at=clock())
"""

import logging

from src.config.constants import PipelineStep
from src.infrastructure.logging.logger import StructuredLogger
from src.orchestrator.state import PipelineState
from src.orchestrator.step_timer import timed_step
from src.services.analysis.query_analyzer import QueryAnalyzer
from src.services.discovery.service import SourceDiscovery
from src.services.evidence.collector import EvidenceCollector
from src.services.scoring.confidence import ConfidenceScorer
from src.services.verification.errors import PipelineFailureError
from src.services.verification.models import VerificationQuery

logger = logging.getLogger(__name__)


class VerificationPipeline:
    """Orchestrates the per-query verification stages."""

    def __init__(
        self,
        analyzer: QueryAnalyzer,
        discovery: SourceDiscovery,
        collector: EvidenceCollector,
        scorer: ConfidenceScorer,
    ):
        self.analyzer = analyzer
        self.discovery = discovery
        self.collector = collector
        self.scorer = scorer
        self.step_logger = StructuredLogger(__name__)

    async def run(self, query: VerificationQuery, started_at: int) -> PipelineState:
        """
        Run all stages for one query.

        Raises:
            PipelineFailureError: if any stage raises
        """
        state = PipelineState(query=query, started_at=started_at)
        logger.info(f"Pipeline starting for query {query.id}: '{query.query[:80]}'")

        await self._run_step(PipelineStep.ANALYZE, state, self._step_analyze)
        await self._run_step(PipelineStep.DISCOVER, state, self._step_discover)
        await self._run_step(PipelineStep.COLLECT, state, self._step_collect)
        await self._run_step(PipelineStep.SCORE, state, self._step_score)

        logger.info(
            f"Pipeline complete for query {query.id}: confidence={state.confidence}, "
            f"evidence={len(state.evidence)}, sources={len(state.sources)}"
        )
        return state

    async def _run_step(self, step: PipelineStep, state: PipelineState, func) -> None:
        try:
            async with timed_step(step, self.step_logger, state.query.id) as ctx:
                summary = await func(state)
                ctx.set_summary(**summary)
        except Exception as e:
            raise PipelineFailureError(step.value, e) from e
        state.step_durations[step.value] = ctx.elapsed_ms

    # =========================================================================
    # STAGES
    # =========================================================================

    async def _step_analyze(self, state: PipelineState) -> dict:
        state.analysis = self.analyzer.analyze(state.query)
        return state.analysis.to_dict()

    async def _step_discover(self, state: PipelineState) -> dict:
        state.sources = await self.discovery.discover(state.query, state.analysis)
        return {"sources": [source.board_id for source in state.sources]}

    async def _step_collect(self, state: PipelineState) -> dict:
        state.evidence = await self.collector.collect(state.query, state.sources)
        return {
            "evidence": len(state.evidence),
            "verified_sources": [source.board_id for source in state.verified_sources],
        }

    async def _step_score(self, state: PipelineState) -> dict:
        state.confidence = self.scorer.score(state.evidence, state.analysis)
        return {"confidence": state.confidence}
