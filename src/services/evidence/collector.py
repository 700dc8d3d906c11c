"""Evidence collector service."""

import asyncio
import logging
from collections.abc import Callable

from src.config.constants import DOCUMENT_EVIDENCE_CONFIDENCE, EvidenceType
from src.infrastructure.gateway.base import TrustGateway, Unavailable
from src.services.verification.models import (
    Evidence,
    VerificationQuery,
    VerificationSource,
    now_ms,
)

logger = logging.getLogger(__name__)


class EvidenceCollector:
    """
    Gathers evidence from each candidate source.

    Every source is searched independently: a source that fails or has no
    matching records contributes nothing and never aborts the others. A source
    with matches is marked verified; the verifier uses that for attribution.
    """

    def __init__(
        self,
        gateway: TrustGateway,
        page_size: int = 10,
        clock: Callable[[], float] | None = None,
    ):
        self.gateway = gateway
        self.page_size = page_size
        self._clock = clock

    async def collect(
        self, query: VerificationQuery, sources: list[VerificationSource]
    ) -> list[Evidence]:
        """
        Search every source with the query text as filter.

        Args:
            query: The verification query
            sources: Candidate sources from discovery (mutated on match)

        Returns:
            One document evidence per source with at least one match,
            in source order
        """
        if not sources:
            return []

        found = await asyncio.gather(
            *(self._collect_from_source(query, source) for source in sources)
        )
        evidence = [item for item in found if item is not None]
        logger.info(
            f"Collected {len(evidence)} evidence items from {len(sources)} sources "
            f"for query {query.id}"
        )
        return evidence

    async def _collect_from_source(
        self, query: VerificationQuery, source: VerificationSource
    ) -> Evidence | None:
        try:
            result = await self.gateway.search_records(
                source.board_id, query.query, limit=self.page_size
            )
        except Exception as e:
            logger.error(
                f"Evidence collection failed for source {source.board_id}: {e}",
                exc_info=True,
            )
            return None

        if isinstance(result, Unavailable):
            logger.warning(
                f"Evidence collection skipped source {source.board_id}: {result.reason}"
            )
            return None
        if not result.data:
            return None

        source.verified = True
        source.confidence = DOCUMENT_EVIDENCE_CONFIDENCE
        return Evidence(
            type=EvidenceType.DOCUMENT,
            source=source.organization_name,
            timestamp=int(self._clock()) if self._clock else now_ms(),
            confidence=DOCUMENT_EVIDENCE_CONFIDENCE,
            details=f"Found {len(result.data)} matching records",
            verifiable=True,
        )
