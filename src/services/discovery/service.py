"""Source discovery service."""

import logging
from collections.abc import Callable

from src.infrastructure.gateway.base import TrustGateway, Unavailable
from src.services.analysis.models import QueryAnalysis
from src.services.verification.errors import SourceUnavailableError
from src.services.verification.models import VerificationQuery, VerificationSource, now_ms

logger = logging.getLogger(__name__)


class SourceDiscovery:
    """Resolves candidate trust sources for a query from the registry."""

    def __init__(self, gateway: TrustGateway, clock: Callable[[], float] | None = None):
        self.gateway = gateway
        self._clock = clock

    async def discover(
        self, query: VerificationQuery, analysis: QueryAnalysis
    ) -> list[VerificationSource]:
        """
        List candidate sources scoped by the query's organization.

        An unscoped query or an unavailable registry yields an empty list; the
        missing evidence lowers confidence downstream instead of failing.

        Args:
            query: The verification query
            analysis: Analysis of the query text

        Returns:
            Unverified VerificationSource objects, one per board
        """
        if not query.organization_id:
            logger.info(f"Query {query.id} has no organization scope; no sources")
            return []

        category = analysis.suggested_categories[0] if analysis.suggested_categories else None
        try:
            result = await self.gateway.list_sources(query.organization_id, category)
        except Exception as e:
            logger.error(f"Registry lookup raised for query {query.id}: {e}", exc_info=True)
            result = Unavailable(str(e))

        if isinstance(result, Unavailable):
            error = SourceUnavailableError("registry", result.reason)
            logger.warning(f"Source discovery degraded for query {query.id}: {error}")
            return []

        boards = [board for board in result.data if board.is_active]
        if query.board_id:
            boards = [board for board in boards if board.id == query.board_id]

        timestamp = self._now()
        sources = [
            VerificationSource(
                board_id=board.id,
                organization_id=board.organization_id,
                organization_name=(
                    board.organization_name or f"Organization {board.organization_id}"
                ),
                board_name=board.name,
                category=board.category,
                timestamp=timestamp,
            )
            for board in boards
        ]
        logger.info(
            f"Discovered {len(sources)} sources for query {query.id} "
            f"(org={query.organization_id}, category={category or 'any'})"
        )
        return sources

    def _now(self) -> int:
        return int(self._clock()) if self._clock else now_ms()

