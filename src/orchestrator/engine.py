"""
Verification engine facade.

Owns one ResultCache and one InFlightRegistry and wires the pipeline,
TrustGate and TrustBridge around a single trust gateway.

USAGE:
    engine = create_engine(settings)
    response = await engine.verify(query)
    response = await engine.verify_all(request)
    await engine.close()
"""

import logging
from typing import Any

from src.config.settings import Settings
from src.infrastructure.cache.bounded_cache import Clock, system_clock_ms
from src.infrastructure.cache.inflight import InFlightRegistry
from src.infrastructure.cache.result_cache import ResultCache
from src.infrastructure.gateway.base import TrustGateway
from src.infrastructure.gateway.factory import create_gateway
from src.orchestrator.bridge import TrustBridge
from src.orchestrator.pipeline import VerificationPipeline
from src.services.analysis.query_analyzer import QueryAnalyzer
from src.services.discovery.service import SourceDiscovery
from src.services.evidence.collector import EvidenceCollector
from src.services.scoring.confidence import ConfidenceScorer
from src.services.verification.models import (
    ApiResponse,
    CrossVerificationRequest,
    CrossVerificationResult,
    VerificationQuery,
    VerificationResult,
)
from src.services.verification.verifier import TrustGate

logger = logging.getLogger(__name__)


class VerificationEngine:
    """Single and cross verification over one gateway and one cache."""

    def __init__(self, settings: Settings, gateway: TrustGateway, clock: Clock | None = None):
        self.settings = settings
        self.gateway = gateway
        clock = clock or system_clock_ms

        self.cache = ResultCache(
            default_ttl=settings.result_cache_ttl_ms,
            max_size=settings.result_cache_max_size,
            clock=clock,
        )
        self.inflight: InFlightRegistry = InFlightRegistry()

        self.pipeline = VerificationPipeline(
            analyzer=QueryAnalyzer(),
            discovery=SourceDiscovery(gateway, clock=clock),
            collector=EvidenceCollector(gateway, page_size=settings.search_page_size, clock=clock),
            scorer=ConfidenceScorer(),
        )
        self.gate = TrustGate(
            self.pipeline,
            self.cache,
            inflight=self.inflight,
            clock=clock,
            cache_ttl=settings.result_cache_ttl_ms,
        )
        self.bridge = TrustBridge(self.gate, clock=clock)
        logger.info(f"Verification engine ready (gateway={gateway.name})")

    async def verify(self, query: VerificationQuery) -> ApiResponse[VerificationResult]:
        return await self.gate.verify(query)

    async def verify_all(
        self, request: CrossVerificationRequest
    ) -> ApiResponse[CrossVerificationResult]:
        return await self.bridge.verify_all(request)

    def cache_stats(self) -> dict[str, Any]:
        return {
            "results": self.cache.get_stats(),
            "in_flight": self.inflight.get_stats(),
        }

    def clear_cache(self) -> None:
        self.cache.clear()

    async def close(self) -> None:
        await self.gateway.close()
        logger.info("Verification engine closed")


def create_engine(
    settings: Settings,
    gateway: TrustGateway | None = None,
    clock: Clock | None = None,
) -> VerificationEngine:
    """Build an engine; the gateway defaults to the one named by settings."""
    return VerificationEngine(settings, gateway or create_gateway(settings), clock=clock)
