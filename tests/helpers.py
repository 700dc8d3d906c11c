"""Shared test helpers: fake clock, seeded gateways and result builders."""

import asyncio

from src.infrastructure.gateway.base import BoardDescriptor, MatchingRecord
from src.infrastructure.gateway.local import LocalTrustGateway
from src.services.verification.models import (
    PrivacyDescriptor,
    SourceDescriptor,
    VerificationCost,
    VerificationDetails,
    VerificationQuery,
    VerificationResult,
)

START_MS = 1_700_000_000_000


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, start: int = START_MS):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


class CountingGateway(LocalTrustGateway):
    """Local gateway that counts record searches and can be slowed down."""

    def __init__(self, *args, delay: float = 0.0, **kwargs):
        super().__init__(*args, **kwargs)
        self.delay = delay
        self.search_calls = 0

    async def search_records(self, board_id, text, limit=10):
        self.search_calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        return await super().search_records(board_id, text, limit)


def seed_gateway(gateway: LocalTrustGateway) -> LocalTrustGateway:
    gateway.add_board(
        BoardDescriptor(
            id="med-licenses",
            organization_id="org-health",
            name="Medical Licenses",
            organization_name="State Medical Board",
            category="healthcare",
        )
    )
    gateway.add_board(
        BoardDescriptor(
            id="degrees",
            organization_id="org-uni",
            name="Degrees",
            organization_name="State University",
            category="education",
        )
    )
    gateway.add_record(
        MatchingRecord(
            id="r1",
            board_id="med-licenses",
            data={"name": "John Doe", "credential": "Medical License", "number": "ML-1001"},
        )
    )
    gateway.add_record(
        MatchingRecord(
            id="r2",
            board_id="med-licenses",
            data={"name": "John Doe", "credential": "Medical License (renewal)", "year": 2023},
        )
    )
    gateway.add_record(
        MatchingRecord(
            id="r3",
            board_id="degrees",
            data={"name": "Jane Roe", "degree": "BSc Computer Science"},
        )
    )
    return gateway


def make_query(query_id: str = "q1", text: str = "John Doe Medical License", **overrides):
    fields = {
        "id": query_id,
        "query": text,
        "organization_id": "org-health",
        "requester_id": "requester-1",
    }
    fields.update(overrides)
    return VerificationQuery(**fields)


def make_result(
    query_id: str,
    verified: bool,
    confidence: int,
    organization_name: str = "State Medical Board",
    response_time: int = 10,
    cost: float | None = 0.02,
) -> VerificationResult:
    return VerificationResult(
        query_id=query_id,
        verified=verified,
        confidence=confidence,
        timestamp=START_MS,
        responded_at=START_MS + response_time,
        response_time=response_time,
        source=SourceDescriptor(
            organization_id="org",
            organization_name=organization_name,
            board_id="board",
            board_name="Board",
            verification_level="basic",
        ),
        verification=VerificationDetails(method="direct", evidence=[], audit_trail=[]),
        privacy=PrivacyDescriptor(data_shared="minimal", anonymized=False),
        cost=(
            VerificationCost(amount=cost, currency="USD", billed_to="requester-1")
            if cost is not None
            else None
        ),
    )
