"""Integration tests for the verification engine built from settings."""

import json

import pytest

from src.config.constants import CombinationLogic, FailureStrategy, OverallResult
from src.config.settings import Settings
from src.orchestrator.engine import create_engine
from src.services.verification.models import CrossVerificationRequest
from tests.helpers import make_query


@pytest.fixture
def store_path(tmp_path):
    seed = {
        "boards": [
            {"id": "licenses", "organization_id": "org-health", "name": "Licenses",
             "organization_name": "State Medical Board", "category": "healthcare"},
            {"id": "staff", "organization_id": "org-health", "name": "Staff",
             "organization_name": "State Medical Board", "category": "employment"},
        ],
        "records": [
            {"id": "r1", "board_id": "licenses",
             "data": {"name": "John Doe", "license": "Medical License ML-1001"}},
            {"id": "r2", "board_id": "staff",
             "data": {"name": "John Doe", "role": "Employment as Surgeon"}},
        ],
    }
    path = tmp_path / "trust_store.json"
    path.write_text(json.dumps(seed), encoding="utf-8")
    return path


@pytest.fixture
def engine(store_path):
    settings = Settings(gateway_mode="local", local_store_path=str(store_path))
    return create_engine(settings)


@pytest.mark.asyncio
async def test_verify_then_cache(engine):
    first = await engine.verify(make_query("q1"))
    second = await engine.verify(make_query("q2"))

    assert first.success and second.success
    assert first.data.verified is True
    assert first.data.confidence == 87
    assert second.data.query_id == "q2"
    assert engine.cache_stats()["results"]["hits"] == 1
    await engine.close()


@pytest.mark.asyncio
async def test_category_narrows_discovery(engine):
    # "employment" is suggested from the keywords, so only the staff board is searched
    response = await engine.verify(make_query("q1", text="John Doe employment"))
    result = response.data
    assert result.verified is True
    assert result.source.board_id == "staff"


@pytest.mark.asyncio
async def test_cross_verification_weighted(engine):
    request = CrossVerificationRequest(
        id="bundle-1",
        queries=[
            make_query("license", text="John Doe Medical License"),
            make_query("unknown", text="Richard Roe Dentist"),
        ],
        logic=CombinationLogic.WEIGHTED,
        weights={"license": 3.0, "unknown": 1.0},
        minimum_confidence=60,
        minimum_sources=2,
        failure_strategy=FailureStrategy.BEST_EFFORT,
        requester_id="requester-1",
    )
    response = await engine.verify_all(request)

    assert response.success is True
    result = response.data
    # (3 * 87 + 1 * 0) / 4
    assert result.confidence == 65.25
    assert result.overall_result == OverallResult.VERIFIED
    assert result.consensus == 50
    assert result.aggregation.successful_sources == 2
    assert result.cost.breakdown == {"State Medical Board": 0.03, "TrustChain Network": 0.01}
    assert result.audit_trail.steps[0].details == "Processing 2 queries"
    await engine.close()
