"""Tests for the HTTP endpoints (health, verify, cross-verify, cache)."""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from src.app import app


@pytest.fixture
def client(engine):
    with TestClient(app) as test_client:
        app.state.engine = engine
        yield test_client


# ==========================================
#  HEALTH & CACHE
# ==========================================


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["gateway"] == "local"


def test_cache_stats(client):
    client.post("/api/verify", json={"query": "John Doe Medical License",
                                     "organization_id": "org-health",
                                     "requester_id": "r1"})
    response = client.get("/api/cache/stats")
    assert response.status_code == 200
    body = response.json()
    assert body["results"]["size"] == 1
    assert body["in_flight"]["started"] == 1


def test_cache_clear(client, engine):
    client.post("/api/verify", json={"query": "John Doe Medical License",
                                     "organization_id": "org-health",
                                     "requester_id": "r1"})
    response = client.delete("/api/cache")
    assert response.status_code == 200
    assert response.json()["status"] == "success"
    assert engine.cache.get_stats()["size"] == 0


# ==========================================
#  VERIFY
# ==========================================


def test_verify_end_to_end(client):
    response = client.post(
        "/api/verify",
        json={
            "id": "q-42",
            "query": "John Doe Medical License",
            "organization_id": "org-health",
            "requester_id": "r1",
        },
    )
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["request_id"].startswith("req_")
    data = body["data"]
    assert data["query_id"] == "q-42"
    assert data["verified"] is True
    assert data["confidence"] == 87
    assert data["source"]["verification_level"] == "enhanced"
    assert data["cost"]["amount"] == 0.03


def test_verify_generates_query_id(client):
    response = client.post("/api/verify", json={"query": "anything", "requester_id": "r1"})
    data = response.json()["data"]
    assert data["query_id"].startswith("req_")
    assert data["verified"] is False


def test_verify_validates_body(client):
    response = client.post("/api/verify", json={"query": "missing requester"})
    assert response.status_code == 422


def test_verify_unexpected_error_is_500(client, engine):
    with patch.object(engine, "verify", AsyncMock(side_effect=RuntimeError("kaboom"))):
        response = client.post("/api/verify", json={"query": "x", "requester_id": "r1"})
    assert response.status_code == 500
    assert "kaboom" in response.json()["detail"]


# ==========================================
#  CROSS VERIFY
# ==========================================


def test_cross_verify(client):
    response = client.post(
        "/api/cross-verify",
        json={
            "id": "bundle-1",
            "requester_id": "r1",
            "logic": "AND",
            "queries": [
                {"id": "a", "query": "John Doe Medical License",
                 "organization_id": "org-health", "requester_id": "r1"},
                {"id": "b", "query": "Jane Roe", "organization_id": "org-uni",
                 "requester_id": "r1"},
            ],
        },
    )
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    data = body["data"]
    assert data["request_id"] == "bundle-1"
    assert data["overall_result"] == "verified"
    assert data["aggregation"]["total_sources"] == 2
    assert data["aggregation"]["successful_sources"] == 2


def test_cross_verify_requires_queries(client):
    response = client.post("/api/cross-verify", json={"requester_id": "r1", "queries": []})
    assert response.status_code == 422
