"""Pytest configuration and fixtures."""

import pytest

from src.config.settings import Settings
from src.orchestrator.engine import create_engine
from tests.helpers import CountingGateway, FakeClock, seed_gateway


@pytest.fixture
def settings():
    """Provide settings fixture."""
    return Settings(gateway_mode="local", local_store_path=None)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def gateway():
    return seed_gateway(CountingGateway())


@pytest.fixture
def engine(settings, gateway, clock):
    return create_engine(settings, gateway=gateway, clock=clock)
