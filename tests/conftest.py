"""
Pytest configuration and fixtures for the arbitrage checker tests.
"""

import pytest
from typing import Callable, Generator

from fastapi.testclient import TestClient

# Import application
import sys
sys.path.insert(0, '.')

from api import app, service
from engine import OpportunityDetector
from sources import StaticPriceSource


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """Create synchronous test client"""
    yield TestClient(app)


@pytest.fixture
def use_rows() -> Generator[Callable[[list], StaticPriceSource], None, None]:
    """Point the shared service at a fixed set of rows for one test"""
    def _use(rows: list) -> StaticPriceSource:
        source = StaticPriceSource(rows)
        service.set_source(source)
        return source

    yield _use

    service.set_source(None)
    service.set_detector(OpportunityDetector())


@pytest.fixture
def detector() -> OpportunityDetector:
    """Detector with no profit threshold"""
    return OpportunityDetector(min_profit_threshold=0.0)


# Sample data fixtures

@pytest.fixture
def sample_rows():
    """Sheet rows: one gap each way, one flat pair and one broken row"""
    return [
        ["2024-05-01T12:00:00", "BNB", "USDT", "310.5", "309.8"],
        ["2024-05-01T12:00:00", "CAKE", "BNB", "0.0080", "0.0082"],
        ["2024-05-01T12:00:00", "ETH", "USDT", "3250", "3250"],
        ["2024-05-01T12:00:00", "BTCB", "USDT", "abc", "97500"],
    ]
