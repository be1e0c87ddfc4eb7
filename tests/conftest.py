"""Pytest configuration and shared fixtures."""
import pytest
import asyncio
import sys
import os
from datetime import datetime, timedelta, timezone

# Add the parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from loom.cache import SentimentCache
from loom.core.config import CacheConfig
from loom.models import Sentiment, SentimentSnapshot, default_market_data

BASE_TIME = datetime(2026, 1, 14, 9, 0, tzinfo=timezone.utc)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def build_snapshot(sequence: int) -> SentimentSnapshot:
    """Distinct snapshot; higher sequence numbers are newer."""
    reading = Sentiment(tension=0.3, buoyancy=0.7, activity=0.5, source=f"test-{sequence}")
    return SentimentSnapshot(
        generated_at=BASE_TIME + timedelta(seconds=sequence),
        market=default_market_data(),
        tech=reading,
        finance=reading,
        society=reading,
    )


class FakeAggregator:
    """Stands in for SnapshotAggregator and records how often it was called."""

    def __init__(self):
        self.calls = 0
        self.fail = False
        self.delay = 0.0
        self.gate = None
        self.produced = []

    async def fetch_fresh_snapshot(self) -> SentimentSnapshot:
        self.calls += 1
        if self.gate is not None:
            await self.gate.wait()
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise RuntimeError("upstream exploded")
        snapshot = build_snapshot(len(self.produced) + 1)
        self.produced.append(snapshot)
        return snapshot


@pytest.fixture
def clock():
    """Fake clock starting at t=0."""
    return FakeClock()


@pytest.fixture
def aggregator():
    """Fake aggregator producing a new snapshot per call."""
    return FakeAggregator()


@pytest.fixture
def cache_config():
    """Production windows with short waits."""
    return CacheConfig(ttl_seconds=30.0, stale_multiplier=2.0, wait_timeout=1.0, poll_interval=0.01)


@pytest.fixture
def cache(aggregator, cache_config, clock):
    """Cache wired to the fake aggregator and fake clock."""
    return SentimentCache(aggregator.fetch_fresh_snapshot, config=cache_config, clock=clock)


@pytest.fixture
def snapshot_factory():
    """Build numbered snapshots."""
    return build_snapshot


@pytest.fixture
def positive_tech_text():
    return "This is an amazing breakthrough! Revolutionary innovation!"


@pytest.fixture
def negative_tech_text():
    return "Massive layoffs, company failed, security breach"


@pytest.fixture
def twse_payload():
    """getStockInfo.jsp response during trading hours."""
    return {
        "msgArray": [
            {
                "z": "23100.50",
                "y": "23000.00",
                "v": "4500",
                "o": "23010.00",
                "h": "23150.00",
                "l": "22980.00",
            }
        ],
        "rtcode": "0000",
    }
