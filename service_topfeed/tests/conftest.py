"""
Shared fixtures for Top-Feed service tests.
"""

import pytest

from service_topfeed.app.caching.expiring_store import ExpiringStore
from service_topfeed.app.models import Item


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


def make_item(item_id: int, **extra) -> Item:
    """Build a story the way the origin would return it."""
    return Item(id=item_id, title=f"Story {item_id}", url="http://example.com", **extra)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return ExpiringStore(clock=clock)


@pytest.fixture
def item_factory():
    return make_item
