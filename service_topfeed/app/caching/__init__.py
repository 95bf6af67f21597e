"""
Top-feed caching package.

Holds the in-memory expiring store and the cache-aside aggregator that
shields callers from origin latency. Entries only ever leave the cache by
expiring.
"""

from .aggregator import TOP_IDS_CACHE_KEY, TopItemsAggregator
from .expiring_store import ExpiringStore

__all__ = ["ExpiringStore", "TopItemsAggregator", "TOP_IDS_CACHE_KEY"]
