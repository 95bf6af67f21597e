"""
Cache-aside aggregation of the origin's top items.
"""

from __future__ import annotations

import asyncio
import time
from datetime import timedelta
from typing import List, Optional, Protocol

from feed_shared.logging import get_logger
from feed_shared.metrics import MetricsCollector

from ..models import Item
from .expiring_store import ExpiringStore


TOP_IDS_CACHE_KEY = "top_item_ids"
DEFAULT_MAX_ITEMS = 200
DEFAULT_IDS_TTL = timedelta(minutes=1)
DEFAULT_ITEM_TTL = timedelta(minutes=5)


class OriginFeed(Protocol):
    """What the aggregator needs from the origin feed client."""

    async def fetch_top_ids(self) -> List[int]:
        ...

    async def fetch_item(self, item_id: int) -> Optional[Item]:
        ...


class TopItemsAggregator:
    """Resolves the current top items, fully hydrated, best effort.

    The ranked id list and each item are read through ``store``: a hit is used
    verbatim, a miss is fetched from ``origin`` and written back with its TTL
    before being returned. Item lookups fan out concurrently and the call waits
    for all of them. Items that cannot be resolved are left out of the result;
    the relative order of the id list is kept.
    """

    def __init__(
        self,
        origin: OriginFeed,
        store: ExpiringStore,
        *,
        max_items: int = DEFAULT_MAX_ITEMS,
        ids_ttl: timedelta = DEFAULT_IDS_TTL,
        item_ttl: timedelta = DEFAULT_ITEM_TTL,
        fetch_concurrency: int = DEFAULT_MAX_ITEMS,
        cache_empty_id_list: bool = True,
        metrics: Optional[MetricsCollector] = None,
    ) -> None:
        self.origin = origin
        self.store = store
        self.max_items = max_items
        self.ids_ttl = ids_ttl
        self.item_ttl = item_ttl
        self.fetch_concurrency = max(1, fetch_concurrency)
        self.cache_empty_id_list = cache_empty_id_list
        self.metrics = metrics
        self.logger = get_logger("topfeed.aggregator")

    async def get_top_items(self) -> List[Item]:
        """Return up to ``max_items`` resolved items in ranking order.

        Never raises: an unexpected failure is logged and yields ``[]``, which
        is indistinguishable from an empty feed.
        """
        start_time = time.time()
        try:
            top_ids = await self._get_cached_top_ids()
            selected_ids = top_ids[:self.max_items]

            # Created per call: a semaphore binds to the running event loop.
            semaphore = asyncio.Semaphore(self.fetch_concurrency)
            # Store faults propagate and abort the whole call; origin faults are
            # absorbed per item in _fetch_item.
            results = await asyncio.gather(
                *(self._get_cached_item(item_id, semaphore) for item_id in selected_ids)
            )
            items: List[Item] = [item for item in results if item is not None]
        except Exception as exc:
            self.logger.error("Failed to get top items with caching", error=str(exc), exc_info=exc)
            return []

        duration = time.time() - start_time
        if self.metrics:
            self.metrics.record_aggregation(duration, len(items))
        self.logger.debug(
            "Resolved top items",
            requested=len(selected_ids),
            resolved=len(items),
            duration_ms=round(duration * 1000, 2),
        )
        return items

    async def _get_cached_top_ids(self) -> List[int]:
        cached_ids, found = self.store.try_get(TOP_IDS_CACHE_KEY)
        self._record_access("top_ids", found)
        if found:
            return cached_ids

        top_ids = await self.origin.fetch_top_ids()
        if top_ids or self.cache_empty_id_list:
            self.store.set(TOP_IDS_CACHE_KEY, top_ids, self.ids_ttl)
        else:
            self.logger.warning("Origin returned no top item ids; not caching")
        return top_ids

    async def _get_cached_item(self, item_id: int, semaphore: asyncio.Semaphore) -> Optional[Item]:
        cached_item, found = self.store.try_get(item_id)
        self._record_access("item", found)
        if found:
            return cached_item

        async with semaphore:
            item = await self._fetch_item(item_id)

        if item is not None:
            self.store.set(item_id, item, self.item_ttl)
        return item

    async def _fetch_item(self, item_id: int) -> Optional[Item]:
        try:
            return await self.origin.fetch_item(item_id)
        except Exception as exc:
            self.logger.warning(
                "Dropping item that failed to resolve",
                item_id=item_id,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return None

    def _record_access(self, cache_type: str, hit: bool) -> None:
        if self.metrics:
            self.metrics.record_cache_access(cache_type, hit)
