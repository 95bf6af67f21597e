"""
Top-Feed service: paged, cached view over the origin's ranked items.
"""

from datetime import timedelta
from typing import Any, Dict, Optional

from fastapi import Query

from feed_shared.base_service import BaseService
from feed_shared.config import ServiceConfig
from feed_shared.retry import RetryConfig

from .adapters.origin_client import OriginFeedClient
from .caching.aggregator import TopItemsAggregator
from .caching.expiring_store import ExpiringStore
from .domain.paging import page_to_dict, paginate


class TopFeedService(BaseService):
    """Top-Feed service implementation."""

    def __init__(self, config: Optional[ServiceConfig] = None):
        super().__init__("topfeed", 8000, config=config)

        self.store = ExpiringStore()
        self.origin_client = OriginFeedClient(
            self.config.origin_base_url,
            timeout=self.config.origin_timeout_seconds,
            max_ids=self.config.max_top_items,
            retry_config=RetryConfig(
                max_attempts=self.config.origin_retry_attempts,
                base_delay=self.config.origin_retry_base_delay,
                max_delay=5.0,
            ),
            metrics=self.metrics,
        )
        self.aggregator = TopItemsAggregator(
            self.origin_client,
            self.store,
            max_items=self.config.max_top_items,
            ids_ttl=timedelta(seconds=self.config.top_ids_ttl_seconds),
            item_ttl=timedelta(seconds=self.config.item_ttl_seconds),
            fetch_concurrency=self.config.item_fetch_concurrency,
            cache_empty_id_list=self.config.cache_empty_id_list,
            metrics=self.metrics,
        )

        self._setup_feed_routes()

        # Expose service instance via app state for introspection/testing
        self.app.state.topfeed_service = self

    def _setup_feed_routes(self):
        """Set up feed-specific routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": "topfeed",
                "message": "Top-Feed Access Layer - Top Stories",
                "version": "1.0.0",
                "origin": self.config.origin_base_url,
            }

        @self.app.get("/api/hackernews/top-stories")
        async def get_top_stories(
            page: int = Query(0, ge=0),
            page_size: int = Query(10, alias="pageSize", ge=1),
        ) -> Dict[str, Any]:
            """Return one page of the current top stories and the total count."""
            top_items = await self.aggregator.get_top_items()
            result = page_to_dict(paginate(top_items, page, page_size))
            self.logger.info(
                "Served top stories page",
                page=page,
                page_size=page_size,
                returned=len(result["items"]),
                total=result["totalCount"],
            )
            return result

        @self.app.get("/cache/stats")
        async def get_cache_stats():
            """Get cache statistics."""
            return self.store.stats()

        @self.app.post("/cache/purge")
        async def purge_cache():
            """Drop expired cache entries."""
            removed = self.store.purge_expired()
            return {"removed": removed, **self.store.stats()}

    async def _check_dependencies(self) -> Dict[str, str]:
        """Check the origin feed."""
        origin_ok = await self.origin_client.ping()
        return {"origin": "ok" if origin_ok else "error"}

    async def _shutdown(self) -> None:
        await self.origin_client.close()


def create_app(config: Optional[ServiceConfig] = None):
    """Create FastAPI application."""
    service = TopFeedService(config)
    return service.app


if __name__ == "__main__":
    service = TopFeedService()
    service.run()
