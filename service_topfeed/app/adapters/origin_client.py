"""
HTTP client for the origin ranked-item feed.
"""

from __future__ import annotations

from typing import Any, List, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from feed_shared.errors import ExternalServiceError
from feed_shared.logging import get_logger
from feed_shared.metrics import MetricsCollector
from feed_shared.retry import RetryConfig, retry_on_exception

from ..models import Item


DEFAULT_ORIGIN_URL = "https://hacker-news.firebaseio.com/v0"


class OriginFeedClient:
    """Reads the ranked id list and item details from the origin feed.

    Both operations are fail-soft: transport, status and decoding errors are
    logged here and surface to callers only as ``[]`` or ``None``.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_ORIGIN_URL,
        *,
        timeout: float = 10.0,
        max_ids: int = 200,
        retry_config: Optional[RetryConfig] = None,
        metrics: Optional[MetricsCollector] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.max_ids = max_ids
        self.metrics = metrics
        self.logger = get_logger("topfeed.origin_client")
        self._client = httpx.AsyncClient(base_url=self.base_url, timeout=timeout, transport=transport)

        retry_config = retry_config or RetryConfig(max_attempts=2, base_delay=0.5, max_delay=5.0)
        self._get_json = retry_on_exception((httpx.TransportError,), config=retry_config)(self._get_json_once)

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def fetch_top_ids(self) -> List[int]:
        """Return the current ranked id list, or ``[]`` on any failure."""
        try:
            payload = await self._get_json("/topstories.json")
        except Exception as exc:
            self.logger.error("Error fetching top item ids", error=str(exc), exc_info=exc)
            self._record("fetch_top_ids", "error")
            return []

        if not isinstance(payload, list):
            self.logger.warning("Top item ids payload is not a list", payload_type=type(payload).__name__)
            self._record("fetch_top_ids", "invalid")
            return []

        try:
            ids = [int(item_id) for item_id in payload[:self.max_ids]]
        except (TypeError, ValueError) as exc:
            self.logger.warning("Top item ids payload contains non-integer ids", error=str(exc))
            self._record("fetch_top_ids", "invalid")
            return []

        self._record("fetch_top_ids", "ok")
        return ids

    async def fetch_item(self, item_id: int) -> Optional[Item]:
        """Return the item with ``item_id``, or ``None`` if absent or on failure."""
        try:
            payload = await self._get_json(f"/item/{item_id}.json")
        except Exception as exc:
            self.logger.error("Error fetching item", item_id=item_id, error=str(exc), exc_info=exc)
            self._record("fetch_item", "error")
            return None

        if payload is None:
            self.logger.info("Item not found", item_id=item_id)
            self._record("fetch_item", "absent")
            return None

        try:
            item = Item.model_validate(payload)
        except PydanticValidationError as exc:
            self.logger.warning("Item payload failed validation", item_id=item_id, error=str(exc))
            self._record("fetch_item", "invalid")
            return None

        self._record("fetch_item", "ok")
        return item

    async def ping(self) -> bool:
        """Return True when the origin answers the id list request."""
        try:
            response = await self._client.get("/topstories.json")
            return response.status_code == 200
        except httpx.HTTPError:
            return False

    async def _get_json_once(self, path: str) -> Any:
        response = await self._client.get(path)
        if response.status_code != 200:
            raise ExternalServiceError(
                service="origin",
                message=f"Unexpected status {response.status_code}",
                details={"path": path, "status_code": response.status_code},
            )
        return response.json()

    def _record(self, operation: str, outcome: str) -> None:
        if self.metrics:
            self.metrics.record_upstream_request(operation, outcome)
