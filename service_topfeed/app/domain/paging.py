"""
Paging of aggregated results for API callers.
"""

from typing import Any, Dict, Sequence

from pydantic import BaseModel

from ..models import Item


class ItemPage(BaseModel):
    """One page of items plus the size of the full result."""

    items: Sequence[Item]
    totalCount: int


def paginate(items: Sequence[Item], page: int, page_size: int) -> ItemPage:
    """Slice ``items`` into the zero-based ``page`` of ``page_size`` entries.

    Pages past the end are empty; ``totalCount`` always reports the full
    length so callers can compute the page count.
    """
    if page < 0:
        raise ValueError(f"page must be >= 0, got {page}")
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got {page_size}")

    start = page * page_size
    return ItemPage(items=list(items[start:start + page_size]), totalCount=len(items))


def page_to_dict(page: ItemPage) -> Dict[str, Any]:
    """Serialize a page, keeping upstream attributes that are not modelled."""
    return {
        "items": [item.model_dump(exclude_none=True) for item in page.items],
        "totalCount": page.totalCount,
    }
