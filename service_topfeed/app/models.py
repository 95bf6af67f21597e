"""
Records produced by the origin feed.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class Item(BaseModel):
    """A single feed item as published by the origin.

    Only ``id`` and ``title`` are required; every other upstream attribute is
    kept as-is so callers see the full record. Instances are frozen once
    fetched.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    id: int
    title: str
    url: Optional[str] = None
    by: Optional[str] = None
    score: Optional[int] = None
    time: Optional[int] = None
    type: Optional[str] = None
    descendants: Optional[int] = None
    kids: Optional[List[int]] = None
