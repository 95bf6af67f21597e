"""
Adapters package for the Top-Feed service.

Contains HTTP client wrappers for upstream dependencies. Adapters own
their base URLs, timeouts and retry policies, and absorb upstream failures
before they reach the caching layer.
"""

from .origin_client import OriginFeedClient

__all__ = ["OriginFeedClient"]
