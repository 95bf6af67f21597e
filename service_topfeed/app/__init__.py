"""
Top-Feed Service package.

Serves a paged view of the origin's ranked items while keeping load on the
origin low:
- Caching: ranked id list for a minute, item details for five minutes
- Fan-out: item details are resolved concurrently, best effort
- Resilience: origin failures shorten the result instead of failing it

Structure:
- app.main: FastAPI app, routes, and wiring.
- app.adapters: HTTP client for the origin feed.
- app.caching: Expiring store and the cache-aside aggregator.
- app.domain: Paging of results for callers.
"""
