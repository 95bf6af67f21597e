"""
Shared utilities for the Top-Feed access services.

This package aggregates common building blocks consumed by the services:

- config: Service configuration via pydantic-settings
- logging: Structured logging with request correlation
- metrics: Prometheus metrics helpers
- errors: Canonical error types and responses
- retry: Retry decorator for flaky upstream calls
- base_service: FastAPI application scaffolding

Do not import from service_* packages into feed_shared/.
"""
