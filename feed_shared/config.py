"""
Shared configuration management for the Top-Feed access services.
"""

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="TOPFEED_",
        env_file=".env",
        case_sensitive=False,
        extra="allow"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")

    # Origin feed
    origin_base_url: str = Field(default="https://hacker-news.firebaseio.com/v0")
    origin_timeout_seconds: float = Field(default=10.0, gt=0)
    origin_retry_attempts: int = Field(default=2, ge=1)
    origin_retry_base_delay: float = Field(default=0.5, ge=0)

    # Aggregation and caching
    max_top_items: int = Field(default=200, ge=1)
    top_ids_ttl_seconds: int = Field(default=60, ge=1)
    item_ttl_seconds: int = Field(default=300, ge=1)
    item_fetch_concurrency: int = Field(default=200, ge=1)
    cache_empty_id_list: bool = Field(default=True)

    # Front-end origins allowed by CORS
    cors_origins: List[str] = Field(default_factory=lambda: ["http://localhost:4200"])


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str
    port: int
    host: str = "0.0.0.0"

    def __init__(self, service_name: str, port: int, **kwargs):
        super().__init__(service_name=service_name, port=port, **kwargs)


def get_config(service_name: str, port: int, **overrides) -> ServiceConfig:
    """Get configuration for a specific service."""
    return ServiceConfig(service_name=service_name, port=port, **overrides)
