"""Search index configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_var, require_env_var
from .http_resilience import ResilienceConfig, RetryPolicy

DEFAULT_INDEX_ALIAS = "repository-files"
DEFAULT_BULK_SIZE = 500


@dataclass(frozen=True, slots=True)
class IndexConfig:
    alias: str
    bulk_size: int
    resilience: ResilienceConfig


def get_index_config() -> IndexConfig:
    return IndexConfig(
        alias=optional_env_var("INDEX_ALIAS", DEFAULT_INDEX_ALIAS) or DEFAULT_INDEX_ALIAS,
        bulk_size=DEFAULT_BULK_SIZE,
        resilience=ResilienceConfig(
            name="index",
            base_url=require_env_var("INDEX_URL"),
            timeout_seconds=120.0,
            retry=RetryPolicy(total=3),
            default_headers={"Content-Type": "application/json"},
        ),
    )
