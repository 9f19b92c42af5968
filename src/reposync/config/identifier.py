"""Identity service configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_var
from .http_resilience import NO_RETRY, ResilienceConfig


@dataclass(frozen=True, slots=True)
class IdentifierConfig:
    resilience: ResilienceConfig


def get_identifier_config() -> IdentifierConfig | None:
    """Return the identity service config, or ``None`` when no service is configured."""

    url = optional_env_var("IDENTIFIER_SERVICE_URL")
    if url is None:
        return None
    return IdentifierConfig(
        resilience=ResilienceConfig(
            name="identifier",
            base_url=url,
            timeout_seconds=30.0,
            retry=NO_RETRY,
        )
    )
