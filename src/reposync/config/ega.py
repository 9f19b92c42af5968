"""EGA study registry configuration values."""

from __future__ import annotations

from dataclasses import dataclass, field

from .env import optional_env_var, require_env_vars
from .http_resilience import NO_RETRY, RateLimit, ResilienceConfig

DEFAULT_EGA_API_URL = "https://ega.ebi.ac.uk/ega/rest/access/v2"


@dataclass(frozen=True, slots=True)
class EGAConfig:
    user_name: str
    password: str = field(repr=False)
    resilience: ResilienceConfig


def get_ega_config() -> EGAConfig:
    values = require_env_vars(("EGA_USERNAME", "EGA_PASSWORD"))
    return EGAConfig(
        user_name=values["EGA_USERNAME"],
        password=values["EGA_PASSWORD"],
        resilience=ResilienceConfig(
            name="ega",
            base_url=optional_env_var("EGA_API_URL", DEFAULT_EGA_API_URL),
            timeout_seconds=60.0,
            retry=NO_RETRY,
            ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
            default_headers={"Accept": "application/json"},
        ),
    )
