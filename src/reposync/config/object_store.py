"""Object-storage listing configuration values (AWS and Collaboratory mirrors)."""

from __future__ import annotations

from dataclasses import dataclass

from reposync.domain.model import RepositorySource

from .env import optional_env_var
from .errors import ConfigurationError
from .http_resilience import NO_RETRY, ResilienceConfig

DEFAULT_AWS_STORAGE_URL = "https://virginia.cloud.icgc.org"
DEFAULT_COLLAB_STORAGE_URL = "https://storage.cancercollaboratory.org"
DEFAULT_PAGE_SIZE = 2000

_URL_SETTINGS: dict[RepositorySource, tuple[str, str]] = {
    RepositorySource.AWS: ("AWS_STORAGE_URL", DEFAULT_AWS_STORAGE_URL),
    RepositorySource.COLLAB: ("COLLAB_STORAGE_URL", DEFAULT_COLLAB_STORAGE_URL),
}


@dataclass(frozen=True, slots=True)
class ObjectStoreConfig:
    source: RepositorySource
    page_size: int
    resilience: ResilienceConfig


def get_object_store_config(source: RepositorySource) -> ObjectStoreConfig:
    if source not in _URL_SETTINGS:
        raise ConfigurationError(f"Source {source} is not an object-storage listing")
    env_name, default_url = _URL_SETTINGS[source]
    return ObjectStoreConfig(
        source=source,
        page_size=DEFAULT_PAGE_SIZE,
        resilience=ResilienceConfig(
            name=f"storage-{source}",
            base_url=optional_env_var(env_name, default_url),
            timeout_seconds=60.0,
            retry=NO_RETRY,
            default_headers={"Accept": "application/json"},
        ),
    )
