"""Import run configuration values."""

from __future__ import annotations

from dataclasses import dataclass, field

from reposync.domain.model import RepositorySource

from .env import env_flag, env_list
from .errors import ConfigurationError


def parse_sources(values: tuple[str, ...] | list[str]) -> tuple[RepositorySource, ...]:
    """Parse source names, preserving enumeration (activation) order."""

    requested: set[RepositorySource] = set()
    for value in values:
        try:
            requested.add(RepositorySource(value.strip().lower()))
        except ValueError as exc:
            known = ", ".join(source.value for source in RepositorySource)
            raise ConfigurationError(f"Unknown source {value!r} (known: {known})") from exc
    return tuple(source for source in RepositorySource if source in requested)


@dataclass(frozen=True, slots=True)
class ImportConfig:
    sources: tuple[RepositorySource, ...] = field(default_factory=lambda: tuple(RepositorySource))
    require_resolved_donors: bool = False


def get_import_config() -> ImportConfig:
    names = env_list("REPOSYNC_SOURCES")
    sources = parse_sources(names) if names else tuple(RepositorySource)
    return ImportConfig(
        sources=sources,
        require_resolved_donors=env_flag("REPOSYNC_REQUIRE_RESOLVED_DONORS"),
    )
