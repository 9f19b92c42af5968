"""Collect normalized observations written by the source import stage."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from reposync.domain.model import FileObservation, RepositorySource

    from .ports import UnitOfWorkFactory


log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SourceFiles:
    """Observations persisted for a single source."""

    source: RepositorySource
    files: frozenset[FileObservation]

    def __iter__(self) -> Iterator[FileObservation]:
        return iter(self.files)

    def __len__(self) -> int:
        return len(self.files)


class RepositoryFileCollector:
    """Reads source-scoped storage; never talks to upstream services."""

    def __init__(self, unit_of_work_factory: UnitOfWorkFactory) -> None:
        self._unit_of_work_factory = unit_of_work_factory

    def collect_files(self, sources: Iterable[RepositorySource]) -> Iterator[SourceFiles]:
        for source in sources:
            with self._unit_of_work_factory() as uow:
                files = uow.repositories.source_files.list_by_source(source)
            log.info("Collected %s '%s' sourced files", len(files), source)
            yield SourceFiles(source=source, files=frozenset(files))
