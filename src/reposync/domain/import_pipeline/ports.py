"""Ports the import pipeline depends on; adapters provide the implementations."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from reposync.domain.model import Donor

if TYPE_CHECKING:
    from collections.abc import Iterable
    from types import TracebackType

    from reposync.domain.model import FileObservation, RepositoryFile, RepositorySource


@runtime_checkable
class SourceFileImporter(Protocol):
    """Fetches one source and writes its observations to source-scoped storage."""

    @property
    def source(self) -> RepositorySource: ...

    def execute(self) -> None: ...


@runtime_checkable
class SourceFileRepository(Protocol):
    """Source-scoped storage for normalized observations."""

    def replace_source(self, source: RepositorySource, files: Iterable[FileObservation]) -> int: ...

    def list_by_source(self, source: RepositorySource) -> list[FileObservation]: ...


@runtime_checkable
class RepositoryFileRepository(Protocol):
    """Storage for the published canonical record set."""

    def replace_all(self, files: Iterable[RepositoryFile]) -> int: ...

    def list_all(self) -> list[RepositoryFile]: ...


@dataclass(slots=True)
class ImportRepositories:
    source_files: SourceFileRepository
    repository_files: RepositoryFileRepository


@runtime_checkable
class ImportUnitOfWork(Protocol):
    @property
    def repositories(self) -> ImportRepositories: ...

    def __enter__(self) -> ImportUnitOfWork: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


@runtime_checkable
class RepositoryFileWriter(Protocol):
    """Overwrites the published record set; releases its connection on exit."""

    def __enter__(self) -> RepositoryFileWriter: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool | None: ...

    def write(self, files: Iterable[RepositoryFile]) -> int: ...


@runtime_checkable
class RepositoryFileIndexer(Protocol):
    """Rebuilds the search index from the persisted record set."""

    def __enter__(self) -> RepositoryFileIndexer: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool | None: ...

    def index_files(self) -> int: ...


@runtime_checkable
class Notifier(Protocol):
    def send(self, subject: str, body: str) -> None: ...


UnitOfWorkFactory = Callable[[], ImportUnitOfWork]
WriterFactory = Callable[[], RepositoryFileWriter]
IndexerFactory = Callable[[], RepositoryFileIndexer]
# Takes the distinct donors of one source and returns them, resolved where possible,
# in the same order.
DonorIdResolver = Callable[[Sequence[Donor]], list[Donor]]


def unresolved_donors(donors: Sequence[Donor]) -> list[Donor]:
    """Resolver used when no identity service is configured."""

    return list(donors)
