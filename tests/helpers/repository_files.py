"""Builders and in-memory fakes shared by the import pipeline tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

import httpx

from reposync.adapters.http_resilience import ResilienceConfig, ResilientClient
from reposync.domain.identity import file_id
from reposync.domain.import_pipeline import ImportRepositories
from reposync.domain.model import (
    AWS_VIRGINIA,
    CGHUB,
    COLLABORATORY,
    EGA,
    DataType,
    Donor,
    FileCopy,
    FileObservation,
    RepositoryFile,
    RepositorySource,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from datetime import datetime
    from types import TracebackType


REPO_CODES: dict[RepositorySource, str] = {
    RepositorySource.EGA: EGA,
    RepositorySource.CGHUB: CGHUB,
    RepositorySource.AWS: AWS_VIRGINIA,
    RepositorySource.COLLAB: COLLABORATORY,
}


def make_observation(
    source: RepositorySource = RepositorySource.CGHUB,
    *,
    analysis_id: str = "analysis-1",
    file_name: str = "reads.bam",
    repo_file_id: str | None = None,
    md5sum: str | None = "d41d8cd98f00b204e9800998ecf8427e",
    size: int | None = 1024,
    analyte_code: str | None = "D",
    donors: tuple[Donor, ...] = (),
    url: str | None = None,
    last_modified: datetime | None = None,
) -> FileObservation:
    repo_code = REPO_CODES[source]
    handle = repo_file_id or f"{analysis_id}/{file_name}"
    copy = FileCopy(
        repo_code=repo_code,
        url=url or f"https://{repo_code}.example.org/{handle}",
        file_name=file_name,
        file_size=size,
        file_md5sum=md5sum,
        last_modified=last_modified,
        repo_file_id=handle,
    )
    return FileObservation(
        source=source,
        repo_code=repo_code,
        repo_file_id=handle,
        analysis_id=analysis_id,
        file_name=file_name,
        md5sum=md5sum,
        size=size,
        analyte_code=analyte_code,
        donors=donors,
        file_copies=(copy,),
    )


def make_repository_file(
    *repo_codes: str,
    analysis_id: str = "analysis-1",
    file_name: str = "reads.bam",
    donors: tuple[Donor, ...] = (),
) -> RepositoryFile:
    return RepositoryFile(
        id=file_id(analysis_id, file_name),
        analysis_id=analysis_id,
        file_name=file_name,
        data_type=DataType.DNA_SEQ,
        file_copies=tuple(
            FileCopy(
                repo_code=code,
                url=f"https://{code}.example.org/{analysis_id}",
                file_name=file_name,
            )
            for code in repo_codes
        ),
        donors=donors,
    )


class InMemorySourceFileRepository:
    def __init__(self, rows: dict[RepositorySource, list[FileObservation]]) -> None:
        self.rows = rows

    def replace_source(self, source: RepositorySource, files: Iterable[FileObservation]) -> int:
        staged = list(files)
        self.rows[source] = staged
        return len(staged)

    def list_by_source(self, source: RepositorySource) -> list[FileObservation]:
        return list(self.rows.get(source, []))


class InMemoryRepositoryFileRepository:
    def __init__(self) -> None:
        self.files: list[RepositoryFile] = []

    def replace_all(self, files: Iterable[RepositoryFile]) -> int:
        self.files = list(files)
        return len(self.files)

    def list_all(self) -> list[RepositoryFile]:
        return list(self.files)


@dataclass
class InMemoryStore:
    """Backing data for :class:`InMemoryUnitOfWork`; only committed writes land here."""

    rows: dict[RepositorySource, list[FileObservation]] = field(
        default_factory=dict[RepositorySource, list[FileObservation]]
    )
    commits: int = 0
    fail_on_list: set[RepositorySource] = field(default_factory=set[RepositorySource])

    def unit_of_work(self) -> InMemoryUnitOfWork:
        return InMemoryUnitOfWork(self)


class _FailingSourceFileRepository(InMemorySourceFileRepository):
    def __init__(
        self, rows: dict[RepositorySource, list[FileObservation]], failing: set[RepositorySource]
    ) -> None:
        super().__init__(rows)
        self.failing = failing

    def list_by_source(self, source: RepositorySource) -> list[FileObservation]:
        if source in self.failing:
            raise RuntimeError(f"storage unavailable for {source}")
        return super().list_by_source(source)


class InMemoryUnitOfWork:
    def __init__(self, store: InMemoryStore) -> None:
        self.store = store
        self._pending: dict[RepositorySource, list[FileObservation]] = {}
        self._repositories = ImportRepositories(
            source_files=_FailingSourceFileRepository(self._pending, store.fail_on_list),
            repository_files=InMemoryRepositoryFileRepository(),
        )

    @property
    def repositories(self) -> ImportRepositories:
        return self._repositories

    def __enter__(self) -> InMemoryUnitOfWork:
        self._pending.clear()
        self._pending.update(self.store.rows)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        return False

    def commit(self) -> None:
        self.store.rows = dict(self._pending)
        self.store.commits += 1

    def rollback(self) -> None:
        self._pending.clear()


@dataclass
class FakeSourceImporter:
    source: RepositorySource
    store: InMemoryStore
    files: list[FileObservation] = field(default_factory=list[FileObservation])
    error: Exception | None = None
    calls: list[RepositorySource] | None = None

    def execute(self) -> None:
        if self.calls is not None:
            self.calls.append(self.source)
        if self.error is not None:
            raise self.error
        with self.store.unit_of_work() as uow:
            uow.repositories.source_files.replace_source(self.source, self.files)
            uow.commit()


@dataclass
class FakeWriter:
    written: list[RepositoryFile] = field(default_factory=list[RepositoryFile])
    error: Exception | None = None
    entered: int = 0
    exited: int = 0

    def __enter__(self) -> FakeWriter:
        self.entered += 1
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        self.exited += 1
        return False

    def write(self, files: Iterable[RepositoryFile]) -> int:
        if self.error is not None:
            raise self.error
        self.written = list(files)
        return len(self.written)


@dataclass
class FakeIndexer:
    writer: FakeWriter
    error: Exception | None = None
    calls: int = 0
    exited: int = 0

    def __enter__(self) -> FakeIndexer:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        self.exited += 1
        return False

    def index_files(self) -> int:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return len(self.writer.written)


@dataclass
class RecordingNotifier:
    messages: list[tuple[str, str]] = field(default_factory=list[tuple[str, str]])
    error: Exception | None = None

    def send(self, subject: str, body: str) -> None:
        self.messages.append((subject, body))
        if self.error is not None:
            raise self.error


def make_client_factory(
    handler: Callable[[httpx.Request], httpx.Response],
) -> Callable[[ResilienceConfig], ResilientClient]:
    async def async_handler(request: httpx.Request) -> httpx.Response:
        return handler(request)

    def factory(resilience: ResilienceConfig) -> ResilientClient:
        client = ResilientClient(resilience)
        client._client = httpx.AsyncClient(  # noqa: SLF001  # type: ignore[reportPrivateUsage]
            base_url=resilience.base_url or "",
            transport=httpx.MockTransport(async_handler),
        )
        return client

    return factory
