"""End-to-end repository import orchestrator.

A run is one logical transaction built from independently failing stages:

1. import: every active source importer runs; a failing source is recorded and
   the remaining sources still run.
2. collect, combine, filter, write, index: strictly sequential; the first failure
   is recorded and aborts the stages after it.

Whatever happens, a completion report is sent through the notifier. Any recorded
failure makes the run fail (``RepositoryImportError``) even though data from the
successful parts may already be persisted; callers should rerun to reconcile.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import timedelta
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from .collector import RepositoryFileCollector, SourceFiles
from .combiner import RepositoryFileCombiner
from .filter import RepositoryFileFilter

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

    from reposync.domain.model import RepositoryFile, RepositorySource

    from .context import ImportContext


log = getLogger(__name__)

_BANNER_WIDTH = 80
REPORT_SUBJECT_PREFIX = "Repository Importer"


class ImportStage(StrEnum):
    IMPORT = "import"
    COLLECT = "collect"
    COMBINE = "combine"
    FILTER = "filter"
    WRITE = "write"
    INDEX = "index"


@dataclass(frozen=True, slots=True)
class ImportFailure:
    stage: ImportStage
    error: Exception
    source: RepositorySource | None = None

    def describe(self) -> str:
        where = str(self.stage) if self.source is None else f"{self.stage} '{self.source}'"
        return f"[{where}] {type(self.error).__name__}: {self.error}"


@dataclass(slots=True)
class ImportReport:
    """Outcome of one import run."""

    sources: tuple[RepositorySource, ...]
    elapsed: timedelta = field(default_factory=timedelta)
    failures: list[ImportFailure] = field(default_factory=list[ImportFailure])
    imported_sources: list[RepositorySource] = field(default_factory=list["RepositorySource"])
    collected: int = 0
    combined: int = 0
    released: int = 0
    written: int = 0
    indexed: int = 0

    @property
    def success(self) -> bool:
        return not self.failures

    @property
    def subject(self) -> str:
        return f"{REPORT_SUBJECT_PREFIX} - {'SUCCESS' if self.success else 'ERROR'}"

    @property
    def body(self) -> str:
        descriptions = "\n".join(failure.describe() for failure in self.failures)
        return f"Finished in {self.elapsed}\n\n{descriptions}"


class RepositoryImportError(RuntimeError):
    """Raised after reporting when any failure was recorded during the run."""

    def __init__(self, report: ImportReport) -> None:
        self.report = report
        details = "; ".join(failure.describe() for failure in report.failures)
        super().__init__(f"Exception(s) importing repository files: {details}")


class RepositoryImporter:
    """Sequence the import stages for the sources configured in ``context``."""

    def __init__(
        self,
        context: ImportContext,
        *,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self._context = context
        self._clock = clock

    def execute(self, sources: Iterable[RepositorySource] | None = None) -> ImportReport:
        active = tuple(sources) if sources is not None else tuple(self._context.sources)
        report = ImportReport(sources=active)
        started = self._clock()

        stage = ImportStage.IMPORT
        try:
            self._write_source_files(active, report)

            stage = ImportStage.COLLECT
            file_sets = self._collect_files(active)
            report.collected = sum(len(file_set) for file_set in file_sets)

            stage = ImportStage.COMBINE
            files = self._combine_files(file_sets)
            report.combined = len(files)

            stage = ImportStage.FILTER
            released = self._filter_files(files)
            report.released = len(released)

            stage = ImportStage.WRITE
            report.written = self._write_files(released)

            stage = ImportStage.INDEX
            report.indexed = self._index_files()
        except Exception as exc:
            log.exception("Error during '%s' stage", stage)
            report.failures.append(ImportFailure(stage=stage, error=exc))
        finally:
            report.elapsed = timedelta(seconds=self._clock() - started)
            self._report(report)

        if not report.success:
            raise RepositoryImportError(report)
        return report

    def _write_source_files(
        self, active: Sequence[RepositorySource], report: ImportReport
    ) -> None:
        for importer in self._context.importers:
            source = importer.source
            if source not in active:
                continue
            try:
                _log_banner(f"Importing '{source}' sourced files")
                importer.execute()
            except Exception as exc:
                log.exception("Error processing '%s'", source)
                report.failures.append(
                    ImportFailure(stage=ImportStage.IMPORT, error=exc, source=source)
                )
            else:
                report.imported_sources.append(source)

    def _collect_files(self, active: Sequence[RepositorySource]) -> list[SourceFiles]:
        _log_banner("Collecting files")
        collector = RepositoryFileCollector(self._context.unit_of_work_factory)
        ordered = [
            importer.source for importer in self._context.importers if importer.source in active
        ]
        return list(collector.collect_files(ordered))

    def _combine_files(self, file_sets: list[SourceFiles]) -> list[RepositoryFile]:
        _log_banner("Combining files")
        return RepositoryFileCombiner().combine_files(file_sets)

    def _filter_files(self, files: list[RepositoryFile]) -> list[RepositoryFile]:
        _log_banner("Filtering files")
        file_filter = RepositoryFileFilter(
            require_resolved_donors=self._context.require_resolved_donors
        )
        return file_filter.filter_files(files)

    def _write_files(self, files: list[RepositoryFile]) -> int:
        _log_banner("Writing files")
        with self._context.writer_factory() as writer:
            return writer.write(files)

    def _index_files(self) -> int:
        _log_banner("Indexing files")
        with self._context.indexer_factory() as indexer:
            return indexer.index_files()

    def _report(self, report: ImportReport) -> None:
        if report.success:
            log.info("Finished importing repository in %s", report.elapsed)
        else:
            log.error("Finished importing repository with errors in %s:", report.elapsed)
            total = len(report.failures)
            for index, failure in enumerate(report.failures, start=1):
                log.error("[%s/%s]: %s", index, total, failure.describe())

        try:
            self._context.notifier.send(report.subject, report.body)
        except Exception:
            log.exception("Could not deliver import report '%s'", report.subject)


def _log_banner(message: str) -> None:
    log.info("-" * _BANNER_WIDTH)
    log.info(message)
    log.info("-" * _BANNER_WIDTH)
