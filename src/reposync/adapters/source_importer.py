"""Shared behaviour of the per-source importers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from logging import getLogger
from typing import TYPE_CHECKING

from reposync.domain.import_pipeline.ports import unresolved_donors

if TYPE_CHECKING:
    from collections.abc import Iterable

    from reposync.domain.import_pipeline.ports import DonorIdResolver, UnitOfWorkFactory
    from reposync.domain.model import FileObservation, RepositorySource


log = getLogger(__name__)


class BaseSourceImporter(ABC):
    """Read one upstream source and replace its rows in source-scoped storage.

    Subclasses only implement :meth:`read_files`; donor resolution and the
    staging write are shared. A failure anywhere leaves the previously staged
    rows of the source untouched because the replacement is committed at once.
    """

    def __init__(
        self,
        unit_of_work_factory: UnitOfWorkFactory,
        *,
        donor_id_resolver: DonorIdResolver | None = None,
    ) -> None:
        self._unit_of_work_factory = unit_of_work_factory
        self._donor_id_resolver = donor_id_resolver or unresolved_donors

    @property
    @abstractmethod
    def source(self) -> RepositorySource: ...

    @abstractmethod
    def read_files(self) -> Iterable[FileObservation]: ...

    def execute(self) -> None:
        log.info("Reading '%s' files...", self.source)
        files = list(self.read_files())
        log.info("Read %s '%s' files", len(files), self.source)
        files = self._resolve_donors(files)

        with self._unit_of_work_factory() as uow:
            written = uow.repositories.source_files.replace_source(self.source, files)
            uow.commit()
        log.info("Wrote %s '%s' files", written, self.source)

    def _resolve_donors(self, files: list[FileObservation]) -> list[FileObservation]:
        pending = list(
            dict.fromkeys(
                donor for file in files for donor in file.donors if not donor.has_donor_id
            )
        )
        if not pending:
            return files
        resolved = dict(zip(pending, self._donor_id_resolver(pending), strict=True))
        log.info(
            "Resolved %s of %s '%s' donors",
            sum(1 for donor in resolved.values() if donor.has_donor_id),
            len(pending),
            self.source,
        )
        return [
            file.with_donors(tuple(resolved.get(donor, donor) for donor in file.donors))
            if file.donors
            else file
            for file in files
        ]
