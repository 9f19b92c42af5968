"""Source importer for object-storage mirrors (AWS and Collaboratory)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from reposync.adapters.source_importer import BaseSourceImporter
from reposync.domain.model import server_for_source

from .translator import parse_entities

if TYPE_CHECKING:
    from reposync.domain.import_pipeline.ports import DonorIdResolver, UnitOfWorkFactory
    from reposync.domain.model import FileObservation, RepositorySource

    from .client import StorageListingClient


class StorageListingImporter(BaseSourceImporter):
    """One instance per mirror; the source selects the registered server."""

    def __init__(
        self,
        source: RepositorySource,
        client: StorageListingClient,
        unit_of_work_factory: UnitOfWorkFactory,
        *,
        donor_id_resolver: DonorIdResolver | None = None,
    ) -> None:
        super().__init__(unit_of_work_factory, donor_id_resolver=donor_id_resolver)
        self._source = source
        self._server = server_for_source(source)
        self._client = client

    @property
    def source(self) -> RepositorySource:
        return self._source

    def read_files(self) -> list[FileObservation]:
        return parse_entities(self._client.read_entities(), server=self._server)
