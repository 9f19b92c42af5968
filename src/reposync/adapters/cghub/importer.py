"""Source importer for the CGHub archival metadata service."""

from __future__ import annotations

from typing import TYPE_CHECKING

from reposync.adapters.source_importer import BaseSourceImporter
from reposync.domain.model import RepositorySource, server_for_source

from .translator import parse_analyses

if TYPE_CHECKING:
    from reposync.domain.import_pipeline.ports import DonorIdResolver, UnitOfWorkFactory
    from reposync.domain.model import FileObservation

    from .client import CGHubClient


class CGHubImporter(BaseSourceImporter):
    def __init__(
        self,
        client: CGHubClient,
        unit_of_work_factory: UnitOfWorkFactory,
        *,
        donor_id_resolver: DonorIdResolver | None = None,
    ) -> None:
        super().__init__(unit_of_work_factory, donor_id_resolver=donor_id_resolver)
        self._client = client

    @property
    def source(self) -> RepositorySource:
        return RepositorySource.CGHUB

    def read_files(self) -> list[FileObservation]:
        server = server_for_source(self.source)
        return parse_analyses(self._client.read_details(), base_url=server.base_url)
