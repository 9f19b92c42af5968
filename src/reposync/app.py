"""Application orchestration entry points."""

from __future__ import annotations

from functools import partial
from logging import getLogger
from typing import TYPE_CHECKING

from reposync.adapters.cghub import CGHubClient, CGHubImporter
from reposync.adapters.ega import EGAClient, EGAImporter
from reposync.adapters.identifier import IdentifierClient
from reposync.adapters.index import ElasticsearchFileIndexer
from reposync.adapters.notification import LoggingNotifier, SendGridNotifier
from reposync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyImportUnitOfWork,
    is_started,
    shutdown,
    startup,
)
from reposync.adapters.sqlalchemy.writer import SqlAlchemyRepositoryFileWriter
from reposync.adapters.storage import StorageListingClient, StorageListingImporter
from reposync.config import (
    get_cghub_config,
    get_database_config,
    get_ega_config,
    get_identifier_config,
    get_import_config,
    get_index_config,
    get_notification_config,
    get_object_store_config,
)
from reposync.domain.import_pipeline import ImportContext, RepositoryImporter
from reposync.domain.model import RepositorySource

if TYPE_CHECKING:
    from collections.abc import Iterable

    from reposync.config import DatabaseConfig, ImportConfig
    from reposync.domain.import_pipeline import (
        DonorIdResolver,
        ImportReport,
        Notifier,
        SourceFileImporter,
        UnitOfWorkFactory,
    )


log = getLogger(__name__)


def build_donor_id_resolver() -> DonorIdResolver | None:
    config = get_identifier_config()
    if config is None:
        log.warning("IDENTIFIER_SERVICE_URL not configured - donors stay unresolved")
        return None
    return IdentifierClient(config=config)


def create_importers(
    sources: Iterable[RepositorySource],
    *,
    unit_of_work_factory: UnitOfWorkFactory,
    donor_id_resolver: DonorIdResolver | None = None,
) -> list[SourceFileImporter]:
    """Build the importers of the active sources, in fixed activation order.

    Source configuration is only loaded for active sources.
    """

    active = set(sources)
    importers: list[SourceFileImporter] = []
    for source in RepositorySource:
        if source not in active:
            continue
        if source is RepositorySource.EGA:
            importers.append(
                EGAImporter(
                    EGAClient(config=get_ega_config()),
                    unit_of_work_factory,
                    donor_id_resolver=donor_id_resolver,
                )
            )
        elif source is RepositorySource.CGHUB:
            importers.append(
                CGHubImporter(
                    CGHubClient(config=get_cghub_config()),
                    unit_of_work_factory,
                    donor_id_resolver=donor_id_resolver,
                )
            )
        else:
            importers.append(
                StorageListingImporter(
                    source,
                    StorageListingClient(config=get_object_store_config(source)),
                    unit_of_work_factory,
                    donor_id_resolver=donor_id_resolver,
                )
            )
    return importers


def build_notifier() -> Notifier:
    config = get_notification_config()
    if config is None:
        log.warning("SENDGRID_API_KEY not configured - import reports are only logged")
        return LoggingNotifier()
    return SendGridNotifier(config)


def build_import_context(
    *,
    import_config: ImportConfig | None = None,
    database_config: DatabaseConfig | None = None,
    notifier: Notifier | None = None,
) -> ImportContext:
    """Wire the production adapters for one import run."""

    effective_import = import_config or get_import_config()
    effective_database = database_config or get_database_config()
    index_config = get_index_config()

    unit_of_work_factory: UnitOfWorkFactory = SqlAlchemyImportUnitOfWork
    importers = create_importers(
        effective_import.sources,
        unit_of_work_factory=unit_of_work_factory,
        donor_id_resolver=build_donor_id_resolver(),
    )
    return ImportContext(
        importers=importers,
        unit_of_work_factory=unit_of_work_factory,
        writer_factory=partial(SqlAlchemyRepositoryFileWriter, effective_database.uri),
        indexer_factory=partial(
            ElasticsearchFileIndexer, effective_database.uri, config=index_config
        ),
        notifier=notifier or build_notifier(),
        sources=effective_import.sources,
        require_resolved_donors=effective_import.require_resolved_donors,
    )


def import_repository(
    *,
    import_config: ImportConfig | None = None,
    database_config: DatabaseConfig | None = None,
    context: ImportContext | None = None,
) -> ImportReport:
    """Run one complete repository import using the configured adapters."""

    effective_database = database_config or get_database_config()
    started_here = not is_started()
    if started_here:
        startup(database_uri=effective_database.staging_uri)
    try:
        effective_context = context or build_import_context(
            import_config=import_config, database_config=effective_database
        )
        log.info(
            "Starting repository import: sources=%s, require_resolved_donors=%s",
            ", ".join(effective_context.sources),
            effective_context.require_resolved_donors,
        )
        report = RepositoryImporter(effective_context).execute()
        log.info(
            "Finished repository import: collected=%s, combined=%s, released=%s, "
            "written=%s, indexed=%s",
            report.collected,
            report.combined,
            report.released,
            report.written,
            report.indexed,
        )
        return report
    finally:
        if started_here:
            shutdown()
