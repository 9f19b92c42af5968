"""Dependencies shared by all import stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from reposync.domain.model import RepositorySource

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .ports import (
        IndexerFactory,
        Notifier,
        SourceFileImporter,
        UnitOfWorkFactory,
        WriterFactory,
    )


@dataclass(slots=True)
class ImportContext:
    """Bundle of every external collaborator one import run talks to.

    ``importers`` is the fixed, ordered list of per-source importers; the order
    is the execution order, subject to activation through ``sources``.
    """

    importers: Sequence[SourceFileImporter]
    unit_of_work_factory: UnitOfWorkFactory
    writer_factory: WriterFactory
    indexer_factory: IndexerFactory
    notifier: Notifier
    sources: tuple[RepositorySource, ...] = field(default_factory=lambda: tuple(RepositorySource))
    require_resolved_donors: bool = False
