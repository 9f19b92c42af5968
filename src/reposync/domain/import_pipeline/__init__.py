"""Repository file import pipeline.

Stages run strictly forward: source import -> collect -> combine -> filter ->
write -> index. Each stage consumes the complete output of the previous one and
the stages communicate only through the objects they return (plus the
source-scoped storage between import and collect).
"""

from __future__ import annotations

from .collector import RepositoryFileCollector, SourceFiles
from .combiner import RepositoryFileCombiner, group_key
from .context import ImportContext
from .filter import EXCLUSIVE_REPO_CODES, RepositoryFileFilter
from .importer import (
    ImportFailure,
    ImportReport,
    ImportStage,
    RepositoryImporter,
    RepositoryImportError,
)
from .ports import (
    DonorIdResolver,
    ImportRepositories,
    ImportUnitOfWork,
    IndexerFactory,
    Notifier,
    RepositoryFileIndexer,
    RepositoryFileRepository,
    RepositoryFileWriter,
    SourceFileImporter,
    SourceFileRepository,
    UnitOfWorkFactory,
    WriterFactory,
    unresolved_donors,
)

__all__ = [
    "EXCLUSIVE_REPO_CODES",
    "DonorIdResolver",
    "ImportContext",
    "ImportFailure",
    "ImportReport",
    "ImportRepositories",
    "ImportStage",
    "ImportUnitOfWork",
    "IndexerFactory",
    "Notifier",
    "RepositoryFileCollector",
    "RepositoryFileCombiner",
    "RepositoryFileFilter",
    "RepositoryFileIndexer",
    "RepositoryFileRepository",
    "RepositoryFileWriter",
    "RepositoryImportError",
    "RepositoryImporter",
    "SourceFileImporter",
    "SourceFileRepository",
    "SourceFiles",
    "UnitOfWorkFactory",
    "WriterFactory",
    "group_key",
    "unresolved_donors",
]
