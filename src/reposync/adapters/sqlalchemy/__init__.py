"""SQLAlchemy adapter package for reposync."""

from __future__ import annotations

from .mappings import create_all_tables, metadata, repository_file_table, source_file_table
from .repositories import SqlAlchemyRepositoryFileRepository, SqlAlchemySourceFileRepository
from .unit_of_work import (
    SqlAlchemyImportUnitOfWork,
    StartupError,
    is_started,
    shutdown,
    startup,
)
from .writer import SqlAlchemyRepositoryFileWriter

__all__ = [
    "SqlAlchemyImportUnitOfWork",
    "SqlAlchemyRepositoryFileRepository",
    "SqlAlchemyRepositoryFileWriter",
    "SqlAlchemySourceFileRepository",
    "StartupError",
    "create_all_tables",
    "is_started",
    "metadata",
    "repository_file_table",
    "shutdown",
    "source_file_table",
    "startup",
]
