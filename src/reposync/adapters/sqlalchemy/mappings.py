"""SQLAlchemy table metadata for staged observations and published files."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import Column, Enum, Index, MetaData, String, Table, Text

from reposync.domain.model import DataType, RepositorySource

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

metadata = MetaData()

# Source-scoped staging: one row per observation, replaced per source.
source_file_table = Table(
    "source_file",
    metadata,
    Column("observation_id", String(36), primary_key=True),
    Column("source", Enum(RepositorySource, native_enum=False, length=16), nullable=False),
    Column("repo_code", String, nullable=False),
    Column("repo_file_id", String, nullable=False),
    Column("analysis_id", String, nullable=False),
    Column("file_name", String, nullable=False),
    Column("document", Text, nullable=False),
    Index("ix_source_file_source", "source"),
)

# Published canonical record set, overwritten by every successful write stage.
repository_file_table = Table(
    "repository_file",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("analysis_id", String, nullable=False),
    Column("file_name", String, nullable=False),
    Column("data_type", Enum(DataType, native_enum=False, length=16), nullable=False),
    Column("document", Text, nullable=False),
    Index("ix_repository_file_analysis", "analysis_id", "file_name"),
)


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    metadata.create_all(engine)
