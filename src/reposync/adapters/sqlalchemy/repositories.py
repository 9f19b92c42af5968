"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy import delete, insert, select

from reposync.adapters.sqlalchemy.mappings import repository_file_table, source_file_table
from reposync.adapters.sqlalchemy.serialization import (
    dump_observation,
    dump_repository_file,
    load_observation,
    load_repository_file,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sqlalchemy.orm import Session

    from reposync.domain.model import FileObservation, RepositoryFile, RepositorySource

log = getLogger(__name__)


class SqlAlchemySourceFileRepository:
    """Source-scoped staging of normalized observations."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def replace_source(self, source: RepositorySource, files: Iterable[FileObservation]) -> int:
        rows: dict[str, dict[str, object]] = {}
        for file in files:
            if file.source is not source:
                raise ValueError(
                    f"Observation {file.observation_id} belongs to {file.source}, not {source}"
                )
            key = file.observation_id
            if key in rows:
                log.warning(
                    "Duplicate '%s' observation %s/%s; keeping the last one",
                    source,
                    file.repo_code,
                    file.repo_file_id,
                )
            rows[key] = {
                "observation_id": key,
                "source": source,
                "repo_code": file.repo_code,
                "repo_file_id": file.repo_file_id,
                "analysis_id": file.analysis_id,
                "file_name": file.file_name,
                "document": dump_observation(file),
            }

        self.session.execute(delete(source_file_table).where(source_file_table.c.source == source))
        if rows:
            self.session.execute(insert(source_file_table), list(rows.values()))
        return len(rows)

    def list_by_source(self, source: RepositorySource) -> list[FileObservation]:
        stmt = (
            select(source_file_table.c.document)
            .where(source_file_table.c.source == source)
            .order_by(source_file_table.c.observation_id)
        )
        return [load_observation(document) for document in self.session.execute(stmt).scalars()]


class SqlAlchemyRepositoryFileRepository:
    """The published canonical record set; always replaced as a whole."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def replace_all(self, files: Iterable[RepositoryFile]) -> int:
        rows = [
            {
                "id": file.id,
                "analysis_id": file.analysis_id,
                "file_name": file.file_name,
                "data_type": file.data_type,
                "document": dump_repository_file(file),
            }
            for file in files
        ]
        self.session.execute(delete(repository_file_table))
        if rows:
            self.session.execute(insert(repository_file_table), rows)
        return len(rows)

    def list_all(self) -> list[RepositoryFile]:
        stmt = select(repository_file_table.c.document).order_by(repository_file_table.c.id)
        return [load_repository_file(document) for document in self.session.execute(stmt).scalars()]
