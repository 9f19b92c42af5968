"""Writer replacing the published repository file set."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from reposync.adapters.sqlalchemy.mappings import create_all_tables
from reposync.adapters.sqlalchemy.repositories import SqlAlchemyRepositoryFileRepository

if TYPE_CHECKING:
    from collections.abc import Iterable
    from types import TracebackType

    from sqlalchemy.engine import Engine

    from reposync.domain.model import RepositoryFile

log = getLogger(__name__)


class SqlAlchemyRepositoryFileWriter:
    """Overwrite the published set in a single transaction.

    The writer owns its engine and disposes it on every exit path. Pass an
    ``engine`` instead of a URI to share one (it is then left open).
    """

    def __init__(self, database_uri: str | None = None, *, engine: Engine | None = None) -> None:
        if database_uri is None and engine is None:
            raise ValueError("Either database_uri or engine is required")
        self._database_uri = database_uri
        self._shared_engine = engine
        self._engine: Engine | None = None

    def __enter__(self) -> SqlAlchemyRepositoryFileWriter:
        engine = self._shared_engine or create_engine(str(self._database_uri), future=True)
        try:
            create_all_tables(engine)
        except Exception:
            if self._shared_engine is None:
                engine.dispose()
            raise
        self._engine = engine
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        if self._engine is not None and self._shared_engine is None:
            self._engine.dispose()
        self._engine = None
        return False

    def write(self, files: Iterable[RepositoryFile]) -> int:
        if self._engine is None:
            raise RuntimeError("Writer must be entered before writing")
        log.info("Writing repository files...")
        with Session(self._engine) as session, session.begin():
            written = SqlAlchemyRepositoryFileRepository(session).replace_all(files)
        log.info("Wrote %s repository files", written)
        return written


if TYPE_CHECKING:
    from reposync.domain.import_pipeline.ports import RepositoryFileWriter

    _writer_check: RepositoryFileWriter = SqlAlchemyRepositoryFileWriter("sqlite://")
