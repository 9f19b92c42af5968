from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from reposync.adapters.sqlalchemy import create_all_tables
from reposync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyImportUnitOfWork,
    shutdown,
    startup,
)

os.environ.setdefault("STAGING_DATABASE_URI", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


def _memory_engine() -> Engine:
    return create_engine(
        "sqlite+pysqlite:///:memory:",
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = _memory_engine()
    create_all_tables(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def published_engine() -> Iterator[Engine]:
    engine = _memory_engine()
    create_all_tables(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session(sqlite_engine: Engine) -> Iterator[Session]:
    session_factory = sessionmaker(bind=sqlite_engine, future=True)
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyImportUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemyImportUnitOfWork:
        return SqlAlchemyImportUnitOfWork()

    try:
        yield factory
    finally:
        shutdown()
