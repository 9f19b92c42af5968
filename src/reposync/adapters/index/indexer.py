"""Rebuild the repository file search index from the published record set.

Every build goes to a fresh, timestamped index. Only after all documents are
loaded is the alias moved, in a single ``_aliases`` call, so searches see either
the previous or the new record set and never a partial one.
"""

from __future__ import annotations

import asyncio
import json
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING, Literal

import httpx
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from reposync.adapters.http_resilience import ResilientClient
from reposync.adapters.sqlalchemy.mappings import create_all_tables
from reposync.adapters.sqlalchemy.repositories import SqlAlchemyRepositoryFileRepository
from reposync.adapters.sqlalchemy.serialization import repository_file_document

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from types import TracebackType

    from sqlalchemy.engine import Engine

    from reposync.config.http_resilience import ResilienceConfig
    from reposync.config.index import IndexConfig
    from reposync.domain.model import RepositoryFile

log = getLogger(__name__)

NDJSON_CONTENT_TYPE = "application/x-ndjson"

FILE_MAPPINGS: dict[str, object] = {
    "dynamic": "strict",
    "properties": {
        "id": {"type": "keyword"},
        "analysis_id": {"type": "keyword"},
        "file_name": {"type": "keyword"},
        "data_type": {"type": "keyword"},
        "md5sum": {"type": "keyword"},
        "size": {"type": "long"},
        "repo_codes": {"type": "keyword"},
        "unresolved": {"type": "boolean"},
        "sources": {"type": "keyword"},
        "file_copies": {
            "type": "nested",
            "properties": {
                "repo_code": {"type": "keyword"},
                "url": {"type": "keyword"},
                "file_name": {"type": "keyword"},
                "file_format": {"type": "keyword"},
                "file_size": {"type": "long"},
                "file_md5sum": {"type": "keyword"},
                "last_modified": {"type": "date"},
                "repo_file_id": {"type": "keyword"},
            },
        },
        "donors": {
            "type": "nested",
            "properties": {
                "donor_id": {"type": "keyword"},
                "submitted_donor_id": {"type": "keyword"},
                "project_code": {"type": "keyword"},
                "study": {"type": "keyword"},
            },
        },
    },
}


class IndexBuildError(RuntimeError):
    """Raised when the search index rejects a request or a document."""


def _utcnow() -> datetime:
    return datetime.now(UTC)


def index_name(alias: str, created_at: datetime) -> str:
    return f"{alias}-{created_at.astimezone(UTC):%Y%m%d%H%M%S%f}".lower()


class ElasticsearchFileIndexer:
    """Index published repository files into an Elasticsearch-compatible server."""

    def __init__(
        self,
        database_uri: str | None = None,
        *,
        config: IndexConfig,
        engine: Engine | None = None,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if database_uri is None and engine is None:
            raise ValueError("Either database_uri or engine is required")
        self._database_uri = database_uri
        self._shared_engine = engine
        self._engine: Engine | None = None
        self._config = config
        self._client_factory = client_factory or ResilientClient
        self._clock = clock

    def __enter__(self) -> ElasticsearchFileIndexer:
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

    def index_files(self) -> int:
        if self._engine is None:
            raise RuntimeError("Indexer must be entered before indexing")
        with Session(self._engine) as session:
            files = SqlAlchemyRepositoryFileRepository(session).list_all()
        return asyncio.run(self._rebuild_async(files))

    async def _rebuild_async(self, files: Sequence[RepositoryFile]) -> int:
        alias = self._config.alias
        name = index_name(alias, self._clock())
        async with self._client_factory(self._config.resilience) as client:
            log.info("Creating index '%s'...", name)
            await self._create_index(client, name)
            try:
                indexed = await self._load_documents(client, name, files)
                self._checked(await client.post(f"/{name}/_refresh"), f"refresh '{name}'")
                previous = await self._aliased_indices(client, alias)
                await self._move_alias(client, alias, name, previous)
            except Exception:
                log.exception("Index build failed, deleting incomplete index '%s'", name)
                await self._delete_quietly(client, name)
                raise

            for old_name in previous:
                if old_name != name:
                    await self._delete_quietly(client, old_name)

        log.info("Indexed %s repository files into '%s' (alias '%s')", indexed, name, alias)
        return indexed

    async def _create_index(self, client: ResilientClient, name: str) -> None:
        body = {"mappings": FILE_MAPPINGS}
        self._checked(await client.put(f"/{name}", json=body), f"create '{name}'")

    async def _load_documents(
        self, client: ResilientClient, name: str, files: Sequence[RepositoryFile]
    ) -> int:
        bulk_size = max(self._config.bulk_size, 1)
        indexed = 0
        for start in range(0, len(files), bulk_size):
            batch = files[start : start + bulk_size]
            lines: list[str] = []
            for file in batch:
                lines.append(json.dumps({"index": {"_index": name, "_id": file.id}}))
                lines.append(json.dumps(repository_file_document(file)))
            response = self._checked(
                await client.post(
                    "/_bulk",
                    content="\n".join(lines) + "\n",
                    headers={"Content-Type": NDJSON_CONTENT_TYPE},
                ),
                f"bulk load into '{name}'",
            )
            result = response.json()
            if isinstance(result, dict) and result.get("errors"):
                raise IndexBuildError(f"Bulk load into '{name}' reported document errors")
            indexed += len(batch)
            log.debug("Indexed %s/%s documents", indexed, len(files))
        return indexed

    async def _aliased_indices(self, client: ResilientClient, alias: str) -> list[str]:
        response = await client.get(f"/_alias/{alias}")
        if response.status_code == httpx.codes.NOT_FOUND:
            return []
        if response.is_error:
            raise IndexBuildError(f"Could not read alias '{alias}': {response.status_code}")
        payload = response.json()
        if not isinstance(payload, dict):
            raise IndexBuildError(f"Unexpected alias payload for '{alias}'")
        return sorted(str(key) for key in payload)

    async def _move_alias(
        self, client: ResilientClient, alias: str, name: str, previous: Sequence[str]
    ) -> None:
        actions: list[dict[str, object]] = [
            {"remove": {"index": old_name, "alias": alias}}
            for old_name in previous
            if old_name != name
        ]
        actions.append({"add": {"index": name, "alias": alias}})
        self._checked(
            await client.post("/_aliases", json={"actions": actions}), f"move alias '{alias}'"
        )
        log.info("Alias '%s' now points to '%s'", alias, name)

    async def _delete_quietly(self, client: ResilientClient, name: str) -> None:
        try:
            response = await client.delete(f"/{name}")
        except httpx.HTTPError:
            log.warning("Could not delete index '%s'", name, exc_info=True)
            return
        if response.is_error and response.status_code != httpx.codes.NOT_FOUND:
            log.warning("Could not delete index '%s': %s", name, response.status_code)

    @staticmethod
    def _checked(response: httpx.Response, action: str) -> httpx.Response:
        if response.is_error:
            raise IndexBuildError(f"Could not {action}: {response.status_code} {response.text}")
        return response

