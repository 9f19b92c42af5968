"""Translate object-storage entities into file observations."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from reposync.domain.model import FileCopy, FileObservation

from .schema import EntityPayload

if TYPE_CHECKING:
    from collections.abc import Iterable

    from reposync.domain.model import RepositoryServer

    from .schema import EntityInput

log = getLogger(__name__)

OBJECT_PATH = "oicr.icgc/data"


def _ensure_entity(entity: EntityInput) -> EntityPayload:
    if isinstance(entity, EntityPayload):
        return entity
    return EntityPayload.model_validate(entity)


def parse_entity(entity: EntityInput, *, server: RepositoryServer) -> FileObservation:
    """Listings carry no donor information, so observations have no donors."""

    payload = _ensure_entity(entity)
    md5sum = payload.file_md5sum.lower() if payload.file_md5sum else None
    copy = FileCopy(
        repo_code=server.code,
        url=f"{server.base_url.rstrip('/')}/{OBJECT_PATH}/{payload.id}",
        file_name=payload.file_name,
        file_size=payload.file_size,
        file_md5sum=md5sum,
        last_modified=payload.created_time,
        repo_file_id=payload.id,
    )
    return FileObservation(
        source=server.source,
        repo_code=server.code,
        repo_file_id=payload.id,
        analysis_id=payload.gnos_id,
        file_name=payload.file_name,
        md5sum=md5sum,
        size=payload.file_size,
        file_copies=(copy,),
    )


def parse_entities(
    entities: Iterable[EntityInput], *, server: RepositoryServer
) -> list[FileObservation]:
    observations: list[FileObservation] = []
    skipped = 0
    for entity in entities:
        try:
            observations.append(parse_entity(entity, server=server))
        except ValidationError as exc:
            skipped += 1
            log.warning("Skipping malformed '%s' entity: %s", server.code, exc.errors()[:1])
    if skipped:
        log.warning("Skipped %s malformed '%s' entities", skipped, server.code)
    return observations
