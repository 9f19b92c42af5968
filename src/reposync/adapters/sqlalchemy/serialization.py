"""JSON documents for domain records, produced by pydantic type adapters."""

from __future__ import annotations

from pydantic import TypeAdapter

from reposync.domain.model import FileObservation, RepositoryFile

_OBSERVATION_ADAPTER = TypeAdapter(FileObservation)
_REPOSITORY_FILE_ADAPTER = TypeAdapter(RepositoryFile)


def dump_observation(observation: FileObservation) -> str:
    return _OBSERVATION_ADAPTER.dump_json(observation).decode()


def load_observation(document: str | bytes) -> FileObservation:
    return _OBSERVATION_ADAPTER.validate_json(document)


def dump_repository_file(file: RepositoryFile) -> str:
    return _REPOSITORY_FILE_ADAPTER.dump_json(file).decode()


def load_repository_file(document: str | bytes) -> RepositoryFile:
    return _REPOSITORY_FILE_ADAPTER.validate_json(document)


def repository_file_document(file: RepositoryFile) -> dict[str, object]:
    """Plain JSON-compatible mapping, as sent to the search index."""

    document = _REPOSITORY_FILE_ADAPTER.dump_python(file, mode="json")
    document["repo_codes"] = sorted(file.repo_codes)
    document["unresolved"] = file.unresolved
    return document
