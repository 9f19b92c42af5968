"""Public domain model surface."""

from __future__ import annotations

from reposync.domain.model.enums import DataType, RepositorySource, RepositoryType
from reposync.domain.model.files import Donor, FileCopy, FileObservation, RepositoryFile
from reposync.domain.model.servers import (
    AWS_VIRGINIA,
    CGHUB,
    COLLABORATORY,
    EGA,
    SERVERS,
    RepositoryServer,
    UnknownServerError,
    server_for_code,
    server_for_source,
)

__all__ = [
    "AWS_VIRGINIA",
    "CGHUB",
    "COLLABORATORY",
    "EGA",
    "SERVERS",
    "DataType",
    "Donor",
    "FileCopy",
    "FileObservation",
    "RepositoryFile",
    "RepositoryServer",
    "RepositorySource",
    "RepositoryType",
    "UnknownServerError",
    "server_for_code",
    "server_for_source",
]
