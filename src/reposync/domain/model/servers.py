"""Registry of the repositories (mirrors) files can be served from."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from reposync.domain.model.enums import RepositorySource, RepositoryType

EGA: Final[str] = "ega"
CGHUB: Final[str] = "cghub"
AWS_VIRGINIA: Final[str] = "aws-virginia"
COLLABORATORY: Final[str] = "collaboratory"


@dataclass(frozen=True, slots=True)
class RepositoryServer:
    type: RepositoryType
    source: RepositorySource
    name: str
    code: str
    country: str
    base_url: str


SERVERS: Final[tuple[RepositoryServer, ...]] = (
    RepositoryServer(
        type=RepositoryType.EGA_ARCHIVE,
        source=RepositorySource.EGA,
        name="EGA - Hinxton",
        code=EGA,
        country="UK",
        base_url="https://ega.ebi.ac.uk/",
    ),
    RepositoryServer(
        type=RepositoryType.GNOS,
        source=RepositorySource.CGHUB,
        name="CGHub - Santa Cruz",
        code=CGHUB,
        country="US",
        base_url="https://cghub.ucsc.edu/",
    ),
    RepositoryServer(
        type=RepositoryType.S3,
        source=RepositorySource.AWS,
        name="AWS - Virginia",
        code=AWS_VIRGINIA,
        country="US",
        base_url="https://s3-external-1.amazonaws.com/",
    ),
    RepositoryServer(
        type=RepositoryType.S3,
        source=RepositorySource.COLLAB,
        name="Collaboratory - Toronto",
        code=COLLABORATORY,
        country="CA",
        base_url="https://www.cancercollaboratory.org/",
    ),
)


class UnknownServerError(LookupError):
    """Raised when no registered server matches a lookup."""


def server_for_source(source: RepositorySource) -> RepositoryServer:
    for server in SERVERS:
        if server.source is source:
            return server
    raise UnknownServerError(f"No repository server registered for source {source}")


def server_for_code(code: str) -> RepositoryServer:
    for server in SERVERS:
        if server.code == code:
            return server
    raise UnknownServerError(f"No repository server registered for code {code!r}")
