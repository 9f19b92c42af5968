"""File observations, copies, donors and the canonical repository file."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime  # noqa: TC003  # resolved at runtime by pydantic adapters

from reposync.domain.identity import observation_id
from reposync.domain.model.enums import DataType, RepositorySource  # noqa: TC001


@dataclass(frozen=True, slots=True)
class Donor:
    """Study subject a file belongs to, possibly pending identifier resolution."""

    donor_id: str | None = None
    submitted_donor_id: str | None = None
    project_code: str | None = None
    study: str | None = None

    @property
    def has_donor_id(self) -> bool:
        return bool(self.donor_id)

    def with_donor_id(self, donor_id: str) -> Donor:
        return replace(self, donor_id=donor_id)


@dataclass(frozen=True, slots=True)
class FileCopy:
    """One repository's physical copy of a file."""

    repo_code: str
    url: str
    file_name: str
    file_format: str | None = None
    file_size: int | None = None
    file_md5sum: str | None = None
    last_modified: datetime | None = None
    repo_file_id: str | None = None


@dataclass(frozen=True, slots=True)
class FileObservation:
    """A single source's normalized view of one physical file."""

    source: RepositorySource
    repo_code: str
    repo_file_id: str
    analysis_id: str
    file_name: str
    md5sum: str | None = None
    size: int | None = None
    analyte_code: str | None = None
    donors: tuple[Donor, ...] = field(default_factory=tuple["Donor", ...])
    file_copies: tuple[FileCopy, ...] = field(default_factory=tuple["FileCopy", ...])

    @property
    def observation_id(self) -> str:
        return observation_id(self.repo_code, self.repo_file_id)

    def with_donors(self, donors: tuple[Donor, ...]) -> FileObservation:
        return replace(self, donors=donors)


@dataclass(frozen=True, slots=True)
class RepositoryFile:
    """Canonical record merging every observation of one physical file."""

    id: str
    analysis_id: str
    file_name: str
    data_type: DataType
    md5sum: str | None = None
    size: int | None = None
    file_copies: tuple[FileCopy, ...] = field(default_factory=tuple["FileCopy", ...])
    donors: tuple[Donor, ...] = field(default_factory=tuple["Donor", ...])
    sources: tuple[RepositorySource, ...] = field(default_factory=tuple["RepositorySource", ...])

    @property
    def repo_codes(self) -> frozenset[str]:
        return frozenset(copy.repo_code for copy in self.file_copies)

    @property
    def has_resolved_donor(self) -> bool:
        return any(donor.has_donor_id for donor in self.donors)

    @property
    def unresolved(self) -> bool:
        return not self.has_resolved_donor
