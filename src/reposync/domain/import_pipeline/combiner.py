"""Reconcile per-source observations into canonical repository files.

Observations describing the same physical file are grouped by their natural key
``(analysis_id, file_name)``; the source-local handle never takes part in the key.
Every group becomes exactly one :class:`RepositoryFile` whose identifier is derived
from that key, so unchanged inputs always produce the same identifiers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, TypeAlias

from reposync.domain.data_types import classify
from reposync.domain.identity import file_id
from reposync.domain.model import DataType, RepositoryFile, RepositorySource

if TYPE_CHECKING:
    from collections.abc import Iterable

    from reposync.domain.model import Donor, FileCopy, FileObservation


log = getLogger(__name__)

GroupKey: TypeAlias = tuple[str, str]

_SOURCE_ORDER: dict[RepositorySource, int] = {
    source: index for index, source in enumerate(RepositorySource)
}


def group_key(observation: FileObservation) -> GroupKey:
    return (observation.analysis_id, observation.file_name)


def _observation_order(observation: FileObservation) -> tuple[int, str, str]:
    return (
        _SOURCE_ORDER.get(observation.source, len(_SOURCE_ORDER)),
        observation.repo_code,
        observation.repo_file_id,
    )


def _copy_rank(copy: FileCopy) -> tuple[float, str]:
    modified = copy.last_modified.timestamp() if copy.last_modified else float("-inf")
    return (modified, copy.url)


def _donor_order(donor: Donor) -> tuple[str, str, str, str]:
    return (
        donor.donor_id or "",
        donor.submitted_donor_id or "",
        donor.project_code or "",
        donor.study or "",
    )


@dataclass(slots=True)
class _MergedFile:
    """Mutable accumulator for one group; only lives inside the combine step."""

    analysis_id: str
    file_name: str
    data_type: DataType | None = None
    md5sum: str | None = None
    size: int | None = None
    copies: dict[str, FileCopy] = field(default_factory=dict[str, "FileCopy"])
    resolved_donors: dict[str, Donor] = field(default_factory=dict[str, "Donor"])
    unresolved_donors: list[Donor] = field(default_factory=list["Donor"])
    sources: set[RepositorySource] = field(default_factory=set[RepositorySource])

    def absorb(self, observation: FileObservation) -> None:
        self.sources.add(observation.source)
        self._absorb_checksum(observation)
        if self.size is None:
            self.size = observation.size
        self._absorb_data_type(observation)
        for copy in observation.file_copies:
            self._absorb_copy(copy)
        for donor in observation.donors:
            self._absorb_donor(donor)

    def build(self) -> RepositoryFile:
        resolved = sorted(self.resolved_donors.values(), key=_donor_order)
        unresolved = sorted(self.unresolved_donors, key=_donor_order)
        return RepositoryFile(
            id=file_id(self.analysis_id, self.file_name),
            analysis_id=self.analysis_id,
            file_name=self.file_name,
            data_type=self.data_type or DataType.UNCLASSIFIED,
            md5sum=self.md5sum,
            size=self.size,
            file_copies=tuple(sorted(self.copies.values(), key=lambda copy: copy.repo_code)),
            donors=(*resolved, *unresolved),
            sources=tuple(sorted(self.sources, key=lambda source: _SOURCE_ORDER[source])),
        )

    def _absorb_checksum(self, observation: FileObservation) -> None:
        if observation.md5sum is None:
            return
        if self.md5sum is None:
            self.md5sum = observation.md5sum
            return
        if self.md5sum.lower() != observation.md5sum.lower():
            log.warning(
                "Conflicting checksums for analysis %s file %s: %s (kept) vs %s from '%s'",
                self.analysis_id,
                self.file_name,
                self.md5sum,
                observation.md5sum,
                observation.repo_code,
            )

    def _absorb_data_type(self, observation: FileObservation) -> None:
        resolved = classify(observation.analyte_code)
        if resolved is None:
            return
        if self.data_type is not None and self.data_type is not resolved:
            log.warning(
                "Inconsistent data types for analysis %s file %s: %s replaced by %s",
                self.analysis_id,
                self.file_name,
                self.data_type,
                resolved,
            )
        self.data_type = resolved

    def _absorb_copy(self, copy: FileCopy) -> None:
        existing = self.copies.get(copy.repo_code)
        if existing is None or existing == copy:
            self.copies[copy.repo_code] = copy
            return

        winner = max(existing, copy, key=_copy_rank)
        if existing.url != copy.url:
            log.warning(
                "Repository '%s' reports two copies of analysis %s file %s; keeping %s over %s",
                copy.repo_code,
                self.analysis_id,
                self.file_name,
                winner.url,
                (copy if winner is existing else existing).url,
            )
        self.copies[copy.repo_code] = winner

    def _absorb_donor(self, donor: Donor) -> None:
        if donor.donor_id:
            self.resolved_donors.setdefault(donor.donor_id, donor)
        else:
            self.unresolved_donors.append(donor)


class RepositoryFileCombiner:
    """Merge observations from every source into canonical repository files."""

    def combine_files(
        self, file_sets: Iterable[Iterable[FileObservation]]
    ) -> list[RepositoryFile]:
        groups: dict[GroupKey, list[FileObservation]] = {}
        observed = 0
        for file_set in file_sets:
            for observation in file_set:
                groups.setdefault(group_key(observation), []).append(observation)
                observed += 1

        combined: list[RepositoryFile] = []
        for (analysis_id, file_name), members in groups.items():
            merged = _MergedFile(analysis_id=analysis_id, file_name=file_name)
            for observation in sorted(members, key=_observation_order):
                merged.absorb(observation)
            combined.append(merged.build())

        combined.sort(key=lambda file: file.id)
        unresolved = sum(1 for file in combined if file.unresolved)
        log.info(
            "Combined %s observations into %s files (%s without a resolved donor)",
            observed,
            len(combined),
            unresolved,
        )
        return combined
