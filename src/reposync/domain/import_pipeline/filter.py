"""Release eligibility of canonical repository files."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from reposync.domain.model import AWS_VIRGINIA, COLLABORATORY

if TYPE_CHECKING:
    from collections.abc import Collection, Iterable

    from reposync.domain.model import RepositoryFile


log = getLogger(__name__)

# Mirrors not yet cleared for release on their own.
EXCLUSIVE_REPO_CODES: tuple[str, ...] = (AWS_VIRGINIA, COLLABORATORY)


def _only(repo_codes: Collection[str], repo_code: str) -> bool:
    return len(repo_codes) == 1 and repo_code in repo_codes


@dataclass(slots=True)
class RepositoryFileFilter:
    require_resolved_donors: bool = False
    exclusive_repo_codes: tuple[str, ...] = EXCLUSIVE_REPO_CODES

    def filter_files(self, files: Iterable[RepositoryFile]) -> list[RepositoryFile]:
        log.info("Filtering files...")
        candidates = list(files)
        included = [file for file in candidates if self.is_included(file)]
        log.info("Filtered %s files", len(candidates) - len(included))
        return included

    def is_included(self, file: RepositoryFile) -> bool:
        repo_codes = file.repo_codes
        if any(_only(repo_codes, repo_code) for repo_code in self.exclusive_repo_codes):
            return False
        return not (self.require_resolved_donors and file.unresolved)
