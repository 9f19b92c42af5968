"""Donor identifier lookups against the identity service."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING, TypeAlias

import httpx

from reposync.adapters.http_resilience import ResilientClient

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from reposync.config.http_resilience import ResilienceConfig
    from reposync.config.identifier import IdentifierConfig
    from reposync.domain.model import Donor

log = getLogger(__name__)

DONOR_ID_PATH = "/donor/id"

LookupKey: TypeAlias = tuple[str, str]


class IdentifierServiceError(RuntimeError):
    """Raised when the identity service answers with an unexpected status."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class IdentifierClient:
    """Resolve submitter donor ids to stable donor ids without minting new ones.

    Use an instance as the ``DonorIdResolver`` of the source importers: every call
    looks up the not yet known keys of a whole batch over one HTTP client. Lookups
    are memoised for the lifetime of the instance, including misses.
    """

    def __init__(
        self,
        *,
        config: IdentifierConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient
        self._cache: dict[LookupKey, str | None] = {}

    def __call__(self, donors: Sequence[Donor]) -> list[Donor]:
        return self.resolve_donors(donors)

    def resolve_donor(self, donor: Donor) -> Donor:
        return self.resolve_donors([donor])[0]

    def resolve_donors(self, donors: Sequence[Donor]) -> list[Donor]:
        missing = list(
            dict.fromkeys(
                key
                for key in (_lookup_key(donor) for donor in donors)
                if key is not None and key not in self._cache
            )
        )
        if missing:
            log.info("Looking up %s donor ids...", len(missing))
            self._cache.update(asyncio.run(self._lookup_all_async(missing)))
        return [self._resolved(donor) for donor in donors]

    def _resolved(self, donor: Donor) -> Donor:
        key = _lookup_key(donor)
        donor_id = self._cache.get(key) if key is not None else None
        if donor_id is None:
            return donor
        return donor.with_donor_id(donor_id)

    async def _lookup_all_async(self, keys: Sequence[LookupKey]) -> dict[LookupKey, str | None]:
        found: dict[LookupKey, str | None] = {}
        async with self._client_factory(self._resilience) as client:
            for key in keys:
                found[key] = await self._lookup(client, *key)
        return found

    async def _lookup(
        self, client: ResilientClient, submitted_donor_id: str, project_code: str
    ) -> str | None:
        params = {
            "submittedDonorId": submitted_donor_id,
            "submittedProjectId": project_code,
            "create": "false",
        }
        response = await client.get(DONOR_ID_PATH, params=params)

        if response.status_code == httpx.codes.NOT_FOUND:
            log.debug("No donor id for '%s' in '%s'", submitted_donor_id, project_code)
            return None
        if response.status_code != httpx.codes.OK:
            raise IdentifierServiceError(
                f"Unexpected identity service response {response.status_code} "
                f"for donor '{submitted_donor_id}' in '{project_code}'",
                status_code=response.status_code,
            )
        return response.text.strip() or None


def _lookup_key(donor: Donor) -> LookupKey | None:
    if donor.has_donor_id or not donor.submitted_donor_id or not donor.project_code:
        return None
    return (donor.submitted_donor_id, donor.project_code)
