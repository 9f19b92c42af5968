"""HTTP client for object-storage metadata listings."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from reposync.adapters.http_resilience import ResilientClient

from .schema import EntityPage

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from reposync.config.http_resilience import ResilienceConfig
    from reposync.config.object_store import ObjectStoreConfig

log = getLogger(__name__)

ENTITIES_PATH = "/entities"


class StorageListingError(RuntimeError):
    """Raised when an object-storage listing returns an unexpected response."""


class StorageListingClient:
    """Pages through every entity registered with one object-storage server."""

    def __init__(
        self,
        *,
        config: ObjectStoreConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient

    def read_entities(self) -> list[Mapping[str, object]]:
        return asyncio.run(self._read_entities_async())

    async def _read_entities_async(self) -> list[Mapping[str, object]]:
        entities: list[Mapping[str, object]] = []
        page = 0
        async with self._client_factory(self._resilience) as client:
            while True:
                listing = await self._read_page(client, page)
                entities.extend(listing.content)
                log.debug(
                    "Read page %s of '%s' entities (%s so far)",
                    page,
                    self._config.source,
                    len(entities),
                )
                if listing.is_last or not listing.content:
                    break
                page += 1
        log.info("Read %s '%s' entities", len(entities), self._config.source)
        return entities

    async def _read_page(self, client: ResilientClient, page: int) -> EntityPage:
        params = {"page": str(page), "size": str(self._config.page_size)}
        response = await client.get(ENTITIES_PATH, params=params)
        response.raise_for_status()

        payload = response.json()
        if not isinstance(payload, dict):
            raise StorageListingError(
                f"Unexpected '{self._config.source}' listing payload on page {page}"
            )
        try:
            return EntityPage.model_validate(payload)
        except ValidationError as exc:
            raise StorageListingError(
                f"Malformed '{self._config.source}' listing page {page}"
            ) from exc
