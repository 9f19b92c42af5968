"""HTTP client for the CGHub metadata service."""

from __future__ import annotations

import asyncio
import time
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from reposync.adapters.http_resilience import ResilientClient
from reposync.config.cghub import CGHUB_ANALYSIS_DETAIL_PATH

from .schema import AnalysisDetailResponse

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from reposync.config.cghub import CGHubConfig
    from reposync.config.http_resilience import ResilienceConfig

log = getLogger(__name__)


class CGHubAPIError(RuntimeError):
    """Raised when CGHub returns an unexpected response."""


class CGHubClient:
    """Reads live TCGA analysis details, one request per disease code."""

    def __init__(
        self,
        *,
        config: CGHubConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient

    def read_details(self) -> list[Mapping[str, object]]:
        return asyncio.run(self._read_details_async())

    async def _read_details_async(self) -> list[Mapping[str, object]]:
        details: list[Mapping[str, object]] = []
        async with self._client_factory(self._resilience) as client:
            for disease_code in self._config.disease_codes:
                details.extend(await self._read_disease_code(client, disease_code))
        return details

    async def _read_disease_code(
        self, client: ResilientClient, disease_code: str
    ) -> list[Mapping[str, object]]:
        started = time.perf_counter()
        log.info("Reading analysis details for disease code '%s'...", disease_code)
        params = {
            "study": self._config.study,
            "disease_abbr": disease_code,
            "state": "live",
        }
        response = await client.get(CGHUB_ANALYSIS_DETAIL_PATH, params=params)
        response.raise_for_status()

        payload = response.json()
        if not isinstance(payload, dict):
            raise CGHubAPIError(f"Unexpected CGHub response payload for '{disease_code}'")
        try:
            envelope = AnalysisDetailResponse.model_validate(payload)
        except ValidationError as exc:
            raise CGHubAPIError(f"Malformed CGHub response for '{disease_code}'") from exc

        results = envelope.result_set.results
        log.info(
            "Finished reading %s analysis details for disease code '%s' in %.1fs",
            len(results),
            disease_code,
            time.perf_counter() - started,
        )
        return results
