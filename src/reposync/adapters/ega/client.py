"""HTTP client for the EGA access API."""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from reposync.adapters.http_resilience import ResilientClient

from .errors import EGAAPIError, EGASessionExpiredError
from .schema import EGAResponse

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from reposync.config.ega import EGAConfig
    from reposync.config.http_resilience import ResilienceConfig

log = getLogger(__name__)

LOGIN_PATH = "/users/login"


@dataclass(frozen=True, slots=True)
class DatasetFiles:
    dataset_id: str
    files: list[Mapping[str, object]] = field(default_factory=list["Mapping[str, object]"])


class EGAClient:
    """Session-based EGA client.

    Every API call carries the session token obtained by :meth:`login`. When a
    call reports the session as expired the client logs in again and retries
    that call exactly once.
    """

    def __init__(
        self,
        *,
        config: EGAConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient
        self._session_id: str | None = None

    @property
    def session_id(self) -> str | None:
        return self._session_id

    def read_dataset_files(self) -> list[DatasetFiles]:
        return asyncio.run(self._read_dataset_files_async())

    async def _read_dataset_files_async(self) -> list[DatasetFiles]:
        async with self._client_factory(self._resilience) as client:
            await self.login(client)
            dataset_ids = await self.get_dataset_ids(client)
            log.info("Found %s EGA datasets", len(dataset_ids))

            datasets: list[DatasetFiles] = []
            for dataset_id in dataset_ids:
                files = await self.get_files(client, dataset_id)
                log.info("Read %s files of EGA dataset '%s'", len(files), dataset_id)
                datasets.append(DatasetFiles(dataset_id=dataset_id, files=files))
            return datasets

    async def login(self, client: ResilientClient) -> str:
        credentials = json.dumps(
            {"username": self._config.user_name, "password": self._config.password}
        )
        response = await client.post(
            LOGIN_PATH,
            data={"loginrequest": credentials},
            headers={"Accept": "application/json"},
        )
        response.raise_for_status()

        envelope = self._parse(response.json())
        if not envelope.header.ok or envelope.session_id is None:
            raise EGAAPIError(
                f"Could not log in to EGA as {self._config.user_name!r}",
                code=envelope.header.code,
            )
        self._session_id = envelope.session_id
        return envelope.session_id

    async def get_dataset_ids(self, client: ResilientClient) -> list[str]:
        return [str(value) for value in await self._get(client, "/datasets")]

    async def get_files(
        self, client: ResilientClient, dataset_id: str
    ) -> list[Mapping[str, object]]:
        results = await self._get(client, f"/datasets/{dataset_id}/files")
        files: list[Mapping[str, object]] = []
        for value in results:
            if isinstance(value, dict):
                files.append(value)
            else:
                log.warning("Ignoring unexpected EGA file entry in '%s': %r", dataset_id, value)
        return files

    async def _get(self, client: ResilientClient, path: str) -> list[object]:
        if self._session_id is None:
            raise EGAAPIError("You must login first before calling API methods.")

        envelope = await self._request(client, path)
        if envelope.header.session_expired:
            log.warning("EGA session expired while reading '%s', reconnecting...", path)
            await self.login(client)
            envelope = await self._request(client, path)
            if envelope.header.session_expired:
                raise EGASessionExpiredError(
                    f"EGA session expired again after re-login reading '{path}'",
                    code=envelope.header.code,
                )

        if not envelope.header.ok:
            message = envelope.header.user_message or envelope.header.developer_message
            raise EGAAPIError(
                f"Expected OK response for '{path}', got {envelope.header.code}: {message}",
                code=envelope.header.code,
            )
        return envelope.response.result

    async def _request(self, client: ResilientClient, path: str) -> EGAResponse:
        response = await client.get(path, params={"session": self._session_id or ""})
        response.raise_for_status()
        return self._parse(response.json())

    @staticmethod
    def _parse(payload: object) -> EGAResponse:
        if not isinstance(payload, dict):
            raise EGAAPIError("Unexpected EGA response payload")
        try:
            return EGAResponse.model_validate(payload)
        except ValidationError as exc:
            raise EGAAPIError("Malformed EGA response payload") from exc
