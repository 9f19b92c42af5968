from __future__ import annotations

import asyncio

import httpx

from reposync.adapters.http_resilience import ResilientClient
from reposync.config.http_resilience import NO_RETRY, ResilienceConfig, RetryPolicy


def _counting_transport(status_code: int) -> tuple[httpx.MockTransport, list[httpx.Request]]:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(status_code)

    return httpx.MockTransport(handler), seen


def _fetch(client: ResilientClient, path: str) -> httpx.Response:
    async def run() -> httpx.Response:
        async with client:
            return await client.get(path)

    return asyncio.run(run())


def test_client_uses_configured_timeouts() -> None:
    client = ResilientClient(
        ResilienceConfig(name="cghub", base_url="https://cghub.example.org", retry=NO_RETRY)
    )

    timeout = client._client.timeout  # noqa: SLF001
    assert timeout.connect == 10.0
    assert timeout.read == 30.0
    assert client._client.base_url == httpx.URL("https://cghub.example.org")  # noqa: SLF001


def test_no_retry_policy_fetches_unavailable_upstream_once() -> None:
    transport, seen = _counting_transport(503)
    client = ResilientClient(
        ResilienceConfig(name="cghub", base_url="https://cghub.example.org", retry=NO_RETRY),
        transport=transport,
    )

    response = _fetch(client, "/analysisDetail")

    assert response.status_code == 503
    assert len(seen) == 1


def test_retry_policy_retries_transient_status() -> None:
    transport, seen = _counting_transport(503)
    policy = RetryPolicy(total=2, backoff_factor=0.0, backoff_jitter=0.0)
    client = ResilientClient(
        ResilienceConfig(name="index", base_url="https://index.example.org", retry=policy),
        transport=transport,
    )

    response = _fetch(client, "/_aliases")

    assert response.status_code == 503
    assert len(seen) == 3
