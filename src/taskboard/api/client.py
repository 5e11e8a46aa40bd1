"""Async HTTP client for the taskboard backend.

Connection failures and 5xx answers are retried with an exponential backoff
of 1, 2, 4... seconds; 4xx answers fail at once.
"""

from __future__ import annotations

import asyncio
from typing import Any

import httpx

from taskboard.config import APIConfig, get_config_manager
from taskboard.utils.logger import get_logger


def _is_transient(error: httpx.HTTPError) -> bool:
    if isinstance(error, httpx.HTTPStatusError):
        return error.response.status_code >= 500
    return isinstance(error, httpx.RequestError)


class APIClient:
    """Thin wrapper over ``httpx.AsyncClient`` bound to one backend.

    Args:
        profile: Config profile supplying endpoint, timeout and retry count
        api_config: Explicit settings, bypassing the profile
        transport: Custom httpx transport, e.g. ``httpx.MockTransport``
    """

    def __init__(
        self,
        profile: str = "default",
        *,
        api_config: APIConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = api_config or get_config_manager(profile).config.api
        self.base_url = settings.endpoint.rstrip("/")
        self.timeout = settings.timeout
        self.retry = settings.retry
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _get_headers(self) -> dict[str, str]:
        return {"Content-Type": "application/json", "Accept": "application/json"}

    @property
    def http(self) -> httpx.AsyncClient:
        """Underlying httpx client, opened on first use."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=self._get_headers(),
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    async def __aenter__(self) -> APIClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any | None = None,
        params: dict[str, Any] | None = None,
        retry: int | None = None,
    ) -> httpx.Response:
        """Send a request, retrying transient failures.

        Raises:
            httpx.HTTPStatusError: On a 4xx answer, or a 5xx after the last attempt
            httpx.RequestError: If the backend stays unreachable
        """
        attempts = (self.retry if retry is None else retry) + 1
        url = path if path.startswith("/") else f"/{path}"

        for attempt in range(1, attempts + 1):
            try:
                response = await self.http.request(method, url, json=json, params=params)
                response.raise_for_status()
                return response
            except httpx.HTTPError as e:
                if attempt == attempts or not _is_transient(e):
                    raise
                delay = 2 ** (attempt - 1)
                get_logger(__name__).warning(
                    "%s %s failed (attempt %d/%d), retrying in %ds: %s",
                    method,
                    url,
                    attempt,
                    attempts,
                    delay,
                    e,
                )
                await asyncio.sleep(delay)
        raise ValueError(f"retry must be >= 0, got {attempts - 1}")

    async def get(self, path: str, *, params: dict[str, Any] | None = None) -> httpx.Response:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, *, json: Any | None = None) -> httpx.Response:
        return await self.request("POST", path, json=json)

    async def put(self, path: str, *, json: Any | None = None) -> httpx.Response:
        return await self.request("PUT", path, json=json)

    async def patch(self, path: str, *, json: Any | None = None) -> httpx.Response:
        return await self.request("PATCH", path, json=json)

    async def delete(self, path: str) -> httpx.Response:
        return await self.request("DELETE", path)


def get_client(profile: str = "default") -> APIClient:
    """API client configured from *profile*."""
    return APIClient(profile)
