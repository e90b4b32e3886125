"""Async client for the coaching platform REST API.

Thin wrapper over httpx.AsyncClient:
- Base URL and timeouts from settings
- Bearer token read from the local store on every request
- Rate-limited requests (HTTP 429) retried with exponential backoff
- HTTP 401 clears the stored token
- Every transport or status failure surfaces as NetworkError
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

import httpx
from loguru import logger

from coachlink.config.settings import settings
from coachlink.core.errors import NetworkError, StorageAccessError
from coachlink.storage.base import TOKEN_KEY, KeyValueStore

RATE_LIMITED_STATUS = 429
UNAUTHORIZED_STATUS = 401


class ApiClient:
    """Remote API client bound to one local store."""

    def __init__(
        self,
        store: KeyValueStore,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        retry_delay: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._store = store
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.max_retries = settings.api_max_retries if max_retries is None else max_retries
        self.retry_delay = settings.api_retry_delay_seconds if retry_delay is None else retry_delay
        self._sleep = sleep
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout if timeout is not None else settings.api_timeout_seconds,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    async def __aenter__(self) -> ApiClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def _auth_headers(self) -> dict[str, str]:
        try:
            token = self._store.get_item(TOKEN_KEY)
        except StorageAccessError as e:
            logger.bind(error=str(e)).warning("Could not read auth token from local store")
            return {}
        if token:
            return {"Authorization": f"Bearer {token}"}
        logger.debug("No auth token available for request")
        return {}

    def _clear_token(self) -> None:
        try:
            self._store.remove_item(TOKEN_KEY)
        except StorageAccessError as e:
            logger.bind(error=str(e)).warning("Could not clear auth token from local store")

    def _remember_token(self, payload: Any) -> None:
        if isinstance(payload, dict) and isinstance(payload.get("token"), str):
            try:
                self._store.set_item(TOKEN_KEY, payload["token"])
                logger.debug("Token stored from response")
            except StorageAccessError as e:
                logger.bind(error=str(e)).warning("Could not store auth token from response")

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        """Send a request and return the decoded JSON body.

        Returns:
            Decoded JSON body, or None for empty responses

        Raises:
            NetworkError: On transport failure, non-2xx status or undecodable body
        """
        delay = self.retry_delay
        attempt = 0
        while True:
            try:
                response = await self._client.request(
                    method,
                    path,
                    params=params,
                    json=json,
                    headers=self._auth_headers(),
                )
            except httpx.RequestError as e:
                logger.bind(method=method, path=path, error=str(e)).warning("API request failed")
                raise NetworkError(f"{method} {path} failed: {e}", path=path) from e

            if response.status_code == RATE_LIMITED_STATUS and attempt < self.max_retries:
                attempt += 1
                logger.bind(method=method, path=path, attempt=attempt, delay=delay).info(
                    "Request rate limited, retrying"
                )
                await self._sleep(delay)
                delay *= 2
                continue
            break

        if response.status_code == UNAUTHORIZED_STATUS:
            self._clear_token()

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.bind(method=method, path=path, status_code=response.status_code).warning("API returned error status")
            raise NetworkError(
                f"{method} {path} returned HTTP {response.status_code}",
                status_code=response.status_code,
                path=path,
            ) from e

        if not response.content:
            return None

        try:
            payload = response.json()
        except ValueError as e:
            raise NetworkError(f"{method} {path} returned a non-JSON body", status_code=response.status_code, path=path) from e

        self._remember_token(payload)
        return payload

    async def get(self, path: str, *, params: dict[str, Any] | None = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, *, json: Any = None) -> Any:
        return await self.request("POST", path, json=json)

    async def patch(self, path: str, *, json: Any = None) -> Any:
        return await self.request("PATCH", path, json=json)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)
