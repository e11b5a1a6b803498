"""HTTP client for the Tell Tale record endpoints.

Every collection (`stories`, `characters`) exposes the same routes:

    GET    {base}/{collection}          → list
    POST   {base}/{collection}          → create (record carries its id)
    GET    {base}/{collection}/{id}     → single record
    PUT    {base}/{collection}/{id}     → shallow field merge
    DELETE {base}/{collection}/{id}     → {"success": true}

All failures surface as ApiError; a 404 is the NotFoundError subclass so
callers can tell "absent" from "unreachable". Nothing is retried.

Tests inject an httpx transport (ASGITransport over the FastAPI app, or
MockTransport) instead of talking to a real server.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class ApiClient:
    """Async JSON client. A fresh httpx.AsyncClient is opened per call.

    Args:
        base_url:  API root, e.g. "http://localhost:13013/api".
        timeout:   HTTP timeout in seconds.
        transport: Optional httpx transport (used by tests).
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    @property
    def base_url(self) -> str:
        return self._base_url

    async def list(self, collection: str) -> list[dict[str, Any]]:
        data = await self._request("GET", f"/{collection}")
        if not isinstance(data, list):
            raise ApiError(f"Expected a list from /{collection}, got {type(data).__name__}")
        return data

    async def get(self, collection: str, record_id: str) -> dict[str, Any]:
        return await self._request("GET", f"/{collection}/{record_id}")

    async def create(self, collection: str, record: dict[str, Any]) -> dict[str, Any]:
        return await self._request("POST", f"/{collection}", record)

    async def update(self, collection: str, record_id: str, fields: dict[str, Any]) -> dict[str, Any]:
        return await self._request("PUT", f"/{collection}/{record_id}", fields)

    async def delete(self, collection: str, record_id: str) -> None:
        await self._request("DELETE", f"/{collection}/{record_id}")

    async def _request(self, method: str, path: str, body: Any = None) -> Any:
        url = f"{self._base_url}{path}"
        logger.debug("api call %s %s", method, url)
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                resp = await client.request(method, url, json=body)
        except httpx.TimeoutException as e:
            raise ApiError(f"API at {self._base_url} timed out after {self._timeout}s") from e
        except httpx.HTTPError as e:
            raise ApiError(f"Cannot connect to API at {self._base_url}") from e

        if resp.status_code == 404:
            raise NotFoundError(f"{method} {path} returned 404")
        try:
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ApiError(f"{method} {path} returned HTTP {resp.status_code}") from e
        try:
            return resp.json()
        except ValueError as e:
            raise ApiError(f"{method} {path} returned invalid JSON") from e


class ApiError(RuntimeError):
    """Raised when the API cannot be reached or answers with an error."""


class NotFoundError(ApiError):
    """Raised when the API answers 404 for a record or collection."""
