"""Thin asynchronous client for the order backend's JSON API."""

from __future__ import annotations

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class ApiError(RuntimeError):
    """Raised when the backend cannot be reached or answers with an error.

    ``status_code`` is ``None`` for transport failures. ``field_errors``
    holds the validation error mapping of a 422 response.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        field_errors: dict[str, list[str]] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.field_errors = dict(field_errors or {})


class ApiClient:

    def __init__(
        self,
        base_url: str,
        *,
        token: str | None = None,
        timeout: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._headers = {"Accept": "application/json"}
        if token:
            self._headers["Authorization"] = f"Bearer {token}"
        self._client = http_client or httpx.AsyncClient(timeout=timeout)
        self._owns_client = http_client is None

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> ApiClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # requests
    # ------------------------------------------------------------------
    async def get(self, path: str) -> Any:
        return await self.request("GET", path)

    async def post(self, path: str, payload: dict[str, Any]) -> Any:
        return await self.request("POST", path, payload)

    async def put(self, path: str, payload: dict[str, Any]) -> Any:
        return await self.request("PUT", path, payload)

    async def request(
        self, method: str, path: str, payload: dict[str, Any] | None = None
    ) -> Any:
        url = f"{self._base_url}/{path.lstrip('/')}"
        try:
            response = await self._client.request(
                method, url, json=payload, headers=self._headers
            )
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise ApiError(f"Could not reach the server: {exc}") from exc

        if response.is_error:
            raise self._error_from(response)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise ApiError(
                "The server returned an invalid response", response.status_code
            ) from exc

    @staticmethod
    def _error_from(response: httpx.Response) -> ApiError:
        body: Any = None
        try:
            body = response.json()
        except ValueError:
            pass

        message = ""
        field_errors: dict[str, list[str]] = {}
        if isinstance(body, dict):
            message = str(body.get("message") or "")
            errors = body.get("errors")
            if isinstance(errors, dict):
                field_errors = {
                    str(key): [str(m) for m in (value if isinstance(value, list) else [value])]
                    for key, value in errors.items()
                }
        if not message:
            message = f"Request failed with status {response.status_code}"
        logger.info(
            "%s %s -> %d: %s",
            response.request.method,
            response.request.url,
            response.status_code,
            message,
        )
        return ApiError(message, response.status_code, field_errors)


def unwrap(payload: Any) -> Any:
    """Strip the ``{"data": ...}`` envelope API resources are wrapped in."""
    if isinstance(payload, dict) and "data" in payload:
        return payload["data"]
    return payload
