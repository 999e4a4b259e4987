# ---
# File: incident_deck/client/api.py
# Purpose: Thin async HTTP client bound to the incident API base URL.
#          Returns parsed JSON and maps failures onto the client error taxonomy.
# ---

import logging
from typing import Any, Optional

import httpx

from incident_deck import config
from incident_deck.client.errors import (
    ApiResponseError,
    ApiTransportError,
    IncidentNotFoundError,
)

logger = logging.getLogger(__name__)


def _clean_params(params: Optional[dict]) -> Optional[dict]:
    # Absent and empty values mean "no filter on this dimension"
    if not params:
        return None
    return {key: value for key, value in params.items() if value is not None and value != ""}


def _error_message(response: httpx.Response, payload: Optional[dict]) -> str:
    if isinstance(payload, dict):
        for key in ("error", "detail", "message"):
            value = payload.get(key)
            if isinstance(value, str) and value:
                return value
    return f"HTTP {response.status_code} {response.reason_phrase}".strip()


class ApiClient:
    """
    Incident API HTTP client

    Wraps a single httpx.AsyncClient configured with the API base URL and timeout.
    Every call returns the decoded JSON body, or None for empty responses.

    Error Mapping:
        - httpx transport failures -> ApiTransportError
        - 404 -> IncidentNotFoundError
        - any other non-2xx -> ApiResponseError carrying the payload's `error` message
    """

    def __init__(
        self,
        base_url: str = config.API_BASE_URL,
        timeout_seconds: float = config.API_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout_seconds,
            transport=transport,
        )

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        method: str,
        path: str,
        params: Optional[dict] = None,
        json: Optional[dict] = None,
    ) -> Any:
        try:
            response = await self._client.request(
                method,
                path,
                params=_clean_params(params),
                json=json,
            )
        except httpx.HTTPError as exc:
            logger.warning("[API] %s %s failed | Error: %s", method, path, str(exc)[:100])
            raise ApiTransportError(f"Could not reach incident API: {exc}") from exc

        payload = None
        if response.content:
            try:
                payload = response.json()
            except ValueError:
                payload = None

        if response.is_error:
            message = _error_message(response, payload)
            logger.warning("[API] %s %s -> %s | %s", method, path, response.status_code, message)
            error_cls = IncidentNotFoundError if response.status_code == 404 else ApiResponseError
            raise error_cls(message, response.status_code, payload if isinstance(payload, dict) else None)

        return payload

    async def get(self, path: str, params: Optional[dict] = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: Optional[dict] = None) -> Any:
        return await self.request("POST", path, json=json)

    async def patch(self, path: str, json: Optional[dict] = None) -> Any:
        return await self.request("PATCH", path, json=json)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)
