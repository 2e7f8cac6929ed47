"""HttpStore: StoreBackend over a remote key-value HTTP service.

Endpoints (one record per key, namespaced):

- Read:   GET    {base_url}/kv/{namespace}/{key}  -> raw record body, 404 if absent
- Write:  PUT    {base_url}/kv/{namespace}/{key}  -> body is the record
- Delete: DELETE {base_url}/kv/{namespace}/{key}  -> 404 is treated as already gone
"""

from __future__ import annotations

import logging
from urllib.parse import quote

import httpx

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exception hierarchy
# ---------------------------------------------------------------------------


class StoreHttpError(Exception):
    """Base exception for remote store operations."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class StoreAuthError(StoreHttpError):
    """401/403: bad or missing API key."""


class StoreNotFoundError(StoreHttpError):
    """404: no record under that key."""


class StoreServerError(StoreHttpError):
    """5xx: server-side failure."""


class StoreConnectionError(StoreHttpError):
    """Network/DNS failure."""


class StoreTimeoutError(StoreHttpError):
    """Request timed out."""


_STATUS_MAP: dict[int, type[StoreHttpError]] = {
    401: StoreAuthError,
    403: StoreAuthError,
    404: StoreNotFoundError,
}


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class HttpStore:
    """Synchronous httpx client for a namespaced key-value service.

    Constructor accepts explicit params, no env-var loading. Uses Bearer
    auth when an API key is given.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        namespace: str = "ticketbooth",
        timeout: float = 10.0,
    ) -> None:
        headers = {"Authorization": f"Bearer {api_key}"} if api_key else {}
        self._namespace = namespace
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=timeout,
        )

    def _endpoint(self, key: str) -> str:
        return f"/kv/{quote(self._namespace, safe='')}/{quote(key, safe='')}"

    def _request(
        self, method: str, key: str, content: str | None = None,
    ) -> httpx.Response:
        """Send a request and map errors to the StoreHttpError hierarchy."""
        try:
            response = self._client.request(
                method, self._endpoint(key), content=content,
            )
        except httpx.TimeoutException as exc:
            raise StoreTimeoutError(str(exc)) from exc
        except httpx.TransportError as exc:
            raise StoreConnectionError(str(exc)) from exc

        if response.status_code >= 400:
            body = response.text
            exc_cls = _STATUS_MAP.get(response.status_code)
            if exc_cls is not None:
                raise exc_cls(body, status_code=response.status_code)
            if response.status_code >= 500:
                raise StoreServerError(body, status_code=response.status_code)
            raise StoreHttpError(body, status_code=response.status_code)

        return response

    # -- StoreBackend protocol -----------------------------------------------

    def read(self, key: str) -> str | None:
        try:
            response = self._request("GET", key)
        except StoreNotFoundError:
            return None
        return response.text or None

    def write(self, key: str, value: str) -> None:
        self._request("PUT", key, content=value)

    def delete(self, key: str) -> None:
        try:
            self._request("DELETE", key)
        except StoreNotFoundError:
            logger.debug("Delete of missing key %s ignored.", key)

    # -- lifecycle ------------------------------------------------------------

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    def __enter__(self) -> HttpStore:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
