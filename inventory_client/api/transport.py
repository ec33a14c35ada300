"""HTTP transport for the inventory backend.

One coroutine, `Transport.request`, issues every call the client makes.
It attaches the bearer token it is handed, decodes JSON bodies and turns
every failure into the client's error taxonomy:

- connection problems  -> NetworkError
- 401                  -> AuthError
- any other non-2xx    -> HttpError(status, message)
"""

import logging
from typing import Any, Mapping

import httpx

from .errors import AuthError, HttpError, NetworkError

logger = logging.getLogger(__name__)

_LEGACY_API_PREFIX = "/(api)/"


class Transport:
    """Thin async wrapper around a pooled httpx.AsyncClient."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._base_url = (base_url or "").rstrip("/")
        self._timeout = timeout
        self._http_client = http_client
        self._owns_client = http_client is None

    @property
    def base_url(self) -> str:
        return self._base_url

    def _get_client(self) -> httpx.AsyncClient:
        """Return the injected client or lazily create a pooled one."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self._timeout)
        return self._http_client

    def build_url(self, path: str) -> str:
        if path.startswith("http://") or path.startswith("https://"):
            return path
        path = path.replace(_LEGACY_API_PREFIX, "/api/")
        if not path.startswith("/"):
            path = "/" + path
        return f"{self._base_url}{path}"

    @staticmethod
    def _headers(token: str | None, extra: Mapping[str, str] | None) -> dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if extra:
            headers.update(extra)
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def request(
        self,
        path: str,
        *,
        method: str = "GET",
        params: Mapping[str, Any] | None = None,
        json: Any = None,
        headers: Mapping[str, str] | None = None,
        token: str | None = None,
    ) -> Any:
        """Issue one request and return the decoded body (JSON, text, or None)."""
        url = self.build_url(path)
        method = method.upper()
        query = {k: v for k, v in (params or {}).items() if v is not None}
        logger.debug("%s %s params=%s", method, url, query)

        client = self._get_client()
        try:
            response = await client.request(
                method,
                url,
                params=query or None,
                json=json,
                headers=self._headers(token, headers),
            )
        except httpx.TimeoutException as exc:
            logger.warning("%s %s timed out: %s", method, url, exc)
            raise NetworkError(f"Request timed out: {method} {url}") from exc
        except httpx.RequestError as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise NetworkError(f"Could not reach the server: {exc}") from exc

        if response.is_success:
            return self._decode(response)

        message = self._error_message(response)
        logger.warning("%s %s -> %s %s", method, url, response.status_code, message)
        if response.status_code == 401:
            raise AuthError(message)
        raise HttpError(response.status_code, message)

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if response.status_code == 204 or not response.content:
            return None
        content_type = response.headers.get("content-type", "")
        if "application/json" in content_type:
            try:
                return response.json()
            except ValueError as exc:
                raise NetworkError("Server sent malformed JSON") from exc
        return response.text

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        fallback = f"HTTP {response.status_code}: {response.reason_phrase}"
        try:
            body = response.json()
        except ValueError:
            return fallback
        if isinstance(body, dict):
            for key in ("error", "message"):
                value = body.get(key)
                if isinstance(value, str) and value.strip():
                    return value
        return fallback

    async def aclose(self) -> None:
        if self._http_client is not None and self._owns_client:
            await self._http_client.aclose()
            self._http_client = None
