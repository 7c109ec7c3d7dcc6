"""HTTP adapter – HttpxHttpClient."""
from __future__ import annotations

from collections.abc import Callable
from typing import Any

import httpx

from flagsync.kernel.errors import FetchTimeoutError, HttpStatusError, NetworkError

TokenProvider = Callable[[], "str | None"]


class HttpxHttpClient:
    """Thin async httpx wrapper with bearer auth and structured error mapping.

    *token_provider* is called on every request so rotated credentials are
    picked up without rebuilding the client.
    """

    def __init__(
        self,
        base_url: str = "",
        timeout: float = 10.0,
        token_provider: TokenProvider | None = None,
        **kwargs: Any,
    ) -> None:
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout, **kwargs)
        self._token_provider = token_provider

    async def __aenter__(self) -> "HttpxHttpClient":
        await self._client.__aenter__()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self._client.__aexit__(*args)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self._request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self._request("POST", url, **kwargs)

    def _auth_headers(self, headers: dict[str, str] | None) -> dict[str, str]:
        merged = dict(headers or {})
        if self._token_provider is not None and not any(
            key.lower() == "authorization" for key in merged
        ):
            token = self._token_provider()
            if token:
                merged["Authorization"] = f"Bearer {token}"
        return merged

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        kwargs["headers"] = self._auth_headers(kwargs.get("headers"))
        try:
            response = await self._client.request(method, url, **kwargs)
            response.raise_for_status()
            return response
        except httpx.TimeoutException as exc:
            raise FetchTimeoutError(
                f"HTTP request timed out: {method} {url}", url=url, cause=exc
            ) from exc
        except httpx.HTTPStatusError as exc:
            raise HttpStatusError(
                f"HTTP {exc.response.status_code} from {method} {url}",
                status_code=exc.response.status_code,
                url=url,
                cause=exc,
            ) from exc
        except httpx.HTTPError as exc:
            raise NetworkError(
                f"HTTP request failed: {method} {url}: {exc}", url=url, cause=exc
            ) from exc


HttpClient = HttpxHttpClient

__all__ = ["HttpClient", "HttpxHttpClient", "TokenProvider"]
