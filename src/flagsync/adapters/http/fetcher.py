"""HTTP adapter – HttpFlagFetcher (FlagFetcher over the REST authority)."""
from __future__ import annotations

from collections.abc import Iterable
from typing import Any
from urllib.parse import quote

import httpx

from flagsync.adapters.http.client import HttpxHttpClient
from flagsync.application.feature_flags.feature_flag import FeatureFlag
from flagsync.application.feature_flags.fetcher import FlagFetcher
from flagsync.application.feature_flags.payload import (
    parse_check_map,
    parse_enabled,
    parse_flag_list,
)
from flagsync.kernel.errors import HttpStatusError, ProtocolError, UnknownFlagError
from flagsync.observability.logging import get_logger

logger = get_logger(__name__)


def _segment(value: str) -> str:
    return quote(str(value), safe="")


class HttpFlagFetcher(FlagFetcher):
    """Talks to the flag authority's REST endpoints.

    ``strict=True`` turns every malformed list/map entry into a
    :class:`ProtocolError`; by default such entries are dropped and logged.
    """

    def __init__(
        self,
        client: HttpxHttpClient,
        *,
        base_path: str = "/feature-flags",
        strict: bool = False,
    ) -> None:
        self._client = client
        self._base_path = base_path.rstrip("/")
        self._strict = strict

    async def fetch_all(self) -> list[FeatureFlag]:
        body = await self._get_json(self._base_path)
        flags = parse_flag_list(body, strict=self._strict)
        logger.debug("feature_flags.fetch.all", count=len(flags))
        return flags

    async def fetch_named(self, names: Iterable[str]) -> dict[str, bool]:
        requested = list(dict.fromkeys(names))
        response = await self._client.post(
            f"{self._base_path}/check", json={"names": requested}
        )
        return parse_check_map(self._decode(response), requested, strict=self._strict)

    async def fetch_one(self, name: str) -> bool:
        body = await self._get_json(f"{self._base_path}/{_segment(name)}", flag=name)
        return parse_enabled(body, name)

    async def fetch_for_user(self, name: str, user_id: str) -> bool:
        body = await self._get_json(
            f"{self._base_path}/{_segment(name)}/user/{_segment(user_id)}", flag=name
        )
        return parse_enabled(body, name)

    async def _get_json(self, path: str, *, flag: str | None = None) -> Any:
        try:
            response = await self._client.get(path)
        except HttpStatusError as exc:
            if flag is not None and exc.status_code == 404:
                raise UnknownFlagError(flag, cause=exc) from exc
            raise
        return self._decode(response)

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise ProtocolError(
                f"Response from {response.request.url} is not valid JSON",
                payload=response.text[:200],
                cause=exc,
            ) from exc


__all__ = ["HttpFlagFetcher"]
