"""Testing fakes – FakeFlagFetcher."""
from __future__ import annotations

import asyncio
from collections.abc import Iterable, Mapping

from flagsync.application.feature_flags.feature_flag import FeatureFlag
from flagsync.application.feature_flags.fetcher import FlagFetcher
from flagsync.kernel.errors import UnknownFlagError


class FakeFlagFetcher(FlagFetcher):
    """In-memory :class:`FlagFetcher` that counts calls and can be gated.

    Use :meth:`set` / :meth:`remove` to shape what the "authority" knows,
    :meth:`queue_error` to fail the next call (or :attr:`error` to fail every
    call) and :meth:`hold` / :meth:`release` to keep a bulk fetch in flight.

    Usage::

        fetcher = FakeFlagFetcher({"new-ui": True, "beta": False})
        fetcher.hold()
        task = asyncio.ensure_future(service.refresh())
        await fetcher.started.wait()
        ...
        fetcher.release()
    """

    def __init__(self, flags: Mapping[str, bool] | Iterable[FeatureFlag] | None = None) -> None:
        self._flags: dict[str, FeatureFlag] = {}
        self._user_values: dict[tuple[str, str], bool] = {}
        self._queued: list[BaseException] = []
        self._gate: asyncio.Event | None = None
        self.error: BaseException | None = None
        self.started = asyncio.Event()
        self.fetch_all_calls = 0
        self.fetch_named_calls: list[list[str]] = []
        self.fetch_one_calls: list[str] = []
        self.fetch_for_user_calls: list[tuple[str, str]] = []
        self.replace(flags or {})

    # ------------------------------------------------------------------
    # FlagFetcher port
    # ------------------------------------------------------------------

    async def fetch_all(self) -> list[FeatureFlag]:
        self.fetch_all_calls += 1
        self.started.set()
        if self._gate is not None:
            await self._gate.wait()
        self._maybe_fail()
        return list(self._flags.values())

    async def fetch_named(self, names: Iterable[str]) -> dict[str, bool]:
        requested = list(names)
        self.fetch_named_calls.append(requested)
        self._maybe_fail()
        return {name: self._flags[name].enabled for name in requested if name in self._flags}

    async def fetch_one(self, name: str) -> bool:
        self.fetch_one_calls.append(name)
        self._maybe_fail()
        if name not in self._flags:
            raise UnknownFlagError(name)
        return self._flags[name].enabled

    async def fetch_for_user(self, name: str, user_id: str) -> bool:
        self.fetch_for_user_calls.append((name, user_id))
        self._maybe_fail()
        if (name, user_id) in self._user_values:
            return self._user_values[(name, user_id)]
        if name not in self._flags:
            raise UnknownFlagError(name)
        return self._flags[name].enabled

    # ------------------------------------------------------------------
    # Test-setup helpers
    # ------------------------------------------------------------------

    def replace(self, flags: Mapping[str, bool] | Iterable[FeatureFlag]) -> FakeFlagFetcher:
        """Swap the whole authority-side flag set."""
        if isinstance(flags, Mapping):
            records = [FeatureFlag(name=name, enabled=enabled) for name, enabled in flags.items()]
        else:
            records = list(flags)
        self._flags = {record.name: record for record in records}
        return self

    def set(self, name: str, enabled: bool) -> FakeFlagFetcher:
        self._flags[name] = FeatureFlag(name=name, enabled=enabled)
        return self

    def remove(self, name: str) -> FakeFlagFetcher:
        self._flags.pop(name, None)
        return self

    def set_for_user(self, name: str, user_id: str, enabled: bool) -> FakeFlagFetcher:
        """Override the per-user answer for *name*."""
        self._user_values[(name, user_id)] = enabled
        return self

    def queue_error(self, error: BaseException) -> FakeFlagFetcher:
        """Fail the next call (of any kind) with *error*."""
        self._queued.append(error)
        return self

    def hold(self) -> None:
        """Block ``fetch_all`` until :meth:`release` is called."""
        self._gate = asyncio.Event()
        self.started.clear()

    def release(self) -> None:
        if self._gate is not None:
            self._gate.set()
            self._gate = None

    def _maybe_fail(self) -> None:
        if self._queued:
            raise self._queued.pop(0)
        if self.error is not None:
            raise self.error


__all__ = ["FakeFlagFetcher"]
