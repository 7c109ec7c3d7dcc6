"""Application feature flags – FlagService, the coordination core.

``FlagService`` owns a :class:`FlagCache`, talks to a :class:`FlagFetcher`
and keeps the cache fresh:

* ``start()`` performs the initial load and arms the auto-refresh job;
* ``refresh()`` is single-flight: while one bulk fetch is outstanding every
  further caller (manual, timer, monitor) awaits that same operation;
* a failed refresh records the error and keeps the last known-good flags;
* ``is_enabled`` / ``are_enabled`` are synchronous, fail-closed cache reads;
* ``check_flag_cached`` answers from an entry the authority confirmed within
  ``check_ttl`` seconds and falls back to the stale value when a fetch fails.

Usage::

    async with FlagService(fetcher, refresh_interval=300.0) as service:
        if service.is_enabled("new-ui"):
            ...
"""
from __future__ import annotations

import asyncio
import time
from collections.abc import Callable, Iterable
from datetime import datetime
from typing import Any, Awaitable, Protocol, TypeVar

from flagsync.application.feature_flags.cache import FlagCache
from flagsync.application.feature_flags.feature_flag import FeatureFlag
from flagsync.application.feature_flags.fetcher import FlagFetcher
from flagsync.application.feature_flags.snapshot import FlagSnapshot, ServiceState
from flagsync.application.feature_flags.subscription import (
    FlagSubscription,
    Listener,
    SnapshotPublisher,
)
from flagsync.application.scheduler import APSchedulerAdapter, Job, Scheduler
from flagsync.kernel.errors import FetchError, UnauthorizedError, UnknownFlagError
from flagsync.kernel.time import Clock, SystemClock
from flagsync.observability.logging import get_logger
from flagsync.observability.metrics import Metrics, NoopMetrics

T = TypeVar("T")

logger = get_logger(__name__)

DEFAULT_REFRESH_INTERVAL = 300.0
DEFAULT_CHECK_TTL = 300.0
AUTO_REFRESH_JOB_ID = "feature-flags.auto-refresh"


class RetryExecutor(Protocol):
    """Anything that can re-run an async callable, e.g. ``TenacityRetryPolicy``."""

    async def execute_async(self, func: Callable[[], Awaitable[T]]) -> T: ...


UserProvider = Callable[[], "str | None"]


class FlagService:
    """Cache-backed, single-flight feature flag service."""

    def __init__(
        self,
        fetcher: FlagFetcher,
        *,
        scheduler: Scheduler | None = None,
        clock: Clock | None = None,
        refresh_interval: float = DEFAULT_REFRESH_INTERVAL,
        check_ttl: float = DEFAULT_CHECK_TTL,
        auto_refresh: bool = True,
        metrics: Metrics | None = None,
        retry_policy: RetryExecutor | None = None,
        user_provider: UserProvider | None = None,
    ) -> None:
        if refresh_interval <= 0:
            raise ValueError(f"refresh_interval must be positive, got {refresh_interval!r}")
        if check_ttl <= 0:
            raise ValueError(f"check_ttl must be positive, got {check_ttl!r}")
        self._fetcher = fetcher
        self._owns_scheduler = scheduler is None
        self._scheduler: Scheduler = scheduler if scheduler is not None else APSchedulerAdapter()
        self._clock: Clock = clock or SystemClock()
        self._refresh_interval = refresh_interval
        self._check_ttl = check_ttl
        self._auto_refresh = auto_refresh
        self._retry_policy = retry_policy
        self._user_provider = user_provider

        self._cache = FlagCache()
        self._publisher = SnapshotPublisher()
        self._inflight: asyncio.Future[None] | None = None
        self._loading = False
        self._last_refresh_ok: bool | None = None
        self._started = False
        self._closed = False

        metrics = metrics or NoopMetrics()
        self._refresh_counter = metrics.counter(
            "feature_flags.refresh", "Bulk refresh attempts by outcome"
        )
        self._refresh_duration = metrics.histogram(
            "feature_flags.refresh.duration", "Bulk refresh latency", unit="ms"
        )
        self._cached_gauge = metrics.gauge("feature_flags.cached", "Flags held in cache")
        self._check_counter = metrics.counter(
            "feature_flags.checks", "Synchronous flag lookups by result"
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> FlagService:
        await self.start()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def start(self) -> None:
        """Load flags once, then arm auto-refresh (if enabled)."""
        if self._closed:
            raise RuntimeError("FlagService is closed")
        if self._started:
            return
        self._started = True
        await self._scheduler.start()
        if self._auto_refresh:
            self._arm()
        await self.refresh()

    async def close(self) -> None:
        """Disarm the timer and detach the cache; late fetch results are ignored."""
        if self._closed:
            return
        self._closed = True
        self._disarm()
        if self._owns_scheduler:
            await self._scheduler.stop()
        self._publisher.clear()
        logger.debug("feature_flags.service.closed")

    @property
    def closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------
    # Auto-refresh
    # ------------------------------------------------------------------

    @property
    def auto_refresh(self) -> bool:
        return self._auto_refresh

    @property
    def refresh_interval(self) -> float:
        return self._refresh_interval

    @property
    def check_ttl(self) -> float:
        return self._check_ttl

    def set_auto_refresh(self, enabled: bool) -> None:
        """Enable or disable the periodic refresh.

        Re-enabling re-arms the timer without forcing an immediate fetch.
        """
        self._auto_refresh = enabled
        if not self._started or self._closed:
            return
        if enabled:
            self._arm()
        else:
            self._disarm()

    def _arm(self) -> None:
        if self._scheduler.has_job(AUTO_REFRESH_JOB_ID):
            return
        self._scheduler.add_job(
            Job(
                id=AUTO_REFRESH_JOB_ID,
                name="Feature flag auto-refresh",
                handler=self._scheduled_refresh,
                interval_seconds=self._refresh_interval,
            )
        )

    def _disarm(self) -> None:
        self._scheduler.remove_job(AUTO_REFRESH_JOB_ID)

    async def _scheduled_refresh(self) -> None:
        if self._inflight is not None:
            logger.debug("feature_flags.refresh.tick_skipped", reason="refresh in flight")
            return
        await self.refresh()

    # ------------------------------------------------------------------
    # Refresh (single-flight)
    # ------------------------------------------------------------------

    @property
    def refreshing(self) -> bool:
        return self._inflight is not None

    async def refresh(self) -> None:
        """Reload the full flag set, joining any refresh already in flight.

        Never raises fetch failures: they are recorded as ``last_error`` and
        the previously cached flags stay in place.
        """
        if self._closed:
            return
        if self._inflight is None:
            self._inflight = asyncio.ensure_future(self._run_refresh())
        # shield: a cancelled caller must not cancel the fetch other callers share
        await asyncio.shield(self._inflight)

    async def _run_refresh(self) -> None:
        self._loading = True
        self._publish()
        t0 = time.monotonic()
        try:
            records = await self._fetch_all()
        except FetchError as exc:
            self._record_failure(exc)
            logger.warning(
                "feature_flags.refresh.failed",
                error=exc.message,
                code=exc.code,
                cached=len(self._cache),
            )
        except Exception as exc:  # noqa: BLE001 – any failure keeps the stale cache
            self._record_failure(exc)
            logger.exception("feature_flags.refresh.crashed", cached=len(self._cache))
        else:
            if not self._closed:
                self._cache.replace_all(records, self._clock.now())
                self._last_refresh_ok = True
                self._refresh_counter.add(1, {"outcome": "success"})
                self._cached_gauge.set(len(self._cache))
                logger.info("feature_flags.refresh.succeeded", count=len(records))
        finally:
            self._refresh_duration.record((time.monotonic() - t0) * 1000)
            self._inflight = None
            self._loading = False
            self._publish()

    async def _fetch_all(self) -> list[FeatureFlag]:
        if self._retry_policy is None:
            return await self._fetcher.fetch_all()
        return await self._retry_policy.execute_async(self._fetcher.fetch_all)

    def _record_failure(self, exc: BaseException) -> None:
        if self._closed:
            return
        self._cache.mark_error(exc, self._clock.now())
        self._last_refresh_ok = False
        self._refresh_counter.add(1, {"outcome": "failure"})

    # ------------------------------------------------------------------
    # Synchronous reads
    # ------------------------------------------------------------------

    def is_enabled(self, name: str) -> bool:
        """Cached value of *name*; ``False`` when unknown or never loaded."""
        flag = self._cache.get(name)
        result = flag.enabled if flag is not None else False
        self._check_counter.add(1, {"flag": str(name), "result": "on" if result else "off"})
        return result

    def are_enabled(self, names: Iterable[str]) -> dict[str, bool]:
        return {name: self.is_enabled(name) for name in names}

    def get(self, name: str) -> FeatureFlag:
        """Cached record for *name*; raises :class:`UnknownFlagError` if absent."""
        flag = self._cache.get(name)
        if flag is None:
            raise UnknownFlagError(name)
        return flag

    def flags(self) -> list[FeatureFlag]:
        return self._cache.get_all()

    @property
    def state(self) -> ServiceState:
        if self._last_refresh_ok is None:
            return ServiceState.LOADING if self._loading else ServiceState.UNINITIALIZED
        return ServiceState.READY if self._last_refresh_ok else ServiceState.ERRORED

    @property
    def last_error(self) -> BaseException | None:
        return self._cache.last_error

    @property
    def snapshot(self) -> FlagSnapshot:
        return self._build_snapshot()

    # ------------------------------------------------------------------
    # Remote checks
    # ------------------------------------------------------------------

    async def check_for_user(self, name: str, user_id: str | None = None) -> bool:
        """Evaluate *name* for a user on the authority; errors propagate.

        *user_id* defaults to the configured ``user_provider``.
        """
        resolved = user_id or self._current_user_id()
        enabled = await self._fetcher.fetch_for_user(name, resolved)
        self._store_one(name, enabled)
        return enabled

    async def check_flag(self, name: str) -> bool:
        """Fetch one flag from the authority and update that cache entry."""
        enabled = await self._fetcher.fetch_one(name)
        self._store_one(name, enabled, self._clock.now())
        return enabled

    async def check_flag_cached(self, name: str, *, max_age: float | None = None) -> bool:
        """Single-flag check that reuses a recently confirmed cache entry.

        An entry younger than *max_age* (default ``check_ttl``) is answered
        without a fetch.  Otherwise the authority is asked; if that fails with
        a :class:`FetchError` and the flag is cached at all, the expired value
        is returned instead of the error.
        """
        ttl = self._check_ttl if max_age is None else max_age
        cached = self._cache.get(name)
        checked_at = self._cache.checked_at(name)
        if cached is not None and checked_at is not None:
            if (self._clock.now() - checked_at).total_seconds() < ttl:
                return cached.enabled
        try:
            return await self.check_flag(name)
        except FetchError as exc:
            if cached is None:
                raise
            logger.warning("feature_flags.check.stale", flag=name, error=exc.message)
            return cached.enabled

    def invalidate(self) -> None:
        """Mark every cached entry as unconfirmed.

        Values stay readable through :meth:`is_enabled`; the next
        :meth:`check_flag_cached` goes to the authority and ``last_updated``
        reads ``None`` until the next successful refresh.
        """
        if self._closed:
            return
        self._cache.invalidate()
        logger.debug("feature_flags.cache.invalidated", cached=len(self._cache))
        self._publish()

    async def check_named(self, names: Iterable[str]) -> dict[str, bool]:
        """Batch-check *names*; only names the authority recognised are returned."""
        requested = list(dict.fromkeys(names))
        if not requested:
            return {}
        result = await self._fetcher.fetch_named(requested)
        if not self._closed:
            checked_at = self._clock.now()
            for name, enabled in result.items():
                self._cache.update_one(name, enabled, checked_at)
            self._publish()
        return result

    async def check_with_fallback(self, name: str, fallback: bool = False) -> bool:
        """Like :meth:`check_flag` but answers *fallback* on any fetch failure."""
        try:
            return await self.check_flag(name)
        except (FetchError, UnknownFlagError) as exc:
            logger.warning("feature_flags.check.fallback", flag=name, error=exc.message)
            return fallback

    def _current_user_id(self) -> str:
        user_id = self._user_provider() if self._user_provider is not None else None
        if not user_id:
            raise UnauthorizedError("No user identity available for a per-user flag check")
        return str(user_id)

    def _store_one(self, name: str, enabled: bool, checked_at: datetime | None = None) -> None:
        if self._closed:
            return
        self._cache.update_one(name, enabled, checked_at)
        self._publish()

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener | None = None) -> FlagSubscription:
        """Attach a consumer; it sees the cached snapshot immediately, no fetch."""
        return FlagSubscription(self, self._publisher, listener)

    def _build_snapshot(self) -> FlagSnapshot:
        return FlagSnapshot.build(
            self.state,
            self._cache.get_all(),
            loading=self._loading,
            error=self._cache.last_error,
            error_at=self._cache.last_error_at,
            last_updated=self._cache.last_updated_at,
        )

    def _publish(self) -> None:
        if self._closed:
            return
        self._publisher.publish(self._build_snapshot())


__all__ = [
    "AUTO_REFRESH_JOB_ID",
    "DEFAULT_CHECK_TTL",
    "DEFAULT_REFRESH_INTERVAL",
    "FlagService",
    "RetryExecutor",
    "UserProvider",
]
