"""Application feature flags – StatusMonitor for operational dashboards."""
from __future__ import annotations

import dataclasses
from datetime import datetime
from typing import Any

from flagsync.application.feature_flags.feature_flag import FeatureFlag
from flagsync.application.feature_flags.service import FlagService
from flagsync.application.feature_flags.snapshot import FlagSnapshot, ServiceState
from flagsync.application.scheduler import APSchedulerAdapter, Job, Scheduler
from flagsync.observability.logging import get_logger

logger = get_logger(__name__)

DEFAULT_MONITOR_INTERVAL = 30.0
MONITOR_JOB_ID = "feature-flags.status-monitor"


@dataclasses.dataclass(frozen=True)
class StatusReport:
    """What a status dashboard shows at one point in time."""

    flags: tuple[FeatureFlag, ...]
    state: ServiceState
    loading: bool
    auto_refresh: bool
    closed: bool = False
    error: str | None = None
    error_at: datetime | None = None
    last_updated: datetime | None = None

    @classmethod
    def from_snapshot(
        cls, snapshot: FlagSnapshot, *, auto_refresh: bool, closed: bool = False
    ) -> StatusReport:
        return cls(
            flags=snapshot.flags,
            state=snapshot.state,
            loading=snapshot.loading,
            auto_refresh=auto_refresh,
            closed=closed,
            error=snapshot.error_message,
            error_at=snapshot.error_at,
            last_updated=snapshot.last_updated,
        )

    @property
    def total(self) -> int:
        return len(self.flags)

    @property
    def enabled(self) -> int:
        return sum(1 for flag in self.flags if flag.enabled)

    @property
    def disabled(self) -> int:
        return self.total - self.enabled

    def to_dict(self) -> dict[str, Any]:
        return {
            "state": self.state.value,
            "loading": self.loading,
            "auto_refresh": self.auto_refresh,
            "closed": self.closed,
            "total": self.total,
            "enabled": self.enabled,
            "disabled": self.disabled,
            "error": self.error,
            "error_at": self.error_at.isoformat() if self.error_at else None,
            "last_updated": self.last_updated.isoformat() if self.last_updated else None,
            "flags": [flag.to_dict() for flag in self.flags],
        }

    def render(self, *, show_details: bool = False) -> str:
        """Plain-text view: one line per flag, then the counts."""
        lines = ["Feature Flag Status"]
        if self.closed:
            lines.append("Service closed: values are frozen")
        if self.error:
            when = f" at {self.error_at.isoformat()}" if self.error_at else ""
            lines.append(f"Error{when}: {self.error}")
        if self.last_updated:
            lines.append(f"Last updated: {self.last_updated.isoformat()}")
        if not self.flags and not self.loading:
            lines.append("No feature flags found")
        for flag in self.flags:
            marker = "✓" if flag.enabled else "✗"
            status = "Enabled" if flag.enabled else "Disabled"
            line = f"{marker} {flag.name} [{status}]"
            if flag.description:
                line += f" ({flag.description})"
            if show_details and flag.id is not None:
                line += f" id={flag.id}"
            lines.append(line)
        lines.append(
            f"Total Flags: {self.total} | Enabled: {self.enabled} | Disabled: {self.disabled}"
        )
        return "\n".join(lines)


class StatusMonitor:
    """Polls a :class:`FlagService` on its own cadence.

    Every refresh goes through ``FlagService.refresh()`` and therefore
    through its single-flight gate; the monitor never writes to the cache.
    Once the service is closed the poll job disarms itself and reports
    carry ``closed=True``.  A scheduler built by the monitor (none passed)
    is stopped by :meth:`stop`.
    """

    def __init__(
        self,
        service: FlagService,
        scheduler: Scheduler | None = None,
        *,
        interval: float = DEFAULT_MONITOR_INTERVAL,
        auto_refresh: bool = True,
    ) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval!r}")
        self._service = service
        self._owns_scheduler = scheduler is None
        self._scheduler: Scheduler = scheduler if scheduler is not None else APSchedulerAdapter()
        self._interval = interval
        self._auto_refresh = auto_refresh
        self._started = False

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def auto_refresh(self) -> bool:
        return self._auto_refresh

    @property
    def running(self) -> bool:
        return self._started

    async def start(self) -> None:
        if self._started:
            return
        self._started = True
        await self._scheduler.start()
        if self._auto_refresh:
            self._arm()
        if self._service.state is ServiceState.UNINITIALIZED:
            await self.refresh()

    async def stop(self) -> None:
        if not self._started:
            return
        self._started = False
        self._scheduler.remove_job(MONITOR_JOB_ID)
        if self._owns_scheduler:
            await self._scheduler.stop()

    async def refresh(self) -> StatusReport:
        """Manual refresh; returns the report after it settles."""
        await self._service.refresh()
        return self.report()

    def toggle_auto_refresh(self) -> bool:
        self.set_auto_refresh(not self._auto_refresh)
        return self._auto_refresh

    def set_auto_refresh(self, enabled: bool) -> None:
        self._auto_refresh = enabled
        if not self._started:
            return
        if enabled:
            self._arm()
        else:
            self._scheduler.remove_job(MONITOR_JOB_ID)

    def report(self) -> StatusReport:
        return StatusReport.from_snapshot(
            self._service.snapshot,
            auto_refresh=self._auto_refresh,
            closed=self._service.closed,
        )

    def _arm(self) -> None:
        if self._scheduler.has_job(MONITOR_JOB_ID):
            return
        self._scheduler.add_job(
            Job(
                id=MONITOR_JOB_ID,
                name="Feature flag status monitor",
                handler=self._poll,
                interval_seconds=self._interval,
            )
        )

    async def _poll(self) -> None:
        if self._service.closed:
            self._scheduler.remove_job(MONITOR_JOB_ID)
            logger.info("feature_flags.monitor.disarmed", reason="service closed")
            return
        await self._service.refresh()
        report = self.report()
        logger.debug(
            "feature_flags.monitor.polled",
            total=report.total,
            enabled=report.enabled,
            error=report.error,
        )


__all__ = ["DEFAULT_MONITOR_INTERVAL", "MONITOR_JOB_ID", "StatusMonitor", "StatusReport"]
