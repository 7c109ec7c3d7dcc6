"""Application scheduler – Scheduler port and single-run execution."""
from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol, runtime_checkable

from flagsync.application.scheduler.job import Job
from flagsync.kernel.time import utc_now
from flagsync.observability.logging import get_logger

__all__ = ["JobExecutedEvent", "JobExecutionContext", "Scheduler"]

logger = get_logger(__name__)


@dataclass(frozen=True)
class JobExecutedEvent:
    """Outcome of one job run; ``error`` is the failure message, if any."""

    job_id: str
    job_name: str
    started_at: datetime
    duration_ms: float
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.error is None


@dataclass
class JobExecutionContext:
    """Await a job's handler once.

    A failing handler is logged and reported on the event; it never
    propagates into the scheduler loop, so the next tick still happens.
    """

    job: Job

    async def run(self) -> JobExecutedEvent:
        started_at = utc_now()
        t0 = time.monotonic()
        try:
            await self.job.handler()
        except Exception as exc:  # noqa: BLE001
            logger.exception("scheduler.job.failed", job_id=self.job.id)
            failure: str | None = str(exc) or type(exc).__name__
        else:
            failure = None
        return JobExecutedEvent(
            job_id=self.job.id,
            job_name=self.job.name,
            started_at=started_at,
            duration_ms=(time.monotonic() - t0) * 1000,
            error=failure,
        )


@runtime_checkable
class Scheduler(Protocol):
    """Port: own a set of recurring jobs keyed by id.

    ``start`` and ``stop`` are idempotent; jobs only fire while started.
    Adding a job whose id is already registered replaces it.
    """

    def add_job(self, job: Job) -> None: ...
    def remove_job(self, job_id: str) -> None: ...
    def has_job(self, job_id: str) -> bool: ...
    def list_jobs(self) -> list[Job]: ...
    async def start(self) -> None: ...
    async def stop(self) -> None: ...
