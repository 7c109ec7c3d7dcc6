"""Application scheduler – APSchedulerAdapter (APScheduler 4 ``AsyncScheduler``)."""
from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Coroutine
from contextlib import AsyncExitStack
from datetime import timedelta
from typing import Any

from apscheduler import AsyncScheduler, ConflictPolicy
from apscheduler.triggers.interval import IntervalTrigger

from flagsync.application.scheduler.job import Job
from flagsync.application.scheduler.scheduler import JobExecutionContext
from flagsync.kernel.time import utc_now
from flagsync.observability.logging import get_logger

__all__ = ["APSchedulerAdapter"]

logger = get_logger(__name__)


def _runner(job: Job) -> Callable[[], Awaitable[None]]:
    async def _handler() -> None:
        event = await JobExecutionContext(job=job).run()
        logger.debug(
            "scheduler.job.executed",
            job_id=event.job_id,
            duration_ms=round(event.duration_ms, 2),
            success=event.success,
        )

    return _handler


class APSchedulerAdapter:
    """Scheduler backed by APScheduler >= 4.0, running on the caller's loop.

    Every job becomes an interval schedule whose first fire is one interval
    after registration.  Fire times stay on that fixed grid however long a
    run takes.

    ``add_job`` and ``remove_job`` are synchronous.  While the scheduler is
    running, the matching APScheduler call is queued on the event loop and
    applied in call order; ``stop`` drains that queue first.
    """

    def __init__(self) -> None:
        self._jobs: dict[str, Job] = {}
        self._scheduler: AsyncScheduler | None = None
        self._exit_stack: AsyncExitStack | None = None
        self._lock = asyncio.Lock()
        self._pending: set[asyncio.Task[None]] = set()

    def add_job(self, job: Job) -> None:
        self._jobs[job.id] = job
        if self._scheduler is not None:
            self._submit(self._register(job))

    def remove_job(self, job_id: str) -> None:
        if self._jobs.pop(job_id, None) is not None and self._scheduler is not None:
            self._submit(self._unregister(job_id))

    def has_job(self, job_id: str) -> bool:
        return job_id in self._jobs

    def list_jobs(self) -> list[Job]:
        return list(self._jobs.values())

    @property
    def is_running(self) -> bool:
        return self._scheduler is not None

    async def start(self) -> None:
        if self._scheduler is not None:
            return
        stack = AsyncExitStack()
        self._scheduler = await stack.enter_async_context(AsyncScheduler())
        self._exit_stack = stack
        for job in list(self._jobs.values()):
            await self._register(job)
        await self._scheduler.start_in_background()
        logger.debug("scheduler.started", jobs=len(self._jobs))

    async def stop(self) -> None:
        scheduler, stack = self._scheduler, self._exit_stack
        if scheduler is None or stack is None:
            return
        await asyncio.gather(*self._pending, return_exceptions=True)
        self._scheduler = None
        self._exit_stack = None
        await scheduler.stop()
        await stack.aclose()
        logger.debug("scheduler.stopped")

    def _submit(self, coro: Coroutine[Any, Any, None]) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _register(self, job: Job) -> None:
        async with self._lock:
            scheduler = self._scheduler
            # superseded by a later add/remove, or stopped meanwhile
            if scheduler is None or self._jobs.get(job.id) is not job or not job.enabled:
                return
            await scheduler.configure_task(job.id, func=_runner(job))
            trigger = IntervalTrigger(
                seconds=job.interval_seconds,
                start_time=utc_now() + timedelta(seconds=job.interval_seconds),
            )
            await scheduler.add_schedule(
                job.id, trigger, id=job.id, conflict_policy=ConflictPolicy.replace
            )

    async def _unregister(self, job_id: str) -> None:
        async with self._lock:
            scheduler = self._scheduler
            if scheduler is None or job_id in self._jobs:
                return
            await scheduler.remove_schedule(job_id)
