"""Application scheduler – InMemoryScheduler driven by virtual time."""
from __future__ import annotations

from flagsync.application.scheduler.job import Job
from flagsync.application.scheduler.scheduler import JobExecutedEvent, JobExecutionContext

__all__ = ["InMemoryScheduler"]


class InMemoryScheduler:
    """Scheduler with a virtual clock for deterministic tests.

    :meth:`advance` moves time forward and fires every due job in due-time
    order; :meth:`trigger` fires one job immediately.
    """

    def __init__(self) -> None:
        self._jobs: dict[str, Job] = {}
        self._next_run: dict[str, float] = {}
        self._now: float = 0.0
        self._running: bool = False
        self.execution_log: list[JobExecutedEvent] = []

    def add_job(self, job: Job) -> None:
        self._jobs[job.id] = job
        self._next_run[job.id] = self._now + job.interval_seconds

    def remove_job(self, job_id: str) -> None:
        self._jobs.pop(job_id, None)
        self._next_run.pop(job_id, None)

    def has_job(self, job_id: str) -> bool:
        return job_id in self._jobs

    def list_jobs(self) -> list[Job]:
        return list(self._jobs.values())

    async def start(self) -> None:
        if self._running:
            return
        self._running = True
        # time that passed while stopped never fires jobs
        for job_id, job in self._jobs.items():
            self._next_run[job_id] = self._now + job.interval_seconds

    async def stop(self) -> None:
        self._running = False

    @property
    def now(self) -> float:
        """Seconds of virtual time elapsed since construction."""
        return self._now

    @property
    def is_running(self) -> bool:
        return self._running

    async def trigger(self, job_id: str) -> JobExecutedEvent:
        """Manually fire a job's handler and record the result."""
        job = self._jobs[job_id]
        event = await JobExecutionContext(job=job).run()
        self.execution_log.append(event)
        return event

    async def advance(self, seconds: float) -> list[JobExecutedEvent]:
        """Move virtual time forward by *seconds*, firing due jobs on the way."""
        target = self._now + seconds
        fired: list[JobExecutedEvent] = []
        while self._running:
            due = [
                (run_at, job_id)
                for job_id, run_at in self._next_run.items()
                if run_at <= target and self._jobs[job_id].enabled
            ]
            if not due:
                break
            run_at, job_id = min(due)
            self._now = run_at
            job = self._jobs[job_id]
            self._next_run[job_id] = run_at + job.interval_seconds
            event = await JobExecutionContext(job=job).run()
            self.execution_log.append(event)
            fired.append(event)
        self._now = target
        return fired
