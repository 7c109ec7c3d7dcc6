"""Application scheduler – recurring jobs, real and virtual-time schedulers."""
from flagsync.application.scheduler.job import Job
from flagsync.application.scheduler.scheduler import (
    JobExecutedEvent,
    JobExecutionContext,
    Scheduler,
)
from flagsync.application.scheduler.apscheduler import APSchedulerAdapter
from flagsync.application.scheduler.in_memory import InMemoryScheduler

__all__ = [
    "APSchedulerAdapter",
    "InMemoryScheduler",
    "Job",
    "JobExecutedEvent",
    "JobExecutionContext",
    "Scheduler",
]
