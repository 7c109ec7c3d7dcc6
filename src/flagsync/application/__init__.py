"""Application – flag synchronisation use cases and job scheduling."""

from flagsync.application.feature_flags import (
    FeatureFlag,
    FlagFetcher,
    FlagService,
    FlagSnapshot,
    ServiceState,
    StatusMonitor,
)
from flagsync.application.scheduler import APSchedulerAdapter, InMemoryScheduler, Job, Scheduler

__all__ = [
    "APSchedulerAdapter",
    "FeatureFlag",
    "FlagFetcher",
    "FlagService",
    "FlagSnapshot",
    "InMemoryScheduler",
    "Job",
    "Scheduler",
    "ServiceState",
    "StatusMonitor",
]
