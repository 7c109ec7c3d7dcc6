"""Application feature flags – cache, single-flight service and consumers."""
from flagsync.application.feature_flags.cache import FlagCache
from flagsync.application.feature_flags.feature_flag import FeatureFlag
from flagsync.application.feature_flags.fetcher import FlagFetcher
from flagsync.application.feature_flags.monitor import (
    DEFAULT_MONITOR_INTERVAL,
    MONITOR_JOB_ID,
    StatusMonitor,
    StatusReport,
)
from flagsync.application.feature_flags.payload import (
    parse_check_map,
    parse_enabled,
    parse_flag_entry,
    parse_flag_list,
    parse_timestamp,
    unwrap_data,
)
from flagsync.application.feature_flags.service import (
    AUTO_REFRESH_JOB_ID,
    DEFAULT_CHECK_TTL,
    DEFAULT_REFRESH_INTERVAL,
    FlagService,
    RetryExecutor,
    UserProvider,
)
from flagsync.application.feature_flags.snapshot import FlagSnapshot, ServiceState
from flagsync.application.feature_flags.subscription import (
    FlagSubscription,
    Listener,
    SnapshotPublisher,
)

__all__ = [
    "AUTO_REFRESH_JOB_ID",
    "DEFAULT_CHECK_TTL",
    "DEFAULT_MONITOR_INTERVAL",
    "DEFAULT_REFRESH_INTERVAL",
    "MONITOR_JOB_ID",
    "FeatureFlag",
    "FlagCache",
    "FlagFetcher",
    "FlagService",
    "FlagSnapshot",
    "FlagSubscription",
    "Listener",
    "RetryExecutor",
    "ServiceState",
    "SnapshotPublisher",
    "StatusMonitor",
    "StatusReport",
    "UserProvider",
    "parse_check_map",
    "parse_enabled",
    "parse_flag_entry",
    "parse_flag_list",
    "parse_timestamp",
    "unwrap_data",
]
