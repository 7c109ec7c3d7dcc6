"""Config settings – FlagClientSettings."""
from __future__ import annotations

import dataclasses
from typing import ClassVar

from flagsync.config.settings.base import Settings
from flagsync.config.validation import InvalidSettingValueError


@dataclasses.dataclass
class FlagClientSettings(Settings):
    """Connection and refresh policy for the flag client (``FLAGSYNC_*`` env vars)."""

    _prefix: ClassVar[str] = "FLAGSYNC"

    base_url: str
    timeout_seconds: float = 10.0
    refresh_interval_seconds: float = 300.0
    auto_refresh: bool = True
    monitor_interval_seconds: float = 30.0
    check_ttl_seconds: float = 300.0
    strict_payloads: bool = False
    refresh_max_attempts: int = 1

    def _validate(self) -> None:
        if not self.base_url or not self.base_url.strip():
            raise InvalidSettingValueError("base_url", self.base_url, "must not be blank")
        for name in (
            "timeout_seconds",
            "refresh_interval_seconds",
            "monitor_interval_seconds",
            "check_ttl_seconds",
        ):
            value = getattr(self, name)
            if value <= 0:
                raise InvalidSettingValueError(name, value, "must be positive")
        if self.refresh_max_attempts < 1:
            raise InvalidSettingValueError(
                "refresh_max_attempts", self.refresh_max_attempts, "must be at least 1"
            )


__all__ = ["FlagClientSettings"]
