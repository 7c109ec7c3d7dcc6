"""Application feature flags – ServiceState and immutable FlagSnapshot."""
from __future__ import annotations

import dataclasses
from collections.abc import Iterable
from datetime import datetime
from enum import Enum

from flagsync.application.feature_flags.feature_flag import FeatureFlag


class ServiceState(str, Enum):
    """Lifecycle of a :class:`FlagService` instance.

    ``READY`` and ``ERRORED`` both serve whatever is cached; they differ only
    in whether the most recent refresh attempt succeeded.
    """

    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"
    ERRORED = "errored"


@dataclasses.dataclass(frozen=True)
class FlagSnapshot:
    """Point-in-time copy of the service state handed to consumers."""

    state: ServiceState
    flags: tuple[FeatureFlag, ...] = ()
    loading: bool = False
    error: BaseException | None = None
    error_at: datetime | None = None
    last_updated: datetime | None = None
    _index: dict[str, FeatureFlag] = dataclasses.field(
        init=False, repr=False, compare=False, default_factory=dict
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "_index", {flag.name: flag for flag in self.flags})

    @classmethod
    def build(
        cls,
        state: ServiceState,
        flags: Iterable[FeatureFlag],
        *,
        loading: bool = False,
        error: BaseException | None = None,
        error_at: datetime | None = None,
        last_updated: datetime | None = None,
    ) -> FlagSnapshot:
        ordered = tuple(sorted(flags, key=lambda flag: flag.name))
        return cls(
            state=state,
            flags=ordered,
            loading=loading,
            error=error,
            error_at=error_at,
            last_updated=last_updated,
        )

    @property
    def error_message(self) -> str | None:
        if self.error is None:
            return None
        return getattr(self.error, "message", None) or str(self.error)

    def get(self, name: str) -> FeatureFlag | None:
        return self._index.get(name)

    def is_enabled(self, name: str) -> bool:
        """Fail-closed lookup: unknown names are ``False``."""
        flag = self._index.get(name)
        return flag.enabled if flag is not None else False

    def are_enabled(self, names: Iterable[str]) -> dict[str, bool]:
        return {name: self.is_enabled(name) for name in names}

    @property
    def enabled_count(self) -> int:
        return sum(1 for flag in self.flags if flag.enabled)

    @property
    def disabled_count(self) -> int:
        return len(self.flags) - self.enabled_count


__all__ = ["FlagSnapshot", "ServiceState"]
