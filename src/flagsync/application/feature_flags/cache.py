"""Application feature flags – FlagCache (last-known-good state)."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from flagsync.application.feature_flags.feature_flag import FeatureFlag


class FlagCache:
    """In-memory ``name -> FeatureFlag`` store with refresh bookkeeping.

    Owned and mutated by exactly one :class:`FlagService`.  Reads hand out
    copies; the only mutation paths are :meth:`replace_all`,
    :meth:`mark_error`, :meth:`update_one` and :meth:`invalidate`.  A refresh
    attempt calls either ``replace_all`` (success) or ``mark_error``
    (failure), never both, so a failed refresh can never erase cached entries.

    Each entry also remembers when the authority last confirmed it
    (:meth:`checked_at`), which drives TTL-bounded single-flag checks.
    """

    def __init__(self) -> None:
        self._flags: dict[str, FeatureFlag] = {}
        self._checked_at: dict[str, datetime] = {}
        self._last_updated_at: datetime | None = None
        self._last_error: BaseException | None = None
        self._last_error_at: datetime | None = None

    def __len__(self) -> int:
        return len(self._flags)

    def __contains__(self, name: object) -> bool:
        return name in self._flags

    @property
    def last_updated_at(self) -> datetime | None:
        """Time of the last successful bulk refresh, ``None`` if never populated."""
        return self._last_updated_at

    @property
    def last_error(self) -> BaseException | None:
        return self._last_error

    @property
    def last_error_at(self) -> datetime | None:
        return self._last_error_at

    @property
    def populated(self) -> bool:
        return self._last_updated_at is not None

    def get(self, name: str) -> FeatureFlag | None:
        return self._flags.get(name)

    def get_all(self) -> list[FeatureFlag]:
        """Snapshot copy of every cached record."""
        return list(self._flags.values())

    def names(self) -> set[str]:
        return set(self._flags)

    def checked_at(self, name: str) -> datetime | None:
        """When *name* was last confirmed by the authority; ``None`` if never or invalidated."""
        return self._checked_at.get(name)

    def replace_all(self, records: Iterable[FeatureFlag], fetched_at: datetime) -> None:
        """Swap the whole mapping for *records*; names not listed are dropped."""
        mapping = {record.name: record for record in records}
        self._flags = mapping
        self._checked_at = dict.fromkeys(mapping, fetched_at)
        self._last_updated_at = fetched_at
        self._last_error = None
        self._last_error_at = None

    def mark_error(self, error: BaseException, at: datetime) -> None:
        """Record a failed refresh without touching the flag mapping."""
        self._last_error = error
        self._last_error_at = at

    def update_one(
        self, name: str, enabled: bool, checked_at: datetime | None = None
    ) -> FeatureFlag:
        """Set the value of a single entry, leaving every other entry untouched.

        Without *checked_at* the entry counts as unconfirmed for TTL checks.
        """
        current = self._flags.get(name)
        record = current.with_enabled(enabled) if current else FeatureFlag(name=name, enabled=enabled)
        # copy-on-write so snapshots taken earlier never observe the change
        updated = dict(self._flags)
        updated[name] = record
        self._flags = updated
        if checked_at is None:
            self._checked_at.pop(name, None)
        else:
            self._checked_at[name] = checked_at
        return record

    def invalidate(self) -> None:
        """Forget every freshness timestamp; cached values stay readable."""
        self._checked_at = {}
        self._last_updated_at = None


__all__ = ["FlagCache"]
