"""Application feature flags – snapshot fan-out to many consumers.

:class:`SnapshotPublisher` keeps the last published :class:`FlagSnapshot`
and notifies listeners only when a newly published snapshot differs from it.
:class:`FlagSubscription` is the handle a consumer holds: it always exposes
the latest snapshot and forwards ``refresh`` / per-user checks to the owning
service, so attaching more consumers never adds network calls.

Usage::

    subscription = service.subscribe(lambda snap: render(snap))
    if subscription.is_feature_enabled("new-ui"):
        ...
    subscription.unsubscribe()
"""
from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING

from flagsync.application.feature_flags.snapshot import FlagSnapshot, ServiceState
from flagsync.observability.logging import get_logger

if TYPE_CHECKING:
    from flagsync.application.feature_flags.service import FlagService

logger = get_logger(__name__)

Listener = Callable[[FlagSnapshot], None]


class SnapshotPublisher:
    """Fan out snapshots to registered listeners, skipping unchanged ones."""

    def __init__(self, initial: FlagSnapshot | None = None) -> None:
        self._current = initial or FlagSnapshot.build(ServiceState.UNINITIALIZED, ())
        self._listeners: list[Listener] = []

    @property
    def current(self) -> FlagSnapshot:
        return self._current

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def add_listener(self, listener: Listener, *, replay: bool = True) -> None:
        """Register *listener*; with *replay* it receives the current snapshot now."""
        self._listeners.append(listener)
        if replay:
            self._deliver(listener, self._current)

    def remove_listener(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def clear(self) -> None:
        self._listeners.clear()

    def publish(self, snapshot: FlagSnapshot) -> bool:
        """Make *snapshot* current; returns ``False`` when nothing changed."""
        if snapshot == self._current:
            return False
        self._current = snapshot
        for listener in list(self._listeners):
            self._deliver(listener, snapshot)
        return True

    def _deliver(self, listener: Listener, snapshot: FlagSnapshot) -> None:
        try:
            listener(snapshot)
        except Exception:  # noqa: BLE001 – one bad consumer must not starve the rest
            logger.exception("feature_flags.subscriber.failed", listener=repr(listener))


class FlagSubscription:
    """Consumer-side view of a :class:`FlagService`."""

    def __init__(
        self,
        service: FlagService,
        publisher: SnapshotPublisher,
        listener: Listener | None = None,
    ) -> None:
        self._service = service
        self._publisher = publisher
        self._listener = listener
        self._active = True
        if listener is not None:
            publisher.add_listener(listener)

    def __enter__(self) -> FlagSubscription:
        return self

    def __exit__(self, *args: object) -> None:
        self.unsubscribe()

    @property
    def active(self) -> bool:
        return self._active

    @property
    def snapshot(self) -> FlagSnapshot:
        return self._publisher.current

    def is_feature_enabled(self, name: str) -> bool:
        return self._publisher.current.is_enabled(name)

    def are_features_enabled(self, names: Iterable[str]) -> dict[str, bool]:
        return self._publisher.current.are_enabled(names)

    async def refresh(self) -> None:
        """Ask the service to refresh; joins any refresh already in flight."""
        await self._service.refresh()

    async def check_user_feature_flag(self, name: str, user_id: str | None = None) -> bool:
        return await self._service.check_for_user(name, user_id)

    def unsubscribe(self) -> None:
        if not self._active:
            return
        self._active = False
        if self._listener is not None:
            self._publisher.remove_listener(self._listener)


__all__ = ["FlagSubscription", "Listener", "SnapshotPublisher"]
