"""Application feature flags – FlagFetcher port."""
from __future__ import annotations

import abc
from collections.abc import Iterable

from flagsync.application.feature_flags.feature_flag import FeatureFlag


class FlagFetcher(abc.ABC):
    """Port: one remote round-trip to the flag authority per call.

    Implementations normalise responses and raise
    :class:`~flagsync.kernel.errors.FetchError` subclasses on failure.  They
    hold no cache and never retry.
    """

    @abc.abstractmethod
    async def fetch_all(self) -> list[FeatureFlag]:
        """Return the full flag set known to the authority."""

    @abc.abstractmethod
    async def fetch_named(self, names: Iterable[str]) -> dict[str, bool]:
        """Return ``{name: enabled}`` for the *names* the authority recognised."""

    @abc.abstractmethod
    async def fetch_one(self, name: str) -> bool:
        """Return the current value of one flag; unknown names raise ``UnknownFlagError``."""

    @abc.abstractmethod
    async def fetch_for_user(self, name: str, user_id: str) -> bool:
        """Evaluate *name* for *user_id*; targeting happens on the authority."""


__all__ = ["FlagFetcher"]
