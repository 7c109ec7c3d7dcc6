"""Domain errors — feature flag lookups the authority cannot answer."""

from __future__ import annotations

from typing import Any

from flagsync.kernel.errors.base import BaseError


class DomainError(BaseError):
    """Raised when a domain rule is violated."""

    default_code = "domain_error"


class UnknownFlagError(DomainError):
    """The flag name is not known to the authority.

    Distinct from a flag that is known and disabled.
    """

    default_code = "unknown_flag"

    def __init__(self, name: str, **kwargs: Any) -> None:
        super().__init__(f"Feature flag '{name}' is unknown", **kwargs)
        self.name = name


__all__ = ["DomainError", "UnknownFlagError"]
