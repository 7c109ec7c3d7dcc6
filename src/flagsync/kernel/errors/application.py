"""Application-layer errors — cross-cutting concerns at use-case level."""

from __future__ import annotations

from flagsync.kernel.errors.base import BaseError


class ApplicationError(BaseError):
    """Cross-cutting application-layer concern."""

    default_code = "application_error"


class UnauthorizedError(ApplicationError):
    """No user identity is available for a per-user evaluation."""

    default_code = "unauthorized"


__all__ = ["ApplicationError", "UnauthorizedError"]
