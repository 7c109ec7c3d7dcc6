"""Infrastructure errors — failed round-trips to the flag authority."""

from __future__ import annotations

from typing import Any

from flagsync.kernel.errors.base import BaseError


class InfrastructureError(BaseError):
    """Infrastructure / I/O failure that is not a business rule violation."""

    default_code = "infrastructure_error"


class FetchError(InfrastructureError):
    """A remote call to the flag authority did not produce a usable answer."""

    default_code = "fetch_error"


class NetworkError(FetchError):
    """No response was received (connection refused, DNS, reset, …)."""

    default_code = "network_error"
    retryable = True

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.url = url


class FetchTimeoutError(NetworkError):
    """The transport gave up waiting for a response."""

    default_code = "fetch_timeout"


class HttpStatusError(FetchError):
    """The authority answered with a non-success HTTP status."""

    default_code = "http_status_error"

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        url: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.status_code = status_code
        self.url = url


class ProtocolError(FetchError):
    """A response was received but its body is not well-formed."""

    default_code = "protocol_error"

    def __init__(
        self,
        message: str,
        *,
        payload: Any = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.payload = payload


__all__ = [
    "FetchError",
    "FetchTimeoutError",
    "HttpStatusError",
    "InfrastructureError",
    "NetworkError",
    "ProtocolError",
]
