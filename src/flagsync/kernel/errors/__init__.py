"""Kernel error hierarchy — public re-export surface.

Hierarchy::

    BaseError
    ├── DomainError          (domain.py)
    │   └── UnknownFlagError
    ├── ApplicationError     (application.py)
    │   └── UnauthorizedError
    └── InfrastructureError  (infrastructure.py)
        └── FetchError
            ├── NetworkError      retryable
            │   └── FetchTimeoutError
            ├── HttpStatusError
            └── ProtocolError
"""

from flagsync.kernel.errors.application import ApplicationError, UnauthorizedError
from flagsync.kernel.errors.base import BaseError, is_retryable
from flagsync.kernel.errors.domain import DomainError, UnknownFlagError
from flagsync.kernel.errors.infrastructure import (
    FetchError,
    FetchTimeoutError,
    HttpStatusError,
    InfrastructureError,
    NetworkError,
    ProtocolError,
)

__all__ = [
    "ApplicationError",
    "BaseError",
    "DomainError",
    "FetchError",
    "FetchTimeoutError",
    "HttpStatusError",
    "InfrastructureError",
    "NetworkError",
    "ProtocolError",
    "UnauthorizedError",
    "UnknownFlagError",
    "is_retryable",
]
