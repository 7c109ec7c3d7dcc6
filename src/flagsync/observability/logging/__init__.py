"""Observability – structlog configuration and logger helpers."""
from flagsync.observability.logging.filters import DEFAULT_SENSITIVE_FIELDS, SensitiveFieldsFilter
from flagsync.observability.logging.factory import JsonLoggerFactory
from flagsync.observability.logging.processors import get_logger

__all__ = [
    "DEFAULT_SENSITIVE_FIELDS",
    "JsonLoggerFactory",
    "SensitiveFieldsFilter",
    "get_logger",
]
