"""Application feature flags – response body normalisation.

The authority wraps every answer in an envelope::

    {"data": [...]}                 # GET /feature-flags
    {"data": {"enabled": true}}     # GET /feature-flags/{name}
    {"data": {"a": true, "b": false}}  # POST /feature-flags/check

Structural problems (missing envelope, ``data`` of the wrong type) always
raise :class:`ProtocolError`.  Individual list or map entries that are
malformed (``name`` missing / null / blank, ``enabled`` not a bool) are
never coerced: in *strict* mode they raise :class:`ProtocolError`, otherwise
they are dropped from the result and logged.
"""
from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

from flagsync.application.feature_flags.feature_flag import FeatureFlag
from flagsync.kernel.errors import ProtocolError, UnknownFlagError
from flagsync.observability.logging import get_logger

logger = get_logger(__name__)

_NAME_KEYS = ("name", "featureName")
_CREATED_KEYS = ("created_at", "createdAt")
_UPDATED_KEYS = ("updated_at", "updatedAt")


def unwrap_data(body: Any) -> Any:
    """Return ``body["data"]`` or raise :class:`ProtocolError`."""
    if not isinstance(body, dict):
        raise ProtocolError(
            f"Expected a JSON object envelope, got {type(body).__name__}", payload=body
        )
    if "data" not in body:
        raise ProtocolError("Response envelope has no 'data' member", payload=body)
    return body["data"]


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 timestamp; naive values are assumed to be UTC.

    Timestamps are optional metadata, so anything unparseable yields ``None``.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _first(entry: dict[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if entry.get(key) is not None:
            return entry[key]
    return None


def parse_flag_entry(entry: Any) -> FeatureFlag:
    """Normalise one element of the ``GET /feature-flags`` list."""
    if not isinstance(entry, dict):
        raise ProtocolError(
            f"Flag entry must be an object, got {type(entry).__name__}", payload=entry
        )
    name = _first(entry, _NAME_KEYS)
    if not isinstance(name, str) or not name.strip():
        raise ProtocolError("Flag entry has no usable 'name'", payload=entry)
    enabled = entry.get("enabled")
    if not isinstance(enabled, bool):
        raise ProtocolError(
            f"Flag '{name}' has non-boolean 'enabled': {enabled!r}", payload=entry
        )
    description = entry.get("description")
    return FeatureFlag(
        name=name,
        enabled=enabled,
        description=description if isinstance(description, str) else None,
        id=entry.get("id"),
        created_at=parse_timestamp(_first(entry, _CREATED_KEYS)),
        updated_at=parse_timestamp(_first(entry, _UPDATED_KEYS)),
    )


def parse_flag_list(body: Any, *, strict: bool = False) -> list[FeatureFlag]:
    """Normalise a full-set response into :class:`FeatureFlag` records.

    Duplicate names collapse to the last occurrence.
    """
    data = unwrap_data(body)
    if not isinstance(data, list):
        raise ProtocolError(
            f"'data' must be a list of flags, got {type(data).__name__}", payload=body
        )
    flags: dict[str, FeatureFlag] = {}
    for index, entry in enumerate(data):
        try:
            flag = parse_flag_entry(entry)
        except ProtocolError as exc:
            if strict:
                raise
            logger.warning(
                "feature_flags.payload.entry_dropped", index=index, reason=exc.message
            )
            continue
        flags[flag.name] = flag
    return list(flags.values())


def parse_enabled(body: Any, name: str) -> bool:
    """Normalise a single-flag answer (``{"data": {"enabled": bool}}``)."""
    data = unwrap_data(body)
    if data is None:
        raise UnknownFlagError(name)
    if not isinstance(data, dict):
        raise ProtocolError(
            f"'data' must be an object, got {type(data).__name__}", payload=body
        )
    enabled = data.get("enabled")
    if not isinstance(enabled, bool):
        raise ProtocolError(
            f"Flag '{name}' answer has non-boolean 'enabled': {enabled!r}", payload=body
        )
    return enabled


def parse_check_map(
    body: Any, requested: Iterable[str], *, strict: bool = False
) -> dict[str, bool]:
    """Normalise a batch-check answer, keeping only recognised requested names.

    Names the authority omitted are absent from the result (unknown, not
    disabled).
    """
    data = unwrap_data(body)
    if not isinstance(data, dict):
        raise ProtocolError(
            f"'data' must be an object of name -> bool, got {type(data).__name__}",
            payload=body,
        )
    result: dict[str, bool] = {}
    for name in requested:
        if name not in data:
            continue
        value = data[name]
        if isinstance(value, bool):
            result[name] = value
        elif strict:
            raise ProtocolError(
                f"Flag '{name}' has non-boolean value {value!r}", payload=body
            )
        else:
            logger.warning("feature_flags.payload.value_dropped", flag=name, value=repr(value))
    return result


__all__ = [
    "parse_check_map",
    "parse_enabled",
    "parse_flag_entry",
    "parse_flag_list",
    "parse_timestamp",
    "unwrap_data",
]
