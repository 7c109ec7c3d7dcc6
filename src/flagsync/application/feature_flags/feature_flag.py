"""Application feature flags – FeatureFlag value object."""
from __future__ import annotations

import dataclasses
from datetime import datetime
from typing import Any


@dataclasses.dataclass(frozen=True)
class FeatureFlag:
    """One named boolean toggle as last reported by the authority.

    Identity is ``name`` (case-sensitive); two records with the same name are
    the same flag observed at different points in time.
    """
    name: str
    enabled: bool
    description: str | None = None
    id: str | int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def with_enabled(self, enabled: bool) -> FeatureFlag:
        """Return a copy of this record with a new ``enabled`` value."""
        return dataclasses.replace(self, enabled=enabled)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "enabled": self.enabled,
            "description": self.description,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


__all__ = ["FeatureFlag"]
