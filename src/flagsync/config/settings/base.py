"""Config settings – Settings base class."""
from __future__ import annotations

import dataclasses


@dataclasses.dataclass
class Settings:
    """Base class for 12-factor settings.

    Subclasses set ``_prefix`` (env var prefix) and override ``_validate``
    for cross-field checks; validation runs on every construction.
    """

    _prefix: dataclasses.ClassVar[str] = ""

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        """Override to add cross-field validation."""

    def as_dict(self) -> dict[str, object]:
        return dataclasses.asdict(self)


__all__ = ["Settings"]
