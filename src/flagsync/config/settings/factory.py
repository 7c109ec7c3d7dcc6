"""Config settings – SettingsFactory."""
from __future__ import annotations

import dataclasses
from typing import Any, Sequence, TypeVar

from flagsync.config.settings.base import Settings
from flagsync.config.settings.loaders import SettingsLoader, env_key
from flagsync.config.validation.errors import ConfigError, MissingRequiredSettingError

T = TypeVar("T", bound=Settings)


class SettingsFactory:
    """Layer several sources into one settings instance.

    Each loader contributes only the fields it actually defines, so a later
    source never resets an earlier value back to its default.  Precedence,
    lowest first: dataclass defaults, *loaders* in order, *overrides*.
    Loader errors (bad coercions) propagate unchanged.

    Usage::

        settings = SettingsFactory.create(
            FlagClientSettings,
            [DotenvSettingsLoader(".env"), EnvSettingsLoader()],
            overrides={"auto_refresh": False},
        )
    """

    @staticmethod
    def create(
        settings_cls: type[T],
        loaders: Sequence[SettingsLoader] | None = None,
        overrides: dict[str, Any] | None = None,
    ) -> T:
        merged: dict[str, Any] = {}
        for loader in loaders or []:
            merged.update(loader.values(settings_cls))
        merged.update(overrides or {})

        missing = [
            field.name
            for field in dataclasses.fields(settings_cls)  # type: ignore[arg-type]
            if field.name not in merged
            and field.default is dataclasses.MISSING
            and field.default_factory is dataclasses.MISSING  # type: ignore[misc]
        ]
        if missing:
            raise MissingRequiredSettingError(env_key(settings_cls, missing[0]))

        try:
            return settings_cls(**merged)
        except ConfigError:
            raise
        except Exception as exc:
            raise ConfigError(f"Failed to construct {settings_cls.__name__}: {exc}") from exc


__all__ = ["SettingsFactory"]
