"""Config – 12-factor settings, loaders and validation errors."""

from flagsync.config.settings import (
    DotenvSettingsLoader,
    EnvSettingsLoader,
    FlagClientSettings,
    Settings,
    SettingsFactory,
    SettingsLoader,
)
from flagsync.config.validation import (
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)

__all__ = [
    "ConfigError",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "FlagClientSettings",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "Settings",
    "SettingsFactory",
    "SettingsLoader",
]
