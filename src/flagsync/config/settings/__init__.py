"""Config settings – 12-factor env-based configuration."""
from flagsync.config.settings.base import Settings
from flagsync.config.settings.client import FlagClientSettings
from flagsync.config.settings.factory import SettingsFactory
from flagsync.config.settings.loaders import DotenvSettingsLoader, EnvSettingsLoader, SettingsLoader

__all__ = [
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "FlagClientSettings",
    "Settings",
    "SettingsFactory",
    "SettingsLoader",
]
