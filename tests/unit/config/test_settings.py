"""Unit tests for config settings, loaders and the settings factory."""

from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar

import pytest

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


# ---------------------------------------------------------------------------
# Concrete settings class used across tests
# ---------------------------------------------------------------------------


@dataclass
class AppSettings(Settings):
    _prefix: ClassVar[str] = "APP"

    host: str = "localhost"
    port: int = 8080
    ratio: float = 0.5
    debug: bool = False


class StaticLoader(SettingsLoader):
    def __init__(self, **values: object) -> None:
        self._values = values

    def values(self, settings_class: type[Settings]) -> dict[str, object]:
        return dict(self._values)


# ---------------------------------------------------------------------------
# EnvSettingsLoader
# ---------------------------------------------------------------------------


class TestEnvSettingsLoader:
    def test_loads_string(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APP_HOST", "example.com")
        assert EnvSettingsLoader().load(AppSettings).host == "example.com"

    def test_loads_int_and_float(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APP_PORT", "9000")
        monkeypatch.setenv("APP_RATIO", "0.25")
        settings = EnvSettingsLoader().load(AppSettings)
        assert settings.port == 9000
        assert settings.ratio == 0.25

    @pytest.mark.parametrize("raw", ["true", "True", "1", "yes", "on"])
    def test_loads_bool_true(self, monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
        monkeypatch.setenv("APP_DEBUG", raw)
        assert EnvSettingsLoader().load(AppSettings).debug is True

    @pytest.mark.parametrize("raw", ["false", "0", "no", "off"])
    def test_loads_bool_false(self, monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
        monkeypatch.setenv("APP_DEBUG", raw)
        assert EnvSettingsLoader().load(AppSettings).debug is False

    def test_bad_bool_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APP_DEBUG", "maybe")
        with pytest.raises(InvalidSettingValueError) as info:
            EnvSettingsLoader().load(AppSettings)
        assert info.value.setting_name == "APP_DEBUG"

    def test_bad_int_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APP_PORT", "eighty")
        with pytest.raises(InvalidSettingValueError):
            EnvSettingsLoader().load(AppSettings)

    def test_defaults_preserved_when_env_absent(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for key in ("APP_HOST", "APP_PORT", "APP_RATIO", "APP_DEBUG"):
            monkeypatch.delenv(key, raising=False)
        assert EnvSettingsLoader().load(AppSettings) == AppSettings()

    def test_values_omits_absent_fields(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for key in ("APP_HOST", "APP_PORT", "APP_RATIO"):
            monkeypatch.delenv(key, raising=False)
        monkeypatch.setenv("APP_DEBUG", "1")
        assert EnvSettingsLoader().values(AppSettings) == {"debug": True}


# ---------------------------------------------------------------------------
# FlagClientSettings
# ---------------------------------------------------------------------------


class TestFlagClientSettings:
    def test_defaults(self) -> None:
        settings = FlagClientSettings(base_url="https://api.example.com")
        assert settings.timeout_seconds == 10.0
        assert settings.refresh_interval_seconds == 300.0
        assert settings.auto_refresh is True
        assert settings.monitor_interval_seconds == 30.0
        assert settings.check_ttl_seconds == 300.0
        assert settings.strict_payloads is False
        assert settings.refresh_max_attempts == 1

    def test_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FLAGSYNC_BASE_URL", "https://api.example.com")
        monkeypatch.setenv("FLAGSYNC_REFRESH_INTERVAL_SECONDS", "60")
        monkeypatch.setenv("FLAGSYNC_AUTO_REFRESH", "off")
        monkeypatch.setenv("FLAGSYNC_REFRESH_MAX_ATTEMPTS", "3")
        settings = EnvSettingsLoader().load(FlagClientSettings)
        assert settings.base_url == "https://api.example.com"
        assert settings.refresh_interval_seconds == 60.0
        assert settings.auto_refresh is False
        assert settings.refresh_max_attempts == 3

    def test_missing_base_url(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("FLAGSYNC_BASE_URL", raising=False)
        with pytest.raises(MissingRequiredSettingError) as info:
            EnvSettingsLoader().load(FlagClientSettings)
        assert info.value.setting_name == "FLAGSYNC_BASE_URL"

    def test_blank_base_url(self) -> None:
        with pytest.raises(InvalidSettingValueError):
            FlagClientSettings(base_url="  ")

    @pytest.mark.parametrize(
        "field",
        [
            "timeout_seconds",
            "refresh_interval_seconds",
            "monitor_interval_seconds",
            "check_ttl_seconds",
        ],
    )
    def test_non_positive_durations(self, field: str) -> None:
        with pytest.raises(InvalidSettingValueError) as info:
            FlagClientSettings(base_url="https://x", **{field: 0})
        assert info.value.setting_name == field

    def test_attempts_at_least_one(self) -> None:
        with pytest.raises(InvalidSettingValueError):
            FlagClientSettings(base_url="https://x", refresh_max_attempts=0)

    def test_as_dict(self) -> None:
        data = FlagClientSettings(base_url="https://x").as_dict()
        assert data["base_url"] == "https://x"
        assert data["refresh_max_attempts"] == 1


# ---------------------------------------------------------------------------
# DotenvSettingsLoader
# ---------------------------------------------------------------------------


class TestDotenvSettingsLoader:
    def test_reads_env_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        env_file = tmp_path / ".env"
        env_file.write_text("FLAGSYNC_BASE_URL=https://dotenv.example.com\nFLAGSYNC_TIMEOUT_SECONDS=2.5\n")
        # registered so monkeypatch removes whatever load_dotenv writes
        monkeypatch.setenv("FLAGSYNC_BASE_URL", "placeholder")
        monkeypatch.setenv("FLAGSYNC_TIMEOUT_SECONDS", "1")
        settings = DotenvSettingsLoader(str(env_file), override=True).load(FlagClientSettings)
        assert settings.base_url == "https://dotenv.example.com"
        assert settings.timeout_seconds == 2.5


# ---------------------------------------------------------------------------
# SettingsFactory
# ---------------------------------------------------------------------------


class TestSettingsFactory:
    def test_later_loaders_win(self) -> None:
        settings = SettingsFactory.create(
            AppSettings,
            [StaticLoader(host="first", port=1), StaticLoader(host="second")],
        )
        assert settings.host == "second"
        assert settings.port == 1

    def test_overrides_win(self) -> None:
        settings = SettingsFactory.create(
            FlagClientSettings,
            [StaticLoader(base_url="https://loader")],
            overrides={"base_url": "https://override"},
        )
        assert settings.base_url == "https://override"

    def test_missing_required(self) -> None:
        with pytest.raises(MissingRequiredSettingError):
            SettingsFactory.create(FlagClientSettings, [StaticLoader()])

    def test_validation_error_propagates(self) -> None:
        with pytest.raises(InvalidSettingValueError):
            SettingsFactory.create(
                FlagClientSettings, overrides={"base_url": "https://x", "timeout_seconds": -1}
            )

    def test_unexpected_field_wrapped(self) -> None:
        with pytest.raises(ConfigError, match="Failed to construct"):
            SettingsFactory.create(AppSettings, overrides={"nope": 1})

    def test_env_loader_errors_propagate(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FLAGSYNC_BASE_URL", "https://x")
        monkeypatch.setenv("FLAGSYNC_STRICT_PAYLOADS", "sometimes")
        with pytest.raises(InvalidSettingValueError):
            SettingsFactory.create(FlagClientSettings, [EnvSettingsLoader()])
