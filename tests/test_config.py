"""Tests for settings loading."""

from datetime import timedelta
from pathlib import Path

import pytest

from docpress.config import DEFAULT_CORS_ORIGINS, Settings, get_settings
from docpress.core.exceptions import ConfigurationError

ENV_VARS = (
    "DP_OUTPUT_DIR",
    "DP_FILE_TTL_SECONDS",
    "DP_DOWNLOAD_GRACE_SECONDS",
    "DP_CLEANUP_INTERVAL_SECONDS",
    "DP_LOG_LEVEL",
    "DP_CORS_ORIGINS",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()


class TestSettingsDefaults:
    """Default values without environment overrides."""

    def test_defaults(self, clean_env) -> None:
        settings = Settings.from_env()
        assert settings.output_dir == Path("temp")
        assert settings.file_ttl == timedelta(minutes=15)
        assert settings.download_grace_seconds == 5.0
        assert settings.cleanup_interval_seconds == 60.0
        assert settings.log_level == "INFO"
        assert settings.cors_origins == DEFAULT_CORS_ORIGINS


class TestSettingsFromEnv:
    """Environment overrides."""

    def test_overrides(self, clean_env) -> None:
        clean_env.setenv("DP_OUTPUT_DIR", "/srv/docpress")
        clean_env.setenv("DP_FILE_TTL_SECONDS", "300")
        clean_env.setenv("DP_DOWNLOAD_GRACE_SECONDS", "2.5")
        clean_env.setenv("DP_CLEANUP_INTERVAL_SECONDS", "0")
        clean_env.setenv("DP_LOG_LEVEL", "debug")
        clean_env.setenv("DP_CORS_ORIGINS", "https://a.example, https://b.example,")

        settings = Settings.from_env()

        assert settings.output_dir == Path("/srv/docpress")
        assert settings.file_ttl == timedelta(minutes=5)
        assert settings.download_grace_seconds == 2.5
        assert settings.cleanup_interval_seconds == 0
        assert settings.log_level == "DEBUG"
        assert settings.cors_origins == ["https://a.example", "https://b.example"]

    def test_invalid_number_falls_back(self, clean_env, caplog) -> None:
        clean_env.setenv("DP_FILE_TTL_SECONDS", "fifteen minutes")
        settings = Settings.from_env()
        assert settings.file_ttl_seconds == 900
        assert "Invalid DP_FILE_TTL_SECONDS" in caplog.text

    @pytest.mark.parametrize(
        "name,value",
        [
            ("DP_FILE_TTL_SECONDS", "0"),
            ("DP_FILE_TTL_SECONDS", "-5"),
            ("DP_DOWNLOAD_GRACE_SECONDS", "-1"),
            ("DP_CLEANUP_INTERVAL_SECONDS", "-10"),
        ],
    )
    def test_rejects_bad_durations(self, clean_env, name: str, value: str) -> None:
        clean_env.setenv(name, value)
        with pytest.raises(ConfigurationError):
            Settings.from_env()

    def test_get_settings_is_cached(self, clean_env) -> None:
        assert get_settings() is get_settings()
