"""Tests for environment-backed settings."""

from __future__ import annotations

import pytest

from launchscope.config import ConfigError, Settings, get_settings


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ("LAUNCHSCOPE_TIMEOUT", "LAUNCHSCOPE_RETRIES", "LAUNCHSCOPE_BASE_DELAY",
                     "LAUNCHSCOPE_MAX_DELAY", "LAUNCHSCOPE_UPCOMING_DEFAULT"):
            monkeypatch.delenv(name, raising=False)
        settings = Settings()
        assert settings.timeout_s == 30
        assert settings.max_retries == 5
        assert settings.base_delay_s == 0.2
        assert settings.max_delay_s == 5
        assert settings.upcoming_default is False

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("NASA_API_KEY", "abc123")
        monkeypatch.setenv("LAUNCHSCOPE_RETRIES", "7")
        monkeypatch.setenv("LAUNCHSCOPE_UPCOMING_DEFAULT", "unset")
        settings = get_settings()
        assert settings.nasa_api_key == "abc123"
        assert settings.max_retries == 7
        assert settings.upcoming_default is None

    @pytest.mark.parametrize(
        "raw, expected",
        [("true", True), ("False", False), ("1", True), ("0", False), ("yes", True), ("", None), ("unset", None)],
    )
    def test_upcoming_default_accepts_words(self, monkeypatch, raw, expected):
        monkeypatch.setenv("LAUNCHSCOPE_UPCOMING_DEFAULT", raw)
        assert Settings().upcoming_default is expected

    def test_unrecognised_flag_is_a_config_error(self, monkeypatch):
        monkeypatch.setenv("LAUNCHSCOPE_UPCOMING_DEFAULT", "maybe")
        with pytest.raises(ConfigError, match="LAUNCHSCOPE_UPCOMING_DEFAULT must be one of"):
            Settings()

    def test_debug_flag_accepts_words(self, monkeypatch):
        monkeypatch.setenv("LAUNCHSCOPE_DEBUG", "true")
        assert Settings().debug is True

    @pytest.mark.parametrize(
        "overrides, message",
        [
            ({"nasa_api_key": ""}, "NASA API key"),
            ({"timeout_s": 0.5}, "timeout"),
            ({"max_retries": 0}, "retries"),
            ({"max_retries": 11}, "retries"),
            ({"base_delay_s": 0.05}, "base delay"),
            ({"max_delay_s": 0.5}, "max delay"),
            ({"cost_workers": 0}, "cost workers"),
        ],
    )
    def test_validation(self, overrides, message):
        with pytest.raises(ConfigError, match=message):
            Settings(**overrides).validate()

    def test_valid_boundaries(self):
        settings = Settings(nasa_api_key="k", timeout_s=1, max_retries=10, base_delay_s=0.1, max_delay_s=1)
        assert settings.validate() is settings
