"""Tests for environment-driven settings."""

import pytest
from pydantic import ValidationError
from veya.config import Settings, get_settings, reset_settings_cache

ENV_VARS = (
    "SWISSEPH_EPHE_PATH",
    "TIMING_CACHE_ENABLED",
    "TIMING_CACHE_MAX_ENTRIES",
    "TIMING_CACHE_UTC_OFFSET_MINUTES",
    "RETROGRADE_LOOKAHEAD_DAYS",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # Keep a developer's .env out of the picture
    monkeypatch.chdir(tmp_path)
    reset_settings_cache()
    yield
    reset_settings_cache()


def test_defaults():
    settings = Settings()
    assert settings.swisseph_ephe_path == ""
    assert settings.timing_cache_enabled is True
    assert settings.timing_cache_max_entries == 512
    assert settings.timing_cache_utc_offset_minutes == 0
    assert settings.retrograde_lookahead_days == 90


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("SWISSEPH_EPHE_PATH", "/usr/share/sweph")
    monkeypatch.setenv("TIMING_CACHE_ENABLED", "false")
    monkeypatch.setenv("TIMING_CACHE_UTC_OFFSET_MINUTES", "-300")
    monkeypatch.setenv("RETROGRADE_LOOKAHEAD_DAYS", "30")

    settings = Settings()
    assert settings.swisseph_ephe_path == "/usr/share/sweph"
    assert settings.timing_cache_enabled is False
    assert settings.timing_cache_utc_offset_minutes == -300
    assert settings.retrograde_lookahead_days == 30


def test_env_file_is_read(tmp_path):
    (tmp_path / ".env").write_text("TIMING_CACHE_MAX_ENTRIES=64\n")
    assert Settings().timing_cache_max_entries == 64


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("TIMING_CACHE_MAX_ENTRIES", "0"),
        ("TIMING_CACHE_UTC_OFFSET_MINUTES", "900"),
        ("RETROGRADE_LOOKAHEAD_DAYS", "400"),
    ],
)
def test_out_of_range_values_rejected(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ValidationError):
        Settings()


def test_get_settings_is_cached_until_reset(monkeypatch):
    first = get_settings()
    assert get_settings() is first

    monkeypatch.setenv("RETROGRADE_LOOKAHEAD_DAYS", "14")
    assert get_settings().retrograde_lookahead_days == 90

    reset_settings_cache()
    assert get_settings().retrograde_lookahead_days == 14
