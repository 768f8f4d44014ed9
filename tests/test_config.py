"""Tests for environment-driven settings."""

from wikisummary.config import Settings


def test_defaults(monkeypatch):
    for var in ("CACHE_TTL_SECONDS", "WIKI_USER_AGENT", "ENVIRONMENT", "CACHE_SWEEP_INTERVAL_SECONDS"):
        monkeypatch.delenv(var, raising=False)
    settings = Settings()

    assert settings.cache_ttl_seconds == 5
    assert settings.wiki_user_agent == "Workshop-Demo-Client"
    assert not settings.is_production
    assert not settings.sweeper_enabled
    assert settings.validate() == []


def test_base_url_trailing_slash_stripped(monkeypatch):
    monkeypatch.setenv("WIKI_API_BASE_URL", "https://example.org/api/")
    assert Settings().wiki_api_base_url == "https://example.org/api"


def test_validate_reports_problems(monkeypatch):
    monkeypatch.setenv("CACHE_TTL_SECONDS", "0")
    monkeypatch.setenv("CACHE_SWEEP_INTERVAL_SECONDS", "-1")

    problems = Settings().validate()
    assert "CACHE_TTL_SECONDS must be positive" in problems
    assert "CACHE_SWEEP_INTERVAL_SECONDS must not be negative" in problems


def test_sweeper_enabled(monkeypatch):
    monkeypatch.setenv("CACHE_SWEEP_INTERVAL_SECONDS", "30")
    assert Settings().sweeper_enabled


def test_validate_rejects_nan_ttl(monkeypatch):
    monkeypatch.setenv("CACHE_TTL_SECONDS", "nan")
    assert "CACHE_TTL_SECONDS must be positive" in Settings().validate()
