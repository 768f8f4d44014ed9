"""Centralized configuration — all env vars in one place."""

import os


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        self.cors_origins: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
        self.git_sha: str = os.getenv("GIT_SHA", "unknown")
        self.environment: str = os.getenv("ENVIRONMENT", "local")
        self.service_name: str = os.getenv("SERVICE_NAME", "wikisummary")

        # Upstream encyclopedia API
        self.wiki_api_base_url: str = os.getenv(
            "WIKI_API_BASE_URL", "https://en.wikipedia.org/api/rest_v1"
        ).rstrip("/")
        self.wiki_user_agent: str = os.getenv("WIKI_USER_AGENT", "Workshop-Demo-Client")
        self.upstream_timeout_seconds: float = float(os.getenv("UPSTREAM_TIMEOUT_SECONDS", "10"))

        # Cache
        self.cache_ttl_seconds: float = float(os.getenv("CACHE_TTL_SECONDS", "5"))
        self.cache_sweep_interval_seconds: float = float(
            os.getenv("CACHE_SWEEP_INTERVAL_SECONDS", "0")
        )

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def sweeper_enabled(self) -> bool:
        return self.cache_sweep_interval_seconds > 0

    def validate(self) -> list[str]:
        """Return list of configuration problems, empty when the settings are usable."""
        problems = []
        if not self.cache_ttl_seconds > 0:
            problems.append("CACHE_TTL_SECONDS must be positive")
        if self.cache_sweep_interval_seconds < 0:
            problems.append("CACHE_SWEEP_INTERVAL_SECONDS must not be negative")
        if not self.wiki_api_base_url:
            problems.append("WIKI_API_BASE_URL is empty")
        return problems


settings = Settings()
