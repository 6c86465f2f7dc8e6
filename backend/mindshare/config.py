"""Configuration management using Pydantic Settings."""

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from mindshare.services.leaderboard.config import LeaderboardAPIConfig

logger = logging.getLogger(__name__)

DEFAULT_UPSTREAM_BASE_URL = "https://leaderboard-bice-mu.vercel.app/api/zama"


class Settings(BaseSettings):
    """Main configuration class.

    Every field can be set from the environment or a .env file. BASE_URL and
    PORT are kept as the upstream URL and listen port names.
    """

    # Upstream
    upstream_base_url: str = Field(
        default=DEFAULT_UPSTREAM_BASE_URL,
        validation_alias=AliasChoices("upstream_base_url", "base_url"),
    )
    upstream_timeout_seconds: float = 15.0

    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    static_dir: Path = Path("public")
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Aggregation
    cache_ttl_seconds: int = 300
    max_pages: int = 20
    page_size_hint: int = 100

    # Observability
    logfire_token: str = ""
    environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("upstream_base_url", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("max_pages", "page_size_hint", "cache_ttl_seconds", mode="after")
    @classmethod
    def require_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("must be positive")
        return v

    def leaderboard_api_config(self) -> LeaderboardAPIConfig:
        return LeaderboardAPIConfig(
            base_url=self.upstream_base_url,
            timeout_seconds=self.upstream_timeout_seconds,
        )


@lru_cache()
def get_settings() -> Settings:
    """Get singleton Settings instance."""
    settings = Settings()
    logger.debug(f"Loaded settings (upstream={settings.upstream_base_url})")
    return settings
