"""
Settings - Application configuration using Pydantic Settings.

Loads from environment variables and .env files.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    # Paths
    data_dir: Path = Path("data")
    db_path: Path = Path("data/neatrip.db")

    # Chat completion service (OpenAI-compatible endpoint)
    llm_base_url: str = "https://api.openai.com/v1"
    llm_api_key: str = ""
    llm_model: str = "gpt-4o-mini"
    llm_timeout_seconds: float = 60.0

    # Sessions
    # Fernet key; a temporary one is generated when empty
    session_secret: str = ""
    session_ttl_seconds: int = 60 * 60 * 24 * 30

    # Analytics
    analytics_enabled: bool = False
    analytics_debug: bool = False
    analytics_sample_rate: float = 1.0
    analytics_endpoint: str | None = None
    analytics_api_key: str | None = None
    analytics_flush_interval_seconds: float = 30.0
    analytics_max_queue_size: int = 500

    # Discovery
    discovery_default_radius_m: int = 1000

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_debug: bool = False
    rate_limit_rpm: int = 60
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
