"""
Application configuration using Pydantic settings.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

from typing import Optional


class Settings(BaseSettings):
    """Application settings."""

    # App
    app_name: str = "Capital"
    log_level: str = "INFO"

    # Database
    database_url: str = "sqlite:///./data/capital.sqlite"

    # Cache
    redis_url: Optional[str] = "redis://localhost:6379/0"
    cache_enabled: bool = True
    accounts_cache_ttl: int = 10 * 60
    transactions_cache_ttl: int = 10 * 60
    budgets_cache_ttl: int = 25 * 60

    # Identity (authentication happens upstream)
    default_user_id: str = "local"

    # Server
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    frontend_url: str = "http://localhost:5173"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False
    )


# Global settings instance
settings = Settings()
