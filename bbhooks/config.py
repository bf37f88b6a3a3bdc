"""
Application configuration management.
"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Webhook
    webhook_secret: Optional[str] = None

    # Bitbucket Server API
    bitbucket_token: Optional[str] = None
    api_timeout_seconds: float = 30.0
    api_max_retries: int = 3
    api_base_delay: float = 1.0

    # Registered sources and navigators (YAML)
    sources_file: Optional[str] = None

    # Application
    log_level: str = "INFO"


# Global settings instance
settings = Settings()
