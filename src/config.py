"""Application configuration using Pydantic BaseSettings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.constants import (
    DEFAULT_GREETING_TEXT,
    FACEBOOK_API_TIMEOUT_SECONDS,
    FACEBOOK_GRAPH_API_BASE_URL,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    The app secret, verify token, page access token and server URL are
    required; constructing Settings without them raises, which aborts
    startup.
    """

    model_config = SettingsConfigDict(
        # Load .env first, then .env.local (for local/test overrides)
        env_file=[".env", ".env.local"],
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Facebook Configuration
    facebook_app_secret: str = Field(
        ..., min_length=1, description="Facebook App secret for signature checks"
    )
    facebook_verify_token: str = Field(
        ..., min_length=1, description="Webhook verification token"
    )
    facebook_page_access_token: str = Field(
        ..., min_length=1, description="Facebook Page access token"
    )
    server_url: str = Field(
        ...,
        min_length=1,
        description="Externally reachable base URL used for asset links",
    )

    graph_api_base_url: str = Field(
        default=FACEBOOK_GRAPH_API_BASE_URL,
        description="Graph API host (override for testing)",
    )
    facebook_api_timeout_seconds: float = Field(
        default=FACEBOOK_API_TIMEOUT_SECONDS,
        description="Timeout for Facebook Graph API calls (seconds)",
    )

    # Thread settings pushed once at boot
    configure_thread_settings_on_startup: bool = Field(
        default=True,
        description="Set greeting, get-started button and menu at startup",
    )
    greeting_text: str = Field(
        default=DEFAULT_GREETING_TEXT,
        description="Greeting shown to users before they start a thread",
    )

    # Environment
    env: Literal["local", "railway", "prod"] = Field(
        default="local", description="Current environment"
    )
    log_level: str = Field(default="INFO", description="Python logging level")

    # Sentry Configuration
    sentry_dsn: str | None = Field(
        default=None, description="Sentry DSN for error tracking (optional)"
    )
    sentry_traces_sample_rate: float = Field(
        default=1.0, description="Sentry traces sample rate (0.0 to 1.0)"
    )

    # Logfire Configuration
    logfire_token: str | None = Field(
        default=None, description="Pydantic Logfire token for observability"
    )

    @field_validator("server_url", "graph_api_base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
