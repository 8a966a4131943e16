"""Application configuration."""

import os

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from paid_chat.domain.errors import MissingConfigurationError

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

PLACEHOLDER_SESSION_SECRET = "your-secret-key-at-least-32-characters"
MIN_SESSION_SECRET_LENGTH = 32


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    stripe_secret_key: str
    stripe_timeout_seconds: float = 10.0
    openai_api_key: str
    openai_timeout_seconds: float = 8.0
    moderation_model: str = "omni-moderation-latest"
    moderation_fail_open: bool = True
    xai_api_key: str
    xai_base_url: str = "https://api.x.ai/v1"
    chat_model: str = "grok-3"
    chat_max_tokens: int = 500
    chat_temperature: float = 0.8
    session_secret: str
    session_ttl_hours: int = 24
    base_url: str
    checkout_product_name: str = "Chat Session with Amanda Nyong"
    checkout_product_description: str = (
        "One private chat session with Amanda - your AI friend"
    )
    checkout_unit_amount_cents: int = 500
    checkout_currency: str = "usd"
    environment: str = _ENVIRONMENT
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @field_validator("session_secret")
    @classmethod
    def _check_session_secret(cls, value: str) -> str:
        if value == PLACEHOLDER_SESSION_SECRET:
            raise ValueError("session_secret must not be the placeholder value")
        if len(value) < MIN_SESSION_SECRET_LENGTH:
            raise ValueError(
                f"session_secret must be at least {MIN_SESSION_SECRET_LENGTH} characters"
            )
        return value

    @field_validator("base_url")
    @classmethod
    def _strip_base_url(cls, value: str) -> str:
        return value.rstrip("/")

    @property
    def secure_cookies(self) -> bool:
        """Only mark cookies secure when served over HTTPS in production."""
        return self.environment == "production"


def load_settings() -> Settings:
    """Load settings, failing loudly when required values are missing."""
    try:
        return Settings()
    except ValidationError as exc:
        fields = sorted(
            {".".join(str(part) for part in error["loc"]) for error in exc.errors()}
        )
        raise MissingConfigurationError(
            f"Invalid or missing configuration: {', '.join(fields)}"
        ) from exc
