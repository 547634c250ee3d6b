"""Application configuration — loaded from environment variables."""

from __future__ import annotations

import os
from functools import lru_cache

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from chat_gateway.domain.exceptions import ConfigurationError

API_KEY_ENV_VAR = "OPENAI_API_KEY"


class Settings(BaseSettings):
    """Central configuration loaded from env vars (or ``.env`` file)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    openai_base_url: str = "https://api.openai.com/v1/"
    openai_model: str = "gpt-4o-mini"
    openai_max_tokens: int = Field(default=256, gt=0)
    openai_temperature: float = Field(default=0.2, ge=0.0, le=2.0)
    openai_api_key: SecretStr | None = None
    openai_timeout_seconds: float = Field(default=30.0, gt=0)
    openai_max_retries: int = Field(default=3, ge=0)
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the singleton application settings (cached after first call)."""
    return Settings()


def resolve_api_key(settings: Settings) -> str:
    """Return the provider API key: environment override first, then settings.

    Raises :class:`ConfigurationError` when neither source supplies a key so
    the service refuses to start instead of sending unauthenticated requests.
    """
    env_key = os.environ.get(API_KEY_ENV_VAR, "").strip()
    if env_key:
        return env_key

    if settings.openai_api_key is not None:
        configured = settings.openai_api_key.get_secret_value().strip()
        if configured:
            return configured

    raise ConfigurationError(
        "OpenAI API key is not configured. "
        f"Set the {API_KEY_ENV_VAR} environment variable or configure it in settings."
    )
