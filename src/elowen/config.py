"""
Elowen - Configuration and settings.

Loaded from environment variables and an optional .env file.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ElowenSettings(BaseSettings):
    """
    Application settings.

    Only `openai_api_key` is required; everything else has a usable default.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # OpenAI
    openai_api_key: str
    routine_model: str = "gpt-4.1-mini"
    vision_model: str = "gpt-4.1-mini"

    # Application
    elowen_env: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Prompt logging
    # ELOWEN_LOG_PROMPTS=1 - log collaborator calls to local files (dev only)
    elowen_log_prompts: bool = False

    # Session defaults
    display_name: str = "Friend"
    timezone: str | None = None  # IANA name; None = system local time
    coach_reply_delay: float = Field(default=1.2, ge=0)

    @property
    def is_development(self) -> bool:
        return self.elowen_env == "development"

    @property
    def is_production(self) -> bool:
        return self.elowen_env == "production"


@lru_cache
def get_settings() -> ElowenSettings:
    """Get cached settings instance."""
    return ElowenSettings()


class _SettingsProxy:
    """Lazy proxy so importing modules never requires OPENAI_API_KEY."""

    _instance: ElowenSettings | None = None

    def __getattr__(self, name: str):
        if self._instance is None:
            self._instance = get_settings()
        return getattr(self._instance, name)


settings = _SettingsProxy()
