"""Configuration management for finnexus.

Uses pydantic-settings to read configuration from environment variables and
an optional .env file. Settings are loaded once per process through
get_settings(); call get_settings.cache_clear() to reload.
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Application-wide settings."""

    model_config = SettingsConfigDict(
        env_prefix="FINNEXUS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    storage_backend: Literal["auto", "local", "remote"] = Field(
        default="auto",
        description="Storage backend: local SQLite, remote Supabase, or auto-detect",
    )
    db_path: Optional[str] = Field(
        default=None,
        description="Path to the local SQLite database file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Logging level for the root logger",
    )
    company_name: str = Field(
        default="FinNexus Enterprise",
        description="Company name printed on reports",
    )


class SupabaseSettings(BaseSettings):
    """Remote table store configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SUPABASE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    url: str = Field(default="", description="Supabase project URL")
    anon_key: str = Field(default="", description="Supabase anon key")

    @property
    def configured(self) -> bool:
        return bool(self.url and self.anon_key)


class AISettings(BaseSettings):
    """Chat-completion endpoint configuration."""

    model_config = SettingsConfigDict(
        env_prefix="AI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    base_url: str = Field(
        default="https://openrouter.ai/api/v1",
        description="OpenAI-compatible API base URL",
    )
    model: str = Field(
        default="xiaomi/mimo-v2-flash:free",
        description="Chat model name",
    )
    api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("AI_API_KEY", "OPENAI_API_KEY"),
        description="API key for the chat endpoint",
    )
    timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Request timeout",
    )


class Settings:
    """Root settings container.

    Aggregates all sub-settings for easy access.
    """

    def __init__(
        self,
        app: Optional[AppSettings] = None,
        supabase: Optional[SupabaseSettings] = None,
        ai: Optional[AISettings] = None,
    ):
        self.app = app or AppSettings()
        self.supabase = supabase or SupabaseSettings()
        self.ai = ai or AISettings()


@lru_cache()
def get_settings() -> Settings:
    """Get application settings (cached)."""
    return Settings()
