"""Configuration and environment settings for ledgerbook."""

from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings, read from LEDGERBOOK_* variables or a .env file."""

    db_path: Optional[str] = None
    user: str = "local"
    groq_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("LEDGERBOOK_GROQ_API_KEY", "GROQ_API_KEY"),
    )
    ai_model: str = "llama-3.3-70b-versatile"
    ai_temperature: float = 0.2
    ai_timeout_seconds: float = 20.0
    log_level: str = "WARNING"

    model_config = SettingsConfigDict(
        env_prefix="LEDGERBOOK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


def get_settings() -> Settings:
    """Return an instance of the application settings."""
    return Settings()
