"""Application configuration."""

import os
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from lechabo.errors import ConfigurationError

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

PLACEHOLDER_SUPABASE_URL = "https://your-project-id.supabase.co"
PLACEHOLDER_SUPABASE_KEY = "your-anon-key-here"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    storage_backend: Literal["local", "supabase"] = "local"
    data_dir: Path = Path(".lechabo")
    supabase_url: str | None = None
    supabase_anon_key: str | None = None
    supabase_photo_bucket: str = "photos"
    store_plaintext_secrets: bool = False
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def require_supabase_credentials(settings: Settings) -> tuple[str, str]:
    """Return the Supabase url and key, failing on missing or placeholder values."""
    url = (settings.supabase_url or "").strip()
    key = (settings.supabase_anon_key or "").strip()
    if not url or url == PLACEHOLDER_SUPABASE_URL:
        raise ConfigurationError("SUPABASE_URL is missing or still a placeholder")
    if not key or key == PLACEHOLDER_SUPABASE_KEY:
        raise ConfigurationError(
            "SUPABASE_ANON_KEY is missing or still a placeholder"
        )
    return url, key
