"""Application settings."""

from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=PROJECT_ROOT / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Hosted backend ---
    SUPABASE_URL: str = "http://localhost:54321"
    SUPABASE_KEY: str = ""
    ACTIVITIES_TABLE: str = "activities"
    REQUEST_TIMEOUT_SECONDS: Optional[float] = None

    # --- Sessions ---
    SESSION_TIMEOUT_MINUTES: int = 60
    SESSION_CLEANUP_INTERVAL_SECONDS: int = 300

    # --- Charts & reports ---
    CHART_LOOKBACK_DAYS: int = 30
    UNCATEGORIZED_LABEL: str = "Uncategorized"

    LOG_LEVEL: str = "INFO"


settings = Settings()
