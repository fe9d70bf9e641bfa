"""Application configuration."""
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Tracker settings loaded from environment variables."""

    # App
    app_name: str = "GOD X Fitness Tracker Core"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # Snapshot storage
    storage_url: str = "sqlite:///fitcore.db"
    storage_echo: bool = False
    storage_key_prefix: str = "gx_"

    # Default user targets
    default_user_id: str = "user_1"
    default_user_name: str = "Użytkownik X"
    default_target_calories: int = 2500
    default_target_protein: float = 160
    default_target_carbs: float = 250
    default_target_fat: float = 70

    # Open Food Facts
    off_api_url: str = "https://world.openfoodfacts.org/api/v2"
    off_user_agent: str = "GOD X Fitness Tracker/1.0 (contact@godx.app)"
    off_timeout: float = 10.0
    lookup_result_limit: int = 5

    # Anthropic API (image recognition)
    anthropic_api_key: Optional[str] = None
    claude_vision_model: str = "claude-sonnet-4-20250514"
    claude_max_tokens: int = 1024

    # Device sync
    health_sync_interval_sec: float = 15.0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
