"""
Engine configuration using Pydantic Settings.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from SEATMAP_* environment variables (or .env)."""

    model_config = SettingsConfigDict(
        env_prefix="SEATMAP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"

    # Viewport height used to flip layout coordinates for GeoJSON export.
    export_view_box_height: float = 800.0

    cors_origins: list[str] = ["*"]


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
