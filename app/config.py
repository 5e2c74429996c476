"""
Runtime configuration helpers for the civic reports API.

Loads DATABASE_URL and the remaining settings from the environment, falling
back to the .env file located in the project root.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from uuid import UUID

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve the project root
BASE_DIR = Path(__file__).resolve().parents[1]

# Absolute path to .env
ENV_PATH = BASE_DIR / ".env"

# Load .env defaults without overriding environment variables provided by the platform
load_dotenv(dotenv_path=ENV_PATH, override=False)


class Settings(BaseSettings):
    # Required; comes from the environment or .env
    database_url: str = Field(..., alias="DATABASE_URL")

    app_name: str = Field(default="SwachhMap", alias="APP_NAME")
    api_version: str = Field(default="0.1.0", alias="API_VERSION")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    cors_origins: str | None = Field(default=None, alias="CORS_ORIGINS")

    # Stand-in identity used by the create endpoint until real authentication lands.
    placeholder_user_id: UUID = Field(
        default=UUID("00000000-0000-0000-0000-000000000001"),
        alias="PLACEHOLDER_USER_ID",
    )
    placeholder_username: str = Field(default="anonymous-reporter", alias="PLACEHOLDER_USERNAME")

    # Geocoding / map rendering
    mapbox_token: str | None = Field(default=None, alias="MAPBOX_TOKEN")
    geocoder_user_agent: str = Field(default="civic-reports/0.1", alias="GEOCODER_USER_AGENT")
    geocoder_timeout: float = Field(default=10.0, alias="GEOCODER_TIMEOUT")

    # Object storage folder for uploaded report photos
    image_folder: str = Field(default="reports", alias="IMAGE_FOLDER")

    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def allowed_origins(self) -> list[str]:
        if not self.cors_origins:
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache()
def get_settings() -> Settings:
    return Settings()


__all__ = ["Settings", "get_settings"]
