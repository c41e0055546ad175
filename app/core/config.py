"""Application settings, read from the environment and an optional ``.env``."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # env: dev|stage|prod
    APP_ENV: str = "dev"
    APP_TITLE: str = "Scene Scheduling Service"
    LOG_LEVEL: str = "INFO"

    # Window assumed for scheduled scenes that carry no usable duration.
    DEFAULT_SCENE_DURATION_MINUTES: int = Field(default=60, gt=0)

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalise_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown LOG_LEVEL {value!r}")
        return level


@lru_cache
def get_settings() -> Settings:
    return Settings()
