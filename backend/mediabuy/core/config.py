from functools import lru_cache
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    app_name: str = "media-buying-api"
    log_level: str = "INFO"
    api_prefix: str = "/api"
    allowed_origins: List[str] = Field(
        default_factory=lambda: [
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ]
    )

    database_url: str = "postgresql+psycopg://postgres:postgres@db:5432/mediabuy"
    upload_dir: str = "uploads"
    max_upload_size: int = 10 * 1024 * 1024
    refresh_interval_seconds: int = 300
    refresh_on_startup: bool = True

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def split_origins(cls, value):
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value


@lru_cache
def get_settings() -> Settings:
    return Settings()
