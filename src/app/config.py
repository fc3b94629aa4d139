from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional

from pydantic import AnyUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8-sig",
        case_sensitive=False,
        extra="ignore",
    )

    APP_ENV: str = "local"
    LOG_LEVEL: str = "INFO"
    FRONTEND_CORS_ORIGINS: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://localhost:8081"],
    )

    CATALOG_BASE_URL: str = "https://www.themealdb.com/api/json/v1/1"
    CATALOG_TIMEOUT_SECONDS: float = 10.0

    STORAGE_BACKEND: Literal["file", "memory", "supabase"] = "file"
    STORAGE_DIR: Path = Path(".recipe_box")
    SUPABASE_URL: Optional[AnyUrl] = None
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = None
    SUPABASE_KV_TABLE: str = "recipe_box_kv"

    FAVORITES_ROLLBACK_ON_FAILURE: bool = False


settings = Settings()
