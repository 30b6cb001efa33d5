"""TodoDrive configuration: Pydantic BaseSettings loaded from .env."""

from __future__ import annotations

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    app_name: str = "TodoDrive"
    debug: bool = True
    log_level: str = "INFO"

    # Network
    host: str = "127.0.0.1"
    port: int = 8000
    api_prefix: str = "/api"
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:8000",
    ]

    # Supabase project
    supabase_url: str = "http://localhost:54321"
    supabase_anon_key: str = ""  # anon / publishable key
    supabase_jwt_secret: str = ""  # enables local token validation
    supabase_timeout_seconds: float = 10.0

    # Relational store
    todos_table: str = "todos"
    seed_sample_todos: bool = True

    # Object storage
    storage_bucket: str = "temp_1"
    storage_cache_control: str = "3600"
    storage_list_page_size: int = 100
    max_upload_mb: int = 50
    filename_max_length: int = 200

    # Session cookies
    access_cookie_name: str = "sb-access-token"
    refresh_cookie_name: str = "sb-refresh-token"
    cookie_secure: bool = False
    refresh_cookie_max_age_days: int = 400

    # Redirects
    login_path: str = "/login"
    home_path: str = "/supabase"

    uvicorn_workers: int = 1

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),
        env_file_encoding="utf-8",
        env_prefix="TODODRIVE_",
        extra="ignore",
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def assemble_cors_origins(cls, value: list[str] | str) -> list[str]:
        if isinstance(value, str) and not value.startswith("["):
            return [o.strip() for o in value.split(",") if o.strip()]
        if isinstance(value, list):
            return value
        return ["http://localhost:3000"]

    @field_validator("supabase_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
