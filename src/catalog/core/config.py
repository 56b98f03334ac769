from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    app_name: str = "Catalog Service"
    app_env: str = "development"  # development, testing, production
    debug: bool = False
    enable_openapi: bool = True

    # Logging
    log_level: str | None = None  # overrides the debug default, e.g. "WARNING"
    log_json: bool | None = None  # None: JSON unless debug

    # MongoDB
    mongodb_url: str = "mongodb://localhost:27017"
    mongodb_database: str = "catalog"
    mongodb_timeout_ms: int = 10_000  # Client-side operation timeout (CSOT)
    mongodb_server_selection_timeout_ms: int = 5_000
    mongodb_max_pool_size: int = 50

    # Sequence ids
    sequence_backend: Literal["mongo", "redis"] = "mongo"
    counters_collection: str = "counters"
    redis_sequence_prefix: str = "catalog:seq:"

    # Redis (only required when sequence_backend == "redis")
    redis_url: str | None = None  # e.g., "redis://localhost:6379/0"
    redis_pool_size: int = 10
    redis_socket_timeout_seconds: float = 5.0

    # Pagination
    default_page_size: int = 10
    max_page_size: int = 100

    # Shutdown
    shutdown_grace_period: int = 30

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    @field_validator("max_page_size", "default_page_size")
    @classmethod
    def validate_page_size(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Page sizes must be at least 1")
        return v

    @field_validator("cors_origins")
    @classmethod
    def validate_cors_origins(cls, v: list[str]) -> list[str]:
        """Validate CORS origins - reject wildcards when credentials are used."""
        for origin in v:
            if origin == "*":
                raise ValueError(
                    "CORS wildcard '*' is not allowed when allow_credentials=True. "
                    "Specify explicit origins instead."
                )
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
