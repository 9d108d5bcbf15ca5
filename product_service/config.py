"""
Configuration and settings for the product service.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    api_prefix: str = Field(default="")

    # Relational metadata store (Postgres expected, any SQLAlchemy URL works)
    database_url: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("DATABASE_URL", "DBCONNSTR")
    )

    # Redis backs both the cache index and the event bus
    redis_url: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("REDIS_URL", "REDISCONNSTR")
    )
    event_topic: str = Field(default="product.created")

    # S3-compatible object storage (MinIO, AWS)
    s3_endpoint: Optional[str] = Field(default=None)
    s3_region: Optional[str] = Field(default=None)
    s3_bucket: Optional[str] = Field(default=None)
    s3_access_key: Optional[str] = Field(default=None)
    s3_secret_key: Optional[str] = Field(default=None)

    # Development toggles
    use_in_memory_backends: bool = Field(
        default=False,
        validation_alias=AliasChoices(
            "PRODUCT_SERVICE_USE_IN_MEMORY_BACKENDS", "use_in_memory_backends"
        ),
    )

    app_host: str = Field(default="0.0.0.0")
    app_port: int = Field(default=9090)
    log_level: str = Field(default="info")

    @field_validator("redis_url")
    @classmethod
    def _normalize_redis_url(cls, value: Optional[str]) -> Optional[str]:
        # REDISCONNSTR historically held a bare host:port pair.
        if value and "://" not in value:
            return f"redis://{value}"
        return value or None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
