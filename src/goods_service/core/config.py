from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    app_name: str = "Goods Service"
    app_env: str = "development"  # development, testing, production
    debug: bool = False
    enable_openapi: bool = True

    # Database
    database_url: str
    database_pool_size: int = 5
    database_max_overflow: int = 10
    database_ssl_mode: str = "prefer"  # disable, prefer, require, verify-ca, verify-full
    database_statement_cache_size: int = 100

    # Redis (optional - app works without it)
    redis_url: str | None = None  # e.g., "redis://localhost:6379/0"
    redis_pool_size: int = 10

    # Cache
    cache_ttl_seconds: int = 60
    cache_invalidate_listings: bool = True  # False keeps listings stale until TTL expiry

    # Pagination
    default_page_limit: int = 10
    max_page_limit: int = 100

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Metrics
    metrics_api_key: str | None = None  # If set, /metrics requires this key

    @field_validator("database_ssl_mode")
    @classmethod
    def validate_ssl_mode(cls, v: str) -> str:
        allowed = {"disable", "prefer", "require", "verify-ca", "verify-full"}
        if v not in allowed:
            raise ValueError(f"DATABASE_SSL_MODE must be one of: {', '.join(sorted(allowed))}")
        return v

    @field_validator("cors_origins")
    @classmethod
    def validate_cors_origins(cls, v: list[str]) -> list[str]:
        """Reject wildcards since CORS is configured with allow_credentials=True."""
        for origin in v:
            if origin == "*":
                raise ValueError(
                    "CORS wildcard '*' is not allowed when allow_credentials=True. "
                    "Specify explicit origins instead."
                )
        return v

    @field_validator("cache_ttl_seconds")
    @classmethod
    def validate_cache_ttl(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("CACHE_TTL_SECONDS must be positive")
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
