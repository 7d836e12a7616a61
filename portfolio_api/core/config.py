"""
Portfolio API - Settings
========================

Environment-driven configuration. Values come from the process environment
or a local ``.env`` file; names are case-insensitive.
"""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Server
    APP_NAME: str = "Portfolio API"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: Literal["development", "staging", "production", "test"] = "development"
    DEBUG: bool = False
    PORT: int = 5000
    API_PREFIX: str = "/api"

    # Browser origins allowed by CORS; FRONTEND_URL is always included
    FRONTEND_URL: str = "http://localhost:5173"
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]

    # Storage
    DATABASE_URL: str = "sqlite+aiosqlite:///./portfolio.db"
    DATABASE_POOL_SIZE: int = 5
    DATABASE_MAX_OVERFLOW: int = 10
    DATABASE_ECHO: bool = False

    # Admin tokens
    SECRET_KEY: str = "CHANGE-ME-IN-PRODUCTION-USE-LONG-RANDOM-STRING"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 24 * 60

    # Bootstrap account for POST /admin/initialize
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: str = "admin123"
    ADMIN_EMAIL: str = "admin@example.com"

    # Contact form notifications; unset SMTP_HOST means log only
    SMTP_HOST: str | None = None
    SMTP_PORT: int = 587
    SMTP_USER: str | None = None
    SMTP_PASSWORD: str | None = None
    SMTP_FROM: str = "noreply@portfolio.local"
    ADMIN_NOTIFY_EMAIL: str | None = None

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def allowed_origins(self) -> list[str]:
        if self.FRONTEND_URL in self.CORS_ORIGINS:
            return list(self.CORS_ORIGINS)
        return [*self.CORS_ORIGINS, self.FRONTEND_URL]


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
