"""Application configuration via environment variables."""

import json
from typing import List, Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Record store — DATABASE_URL MUST be set via environment / .env (no default)
    DATABASE_URL: str
    DATABASE_ACCESS_KEY: str = ""
    DATABASE_POOL_SIZE: int = 5

    # Auth — sessions are issued by the hosted auth service
    AUTH_JWT_SECRET: str
    AUTH_JWT_ALGORITHM: str = "HS256"
    AUTH_JWT_AUDIENCE: str = "authenticated"
    LOGIN_ROUTE: str = "/login"

    # App
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "info"
    CORS_ORIGINS: str = '["http://localhost:8080"]'
    RATE_LIMIT_DEFAULT: str = "120/minute"

    # Query cache / notifications
    QUERY_STALE_SECONDS: float = 60.0
    QUERY_CACHE_MAX_ENTRIES: int = 256
    NOTIFICATION_BUFFER_SIZE: int = 50

    # Record-keeping policies
    JOB_HISTORY_EDIT_POLICY: Literal["overwrite", "append"] = "overwrite"
    DELETE_CASCADE_POLICY: Literal["job_history", "none"] = "job_history"

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS_ORIGINS JSON string into a list."""
        try:
            return json.loads(self.CORS_ORIGINS)
        except (json.JSONDecodeError, TypeError):
            return ["http://localhost:8080"]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


settings = Settings()
