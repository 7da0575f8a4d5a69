from functools import lru_cache
import logging
from typing import Literal

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.core.logger import setup_logger, init_sentry


class Settings(BaseSettings):
    # Application settings
    ENVIRONMENT: str = "development"  # Options: development, production
    API_DOMAIN: str = "http://localhost:8000"
    APP_NAME: str = "Advantech Website API"
    APP_VERSION: str = "1.0.0"
    APP_DESCRIPTION: str = """
Backend for the company website. Receives quote requests and contact messages
submitted from the public site.

## Endpoints

| Area | Description |
|------|-------------|
| **Quotes** | Submit a quote request, list recent requests, fetch one request by ID. |
| **Contact** | Submit a contact message, list recent messages, fetch one message by ID. |
| **Health** | Storage reachability and connection pool gauges. |

## Rate Limiting

Submissions are limited per client address: 5 quote requests and
10 contact messages per hour.
"""
    DEBUG: bool = False

    # CORS settings
    CORS_ALLOW_ORIGINS: list[str] = ["http://localhost:3000"]
    CORS_ALLOW_CREDENTIALS: bool = True

    # Client address resolution
    TRUST_PROXY_HEADERS: bool = False

    # Region tried first for phone numbers written without a country code
    DEFAULT_PHONE_REGION: str = "US"

    # Storage settings
    STORAGE_BACKEND: Literal["document", "sql"] = "document"
    DATA_DIR: str = "data"

    # Database settings (used when STORAGE_BACKEND is "sql")
    DATABASE_URL: str = "sqlite+aiosqlite:///./data/website.db"
    TEST_DATABASE_URL: str = "sqlite+aiosqlite:///:memory:"
    DB_POOL_SIZE: int = 20
    DB_MAX_OVERFLOW: int = 0
    DB_POOL_TIMEOUT: float = 2.0  # seconds to wait for a free connection
    DB_POOL_RECYCLE: int = 30  # seconds

    # Redis settings
    REDIS_URL: str = "redis://localhost:6379/0"

    # Rate limiting settings
    RATE_LIMIT_BACKEND: Literal["memory", "redis"] = "memory"
    QUOTE_RATE_LIMIT_REQUESTS: int = 5
    QUOTE_RATE_LIMIT_WINDOW: int = 3600  # seconds
    CONTACT_RATE_LIMIT_REQUESTS: int = 10
    CONTACT_RATE_LIMIT_WINDOW: int = 3600  # seconds

    # Listing settings
    LIST_PAGE_SIZE: int = 50

    # Notification settings
    NOTIFICATION_RECIPIENT: str = "sales@advantech.example"

    # Sentry settings
    SENTRY_DSN: str = ""
    SENTRY_ENVIRONMENT: str = "development"
    SENTRY_TRACES_SAMPLE_RATE: float = 0.1

    model_config: SettingsConfigDict = SettingsConfigDict(  # type: ignore
        env_file=".env",
        extra="ignore",
    )

    @model_validator(mode="after")
    def _validate_production_storage(self) -> "Settings":
        """Refuse a SQLite database file in production."""
        if self.ENVIRONMENT != "production" or self.STORAGE_BACKEND != "sql":
            return self

        if self.DATABASE_URL.startswith("sqlite"):
            raise ValueError(
                "ENVIRONMENT is 'production' and STORAGE_BACKEND is 'sql' but "
                "DATABASE_URL points at SQLite. Set DATABASE_URL to a "
                "PostgreSQL URL via environment variables or .env file."
            )

        return self


@lru_cache()
def get_settings() -> Settings:
    return Settings()  # type: ignore


settings = get_settings()

# Initialize Sentry once globally (non-blocking, runs in background threads)
if not settings.DEBUG:
    init_sentry(
        dsn=settings.SENTRY_DSN,
        environment=settings.SENTRY_ENVIRONMENT,
        traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
    )

# Each logger gets its own log file and Sentry tag
app_logger = setup_logger(
    name="app_logger",
    log_file="logs/app.log",
    level=logging.INFO,
    sentry_tag="app",
)
database_logger = setup_logger(
    name="database_logger",
    log_file="logs/database.log",
    level=logging.INFO,
    sentry_tag="database",
)
request_logger = setup_logger(
    name="request_logger",
    log_file="logs/requests.log",
    level=logging.INFO,
    sentry_tag="request",
)
storage_logger = setup_logger(
    name="storage_logger",
    log_file="logs/storage.log",
    level=logging.INFO,
    sentry_tag="storage",
)
redis_logger = setup_logger(
    name="redis_logger",
    log_file="logs/redis.log",
    level=logging.INFO,
    sentry_tag="redis",
)
rate_limit_logger = setup_logger(
    name="rate_limit_logger",
    log_file="logs/rate_limit.log",
    level=logging.INFO,
    sentry_tag="rate_limit",
)
notification_logger = setup_logger(
    name="notification_logger",
    log_file="logs/notification.log",
    level=logging.INFO,
    sentry_tag="notification",
)

__all__ = [
    "settings",
    "app_logger",
    "database_logger",
    "request_logger",
    "storage_logger",
    "redis_logger",
    "rate_limit_logger",
    "notification_logger",
]
