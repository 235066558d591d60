"""Application configuration using Pydantic Settings."""
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    """Application settings."""

    # Application
    APP_NAME: str = "Tool Scout"
    APP_VERSION: str = "1.0.0"
    APP_ENV: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "./logs"

    # API
    API_PREFIX: str = "/api"
    API_KEY_NAME: str = "X-API-Key"
    API_KEY_SECRET: str = "changeme"
    CORS_ORIGINS: List[str] = ["*"]

    # Crawler
    CRAWLER_HEADLESS: bool = True
    CRAWLER_USER_AGENT: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )
    CRAWLER_DEFAULT_DEPTH: int = 2
    CRAWLER_CONTENT_MAX_PAGES: int = 20
    CRAWLER_DESCRIPTION_MAX_PAGES: int = 10
    CRAWLER_AFFILIATE_MAX_LINKS: int = 10
    CRAWLER_CONTENT_CAP: int = 100_000
    CRAWLER_PAGE_TIMEOUT: int = 30  # seconds
    CRAWLER_VALIDATION_TIMEOUT: int = 30

    # Redirect prober
    PROBE_TIMEOUT: float = 10.0
    PROBE_MAX_HOPS: int = 5
    DNS_TIMEOUT: float = 2.0

    # Screenshots
    SCREENSHOT_DIR: str = "./public/images/tools"
    SCREENSHOT_PUBLIC_PREFIX: str = "/images/tools"
    SCREENSHOT_BATCH_SIZE: int = 3
    SCREENSHOT_BATCH_DELAY: float = 2.0

    # Storage
    DATABASE_PATH: str = "./storage/tools.db"

    # Gemini
    GEMINI_API_KEY: Optional[str] = None
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta"
    GEMINI_MODEL: str = "gemini-2.0-flash"
    GEMINI_TIMEOUT: float = 120.0
    GEMINI_MAX_ATTEMPTS: int = 1

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


settings = Settings()


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings (overridable in tests)."""
    return settings
