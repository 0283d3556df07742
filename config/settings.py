"""
Scraper settings: source site URLs, request pacing and browser options.
Each field can be overridden by an environment variable of the same name
(STOCKANALYSIS_BASE_URL, REQUEST_RATE_LIMIT, ...) or from a .env file.
"""

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Settings for fetching and parsing source pages."""

    # Source sites
    stockanalysis_base_url: str = "https://stockanalysis.com"
    valueinvesting_base_url: str = "https://valueinvesting.io"
    gurufocus_base_url: str = "https://www.gurufocus.com"

    # Scraping (seconds between requests)
    request_rate_limit: float = 0.5
    scrape_timeout: int = 30
    max_retries: int = 3
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )

    # Headless browser for JavaScript-rendered pages
    browser_headless: bool = True
    browser_timeout_ms: int = 60000

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache
def get_settings() -> Settings:
    """Settings are read once per process."""
    return Settings()


settings = get_settings()
