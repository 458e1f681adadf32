# ABOUTME: Application configuration using Pydantic Settings for environment variables
# ABOUTME: Provides type-safe access to page URLs, HTTP client, database and logging settings

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

WIKIPEDIA_BASE_URL = "https://en.wikipedia.org/wiki"

DEFAULT_RELEASE_PAGES = [f"{WIKIPEDIA_BASE_URL}/IPhone_OS_{major}" for major in range(2, 17)] + [
    f"{WIKIPEDIA_BASE_URL}/IOS_17"
]


class Config(BaseSettings):
    """Application configuration with environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix="APPLEDATA_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore unknown environment variables
    )

    # Source pages
    device_list_url: str = Field(
        default=f"{WIKIPEDIA_BASE_URL}/List_of_iPhone_models", description="Page holding the device tables"
    )
    version_history_url: str = Field(
        default=f"{WIKIPEDIA_BASE_URL}/IOS_version_history", description="Summary page with one anchor per release"
    )
    release_pages: list[str] = Field(
        default_factory=lambda: list(DEFAULT_RELEASE_PAGES), description="Per-major-release pages, scanned in order"
    )
    processor_page_url: str = Field(
        default=f"{WIKIPEDIA_BASE_URL}/List_of_iPhone_models#iPhone_systems-on-chips",
        description="Page holding the System-on-chip table",
    )
    theiphonewiki_processor_url: str = Field(
        default="https://theiphonewiki.com/wiki/Application_Processor",
        description="Alternative processor source with one headline per chip",
    )
    device_family_prefixes: list[str] = Field(
        default_factory=lambda: ["iPhone"], description="Model family names recognised in device table headers"
    )

    # HTTP Configuration
    user_agent: str = Field(
        default="appledata/0.1 (device catalogue sync; python-httpx)", description="User-Agent sent to wikis"
    )
    request_timeout: float = Field(default=30.0, description="Per-request timeout in seconds")
    verify_tls: bool = Field(default=True, description="Verify TLS certificates of fetched pages")
    max_retries: int = Field(default=3, description="Attempts per page before a fetch is reported as failed")
    requests_per_second: float = Field(default=2.0, description="Politeness limit for requests to a single wiki")

    # Database Configuration
    database_url: str = Field(
        default="sqlite+aiosqlite:///./appledata.sqlite", description="Database URL for async SQLite operations"
    )
    seed_defaults: bool = Field(default=True, description="Insert early processors and missing iOS 10 releases")

    # Logging Configuration
    log_mode: Literal["interactive", "production"] = Field(default="interactive", description="Logging output mode")

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Logging verbosity level"
    )

    log_file: Path | None = Field(default=None, description="Custom log file path (overrides default)")


# Global config instance - lazy loaded when first accessed
_config_instance: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance.

    Creates the config on first access, subsequent calls return the same instance.

    Returns:
        Config: The application configuration instance
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = Config()
    return _config_instance


def reload_config() -> Config:
    """Reload configuration from environment variables.

    Useful for testing or when environment variables change at runtime.

    Returns:
        Config: A fresh configuration instance
    """
    global _config_instance
    _config_instance = Config()
    return _config_instance
