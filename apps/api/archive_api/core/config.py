"""
Application configuration via Pydantic Settings.

Built once by create_app() and injected into the repository and services;
nothing below the router layer reads the environment.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from archive_api.core.enums import AggregationMode


class Settings(BaseSettings):
    """Settings loaded from ARCHIVE_* environment variables."""

    # === Database ===
    database_url: str = "sqlite+aiosqlite:///./archive.db"
    sql_echo: bool = False

    # === Logging ===
    log_level: str = "INFO"

    # === Facet aggregation ===
    facet_aggregation: AggregationMode = AggregationMode.auto
    remember_unavailable_aggregation: bool = True
    facet_concurrency: int = Field(default=8, ge=1)

    # === Timeouts (seconds) ===
    aggregation_timeout_seconds: float = Field(default=5.0, gt=0)
    query_timeout_seconds: float = Field(default=10.0, gt=0)
    facet_timeout_seconds: float = Field(default=15.0, gt=0)
    transient_retries: int = Field(default=1, ge=0)

    # === Paging ===
    default_page_size: int = Field(default=24, ge=0)
    max_page_size: int = Field(default=100, ge=1)

    # === Presentation ===
    image_proxy_base: str = "/api/smugmug/images"
    disconnect_poll_seconds: float = Field(default=0.1, gt=0)

    model_config = SettingsConfigDict(
        env_prefix="ARCHIVE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )
