"""
Application configuration using Pydantic Settings.
Every field can be set from the environment (case-insensitive) or a .env file.
"""

from typing import List
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parent.parent

LOG_FORMATS = ("text", "json")


def _split_csv(value, default: List[str]) -> List[str]:
    """Accept a list or a comma-separated string; blank means the default."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return list(default)
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return value


class Settings(BaseSettings):
    """Runtime settings for the API, the database and logging."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    environment: str = Field(default="development", description="development, testing or production")
    debug: bool = False

    # API
    api_title: str = "crudhub"
    api_version: str = "1.0.0"
    api_prefix: str = "/api/v1"
    host: str = "0.0.0.0"
    port: int = 8080

    # Database
    database_url: str = Field(
        default=f"sqlite:///{PROJECT_ROOT / 'crudhub.db'}",
        description="SQLAlchemy URL; PostgreSQL in production"
    )
    database_echo: bool = False
    db_pool_size: int = 25
    db_max_overflow: int = 0
    db_pool_recycle_seconds: int = 300
    db_connect_timeout_seconds: int = 10

    # HTTP
    cors_origins: str | List[str] = Field(default=["http://localhost:3000", "http://localhost:8080"])
    cors_allow_credentials: bool = True
    cors_allow_methods: List[str] = Field(default=["GET", "POST", "PUT", "DELETE", "OPTIONS"])
    cors_allow_headers: List[str] = Field(default=["Content-Type", "Authorization", "X-Requested-With"])
    trusted_hosts: str | List[str] = Field(
        default=["*"],
        description="Host headers accepted in production"
    )

    # Lists
    default_page_size: int = Field(default=10, ge=1)
    max_page_size: int = Field(default=100, ge=1)

    # Logging
    log_level: str = "INFO"
    log_format: str = Field(default="text", description="text or json")

    # Invoicing
    invoice_number_max_retries: int = Field(
        default=3,
        ge=1,
        description="Attempts at inserting an invoice under a fresh number"
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        return _split_csv(v, ["http://localhost:3000", "http://localhost:8080"])

    @field_validator("trusted_hosts", mode="before")
    @classmethod
    def parse_trusted_hosts(cls, v):
        return _split_csv(v, ["*"])

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        if v.lower() not in LOG_FORMATS:
            raise ValueError(f"log_format must be one of {', '.join(LOG_FORMATS)}")
        return v.lower()

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    def validate_environment(self) -> None:
        """Reject settings that are only acceptable outside production."""
        if self.is_sqlite:
            raise ValueError("DATABASE_URL must point to a server database in production")
        if self.debug:
            raise ValueError("DEBUG must be disabled in production")


@lru_cache()
def get_settings() -> Settings:
    """Cached settings; production settings are checked once on first use."""
    settings = Settings()

    if settings.is_production:
        settings.validate_environment()

    return settings
