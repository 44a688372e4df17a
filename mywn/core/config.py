"""Configuration management for mywn."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # SQLite Configuration
    database_path: str = Field(default="data/mywn.db", description="SQLite database file path")
    database_version: int = Field(
        default=1,
        ge=1,
        description="Expected schema version; a mismatch with the stored version wipes all data",
    )
    sqlite_journal_mode: Literal["DELETE", "TRUNCATE", "PERSIST", "MEMORY", "WAL", "OFF"] = Field(
        default="WAL", description="SQLite journal_mode pragma applied on open"
    )

    # Pydantic Logfire Configuration (optional)
    logfire_token: str | None = Field(default=None, description="Pydantic Logfire token for observability")
    environment: str = Field(default="development", description="Deployment environment reported to Logfire")


# Application Constants
class Constants:
    """Application-wide constants."""

    # Tables
    TABLE_TASKS: str = "tasks"
    TABLE_LISTS: str = "lists"

    # Task columns
    KEY_TASKS_ID: str = "_id"
    KEY_TASKS_LIST_ID: str = "list_id"
    KEY_TASKS_DESCRIPTION: str = "description"
    KEY_TASKS_IS_COMPLETE: str = "is_complete"
    KEY_TASKS_CREATED_AT: str = "created_at"

    # List columns
    KEY_LISTS_ID: str = "_id"
    KEY_LISTS_NAME: str = "name"
    KEY_LISTS_ORDER_NO: str = "order_no"

    # Sentinel returned by inserts that did not take effect
    INSERT_FAILED_ID: int = -1

    # Schema
    LIST_NAME_MAX_LENGTH: int = 255


def get_settings() -> Settings:
    """Get application settings (singleton pattern)."""
    return Settings()


# Global settings instance
settings = get_settings()
constants = Constants()
