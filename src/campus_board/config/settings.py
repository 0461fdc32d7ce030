"""
Configuration settings for the campus board client.

This module handles environment variable loading and configuration management
using Pydantic for validation and type safety.
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Campus board client configuration settings.

    All settings can be overridden via environment variables prefixed with
    ``CAMPUS_BOARD_``.
    """

    # Campus API Configuration
    api_base_url: str = Field(
        default="http://localhost:5000",
        description="Base URL for the campus community API"
    )
    api_timeout: float = Field(
        default=10.0,
        description="Timeout in seconds for API requests"
    )
    api_max_retries: int = Field(
        default=2,
        ge=0,
        description="Retry attempts for transport errors, 429 and 5xx responses"
    )
    api_retry_delay: float = Field(
        default=0.5,
        ge=0,
        description="Initial backoff in seconds between retries"
    )
    api_token: Optional[str] = Field(
        default=None,
        description="Bearer token sent with every request"
    )

    # Local Store Configuration
    storage_backend: Literal["sqlite", "memory"] = Field(
        default="sqlite",
        description="Backend for the persistent local store"
    )
    storage_url: str = Field(
        default="sqlite:///campus_board.db",
        description="SQLAlchemy URL used by the sqlite backend"
    )
    storage_namespace: str = Field(
        default="campus_board",
        description="Prefix for every key written to the local store"
    )

    # Board Behaviour
    page_size: int = Field(
        default=50,
        ge=1,
        description="Number of records requested per list call"
    )
    seed_samples: bool = Field(
        default=True,
        description="Seed sample records when a collection is empty"
    )
    refresh_after_write: bool = Field(
        default=True,
        description="Refetch a collection after a confirmed remote update or delete"
    )
    anonymous_user_id: str = Field(
        default="anonymous",
        description="User id used for ledger keys when no user is signed in"
    )

    # Logging Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )
    log_format: str = Field(
        default="text",
        description="Logging format (json or text)"
    )
    log_file: Optional[str] = Field(
        default="logs/campus_board.log",
        description="Rotating log file used outside debug mode; None disables it"
    )
    debug_mode: bool = Field(
        default=True,
        description="Enable debug mode"
    )

    model_config = SettingsConfigDict(
        env_prefix="CAMPUS_BOARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Configured settings instance
    """
    return Settings()
