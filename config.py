"""Configuration management for the link shortener."""

from typing import Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Config(BaseSettings):
    """Application configuration."""

    # Storage settings
    data_file: str = Field(
        default="data/links.json",
        description="Path of the JSON snapshot holding all links"
    )

    autosave_interval_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Period of the background snapshot save"
    )

    # Server settings
    host: str = Field(
        default="0.0.0.0",
        description="Host to bind to"
    )

    port: int = Field(
        default=8974,
        description="Port to listen on"
    )

    # Link settings
    base_url: str = Field(
        default="http://localhost:8974",
        description="Base URL for short links when the request carries no host"
    )

    path_prefix: str = Field(
        default="",
        description="Path prefix for short URLs (e.g., '/s' for /s/abc123)"
    )

    short_code_length: int = Field(
        default=6,
        ge=1,
        description="Length of generated short codes"
    )

    max_collision_retries: int = Field(
        default=5,
        description="Extra attempts when a generated code is taken; negative overwrites on collision"
    )

    # Page settings
    top_default_limit: int = Field(
        default=50,
        description="Number of links on the top page when no limit is given"
    )

    stats_top_count: int = Field(
        default=5,
        ge=1,
        description="Number of links shown on the statistics page"
    )

    # Logging settings
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    log_file: Optional[str] = Field(
        default=None,
        description="Log file path (logs to stdout if not specified)"
    )

    log_json: bool = Field(
        default=False,
        description="Use JSON format for logs"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",  # Ignore extra environment variables
    }


def load_config() -> Config:
    """Load configuration from environment."""
    return Config()
