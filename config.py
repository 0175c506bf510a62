"""Configuration management for the short-link service."""

from typing import Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Config(BaseSettings):
    """Application configuration."""

    # Server settings
    host: str = Field(
        default="0.0.0.0",
        description="Host to bind to"
    )

    port: int = Field(
        default=8080,
        description="Port to listen on"
    )

    # Short link settings
    base_url: str = Field(
        default="http://localhost:8080",
        description="Base URL for generating short URLs when the request carries no host"
    )

    path_prefix: str = Field(
        default="",
        description="Path prefix for short URLs (e.g., '/s' for /s/abc123)"
    )

    token_length: int = Field(
        default=6,
        ge=1,
        description="Length of generated short codes"
    )

    alloc_max_attempts: int = Field(
        default=10,
        ge=1,
        description="Candidate short codes tried before allocation fails"
    )

    enable_custom_codes: bool = Field(
        default=True,
        description="Allow users to provide custom short codes"
    )

    default_validity_minutes: int = Field(
        default=30,
        ge=1,
        description="Link lifetime used when a request gives none"
    )

    max_validity_minutes: int = Field(
        default=525600,
        ge=1,
        description="Longest lifetime a link may request (one year)"
    )

    # Store settings
    reaper_interval_ms: int = Field(
        default=300000,
        gt=0,
        description="Interval between expiry sweeps in milliseconds"
    )

    lock_stripes: int = Field(
        default=64,
        ge=1,
        description="Number of lock stripes guarding the in-memory stores"
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

    @property
    def reaper_interval_seconds(self) -> float:
        return self.reaper_interval_ms / 1000.0


def load_config() -> Config:
    """Load configuration from environment."""
    return Config()
