"""
Configuration module for employee service.

This module provides centralized configuration management using Pydantic settings.
All configuration values can be overridden via environment variables or .env file.
"""

from typing import List, Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings for the employee service.

    Attributes:
        APP_NAME: Display name used in the OpenAPI docs
        DEBUG: Enable debug mode (shows API docs, detailed errors)
        HOST: Server bind address
        PORT: Server port number
        API_PREFIX: Base path prefix for all employee routes
        EMPLOYEE_API_BASE_URL: Base URL of the upstream mock employee API
        CONNECT_TIMEOUT: Connect timeout per upstream attempt in seconds
        READ_TIMEOUT: Read timeout per upstream attempt in seconds
        MAX_RETRY_ATTEMPTS: Total attempts per upstream call
        RETRY_INITIAL_BACKOFF: Wait before the second attempt in seconds
        RETRY_BACKOFF_MULTIPLIER: Exponential base applied to each further wait
        RETRY_MAX_BACKOFF: Ceiling for a single wait in seconds
        CACHE_ENABLED: Inject the in-memory employee cache
        CACHE_MAX_SIZE: Maximum cached entries (None keeps it unbounded)
        LOG_LEVEL: Logging level
        LOG_JSON: Render logs as JSON instead of console format
        CORS_ORIGINS: Comma-separated list of allowed origins
    """

    # Application configuration
    APP_NAME: str = Field(
        default="Employee API",
        description="Display name for the application",
    )
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode",
    )

    # Server configuration
    HOST: str = Field(
        default="0.0.0.0",
        description="Server bind address",
    )
    PORT: int = Field(
        default=8111,
        ge=1,
        le=65535,
        description="Server port number",
    )
    API_PREFIX: str = Field(
        default="/api/v1",
        description="Base path prefix for all routes",
    )

    # Upstream service
    EMPLOYEE_API_BASE_URL: str = Field(
        default="http://localhost:8112/api/v1/employee",
        description="Base URL of the mock employee API",
    )

    # HTTP client configuration
    CONNECT_TIMEOUT: float = Field(
        default=10.0,
        gt=0,
        description="Connect timeout per upstream attempt in seconds",
    )
    READ_TIMEOUT: float = Field(
        default=30.0,
        gt=0,
        description="Read timeout per upstream attempt in seconds",
    )

    # Retry configuration
    MAX_RETRY_ATTEMPTS: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Total number of attempts per upstream call",
    )
    RETRY_INITIAL_BACKOFF: float = Field(
        default=1.0,
        ge=0,
        description="Wait before the second attempt in seconds",
    )
    RETRY_BACKOFF_MULTIPLIER: float = Field(
        default=2.0,
        ge=1,
        description="Exponential base for retry backoff",
    )
    RETRY_MAX_BACKOFF: float = Field(
        default=4.0,
        ge=0,
        description="Maximum single retry wait in seconds",
    )

    # Cache configuration
    CACHE_ENABLED: bool = Field(
        default=True,
        description="Enable in-memory employee cache",
    )
    CACHE_MAX_SIZE: Optional[int] = Field(
        default=None,
        ge=1,
        description="Maximum cached entries, unbounded when unset",
    )

    # Logging configuration
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    LOG_JSON: bool = Field(
        default=False,
        description="Emit JSON structured logs",
    )

    CORS_ORIGINS: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("EMPLOYEE_API_BASE_URL")
    @classmethod
    def validate_url(cls, value: str) -> str:
        """
        Validate that the upstream URL is properly formatted.

        Args:
            value: The URL to validate

        Returns:
            The validated URL without trailing slash

        Raises:
            ValueError: If URL is invalid
        """
        if not value:
            raise ValueError("Service URL cannot be empty")

        value = value.rstrip("/")

        if not (value.startswith("http://") or value.startswith("https://")):
            raise ValueError(
                f"Service URL must start with http:// or https://, got: {value}"
            )

        return value

    @field_validator("API_PREFIX")
    @classmethod
    def validate_prefix(cls, value: str) -> str:
        """Normalize the route prefix to a leading slash and no trailing slash."""
        value = value.strip().rstrip("/")
        if value and not value.startswith("/"):
            value = f"/{value}"
        return value

    @property
    def cors_origins(self) -> List[str]:
        """Allowed CORS origins as a list."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


# Global settings instance
settings = Settings()
