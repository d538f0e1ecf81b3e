"""
FastAPI application configuration using Pydantic Settings.

Provides centralized configuration for:
- MongoDB connection
- API settings (bind address, CORS)
- Static frontend serving in production
- Logging

Variable names match the deployment environment directly (ENV, PORT,
MONGODB_URI, ...). Settings are also loaded from a .env file, which is
required outside production.
"""

from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from todo_api.errors import ConfigurationError

ENV_FILE = ".env"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Environment variables are loaded from:
    1. System environment
    2. .env file in the current directory
    3. Default values defined below
    """

    # =========================================================================
    # API Settings
    # =========================================================================

    app_name: str = Field(
        default="Todo API",
        description="Application name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="API version"
    )
    env: str = Field(
        default="development",
        description="Environment: development|staging|production"
    )

    host: str = Field(
        default="0.0.0.0",
        description="API bind host"
    )
    port: int = Field(
        default=5001,
        description="API bind port",
        gt=0,
        lt=65536
    )

    # =========================================================================
    # MongoDB Settings
    # =========================================================================

    mongodb_uri: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection URI"
    )
    mongodb_database: str = Field(
        default="golang_db",
        description="Database holding the todo collection"
    )
    mongodb_collection: str = Field(
        default="todos",
        description="Collection holding todo documents"
    )

    # =========================================================================
    # CORS Settings
    # =========================================================================

    cors_origins: List[str] = Field(
        default=["http://localhost:5173"],
        description="Allowed CORS origins (the frontend dev server)"
    )
    cors_allow_headers: List[str] = Field(
        default=["Origin", "Content-Type", "Accept"],
        description="Allowed HTTP headers"
    )
    cors_allow_methods: List[str] = Field(
        default=["GET", "POST", "HEAD", "PUT", "DELETE", "PATCH"],
        description="Allowed HTTP methods"
    )

    # =========================================================================
    # Frontend Settings
    # =========================================================================

    static_dir: str = Field(
        default="./client/dist",
        description="Built frontend served at / in production"
    )

    # =========================================================================
    # Logging Settings
    # =========================================================================

    log_level: str = Field(
        default="INFO",
        description="Log level: DEBUG|INFO|WARNING|ERROR|CRITICAL"
    )
    log_format: str = Field(
        default="json",
        description="Log format: json|text"
    )

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the allowed values."""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in allowed:
            raise ValueError(f"log_level must be one of {allowed}, got: {v}")
        return v_upper

    @field_validator("env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment is one of the allowed values."""
        allowed = ["development", "staging", "production"]
        v_lower = v.lower()
        if v_lower not in allowed:
            raise ValueError(f"env must be one of {allowed}, got: {v}")
        return v_lower

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format."""
        allowed = ["json", "text"]
        v_lower = v.lower()
        if v_lower not in allowed:
            raise ValueError(f"log_format must be one of {allowed}, got: {v}")
        return v_lower

    # =========================================================================
    # Computed Properties
    # =========================================================================

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.env == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.env == "production"

    def require_env_file(self) -> None:
        """
        Ensure the env file settings are read from exists when not running
        in production.

        Raises:
            ConfigurationError: If the env file is missing
        """
        if self.is_production:
            return
        if not Path(ENV_FILE).is_file():
            raise ConfigurationError(f"Error loading {ENV_FILE} file")

    # =========================================================================
    # Model Config
    # =========================================================================

    model_config = SettingsConfigDict(
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_default=True,
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Cached settings instance

    Example:
        >>> from todo_api.config import get_settings
        >>> settings = get_settings()
        >>> print(settings.port)
        5001
    """
    return Settings()


def clear_settings_cache():
    """
    Clear the settings cache.

    Useful for testing when you need to reload settings with different
    environment variables.
    """
    get_settings.cache_clear()
