# 📄 File: substore/shared/config/settings.py
#
# 🧭 Purpose (Layman Explanation):
# The main configuration center that reads all settings from environment variables
# and tells the subscription store where to keep its data and how hard to retry.
#
# 🧪 Purpose (Technical Summary):
# Pydantic-based settings management with environment variable loading,
# validation, and type safety for storage, retry, logging and server parameters.
#
# 🔗 Dependencies:
# - pydantic-settings for configuration management
# - typing for type hints
#
# 🔄 Connected Modules / Calls From:
# - substore.main (application startup)
# - substore.shared.config.redis (Redis client construction)
# - substore.shared.infrastructure.storage (backend selection)
# - substore.shared.utils.logging (log level and format)

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses Pydantic for validation and type safety. Settings are loaded
    from environment variables with fallback to .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # =========================================================================
    # APPLICATION SETTINGS
    # =========================================================================

    APP_NAME: str = Field(default="Subscription Store API", description="Application name")
    APP_VERSION: str = Field(default="1.0.0", description="Application version")
    APP_DESCRIPTION: str = Field(
        default="Persisted, schema-migrating subscription state store",
        description="Application description"
    )
    ENVIRONMENT: str = Field(default="development", description="Runtime environment")
    DEBUG: bool = Field(default=False, description="Debug mode flag")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: str = Field(default="json", description="Log output format (json or text)")
    LOG_FILE: Optional[str] = Field(None, description="Optional log file path")

    # =========================================================================
    # SERVER CONFIGURATION
    # =========================================================================

    HOST: str = Field(default="0.0.0.0", description="Server host")
    PORT: int = Field(default=8000, description="Server port")
    RELOAD: bool = Field(default=False, description="Auto-reload on changes")

    # =========================================================================
    # STORAGE CONFIGURATION
    # =========================================================================

    STORAGE_BACKEND: str = Field(default="memory", description="Key/value backend: memory, redis or file")
    STORAGE_KEY_PREFIX: str = Field(
        default="@subscription_state_v",
        description="Prefix of the per-schema-version storage keys"
    )
    STORAGE_FILE_DIR: str = Field(default="./data/subscription", description="Directory for the file backend")

    # =========================================================================
    # REDIS CONFIGURATION
    # =========================================================================

    REDIS_HOST: str = Field(default="localhost", description="Redis host")
    REDIS_PORT: int = Field(default=6379, description="Redis port")
    REDIS_DB: int = Field(default=0, description="Redis database number")
    REDIS_PASSWORD: Optional[str] = Field(None, description="Redis password")
    REDIS_MAX_CONNECTIONS: int = Field(default=10, description="Redis connection pool size")
    REDIS_SOCKET_TIMEOUT: float = Field(default=5.0, description="Redis socket timeout (seconds)")
    REDIS_KEY_NAMESPACE: str = Field(default="substore:", description="Namespace prepended to every Redis key")

    # =========================================================================
    # SUBSCRIPTION STORE SETTINGS
    # =========================================================================

    SUBSCRIPTION_MAX_RETRIES: int = Field(default=3, ge=0, description="Retries after a failed load or save")
    SUBSCRIPTION_RETRY_DELAY: float = Field(
        default=1.0,
        ge=0,
        description="Base backoff unit in seconds; retry k waits k times this value"
    )

    # =========================================================================
    # VALIDATORS
    # =========================================================================

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        allowed_environments = ["development", "staging", "production", "test"]
        if v.lower() not in allowed_environments:
            raise ValueError(f"Environment must be one of {allowed_environments}")
        return v.lower()

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level value."""
        allowed_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed_levels:
            raise ValueError(f"Log level must be one of {allowed_levels}")
        return v.upper()

    @field_validator("LOG_FORMAT")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format value."""
        if v.lower() not in ("json", "text"):
            raise ValueError("Log format must be 'json' or 'text'")
        return v.lower()

    @field_validator("STORAGE_BACKEND")
    @classmethod
    def validate_storage_backend(cls, v: str) -> str:
        """Validate storage backend name."""
        allowed_backends = ["memory", "redis", "file"]
        if v.lower() not in allowed_backends:
            raise ValueError(f"Storage backend must be one of {allowed_backends}")
        return v.lower()

    @field_validator("STORAGE_KEY_PREFIX")
    @classmethod
    def validate_key_prefix(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Storage key prefix must not be empty")
        return v

    # =========================================================================
    # COMPUTED PROPERTIES
    # =========================================================================

    @property
    def redis_url(self) -> str:
        """Get the Redis URL with optional password."""
        if self.REDIS_PASSWORD:
            return (
                f"redis://:{self.REDIS_PASSWORD}@{self.REDIS_HOST}:"
                f"{self.REDIS_PORT}/{self.REDIS_DB}"
            )
        return f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.ENVIRONMENT == "production"

    @property
    def is_testing(self) -> bool:
        """Check if running in test environment."""
        return self.ENVIRONMENT == "test"


# ============================================================================
# SETTINGS FACTORY
# ============================================================================

@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Uses lru_cache to ensure settings are loaded only once
    and reused throughout the application lifecycle.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
