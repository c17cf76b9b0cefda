"""Configuration management for KeyBastion.

This module uses Pydantic Settings to load and validate configuration from
environment variables and .env files. Configuration is loaded at application
startup and is immutable during runtime.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ENCRYPTION_KEY = "defaultSecretKeyThatShouldBeChanged"


class Settings(BaseSettings):
    """Application configuration settings.

    Settings are loaded from environment variables (prefixed with
    ``KEYBASTION_``) and .env files. All values are validated at startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="KEYBASTION_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Settings
    app_name: str = "KeyBastion"
    app_version: str = "0.1.0"
    environment: Literal["development", "production", "testing"] = "development"
    debug: bool = False
    api_prefix: str = "/api"

    # Server Settings
    host: str = "0.0.0.0"
    port: int = 9000
    workers: int = 1

    # Database Settings
    database_url: str = "sqlite+aiosqlite:///./kb_data/keybastion.db"
    db_echo: bool = False

    # Secret encryption at rest
    encryption_key: str = Field(
        default=DEFAULT_ENCRYPTION_KEY,
        description="Symmetric key for credential secrets (normalized to 32 bytes)",
    )

    # Token signing
    rsa_private_key_path: str | None = Field(
        default=None,
        description="PEM file with the RSA private key used to sign access tokens",
    )
    rsa_public_key_path: str | None = Field(
        default=None,
        description="PEM file with the RSA public key used to verify access tokens",
    )
    token_issuer: str = "keybastion"
    access_token_expire_minutes: int = 30
    refresh_token_expire_days: int = 7
    session_prune_interval_seconds: int = 900

    # CORS Settings
    cors_origins: list[str] = Field(
        default=[
            "http://localhost:3000",
            "http://127.0.0.1:3000",
            "http://localhost:9000",
        ]
    )
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = Field(default=["GET", "POST", "PUT", "DELETE", "OPTIONS"])
    cors_allow_headers: list[str] = Field(
        default=["Authorization", "Content-Type", "X-Requested-With", "Accept"]
    )

    # Security headers
    security_headers_enabled: bool = True
    https_redirect_enabled: bool = False
    hsts_max_age: int = 31536000
    csp_policy: str = (
        "default-src 'self'; frame-src 'none'; object-src 'none'; "
        "base-uri 'self'; form-action 'self'"
    )
    permissions_policy: str = "geolocation=(), camera=(), microphone=()"

    # Logging Settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "json"

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | list[str]) -> list[str]:
        """Parse CORS origins from comma-separated string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",")]
        return v

    @field_validator(
        "access_token_expire_minutes",
        "refresh_token_expire_days",
        "session_prune_interval_seconds",
    )
    @classmethod
    def validate_positive_interval(cls, v: int) -> int:
        """Token lifetimes and the prune interval must be positive."""
        if v <= 0:
            raise ValueError("Token lifetimes and intervals must be positive")
        return v

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing environment."""
        return self.environment == "testing"

    @property
    def uses_default_encryption_key(self) -> bool:
        """Whether the shipped placeholder encryption key is still in use."""
        return self.encryption_key == DEFAULT_ENCRYPTION_KEY


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    This function caches the settings instance to avoid reloading
    configuration on every call. Settings are loaded once at startup.

    Returns:
        Settings: Cached application settings instance.
    """
    return Settings()
