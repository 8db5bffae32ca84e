"""
Application settings management using Pydantic.

All values come from environment variables (optionally via a ``.env`` file).
Secrets such as the credential encryption key are never given defaults here;
the encryption module resolves a key itself when none is configured.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

VALID_ENVIRONMENTS = ["development", "test", "production"]
VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
VALID_LOG_FORMATS = ["json", "text"]


class AppSettings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: str = "development"

    # Database
    database_url: str = "postgresql+psycopg://localhost/proposal_maker"
    sql_echo: bool = False
    seed_defaults: bool = True

    # Secrets
    encryption_key: Optional[str] = Field(default=None, description="Fernet key for stored API keys")
    legacy_encryption_secret: Optional[str] = Field(
        default=None, description="Passphrase used by legacy v1 credential envelopes"
    )
    session_secret_key: Optional[str] = Field(default=None, description="Fernet key for session tokens")
    session_ttl_seconds: int = 7 * 24 * 3600

    # Model service
    llm_base_url: str = "https://api.groq.com/openai/v1"
    llm_timeout_seconds: float = 120.0
    credential_prefix: str = "gsk_"

    # Proposal view tracking
    geo_lookup_url: str = "https://ipapi.co/{ip}/json/"
    geo_lookup_timeout_seconds: float = 5.0

    # Uploads
    max_image_bytes: int = 4 * 1024 * 1024

    # API
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://localhost:5173"]
    )

    # Logging
    log_level: str = "INFO"
    log_format: str = "text"

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        v_lower = v.lower()
        if v_lower not in VALID_ENVIRONMENTS:
            raise ValueError(f"Environment must be one of: {', '.join(VALID_ENVIRONMENTS)}")
        return v_lower

    @field_validator("log_level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        v_upper = v.upper()
        if v_upper not in VALID_LOG_LEVELS:
            raise ValueError(f"Log level must be one of: {', '.join(VALID_LOG_LEVELS)}")
        return v_upper

    @field_validator("log_format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        if v not in VALID_LOG_FORMATS:
            raise ValueError(f"Log format must be one of: {', '.join(VALID_LOG_FORMATS)}")
        return v

    @field_validator("llm_base_url")
    @classmethod
    def validate_llm_base_url(cls, v: str) -> str:
        if not v.startswith(("https://", "http://")):
            raise ValueError("llm_base_url must start with https:// or http://")
        return v.rstrip("/")

    @field_validator("max_image_bytes", "session_ttl_seconds")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("Value must be positive")
        return v


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Return the cached application settings."""
    return AppSettings()
