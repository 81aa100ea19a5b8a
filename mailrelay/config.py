"""
Configuration Management

Centralized configuration using Pydantic Settings with environment variables.
Supports validation, type checking, and default values.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    Sensitive values should NEVER have defaults.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ===================================
    # Application Settings
    # ===================================
    APP_ENV: str = Field(default="production", description="Environment: development, staging, production")
    APP_NAME: str = Field(default="MailRelay", description="Application name")
    DOMAIN: str = Field(..., description="Public domain used for view links and aliases (required)")

    # ===================================
    # Telegram (REQUIRED)
    # ===================================
    BOT_TOKEN: str = Field(..., description="Telegram bot token (required)")
    CHAT_ID: str = Field(..., description="Chat that receives every notification (required)")
    ENABLE_BOT_COMMANDS: bool = Field(default=True, description="Poll Telegram for /start and /new")
    BOT_RETRY_SECONDS: float = Field(default=5, gt=0, description="First delay between bot startup attempts while Telegram is unreachable")

    # ===================================
    # Web Settings
    # ===================================
    WEB_HOST: str = Field(default="0.0.0.0", description="HTTP host to bind to")
    WEB_PORT: int = Field(default=3000, description="HTTP port to bind to")
    TLS_CERT_FILE: Optional[str] = Field(default=None, description="Certificate for direct HTTPS")
    TLS_KEY_FILE: Optional[str] = Field(default=None, description="Private key for direct HTTPS")

    # ===================================
    # SMTP Settings
    # ===================================
    SMTP_HOST: str = Field(default="0.0.0.0", description="SMTP server host")
    SMTP_PORT: int = Field(default=25, description="SMTP server port")
    SMTP_HOSTNAME: Optional[str] = Field(default=None, validate_default=True, description="SMTP hostname (defaults to DOMAIN)")
    MAX_MESSAGE_SIZE_MB: int = Field(default=10, ge=1, le=50, description="Maximum email size in MB")

    # ===================================
    # Mail Settings
    # ===================================
    MAIL_TTL_MINUTES: int = Field(default=15, ge=1, description="How long a received mail stays viewable")
    SWEEP_INTERVAL_SECONDS: int = Field(default=60, ge=1, description="Expired mail sweep interval")
    PREVIEW_LENGTH: int = Field(default=100, ge=0, le=1000, description="Body preview length in notifications")
    ALIAS_LENGTH: int = Field(default=8, ge=4, le=64, description="Generated alias length")

    # ===================================
    # Logging Configuration
    # ===================================
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: str = Field(default="json", description="Log format: json or text")
    LOG_FILE: Optional[str] = Field(default=None, description="Log file path")

    # ===================================
    # Monitoring
    # ===================================
    ENABLE_METRICS: bool = Field(default=True, description="Enable Prometheus metrics")

    # ===================================
    # Validators
    # ===================================

    @field_validator("SMTP_HOSTNAME", mode="before")
    @classmethod
    def set_smtp_hostname(cls, v, info):
        """Set SMTP hostname to DOMAIN if not provided."""
        if v:
            return v
        return info.data.get('DOMAIN')

    @field_validator("DOMAIN")
    @classmethod
    def normalize_domain(cls, v):
        """Strip scheme and trailing slash from the domain."""
        v = v.strip()
        for scheme in ("https://", "http://"):
            if v.startswith(scheme):
                v = v[len(scheme):]
        v = v.rstrip("/")
        if not v:
            raise ValueError("DOMAIN must not be empty")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v = v.upper()
        if v not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v

    @field_validator("APP_ENV")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment."""
        valid_envs = ["development", "staging", "production"]
        v = v.lower()
        if v not in valid_envs:
            raise ValueError(f"Environment must be one of: {valid_envs}")
        return v

    @model_validator(mode="after")
    def validate_tls_pair(self):
        """Certificate and key must be configured together."""
        if bool(self.TLS_CERT_FILE) != bool(self.TLS_KEY_FILE):
            raise ValueError("TLS_CERT_FILE and TLS_KEY_FILE must be set together")
        return self

    # ===================================
    # Computed Properties
    # ===================================

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.APP_ENV == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.APP_ENV == "production"

    @property
    def tls_enabled(self) -> bool:
        return bool(self.TLS_CERT_FILE and self.TLS_KEY_FILE)

    @property
    def mail_ttl_seconds(self) -> int:
        """Get mail TTL in seconds."""
        return self.MAIL_TTL_MINUTES * 60

    @property
    def max_message_size_bytes(self) -> int:
        """Get maximum email size in bytes."""
        return self.MAX_MESSAGE_SIZE_MB * 1024 * 1024

    @property
    def public_base_url(self) -> str:
        return f"https://{self.DOMAIN}"

    def view_url(self, message_id: str) -> str:
        """Public URL of the web view for a stored message."""
        return f"{self.public_base_url}/view/{message_id}"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache ensures settings are loaded only once.

    Returns:
        Settings: Application settings
    """
    return Settings()
