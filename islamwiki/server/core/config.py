"""
Configuration Settings.

This module defines the application configuration using Pydantic's BaseSettings.
It automatically loads all configuration from environment variables and .env file
without explicit dotenv loading.
"""

from typing import List, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# =====================================================================
# Grouped Configuration Models
# =====================================================================


class SessionConfig(BaseModel):
    """Session cookie configuration."""

    secret_key: str = Field(
        default="change-me-islamwiki-session-secret",
        alias="ISLAMWIKI_SESSION_SECRET",
        description="Secret used to sign the session cookie",
    )
    name: str = Field(default="islamwiki_session", alias="ISLAMWIKI_SESSION_NAME", description="Session cookie name")
    lifetime: int = Field(
        default=86400, alias="ISLAMWIKI_SESSION_LIFETIME", description="Session lifetime in seconds (24 hours)"
    )
    path: str = Field(default="/", alias="ISLAMWIKI_SESSION_PATH", description="Session cookie path")
    same_site: str = Field(default="lax", alias="ISLAMWIKI_SESSION_SAME_SITE", description="SameSite cookie attribute")
    https_only: bool = Field(
        default=False, alias="ISLAMWIKI_SESSION_HTTPS_ONLY", description="Only send the cookie over HTTPS"
    )
    regenerate_after: int = Field(
        default=1800,
        alias="ISLAMWIKI_SESSION_REGENERATE_AFTER",
        description="Seconds after which an active session is regenerated",
    )

    model_config = {"populate_by_name": True}


class RateLimitConfig(BaseModel):
    """Per-client request rate limits enforced by the security middleware."""

    enabled: bool = Field(default=True, alias="ISLAMWIKI_RATE_LIMIT_ENABLED", description="Enable rate limiting")
    requests_per_minute: int = Field(
        default=60, alias="ISLAMWIKI_RATE_LIMIT_PER_MINUTE", description="Requests allowed per client per minute"
    )
    requests_per_hour: int = Field(
        default=1000, alias="ISLAMWIKI_RATE_LIMIT_PER_HOUR", description="Requests allowed per client per hour"
    )
    burst_limit: int = Field(
        default=10, alias="ISLAMWIKI_RATE_LIMIT_BURST", description="Requests allowed per client per second"
    )

    model_config = {"populate_by_name": True}


class CORSConfig(BaseModel):
    """CORS configuration."""

    origins: List[str] = Field(
        default=["*"], alias="ISLAMWIKI_CORS_ORIGINS", description="Allowed CORS origins (use * for all)"
    )
    allow_credentials: bool = Field(
        default=True, alias="ISLAMWIKI_CORS_ALLOW_CREDENTIALS", description="Allow credentials in CORS requests"
    )

    model_config = {"populate_by_name": True}


# =====================================================================
# Main Settings Class
# =====================================================================


class Settings(BaseSettings):
    """
    Application settings model.

    All properties are automatically bound from environment variables and .env file.
    Pydantic's BaseSettings handles dotenv loading automatically via model_config.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
        populate_by_name=True,
    )

    # =====================================================================
    # Application
    # =====================================================================
    app_name: str = Field(default="IslamWiki", alias="ISLAMWIKI_APP_NAME", description="Application display name")
    environment: str = Field(
        default="production", alias="ISLAMWIKI_ENV", description="Application environment (production, development, testing)"
    )
    debug: bool = Field(default=False, alias="ISLAMWIKI_DEBUG", description="Show exception details on error pages")
    server_host: str = Field(default="0.0.0.0", alias="ISLAMWIKI_SERVER_HOST", description="Host address to bind to")
    server_port: int = Field(default=8000, alias="ISLAMWIKI_SERVER_PORT", description="Server port number")

    # =====================================================================
    # Logging
    # =====================================================================
    log_level: str = Field(
        default="INFO",
        alias="ISLAMWIKI_LOG_LEVEL",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    log_format: str = Field(default="detailed", alias="ISLAMWIKI_LOG_FORMAT", description="simple, detailed or json")
    log_file_dir: str = Field(default="logs", alias="ISLAMWIKI_LOG_FILE_DIR", description="Directory for log files")
    enable_file_logging: bool = Field(
        default=False, alias="ISLAMWIKI_ENABLE_FILE_LOGGING", description="Also write logs to a file"
    )

    # =====================================================================
    # Database
    # =====================================================================
    database_url: str = Field(
        default="sqlite+aiosqlite:///./islamwiki.db",
        alias="DATABASE_URL",
        description="Async SQLAlchemy connection URL for the application database",
    )

    # =====================================================================
    # Extensions
    # =====================================================================
    extensions_path: str = Field(
        default="extensions", alias="ISLAMWIKI_EXTENSIONS_PATH", description="Directory scanned for extensions"
    )
    enabled_extensions: Optional[List[str]] = Field(
        default=None,
        alias="ISLAMWIKI_ENABLED_EXTENSIONS",
        description="Extensions to load; all available extensions when unset",
    )

    # =====================================================================
    # Security
    # =====================================================================
    csrf_enabled: bool = Field(default=True, alias="ISLAMWIKI_CSRF_ENABLED", description="Enforce CSRF tokens")
    security_headers_enabled: bool = Field(
        default=True, alias="ISLAMWIKI_SECURITY_ENABLED", description="Enable the security middleware"
    )

    # Flat fields consumed by the grouped models below
    session_secret: str = Field(default="change-me-islamwiki-session-secret", alias="ISLAMWIKI_SESSION_SECRET")
    session_name: str = Field(default="islamwiki_session", alias="ISLAMWIKI_SESSION_NAME")
    session_lifetime: int = Field(default=86400, alias="ISLAMWIKI_SESSION_LIFETIME")
    session_path: str = Field(default="/", alias="ISLAMWIKI_SESSION_PATH")
    session_same_site: str = Field(default="lax", alias="ISLAMWIKI_SESSION_SAME_SITE")
    session_https_only: bool = Field(default=False, alias="ISLAMWIKI_SESSION_HTTPS_ONLY")
    session_regenerate_after: int = Field(default=1800, alias="ISLAMWIKI_SESSION_REGENERATE_AFTER")
    rate_limit_enabled: bool = Field(default=True, alias="ISLAMWIKI_RATE_LIMIT_ENABLED")
    rate_limit_per_minute: int = Field(default=60, alias="ISLAMWIKI_RATE_LIMIT_PER_MINUTE")
    rate_limit_per_hour: int = Field(default=1000, alias="ISLAMWIKI_RATE_LIMIT_PER_HOUR")
    rate_limit_burst: int = Field(default=10, alias="ISLAMWIKI_RATE_LIMIT_BURST")
    cors_origins: List[str] = Field(default=["*"], alias="ISLAMWIKI_CORS_ORIGINS")
    cors_allow_credentials: bool = Field(default=True, alias="ISLAMWIKI_CORS_ALLOW_CREDENTIALS")

    # =====================================================================
    # Computed Properties (Grouped Configurations)
    # =====================================================================

    @property
    def session(self) -> SessionConfig:
        """Get session cookie configuration."""
        return SessionConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def rate_limit(self) -> RateLimitConfig:
        """Get rate limiting configuration."""
        return RateLimitConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def cors(self) -> CORSConfig:
        """Get CORS configuration."""
        return CORSConfig.model_validate(self.model_dump(by_alias=True))


settings = Settings()
