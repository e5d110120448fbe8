"""
Configuration management for the VAXVET console.
Loads settings from environment variables and provides typed configuration access.
"""

from pathlib import Path
from typing import Optional
from urllib.parse import urlsplit, urlunsplit
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Application Settings
    environment: str = Field(default="development", description="Environment: development, staging, production")
    log_level: str = Field(default="INFO", description="Logging level")
    debug: bool = Field(default=False, description="Enable debug mode")

    # Console server
    host: str = Field(default="127.0.0.1", description="Host the console binds to")
    port: int = Field(default=8080, description="Port the console listens on")

    # Remote REST API
    api_base_url: str = Field(
        default="http://localhost:5000/api",
        description="Base URL of the clinic REST API"
    )
    api_timeout: int = Field(default=30, description="API request timeout in seconds")

    # Query cache
    cache_stale_seconds: float = Field(
        default=30.0,
        description="Seconds before a cached query result is refetched"
    )

    # Auth store
    session_file: Path = Field(
        default=Path.home() / ".vaxvet" / "session.json",
        description="File the signed-in token and user are persisted to"
    )

    # Notification channel
    notifications_enabled: bool = Field(default=True, description="Open the notification channel at startup")
    notifications_url: Optional[str] = Field(
        default=None,
        description="WebSocket URL of the notification hub (derived from api_base_url if unset)"
    )

    # Display
    due_soon_days: int = Field(default=30, description="Days before nextDueDate a record counts as due soon")
    expiring_soon_days: int = Field(default=30, description="Days before expiration a stock counts as expiring soon")

    # Testing
    testing_mode: bool = Field(default=False, description="Enable testing mode")

    def get_notifications_url(self) -> str:
        """Get the notification hub URL, deriving it from the API base URL if needed."""
        if self.notifications_url:
            return self.notifications_url

        parts = urlsplit(self.api_base_url)
        scheme = "wss" if parts.scheme == "https" else "ws"
        return urlunsplit((scheme, parts.netloc, "/hubs/notifications", "", ""))

    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment.lower() == "development"


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings() -> Settings:
    """Reload settings from environment (useful for testing)."""
    global _settings
    _settings = Settings()
    return _settings


# Convenience access
settings = get_settings()
