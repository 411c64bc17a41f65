"""
Configuration management for Taskbell.

Uses Pydantic Settings for environment variable validation and type safety.
"""

from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

DEFAULT_DISPATCHER_URL = (
    "https://ljmdbrunpuhnnmouuzg.supabase.co/functions/v1/send-telegram-notification"
)


class DispatcherConfig(BaseSettings):
    """Remote notification dispatcher configuration."""

    url: str = Field(
        default=DEFAULT_DISPATCHER_URL,
        description="URL of the notification dispatch function"
    )
    timeout: float = Field(
        default=10.0,
        gt=0,
        description="Outbound request timeout in seconds"
    )

    class Config:
        env_prefix = "DISPATCHER_"


class TelegramConfig(BaseSettings):
    """Telegram delivery configuration (dispatcher side)."""

    api_base: str = Field(
        default="https://api.telegram.org",
        description="Telegram Bot API base URL"
    )
    timeout: float = Field(
        default=10.0,
        gt=0,
        description="Bot API request timeout in seconds"
    )
    frontend_url: str = Field(
        default="https://your-app.com",
        description="Web app URL used for 'Open in App' buttons"
    )
    db_path: str = Field(
        default="/var/lib/taskbell/telegram.db",
        description="Path to the SQLite database holding chat links and settings"
    )

    class Config:
        env_prefix = "TELEGRAM_"


class ServerConfig(BaseSettings):
    """HTTP server configuration."""

    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=8000, ge=1, le=65535, description="Bind port")
    reload: bool = Field(default=False, description="Enable uvicorn auto-reload")

    class Config:
        env_prefix = "API_"


class AppConfig(BaseSettings):
    """Main application configuration."""

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )

    # Nested configurations
    dispatcher: DispatcherConfig = Field(default_factory=DispatcherConfig)
    telegram: TelegramConfig = Field(default_factory=TelegramConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v = v.upper()
        if v not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


# Global config instance
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """
    Get the global configuration instance.

    Lazily loads configuration on first access.

    Returns:
        AppConfig: The global configuration instance
    """
    global _config
    if _config is None:
        _config = AppConfig(
            dispatcher=DispatcherConfig(),
            telegram=TelegramConfig(),
            server=ServerConfig(),
        )
    return _config


def reload_config() -> AppConfig:
    """
    Reload configuration from environment variables.

    Useful for testing or when environment changes.

    Returns:
        AppConfig: The reloaded configuration instance
    """
    global _config
    _config = None
    return get_config()
