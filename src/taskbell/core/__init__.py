"""
Core shared configuration for Taskbell.
"""

from taskbell.core.config import (
    AppConfig,
    DispatcherConfig,
    ServerConfig,
    TelegramConfig,
    get_config,
    reload_config,
)

__all__ = [
    "AppConfig",
    "DispatcherConfig",
    "ServerConfig",
    "TelegramConfig",
    "get_config",
    "reload_config",
]
