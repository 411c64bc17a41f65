"""
Dispatch module.

Delivers notification requests to users' Telegram chats, honouring their
per-kind preferences and quiet hours.
"""

from taskbell.dispatch.policy import (
    NotificationPreferences,
    is_in_quiet_hours,
    is_kind_enabled,
)
from taskbell.dispatch.service import DispatchOutcome, NotificationDispatchService
from taskbell.dispatch.store import TelegramStore

__all__ = [
    "NotificationPreferences",
    "is_in_quiet_hours",
    "is_kind_enabled",
    "DispatchOutcome",
    "NotificationDispatchService",
    "TelegramStore",
]
