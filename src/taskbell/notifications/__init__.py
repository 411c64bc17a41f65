"""
Notifications module.

Builds notification requests and sends them to the dispatcher, either
directly from the client (with the session token) or through the relay.
"""

from taskbell.notifications.models import (
    NotificationKind,
    NotificationRequest,
    NotificationSubject,
    RelayErrorKind,
    RelayResult,
)
from taskbell.notifications.sender import (
    EnvTokenProvider,
    NotificationSender,
    StaticTokenProvider,
    TokenProvider,
    send_notification,
)
from taskbell.notifications.builder import (
    build_slot_notification,
    build_sprint_deadline_notification,
    build_task_notification,
    classify_reminders,
    reminder_notifications,
)

__all__ = [
    "NotificationKind",
    "NotificationRequest",
    "NotificationSubject",
    "RelayErrorKind",
    "RelayResult",
    "EnvTokenProvider",
    "NotificationSender",
    "StaticTokenProvider",
    "TokenProvider",
    "send_notification",
    "build_slot_notification",
    "build_sprint_deadline_notification",
    "build_task_notification",
    "classify_reminders",
    "reminder_notifications",
]
