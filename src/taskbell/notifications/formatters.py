"""
Notification formatters - turn notification requests into Telegram messages.
"""

import logging
from datetime import datetime
from typing import Any, Dict
from zoneinfo import ZoneInfo

from taskbell.notifications.models import NotificationKind, NotificationSubject

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "Asia/Kolkata"

KIND_EMOJI = {
    NotificationKind.TASK_REMINDER: "⏰",
    NotificationKind.SPRINT_DEADLINE: "📅",
    NotificationKind.TASK_SLOT: "🎯",
    NotificationKind.OVERDUE: "🚨",
    NotificationKind.DUE_SOON: "⏳",
}

KIND_TITLE = {
    NotificationKind.TASK_REMINDER: "Task Reminder",
    NotificationKind.SPRINT_DEADLINE: "Sprint Deadline",
    NotificationKind.TASK_SLOT: "Task Time Slot",
    NotificationKind.OVERDUE: "Overdue Item",
    NotificationKind.DUE_SOON: "Task Due Soon",
}


def format_datetime(value: datetime, tz_name: str = DEFAULT_TIMEZONE) -> str:
    """
    Format a timestamp like ``Jan 5, 2025, 03:30 PM`` in the given timezone.

    Args:
        value: Timestamp (naive values are taken as UTC)
        tz_name: IANA timezone name

    Returns:
        Localised date string
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=ZoneInfo("UTC"))
    local = value.astimezone(ZoneInfo(tz_name))
    return f"{local:%b} {local.day}, {local:%Y}, {local:%I:%M %p}"


def format_notification_message(
    kind: NotificationKind,
    subject: NotificationSubject,
    tz_name: str = DEFAULT_TIMEZONE,
) -> str:
    """
    Build the Markdown body of a Telegram notification.

    Args:
        kind: Notification kind
        subject: Item the notification is about
        tz_name: Timezone used for the date line

    Returns:
        Markdown message text
    """
    emoji = KIND_EMOJI.get(kind, "📢")
    title = KIND_TITLE.get(kind, "Notification")

    lines = [
        f"{emoji} *{title}*",
        "",
        f"**{subject.display_name}**",
        f"📅 {format_datetime(subject.occurs_at, tz_name)}",
    ]

    if subject.project_name:
        lines.append(f"📁 Project: {subject.project_name}")
    if subject.client_name:
        lines.append(f"👤 Client: {subject.client_name}")
    if subject.status:
        lines.append(f"📊 Status: {subject.status}")

    return "\n".join(lines) + "\n"


def create_reply_markup(
    kind: NotificationKind, item_id: str, frontend_url: str
) -> Dict[str, Any]:
    """
    Build the inline keyboard attached to a notification.

    Args:
        kind: Notification kind
        item_id: Item identifier
        frontend_url: Base URL of the web app

    Returns:
        Telegram ``reply_markup`` dictionary
    """
    base_url = frontend_url.rstrip("/")
    return {
        "inline_keyboard": [
            [
                {
                    "text": "✅ Mark as Read",
                    "callback_data": f"mark_read_{kind.value}_{item_id}",
                }
            ],
            [
                {
                    "text": "📱 Open in App",
                    "url": f"{base_url}/alltasks?highlight={item_id}",
                }
            ],
        ]
    }
