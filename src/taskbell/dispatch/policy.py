"""
Delivery policy: per-kind preferences and quiet hours.
"""

from datetime import datetime, time
from typing import Optional, Union
from zoneinfo import ZoneInfo

from pydantic import BaseModel, Field

from taskbell.notifications.models import NotificationKind


class NotificationPreferences(BaseModel):
    """A user's Telegram notification settings."""

    task_reminders: bool = True
    sprint_deadlines: bool = True
    task_slots: bool = True
    overdue_notifications: bool = True
    quiet_hours_start: time = Field(default=time(22, 0))
    quiet_hours_end: time = Field(default=time(8, 0))
    timezone: str = "Asia/Kolkata"


def is_kind_enabled(kind: NotificationKind, prefs: NotificationPreferences) -> bool:
    """
    Check whether a notification kind is enabled in the user's preferences.

    ``due_soon`` shares the task reminder switch.
    """
    if kind in (NotificationKind.TASK_REMINDER, NotificationKind.DUE_SOON):
        return prefs.task_reminders
    if kind == NotificationKind.SPRINT_DEADLINE:
        return prefs.sprint_deadlines
    if kind == NotificationKind.TASK_SLOT:
        return prefs.task_slots
    if kind == NotificationKind.OVERDUE:
        return prefs.overdue_notifications
    return False


def _as_time(value: Union[str, time]) -> time:
    if isinstance(value, time):
        return value
    return time.fromisoformat(value)


def is_in_quiet_hours(
    current: Union[str, time],
    start: Union[str, time],
    end: Union[str, time],
) -> bool:
    """
    Check whether ``current`` falls inside the quiet window.

    A window whose start is after its end wraps past midnight
    (e.g. 22:00 to 08:00). Both bounds are inclusive.

    Args:
        current: Current local time
        start: Quiet hours start
        end: Quiet hours end

    Returns:
        True if notifications should be held back
    """
    current, start, end = _as_time(current), _as_time(start), _as_time(end)
    if start <= end:
        return start <= current <= end
    return current >= start or current <= end


def local_time(now: datetime, tz_name: str) -> time:
    """Wall-clock time of ``now`` in the given timezone, to the second."""
    return now.astimezone(ZoneInfo(tz_name)).time().replace(microsecond=0)


def should_hold(prefs: NotificationPreferences, now: Optional[datetime] = None) -> bool:
    """True if ``now`` is inside the user's quiet hours."""
    now = now or datetime.now(ZoneInfo("UTC"))
    return is_in_quiet_hours(
        local_time(now, prefs.timezone),
        prefs.quiet_hours_start,
        prefs.quiet_hours_end,
    )
