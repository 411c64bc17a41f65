"""
Notification request builder.

Turns task, sprint and time slot rows (plain mappings as returned by the
data store) into NotificationRequest objects, and sorts tasks with reminders
into "due soon" and "overdue" buckets.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from taskbell.notifications.models import (
    NotificationKind,
    NotificationRequest,
    NotificationSubject,
)

logger = logging.getLogger(__name__)

# Reminders starting within this window count as "due soon"
DUE_SOON_WINDOW = timedelta(minutes=30)

Timestamp = Union[str, datetime]


def parse_timestamp(value: Timestamp) -> datetime:
    """
    Parse an ISO-8601 timestamp into an aware datetime.

    Naive values are taken to be UTC.

    Raises:
        ValueError: If the value is not a valid timestamp
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    else:
        raise ValueError(f"Unsupported timestamp type: {type(value).__name__}")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _subject(
    item_id: Any,
    name: str,
    occurs_at: Timestamp,
    row: Mapping[str, Any],
) -> NotificationSubject:
    return NotificationSubject(
        id=str(item_id),
        display_name=name,
        occurs_at=parse_timestamp(occurs_at),
        project_name=row.get("project_name"),
        client_name=row.get("client_name"),
        status=row.get("status"),
    )


def build_task_notification(
    user_id: str,
    task: Mapping[str, Any],
    kind: NotificationKind = NotificationKind.TASK_REMINDER,
) -> NotificationRequest:
    """
    Build a notification for a task row.

    The task's ``reminder_datetime`` is used as the item time, falling back
    to its ``deadline``.

    Args:
        user_id: User to notify
        task: Task row with ``id``, ``name`` and a reminder or deadline
        kind: Notification kind (task_reminder, overdue, due_soon)

    Returns:
        NotificationRequest for the task
    """
    occurs_at = task.get("reminder_datetime") or task.get("deadline")
    if occurs_at is None:
        raise ValueError(f"Task {task.get('id')} has no reminder or deadline")

    return NotificationRequest(
        recipient_id=user_id,
        kind=kind,
        subject=_subject(task["id"], task["name"], occurs_at, task),
    )


def build_sprint_deadline_notification(
    user_id: str, sprint: Mapping[str, Any]
) -> NotificationRequest:
    """Build a sprint deadline notification for a sprint row."""
    name = sprint.get("title") or sprint.get("name")
    return NotificationRequest(
        recipient_id=user_id,
        kind=NotificationKind.SPRINT_DEADLINE,
        subject=_subject(sprint["id"], name, sprint["deadline"], sprint),
    )


def build_slot_notification(
    user_id: str, slot: Mapping[str, Any]
) -> NotificationRequest:
    """Build a task time slot notification for a slot row."""
    return NotificationRequest(
        recipient_id=user_id,
        kind=NotificationKind.TASK_SLOT,
        subject=_subject(slot["id"], slot["task_name"], slot["start_time"], slot),
    )


def is_due_soon(
    at: datetime, now: datetime, window: timedelta = DUE_SOON_WINDOW
) -> bool:
    """True if ``at`` falls after ``now`` and within ``window`` of it."""
    return now < at <= now + window


def is_overdue(at: datetime, now: datetime) -> bool:
    """True if ``at`` is at or before ``now``."""
    return at <= now


@dataclass
class ReminderBuckets:
    """Tasks with reminders, split by urgency."""

    due_soon: List[Dict[str, Any]] = field(default_factory=list)
    overdue: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.due_soon) + len(self.overdue)


def classify_reminders(
    tasks: Iterable[Mapping[str, Any]],
    now: Optional[datetime] = None,
    window: timedelta = DUE_SOON_WINDOW,
) -> ReminderBuckets:
    """
    Split tasks into due-soon and overdue buckets by ``reminder_datetime``.

    Tasks without a reminder, or with reminders further out than
    ``window``, are left out.

    Args:
        tasks: Task rows
        now: Reference time (default: current UTC time)
        window: Due-soon window

    Returns:
        ReminderBuckets with the matching task rows
    """
    now = now or datetime.now(timezone.utc)
    buckets = ReminderBuckets()

    for task in tasks:
        reminder = task.get("reminder_datetime")
        if not reminder:
            continue
        try:
            at = parse_timestamp(reminder)
        except ValueError:
            logger.warning(f"Skipping task {task.get('id')}: bad reminder {reminder!r}")
            continue

        if is_overdue(at, now):
            buckets.overdue.append(dict(task))
        elif is_due_soon(at, now, window):
            buckets.due_soon.append(dict(task))

    return buckets


def reminder_notifications(
    user_id: str,
    tasks: Iterable[Mapping[str, Any]],
    now: Optional[datetime] = None,
    window: timedelta = DUE_SOON_WINDOW,
) -> List[NotificationRequest]:
    """
    Build due_soon / overdue notifications for a user's reminder tasks.

    Returns:
        Requests for due-soon tasks first, then overdue ones
    """
    buckets = classify_reminders(tasks, now=now, window=window)
    requests = [
        build_task_notification(user_id, task, NotificationKind.DUE_SOON)
        for task in buckets.due_soon
    ]
    requests.extend(
        build_task_notification(user_id, task, NotificationKind.OVERDUE)
        for task in buckets.overdue
    )
    return requests
