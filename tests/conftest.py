"""
Shared fixtures for Taskbell tests.
"""

from datetime import datetime, timezone

import pytest

from taskbell.core import config as config_module
from taskbell.core.config import reload_config
from taskbell.notifications.models import (
    NotificationKind,
    NotificationRequest,
    NotificationSubject,
)

DISPATCHER_URL = "https://dispatcher.test/functions/v1/send-telegram-notification"


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Point configuration at test values and reset the cached config."""
    monkeypatch.setenv("DISPATCHER_URL", DISPATCHER_URL)
    monkeypatch.setenv("TELEGRAM_DB_PATH", str(tmp_path / "telegram.db"))
    monkeypatch.delenv("TASKBELL_ACCESS_TOKEN", raising=False)
    reload_config()
    yield
    config_module._config = None


@pytest.fixture
def sample_request() -> NotificationRequest:
    return NotificationRequest(
        recipient_id="user-1",
        kind=NotificationKind.TASK_REMINDER,
        subject=NotificationSubject(
            id="task-42",
            display_name="Prepare sprint review",
            occurs_at=datetime(2025, 1, 5, 10, 0, tzinfo=timezone.utc),
            project_name="Website",
            client_name="Acme",
            status="in_progress",
        ),
    )
