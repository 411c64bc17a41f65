"""
Notification dispatch service.

Decides whether a notification should reach the user's Telegram chat and,
if so, formats and sends it.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from taskbell.dispatch.policy import (
    NotificationPreferences,
    is_kind_enabled,
    should_hold,
)
from taskbell.dispatch.store import TelegramStore
from taskbell.notifications.formatters import (
    create_reply_markup,
    format_notification_message,
)
from taskbell.notifications.models import NotificationRequest
from taskbell.notifications.providers import TelegramProvider

logger = logging.getLogger(__name__)

ProviderFactory = Callable[[str], TelegramProvider]


@dataclass
class DispatchOutcome:
    """HTTP status and JSON body returned for a dispatch request."""

    status_code: int
    body: Dict[str, Any] = field(default_factory=dict)


class NotificationDispatchService:
    """
    Delivers notification requests to linked Telegram chats.

    Checks, in order: chat link, per-kind preference, quiet hours, bot
    configuration. Only then is the message sent.
    """

    def __init__(
        self,
        store: TelegramStore,
        provider_factory: Optional[ProviderFactory] = None,
        frontend_url: str = "https://your-app.com",
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize the dispatch service.

        Args:
            store: Chat link and settings store
            provider_factory: Builds a TelegramProvider from a bot token
            frontend_url: Web app URL for the "Open in App" button
            clock: Returns the current time (default: UTC now)
        """
        self.store = store
        self.provider_factory = provider_factory or TelegramProvider
        self.frontend_url = frontend_url
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def dispatch(self, request: NotificationRequest) -> DispatchOutcome:
        """
        Deliver one notification if the user's settings allow it.

        Any failure along the way (store, settings, formatting, delivery)
        is reported as a 500 outcome with a JSON body.

        Args:
            request: Notification to deliver

        Returns:
            DispatchOutcome describing what happened
        """
        try:
            return self._dispatch(request)
        except Exception as e:
            logger.error(f"Error sending Telegram notification: {e}", exc_info=True)
            return DispatchOutcome(
                500,
                {
                    "success": False,
                    "error": str(e),
                    "details": "Check the dispatcher logs for more information",
                },
            )

    def _dispatch(self, request: NotificationRequest) -> DispatchOutcome:
        user_id = request.recipient_id
        kind = request.kind

        chat_id = self.store.get_active_link(user_id)
        if chat_id is None:
            logger.info("User not connected to Telegram or notifications disabled")
            return DispatchOutcome(
                200, {"success": False, "error": "User not connected to Telegram"}
            )

        prefs = self.store.get_settings(user_id) or NotificationPreferences()

        if not is_kind_enabled(kind, prefs):
            logger.info(f"Notification type {kind.value} is disabled for user {user_id}")
            return DispatchOutcome(
                200, {"success": True, "message": "Notification type disabled"}
            )

        if should_hold(prefs, self.clock()):
            logger.info(f"In quiet hours for user {user_id}")
            return DispatchOutcome(200, {"success": True, "message": "In quiet hours"})

        bot_token = self.store.get_active_bot_token()
        if not bot_token:
            logger.error("Bot configuration error: no active bot token")
            return DispatchOutcome(500, {"success": False, "error": "Bot not configured"})

        message = format_notification_message(kind, request.subject)
        reply_markup = create_reply_markup(kind, request.subject.id, self.frontend_url)

        provider = self.provider_factory(bot_token)
        provider.send_message(
            chat_id=chat_id,
            text=message,
            parse_mode="Markdown",
            reply_markup=reply_markup,
        )

        return DispatchOutcome(200, {"success": True, "message": "Notification sent"})
