"""
Telegram Bot API provider used by the dispatcher to deliver messages.
"""

import logging
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger(__name__)


class TelegramAPIError(Exception):
    """Raised when the Telegram Bot API rejects a message."""
    pass


class TelegramProvider:
    """
    Telegram notification provider using the Bot API ``sendMessage`` call.

    Usage:
        provider = TelegramProvider(bot_token="123:abc")
        provider.send_message(chat_id=42, text="*Hello*")
    """

    def __init__(
        self,
        bot_token: str,
        api_base: str = "https://api.telegram.org",
        timeout: float = 10.0,
    ):
        """
        Initialize Telegram provider.

        Args:
            bot_token: Telegram Bot API token
            api_base: Bot API base URL
            timeout: Request timeout in seconds
        """
        self.bot_token = bot_token
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout

    @property
    def send_message_url(self) -> str:
        return f"{self.api_base}/bot{self.bot_token}/sendMessage"

    def send_message(
        self,
        chat_id: int,
        text: str,
        parse_mode: Optional[str] = "Markdown",
        reply_markup: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Send a message to a chat.

        Args:
            chat_id: Telegram chat ID
            text: Message text
            parse_mode: Telegram parse mode (Markdown, HTML or None)
            reply_markup: Optional inline keyboard

        Returns:
            Parsed Bot API response

        Raises:
            TelegramAPIError: If the Bot API responds with an error status
            requests.RequestException: On network failure
        """
        payload: Dict[str, Any] = {"chat_id": chat_id, "text": text}
        if parse_mode:
            payload["parse_mode"] = parse_mode
        if reply_markup:
            payload["reply_markup"] = reply_markup

        response = requests.post(
            self.send_message_url,
            json=payload,
            headers={"Content-Type": "application/json"},
            timeout=self.timeout,
        )

        if not response.ok:
            try:
                description = response.json().get("description")
            except ValueError:
                description = response.text
            logger.error(f"Telegram API error for chat {chat_id}: {description}")
            raise TelegramAPIError(f"Telegram API error: {description}")

        logger.info(f"Notification sent to chat_id: {chat_id}")
        return response.json()
