"""
Telegram link and settings store.

Uses SQLite to persist chat links, per-user notification settings and the
bot configuration used by the dispatcher.
"""

import logging
import sqlite3
from pathlib import Path
from typing import Optional

from taskbell.dispatch.policy import NotificationPreferences

logger = logging.getLogger(__name__)


class TelegramStore:
    """
    SQLite-based storage for Telegram delivery data.

    Tables:
        telegram_notifications: user_id -> chat_id links
        telegram_notification_settings: per-user preferences
        telegram_bot_config: bot tokens (one active at a time)
    """

    def __init__(self, db_path: str = "/var/lib/taskbell/telegram.db"):
        """
        Initialize the store.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = db_path

        # Ensure directory exists
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

        self._init_db()

        logger.info(f"Initialized TelegramStore at {db_path}")

    def _init_db(self) -> None:
        """Create database schema if it doesn't exist."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS telegram_notifications (
                    user_id TEXT PRIMARY KEY,
                    chat_id INTEGER NOT NULL,
                    is_active INTEGER NOT NULL DEFAULT 1
                )
            """)

            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_telegram_notifications_chat
                ON telegram_notifications(chat_id)
            """)

            conn.execute("""
                CREATE TABLE IF NOT EXISTS telegram_notification_settings (
                    user_id TEXT PRIMARY KEY,
                    task_reminders INTEGER NOT NULL DEFAULT 1,
                    sprint_deadlines INTEGER NOT NULL DEFAULT 1,
                    task_slots INTEGER NOT NULL DEFAULT 1,
                    overdue_notifications INTEGER NOT NULL DEFAULT 1,
                    quiet_hours_start TEXT NOT NULL DEFAULT '22:00:00',
                    quiet_hours_end TEXT NOT NULL DEFAULT '08:00:00',
                    timezone TEXT NOT NULL DEFAULT 'Asia/Kolkata'
                )
            """)

            conn.execute("""
                CREATE TABLE IF NOT EXISTS telegram_bot_config (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    bot_token TEXT NOT NULL,
                    is_active INTEGER NOT NULL DEFAULT 1
                )
            """)

            conn.commit()

    def link_chat(self, user_id: str, chat_id: int, is_active: bool = True) -> None:
        """
        Link a user to a Telegram chat, replacing any existing link.

        Args:
            user_id: Application user ID
            chat_id: Telegram chat ID
            is_active: Whether notifications are enabled for the link
        """
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                """
                INSERT INTO telegram_notifications (user_id, chat_id, is_active)
                VALUES (?, ?, ?)
                ON CONFLICT(user_id) DO UPDATE SET
                    chat_id = excluded.chat_id,
                    is_active = excluded.is_active
                """,
                (user_id, chat_id, int(is_active)),
            )
            conn.commit()

        logger.debug(f"Linked user {user_id} to chat {chat_id}")

    def unlink_chat(self, chat_id: int) -> int:
        """
        Remove all links to a chat.

        Returns:
            Number of links removed
        """
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute(
                "DELETE FROM telegram_notifications WHERE chat_id = ?",
                (chat_id,),
            )
            conn.commit()
            return cursor.rowcount

    def get_active_link(self, user_id: str) -> Optional[int]:
        """
        Get the chat ID of a user's active link.

        Returns:
            Chat ID, or None if the user has no active link
        """
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute(
                """
                SELECT chat_id FROM telegram_notifications
                WHERE user_id = ? AND is_active = 1
                """,
                (user_id,),
            )
            row = cursor.fetchone()
            return row[0] if row else None

    def get_settings(self, user_id: str) -> Optional[NotificationPreferences]:
        """
        Get a user's notification settings.

        Returns:
            NotificationPreferences, or None if the user never saved any
        """
        with sqlite3.connect(self.db_path) as conn:
            conn.row_factory = sqlite3.Row
            cursor = conn.execute(
                "SELECT * FROM telegram_notification_settings WHERE user_id = ?",
                (user_id,),
            )
            row = cursor.fetchone()

            if row:
                data = dict(row)
                data.pop("user_id")
                return NotificationPreferences(**data)
            return None

    def save_settings(self, user_id: str, prefs: NotificationPreferences) -> None:
        """Insert or replace a user's notification settings."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO telegram_notification_settings (
                    user_id, task_reminders, sprint_deadlines, task_slots,
                    overdue_notifications, quiet_hours_start, quiet_hours_end,
                    timezone
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    user_id,
                    int(prefs.task_reminders),
                    int(prefs.sprint_deadlines),
                    int(prefs.task_slots),
                    int(prefs.overdue_notifications),
                    prefs.quiet_hours_start.isoformat(),
                    prefs.quiet_hours_end.isoformat(),
                    prefs.timezone,
                ),
            )
            conn.commit()

    def set_bot_token(self, bot_token: str) -> None:
        """Store a bot token and make it the only active one."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("UPDATE telegram_bot_config SET is_active = 0")
            conn.execute(
                "INSERT INTO telegram_bot_config (bot_token, is_active) VALUES (?, 1)",
                (bot_token,),
            )
            conn.commit()

        logger.info("Updated active Telegram bot token")

    def get_active_bot_token(self) -> Optional[str]:
        """Get the active bot token, if one is configured."""
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute(
                """
                SELECT bot_token FROM telegram_bot_config
                WHERE is_active = 1 ORDER BY id DESC LIMIT 1
                """
            )
            row = cursor.fetchone()
            return row[0] if row else None
