"""
Taskbell - task, sprint and reminder notifications over Telegram

This package carries notifications from the task management web app to
users' Telegram chats.

Main modules:
- notifications: request models, builder, client-side sender, formatters
- dispatch: delivery policy, chat link store, dispatch service
- ui: relay and dispatcher HTTP endpoints
- cli: taskbellctl operational CLI
"""

__version__ = "0.1.0"
__author__ = "Taskbell Team"

__all__ = ["__version__", "__author__"]
