"""
HTTP APIs: notification relay and Telegram dispatcher.
"""
