#!/usr/bin/env python3
"""
taskbellctl - Taskbell operational CLI

A lightweight CLI for day-2 operations:
- Health checks (taskbellctl doctor)
- Test notification (taskbellctl send-test)
- Reminder preview (taskbellctl reminders tasks.json)
- Version info (taskbellctl version)
"""

import argparse
import asyncio
import json
import logging
import os
import sys
from datetime import datetime, timedelta, timezone
from typing import Optional

import httpx

from taskbell import __version__
from taskbell.core.config import get_config
from taskbell.notifications.builder import reminder_notifications
from taskbell.notifications.models import (
    NotificationKind,
    NotificationRequest,
    NotificationSubject,
)
from taskbell.notifications.sender import (
    EnvTokenProvider,
    NotificationSender,
    StaticTokenProvider,
)


class Colors:
    """ANSI color codes for terminal output."""

    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    RED = "\033[91m"
    RESET = "\033[0m"
    BOLD = "\033[1m"


def colorize(text: str, color: str) -> str:
    """Colorize text if stdout is a TTY."""
    if sys.stdout.isatty():
        return f"{color}{text}{Colors.RESET}"
    return text


async def check_api(api_url: str, timeout: float = 5.0) -> tuple[str, str]:
    """
    Check if the Taskbell API server is reachable and healthy.

    Returns:
        (status, message) where status is "OK", "WARN", or "ERROR"
    """
    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.get(f"{api_url.rstrip('/')}/health")
            if response.status_code == 200:
                return "OK", "API server is healthy"
            else:
                return "WARN", f"API server returned status {response.status_code}"
    except httpx.ConnectError:
        return "ERROR", "Cannot connect to API server (connection refused)"
    except httpx.TimeoutException:
        return "ERROR", "API server connection timeout"
    except Exception as e:
        return "ERROR", f"Unexpected error: {e}"


async def check_dispatcher(dispatcher_url: str, timeout: float = 5.0) -> tuple[str, str]:
    """
    Check that the dispatcher URL answers at all.

    Any response below 500 counts as reachable; the dispatcher decides
    authorization itself.

    Returns:
        (status, message) where status is "OK", "WARN", or "ERROR"
    """
    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.options(dispatcher_url)
            if response.status_code < 500:
                return "OK", f"Dispatcher reachable (status {response.status_code})"
            else:
                return "WARN", f"Dispatcher returned status {response.status_code}"
    except httpx.ConnectError:
        return "ERROR", "Cannot connect to dispatcher"
    except httpx.TimeoutException:
        return "ERROR", "Dispatcher connection timeout"
    except Exception as e:
        return "ERROR", f"Unexpected error: {e}"


def format_check_result(name: str, status: str, message: str, width: int = 40) -> str:
    """Format a check result line."""
    padding = " " * max(1, width - len(name))

    if status == "OK":
        status_str = colorize("[OK]", Colors.GREEN)
    elif status == "WARN":
        status_str = colorize("[WARN]", Colors.YELLOW)
    else:  # ERROR
        status_str = colorize("[ERROR]", Colors.RED)

    return f"{name}:{padding}{status_str} {message}"


async def cmd_doctor(args) -> int:
    """
    Run health checks and print a summary.

    Returns:
        Exit code (0 on success, non-zero on critical failure)
    """
    print(colorize("\nTaskbell Doctor", Colors.BOLD))
    print(colorize("=" * 60, Colors.BOLD))
    print()

    api_url = os.getenv("TASKBELL_API_URL", "http://localhost:8000")
    dispatcher_url = get_config().dispatcher.url

    all_ok = True

    status, message = await check_api(api_url, timeout=args.timeout)
    print(format_check_result(f"API ({api_url})", status, message))
    if status == "ERROR":
        all_ok = False

    status, message = await check_dispatcher(dispatcher_url, timeout=args.timeout)
    print(format_check_result("Dispatcher", status, message))
    if status == "ERROR":
        all_ok = False

    print()

    if all_ok:
        print(colorize("✓ All critical checks passed", Colors.GREEN))
        return 0
    else:
        print(colorize("✗ One or more critical checks failed", Colors.RED))
        return 1


def build_test_request(user_id: str, kind: str) -> NotificationRequest:
    """Build a sample notification scheduled an hour from now."""
    return NotificationRequest(
        recipient_id=user_id,
        kind=NotificationKind(kind),
        subject=NotificationSubject(
            id="taskbellctl-test",
            display_name="Test notification from taskbellctl",
            occurs_at=datetime.now(timezone.utc) + timedelta(hours=1),
            status="test",
        ),
    )


async def cmd_send_test(args) -> int:
    """
    Send a test notification through the dispatcher.

    Returns:
        Exit code (0 on success, non-zero on failure)
    """
    token_provider = StaticTokenProvider(args.token) if args.token else EnvTokenProvider()
    request = build_test_request(args.user_id, args.kind)

    print(f"Sending test {args.kind} notification for user {args.user_id}...")

    async with NotificationSender(token_provider, dispatcher_url=args.url) as sender:
        result = await sender.send(request)

    if result.success:
        print(colorize("✓ Notification accepted by dispatcher", Colors.GREEN))
        print(json.dumps(result.data, indent=2))
        return 0

    print(
        colorize(f"✗ Failed ({result.error_kind.value}): {result.error}", Colors.RED),
        file=sys.stderr,
    )
    return 1


def cmd_reminders(args) -> int:
    """
    Print the due-soon / overdue notifications for a JSON file of tasks.

    Returns:
        Exit code (0 on success, non-zero on bad input)
    """
    try:
        with open(args.tasks_file, encoding="utf-8") as f:
            tasks = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        print(colorize(f"✗ Cannot read {args.tasks_file}: {e}", Colors.RED), file=sys.stderr)
        return 1

    try:
        requests = reminder_notifications(
            args.user_id, tasks, window=timedelta(minutes=args.window)
        )
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        print(colorize(f"✗ Invalid task row in {args.tasks_file}: {e}", Colors.RED), file=sys.stderr)
        return 1

    print(json.dumps([r.to_wire() for r in requests], indent=2))
    return 0


def cmd_version(args) -> int:
    """
    Print version information.

    Returns:
        Exit code (always 0)
    """
    print(f"taskbellctl version {__version__}")
    print("Taskbell - task and sprint notifications over Telegram")
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for taskbellctl."""
    parser = argparse.ArgumentParser(
        description="Taskbell operational CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  taskbellctl doctor                          # Run health checks
  taskbellctl send-test --user-id <uuid>      # Send a test notification
  taskbellctl reminders tasks.json --user-id <uuid>
  taskbellctl version                         # Show version information

Environment variables:
  TASKBELL_API_URL                  # Taskbell API URL (default: http://localhost:8000)
  TASKBELL_ACCESS_TOKEN             # Session token used by send-test
  DISPATCHER_URL                    # Dispatcher function URL
        """
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv("LOG_LEVEL", "WARNING"),
        help="Logging level (default: WARNING)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # doctor command
    doctor_parser = subparsers.add_parser(
        "doctor",
        help="Run health checks and diagnostics"
    )
    doctor_parser.add_argument(
        "--timeout",
        type=float,
        default=10.0,
        help="Timeout for HTTP requests in seconds (default: 10.0)"
    )

    # send-test command
    test_parser = subparsers.add_parser(
        "send-test",
        help="Send a test notification to the dispatcher"
    )
    test_parser.add_argument("--user-id", required=True, help="User to notify")
    test_parser.add_argument(
        "--kind",
        default=NotificationKind.TASK_REMINDER.value,
        choices=[k.value for k in NotificationKind],
        help="Notification kind (default: task_reminder)"
    )
    test_parser.add_argument(
        "--token",
        default=None,
        help="Bearer token (default: $TASKBELL_ACCESS_TOKEN)"
    )
    test_parser.add_argument(
        "--url",
        default=None,
        help="Dispatcher URL override"
    )

    # reminders command
    reminders_parser = subparsers.add_parser(
        "reminders",
        help="Preview due-soon / overdue notifications for a tasks file"
    )
    reminders_parser.add_argument("tasks_file", help="JSON list of task rows")
    reminders_parser.add_argument("--user-id", required=True, help="User to notify")
    reminders_parser.add_argument(
        "--window",
        type=int,
        default=30,
        help="Due-soon window in minutes (default: 30)"
    )

    # version command
    subparsers.add_parser(
        "version",
        help="Show version information"
    )

    return parser


def main(argv: Optional[list] = None) -> int:
    """Main entry point for taskbellctl CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    if not args.command:
        parser.print_help()
        return 0

    # Dispatch to command handlers
    if args.command == "doctor":
        return asyncio.run(cmd_doctor(args))
    elif args.command == "send-test":
        return asyncio.run(cmd_send_test(args))
    elif args.command == "reminders":
        return cmd_reminders(args)
    elif args.command == "version":
        return cmd_version(args)
    else:
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
