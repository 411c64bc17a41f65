"""
Client-side notification sender.

Posts a NotificationRequest straight to the dispatcher function using the
bearer token of the current session. Every outcome is reported as a
RelayResult; ``send`` never raises.

Usage:
    async with NotificationSender(StaticTokenProvider(token)) as sender:
        result = await sender.send(request)
        if not result.success:
            print(result.error)
"""

import json
import logging
import os
from typing import Optional, Protocol

import httpx

from taskbell.core.config import get_config
from taskbell.notifications.models import (
    NotificationRequest,
    RelayErrorKind,
    RelayResult,
)

logger = logging.getLogger(__name__)

MISSING_TOKEN_ERROR = "Missing auth token"
SEND_FAILED_ERROR = "Failed to send notification"
EMPTY_RESPONSE_ERROR = "Dispatcher returned an empty response"


class TokenProvider(Protocol):
    """Supplies the bearer credential of the current authenticated session."""

    async def get_current_access_token(self) -> Optional[str]:
        ...


class StaticTokenProvider:
    """Token provider returning a fixed token (or none)."""

    def __init__(self, token: Optional[str]):
        self.token = token

    async def get_current_access_token(self) -> Optional[str]:
        return self.token


class EnvTokenProvider:
    """Token provider reading the token from an environment variable."""

    def __init__(self, var: str = "TASKBELL_ACCESS_TOKEN"):
        self.var = var

    async def get_current_access_token(self) -> Optional[str]:
        return os.getenv(self.var) or None


class NotificationSender:
    """
    Sends notification requests to the remote dispatcher.

    A single best-effort attempt per call: no retries, no queueing.
    """

    def __init__(
        self,
        token_provider: TokenProvider,
        dispatcher_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the sender.

        Args:
            token_provider: Source of the session bearer token
            dispatcher_url: Dispatcher URL (defaults to configuration)
            client: Optional HTTP client; the sender creates and owns one otherwise
        """
        self.token_provider = token_provider
        self.dispatcher_url = dispatcher_url or get_config().dispatcher.url
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient()

    async def send(self, request: NotificationRequest) -> RelayResult:
        """
        Send one notification request.

        Args:
            request: Notification to send

        Returns:
            RelayResult with the dispatcher's parsed response on success
        """
        try:
            token = await self.token_provider.get_current_access_token()
            if not token:
                logger.warning(
                    f"No session token, not sending {request.kind.value} "
                    f"notification for {request.subject.id}"
                )
                return RelayResult.fail(
                    RelayErrorKind.PRECONDITION_FAILED, MISSING_TOKEN_ERROR
                )

            response = await self.client.post(
                self.dispatcher_url,
                json=request.to_wire(),
                headers={
                    "Content-Type": "application/json",
                    "Authorization": f"Bearer {token}",
                },
            )

            if not response.is_success:
                logger.error(
                    f"Dispatcher returned status {response.status_code}: {response.text}"
                )
                return RelayResult.fail(RelayErrorKind.TRANSPORT_ERROR, SEND_FAILED_ERROR)

            data = response.json()
            if data is None:
                logger.error("Dispatcher returned an empty (null) JSON body")
                return RelayResult.fail(RelayErrorKind.PARSE_ERROR, EMPTY_RESPONSE_ERROR)

            return RelayResult.ok(data)

        except httpx.HTTPError as e:
            logger.error(f"Error sending notification: {e}")
            return RelayResult.fail(RelayErrorKind.TRANSPORT_ERROR, str(e))
        except json.JSONDecodeError as e:
            logger.error(f"Dispatcher returned invalid JSON: {e}")
            return RelayResult.fail(RelayErrorKind.PARSE_ERROR, str(e))
        except Exception as e:
            logger.error(f"Unexpected error sending notification: {e}", exc_info=True)
            return RelayResult.fail(RelayErrorKind.UNKNOWN_ERROR, str(e))

    async def close(self) -> None:
        """Close the HTTP client if the sender created it."""
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self):
        """Context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        await self.close()


async def send_notification(
    request: NotificationRequest,
    token_provider: TokenProvider,
    dispatcher_url: Optional[str] = None,
) -> RelayResult:
    """
    Convenience function to send one notification with a short-lived sender.

    Args:
        request: Notification to send
        token_provider: Source of the session bearer token
        dispatcher_url: Optional dispatcher URL override

    Returns:
        RelayResult describing the outcome
    """
    async with NotificationSender(token_provider, dispatcher_url) as sender:
        return await sender.send(request)
