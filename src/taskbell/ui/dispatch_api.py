"""
Dispatcher endpoint.

Receives notification requests (from the relay or directly from the web
client) and hands them to the NotificationDispatchService.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from taskbell.core.config import get_config
from taskbell.dispatch.service import NotificationDispatchService
from taskbell.dispatch.store import TelegramStore
from taskbell.notifications.models import NotificationRequest
from taskbell.notifications.providers import TelegramProvider

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/functions/v1", tags=["dispatch"])

# Global service instance
_service: Optional[NotificationDispatchService] = None


def get_dispatch_service() -> NotificationDispatchService:
    """
    Get or create the global dispatch service.

    Returns:
        NotificationDispatchService built from configuration
    """
    global _service
    if _service is None:
        telegram = get_config().telegram
        _service = NotificationDispatchService(
            store=TelegramStore(telegram.db_path),
            provider_factory=lambda token: TelegramProvider(
                token, api_base=telegram.api_base, timeout=telegram.timeout
            ),
            frontend_url=telegram.frontend_url,
        )
    return _service


@router.post("/send-telegram-notification")
async def dispatch_notification(
    request: Request,
    service: NotificationDispatchService = Depends(get_dispatch_service),
) -> JSONResponse:
    """
    Deliver a notification to the user's Telegram chat.

    Returns the dispatch outcome; malformed or incomplete requests get a
    500 with "Missing required parameters".
    """
    try:
        payload = await request.json()
        notification = NotificationRequest.from_wire(payload)
    except (ValueError, ValidationError) as e:
        logger.warning(f"Rejected dispatch request: {e}")
        return JSONResponse(
            {"success": False, "error": "Missing required parameters"},
            status_code=500,
        )

    logger.info(
        f"Dispatching {notification.kind.value} notification for "
        f"user {notification.recipient_id}"
    )
    outcome = await run_in_threadpool(service.dispatch, notification)

    return JSONResponse(outcome.body, status_code=outcome.status_code)
