"""
Notification relay endpoint.

Forwards "send this notification" requests from the web app to the
dispatcher function, passing the caller's Authorization header through and
returning the dispatcher's status code and JSON body unchanged.
"""

import logging
from typing import AsyncIterator

import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from taskbell.core.config import get_config

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["notifications"])

RELAY_METHODS = [
    "GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "TRACE", "CONNECT",
]


async def get_dispatcher_client() -> AsyncIterator[httpx.AsyncClient]:
    """Yield an HTTP client for the outbound dispatcher call."""
    async with httpx.AsyncClient(timeout=get_config().dispatcher.timeout) as client:
        yield client


def get_dispatcher_url() -> str:
    """Dispatcher URL from configuration."""
    return get_config().dispatcher.url


def relay_error_message(exc: BaseException) -> str:
    """
    Pick the error text returned to the caller for a failed relay.

    Exceptions raised without arguments report "An unknown error occurred";
    an explicitly empty message reports "Internal Server Error".
    """
    message = str(exc) if exc.args else "An unknown error occurred"
    return message or "Internal Server Error"


@router.api_route("/send-telegram-notification", methods=RELAY_METHODS)
async def relay_notification(
    request: Request,
    client: httpx.AsyncClient = Depends(get_dispatcher_client),
    dispatcher_url: str = Depends(get_dispatcher_url),
) -> JSONResponse:
    """
    Relay a notification request to the dispatcher.

    Only POST is accepted. The body is forwarded verbatim; it is not
    validated beyond JSON parsing.
    """
    if request.method and request.method != "POST":
        return JSONResponse(
            {"error": "Method Not Allowed"},
            status_code=405,
            headers={"Allow": "POST"},
        )

    try:
        body = await request.json()

        headers = {"Content-Type": "application/json"}
        auth = request.headers.get("authorization")
        if auth:
            headers["Authorization"] = auth

        logger.debug(
            f"Forwarding notification to dispatcher "
            f"(authorization={'yes' if auth else 'no'})"
        )

        response = await client.post(dispatcher_url, json=body, headers=headers)
        data = response.json()

        return JSONResponse(data, status_code=response.status_code)

    except Exception as e:
        logger.error(f"Notification relay failed: {e}", exc_info=True)
        return JSONResponse({"error": relay_error_message(e)}, status_code=500)
