"""
Tests for the client-side notification sender.
"""

import asyncio
import json

import httpx
import pytest

from taskbell.notifications.models import (
    NotificationKind,
    NotificationRequest,
    RelayErrorKind,
)
from taskbell.notifications.sender import (
    EnvTokenProvider,
    NotificationSender,
    StaticTokenProvider,
)

from conftest import DISPATCHER_URL


class RecordingDispatcher:
    """MockTransport handler that records requests and returns a fixed reply."""

    def __init__(self, status_code=200, body=None, content=None, error=None):
        self.status_code = status_code
        self.body = body if body is not None else {"ok": True}
        self.content = content
        self.error = error
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.content is not None:
            return httpx.Response(self.status_code, content=self.content)
        return httpx.Response(self.status_code, json=self.body)


def send(request, dispatcher, token_provider=None):
    token_provider = token_provider or StaticTokenProvider("abc")

    async def _run():
        transport = httpx.MockTransport(dispatcher)
        async with httpx.AsyncClient(transport=transport) as client:
            sender = NotificationSender(
                token_provider, dispatcher_url=DISPATCHER_URL, client=client
            )
            return await sender.send(request)

    return asyncio.run(_run())


class TestMissingToken:

    def test_no_token_fails_without_io(self, sample_request):
        dispatcher = RecordingDispatcher()

        result = send(sample_request, dispatcher, StaticTokenProvider(None))

        assert result.success is False
        assert result.error == "Missing auth token"
        assert result.error_kind == RelayErrorKind.PRECONDITION_FAILED
        assert len(dispatcher.requests) == 0

    def test_empty_token_counts_as_missing(self, sample_request):
        dispatcher = RecordingDispatcher()

        result = send(sample_request, dispatcher, StaticTokenProvider(""))

        assert result.error == "Missing auth token"
        assert len(dispatcher.requests) == 0

    def test_env_provider_without_variable(self, sample_request):
        dispatcher = RecordingDispatcher()

        result = send(sample_request, dispatcher, EnvTokenProvider())

        assert result.error == "Missing auth token"
        assert len(dispatcher.requests) == 0


class TestSend:

    def test_success_returns_parsed_body(self, sample_request):
        dispatcher = RecordingDispatcher(200, {"ok": True})

        result = send(sample_request, dispatcher)

        assert result.success is True
        assert result.data == {"ok": True}
        assert result.error is None
        assert result.to_dict() == {"success": True, "data": {"ok": True}}

    def test_posts_wire_body_with_bearer_token(self, sample_request):
        dispatcher = RecordingDispatcher()

        send(sample_request, dispatcher, StaticTokenProvider("secret-token"))

        assert len(dispatcher.requests) == 1
        outbound = dispatcher.requests[0]
        assert outbound.method == "POST"
        assert str(outbound.url) == DISPATCHER_URL
        assert outbound.headers["authorization"] == "Bearer secret-token"
        assert outbound.headers["content-type"] == "application/json"

        body = json.loads(outbound.content)
        assert body["user_id"] == "user-1"
        assert body["notification_type"] == "task_reminder"
        assert body["item_data"]["id"] == "task-42"
        assert body["item_data"]["name"] == "Prepare sprint review"
        assert body["item_data"]["project_name"] == "Website"

    def test_env_provider_supplies_token(self, sample_request, monkeypatch):
        monkeypatch.setenv("TASKBELL_ACCESS_TOKEN", "from-env")
        dispatcher = RecordingDispatcher()

        result = send(sample_request, dispatcher, EnvTokenProvider())

        assert result.success is True
        assert dispatcher.requests[0].headers["authorization"] == "Bearer from-env"

    @pytest.mark.parametrize("status_code", [400, 401, 404, 500, 503])
    def test_non_success_status_hides_remote_body(self, sample_request, status_code):
        dispatcher = RecordingDispatcher(
            status_code, {"success": False, "error": "Bot not configured"}
        )

        result = send(sample_request, dispatcher)

        assert result.success is False
        assert result.error == "Failed to send notification"
        assert result.error_kind == RelayErrorKind.TRANSPORT_ERROR
        assert result.data is None


class TestFailures:

    def test_network_error_is_reported(self, sample_request):
        dispatcher = RecordingDispatcher(error=httpx.ConnectError("connection refused"))

        result = send(sample_request, dispatcher)

        assert result.success is False
        assert result.error == "connection refused"
        assert result.error_kind == RelayErrorKind.TRANSPORT_ERROR

    def test_malformed_json_is_reported(self, sample_request):
        dispatcher = RecordingDispatcher(200, content=b"<html>oops</html>")

        result = send(sample_request, dispatcher)

        assert result.success is False
        assert result.error_kind == RelayErrorKind.PARSE_ERROR
        assert result.error

    def test_null_body_is_a_parse_error(self, sample_request):
        dispatcher = RecordingDispatcher(200, content=b"null")

        result = send(sample_request, dispatcher)

        assert result.success is False
        assert result.error_kind == RelayErrorKind.PARSE_ERROR
        assert result.error == "Dispatcher returned an empty response"
        assert result.data is None

    def test_token_provider_error_is_reported(self, sample_request):
        class BrokenProvider:
            async def get_current_access_token(self):
                raise RuntimeError("session store unavailable")

        dispatcher = RecordingDispatcher()

        result = send(sample_request, dispatcher, BrokenProvider())

        assert result.success is False
        assert result.error == "session store unavailable"
        assert result.error_kind == RelayErrorKind.UNKNOWN_ERROR
        assert len(dispatcher.requests) == 0


class TestResultShape:

    @pytest.mark.parametrize("kind", list(NotificationKind))
    @pytest.mark.parametrize("status_code", [200, 500])
    def test_exactly_one_of_data_or_error(self, sample_request, kind, status_code):
        request = NotificationRequest(
            recipient_id=sample_request.recipient_id,
            kind=kind,
            subject=sample_request.subject,
        )
        dispatcher = RecordingDispatcher(status_code, {"ok": True})

        result = send(request, dispatcher)

        assert (result.data is None) != (result.error is None)
        assert result.success == (result.error is None)
