"""
Tests for the notification relay endpoint.
"""

import json

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from taskbell.ui.relay_api import (
    get_dispatcher_client,
    get_dispatcher_url,
    relay_error_message,
    router,
)

from conftest import DISPATCHER_URL

RELAY_PATH = "/api/send-telegram-notification"

BODY = {
    "user_id": "user-1",
    "notification_type": "overdue",
    "item_data": {"id": "t1", "name": "Invoice", "datetime": "2025-01-05T10:00:00Z"},
}


class FakeDispatcher:
    """MockTransport handler recording outbound relay calls."""

    def __init__(self, status_code=200, body=None, content=None):
        self.status_code = status_code
        self.body = body if body is not None else {"success": True}
        self.content = content
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.content is not None:
            return httpx.Response(self.status_code, content=self.content)
        return httpx.Response(self.status_code, json=self.body)


def make_client(dispatcher: FakeDispatcher) -> TestClient:
    app = FastAPI()
    app.include_router(router)

    async def fake_client():
        async with httpx.AsyncClient(transport=httpx.MockTransport(dispatcher)) as client:
            yield client

    app.dependency_overrides[get_dispatcher_client] = fake_client
    app.dependency_overrides[get_dispatcher_url] = lambda: DISPATCHER_URL
    return TestClient(app)


class TestMethodCheck:

    @pytest.mark.parametrize("method", ["GET", "PUT", "PATCH", "DELETE", "OPTIONS", "TRACE"])
    def test_non_post_is_rejected(self, method):
        dispatcher = FakeDispatcher()
        client = make_client(dispatcher)

        response = client.request(method, RELAY_PATH)

        assert response.status_code == 405
        assert response.headers["allow"] == "POST"
        assert response.json() == {"error": "Method Not Allowed"}
        assert len(dispatcher.requests) == 0


class TestForwarding:

    def test_forwards_authorization_header(self):
        dispatcher = FakeDispatcher()
        client = make_client(dispatcher)

        client.post(RELAY_PATH, json=BODY, headers={"Authorization": "Bearer abc"})

        assert len(dispatcher.requests) == 1
        outbound = dispatcher.requests[0]
        assert outbound.method == "POST"
        assert str(outbound.url) == DISPATCHER_URL
        assert outbound.headers["authorization"] == "Bearer abc"

    def test_no_inbound_authorization_means_none_outbound(self):
        dispatcher = FakeDispatcher()
        client = make_client(dispatcher)

        client.post(RELAY_PATH, json=BODY)

        assert len(dispatcher.requests) == 1
        assert "authorization" not in dispatcher.requests[0].headers

    def test_body_is_forwarded_verbatim(self):
        dispatcher = FakeDispatcher()
        client = make_client(dispatcher)
        body = dict(BODY, extra_field={"nested": [1, 2, 3]})

        client.post(RELAY_PATH, json=body)

        assert json.loads(dispatcher.requests[0].content) == body
        assert dispatcher.requests[0].headers["content-type"] == "application/json"

    @pytest.mark.parametrize("status_code", [200, 201, 401, 500])
    def test_dispatcher_status_and_body_are_relayed(self, status_code):
        reply = {"success": status_code < 400, "message": "relayed", "n": 3}
        dispatcher = FakeDispatcher(status_code, reply)
        client = make_client(dispatcher)

        response = client.post(RELAY_PATH, json=BODY)

        assert response.status_code == status_code
        assert response.json() == reply


class TestErrors:

    def test_malformed_inbound_json_returns_500(self):
        dispatcher = FakeDispatcher()
        client = make_client(dispatcher)

        response = client.post(
            RELAY_PATH,
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 500
        assert isinstance(response.json()["error"], str)
        assert response.json()["error"]
        assert len(dispatcher.requests) == 0

    def test_non_json_dispatcher_reply_returns_500(self):
        dispatcher = FakeDispatcher(502, content=b"Bad Gateway")
        client = make_client(dispatcher)

        response = client.post(RELAY_PATH, json=BODY)

        assert response.status_code == 500
        assert "error" in response.json()


class TestErrorMessage:

    def test_exception_text_is_used(self):
        assert relay_error_message(ValueError("boom")) == "boom"

    def test_exception_without_arguments(self):
        assert relay_error_message(RuntimeError()) == "An unknown error occurred"

    def test_empty_exception_text(self):
        assert relay_error_message(RuntimeError("")) == "Internal Server Error"
