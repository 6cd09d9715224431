from __future__ import annotations

from typing import Any

import pytest
import requests

from docker_boom.notifications.slack import API_URL, SlackClient, SlackError


# -----------------------------
# Test doubles
# -----------------------------
class FakeResponse:
    def __init__(self, payload: dict[str, Any], status_code: int = 200) -> None:
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self) -> dict[str, Any]:
        return self._payload


class FakeSession:
    def __init__(self, response: FakeResponse) -> None:
        self.headers: dict[str, str] = {}
        self.calls: list[dict[str, Any]] = []
        self.closed = False
        self._response = response

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"url": url, **kwargs})
        return self._response

    def close(self) -> None:
        self.closed = True


# -----------------------------
# Tests
# -----------------------------
def test_posts_message_with_bearer_token():
    session = FakeSession(FakeResponse({"ok": True}))
    client = SlackClient("xoxb-secret", session=session, timeout=5)

    client.post_message("#ops", "hello")

    assert session.headers["Authorization"] == "Bearer xoxb-secret"
    assert session.calls == [
        {"url": API_URL, "json": {"channel": "#ops", "text": "hello"}, "timeout": 5}
    ]


def test_api_rejection_raises_slack_error():
    session = FakeSession(FakeResponse({"ok": False, "error": "channel_not_found"}))
    client = SlackClient("xoxb-secret", session=session)

    with pytest.raises(SlackError) as excinfo:
        client.post_message("#nowhere", "hello")

    assert excinfo.value.error == "channel_not_found"
    assert excinfo.value.channel == "#nowhere"


def test_http_error_propagates():
    session = FakeSession(FakeResponse({}, status_code=500))
    client = SlackClient("xoxb-secret", session=session)

    with pytest.raises(requests.HTTPError):
        client.post_message("#ops", "hello")


def test_close_releases_its_own_session(monkeypatch):
    session = FakeSession(FakeResponse({"ok": True}))
    monkeypatch.setattr(requests, "Session", lambda: session)

    with SlackClient("xoxb-secret") as client:
        client.post_message("#ops", "hello")

    assert session.closed


def test_close_leaves_injected_session_open():
    session = FakeSession(FakeResponse({"ok": True}))

    SlackClient("xoxb-secret", session=session).close()

    assert not session.closed
