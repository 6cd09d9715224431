from __future__ import annotations

import logging

import requests

logger = logging.getLogger(__name__)

API_URL = "https://slack.com/api/chat.postMessage"


class SlackError(RuntimeError):
    def __init__(self, error: str, channel: str) -> None:
        super().__init__(f"Slack rejected message to {channel}: {error}")
        self.error = error
        self.channel = channel


class SlackClient:
    def __init__(
        self,
        token: str,
        session: requests.Session | None = None,
        timeout: int = 20,
    ) -> None:
        self._owns_session = session is None
        self._session = session or requests.Session()
        self._session.headers.update({"Authorization": f"Bearer {token}"})
        self.timeout = timeout

    def close(self) -> None:
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> "SlackClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def post_message(self, channel: str, text: str) -> None:
        response = self._session.post(
            API_URL,
            json={"channel": channel, "text": text},
            timeout=self.timeout,
        )
        response.raise_for_status()

        # The Web API answers 200 even for rejected messages.
        payload = response.json()
        if not payload.get("ok"):
            raise SlackError(payload.get("error", "unknown_error"), channel)
        logger.debug("Posted message to %s", channel)
