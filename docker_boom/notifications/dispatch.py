from __future__ import annotations

import logging
from typing import Callable, Mapping, Protocol

import requests

from ..models import ChannelConfig, Invocation, RunResult
from .reporting import format_report
from .slack import SlackClient, SlackError

logger = logging.getLogger(__name__)

SLACK_CHANNEL = "slack"


class MessageSender(Protocol):
    def post_message(self, channel: str, text: str) -> None: ...

    def close(self) -> None: ...


def dispatch_report(
    invocation: Invocation,
    result: RunResult,
    channels: Mapping[str, ChannelConfig],
    credentials: Callable[[str], str | None],
    client_factory: Callable[[str], MessageSender] = SlackClient,
) -> int:
    """Send the failure report of ``result`` to every configured Slack recipient.

    Returns the number of messages delivered. Nothing is sent for a
    successful run, a run without output, a missing ``slack`` entry or a
    missing token.
    """
    if not result.failed or not result.has_output:
        return 0

    channel = channels.get(SLACK_CHANNEL)
    if channel is None:
        logger.debug("No %s channel configured; skipping notification.", SLACK_CHANNEL)
        return 0

    token = credentials(SLACK_CHANNEL)
    if not token:
        logger.debug("No %s token available; skipping notification.", SLACK_CHANNEL)
        return 0

    client = client_factory(token)
    message = format_report(invocation, result.stdout_tail, result.stderr_tail)

    delivered = 0
    try:
        for recipient in channel.recipients:
            try:
                client.post_message(recipient, message)
            except (requests.RequestException, SlackError) as exc:
                logger.warning("Failed to notify %s: %s", recipient, exc)
                continue
            delivered += 1
    finally:
        client.close()

    logger.info(
        "Reported exit code %d of %r to %d/%d recipient(s)",
        result.exit_code,
        invocation.display(),
        delivered,
        len(channel.recipients),
    )
    return delivered
