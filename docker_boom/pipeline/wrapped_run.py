from __future__ import annotations

import logging
from typing import Callable

from ..config import Settings, load_channel_config
from ..models import Invocation, RunResult
from ..notifications.dispatch import MessageSender, dispatch_report
from ..notifications.slack import SlackClient
from ..runner.command import run_command

logger = logging.getLogger(__name__)


def run_wrapped(
    settings: Settings,
    invocation: Invocation,
    client_factory: Callable[[str], MessageSender] = SlackClient,
) -> RunResult:
    channels = load_channel_config(settings.config_file)

    result = run_command(invocation, limit=settings.lines)

    if result.failed:
        logger.info("%r failed with exit code %d", invocation.display(), result.exit_code)
        dispatch_report(
            invocation,
            result,
            channels,
            credentials=settings.credential_for,
            client_factory=client_factory,
        )

    return result
