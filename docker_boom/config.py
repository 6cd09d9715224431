from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .capture.tail import DEFAULT_LINES
from .models import ChannelConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = ".docker-boom.json"

# Environment variable holding the credential for each channel kind.
TOKEN_VARIABLES = {"slack": "SLACK_TOKEN"}


def load_environment() -> None:
    """Load environment variables from a .env file if present."""
    env_file = os.getenv("ENV_FILE", ".env")
    env_path = Path(env_file)
    if env_path.is_file():
        load_dotenv(env_path)
    else:
        # Fallback: load .env in current working directory if ENV_FILE is missing
        default_path = Path(".env")
        if default_path.is_file():
            load_dotenv(default_path)


def _parse_lines(raw: str | None) -> int:
    if raw is None or not raw.strip():
        return DEFAULT_LINES
    try:
        lines = int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer DOCKER_BOOM_LINES=%r", raw)
        return DEFAULT_LINES
    if lines < 0:
        logger.warning("Ignoring negative DOCKER_BOOM_LINES=%r", raw)
        return DEFAULT_LINES
    return lines


@dataclass(frozen=True)
class Settings:
    config_file: Path
    lines: int = DEFAULT_LINES
    slack_token: str | None = None

    @classmethod
    def from_env(cls) -> "Settings":
        load_environment()

        return cls(
            config_file=Path(os.getenv("DOCKER_BOOM_CONFIG", DEFAULT_CONFIG_FILE)),
            lines=_parse_lines(os.getenv("DOCKER_BOOM_LINES")),
            slack_token=os.getenv(TOKEN_VARIABLES["slack"]) or None,
        )

    def credential_for(self, channel: str) -> str | None:
        if channel == "slack":
            return self.slack_token
        return None


def load_channel_config(path: Path) -> dict[str, ChannelConfig]:
    """Read the channel -> recipients mapping.

    Expected shape::

        {"slack": {"recipients": ["#ops", "@alice"]}}

    A missing or unreadable file gives an empty mapping.
    """
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        logger.debug("No channel config at %s", path)
        return {}
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        logger.warning("Ignoring unreadable channel config %s: %s", path, exc)
        return {}

    if not isinstance(raw, dict):
        logger.warning("Ignoring channel config %s: expected a JSON object", path)
        return {}

    channels: dict[str, ChannelConfig] = {}
    for name, entry in raw.items():
        recipients = entry.get("recipients") if isinstance(entry, dict) else None
        if not isinstance(recipients, list):
            logger.warning("Channel %r has no recipients list; skipping.", name)
            continue
        channels[str(name)] = ChannelConfig(
            recipients=tuple(r for r in recipients if isinstance(r, str) and r)
        )
    return channels
