from __future__ import annotations

import logging
from collections import deque
from typing import IO, Iterable

logger = logging.getLogger(__name__)

DEFAULT_LINES = 15


def _decode(raw: bytes) -> str:
    line = raw.decode("utf-8", errors="replace")
    if line.endswith("\n"):
        line = line[:-1]
        if line.endswith("\r"):
            line = line[:-1]
    return line


def capture_tail(
    source: Iterable[bytes],
    echo: IO[bytes],
    limit: int = DEFAULT_LINES,
) -> list[str]:
    """Echo every line of ``source`` to ``echo`` and return the last ``limit`` lines.

    Lines reach ``echo`` byte for byte; only the kept tail is decoded. A read
    or write error ends the capture early and whatever was kept so far is
    returned.
    """
    if limit < 0:
        raise ValueError(f"limit must be >= 0, got {limit}")

    tail: deque[str] = deque(maxlen=limit)
    seen = 0
    try:
        for raw in source:
            seen += 1
            echo.write(raw if raw.endswith(b"\n") else raw + b"\n")
            echo.flush()
            tail.append(_decode(raw))
    except (OSError, ValueError) as exc:
        logger.warning("Stopped reading stream after %d line(s): %s", seen, exc)

    return list(tail)
