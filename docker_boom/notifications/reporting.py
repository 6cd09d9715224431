from __future__ import annotations

"""
Failure report rendering.

The report is a single fenced block so chat clients render it monospaced:

    ```
    CMD: make test
    STDERR:
    ...
    STDOUT:
    ...
    ```

Sections whose tail is empty are left out entirely.
"""

from typing import Sequence

from ..models import Invocation

FENCE = "```"


def _section(label: str, lines: Sequence[str]) -> list[str]:
    if not lines:
        return []
    return [f"{label}:", *lines]


def format_report(
    invocation: Invocation,
    stdout_tail: Sequence[str],
    stderr_tail: Sequence[str],
) -> str:
    parts = [
        FENCE,
        f"CMD: {invocation.display()}",
        *_section("STDERR", stderr_tail),
        *_section("STDOUT", stdout_tail),
        FENCE,
    ]
    return "\n".join(parts)
