from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence


@dataclass(frozen=True, slots=True)
class Invocation:
    command: str
    args: tuple[str, ...] = ()

    @classmethod
    def from_argv(cls, argv: Sequence[str]) -> "Invocation | None":
        if not argv:
            return None
        return cls(command=argv[0], args=tuple(argv[1:]))

    @property
    def argv(self) -> list[str]:
        return [self.command, *self.args]

    def display(self) -> str:
        return " ".join(self.argv)


@dataclass(slots=True)
class RunResult:
    stdout_tail: list[str] = field(default_factory=list)
    stderr_tail: list[str] = field(default_factory=list)
    exit_code: int = 0

    @property
    def failed(self) -> bool:
        return self.exit_code != 0

    @property
    def has_output(self) -> bool:
        return bool(self.stdout_tail or self.stderr_tail)


@dataclass(frozen=True, slots=True)
class ChannelConfig:
    recipients: tuple[str, ...] = ()
