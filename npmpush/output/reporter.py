"""Phase progress reporting for the publish workflow.

Each workflow phase reports ``start`` and then exactly one of ``succeed`` or
``fail``. Reporters decide how that is shown; the workflow only knows the
protocol.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Protocol

from npmpush.output.console import ConsoleProtocol, Style

__all__ = [
    "ConsoleReporter",
    "MockReporter",
    "Phase",
    "PhaseEvent",
    "PhaseReporter",
]

type Phase = Literal["version", "changelog", "auth", "publish", "rollback"]
type PhaseStatus = Literal["start", "succeed", "fail"]


class PhaseReporter(Protocol):
    def start(self, phase: Phase, message: str) -> None: ...

    def succeed(self, phase: Phase, message: str) -> None: ...

    def fail(self, phase: Phase, message: str) -> None: ...


class ConsoleReporter:
    """Reporter that renders phases as console lines."""

    def __init__(self, console: ConsoleProtocol) -> None:
        self._console = console

    def start(self, phase: Phase, message: str) -> None:
        self._console.print(f"{message}...", Style.DIM)

    def succeed(self, phase: Phase, message: str) -> None:
        self._console.success(message)

    def fail(self, phase: Phase, message: str) -> None:
        self._console.error(message)


@dataclass(frozen=True, slots=True)
class PhaseEvent:
    phase: Phase
    status: PhaseStatus
    message: str


def _empty_events() -> list[PhaseEvent]:
    return []


@dataclass
class MockReporter:
    """Reporter that records events for assertions in tests."""

    events: list[PhaseEvent] = field(default_factory=_empty_events)

    def start(self, phase: Phase, message: str) -> None:
        self.events.append(PhaseEvent(phase, "start", message))

    def succeed(self, phase: Phase, message: str) -> None:
        self.events.append(PhaseEvent(phase, "succeed", message))

    def fail(self, phase: Phase, message: str) -> None:
        self.events.append(PhaseEvent(phase, "fail", message))

    def statuses(self, phase: Phase) -> list[PhaseStatus]:
        return [e.status for e in self.events if e.phase == phase]

    @property
    def phases(self) -> list[Phase]:
        """Phases in the order they were started."""
        return [e.phase for e in self.events if e.status == "start"]
