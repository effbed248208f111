"""Output abstraction layer."""

from .console import (
    ConsoleProtocol,
    MockConsole,
    RichConsole,
    Style,
)
from .reporter import ConsoleReporter, MockReporter, PhaseReporter

__all__ = [
    "ConsoleProtocol",
    "ConsoleReporter",
    "MockConsole",
    "MockReporter",
    "PhaseReporter",
    "RichConsole",
    "Style",
]
