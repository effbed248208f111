"""Platform abstraction layer."""

from .files import atomic_write_text
from .process import CommandRunner, ProcessError, SubprocessRunner, run, run_silent

__all__ = [
    # files
    "atomic_write_text",
    # process
    "CommandRunner",
    "ProcessError",
    "SubprocessRunner",
    "run",
    "run_silent",
]
