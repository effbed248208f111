"""Subprocess execution with Result-based error handling.

Every package-manager invocation goes through a ``CommandRunner`` so the
publish workflow can be driven by a fake in tests:

    runner = SubprocessRunner()
    match runner.run(["npm", "whoami"], cwd=Path(".")):
        case Ok(stdout):
            print(stdout)
        case Err(error):
            print(f"Failed: {error.stderr}")
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from npmpush.core.result import Err, Ok, Result

__all__ = ["CommandRunner", "ProcessError", "SubprocessRunner", "run", "run_silent"]


@dataclass(frozen=True, slots=True)
class ProcessError:
    """Error from a failed subprocess execution.

    Attributes:
        command: The command that was executed.
        returncode: The exit code of the process (-1 if it could not start).
        stdout: Standard output (empty when output was streamed).
        stderr: Standard error (empty when output was streamed).
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    def __str__(self) -> str:
        cmd_str = " ".join(self.command[:3])
        if len(self.command) > 3:
            cmd_str += " ..."
        return f"{cmd_str} failed (exit {self.returncode})"


def run(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
) -> Result[str, ProcessError]:
    """Execute a command, capturing output.

    Args:
        cmd: Command and arguments to execute.
        cwd: Working directory for the command.
        env: Environment variables (uses current env if None).

    Returns:
        Ok(stdout) on success, Err(ProcessError) on failure.
    """
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            env=env,
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as e:
        return Err(ProcessError(command=tuple(cmd), returncode=-1, stdout="", stderr=str(e)))

    if proc.returncode != 0:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=proc.returncode,
                stdout=proc.stdout,
                stderr=proc.stderr,
            )
        )

    return Ok(proc.stdout)


def run_silent(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
) -> Result[str, ProcessError]:
    """Execute a command with stdout/stderr passed through to the terminal.

    Returns:
        Ok("") on success, Err(ProcessError) carrying only the exit code on failure.
    """
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            env=env,
            check=False,
        )
    except OSError as e:
        return Err(ProcessError(command=tuple(cmd), returncode=-1, stdout="", stderr=str(e)))

    if proc.returncode != 0:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=proc.returncode,
                stdout="",
                stderr="",
            )
        )

    return Ok("")


class CommandRunner(Protocol):
    """Capability to run an external command to completion."""

    def run(
        self,
        cmd: list[str],
        cwd: Path,
        env: dict[str, str] | None = None,
        *,
        stream: bool = False,
    ) -> Result[str, ProcessError]:
        """Run ``cmd`` in ``cwd``.

        With ``stream=True`` output goes straight to the operator's terminal
        and is not captured.
        """
        ...


class SubprocessRunner:
    """CommandRunner backed by the real ``subprocess`` module."""

    def run(
        self,
        cmd: list[str],
        cwd: Path,
        env: dict[str, str] | None = None,
        *,
        stream: bool = False,
    ) -> Result[str, ProcessError]:
        if stream:
            return run_silent(cmd, cwd=cwd, env=env)
        return run(cmd, cwd=cwd, env=env)
