"""Error variants for the publish workflow.

Each variant is a plain value; steps return them inside ``Err`` and the CLI
maps them to console output and exit codes (see ``npmpush.output.errors``).
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class InvalidVersionError:
    version: str
    hint: str = "Expected MAJOR.MINOR.PATCH[-PRERELEASE]"

    @property
    def message(self) -> str:
        return f"invalid version: {self.version!r}"


@dataclass(frozen=True, slots=True)
class ManifestReadError:
    path: Path
    reason: str

    @property
    def message(self) -> str:
        return f"failed to read {self.path.name}: {self.reason}"


@dataclass(frozen=True, slots=True)
class ManifestWriteError:
    path: Path
    reason: str

    @property
    def message(self) -> str:
        return f"failed to write {self.path.name}: {self.reason}"


@dataclass(frozen=True, slots=True)
class ChangelogError:
    path: Path
    reason: str

    @property
    def message(self) -> str:
        return f"changelog {self.path.name}: {self.reason}"


@dataclass(frozen=True, slots=True)
class NotLoggedInError:
    registry: str

    @property
    def message(self) -> str:
        return f"not logged in to {self.registry}"

    @property
    def hint(self) -> str:
        return f"Run: npm login --registry {self.registry}"


@dataclass(frozen=True, slots=True)
class AuthCheckError:
    registry: str
    detail: str

    @property
    def message(self) -> str:
        return f"auth check failed for {self.registry}: {self.detail}"


@dataclass(frozen=True, slots=True)
class PublishCommandError:
    returncode: int
    detail: str = ""

    @property
    def message(self) -> str:
        if self.detail:
            return f"publish command failed (exit {self.returncode}): {self.detail}"
        return f"publish command failed (exit {self.returncode})"


@dataclass(frozen=True, slots=True)
class RollbackError:
    """Restore failures collected during rollback.

    Only ever reported; the error that triggered the rollback is what the
    caller receives.
    """

    failures: tuple[str, ...]

    @property
    def message(self) -> str:
        return "rollback incomplete: " + "; ".join(self.failures)


PublishError = (
    InvalidVersionError
    | ManifestReadError
    | ManifestWriteError
    | ChangelogError
    | NotLoggedInError
    | AuthCheckError
    | PublishCommandError
)
