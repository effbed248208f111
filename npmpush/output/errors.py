"""Error presentation: console text and exit code per publish error."""

from __future__ import annotations

from typing import TYPE_CHECKING

from npmpush.core.errors import ErrorCode
from npmpush.output.console import Style
from npmpush.services.publish.errors import (
    AuthCheckError,
    ChangelogError,
    InvalidVersionError,
    ManifestReadError,
    ManifestWriteError,
    NotLoggedInError,
    PublishCommandError,
    PublishError,
)

if TYPE_CHECKING:
    from npmpush.output.console import ConsoleProtocol

__all__ = ["print_publish_error", "publish_error_exit_code"]


def print_publish_error(error: PublishError, console: ConsoleProtocol) -> None:
    console.error(error.message)
    match error:
        case InvalidVersionError(hint=hint):
            console.print(f"hint: {hint}", Style.DIM)
        case NotLoggedInError():
            console.print(f"hint: {error.hint}", Style.DIM)
        case ManifestReadError(path=path) | ManifestWriteError(path=path) | ChangelogError(path=path):
            console.print(str(path), Style.DIM)
        case PublishCommandError(returncode=-1):
            console.print("hint: is the package manager installed and on PATH?", Style.DIM)
        case _:
            pass


def publish_error_exit_code(error: PublishError) -> int:
    match error:
        case InvalidVersionError():
            return int(ErrorCode.USER_ERROR)
        case NotLoggedInError() | AuthCheckError():
            return int(ErrorCode.AUTH_ERROR)
        case PublishCommandError(returncode=-1):
            return int(ErrorCode.ENV_ERROR)
        case PublishCommandError():
            return int(ErrorCode.PUBLISH_ERROR)
        case ManifestReadError() | ManifestWriteError() | ChangelogError():
            return int(ErrorCode.IO_ERROR)
    # Fallback for exhaustiveness
    return int(ErrorCode.USER_ERROR)
