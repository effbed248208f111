"""Process exit codes for the npm-push CLI.

The values are part of the CLI contract and should remain stable:
- 0: Success
- 1: User error (bad version, invalid arguments)
- 2: Environment error (missing tool, broken config)
- 3: Auth error (not logged in to the registry)
- 4: Publish error (the registry publish command failed)
- 5: I/O error (manifest or changelog could not be read/written)
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    AUTH_ERROR = 3
    PUBLISH_ERROR = 4
    IO_ERROR = 5

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK
