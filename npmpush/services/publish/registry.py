"""Registry auth check and publish, via the package-manager CLI."""

from __future__ import annotations

import os
from pathlib import Path

from npmpush.core.config import ClientName
from npmpush.core.result import Err, Ok, Result
from npmpush.platform.process import CommandRunner
from npmpush.services.publish.errors import AuthCheckError, NotLoggedInError, PublishCommandError

REGISTRY_ENV_VAR = "NPM_CONFIG_REGISTRY"

_NOT_LOGGED_IN_MARKERS = ("not logged in", "unauthorized", "eneedauth")


def whoami_command(client: ClientName, registry: str) -> list[str]:
    match client:
        case "bun":
            return ["bun", "pm", "whoami"]
        case "npm":
            return ["npm", "whoami", "--registry", registry]


def publish_command(client: ClientName, registry: str, otp: str | None) -> list[str]:
    cmd = [client, "publish", "--registry", registry]
    if otp:
        cmd.extend(["--otp", otp])
    return cmd


def check_auth(
    runner: CommandRunner,
    *,
    registry: str,
    cwd: Path,
    client: ClientName = "bun",
) -> Result[str, NotLoggedInError | AuthCheckError]:
    """Return the identity the package manager is logged in as."""
    result = runner.run(whoami_command(client, registry), cwd=cwd)
    if isinstance(result, Err):
        stderr = result.error.stderr.strip()
        if not stderr or any(marker in stderr.lower() for marker in _NOT_LOGGED_IN_MARKERS):
            return Err(NotLoggedInError(registry=registry))
        return Err(AuthCheckError(registry=registry, detail=stderr))

    identity = result.value.strip()
    if not identity:
        return Err(NotLoggedInError(registry=registry))
    return Ok(identity)


def publish_package(
    runner: CommandRunner,
    *,
    path: Path,
    registry: str,
    otp: str | None = None,
    client: ClientName = "bun",
) -> Result[None, PublishCommandError]:
    env = {**os.environ, REGISTRY_ENV_VAR: registry}
    result = runner.run(publish_command(client, registry, otp), cwd=path, env=env, stream=True)
    if isinstance(result, Err):
        return Err(
            PublishCommandError(
                returncode=result.error.returncode,
                detail=result.error.stderr.strip(),
            )
        )
    return Ok(None)
