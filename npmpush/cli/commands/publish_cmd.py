"""Publish and show commands."""

from __future__ import annotations

from pathlib import Path
from typing import cast

import typer

from npmpush.core.config import (
    CONFIG_FILENAME,
    ClientName,
    ConfigError,
    PublishSettings,
    load_settings,
    load_settings_or_default,
)
from npmpush.core.errors import ErrorCode
from npmpush.core.result import Err, Result
from npmpush.output.console import ConsoleProtocol, RichConsole, Style
from npmpush.output.errors import print_publish_error, publish_error_exit_code
from npmpush.output.reporter import ConsoleReporter
from npmpush.platform.process import SubprocessRunner
from npmpush.services.publish.manifest import load_package
from npmpush.services.publish.model import Package, PublishConfig
from npmpush.services.publish.semver import VersionBump, next_version
from npmpush.services.publish.workflow import PublishWorkflow

_BUMPS: tuple[VersionBump, ...] = ("major", "minor", "patch", "prerelease")
_CLIENTS: tuple[ClientName, ...] = ("bun", "npm")


def _resolve_dir(path: Path, console: ConsoleProtocol) -> Path:
    try:
        root = path.expanduser().resolve()
    except OSError as e:
        console.error(f"invalid path: {e}")
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))
    if not root.is_dir():
        console.error(f"not a directory: {root}")
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))
    return root


def _load_package_or_exit(root: Path, console: ConsoleProtocol) -> Package:
    result = load_package(root)
    if isinstance(result, Err):
        print_publish_error(result.error, console)
        raise typer.Exit(code=publish_error_exit_code(result.error))
    return result.value


def _load_settings(root: Path, config: Path | None) -> Result[PublishSettings, ConfigError]:
    if config is not None:
        return load_settings(config.expanduser())
    return load_settings_or_default(root / CONFIG_FILENAME)


def _target_version(
    pkg: Package,
    *,
    to: str | None,
    bump: str | None,
    preid: str,
    console: ConsoleProtocol,
) -> str:
    if (to is None) == (bump is None):
        console.error("pass exactly one of --to VERSION or --bump KIND")
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    if to is not None:
        return to.strip()

    if bump not in _BUMPS:
        console.error(f"unknown bump '{bump}' (expected one of: {', '.join(_BUMPS)})")
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    bumped = next_version(pkg.version, cast(VersionBump, bump), preid=preid)
    if isinstance(bumped, Err):
        print_publish_error(bumped.error, console)
        raise typer.Exit(code=publish_error_exit_code(bumped.error))
    return bumped.value


def publish(
    path: Path = typer.Argument(Path("."), help="Package directory (contains package.json)"),
    to: str | None = typer.Option(None, "--to", help="Exact version to publish"),
    bump: str | None = typer.Option(
        None, "--bump", help="Version bump: major, minor, patch or prerelease"
    ),
    preid: str = typer.Option("beta", "--preid", help="Prerelease identifier for --bump prerelease"),
    notes: str | None = typer.Option(None, "--notes", "-m", help="Changelog notes for this version"),
    changelog: bool | None = typer.Option(
        None,
        "--changelog/--no-changelog",
        help="Write a CHANGELOG.md entry (default from npm-push.toml)",
    ),
    registry: str | None = typer.Option(None, "--registry", help="Registry URL"),
    otp: str | None = typer.Option(None, "--otp", help="One-time password for 2FA"),
    client: str | None = typer.Option(None, "--client", help="Package manager: bun or npm"),
    config: Path | None = typer.Option(None, "--config", help=f"Settings file (default: ./{CONFIG_FILENAME})"),
) -> None:
    """Bump the version, publish to the registry, and roll back on failure."""
    console = RichConsole()
    root = _resolve_dir(path, console)

    settings = _load_settings(root, config)
    if isinstance(settings, Err):
        console.error(settings.error.message)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    client_name = client or settings.value.client
    if client_name not in _CLIENTS:
        console.error(f"unsupported client '{client_name}' (expected one of: {', '.join(_CLIENTS)})")
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    pkg = _load_package_or_exit(root, console)
    new_version = _target_version(pkg, to=to, bump=bump, preid=preid, console=console)
    target_registry = registry or settings.value.registry

    console.header(f"{pkg.name}: {pkg.version} -> {new_version}")
    console.print(f"registry: {target_registry}", Style.DIM)

    workflow = PublishWorkflow(
        runner=SubprocessRunner(),
        reporter=ConsoleReporter(console),
        client=cast(ClientName, client_name),
    )
    result = workflow.publish(
        PublishConfig(
            package=pkg,
            new_version=new_version,
            registry=target_registry,
            changelog=notes,
            generate_changelog=changelog if changelog is not None else settings.value.generate_changelog,
            otp=otp,
        )
    )
    if isinstance(result, Err):
        print_publish_error(result.error, console)
        raise typer.Exit(code=publish_error_exit_code(result.error))

    receipt = result.value
    console.success(
        f"{receipt.name}@{receipt.version} published to {receipt.registry} as {receipt.identity}"
    )


def show(
    path: Path = typer.Argument(Path("."), help="Package directory (contains package.json)"),
) -> None:
    """Print the package name and current version."""
    console = RichConsole()
    root = _resolve_dir(path, console)
    pkg = _load_package_or_exit(root, console)
    console.print(f"{pkg.name} {pkg.version}")
