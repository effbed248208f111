"""Typed loading of the optional ``npm-push.toml`` settings file."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, cast

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_bool, get_str

__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_REGISTRY",
    "ClientName",
    "ConfigError",
    "PublishSettings",
    "load_settings",
    "load_settings_or_default",
]

CONFIG_FILENAME = "npm-push.toml"
DEFAULT_REGISTRY = "https://registry.npmjs.org/"

type ClientName = Literal["bun", "npm"]
_CLIENTS: tuple[ClientName, ...] = ("bun", "npm")


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when the settings file cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class PublishSettings:
    """Defaults applied to every publish unless overridden on the CLI."""

    registry: str = DEFAULT_REGISTRY
    client: ClientName = "bun"
    generate_changelog: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> PublishSettings:
        client = get_str(data, "client") or "bun"
        if client not in _CLIENTS:
            raise ValueError(f"unsupported client '{client}' (expected one of: {', '.join(_CLIENTS)})")

        changelog = get_bool(data, "generate_changelog")
        return cls(
            registry=get_str(data, "registry") or DEFAULT_REGISTRY,
            client=cast(ClientName, client),
            generate_changelog=changelog if changelog is not None else False,
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_settings(path: Path) -> Result[PublishSettings, ConfigError]:
    """Load publish settings from a TOML file.

    Args:
        path: Path to npm-push.toml

    Returns:
        Ok(PublishSettings) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(PublishSettings.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config: {e}", path=path))


def load_settings_or_default(path: Path) -> Result[PublishSettings, ConfigError]:
    """Like load_settings, but a missing file yields the defaults."""
    if not path.exists():
        return Ok(PublishSettings())
    return load_settings(path)
