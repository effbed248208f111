from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

MANIFEST_FILENAME = "package.json"
CHANGELOG_FILENAME = "CHANGELOG.md"

PublishState = Literal[
    "idle",
    "version_updating",
    "changelog_updating",
    "auth_checking",
    "publishing",
    "rolling_back",
    "done",
    "failed",
]


@dataclass(frozen=True, slots=True)
class Package:
    """A package directory as it was when the publish started."""

    name: str
    version: str
    path: Path
    manifest: Mapping[str, object] = field(default_factory=dict, compare=False, repr=False)

    @property
    def manifest_path(self) -> Path:
        return self.path / MANIFEST_FILENAME

    @property
    def changelog_path(self) -> Path:
        return self.path / CHANGELOG_FILENAME


@dataclass(frozen=True, slots=True)
class PublishConfig:
    package: Package
    new_version: str
    registry: str
    changelog: str | None = None
    generate_changelog: bool = False
    otp: str | None = None


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Pre-publish state used for rollback.

    ``changelog is None`` means there was no changelog file (or changelog
    generation was not requested); ``""`` is an existing empty file.
    """

    version: str
    changelog: str | None = None


@dataclass(frozen=True, slots=True)
class PublishReceipt:
    name: str
    previous_version: str
    version: str
    registry: str
    identity: str
