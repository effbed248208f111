from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal

from npmpush.core.result import Err, Ok, Result
from npmpush.services.publish.errors import InvalidVersionError

VersionBump = Literal["major", "minor", "patch", "prerelease"]

_VERSION_RE = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-([0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
    r"(?:\+([0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?$"
)


@dataclass(frozen=True, slots=True)
class SemVer:
    major: int
    minor: int
    patch: int
    prerelease: str | None = None
    build: str | None = None

    def __str__(self) -> str:
        out = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            out += f"-{self.prerelease}"
        if self.build:
            out += f"+{self.build}"
        return out

    def bump(self, kind: VersionBump, *, preid: str = "beta") -> SemVer:
        """Return the next version, following npm's ``version`` rules.

        A prerelease is promoted to its release by the smallest bump that
        reaches it (``1.2.0-beta.1`` --minor--> ``1.2.0``).
        """
        match kind:
            case "major":
                if self.prerelease and self.minor == 0 and self.patch == 0:
                    return SemVer(self.major, 0, 0)
                return SemVer(self.major + 1, 0, 0)
            case "minor":
                if self.prerelease and self.patch == 0:
                    return SemVer(self.major, self.minor, 0)
                return SemVer(self.major, self.minor + 1, 0)
            case "patch":
                if self.prerelease:
                    return SemVer(self.major, self.minor, self.patch)
                return SemVer(self.major, self.minor, self.patch + 1)
            case "prerelease":
                if self.prerelease is None:
                    return SemVer(self.major, self.minor, self.patch + 1, f"{preid}.0")
                n = _prerelease_counter(self.prerelease, preid)
                if n is None:
                    return SemVer(self.major, self.minor, self.patch, f"{preid}.0")
                return SemVer(self.major, self.minor, self.patch, f"{preid}.{n + 1}")
            case _:
                raise AssertionError(f"unexpected bump kind: {kind}")


def _prerelease_counter(prerelease: str, preid: str) -> int | None:
    m = re.fullmatch(rf"{re.escape(preid)}\.(0|[1-9]\d*)", prerelease)
    if m is None:
        return None
    return int(m.group(1))


def parse_version(text: str) -> SemVer | None:
    m = _VERSION_RE.match(text)
    if m is None:
        return None
    return SemVer(int(m.group(1)), int(m.group(2)), int(m.group(3)), m.group(4), m.group(5))


def next_version(
    current: str, bump: VersionBump, *, preid: str = "beta"
) -> Result[str, InvalidVersionError]:
    parsed = parse_version(current)
    if parsed is None:
        return Err(InvalidVersionError(current))
    return Ok(str(parsed.bump(bump, preid=preid)))
