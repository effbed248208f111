"""Maintain ``CHANGELOG.md`` entries for published versions.

Layout written by ``write_changelog``::

    # Changelog

    ## 1.0.1 - 2026-10-18

    - notes

    ## 1.0.0 - 2026-09-30
    ...
"""

from __future__ import annotations

import re
from datetime import date
from pathlib import Path

from npmpush.core.result import Err, Ok, Result
from npmpush.platform.files import atomic_write_text
from npmpush.services.publish.errors import ChangelogError
from npmpush.services.publish.model import CHANGELOG_FILENAME

_TITLE = "# Changelog"
_SECTION_RE = re.compile(r"^## ", re.MULTILINE)


def changelog_path(package_dir: Path) -> Path:
    return package_dir / CHANGELOG_FILENAME


def render_entry(version: str, notes: str | None, *, today: date) -> str:
    body = notes.strip() if notes is not None and notes.strip() else f"- Release {version}"
    return f"## {version} - {today.isoformat()}\n\n{body}\n"


def merge_entry(content: str, version: str, entry: str) -> str:
    """Place ``entry`` into ``content``.

    An existing section for ``version`` is replaced in place; otherwise the
    entry goes above the newest section.
    """
    if not content.strip():
        return f"{_TITLE}\n\n{entry}"

    same = re.search(rf"^## \[?{re.escape(version)}\]?(?=\s|$)", content, re.MULTILINE)
    if same is not None:
        following = _SECTION_RE.search(content, same.end())
        end = following.start() if following is not None else len(content)
        tail = content[end:]
        return content[: same.start()] + entry + ("\n" + tail if tail else "")

    newest = _SECTION_RE.search(content)
    if newest is not None:
        return content[: newest.start()] + entry + "\n" + content[newest.start() :]

    return content.rstrip("\n") + "\n\n" + entry


def read_changelog(package_dir: Path) -> Result[str, ChangelogError]:
    """Return the changelog text, or ``""`` when there is no changelog file."""
    path = changelog_path(package_dir)
    if not path.exists():
        return Ok("")
    try:
        return Ok(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        return Err(ChangelogError(path=path, reason=f"read failed: {e}"))


def write_changelog(
    package_dir: Path,
    version: str,
    notes: str | None,
    *,
    today: date | None = None,
) -> Result[None, ChangelogError]:
    current = read_changelog(package_dir)
    if isinstance(current, Err):
        return current

    entry = render_entry(version, notes, today=today or date.today())
    path = changelog_path(package_dir)
    try:
        atomic_write_text(path, merge_entry(current.value, version, entry))
    except OSError as e:
        return Err(ChangelogError(path=path, reason=f"write failed: {e}"))
    return Ok(None)


def restore_changelog(package_dir: Path, original: str) -> Result[None, ChangelogError]:
    """Put the changelog back to ``original``.

    ``original == ""`` means no changelog existed: the file is removed if it
    is there now, falling back to truncating it when removal fails.
    """
    path = changelog_path(package_dir)

    if original == "":
        if not path.exists():
            return Ok(None)
        try:
            path.unlink()
        except OSError:
            try:
                path.write_text("", encoding="utf-8")
            except OSError as e:
                return Err(ChangelogError(path=path, reason=f"restore failed: {e}"))
        return Ok(None)

    try:
        atomic_write_text(path, original)
    except OSError as e:
        return Err(ChangelogError(path=path, reason=f"restore failed: {e}"))
    return Ok(None)


def snapshot_changelog(package_dir: Path) -> Result[str | None, ChangelogError]:
    """Like read_changelog, but ``None`` when the file is absent.

    An existing empty changelog snapshots as ``""``.
    """
    if not changelog_path(package_dir).exists():
        return Ok(None)
    return read_changelog(package_dir)


def restore_changelog_snapshot(
    package_dir: Path, original: str | None
) -> Result[None, ChangelogError]:
    """Restore a value taken by ``snapshot_changelog``."""
    if original is None:
        return restore_changelog(package_dir, "")

    path = changelog_path(package_dir)
    try:
        atomic_write_text(path, original)
    except OSError as e:
        return Err(ChangelogError(path=path, reason=f"restore failed: {e}"))
    return Ok(None)
