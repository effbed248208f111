from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from npmpush.core.result import Err, Ok
from npmpush.services.publish.changelog import (
    merge_entry,
    read_changelog,
    render_entry,
    restore_changelog,
    restore_changelog_snapshot,
    snapshot_changelog,
    write_changelog,
)

DAY = date(2026, 10, 18)


def test_render_entry() -> None:
    assert render_entry("1.0.1", "- fix login\n", today=DAY) == "## 1.0.1 - 2026-10-18\n\n- fix login\n"


def test_render_entry_blank_notes() -> None:
    assert render_entry("1.0.1", "  ", today=DAY) == "## 1.0.1 - 2026-10-18\n\n- Release 1.0.1\n"
    assert render_entry("1.0.1", None, today=DAY).endswith("- Release 1.0.1\n")


class TestMergeEntry:
    def test_new_document(self) -> None:
        entry = render_entry("1.0.0", "- first", today=DAY)
        assert merge_entry("", "1.0.0", entry) == f"# Changelog\n\n{entry}"

    def test_inserts_above_newest_section(self) -> None:
        content = "# Changelog\n\n## 1.0.0 - 2026-01-01\n\n- first\n"
        entry = render_entry("1.1.0", "- second", today=DAY)

        merged = merge_entry(content, "1.1.0", entry)

        assert merged == (
            "# Changelog\n\n"
            "## 1.1.0 - 2026-10-18\n\n- second\n\n"
            "## 1.0.0 - 2026-01-01\n\n- first\n"
        )

    def test_replaces_existing_section_for_same_version(self) -> None:
        content = (
            "# Changelog\n\n"
            "## 1.1.0 - 2026-10-01\n\n- draft\n\n"
            "## 1.0.0 - 2026-01-01\n\n- first\n"
        )
        entry = render_entry("1.1.0", "- final", today=DAY)

        merged = merge_entry(content, "1.1.0", entry)

        assert merged == (
            "# Changelog\n\n"
            "## 1.1.0 - 2026-10-18\n\n- final\n\n"
            "## 1.0.0 - 2026-01-01\n\n- first\n"
        )

    def test_replaces_last_section(self) -> None:
        content = "# Changelog\n\n## [1.0.0] - 2026-01-01\n\n- draft\n"
        entry = render_entry("1.0.0", "- final", today=DAY)

        assert merge_entry(content, "1.0.0", entry) == f"# Changelog\n\n{entry}"

    def test_similar_version_is_not_replaced(self) -> None:
        content = "# Changelog\n\n## 1.0.10 - 2026-01-01\n\n- old\n"
        entry = render_entry("1.0.1", "- new", today=DAY)

        merged = merge_entry(content, "1.0.1", entry)

        assert "## 1.0.10 - 2026-01-01" in merged
        assert merged.index("## 1.0.1 -") < merged.index("## 1.0.10")

    def test_document_without_sections_gets_entry_appended(self) -> None:
        entry = render_entry("1.0.0", "- first", today=DAY)
        assert merge_entry("# History\n\nNotes.\n", "1.0.0", entry) == f"# History\n\nNotes.\n\n{entry}"


def test_read_missing_changelog_is_empty_sentinel(tmp_path: Path) -> None:
    assert read_changelog(tmp_path) == Ok("")


def test_write_creates_changelog(tmp_path: Path) -> None:
    assert write_changelog(tmp_path, "1.0.1", "- fix", today=DAY) == Ok(None)

    assert (tmp_path / "CHANGELOG.md").read_text(encoding="utf-8") == (
        "# Changelog\n\n## 1.0.1 - 2026-10-18\n\n- fix\n"
    )


def test_write_updates_existing_changelog(tmp_path: Path) -> None:
    (tmp_path / "CHANGELOG.md").write_text("# Changelog\n\n## 1.0.0 - 2026-01-01\n\n- a\n", encoding="utf-8")

    write_changelog(tmp_path, "1.0.1", "- b", today=DAY)

    text = (tmp_path / "CHANGELOG.md").read_text(encoding="utf-8")
    assert text.startswith("# Changelog\n\n## 1.0.1 - 2026-10-18\n\n- b\n\n## 1.0.0")


class TestRestoreChangelog:
    def test_restores_original_content_verbatim(self, tmp_path: Path) -> None:
        original = "# Changelog\n\n## 1.0.0 - 2026-01-01\n\n- a\n"
        path = tmp_path / "CHANGELOG.md"
        path.write_text(original, encoding="utf-8")
        write_changelog(tmp_path, "1.0.1", "- b", today=DAY)

        assert restore_changelog(tmp_path, original) == Ok(None)
        assert path.read_text(encoding="utf-8") == original

    def test_empty_original_deletes_created_file(self, tmp_path: Path) -> None:
        write_changelog(tmp_path, "1.0.1", "- b", today=DAY)

        assert restore_changelog(tmp_path, "") == Ok(None)
        assert not (tmp_path / "CHANGELOG.md").exists()

    def test_empty_original_without_file_is_noop(self, tmp_path: Path) -> None:
        assert restore_changelog(tmp_path, "") == Ok(None)
        assert restore_changelog(tmp_path, "") == Ok(None)
        assert list(tmp_path.iterdir()) == []

    def test_failed_delete_falls_back_to_truncating(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        path = tmp_path / "CHANGELOG.md"
        path.write_text("# Changelog\n", encoding="utf-8")

        def fail_unlink(self: Path, missing_ok: bool = False) -> None:
            raise PermissionError("locked")

        monkeypatch.setattr(Path, "unlink", fail_unlink)

        assert restore_changelog(tmp_path, "") == Ok(None)
        assert path.read_text(encoding="utf-8") == ""

    def test_failed_delete_and_truncate_is_error(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        path = tmp_path / "CHANGELOG.md"
        path.write_text("# Changelog\n", encoding="utf-8")

        def fail_unlink(self: Path, missing_ok: bool = False) -> None:
            raise PermissionError("locked")

        def fail_write_text(self: Path, data: str, encoding: str | None = None) -> int:
            raise PermissionError("read-only")

        monkeypatch.setattr(Path, "unlink", fail_unlink)
        monkeypatch.setattr(Path, "write_text", fail_write_text)

        result = restore_changelog(tmp_path, "")

        assert isinstance(result, Err)
        assert "read-only" in result.error.message


class TestChangelogSnapshot:
    def test_absent_file_snapshots_as_none(self, tmp_path: Path) -> None:
        assert snapshot_changelog(tmp_path) == Ok(None)

    def test_empty_file_snapshots_as_empty_string(self, tmp_path: Path) -> None:
        (tmp_path / "CHANGELOG.md").write_text("", encoding="utf-8")

        assert snapshot_changelog(tmp_path) == Ok("")

    def test_restore_none_removes_created_file(self, tmp_path: Path) -> None:
        write_changelog(tmp_path, "1.0.1", "- b", today=DAY)

        assert restore_changelog_snapshot(tmp_path, None) == Ok(None)
        assert not (tmp_path / "CHANGELOG.md").exists()

    def test_restore_empty_string_keeps_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "CHANGELOG.md"
        path.write_text("", encoding="utf-8")
        write_changelog(tmp_path, "1.0.1", "- b", today=DAY)

        assert restore_changelog_snapshot(tmp_path, "") == Ok(None)
        assert path.exists()
        assert path.read_text(encoding="utf-8") == ""
