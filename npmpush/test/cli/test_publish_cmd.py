from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from npmpush import __version__
from npmpush.cli.app import app
from npmpush.core.errors import ErrorCode
from npmpush.test.services.publish._fakes import FakeRunner, failed, manifest_version, write_manifest

cli = CliRunner()


@pytest.fixture
def fake_runner(monkeypatch: pytest.MonkeyPatch) -> FakeRunner:
    import npmpush.cli.commands.publish_cmd as publish_cmd

    runner = FakeRunner()
    monkeypatch.setattr(publish_cmd, "SubprocessRunner", lambda: runner)
    return runner


def test_version_flag() -> None:
    result = cli.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert result.output.strip() == __version__


def test_show(tmp_path: Path) -> None:
    write_manifest(tmp_path, {"name": "a", "version": "1.0.0"})

    result = cli.invoke(app, ["show", str(tmp_path)])

    assert result.exit_code == 0
    assert "a 1.0.0" in result.output


def test_show_missing_manifest(tmp_path: Path) -> None:
    result = cli.invoke(app, ["show", str(tmp_path)])

    assert result.exit_code == int(ErrorCode.IO_ERROR)


def test_publish_bump_patch(tmp_path: Path, fake_runner: FakeRunner) -> None:
    write_manifest(tmp_path, {"name": "a", "version": "1.0.0"})

    result = cli.invoke(app, ["publish", str(tmp_path), "--bump", "patch"])

    assert result.exit_code == 0, result.output
    assert manifest_version(tmp_path) == "1.0.1"
    assert fake_runner.commands[-1] == ["bun", "publish", "--registry", "https://registry.npmjs.org/"]
    assert "published" in result.output


def test_publish_explicit_version_with_options(tmp_path: Path, fake_runner: FakeRunner) -> None:
    write_manifest(tmp_path, {"name": "a", "version": "1.0.0"})

    result = cli.invoke(
        app,
        [
            "publish",
            str(tmp_path),
            "--to",
            "2.0.0",
            "--registry",
            "http://localhost:4873/",
            "--otp",
            "111222",
            "--client",
            "npm",
            "--changelog",
            "-m",
            "- breaking",
        ],
    )

    assert result.exit_code == 0, result.output
    assert manifest_version(tmp_path) == "2.0.0"
    assert fake_runner.commands[-1] == [
        "npm",
        "publish",
        "--registry",
        "http://localhost:4873/",
        "--otp",
        "111222",
    ]
    assert "## 2.0.0 - " in (tmp_path / "CHANGELOG.md").read_text(encoding="utf-8")


def test_publish_uses_settings_file(tmp_path: Path, fake_runner: FakeRunner) -> None:
    write_manifest(tmp_path, {"name": "a", "version": "1.0.0"})
    (tmp_path / "npm-push.toml").write_text(
        'registry = "http://localhost:4873/"\nclient = "npm"\n', encoding="utf-8"
    )

    result = cli.invoke(app, ["publish", str(tmp_path), "--bump", "minor"])

    assert result.exit_code == 0, result.output
    assert fake_runner.commands[0] == ["npm", "whoami", "--registry", "http://localhost:4873/"]


def test_publish_failure_rolls_back_and_exits_with_publish_code(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    import npmpush.cli.commands.publish_cmd as publish_cmd

    runner = FakeRunner(publish=failed(["bun", "publish"], 1))
    monkeypatch.setattr(publish_cmd, "SubprocessRunner", lambda: runner)
    write_manifest(tmp_path, {"name": "a", "version": "1.0.0"})

    result = cli.invoke(app, ["publish", str(tmp_path), "--to", "1.0.1"])

    assert result.exit_code == int(ErrorCode.PUBLISH_ERROR)
    assert manifest_version(tmp_path) == "1.0.0"
    assert "exit 1" in result.output


def test_publish_not_logged_in_exit_code(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import npmpush.cli.commands.publish_cmd as publish_cmd

    runner = FakeRunner(whoami=failed(["bun", "pm", "whoami"], 1, "error: not logged in"))
    monkeypatch.setattr(publish_cmd, "SubprocessRunner", lambda: runner)
    write_manifest(tmp_path, {"name": "a", "version": "1.0.0"})

    result = cli.invoke(app, ["publish", str(tmp_path), "--bump", "patch"])

    assert result.exit_code == int(ErrorCode.AUTH_ERROR)
    assert manifest_version(tmp_path) == "1.0.0"


@pytest.mark.parametrize(
    "args",
    [
        [],
        ["--to", "1.0.1", "--bump", "patch"],
        ["--bump", "huge"],
        ["--to", "1.0.1", "--client", "yarn"],
        ["--to", "not-a-version"],
    ],
)
def test_publish_user_errors(tmp_path: Path, fake_runner: FakeRunner, args: list[str]) -> None:
    write_manifest(tmp_path, {"name": "a", "version": "1.0.0"})

    result = cli.invoke(app, ["publish", str(tmp_path), *args])

    assert result.exit_code == int(ErrorCode.USER_ERROR)
    assert manifest_version(tmp_path) == "1.0.0"
    assert fake_runner.calls == []


def test_publish_broken_settings_file(tmp_path: Path, fake_runner: FakeRunner) -> None:
    write_manifest(tmp_path, {"name": "a", "version": "1.0.0"})
    (tmp_path / "npm-push.toml").write_text("registry = [", encoding="utf-8")

    result = cli.invoke(app, ["publish", str(tmp_path), "--bump", "patch"])

    assert result.exit_code == int(ErrorCode.ENV_ERROR)
    assert fake_runner.calls == []


def test_publish_rejects_missing_directory(tmp_path: Path) -> None:
    result = cli.invoke(app, ["publish", str(tmp_path / "nope"), "--bump", "patch"])

    assert result.exit_code == int(ErrorCode.USER_ERROR)
