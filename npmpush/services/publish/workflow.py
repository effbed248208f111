"""Publish a package with automatic rollback.

The sequence is strictly linear::

    idle -> version_updating -> [changelog_updating] -> auth_checking
         -> publishing -> done

Any failed step moves to ``rolling_back`` and then ``failed``. Rollback puts
the manifest version (and the changelog, when one was generated) back to the
snapshot taken before the first write. Rollback problems are reported but the
error returned is always the one that stopped the publish.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date

from npmpush.core.config import ClientName
from npmpush.core.result import Err, Ok, Result
from npmpush.output.reporter import Phase, PhaseReporter
from npmpush.platform.process import CommandRunner
from npmpush.services.publish.changelog import (
    restore_changelog_snapshot,
    snapshot_changelog,
    write_changelog,
)
from npmpush.services.publish.errors import InvalidVersionError, PublishError, RollbackError
from npmpush.services.publish.manifest import read_version, write_version
from npmpush.services.publish.model import PublishConfig, PublishReceipt, PublishState, Snapshot
from npmpush.services.publish.registry import check_auth, publish_package
from npmpush.services.publish.semver import parse_version


class PublishWorkflow:
    """Runs one publish at a time for a single package directory.

    Attributes:
        history: States entered during the last ``publish`` call, starting
            with ``"idle"``.
        rollback_error: Restore failures from the last rollback, if any.
    """

    def __init__(
        self,
        *,
        runner: CommandRunner,
        reporter: PhaseReporter,
        client: ClientName = "bun",
        today: Callable[[], date] = date.today,
    ) -> None:
        self._runner = runner
        self._reporter = reporter
        self._client: ClientName = client
        self._today = today
        self.history: list[PublishState] = ["idle"]
        self.rollback_error: RollbackError | None = None

    @property
    def state(self) -> PublishState:
        return self.history[-1]

    def publish(self, config: PublishConfig) -> Result[PublishReceipt, PublishError]:
        self.history = ["idle"]
        self.rollback_error = None

        if parse_version(config.new_version) is None:
            self._enter("failed")
            return Err(InvalidVersionError(config.new_version))

        snapshot = self._take_snapshot(config)
        if isinstance(snapshot, Err):
            self._enter("failed")
            return snapshot

        identity = self._run_steps(config)
        if isinstance(identity, Err):
            self._rollback(config, snapshot.value)
            self._enter("failed")
            return identity

        self._enter("done")
        return Ok(
            PublishReceipt(
                name=config.package.name,
                previous_version=snapshot.value.version,
                version=config.new_version,
                registry=config.registry,
                identity=identity.value,
            )
        )

    def _enter(self, state: PublishState) -> None:
        self.history.append(state)

    def _take_snapshot(self, config: PublishConfig) -> Result[Snapshot, PublishError]:
        path = config.package.path
        version = read_version(path)
        if isinstance(version, Err):
            return version

        if not config.generate_changelog:
            return Ok(Snapshot(version=version.value))

        changelog = snapshot_changelog(path)
        if isinstance(changelog, Err):
            return changelog
        return Ok(Snapshot(version=version.value, changelog=changelog.value))

    def _phase[T, E](
        self,
        phase: Phase,
        *,
        start: str,
        done: str,
        failed: str,
        action: Callable[[], Result[T, E]],
    ) -> Result[T, E]:
        self._reporter.start(phase, start)
        result = action()
        if isinstance(result, Err):
            self._reporter.fail(phase, failed)
        else:
            self._reporter.succeed(phase, done)
        return result

    def _run_steps(self, config: PublishConfig) -> Result[str, PublishError]:
        """Run every mutating/remote step; returns the registry identity."""
        path = config.package.path

        self._enter("version_updating")
        updated = self._phase(
            "version",
            start=f"Updating version to {config.new_version}",
            done=f"Version updated to {config.new_version}",
            failed="Version update failed",
            action=lambda: write_version(path, config.new_version),
        )
        if isinstance(updated, Err):
            return updated

        if config.generate_changelog:
            self._enter("changelog_updating")
            written = self._phase(
                "changelog",
                start="Updating changelog",
                done="Changelog updated",
                failed="Changelog update failed",
                action=lambda: write_changelog(
                    path, config.new_version, config.changelog, today=self._today()
                ),
            )
            if isinstance(written, Err):
                return written

        self._enter("auth_checking")
        identity = self._phase(
            "auth",
            start=f"Checking login for {config.registry}",
            done=f"Logged in to {config.registry}",
            failed="Registry auth check failed",
            action=lambda: check_auth(
                self._runner, registry=config.registry, cwd=path, client=self._client
            ),
        )
        if isinstance(identity, Err):
            return identity

        self._enter("publishing")
        published = self._phase(
            "publish",
            start=f"Publishing {config.package.name}@{config.new_version}",
            done=f"Published {config.package.name}@{config.new_version}",
            failed="Publish failed",
            action=lambda: publish_package(
                self._runner,
                path=path,
                registry=config.registry,
                otp=config.otp,
                client=self._client,
            ),
        )
        if isinstance(published, Err):
            return published

        return identity

    def _rollback(self, config: PublishConfig, snapshot: Snapshot) -> None:
        self._enter("rolling_back")
        self._reporter.start("rollback", "Rolling back changes")
        path = config.package.path
        failures: list[str] = []

        restored = write_version(path, snapshot.version)
        if isinstance(restored, Err):
            failures.append(restored.error.message)

        if config.generate_changelog:
            reverted = restore_changelog_snapshot(path, snapshot.changelog)
            if isinstance(reverted, Err):
                failures.append(reverted.error.message)

        if failures:
            self.rollback_error = RollbackError(tuple(failures))
            self._reporter.fail("rollback", self.rollback_error.message)
            return

        self._reporter.succeed("rollback", f"Rolled back to {snapshot.version}")
