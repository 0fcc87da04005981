"""Tiered dependency updates validated by the test suite."""

from functools import cached_property

from .catalog import VersionCatalog
from .config import Settings
from .console import StatusLog
from .errors import CatalogError
from .manifest import ManifestFile
from .models import (
    Dependency,
    DependencyReport,
    StepResult,
    TierAttempt,
    UpdateOutcome,
    VersionTier,
)
from .process import ProcessRunner
from .skiplist import load_skip_list


class DependencyUpdater:
    """Update one dependency, committing each validated step.

    Each attempt rewrites the manifest, runs the lock step and the test
    suite, then commits. Any failure checks the manifest and lock file back
    out of git so the working tree only ever holds tested states.
    """

    def __init__(
        self,
        dependency: Dependency,
        manifest: ManifestFile,
        runner: ProcessRunner,
        test_command: str,
        log: StatusLog | None = None,
    ):
        self.dependency = dependency
        self.manifest = manifest
        self.runner = runner
        self.test_command = test_command
        self.log = log or runner.log

    def auto_update(self) -> DependencyReport:
        """Try patch, then minor, then major updates.

        Stops at the first rejected tier. Dependencies without an installed
        version get a single update to the newest release instead.
        """
        self.log.log(f"Updating {self.dependency.name}")
        report = DependencyReport(name=self.dependency.name)

        if self.dependency.installed_version is None:
            report.attempts.append(self.update())
            return report

        for tier in VersionTier.escalation():
            attempt = self.update_version(tier)
            report.attempts.append(attempt)
            if attempt.outcome == UpdateOutcome.REJECTED:
                break

        return report

    def update_version(self, tier: VersionTier) -> TierAttempt:
        """Update to the newest version within ``tier``, test and commit it."""
        try:
            new_version = self.dependency.last_version(tier)
        except CatalogError as e:
            self.log.log_indent(f"Could not fetch available versions: {e}")
            return TierAttempt(tier, None, UpdateOutcome.REJECTED, str(e))

        if new_version is None or new_version == self.dependency.installed_version:
            self.log.log_indent(
                f"Already at latest {tier.value} version. Passing this update."
            )
            return TierAttempt(tier, new_version, UpdateOutcome.UNCHANGED)

        self.log.log_indent(f"Updating to {tier.value} version {new_version}")
        previous_version = self.dependency.installed_version
        self.dependency.installed_version = new_version

        result = self._apply()
        if result:
            return TierAttempt(tier, new_version, UpdateOutcome.ACCEPTED)

        self.revert_to_previous_version()
        self.dependency.installed_version = previous_version
        return TierAttempt(tier, new_version, UpdateOutcome.REJECTED, result.reason)

    def update(self) -> TierAttempt:
        """Let the lock step pick the newest version, then test and commit."""
        self.log.log_indent("Updating to newest version")

        result = self._apply()
        if result:
            return TierAttempt(None, None, UpdateOutcome.ACCEPTED)

        self.revert_to_previous_version()
        return TierAttempt(None, None, UpdateOutcome.REJECTED, result.reason)

    def _apply(self) -> StepResult:
        for step in (self._update_manifest, self._run_test_suite, self._commit_new_version):
            result = step()
            if not result:
                return result
        return StepResult.success()

    def _update_manifest(self) -> StepResult:
        result = self.manifest.update_dependency(self.dependency)
        if result:
            self.log.log_indent("Manifest updated successfully.")
        else:
            self.log.log_indent(f"Failed to update manifest: {result.reason}.")
        return result

    def _run_test_suite(self) -> StepResult:
        self.log.log_indent("Running test suite")
        if self.runner.system(self.test_command):
            self.log.log_indent("Test suite ran successfully.")
            return StepResult.success()

        self.log.log_indent("Test suite failed to run.")
        return StepResult.failure("test suite failed")

    def _commit_new_version(self) -> StepResult:
        self.log.log_indent("Committing changes")
        message = f"Auto update {self.dependency.name}"
        if self.dependency.installed_version is not None:
            message += f" to version {self.dependency.installed_version}"

        if self.runner.system(["git", "commit", *self.files_to_commit, "-m", message]):
            return StepResult.success()
        return StepResult.failure("commit failed")

    @cached_property
    def files_to_commit(self) -> list[str]:
        """The manifest, plus the lock file when git sees it modified."""
        files = [str(self.manifest.path)]
        lockfile = self.manifest.lockfile
        if lockfile is not None:
            status = self.runner.capture(["git", "status", "--porcelain", "--", str(lockfile)])
            if status.strip():
                files.append(str(lockfile))
        return files

    def revert_to_previous_version(self) -> None:
        self.log.log_indent("Reverting changes")
        # Best effort; a failed checkout is not escalated.
        self.runner.system(["git", "checkout", "--", *self.files_to_commit])
        self.manifest.reload()


class AutoUpdater:
    """Update every dependency in the manifest, one at a time."""

    def __init__(
        self,
        settings: Settings,
        log: StatusLog | None = None,
        runner: ProcessRunner | None = None,
        catalog: VersionCatalog | None = None,
    ):
        self.settings = settings
        self.log = log or StatusLog()
        self.runner = runner or ProcessRunner(cwd=settings.project_dir, log=self.log)
        self.catalog = catalog or VersionCatalog(
            self.runner,
            installed_command=settings.installed_command,
            registry_url=settings.registry_url,
            timeout=settings.timeout,
        )
        self.manifest = ManifestFile(
            settings.manifest_path,
            catalog=self.catalog,
            runner=self.runner,
            lockfile=settings.lockfile_path,
            directive=settings.directive,
            lock_command=settings.lock_command,
            log=self.log,
        )

    def auto_update(self) -> list[DependencyReport]:
        skip_list = load_skip_list(self.settings.skip_file_path)
        reports: list[DependencyReport] = []

        try:
            for dependency in self.manifest.dependencies():
                if dependency.name in skip_list:
                    self.log.log(f"Skipping {dependency.name}")
                    reports.append(DependencyReport(name=dependency.name, skipped=True))
                    continue

                updater = DependencyUpdater(
                    dependency,
                    self.manifest,
                    self.runner,
                    self.settings.test_command,
                    log=self.log,
                )
                reports.append(updater.auto_update())
        finally:
            self.catalog.close()

        self.log.log(summarize(reports))
        return reports


def summarize(reports: list[DependencyReport]) -> str:
    """One-line summary of a run."""
    skipped = sum(1 for r in reports if r.skipped)
    counts = {outcome: 0 for outcome in UpdateOutcome}
    for report in reports:
        if not report.skipped:
            counts[report.outcome] += 1

    return (
        f"Done: {counts[UpdateOutcome.ACCEPTED]} updated, "
        f"{counts[UpdateOutcome.UNCHANGED]} unchanged, "
        f"{counts[UpdateOutcome.REJECTED]} rejected, {skipped} skipped"
    )
