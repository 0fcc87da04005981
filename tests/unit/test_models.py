"""Tests for dependency tier resolution."""

import pytest
from packaging.version import Version

from core.models import (
    Dependency,
    DependencyReport,
    StepResult,
    TierAttempt,
    UpdateOutcome,
    VersionTier,
)

CATALOG = ["2.0.0", "1.5.0", "1.2.9", "1.2.3", "1.1.0", "0.9.0"]


class TestLastVersion:
    """Test picking the newest version for each tier."""

    def _dependency(self, stub_catalog, installed="1.2.3", available=CATALOG):
        catalog = stub_catalog(installed={"foo": installed}, available={"foo": available})
        return Dependency(
            name="foo",
            installed_version=catalog.installed_version("foo"),
            catalog=catalog,
        )

    def test_patch_keeps_major_and_minor(self, stub_catalog):
        """Patch lookup should stay within the current major.minor."""
        dependency = self._dependency(stub_catalog)

        assert dependency.last_version(VersionTier.PATCH) == Version("1.2.9")

    def test_minor_keeps_major(self, stub_catalog):
        """Minor lookup should stay within the current major."""
        dependency = self._dependency(stub_catalog)

        assert dependency.last_version(VersionTier.MINOR) == Version("1.5.0")

    def test_major_returns_newest(self, stub_catalog):
        """Major lookup should return the first catalog entry."""
        dependency = self._dependency(stub_catalog)

        assert dependency.last_version(VersionTier.MAJOR) == Version("2.0.0")

    def test_major_ignores_current_major(self, stub_catalog):
        """Major lookup should not depend on the installed major."""
        dependency = self._dependency(stub_catalog, installed="0.9.0")

        assert dependency.last_version(VersionTier.MAJOR) == Version("2.0.0")

    def test_tiers_follow_current_version(self, stub_catalog):
        """After a bump the next tier should use the bumped version."""
        dependency = self._dependency(stub_catalog, installed="0.9.0")
        dependency.installed_version = Version("1.1.0")

        assert dependency.last_version(VersionTier.PATCH) == Version("1.1.0")
        assert dependency.last_version(VersionTier.MINOR) == Version("1.5.0")

    def test_patch_does_not_match_longer_minor(self, stub_catalog):
        """1.2 should not be confused with 1.20."""
        dependency = self._dependency(
            stub_catalog, installed="1.2.0", available=["1.20.4", "1.2.1", "1.2.0"]
        )

        assert dependency.last_version(VersionTier.PATCH) == Version("1.2.1")

    def test_at_ceiling_returns_current(self, stub_catalog):
        """Should return the current version when it is already newest."""
        dependency = self._dependency(stub_catalog, installed="2.0.0")

        assert dependency.last_version(VersionTier.PATCH) == Version("2.0.0")
        assert dependency.last_version(VersionTier.MAJOR) == Version("2.0.0")

    def test_no_candidate_returns_none(self, stub_catalog):
        """Should return None when no published version qualifies."""
        dependency = self._dependency(stub_catalog, installed="3.1.0")

        assert dependency.last_version(VersionTier.PATCH) is None
        assert dependency.last_version(VersionTier.MINOR) is None

    def test_invalid_tier_raises(self, stub_catalog):
        """Unknown tiers are a programming error."""
        dependency = self._dependency(stub_catalog)

        with pytest.raises(ValueError, match="Invalid version tier"):
            dependency.last_version("nightly")

    def test_unversioned_has_no_versions(self, stub_catalog):
        """Dependencies without an installed version have no catalog."""
        catalog = stub_catalog(available={"bar": ["1.0.0"]})
        dependency = Dependency(name="bar", catalog=catalog)

        assert dependency.available_versions() == []
        assert dependency.major is None
        assert catalog.queries == []

    def test_version_parts(self):
        """Should expose major, minor and patch of the installed version."""
        dependency = Dependency(name="foo", installed_version=Version("3.14.15"))

        assert (dependency.major, dependency.minor, dependency.patch) == (3, 14, 15)


class TestResults:
    """Test step and report results."""

    def test_step_result_truthiness(self):
        assert StepResult.success()
        assert not StepResult.failure("test suite failed")

    def test_tier_order(self):
        assert VersionTier.escalation() == [
            VersionTier.PATCH,
            VersionTier.MINOR,
            VersionTier.MAJOR,
        ]

    def test_report_outcome_prefers_rejection(self):
        report = DependencyReport(
            name="foo",
            attempts=[
                TierAttempt(VersionTier.PATCH, Version("1.2.9"), UpdateOutcome.ACCEPTED),
                TierAttempt(VersionTier.MINOR, Version("1.5.0"), UpdateOutcome.REJECTED),
            ],
        )

        assert report.outcome == UpdateOutcome.REJECTED

    def test_report_outcome_unchanged_without_attempts(self):
        assert DependencyReport(name="foo").outcome == UpdateOutcome.UNCHANGED
