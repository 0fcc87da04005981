"""Core data models for depstep."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from packaging.version import Version

if TYPE_CHECKING:
    from .catalog import VersionCatalog


class VersionTier(str, Enum):
    """How far a single bump may move a version."""

    PATCH = "patch"
    MINOR = "minor"
    MAJOR = "major"

    @classmethod
    def escalation(cls) -> list[VersionTier]:
        return [cls.PATCH, cls.MINOR, cls.MAJOR]


class UpdateOutcome(str, Enum):
    """Result of one update attempt."""

    ACCEPTED = "accepted"  # new version tested and committed
    UNCHANGED = "unchanged"  # already at the target version
    REJECTED = "rejected"  # rolled back to the last commit


@dataclass
class StepResult:
    """Success or failure of one step of the update protocol."""

    ok: bool
    reason: str = ""

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls, reason: str = "") -> StepResult:
        return cls(True, reason)

    @classmethod
    def failure(cls, reason: str) -> StepResult:
        return cls(False, reason)


@dataclass
class Dependency:
    """A dependency declared in the manifest."""

    name: str
    options: str | None = None
    constraint: str | None = None
    installed_version: Version | None = None
    catalog: VersionCatalog | None = field(default=None, repr=False, compare=False)

    @property
    def major(self) -> int | None:
        return self.installed_version.major if self.installed_version else None

    @property
    def minor(self) -> int | None:
        return self.installed_version.minor if self.installed_version else None

    @property
    def patch(self) -> int | None:
        return self.installed_version.micro if self.installed_version else None

    def available_versions(self) -> list[Version]:
        """Published versions of this dependency, newest first."""
        if self.catalog is None:
            return []
        return self.catalog.available_versions(self.name, self.installed_version)

    def last_version(self, tier: VersionTier) -> Version | None:
        """Return the newest published version reachable within ``tier``.

        Tiers are relative to the *current* installed version, so after a
        patch bump the minor lookup uses the bumped version.

        Args:
            tier: The version tier to scope the lookup to

        Returns:
            The newest matching version, or None if nothing qualifies
        """
        versions = self.available_versions()

        if tier == VersionTier.PATCH:
            candidates = [
                v for v in versions if v.major == self.major and v.minor == self.minor
            ]
        elif tier == VersionTier.MINOR:
            candidates = [v for v in versions if v.major == self.major]
        elif tier == VersionTier.MAJOR:
            candidates = versions
        else:
            raise ValueError(f"Invalid version tier: {tier!r}")

        return candidates[0] if candidates else None


@dataclass
class TierAttempt:
    """A single update attempt for a dependency."""

    tier: VersionTier | None  # None for "update to newest"
    target: Version | None
    outcome: UpdateOutcome
    reason: str = ""


@dataclass
class DependencyReport:
    """Everything that happened to one dependency during a run."""

    name: str
    attempts: list[TierAttempt] = field(default_factory=list)
    skipped: bool = False

    @property
    def outcome(self) -> UpdateOutcome:
        outcomes = {attempt.outcome for attempt in self.attempts}
        if UpdateOutcome.REJECTED in outcomes:
            return UpdateOutcome.REJECTED
        if UpdateOutcome.ACCEPTED in outcomes:
            return UpdateOutcome.ACCEPTED
        return UpdateOutcome.UNCHANGED
