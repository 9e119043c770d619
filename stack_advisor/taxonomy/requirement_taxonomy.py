"""
Requirement taxonomy for technology-stack selection.

Every dimension of a requirement profile is a closed enumeration:
  - ``Platform``           — the *where*: which surfaces must ship?
  - ``ScaleTier``          — the *how big*: expected product maturity.
  - ``PerformanceTier``    — the *how fast*: runtime performance demand.
  - ``TimelineTier``       — delivery pressure.
  - ``BudgetTier``         — funding available for parallel codebases.
  - ``MaintenanceHorizon`` — how long the product must be kept alive.

``Criterion`` lists the scored dimensions, ``SkillDimension`` the canonical
team-skill / skill-affinity axes, ``RiskLevel`` the confidence grades and
``ChangeKind`` the trigger tags used by the coordinator.

Tiers that have a natural order expose it via ``rank`` so callers never
compare raw strings.

This module has NO imports from any other ``stack_advisor`` package.
"""

from enum import StrEnum


class Platform(StrEnum):
    """Delivery surface a project must ship on."""

    WEB = "web"
    IOS = "ios"
    ANDROID = "android"
    DESKTOP_MAC = "desktop-mac"
    DESKTOP_WIN = "desktop-win"
    DESKTOP_LINUX = "desktop-linux"


class ScaleTier(StrEnum):
    """Expected product maturity / user scale."""

    MVP = "mvp"
    GROWTH = "growth"
    MATURE = "mature"


class PerformanceTier(StrEnum):
    """Runtime performance demand, ordered from least to most demanding."""

    BASIC = "basic"
    MEDIUM = "medium"
    HIGH = "high"
    EXTREME = "extreme"

    @property
    def rank(self) -> int:
        return _PERFORMANCE_ORDER.index(self)


_PERFORMANCE_ORDER: tuple[PerformanceTier, ...] = (
    PerformanceTier.BASIC,
    PerformanceTier.MEDIUM,
    PerformanceTier.HIGH,
    PerformanceTier.EXTREME,
)


class TimelineTier(StrEnum):
    """Delivery pressure."""

    FAST = "fast"
    STANDARD = "standard"
    LONG = "long"


class BudgetTier(StrEnum):
    """Funding envelope."""

    TIGHT = "tight"
    MEDIUM = "medium"
    AMPLE = "ample"


class MaintenanceHorizon(StrEnum):
    """How long the delivered product must be maintained."""

    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"


class SkillDimension(StrEnum):
    """Canonical team-skill axes.

    Requirement profiles rate the team on these axes; catalog entries declare
    an affinity on exactly the same axes.
    """

    WEB = "web"
    """JavaScript/TypeScript, browser and web-framework experience."""

    MOBILE = "mobile"
    """General mobile product experience (cross-platform toolkits)."""

    IOS_NATIVE = "ios_native"
    """Swift / UIKit / SwiftUI."""

    ANDROID_NATIVE = "android_native"
    """Kotlin / Jetpack."""

    DESKTOP = "desktop"
    """Desktop packaging, windowing and OS integration."""

    SYSTEMS = "systems"
    """Low-level languages (Rust, C++) and performance engineering."""


class Criterion(StrEnum):
    """Scored criteria.  ``TEAM_FIT`` is the only derived one."""

    PERFORMANCE = "performance"
    DEVELOPMENT_SPEED = "development_speed"
    TEAM_FIT = "team_fit"
    MAINTENANCE = "maintenance"
    ECOSYSTEM = "ecosystem"
    SCALABILITY = "scalability"


# Criteria looked up directly from a candidate's attribute map.
STATIC_CRITERIA: frozenset[Criterion] = frozenset(
    c for c in Criterion if c is not Criterion.TEAM_FIT
)


class RiskLevel(StrEnum):
    """How decisive the primary recommendation is over its closest rival."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ChangeKind(StrEnum):
    """Tag describing the dominant change between two requirement profiles.

    Listed in precedence order: when several fields change at once the
    earliest matching kind is used.
    """

    PLATFORM_ADDED = "platform_added"
    PERFORMANCE_UPGRADED = "performance_upgraded"
    SKILL_SHIFTED = "skill_shifted"
    OTHER = "other"
