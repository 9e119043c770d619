"""
Hard-constraint rules.

Each rule is a frozen ``ConstraintRule``: a name, a predicate deciding
whether the rule applies to a profile, and a transform narrowing the
candidate list.  Both are pure functions, so every rule can be tested in
isolation and the precedence between rules is simply their position in the
list.

Default ordering (``build_default_rules``)
------------------------------------------
    1. single_platform_exclusivity
         one platform requested AND performance "extreme"
         → keep only candidates tagged ``exclusive-native:<platform>``
    2. multi_platform_breadth
         three or more platforms requested
         → keep only candidates supporting every requested platform
    3. tight_budget_shared_codebase
         budget "tight" AND two or more platforms requested
         → keep only candidates supporting every requested platform
           (a tight budget cannot fund parallel codebases)
    4. performance_floor
         the performance tier has a configured floor
         → keep only candidates whose static performance meets the floor
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Mapping, Sequence

from stack_advisor.models.candidate import CandidateStack
from stack_advisor.models.profile import RequirementProfile
from stack_advisor.taxonomy.requirement_taxonomy import (
    BudgetTier,
    Criterion,
    PerformanceTier,
)

Predicate = Callable[[RequirementProfile], bool]
Transform = Callable[[RequirementProfile, Sequence[CandidateStack]], list[CandidateStack]]

BREADTH_MIN_PLATFORMS = 3
SHARED_CODEBASE_MIN_PLATFORMS = 2


@dataclass(frozen=True)
class ConstraintRule:
    """One hard-constraint rule.

    Attributes:
        name:        Stable identifier recorded on every elimination.
        description: Human-readable statement of the constraint.
        predicate:   Decides whether the rule applies to a profile.
        transform:   Narrows the candidate list for an applicable profile.
    """

    name:        str
    description: str
    predicate:   Predicate
    transform:   Transform

    def applies(self, profile: RequirementProfile) -> bool:
        return self.predicate(profile)

    def apply(
        self,
        profile: RequirementProfile,
        candidates: Sequence[CandidateStack],
    ) -> list[CandidateStack]:
        """Apply the rule; never returns a candidate not in ``candidates``."""
        if not self.predicate(profile):
            return list(candidates)
        kept = {c.stack_id for c in self.transform(profile, candidates)}
        return [c for c in candidates if c.stack_id in kept]


# ── Rule 1: single-platform exclusivity ───────────────────────────────────────


def _wants_exclusive_native(profile: RequirementProfile) -> bool:
    return (
        profile.platform_count == 1
        and profile.performance == PerformanceTier.EXTREME
    )


def _keep_exclusive_native(
    profile: RequirementProfile,
    candidates: Sequence[CandidateStack],
) -> list[CandidateStack]:
    (platform,) = profile.platforms
    return [c for c in candidates if c.is_exclusive_native_for(platform)]


SINGLE_PLATFORM_EXCLUSIVITY = ConstraintRule(
    name="single_platform_exclusivity",
    description=(
        "A single platform at extreme performance requires that platform's "
        "exclusive native toolchain."
    ),
    predicate=_wants_exclusive_native,
    transform=_keep_exclusive_native,
)


# ── Rule 2: multi-platform breadth ────────────────────────────────────────────


def _keep_full_coverage(
    profile: RequirementProfile,
    candidates: Sequence[CandidateStack],
) -> list[CandidateStack]:
    return [c for c in candidates if c.covers(profile.platforms)]


MULTI_PLATFORM_BREADTH = ConstraintRule(
    name="multi_platform_breadth",
    description=(
        f"{BREADTH_MIN_PLATFORMS} or more platforms require a stack that "
        "covers all of them."
    ),
    predicate=lambda p: p.platform_count >= BREADTH_MIN_PLATFORMS,
    transform=_keep_full_coverage,
)


# ── Rule 3: tight budget → shared codebase ────────────────────────────────────


TIGHT_BUDGET_SHARED_CODEBASE = ConstraintRule(
    name="tight_budget_shared_codebase",
    description=(
        "A tight budget across several platforms requires one codebase that "
        "covers all of them."
    ),
    predicate=lambda p: (
        p.budget == BudgetTier.TIGHT
        and p.platform_count >= SHARED_CODEBASE_MIN_PLATFORMS
    ),
    transform=_keep_full_coverage,
)


# ── Rule 4: performance floor ─────────────────────────────────────────────────


def performance_floor_rule(floors: Mapping[PerformanceTier, float]) -> ConstraintRule:
    """Build the performance-floor rule for the configured tier floors."""
    floors = {PerformanceTier(t): float(f) for t, f in floors.items()}

    def _applies(profile: RequirementProfile) -> bool:
        return profile.performance in floors

    def _keep_fast_enough(
        profile: RequirementProfile,
        candidates: Sequence[CandidateStack],
    ) -> list[CandidateStack]:
        floor = floors[profile.performance]
        return [c for c in candidates if c.attribute(Criterion.PERFORMANCE) >= floor]

    detail = ", ".join(f"{t}>={f:g}" for t, f in sorted(floors.items(), key=lambda i: i[0].rank))
    return ConstraintRule(
        name="performance_floor",
        description=f"Minimum static performance score per tier ({detail or 'none'}).",
        predicate=_applies,
        transform=_keep_fast_enough,
    )


def build_default_rules(
    performance_floor: Mapping[PerformanceTier, float],
) -> tuple[ConstraintRule, ...]:
    """Return the default rule ordering.

    Args:
        performance_floor: Tier -> minimum performance (``ResolverConfig``).
    """
    return (
        SINGLE_PLATFORM_EXCLUSIVITY,
        MULTI_PLATFORM_BREADTH,
        TIGHT_BUDGET_SHARED_CODEBASE,
        performance_floor_rule(performance_floor),
    )
