"""
Trigger detection: classify the change between two requirement profiles.

Change-kind precedence (first match wins)
-----------------------------------------
    1. PLATFORM_ADDED       : the new profile requests a platform the old one did not
    2. PERFORMANCE_UPGRADED : the performance tier moved up
    3. SKILL_SHIFTED        : any team skill rating changed
    4. OTHER                : anything else (scale, timeline, budget, maintenance,
                              platform removal, performance downgrade)
"""

from __future__ import annotations

from typing import Optional

from stack_advisor.models.profile import RequirementProfile
from stack_advisor.models.recommendation import TriggerEvent
from stack_advisor.taxonomy.requirement_taxonomy import ChangeKind

PROFILE_FIELDS: tuple[str, ...] = (
    "platforms",
    "scale",
    "performance",
    "team_skills",
    "timeline",
    "budget",
    "maintenance_horizon",
)


def changed_fields(previous: RequirementProfile, current: RequirementProfile) -> tuple[str, ...]:
    """Return the names of every profile field that differs."""
    changed: list[str] = []
    for name in PROFILE_FIELDS:
        old, new = getattr(previous, name), getattr(current, name)
        if name == "team_skills":
            old, new = dict(old), dict(new)
        if old != new:
            changed.append(name)
    return tuple(changed)


def classify_change(
    previous: RequirementProfile,
    current: RequirementProfile,
    fields: tuple[str, ...],
) -> ChangeKind:
    if current.platforms - previous.platforms:
        return ChangeKind.PLATFORM_ADDED
    if current.performance.rank > previous.performance.rank:
        return ChangeKind.PERFORMANCE_UPGRADED
    if "team_skills" in fields:
        return ChangeKind.SKILL_SHIFTED
    return ChangeKind.OTHER


def diff_profiles(
    previous: RequirementProfile,
    current: RequirementProfile,
) -> Optional[TriggerEvent]:
    """Build a ``TriggerEvent`` for the change, or ``None`` if nothing changed."""
    fields = changed_fields(previous, current)
    if not fields:
        return None
    return TriggerEvent(
        previous=previous,
        current=current,
        kind=classify_change(previous, current, fields),
        changed_fields=fields,
    )
