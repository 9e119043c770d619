"""
RequirementProfile builder: validates and normalizes a raw request.

Request shape
-------------
    platforms:           iterable of Platform values   (required, non-empty)
    scale:               ScaleTier value                (required)
    performance:         PerformanceTier value          (required)
    team_skills:         {skill-name: 0..10}            (optional, default all 0)
    timeline:            TimelineTier value             (optional, default "standard")
    budget:              BudgetTier value               (optional, default "medium")
    maintenance_horizon: MaintenanceHorizon value       (optional, default "medium")

Every field is checked in a single pass.  All problems are collected and
raised together as one ``RequirementValidationError`` so the caller can fix
the whole request at once.  String values are matched case-insensitively
after trimming whitespace.

Pure function: no I/O, no logging side effects beyond DEBUG tracing.
"""

from __future__ import annotations

import logging
import math
from enum import StrEnum
from numbers import Real
from typing import Any, Mapping, Optional, TypeVar

from stack_advisor.errors import FieldError, RequirementValidationError
from stack_advisor.models.profile import RequirementProfile
from stack_advisor.taxonomy.requirement_taxonomy import (
    BudgetTier,
    MaintenanceHorizon,
    PerformanceTier,
    Platform,
    ScaleTier,
    SkillDimension,
    TimelineTier,
)

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=StrEnum)

SKILL_MIN = 0.0
SKILL_MAX = 10.0

_REQUIRED_TIERS: dict[str, type[StrEnum]] = {
    "scale":       ScaleTier,
    "performance": PerformanceTier,
}

_OPTIONAL_TIERS: dict[str, tuple[type[StrEnum], StrEnum]] = {
    "timeline":            (TimelineTier, TimelineTier.STANDARD),
    "budget":              (BudgetTier, BudgetTier.MEDIUM),
    "maintenance_horizon": (MaintenanceHorizon, MaintenanceHorizon.MEDIUM),
}

RECOGNIZED_FIELDS: frozenset[str] = frozenset(
    {"platforms", "team_skills", *_REQUIRED_TIERS, *_OPTIONAL_TIERS}
)


def build_profile(raw: Mapping[str, Any]) -> RequirementProfile:
    """Validate ``raw`` and return an immutable ``RequirementProfile``.

    Args:
        raw: Request mapping (see module docstring for the shape).

    Returns:
        Normalized RequirementProfile.

    Raises:
        RequirementValidationError: Listing every invalid field.
    """
    if not isinstance(raw, Mapping):
        raise RequirementValidationError(
            [FieldError("request", f"expected a mapping, got {type(raw).__name__}")]
        )

    errors: list[FieldError] = []

    for key in sorted(set(raw) - RECOGNIZED_FIELDS, key=str):
        errors.append(FieldError(str(key), "unrecognized field"))

    platforms = _parse_platforms(raw.get("platforms"), errors)

    tiers: dict[str, Optional[StrEnum]] = {}
    for name, enum_cls in _REQUIRED_TIERS.items():
        if raw.get(name) is None:
            errors.append(FieldError(name, "field is required"))
            tiers[name] = None
        else:
            tiers[name] = _parse_enum(name, raw[name], enum_cls, errors)

    for name, (enum_cls, default) in _OPTIONAL_TIERS.items():
        value = raw.get(name)
        tiers[name] = default if value is None else _parse_enum(name, value, enum_cls, errors)

    team_skills = _parse_team_skills(raw.get("team_skills"), errors)

    if errors:
        logger.debug("Rejected requirement request: %d invalid field(s)", len(errors))
        raise RequirementValidationError(errors)

    return RequirementProfile(
        platforms=platforms,
        team_skills=team_skills,
        **tiers,
    )


# ── Field parsers ─────────────────────────────────────────────────────────────


def _normalize(value: Any) -> Any:
    return value.strip().lower() if isinstance(value, str) else value


def _parse_enum(
    name: str,
    value: Any,
    enum_cls: type[E],
    errors: list[FieldError],
) -> Optional[E]:
    try:
        return enum_cls(_normalize(value))
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        errors.append(FieldError(name, f"'{value}' is not one of: {allowed}"))
        return None


def _parse_platforms(value: Any, errors: list[FieldError]) -> frozenset[Platform]:
    if value is None:
        errors.append(FieldError("platforms", "field is required"))
        return frozenset()
    if isinstance(value, (str, bytes)) or not hasattr(value, "__iter__"):
        errors.append(FieldError("platforms", "expected a collection of platforms"))
        return frozenset()

    parsed: set[Platform] = set()
    invalid: list[str] = []
    for item in value:
        try:
            parsed.add(Platform(_normalize(item)))
        except ValueError:
            invalid.append(str(item))

    if invalid:
        allowed = ", ".join(p.value for p in Platform)
        errors.append(
            FieldError("platforms", f"unrecognized platform(s) {invalid}; allowed: {allowed}")
        )
    elif not parsed:
        errors.append(FieldError("platforms", "at least one platform is required"))
    return frozenset(parsed)


def _parse_team_skills(value: Any, errors: list[FieldError]) -> dict[SkillDimension, float]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        errors.append(FieldError("team_skills", "expected a mapping of skill -> 0..10"))
        return {}

    skills: dict[SkillDimension, float] = {}
    seen: set[SkillDimension] = set()
    for name, rating in value.items():
        field = f"team_skills.{name}"
        try:
            dim = SkillDimension(_normalize(name))
        except ValueError:
            allowed = ", ".join(d.value for d in SkillDimension)
            errors.append(FieldError(field, f"unknown skill; allowed: {allowed}"))
            continue
        if dim in seen:
            errors.append(FieldError(field, f"duplicate skill after normalization ({dim})"))
            continue
        seen.add(dim)
        if isinstance(rating, bool) or not isinstance(rating, Real) or math.isnan(rating):
            errors.append(FieldError(field, f"expected a number, got {rating!r}"))
            continue
        if not SKILL_MIN <= rating <= SKILL_MAX:
            errors.append(
                FieldError(field, f"{rating} is outside [{SKILL_MIN:g}, {SKILL_MAX:g}]")
            )
            continue
        skills[dim] = float(rating)
    return skills
