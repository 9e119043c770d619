"""
Requirement profile model.

``RequirementProfile`` is the normalized, validated form of a project's
requirements.  It is created once per request by
``stack_advisor.profile.builder.build_profile`` and never mutated: the model
is frozen and ``team_skills`` is stored as an immutable mapping with every
canonical skill dimension present.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, field_serializer, field_validator

from stack_advisor.taxonomy.requirement_taxonomy import (
    BudgetTier,
    MaintenanceHorizon,
    PerformanceTier,
    Platform,
    ScaleTier,
    SkillDimension,
    TimelineTier,
)


class RequirementProfile(BaseModel):
    """Immutable project requirement profile.

    Attributes:
        platforms:           Non-empty set of target platforms.
        scale:               Expected product scale.
        performance:         Runtime performance demand.
        team_skills:         Skill dimension -> rating in [0, 10].  Every
                             canonical dimension is present (0 if unrated).
        timeline:            Delivery pressure.
        budget:              Funding envelope.
        maintenance_horizon: How long the product must be maintained.
    """

    model_config = ConfigDict(frozen=True)

    platforms:           frozenset[Platform]
    scale:               ScaleTier
    performance:         PerformanceTier
    team_skills:         Mapping[SkillDimension, float]
    timeline:            TimelineTier = TimelineTier.STANDARD
    budget:              BudgetTier = BudgetTier.MEDIUM
    maintenance_horizon: MaintenanceHorizon = MaintenanceHorizon.MEDIUM

    @field_validator("platforms")
    @classmethod
    def validate_platforms_not_empty(cls, v: frozenset[Platform]) -> frozenset[Platform]:
        if not v:
            raise ValueError("platforms must contain at least one platform.")
        return v

    @field_validator("team_skills", mode="before")
    @classmethod
    def fill_unrated_skills(cls, v: Any) -> dict[SkillDimension, Any]:
        skills: dict[SkillDimension, Any] = {dim: 0.0 for dim in SkillDimension}
        for key, value in dict(v or {}).items():
            skills[SkillDimension(key)] = value
        return skills

    @field_validator("team_skills")
    @classmethod
    def freeze_team_skills(cls, v: Mapping[SkillDimension, float]) -> Mapping[SkillDimension, float]:
        for dim, value in v.items():
            if not 0.0 <= value <= 10.0:
                raise ValueError(f"skill '{dim}' must be in [0, 10], got {value}.")
        return MappingProxyType(dict(v))

    @field_serializer("team_skills")
    def serialize_team_skills(self, v: Mapping[SkillDimension, float]) -> dict[str, float]:
        return {str(k): val for k, val in v.items()}

    @field_serializer("platforms")
    def serialize_platforms(self, v: frozenset[Platform]) -> list[str]:
        return sorted(str(p) for p in v)

    def skill(self, dimension: SkillDimension) -> float:
        """Return the team's rating on ``dimension`` (0 if unrated)."""
        return self.team_skills.get(dimension, 0.0)

    @property
    def platform_count(self) -> int:
        return len(self.platforms)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RequirementProfile):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def _key(self) -> tuple:
        return (
            self.platforms,
            self.scale,
            self.performance,
            tuple(sorted(self.team_skills.items())),
            self.timeline,
            self.budget,
            self.maintenance_horizon,
        )
