"""
Candidate stack model.

A ``CandidateStack`` is one catalog entry: a technology stack with static
attribute scores, a skill-affinity vector, hard-constraint tags and the
delivery owner accountable for it.  Instances are built by the catalog
registry and are immutable for the lifetime of the process.

Tag conventions
---------------
  exclusive-native:<platform>  Platform-exclusive native toolchain, e.g.
                               ``exclusive-native:ios`` for Swift.
  cross-platform               One codebase targets several platforms.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from pydantic import BaseModel, ConfigDict, field_serializer, field_validator

from stack_advisor.taxonomy.owner_taxonomy import DeliveryOwner
from stack_advisor.taxonomy.requirement_taxonomy import (
    Criterion,
    Platform,
    SkillDimension,
)

EXCLUSIVE_NATIVE_PREFIX = "exclusive-native:"


def exclusive_native_tag(platform: Platform) -> str:
    """Return the tag marking a platform-exclusive native stack."""
    return f"{EXCLUSIVE_NATIVE_PREFIX}{platform}"


class CandidateStack(BaseModel):
    """One technology-stack candidate.

    Completeness (all static criteria, full affinity vector, known owner) is
    enforced by the registry at load time, which reports every problem at
    once; this model only guarantees types and immutability.

    Attributes:
        stack_id:       Unique catalog key, e.g. ``"react-native"``.
        display_name:   Human-readable name.
        platforms:      Platforms this stack can ship.
        attributes:     Static criterion -> score in [0, 10].
        skill_affinity: Skill dimension -> affinity in [0, 10].
        owner:          Accountable delivery owner.
        tags:           Hard-constraint tags.
    """

    model_config = ConfigDict(frozen=True)

    stack_id:       str
    display_name:   str
    platforms:      frozenset[Platform]
    attributes:     Mapping[Criterion, float]
    skill_affinity: Mapping[SkillDimension, float]
    owner:          DeliveryOwner
    tags:           frozenset[str] = frozenset()

    @field_validator("attributes", "skill_affinity")
    @classmethod
    def freeze_mapping(cls, v: Mapping) -> Mapping:
        return MappingProxyType(dict(v))

    @field_serializer("attributes", "skill_affinity")
    def serialize_mapping(self, v: Mapping) -> dict[str, float]:
        return {str(k): val for k, val in v.items()}

    @field_serializer("platforms", "tags")
    def serialize_set(self, v: frozenset) -> list[str]:
        return sorted(str(x) for x in v)

    def attribute(self, criterion: Criterion) -> float:
        """Return the static score for ``criterion``."""
        return self.attributes[criterion]

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags

    def is_exclusive_native_for(self, platform: Platform) -> bool:
        return exclusive_native_tag(platform) in self.tags

    def covers(self, platforms: frozenset[Platform]) -> bool:
        """True if this stack supports every platform in ``platforms``."""
        return platforms <= self.platforms

    def __hash__(self) -> int:
        return hash(self.stack_id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CandidateStack):
            return NotImplemented
        return (
            self.stack_id == other.stack_id
            and self.platforms == other.platforms
            and dict(self.attributes) == dict(other.attributes)
            and dict(self.skill_affinity) == dict(other.skill_affinity)
            and self.tags == other.tags
            and self.owner == other.owner
        )
