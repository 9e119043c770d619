"""
Recommendation output models.

``ScoredCandidate`` couples a candidate with its weighted score and the
per-criterion contribution breakdown.  ``Recommendation`` is the ephemeral
result of one pipeline run; persisting it is the caller's responsibility.

``TriggerEvent`` and ``HandoffNotice`` are the data-only events exchanged by
the agent coordinator.  A notice is advisory: it asks a human or calling
system to act, it never dispatches work itself.

All objects here are frozen dataclasses.  ``to_dict()`` produces the
JSON-ready output shape; rounding happens only there.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional

from stack_advisor.models.candidate import CandidateStack
from stack_advisor.models.profile import RequirementProfile
from stack_advisor.taxonomy.owner_taxonomy import DeliveryOwner
from stack_advisor.taxonomy.requirement_taxonomy import ChangeKind, Criterion, RiskLevel

_OUTPUT_DECIMALS = 4


@dataclass(frozen=True)
class ScoredCandidate:
    """A candidate with its total weighted score.

    Attributes:
        candidate: The scored catalog entry.
        score:     Σ weight[c] * value(candidate, c).
        breakdown: Criterion -> weighted contribution (sums to ``score``).
        values:    Criterion -> raw value on the 0–10 scale, before weighting.
    """

    candidate: CandidateStack
    score:     float
    breakdown: Mapping[Criterion, float]
    values:    Mapping[Criterion, float]

    @property
    def stack_id(self) -> str:
        return self.candidate.stack_id

    @property
    def owner(self) -> DeliveryOwner:
        return self.candidate.owner

    def contribution(self, criterion: Criterion) -> float:
        return self.breakdown.get(criterion, 0.0)

    def to_dict(self) -> dict[str, Any]:
        return {
            "stack_id":  self.stack_id,
            "owner_id":  str(self.owner),
            "score":     round(self.score, _OUTPUT_DECIMALS),
            "breakdown": {
                str(c): round(v, _OUTPUT_DECIMALS) for c, v in self.breakdown.items()
            },
        }


@dataclass(frozen=True)
class Elimination:
    """A candidate removed by a hard-constraint rule."""

    stack_id: str
    rule:     str

    def to_dict(self) -> dict[str, str]:
        return {"stack_id": self.stack_id, "rule": self.rule}


@dataclass(frozen=True)
class Recommendation:
    """Final ranked and explained recommendation.

    Attributes:
        primary:         Top-ranked candidate.
        alternates:      Next-ranked candidates in order (never includes primary).
        rationale:       Human-readable justification.
        risk:            How decisive the primary is over the runner-up.
        score_gap:       primary.score - runner_up.score, or ``None`` when the
                         primary was the only survivor.
        eliminated:      Candidates removed by hard constraints.
        weights_version: Version of the scoring weights used.
        catalog_version: Version of the candidate catalog used.
    """

    primary:         ScoredCandidate
    alternates:      tuple[ScoredCandidate, ...]
    rationale:       str
    risk:            RiskLevel
    score_gap:       Optional[float] = None
    eliminated:      tuple[Elimination, ...] = ()
    weights_version: str = ""
    catalog_version: str = ""

    @property
    def primary_stack_id(self) -> str:
        return self.primary.stack_id

    @property
    def primary_owner(self) -> DeliveryOwner:
        return self.primary.owner

    def to_dict(self) -> dict[str, Any]:
        return {
            "primary":    self.primary.to_dict(),
            "alternates": [a.to_dict() for a in self.alternates],
            "rationale":  self.rationale,
            "risk":       str(self.risk),
            "score_gap":  (
                round(self.score_gap, _OUTPUT_DECIMALS)
                if self.score_gap is not None else None
            ),
            "eliminated":      [e.to_dict() for e in self.eliminated],
            "weights_version": self.weights_version,
            "catalog_version": self.catalog_version,
        }


@dataclass(frozen=True)
class TriggerEvent:
    """Difference between a previous and a new requirement profile.

    Attributes:
        previous:       Profile stored for the project.
        current:        Updated profile to re-evaluate.
        kind:           Dominant change kind (see ``ChangeKind`` precedence).
        changed_fields: Names of every profile field that differs.
    """

    previous:       RequirementProfile
    current:        RequirementProfile
    kind:           ChangeKind
    changed_fields: tuple[str, ...] = ()


@dataclass(frozen=True)
class HandoffNotice:
    """Advisory signal that the responsible stack/owner should be reconsidered."""

    project_key:       str
    previous_owner:    DeliveryOwner
    new_owner:         DeliveryOwner
    previous_stack_id: str
    new_stack_id:      str
    reason:            str
    trigger:           ChangeKind
    issued_at:         Optional[datetime] = field(default=None, compare=False)

    @property
    def owner_changed(self) -> bool:
        return self.previous_owner != self.new_owner

    def to_dict(self) -> dict[str, Any]:
        return {
            "project_key":       self.project_key,
            "previous_owner":    str(self.previous_owner),
            "new_owner":         str(self.new_owner),
            "previous_stack_id": self.previous_stack_id,
            "new_stack_id":      self.new_stack_id,
            "reason":            self.reason,
            "trigger":           str(self.trigger),
            "issued_at":         self.issued_at.isoformat() if self.issued_at else None,
        }
