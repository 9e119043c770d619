"""
Recommendation scoring: weighted multi-criteria score per candidate.

Score formula (weighted sum, range 0–10)
-----------------------------------------
    total = Σ_c weight[c] * value(candidate, c)

    over c ∈ {performance, development_speed, team_fit,
              maintenance, ecosystem, scalability}

Weights come from versioned configuration (``ScoringWeights``) and must sum
to 1.0 (±1e-6); the engine refuses to initialize otherwise.  Because every
criterion value lies in [0, 10], so does the total.

Criterion values
----------------
Static criteria (performance, development_speed, maintenance, ecosystem,
scalability):
    Looked up from the candidate's attribute map.

team_fit (derived, 0–10):
    Affinity-normalized dot product of the team's skill vector and the
    candidate's skill-affinity vector:

        team_fit = Σ_d skill[d] * affinity[d] / Σ_d affinity[d]

    i.e. the team's skill averaged over the dimensions the stack leans on,
    weighted by how much it leans on each.  A team rated 10 on every
    dimension the stack uses scores 10; a team with none of them scores 0.
    A candidate declaring no affinity at all scores 0.

The engine is purely functional: identical (profile, candidates, weights)
always produce identical scores.  Values are never rounded here.
"""

from __future__ import annotations

import logging
import math
from types import MappingProxyType
from typing import Mapping, Sequence

from stack_advisor.config import ScoringWeights, weight_problems
from stack_advisor.errors import ConfigurationIntegrityError
from stack_advisor.models.candidate import CandidateStack
from stack_advisor.models.profile import RequirementProfile
from stack_advisor.models.recommendation import ScoredCandidate
from stack_advisor.taxonomy.requirement_taxonomy import (
    Criterion,
    SkillDimension,
)

logger = logging.getLogger(__name__)


def compute_team_fit(
    team_skills: Mapping[SkillDimension, float],
    skill_affinity: Mapping[SkillDimension, float],
) -> float:
    """Return the affinity-normalized team fit on the 0–10 scale."""
    total_affinity = math.fsum(skill_affinity.values())
    if total_affinity <= 0.0:
        return 0.0
    dot = math.fsum(
        team_skills.get(dim, 0.0) * affinity
        for dim, affinity in sorted(skill_affinity.items())
    )
    return dot / total_affinity


def criterion_values(
    profile: RequirementProfile,
    candidate: CandidateStack,
) -> dict[Criterion, float]:
    """Return the raw 0–10 value of every criterion for one candidate."""
    values: dict[Criterion, float] = {}
    for criterion in Criterion:
        if criterion is Criterion.TEAM_FIT:
            values[criterion] = compute_team_fit(profile.team_skills, candidate.skill_affinity)
        else:
            values[criterion] = candidate.attribute(criterion)
    return values


class ScoringEngine:
    """Weighted multi-criteria scorer.

    Attributes:
        weights: Criterion -> weight (read-only view).
        version: Version label of the weight set.
    """

    def __init__(
        self,
        weights: Mapping[Criterion, float],
        version: str = "unversioned",
    ) -> None:
        normalized: dict[Criterion, float] = {}
        problems: list[str] = []
        for c, w in weights.items():
            try:
                criterion = Criterion(c)
            except ValueError:
                problems.append(f"unknown criterion '{c}'")
                continue
            try:
                normalized[criterion] = float(w)
            except (TypeError, ValueError):
                problems.append(f"weight for '{criterion}' is not a number: {w!r}")
        problems.extend(weight_problems(normalized))
        if problems:
            raise ConfigurationIntegrityError(problems, source=f"scoring weights {version}")
        self.weights: Mapping[Criterion, float] = MappingProxyType(normalized)
        self.version = version

    @classmethod
    def from_config(cls, scoring: ScoringWeights) -> "ScoringEngine":
        return cls(scoring.weights, version=scoring.version)

    def score(
        self,
        profile: RequirementProfile,
        candidate: CandidateStack,
    ) -> ScoredCandidate:
        """Score one candidate against ``profile``."""
        values = criterion_values(profile, candidate)
        breakdown = {c: self.weights[c] * values[c] for c in Criterion}
        total = math.fsum(breakdown[c] for c in Criterion)
        return ScoredCandidate(
            candidate=candidate,
            score=total,
            breakdown=MappingProxyType(breakdown),
            values=MappingProxyType(values),
        )

    def score_all(
        self,
        profile: RequirementProfile,
        candidates: Sequence[CandidateStack],
    ) -> list[ScoredCandidate]:
        """Score every candidate, preserving input order."""
        scored = [self.score(profile, c) for c in candidates]
        logger.debug(
            "Scored %d candidate(s) | weights_version=%s", len(scored), self.version
        )
        return scored
