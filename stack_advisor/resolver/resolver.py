"""
DecisionTreeResolver: eliminates infeasible candidates with ordered rules.

Rules run left to right over the registry-derived candidate list.  Each rule
can only narrow the set (eliminated candidates never come back) and every
removal is recorded as an ``Elimination`` naming the rule responsible.

If nothing survives, ``NoViableCandidateError`` is raised.  There is no
fallback to a default candidate.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from stack_advisor.catalog.registry import CandidateRegistry
from stack_advisor.errors import NoViableCandidateError
from stack_advisor.models.candidate import CandidateStack
from stack_advisor.models.profile import RequirementProfile
from stack_advisor.models.recommendation import Elimination
from stack_advisor.resolver.rules import ConstraintRule

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resolution:
    """Outcome of hard-constraint resolution.

    Attributes:
        survivors:    Candidates left after every rule, ordered by stack_id.
        eliminations: One record per removed candidate, in rule order.
    """

    survivors:    tuple[CandidateStack, ...]
    eliminations: tuple[Elimination, ...]


class DecisionTreeResolver:
    """Apply an ordered list of ``ConstraintRule`` objects."""

    def __init__(self, rules: Sequence[ConstraintRule]) -> None:
        self.rules: tuple[ConstraintRule, ...] = tuple(rules)

    @property
    def rule_names(self) -> list[str]:
        return [r.name for r in self.rules]

    def resolve(
        self,
        profile: RequirementProfile,
        registry: CandidateRegistry,
    ) -> Resolution:
        """Filter the registry's candidates for ``profile``.

        Raises:
            NoViableCandidateError: If no candidate survives.
        """
        candidates = registry.candidates_for(profile.platforms)
        return self.resolve_candidates(profile, candidates)

    def resolve_candidates(
        self,
        profile: RequirementProfile,
        candidates: Sequence[CandidateStack],
    ) -> Resolution:
        """Apply the rules to an explicit candidate list.

        Raises:
            NoViableCandidateError: If no candidate survives.
        """
        current = list(candidates)
        eliminations: list[Elimination] = []

        for rule in self.rules:
            if not current:
                break
            if not rule.applies(profile):
                continue
            narrowed = rule.apply(profile, current)
            kept = {c.stack_id for c in narrowed}
            removed = [c.stack_id for c in current if c.stack_id not in kept]
            eliminations.extend(Elimination(sid, rule.name) for sid in removed)
            if removed:
                logger.debug(
                    "Rule [%s] eliminated %d candidate(s): %s",
                    rule.name, len(removed), ", ".join(removed),
                )
            current = narrowed

        if not current:
            logger.info(
                "No viable candidate | platforms=%s performance=%s eliminated=%d",
                sorted(map(str, profile.platforms)), profile.performance, len(eliminations),
            )
            raise NoViableCandidateError(profile, eliminations)

        return Resolution(survivors=tuple(current), eliminations=tuple(eliminations))
