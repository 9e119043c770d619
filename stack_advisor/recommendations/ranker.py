"""
Recommendation ranker: orders scored candidates and selects primary +
alternates.

Ordering
--------
Primary sort: score descending.  Secondary: stack_id ascending.  The
secondary key makes the order total, so equal scores always rank the same
way regardless of input order.

Selection
---------
    primary    = ranked[0]
    alternates = ranked[1 : 1 + K]       (K from RankingConfig, default 2)
    runner_up  = ranked[1] if present    (even when K = 0; used for risk)

A single survivor yields an empty alternates tuple; that is not an error.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from stack_advisor.models.recommendation import ScoredCandidate

DEFAULT_ALTERNATES = 2


@dataclass(frozen=True)
class Ranking:
    """Ranked candidates.

    Attributes:
        primary:    Top-ranked candidate.
        alternates: Next K candidates in rank order.
        runner_up:  Second-ranked candidate, or ``None`` with one survivor.
        ranked:     The complete ordering.
    """

    primary:    ScoredCandidate
    alternates: tuple[ScoredCandidate, ...]
    runner_up:  Optional[ScoredCandidate]
    ranked:     tuple[ScoredCandidate, ...]


def sort_scored(scored: Sequence[ScoredCandidate]) -> list[ScoredCandidate]:
    """Return candidates by score descending, ties by stack_id ascending."""
    return sorted(scored, key=lambda s: (-s.score, s.stack_id))


def rank_candidates(
    scored: Sequence[ScoredCandidate],
    alternates: int = DEFAULT_ALTERNATES,
) -> Ranking:
    """Rank scored candidates and select primary + alternates.

    Args:
        scored:     Non-empty list of scored candidates.
        alternates: Number of alternates to keep (K >= 0).

    Raises:
        ValueError: If ``scored`` is empty or ``alternates`` is negative.
    """
    if not scored:
        raise ValueError("Cannot rank an empty candidate list.")
    if alternates < 0:
        raise ValueError(f"alternates must be >= 0, got {alternates}.")

    ranked = sort_scored(scored)
    return Ranking(
        primary=ranked[0],
        alternates=tuple(ranked[1 : 1 + alternates]),
        runner_up=ranked[1] if len(ranked) > 1 else None,
        ranked=tuple(ranked),
    )
