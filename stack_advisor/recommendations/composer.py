"""
RecommendationComposer: turns a ranking into an explained recommendation.

Rationale
---------
For each criterion the contribution gap is

    gap[c] = primary.breakdown[c] - runner_up.breakdown[c]

The criterion with the largest positive gap (several if tied) is named as
the decisive factor, followed by the overall score gap, e.g.:

    "react-native leads flutter by 0.62 points; decisive criterion:
     team_fit (+0.62); also ahead on ecosystem (+0.30)"

With no runner-up the rationale states that the primary is the only viable
candidate and how many candidates the hard constraints eliminated.

Risk level (thresholds from RiskConfig, 0–10 scale)
----------------------------------------------------
    1. LOW    : no runner-up (nothing competes)
    2. HIGH   : gap <  high_risk_gap   (close call, warrants human judgment)
    3. MEDIUM : gap <  low_risk_gap
    4. LOW    : otherwise
"""

from __future__ import annotations

from typing import Optional, Sequence

from stack_advisor.config import RiskConfig
from stack_advisor.models.recommendation import Elimination, Recommendation, ScoredCandidate
from stack_advisor.recommendations.ranker import Ranking
from stack_advisor.taxonomy.requirement_taxonomy import Criterion, RiskLevel

_TIE_EPSILON = 1e-9
_MAX_SECONDARY_REASONS = 2


def determine_risk(score_gap: Optional[float], risk: RiskConfig) -> RiskLevel:
    """Grade how decisive the primary is over the runner-up.

    Args:
        score_gap: primary - runner-up score, or ``None`` with no runner-up.
        risk:      Threshold configuration.
    """
    if score_gap is None:
        return RiskLevel.LOW
    if score_gap < risk.high_risk_gap:
        return RiskLevel.HIGH
    if score_gap < risk.low_risk_gap:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def criterion_gaps(
    primary: ScoredCandidate,
    runner_up: ScoredCandidate,
) -> dict[Criterion, float]:
    """Per-criterion weighted contribution gap, primary minus runner-up."""
    return {
        c: primary.contribution(c) - runner_up.contribution(c) for c in Criterion
    }


def decisive_criteria(gaps: dict[Criterion, float]) -> list[Criterion]:
    """Return the criterion (or tied criteria) with the largest positive gap.

    Empty when the primary leads on no criterion (possible only on exact
    score ties broken by stack_id).
    """
    best = max(gaps.values())
    if best <= _TIE_EPSILON:
        return []
    return [c for c in Criterion if best - gaps[c] <= _TIE_EPSILON]


def build_rationale(
    primary: ScoredCandidate,
    runner_up: Optional[ScoredCandidate],
    eliminated: Sequence[Elimination] = (),
) -> str:
    """Assemble the human-readable justification for ``primary``."""
    if runner_up is None:
        if eliminated:
            return (
                f"{primary.stack_id} is the only viable candidate; hard constraints "
                f"eliminated {len(eliminated)} other(s)"
            )
        return f"{primary.stack_id} is the only candidate supporting the requested platforms"

    gap = primary.score - runner_up.score
    gaps = criterion_gaps(primary, runner_up)
    decisive = decisive_criteria(gaps)

    head = f"{primary.stack_id} leads {runner_up.stack_id} by {gap:.2f} points"
    if not decisive:
        return f"{head}; scores tie, order decided by stack id"

    parts = [
        head,
        "decisive criterion: "
        + ", ".join(f"{c} (+{gaps[c]:.2f})" for c in decisive),
    ]

    secondary = sorted(
        (c for c in Criterion if c not in decisive and gaps[c] > _TIE_EPSILON),
        key=lambda c: (-gaps[c], c),
    )[:_MAX_SECONDARY_REASONS]
    if secondary:
        parts.append(
            "also ahead on " + ", ".join(f"{c} (+{gaps[c]:.2f})" for c in secondary)
        )
    return "; ".join(parts)


def compose_recommendation(
    ranking: Ranking,
    risk: RiskConfig,
    eliminated: Sequence[Elimination] = (),
    weights_version: str = "",
    catalog_version: str = "",
) -> Recommendation:
    """Build the final ``Recommendation`` from a ranking.

    Args:
        ranking:         Output of ``rank_candidates``.
        risk:            Risk threshold configuration.
        eliminated:      Hard-constraint eliminations, for the rationale/output.
        weights_version: Scoring weights version to record.
        catalog_version: Catalog version to record.
    """
    primary, runner_up = ranking.primary, ranking.runner_up
    score_gap = primary.score - runner_up.score if runner_up is not None else None
    # Risk is graded only against alternates actually offered.
    graded_gap = score_gap if ranking.alternates else None

    return Recommendation(
        primary=primary,
        alternates=ranking.alternates,
        rationale=build_rationale(primary, runner_up, eliminated),
        risk=determine_risk(graded_gap, risk),
        score_gap=score_gap,
        eliminated=tuple(eliminated),
        weights_version=weights_version,
        catalog_version=catalog_version,
    )
