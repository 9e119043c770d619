"""
Recommendation report output: ASCII terminal tables and JSON files.

Functions here are pure formatting / file I/O over in-memory objects.  They
are used by the CLI and never touch the scoring pipeline.

Output files
------------
  <output_dir>/recommendation_<primary>_<date>.json  -- Recommendation.to_dict()
"""

from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path
from typing import Sequence

from stack_advisor.models.candidate import CandidateStack
from stack_advisor.models.recommendation import HandoffNotice, Recommendation, ScoredCandidate
from stack_advisor.taxonomy.requirement_taxonomy import Criterion

logger = logging.getLogger(__name__)

_RISK_BADGE = {
    "low":    "[LOW RISK]   ",
    "medium": "[MEDIUM RISK]",
    "high":   "[HIGH RISK]  ",
}


# ── Recommendation ────────────────────────────────────────────────────────────


def _scored_row(rank: int, sc: ScoredCandidate) -> str:
    cells = " ".join(f"{sc.contribution(c):>8.3f}" for c in Criterion)
    return f"  {rank:<4} {sc.stack_id:<16} {str(sc.owner):<24} {sc.score:>7.3f} {cells}"


def format_recommendation(rec: Recommendation) -> str:
    """Format a recommendation as a ranked terminal table."""
    crit_header = " ".join(f"{str(c)[:8]:>8}" for c in Criterion)
    header = f"  {'Rank':<4} {'Stack':<16} {'Owner':<24} {'Score':>7} {crit_header}"
    sep = "  " + "-" * (len(header) - 2)

    lines = [
        f"{_RISK_BADGE.get(str(rec.risk), '[?]')} Primary: "
        f"{rec.primary_stack_id} (owner: {rec.primary_owner})",
        "",
        header,
        sep,
        _scored_row(1, rec.primary),
    ]
    for rank, alt in enumerate(rec.alternates, start=2):
        lines.append(_scored_row(rank, alt))

    lines.append("")
    lines.append(f"  Rationale: {rec.rationale}")
    if rec.score_gap is not None:
        lines.append(f"  Score gap to runner-up: {rec.score_gap:.3f}")
    if rec.eliminated:
        lines.append("  Eliminated by hard constraints:")
        for e in rec.eliminated:
            lines.append(f"    - {e.stack_id:<16} ({e.rule})")
    lines.append(
        f"  Weights version: {rec.weights_version or '-'} | "
        f"Catalog version: {rec.catalog_version or '-'}"
    )
    return "\n".join(lines) + "\n"


def format_handoff_notice(notice: HandoffNotice) -> str:
    """One-paragraph advisory text for a handoff notice."""
    return (
        f"[HANDOFF] project={notice.project_key}: "
        f"{notice.previous_stack_id} ({notice.previous_owner}) -> "
        f"{notice.new_stack_id} ({notice.new_owner})\n"
        f"  Reason: {notice.reason}\n"
    )


def write_recommendation_json(
    rec: Recommendation,
    output_dir: Path,
    run_date: date | None = None,
) -> Path:
    """Write ``rec.to_dict()`` as pretty-printed JSON.

    Args:
        rec:        Recommendation to write.
        output_dir: Directory to write the file (created if missing).
        run_date:   Date label for the filename.  Defaults to today.

    Returns:
        Path to the written JSON file.
    """
    if run_date is None:
        run_date = date.today()

    output_dir.mkdir(parents=True, exist_ok=True)
    json_path = output_dir / f"recommendation_{rec.primary_stack_id}_{run_date}.json"
    with json_path.open("w", encoding="utf-8") as f:
        json.dump(rec.to_dict(), f, indent=2)
        f.write("\n")

    logger.info("Wrote recommendation JSON: %s", json_path)
    return json_path


# ── Catalog ───────────────────────────────────────────────────────────────────


def format_candidate_table(candidates: Sequence[CandidateStack]) -> str:
    """Format the catalog summary for ``check-catalog``.

    Columns: Stack ID | Owner | Platforms | static criteria | Tags
    """
    if not candidates:
        return "  (no candidates registered)\n"

    static = [c for c in Criterion if c is not Criterion.TEAM_FIT]
    crit_header = " ".join(f"{str(c)[:5]:>5}" for c in static)
    header = f"  {'Stack ID':<16} {'Owner':<24} {'Platforms':<44} {crit_header}  Tags"
    sep = "  " + "-" * (len(header) - 2)

    lines = [header, sep]
    for cand in candidates:
        platforms = ",".join(sorted(cand.platforms))
        scores = " ".join(f"{cand.attribute(c):>5.1f}" for c in static)
        tags = ",".join(sorted(cand.tags)) or "-"
        lines.append(
            f"  {cand.stack_id:<16} {str(cand.owner):<24} {platforms:<44} {scores}  {tags}"
        )
    return "\n".join(lines) + "\n"
