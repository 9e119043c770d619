"""
Recommendation engine: converts resolver survivors into a ranked, explained
technology stack recommendation.

Modules
-------
scorer   : compute_team_fit() + criterion_values() + ScoringEngine, pure
           weighted scoring with a per-criterion breakdown.
ranker   : Ranking dataclass + sort_scored() + rank_candidates(), primary,
           top-K alternates and runner-up with stack_id tie-breaking.
composer : determine_risk() + build_rationale() + compose_recommendation().
reporter : format_recommendation() + write_recommendation_json(), output.
"""
