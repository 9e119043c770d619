"""
RecommendationPipeline — the single logical ``recommend`` operation.

Flow
----
  1. build_profile()         raw request → immutable RequirementProfile
  2. DecisionTreeResolver    registry candidates → hard-constraint survivors
  3. ScoringEngine           survivors → ScoredCandidate list
  4. rank_candidates()       → primary + K alternates (+ runner-up)
  5. compose_recommendation()→ Recommendation with rationale and risk

The pipeline holds only immutable collaborators (config, registry, rules,
scoring engine), so one instance can serve concurrent requests without
locking.

Every run logs a ``run_slug`` so a recommendation can be correlated with
its log lines; failures are logged and re-raised, never swallowed.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence
from uuid import uuid4

from stack_advisor.catalog.registry import CandidateRegistry, load_registry
from stack_advisor.config import AppConfig, resolve_path
from stack_advisor.errors import NoViableCandidateError, RequirementValidationError
from stack_advisor.models.profile import RequirementProfile
from stack_advisor.models.recommendation import Recommendation
from stack_advisor.profile.builder import build_profile
from stack_advisor.recommendations.composer import compose_recommendation
from stack_advisor.recommendations.ranker import rank_candidates
from stack_advisor.recommendations.scorer import ScoringEngine
from stack_advisor.resolver.resolver import DecisionTreeResolver
from stack_advisor.resolver.rules import ConstraintRule, build_default_rules

logger = logging.getLogger(__name__)


class RecommendationPipeline:
    """End-to-end stack recommendation.

    Attributes:
        config:   Application configuration.
        registry: Read-only candidate catalog (injected).
        resolver: Hard-constraint resolver.
        engine:   Weighted scoring engine.
    """

    def __init__(
        self,
        config: AppConfig,
        registry: CandidateRegistry,
        rules: Optional[Sequence[ConstraintRule]] = None,
    ) -> None:
        self.config = config
        self.registry = registry
        self.resolver = DecisionTreeResolver(
            rules if rules is not None
            else build_default_rules(config.resolver.performance_floor)
        )
        self.engine = ScoringEngine.from_config(config.scoring)

    @classmethod
    def from_config(cls, config: AppConfig) -> "RecommendationPipeline":
        """Load the catalog named in ``config`` and build a pipeline.

        Raises:
            ConfigurationIntegrityError: If the catalog fails to load.
        """
        registry = load_registry(resolve_path(config.catalog.path))
        return cls(config, registry)

    def recommend(self, request: Mapping[str, Any]) -> Recommendation:
        """Validate a raw request and return a recommendation.

        Raises:
            RequirementValidationError: If any request field is invalid.
            NoViableCandidateError: If hard constraints eliminate everything.
        """
        try:
            profile = build_profile(request)
        except RequirementValidationError as exc:
            logger.info("Request rejected: %s", exc)
            raise
        return self.recommend_profile(profile)

    def recommend_profile(self, profile: RequirementProfile) -> Recommendation:
        """Run resolution, scoring, ranking and composition for ``profile``.

        Raises:
            NoViableCandidateError: If hard constraints eliminate everything.
        """
        run_slug = str(uuid4())
        logger.info(
            "Recommend starting | run_slug=%s platforms=%s performance=%s",
            run_slug, sorted(map(str, profile.platforms)), profile.performance,
            extra={"run_slug": run_slug},
        )

        try:
            resolution = self.resolver.resolve(profile, self.registry)
        except NoViableCandidateError:
            logger.warning(
                "Recommend FAILED: no viable candidate | run_slug=%s", run_slug,
                extra={"run_slug": run_slug},
            )
            raise

        scored = self.engine.score_all(profile, resolution.survivors)
        ranking = rank_candidates(scored, alternates=self.config.ranking.alternates)
        recommendation = compose_recommendation(
            ranking,
            risk=self.config.risk,
            eliminated=resolution.eliminations,
            weights_version=self.engine.version,
            catalog_version=self.registry.version,
        )

        logger.info(
            "Recommend completed | run_slug=%s primary=%s score=%.4f risk=%s "
            "alternates=%d eliminated=%d",
            run_slug,
            recommendation.primary_stack_id,
            recommendation.primary.score,
            recommendation.risk,
            len(recommendation.alternates),
            len(recommendation.eliminated),
            extra={"run_slug": run_slug, "primary": recommendation.primary_stack_id},
        )
        return recommendation
