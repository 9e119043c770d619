"""
Shared pytest fixtures for the stack advisor test suite.

Provides:
  - ``catalog_path`` / ``registry``: the shipped config/catalog.toml, loaded
    through the real integrity checks.
  - ``app_config`` / ``pipeline``: default configuration and a pipeline
    built on the shipped catalog.
  - ``make_entry``: factory for raw catalog entries (dicts, as read from TOML).
  - ``make_candidate``: factory for ``CandidateStack`` objects.
  - Example requests used across modules.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import pytest

from stack_advisor.catalog.registry import CandidateRegistry, load_registry
from stack_advisor.config import AppConfig
from stack_advisor.models.candidate import CandidateStack
from stack_advisor.pipeline.recommend import RecommendationPipeline
from stack_advisor.taxonomy.owner_taxonomy import DeliveryOwner
from stack_advisor.taxonomy.requirement_taxonomy import (
    STATIC_CRITERIA,
    Platform,
    SkillDimension,
)

PROJECT_ROOT = Path(__file__).parent.parent


# ── Shipped catalog / config ──────────────────────────────────────────────────

@pytest.fixture
def catalog_path() -> Path:
    return PROJECT_ROOT / "config" / "catalog.toml"


@pytest.fixture
def registry(catalog_path: Path) -> CandidateRegistry:
    return load_registry(catalog_path)


@pytest.fixture
def app_config() -> AppConfig:
    return AppConfig()


@pytest.fixture
def pipeline(app_config: AppConfig, registry: CandidateRegistry) -> RecommendationPipeline:
    return RecommendationPipeline(app_config, registry)


# ── Factories ─────────────────────────────────────────────────────────────────

def _entry(
    stack_id: str = "react-native",
    platforms: tuple[str, ...] = ("web", "ios", "android"),
    owner: str = "react_native_engineer",
    score: float = 5.0,
    affinity: float = 5.0,
    tags: tuple[str, ...] = (),
    **overrides: Any,
) -> dict[str, Any]:
    entry: dict[str, Any] = {
        "stack_id": stack_id,
        "display_name": stack_id.title(),
        "platforms": list(platforms),
        "owner": owner,
        "tags": list(tags),
        "attributes": {str(c): score for c in STATIC_CRITERIA},
        "skill_affinity": {str(d): affinity for d in SkillDimension},
    }
    entry.update(overrides)
    return entry


@pytest.fixture
def make_entry() -> Callable[..., dict[str, Any]]:
    """Return a factory for a complete, valid raw catalog entry."""
    return _entry


def _candidate(
    stack_id: str = "react-native",
    platforms: tuple[Platform, ...] = (Platform.WEB, Platform.IOS, Platform.ANDROID),
    owner: DeliveryOwner = DeliveryOwner.REACT_NATIVE_ENGINEER,
    attributes: dict | None = None,
    skill_affinity: dict | None = None,
    tags: tuple[str, ...] = (),
) -> CandidateStack:
    return CandidateStack(
        stack_id=stack_id,
        display_name=stack_id.title(),
        platforms=frozenset(platforms),
        attributes=attributes or {c: 5.0 for c in STATIC_CRITERIA},
        skill_affinity=skill_affinity or {d: 5.0 for d in SkillDimension},
        owner=owner,
        tags=frozenset(tags),
    )


@pytest.fixture
def make_candidate() -> Callable[..., CandidateStack]:
    """Return a factory for ``CandidateStack`` objects (defaults score 5 everywhere)."""
    return _candidate


# ── Example requests ──────────────────────────────────────────────────────────

@pytest.fixture
def web_leaning_request() -> dict[str, Any]:
    """Three platforms, web-heavy team, tight budget."""
    return {
        "platforms": ["web", "ios", "android"],
        "scale": "mvp",
        "performance": "medium",
        "team_skills": {"web": 9, "mobile": 3},
        "timeline": "fast",
        "budget": "tight",
    }


@pytest.fixture
def mobile_leaning_request(web_leaning_request: dict[str, Any]) -> dict[str, Any]:
    """Same as ``web_leaning_request`` with a mobile-heavy team."""
    return {**web_leaning_request, "team_skills": {"web": 2, "mobile": 8}}
