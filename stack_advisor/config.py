"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      — committed static defaults
  2. ``config/local.toml``        — optional local overrides (gitignored)
  3. ``.env``                     — local env overrides (gitignored)
  4. Environment variables        — ``STACK_ADVISOR_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

Scoring weights, the alternate count and the risk thresholds are versioned,
validated configuration.  Every pipeline invocation receives an
``AppConfig`` instance, never raw dicts or literals scattered through the
codebase.
"""

from __future__ import annotations

import math
import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from stack_advisor.taxonomy.requirement_taxonomy import Criterion, PerformanceTier

WEIGHT_SUM_TOLERANCE = 1e-6

# ── Sub-config models ─────────────────────────────────────────────────────────


class CatalogConfig(BaseModel):
    """Location of the static candidate catalog."""

    model_config = ConfigDict(frozen=True)

    path: str = "config/catalog.toml"


class ScoringWeights(BaseModel):
    """Versioned criterion weights.

    Invariant: every criterion has a non-negative weight and the weights sum
    to 1.0 within ``WEIGHT_SUM_TOLERANCE``.
    """

    model_config = ConfigDict(frozen=True)

    version: str = "2026.1"
    weights: dict[Criterion, float] = {
        Criterion.PERFORMANCE:       0.15,
        Criterion.DEVELOPMENT_SPEED: 0.20,
        Criterion.TEAM_FIT:          0.25,
        Criterion.MAINTENANCE:       0.15,
        Criterion.ECOSYSTEM:         0.15,
        Criterion.SCALABILITY:       0.10,
    }

    @model_validator(mode="after")
    def validate_weights(self) -> "ScoringWeights":
        problems = weight_problems(self.weights)
        if problems:
            raise ValueError("; ".join(problems))
        return self

    def weight(self, criterion: Criterion) -> float:
        return self.weights[criterion]


def weight_problems(weights: dict[Criterion, float]) -> list[str]:
    """Return every violation of the weight invariant (empty if valid)."""
    problems: list[str] = []
    missing = sorted(str(c) for c in set(Criterion) - set(weights))
    if missing:
        problems.append(f"weights missing for criteria {missing}")
    negative = sorted(str(c) for c, w in weights.items() if w < 0)
    if negative:
        problems.append(f"weights must be >= 0, negative for {negative}")
    total = math.fsum(weights.values())
    if abs(total - 1.0) > WEIGHT_SUM_TOLERANCE:
        problems.append(
            f"weights must sum to 1.0 (±{WEIGHT_SUM_TOLERANCE}), got {total:.9f}"
        )
    return problems


class RankingConfig(BaseModel):
    """How many alternates follow the primary recommendation."""

    model_config = ConfigDict(frozen=True)

    alternates: int = 2

    @field_validator("alternates")
    @classmethod
    def validate_alternates(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"alternates must be >= 0, got {v}.")
        return v


class RiskConfig(BaseModel):
    """Score-gap thresholds (0–10 scale) grading recommendation risk.

    gap <  high_risk_gap  → high
    gap <  low_risk_gap   → medium
    otherwise             → low
    """

    model_config = ConfigDict(frozen=True)

    high_risk_gap: float = 0.3
    low_risk_gap:  float = 1.0

    @model_validator(mode="after")
    def thresholds_non_decreasing(self) -> "RiskConfig":
        if self.high_risk_gap < 0.0:
            raise ValueError(f"high_risk_gap must be >= 0, got {self.high_risk_gap}.")
        if self.low_risk_gap < self.high_risk_gap:
            raise ValueError(
                f"low_risk_gap ({self.low_risk_gap}) must be >= "
                f"high_risk_gap ({self.high_risk_gap})."
            )
        return self


class ResolverConfig(BaseModel):
    """Hard-constraint rule parameters.

    ``performance_floor`` maps a performance tier to the minimum static
    performance score a candidate needs to survive.  Tiers absent from the
    map impose no floor.
    """

    model_config = ConfigDict(frozen=True)

    performance_floor: dict[PerformanceTier, float] = {
        PerformanceTier.HIGH:    6.0,
        PerformanceTier.EXTREME: 8.0,
    }

    @field_validator("performance_floor")
    @classmethod
    def validate_floor_range(cls, v: dict[PerformanceTier, float]) -> dict[PerformanceTier, float]:
        for tier, floor in v.items():
            if not 0.0 <= floor <= 10.0:
                raise ValueError(
                    f"performance_floor for '{tier}' must be in [0, 10], got {floor}."
                )
        return v


class CoordinatorConfig(BaseModel):
    """Session coordination settings."""

    model_config = ConfigDict(frozen=True)

    lock_timeout_seconds: float = 5.0

    @field_validator("lock_timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0.0:
            raise ValueError(f"lock_timeout_seconds must be > 0, got {v}.")
        return v


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = ""
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration — the single source of truth.

    Constructed by ``load_config()`` which merges TOML + .env + environment.
    """

    model_config = ConfigDict(frozen=True)

    catalog: CatalogConfig = CatalogConfig()
    scoring: ScoringWeights = ScoringWeights()
    ranking: RankingConfig = RankingConfig()
    risk: RiskConfig = RiskConfig()
    resolver: ResolverConfig = ResolverConfig()
    coordinator: CoordinatorConfig = CoordinatorConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

_PROJECT_ROOT = Path(__file__).parent.parent


def find_project_root() -> Path:
    """Walk up from this file to find the project root (contains pyproject.toml)."""
    candidate = Path(__file__).parent
    for _ in range(5):
        if (candidate / "pyproject.toml").exists():
            return candidate
        candidate = candidate.parent
    return _PROJECT_ROOT


def resolve_path(path: str | Path) -> Path:
    """Resolve a config-relative path against the project root."""
    p = Path(path)
    return p if p.is_absolute() else find_project_root() / p


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit path to a TOML config file. Defaults to
            ``<project_root>/config/default.toml``.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If the specified ``config_path`` does not exist.
        pydantic.ValidationError: If merged config values fail validation
            (including scoring weights that do not sum to 1.0).
    """
    root = find_project_root()

    # 1. Load .env file (silently skip if missing)
    load_dotenv(dotenv_path=root / ".env", override=False)

    # 2. Load TOML config
    if config_path is None:
        config_path = root / "config" / "default.toml"

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {config_path}\n"
            "Create config/default.toml or pass --config."
        )

    with open(config_path, "rb") as f:
        raw: dict[str, Any] = tomllib.load(f)

    local_config_path = config_path.parent / "local.toml"
    if local_config_path.exists():
        with open(local_config_path, "rb") as f:
            local_raw: dict[str, Any] = tomllib.load(f)
        raw = _deep_merge(raw, local_raw)

    # 3. Apply STACK_ADVISOR_* environment variable overrides
    raw = _apply_env_overrides(raw)

    # 4. Build and validate AppConfig
    return _build_app_config(raw)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base``."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply STACK_ADVISOR_* env vars to the raw config dict.

    Supported overrides:
      STACK_ADVISOR_CATALOG_PATH → raw["catalog"]["path"]
      STACK_ADVISOR_LOG_LEVEL    → raw["logging"]["level"]
      STACK_ADVISOR_ALTERNATES   → raw["ranking"]["alternates"]
      STACK_ADVISOR_DEBUG        → raw["debug"]
    """
    if catalog_path := os.environ.get("STACK_ADVISOR_CATALOG_PATH"):
        raw.setdefault("catalog", {})["path"] = catalog_path

    if log_level := os.environ.get("STACK_ADVISOR_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if alternates := os.environ.get("STACK_ADVISOR_ALTERNATES"):
        raw.setdefault("ranking", {})["alternates"] = int(alternates)

    if debug := os.environ.get("STACK_ADVISOR_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    return AppConfig(
        catalog=CatalogConfig(**raw.get("catalog", {})),
        scoring=ScoringWeights(**raw.get("scoring", {})),
        ranking=RankingConfig(**raw.get("ranking", {})),
        risk=RiskConfig(**raw.get("risk", {})),
        resolver=ResolverConfig(**raw.get("resolver", {})),
        coordinator=CoordinatorConfig(**raw.get("coordinator", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        debug=raw.get("debug", False),
    )
