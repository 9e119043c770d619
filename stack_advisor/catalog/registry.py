"""
Candidate catalog registry.

Loads ``CandidateStack`` entries from config/catalog.toml (or a
caller-supplied path) exactly once at startup and exposes read-only lookups.

Usage
-----
    from stack_advisor.catalog.registry import load_registry

    registry = load_registry("config/catalog.toml")
    candidates = registry.candidates_for({Platform.IOS, Platform.ANDROID})

The registry is an explicit object handed to every pipeline invocation.
There is no module-level cache: two registries loaded from two files never
interfere, and tests build their own from in-memory entries via
``CandidateRegistry.from_entries``.

Integrity
---------
Every entry is checked for completeness before any candidate is built:

  - ``stack_id`` present, non-empty and unique
  - all five static criteria present, numeric, within [0, 10]
  - ``platforms`` non-empty and every value a known platform
  - ``skill_affinity`` dimensions exactly the canonical skill set,
    values within [0, 10]
  - ``owner`` a known delivery owner whose declared platforms cover the
    candidate's platforms

All problems are collected and raised together as one
``ConfigurationIntegrityError``.  A partially valid catalog never loads.

TOML structure expected in catalog.toml
---------------------------------------
    version = "2026.1"

    [[candidates]]
    stack_id     = "react-native"
    display_name = "React Native"
    platforms    = ["web", "ios", "android"]
    owner        = "react_native_engineer"
    tags         = ["cross-platform"]

    [candidates.attributes]
    performance = 6.0
    ...

    [candidates.skill_affinity]
    web = 8.0
    ...
"""

from __future__ import annotations

import logging
import tomllib
from numbers import Real
from pathlib import Path
from typing import Any, Iterable, Iterator, Optional, Sequence

from stack_advisor.errors import ConfigurationIntegrityError
from stack_advisor.models.candidate import CandidateStack
from stack_advisor.taxonomy.owner_taxonomy import DeliveryOwner, capabilities_for
from stack_advisor.taxonomy.requirement_taxonomy import (
    STATIC_CRITERIA,
    Platform,
    SkillDimension,
)

logger = logging.getLogger(__name__)

SCORE_MIN = 0.0
SCORE_MAX = 10.0


class CandidateRegistry:
    """Read-only catalog of technology-stack candidates.

    Attributes:
        version: Catalog version string (recorded on every recommendation).
        source:  Where the catalog was loaded from, for diagnostics.
    """

    def __init__(
        self,
        candidates: Iterable[CandidateStack],
        version: str = "unversioned",
        source: str = "<memory>",
    ) -> None:
        ordered = sorted(candidates, key=lambda c: c.stack_id)
        self._by_id: dict[str, CandidateStack] = {c.stack_id: c for c in ordered}
        self._ordered: tuple[CandidateStack, ...] = tuple(ordered)
        self.version = version
        self.source = source

    # ── Construction ──────────────────────────────────────────────────────────

    @classmethod
    def from_entries(
        cls,
        entries: Sequence[dict[str, Any]],
        version: str = "unversioned",
        source: str = "<memory>",
    ) -> "CandidateRegistry":
        """Validate raw catalog entries and build a registry.

        Raises:
            ConfigurationIntegrityError: Listing every integrity problem.
        """
        problems: list[str] = []
        if not entries:
            problems.append("catalog contains no candidates")

        seen: set[str] = set()
        for idx, entry in enumerate(entries):
            label = _entry_label(idx, entry)
            problems.extend(f"{label}: {p}" for p in _entry_problems(entry))
            sid = entry.get("stack_id") if isinstance(entry, dict) else None
            if isinstance(sid, str) and sid:
                if sid in seen:
                    problems.append(f"{label}: duplicate stack_id")
                seen.add(sid)

        if problems:
            logger.error(
                "Catalog integrity check failed (%d problem(s)) | source=%s",
                len(problems), source,
            )
            raise ConfigurationIntegrityError(problems, source=source)

        candidates = [_build_candidate(e) for e in entries]
        logger.info(
            "Catalog loaded | candidates=%d version=%s source=%s",
            len(candidates), version, source,
        )
        return cls(candidates, version=version, source=source)

    # ── Lookups ───────────────────────────────────────────────────────────────

    def candidates_for(self, platforms: Iterable[Platform]) -> list[CandidateStack]:
        """Return candidates supporting at least one requested platform.

        Pure lookup; results are ordered by ``stack_id``.
        """
        requested = frozenset(platforms)
        return [c for c in self._ordered if c.platforms & requested]

    def get(self, stack_id: str) -> CandidateStack:
        """Look up one candidate.

        Raises:
            KeyError: If ``stack_id`` is not registered.
        """
        if stack_id not in self._by_id:
            raise KeyError(
                f"Candidate '{stack_id}' not found in catalog.  "
                f"Available: {self.stack_ids}"
            )
        return self._by_id[stack_id]

    def all(self) -> list[CandidateStack]:
        return list(self._ordered)

    @property
    def stack_ids(self) -> list[str]:
        return [c.stack_id for c in self._ordered]

    def __len__(self) -> int:
        return len(self._ordered)

    def __iter__(self) -> Iterator[CandidateStack]:
        return iter(self._ordered)

    def __contains__(self, stack_id: object) -> bool:
        return stack_id in self._by_id


def load_registry(catalog_path: str | Path) -> CandidateRegistry:
    """Load and validate the catalog TOML file.

    Args:
        catalog_path: Path to the catalog file.

    Returns:
        Fully validated CandidateRegistry.

    Raises:
        ConfigurationIntegrityError: If the file is missing, malformed, or any
            entry fails the integrity checks.
    """
    path = Path(catalog_path)
    if not path.exists():
        raise ConfigurationIntegrityError(
            [f"catalog file not found: {path}"], source=str(path)
        )

    try:
        with open(path, "rb") as f:
            raw = tomllib.load(f)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationIntegrityError(
            [f"catalog is not valid TOML: {exc}"], source=str(path)
        ) from exc

    entries = raw.get("candidates", [])
    if not isinstance(entries, list):
        raise ConfigurationIntegrityError(
            ["'candidates' must be an array of tables ([[candidates]])"],
            source=str(path),
        )

    return CandidateRegistry.from_entries(
        entries,
        version=str(raw.get("version", "unversioned")),
        source=str(path),
    )


# ── Integrity helpers ─────────────────────────────────────────────────────────


def _entry_label(idx: int, entry: Any) -> str:
    sid = entry.get("stack_id") if isinstance(entry, dict) else None
    return f"candidates[{idx}] ({sid})" if sid else f"candidates[{idx}]"


def _entry_problems(entry: Any) -> list[str]:
    """Return every completeness problem for one raw catalog entry."""
    if not isinstance(entry, dict):
        return [f"entry must be a table, got {type(entry).__name__}"]

    problems: list[str] = []

    sid = entry.get("stack_id")
    if not isinstance(sid, str) or not sid.strip():
        problems.append("stack_id is missing or empty")

    # Platforms
    platforms_raw = entry.get("platforms")
    platforms: set[Platform] = set()
    if platforms_raw is not None and not isinstance(platforms_raw, list):
        problems.append(
            f"platforms must be an array, got {type(platforms_raw).__name__}"
        )
    elif not platforms_raw:
        problems.append("platform set is empty")
    else:
        for p in platforms_raw:
            try:
                platforms.add(Platform(p))
            except ValueError:
                problems.append(f"unknown platform '{p}'")

    # Static criteria
    attributes = entry.get("attributes")
    if attributes is None:
        attributes = {}
    if not isinstance(attributes, dict):
        problems.append(
            f"attributes must be a table, got {type(attributes).__name__}"
        )
    else:
        missing = sorted(str(c) for c in STATIC_CRITERIA if str(c) not in attributes)
        if missing:
            problems.append(f"missing criteria {missing}")
        unexpected = sorted(set(map(str, attributes)) - {str(c) for c in STATIC_CRITERIA})
        if unexpected:
            problems.append(f"unexpected criteria {unexpected}")
        for name, value in attributes.items():
            problems.extend(_score_problems(f"attributes.{name}", value))

    # Skill affinity
    affinity = entry.get("skill_affinity")
    if affinity is None:
        affinity = {}
    if not isinstance(affinity, dict):
        problems.append(
            f"skill_affinity must be a table, got {type(affinity).__name__}"
        )
    else:
        canonical = {str(d) for d in SkillDimension}
        declared = set(map(str, affinity))
        if declared != canonical:
            missing_dims = sorted(canonical - declared)
            extra_dims = sorted(declared - canonical)
            detail = []
            if missing_dims:
                detail.append(f"missing {missing_dims}")
            if extra_dims:
                detail.append(f"unknown {extra_dims}")
            problems.append(
                "skill_affinity dimensions do not match the canonical set: "
                + ", ".join(detail)
            )
        for name, value in affinity.items():
            problems.extend(_score_problems(f"skill_affinity.{name}", value))

    # Owner
    owner_raw = entry.get("owner")
    owner: Optional[DeliveryOwner] = None
    try:
        owner = DeliveryOwner(owner_raw)
    except ValueError:
        problems.append(f"unknown owner '{owner_raw}'")
    if owner is not None and platforms:
        undeclared = sorted(str(p) for p in platforms - capabilities_for(owner).platforms)
        if undeclared:
            problems.append(
                f"owner '{owner}' does not declare platform(s) {undeclared}"
            )

    return problems


def _score_problems(field: str, value: Any) -> list[str]:
    if isinstance(value, bool) or not isinstance(value, Real):
        return [f"{field} must be a number, got {value!r}"]
    if not SCORE_MIN <= value <= SCORE_MAX:
        return [f"{field}={value} is outside [{SCORE_MIN:g}, {SCORE_MAX:g}]"]
    return []


def _build_candidate(entry: dict[str, Any]) -> CandidateStack:
    return CandidateStack(
        stack_id=entry["stack_id"],
        display_name=entry.get("display_name", entry["stack_id"]),
        platforms=frozenset(Platform(p) for p in entry["platforms"]),
        attributes={k: float(v) for k, v in entry["attributes"].items()},
        skill_affinity={k: float(v) for k, v in entry["skill_affinity"].items()},
        owner=DeliveryOwner(entry["owner"]),
        tags=frozenset(entry.get("tags", [])),
    )
