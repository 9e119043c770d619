"""
Tests for catalog/registry.py — load, integrity-check and look up candidates.

Covers:
  - The shipped config/catalog.toml loads and passes every integrity check
  - Every shipped owner declares the platforms of the stacks it owns
  - candidates_for() returns candidates touching any requested platform,
    ordered by stack_id
  - get() returns a candidate by ID and raises KeyError for unknown IDs
  - from_entries() collects every integrity problem into one
    ConfigurationIntegrityError: missing criteria, out-of-range scores,
    empty platforms, duplicate IDs, unknown owner, owner/platform mismatch,
    non-canonical skill affinity, wrongly typed platforms / attributes /
    skill_affinity
  - load_registry() reports missing files, malformed TOML and a
    non-array ``candidates`` key as ConfigurationIntegrityError
  - Loaded candidates are immutable

Integrity tests use synthetic entries or a temporary TOML file rather than
the real catalog so they do not depend on production catalog contents.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from stack_advisor.catalog.registry import CandidateRegistry, load_registry
from stack_advisor.errors import ConfigurationIntegrityError
from stack_advisor.models.candidate import exclusive_native_tag
from stack_advisor.taxonomy.owner_taxonomy import capabilities_for
from stack_advisor.taxonomy.requirement_taxonomy import Criterion, Platform


# ── Helpers ───────────────────────────────────────────────────────────────────


MINIMAL_CATALOG_TOML = """\
version = "test-1"

[[candidates]]
stack_id     = "react-web"
display_name = "React (web)"
platforms    = ["web"]
owner        = "web_engineer"
tags         = ["exclusive-native:web"]

[candidates.attributes]
performance       = 6.0
development_speed = 9.0
maintenance       = 7.0
ecosystem         = 10.0
scalability       = 8.0

[candidates.skill_affinity]
web            = 10.0
mobile         = 0.0
ios_native     = 0.0
android_native = 0.0
desktop        = 0.0
systems        = 1.0
"""


def _problems(exc_info) -> str:
    return "\n".join(exc_info.value.problems)


# ── Shipped catalog ───────────────────────────────────────────────────────────


class TestShippedCatalog:
    def test_loads(self, registry):
        assert len(registry) >= 5
        assert registry.version != "unversioned"

    def test_stack_ids_sorted(self, registry):
        assert registry.stack_ids == sorted(registry.stack_ids)

    def test_owners_cover_their_platforms(self, registry):
        for candidate in registry:
            assert candidate.platforms <= capabilities_for(candidate.owner).platforms

    def test_every_candidate_has_all_static_criteria(self, registry):
        for candidate in registry:
            for criterion in Criterion:
                if criterion is Criterion.TEAM_FIT:
                    continue
                assert 0.0 <= candidate.attribute(criterion) <= 10.0

    def test_single_platform_natives_tagged(self, registry):
        assert registry.get("swift-ios").is_exclusive_native_for(Platform.IOS)
        assert registry.get("kotlin-android").has_tag(exclusive_native_tag(Platform.ANDROID))


# ── Lookups ───────────────────────────────────────────────────────────────────


class TestLookups:
    def test_candidates_for_single_platform(self, registry):
        ids = [c.stack_id for c in registry.candidates_for({Platform.IOS})]
        assert ids == ["flutter", "react-native", "swift-ios"]

    def test_candidates_for_union_of_platforms(self, registry):
        ids = {c.stack_id for c in registry.candidates_for({Platform.WEB, Platform.DESKTOP_WIN})}
        assert {"react-web", "electron", "tauri", "flutter", "react-native"} <= ids
        assert "swift-ios" not in ids

    def test_get_known(self, registry):
        assert registry.get("flutter").display_name

    def test_get_unknown_raises_key_error(self, registry):
        with pytest.raises(KeyError, match="cobol-mainframe"):
            registry.get("cobol-mainframe")

    def test_contains(self, registry):
        assert "tauri" in registry
        assert "nope" not in registry

    def test_all_returns_copy(self, registry):
        listed = registry.all()
        listed.clear()
        assert len(registry) > 0


# ── from_entries integrity ────────────────────────────────────────────────────


class TestFromEntries:
    def test_valid_entries(self, make_entry):
        reg = CandidateRegistry.from_entries(
            [make_entry("b-stack"), make_entry("a-stack")], version="v1"
        )
        assert reg.stack_ids == ["a-stack", "b-stack"]
        assert reg.version == "v1"

    def test_empty_catalog_rejected(self):
        with pytest.raises(ConfigurationIntegrityError, match="no candidates"):
            CandidateRegistry.from_entries([])

    def test_missing_criterion(self, make_entry):
        entry = make_entry()
        del entry["attributes"]["ecosystem"]
        with pytest.raises(ConfigurationIntegrityError) as exc_info:
            CandidateRegistry.from_entries([entry])
        assert "missing criteria ['ecosystem']" in _problems(exc_info)

    def test_team_fit_is_not_a_static_criterion(self, make_entry):
        entry = make_entry()
        entry["attributes"]["team_fit"] = 5.0
        with pytest.raises(ConfigurationIntegrityError) as exc_info:
            CandidateRegistry.from_entries([entry])
        assert "unexpected criteria ['team_fit']" in _problems(exc_info)

    @pytest.mark.parametrize("value", [-1.0, 10.5, "fast", True])
    def test_bad_score(self, make_entry, value):
        entry = make_entry()
        entry["attributes"]["performance"] = value
        with pytest.raises(ConfigurationIntegrityError) as exc_info:
            CandidateRegistry.from_entries([entry])
        assert "attributes.performance" in _problems(exc_info)

    def test_empty_platforms(self, make_entry):
        with pytest.raises(ConfigurationIntegrityError, match="platform set is empty"):
            CandidateRegistry.from_entries([make_entry(platforms=())])

    def test_unknown_platform(self, make_entry):
        with pytest.raises(ConfigurationIntegrityError, match="unknown platform 'tv'"):
            CandidateRegistry.from_entries([make_entry(platforms=("web", "tv"))])

    def test_duplicate_stack_id(self, make_entry):
        with pytest.raises(ConfigurationIntegrityError, match="duplicate stack_id"):
            CandidateRegistry.from_entries([make_entry("x"), make_entry("x")])

    def test_missing_stack_id(self, make_entry):
        entry = make_entry()
        del entry["stack_id"]
        with pytest.raises(ConfigurationIntegrityError, match="stack_id is missing"):
            CandidateRegistry.from_entries([entry])

    def test_unknown_owner(self, make_entry):
        with pytest.raises(ConfigurationIntegrityError, match="unknown owner 'wizard'"):
            CandidateRegistry.from_entries([make_entry(owner="wizard")])

    def test_owner_must_declare_platforms(self, make_entry):
        entry = make_entry(platforms=("web", "ios"), owner="web_engineer")
        with pytest.raises(ConfigurationIntegrityError) as exc_info:
            CandidateRegistry.from_entries([entry])
        assert "does not declare platform(s) ['ios']" in _problems(exc_info)

    def test_skill_affinity_must_be_canonical(self, make_entry):
        entry = make_entry()
        del entry["skill_affinity"]["systems"]
        entry["skill_affinity"]["cobol"] = 3.0
        with pytest.raises(ConfigurationIntegrityError) as exc_info:
            CandidateRegistry.from_entries([entry])
        text = _problems(exc_info)
        assert "missing ['systems']" in text
        assert "unknown ['cobol']" in text

    def test_all_problems_reported_together(self, make_entry):
        bad_a = make_entry("a", owner="wizard")
        bad_b = make_entry("b", platforms=())
        with pytest.raises(ConfigurationIntegrityError) as exc_info:
            CandidateRegistry.from_entries([bad_a, bad_b])
        assert len(exc_info.value.problems) == 2

    @pytest.mark.parametrize(
        "field, value, expected",
        [
            ("attributes", "fast", "attributes must be a table, got str"),
            ("skill_affinity", [1, 2], "skill_affinity must be a table, got list"),
            ("platforms", 5, "platforms must be an array, got int"),
            ("platforms", "web", "platforms must be an array, got str"),
        ],
    )
    def test_wrongly_typed_field(self, make_entry, field, value, expected):
        entry = make_entry("typo")
        entry[field] = value
        with pytest.raises(ConfigurationIntegrityError) as exc_info:
            CandidateRegistry.from_entries([entry, make_entry("other", owner="wizard")])
        text = _problems(exc_info)
        assert expected in text
        assert "unknown owner 'wizard'" in text

    def test_non_table_entry(self, make_entry):
        with pytest.raises(ConfigurationIntegrityError, match="entry must be a table"):
            CandidateRegistry.from_entries([make_entry(), "flutter"])  # type: ignore[list-item]

    def test_candidates_are_immutable(self, make_entry):
        reg = CandidateRegistry.from_entries([make_entry("x")])
        cand = reg.get("x")
        with pytest.raises(ValidationError):
            cand.stack_id = "y"  # type: ignore[misc]
        with pytest.raises(TypeError):
            cand.attributes[Criterion.PERFORMANCE] = 0.0  # type: ignore[index]


# ── load_registry ─────────────────────────────────────────────────────────────


class TestLoadRegistry:
    def test_load_minimal_toml(self, tmp_path):
        path = tmp_path / "catalog.toml"
        path.write_text(MINIMAL_CATALOG_TOML, encoding="utf-8")
        reg = load_registry(path)
        assert reg.stack_ids == ["react-web"]
        assert reg.version == "test-1"
        assert reg.source == str(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationIntegrityError, match="not found"):
            load_registry(tmp_path / "missing.toml")

    def test_malformed_toml(self, tmp_path):
        path = tmp_path / "catalog.toml"
        path.write_text("[[candidates]\nstack_id = ", encoding="utf-8")
        with pytest.raises(ConfigurationIntegrityError, match="not valid TOML"):
            load_registry(path)

    def test_candidates_not_array(self, tmp_path):
        path = tmp_path / "catalog.toml"
        path.write_text('candidates = "none"\n', encoding="utf-8")
        with pytest.raises(ConfigurationIntegrityError, match="array of tables"):
            load_registry(path)

    def test_file_without_candidates(self, tmp_path):
        path = tmp_path / "catalog.toml"
        path.write_text('version = "empty"\n', encoding="utf-8")
        with pytest.raises(ConfigurationIntegrityError, match="no candidates"):
            load_registry(path)
