"""Tests for requirement and owner taxonomy integrity — enums, ordering, coverage."""

from __future__ import annotations

import pytest

from stack_advisor.taxonomy.owner_taxonomy import (
    OWNER_CAPABILITIES,
    DeliveryOwner,
    capabilities_for,
)
from stack_advisor.taxonomy.requirement_taxonomy import (
    STATIC_CRITERIA,
    ChangeKind,
    Criterion,
    PerformanceTier,
    Platform,
    SkillDimension,
)


class TestRequirementEnums:
    @pytest.mark.parametrize("enum_cls", [Platform, SkillDimension, Criterion, ChangeKind])
    def test_values_are_lowercase_slugs(self, enum_cls):
        for member in enum_cls:
            assert " " not in member.value
            assert member.value == member.value.lower()

    def test_six_platforms(self):
        assert {p.value for p in Platform} == {
            "web", "ios", "android", "desktop-mac", "desktop-win", "desktop-linux",
        }

    def test_performance_rank_ordering(self):
        ranks = [t.rank for t in PerformanceTier]
        assert ranks == sorted(ranks)
        assert PerformanceTier.EXTREME.rank > PerformanceTier.HIGH.rank

    def test_team_fit_is_only_derived_criterion(self):
        assert set(Criterion) - STATIC_CRITERIA == {Criterion.TEAM_FIT}

    def test_str_is_value(self):
        assert str(Platform.DESKTOP_MAC) == "desktop-mac"
        assert f"{Criterion.TEAM_FIT}" == "team_fit"


class TestOwnerTaxonomy:
    def test_every_owner_has_capabilities(self):
        assert set(OWNER_CAPABILITIES) == set(DeliveryOwner)

    def test_capabilities_non_empty(self):
        for owner in DeliveryOwner:
            caps = capabilities_for(owner)
            assert caps.platforms
            assert caps.skills <= set(SkillDimension)

    def test_every_platform_has_an_owner(self):
        covered = set().union(*(c.platforms for c in OWNER_CAPABILITIES.values()))
        assert covered == set(Platform)
