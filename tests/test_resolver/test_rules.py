"""
Tests for stack_advisor/resolver/rules.py.

What we test
------------
single_platform_exclusivity:
  - Applies only to one platform at extreme performance.
  - Keeps only candidates tagged exclusive-native for that platform.

multi_platform_breadth:
  - Applies at three or more platforms.
  - Keeps only candidates covering every requested platform.

tight_budget_shared_codebase:
  - Applies to a tight budget with two or more platforms.

performance_floor_rule():
  - Keeps candidates whose performance meets the tier floor (inclusive).
  - Tiers without a floor are not affected.
  - Accepts string tier keys.

ConstraintRule.apply():
  - Never returns a candidate not in its input, and preserves input order.
  - Returns the input unchanged when the predicate does not hold.

build_default_rules():
  - Fixed ordering of the four built-in rules.
"""

from __future__ import annotations

from stack_advisor.models.candidate import exclusive_native_tag
from stack_advisor.profile.builder import build_profile
from stack_advisor.resolver.rules import (
    MULTI_PLATFORM_BREADTH,
    SINGLE_PLATFORM_EXCLUSIVITY,
    TIGHT_BUDGET_SHARED_CODEBASE,
    ConstraintRule,
    build_default_rules,
    performance_floor_rule,
)
from stack_advisor.taxonomy.owner_taxonomy import DeliveryOwner
from stack_advisor.taxonomy.requirement_taxonomy import (
    STATIC_CRITERIA,
    Criterion,
    PerformanceTier,
    Platform,
)

ALL_MOBILE_WEB = (Platform.WEB, Platform.IOS, Platform.ANDROID)


def _profile(platforms, performance="medium", budget="medium"):
    return build_profile(
        {
            "platforms": list(platforms),
            "scale": "mvp",
            "performance": performance,
            "budget": budget,
        }
    )


def _ids(candidates) -> list[str]:
    return [c.stack_id for c in candidates]


# ── single_platform_exclusivity ───────────────────────────────────────────────


class TestSinglePlatformExclusivity:
    def test_applies_only_to_single_platform_extreme(self):
        assert SINGLE_PLATFORM_EXCLUSIVITY.applies(_profile(["ios"], "extreme"))
        assert not SINGLE_PLATFORM_EXCLUSIVITY.applies(_profile(["ios"], "high"))
        assert not SINGLE_PLATFORM_EXCLUSIVITY.applies(_profile(["ios", "android"], "extreme"))

    def test_keeps_exclusive_native_only(self, make_candidate):
        native = make_candidate(
            "swift-ios",
            platforms=(Platform.IOS,),
            owner=DeliveryOwner.IOS_ENGINEER,
            tags=(exclusive_native_tag(Platform.IOS),),
        )
        cross = make_candidate("flutter", platforms=ALL_MOBILE_WEB)
        other_native = make_candidate(
            "kotlin-android",
            platforms=(Platform.ANDROID,),
            owner=DeliveryOwner.ANDROID_ENGINEER,
            tags=(exclusive_native_tag(Platform.ANDROID),),
        )
        kept = SINGLE_PLATFORM_EXCLUSIVITY.apply(
            _profile(["ios"], "extreme"), [cross, other_native, native]
        )
        assert _ids(kept) == ["swift-ios"]


# ── multi_platform_breadth / tight budget ─────────────────────────────────────


class TestCoverageRules:
    def test_breadth_threshold(self):
        assert MULTI_PLATFORM_BREADTH.applies(_profile(["web", "ios", "android"]))
        assert not MULTI_PLATFORM_BREADTH.applies(_profile(["web", "ios"]))

    def test_breadth_keeps_full_coverage(self, make_candidate):
        full = make_candidate("full", platforms=ALL_MOBILE_WEB)
        partial = make_candidate("partial", platforms=(Platform.WEB, Platform.IOS))
        kept = MULTI_PLATFORM_BREADTH.apply(
            _profile(["web", "ios", "android"]), [partial, full]
        )
        assert _ids(kept) == ["full"]

    def test_tight_budget_applies_from_two_platforms(self):
        assert TIGHT_BUDGET_SHARED_CODEBASE.applies(_profile(["web", "ios"], budget="tight"))
        assert not TIGHT_BUDGET_SHARED_CODEBASE.applies(_profile(["web"], budget="tight"))
        assert not TIGHT_BUDGET_SHARED_CODEBASE.applies(_profile(["web", "ios"]))

    def test_tight_budget_removes_single_platform_stacks(self, make_candidate):
        shared = make_candidate("shared", platforms=ALL_MOBILE_WEB)
        web_only = make_candidate("web-only", platforms=(Platform.WEB,))
        kept = TIGHT_BUDGET_SHARED_CODEBASE.apply(
            _profile(["web", "ios"], budget="tight"), [shared, web_only]
        )
        assert _ids(kept) == ["shared"]


# ── performance floor ─────────────────────────────────────────────────────────


def _with_performance(make_candidate, stack_id, performance):
    attributes = {c: 5.0 for c in STATIC_CRITERIA}
    attributes[Criterion.PERFORMANCE] = performance
    return make_candidate(stack_id, attributes=attributes)


class TestPerformanceFloor:
    def test_floor_is_inclusive(self, make_candidate):
        rule = performance_floor_rule({PerformanceTier.HIGH: 6.0})
        at_floor = _with_performance(make_candidate, "at", 6.0)
        below = _with_performance(make_candidate, "below", 5.9)
        kept = rule.apply(_profile(["web"], "high"), [at_floor, below])
        assert _ids(kept) == ["at"]

    def test_tier_without_floor_unaffected(self, make_candidate):
        rule = performance_floor_rule({PerformanceTier.HIGH: 6.0})
        slow = _with_performance(make_candidate, "slow", 1.0)
        assert not rule.applies(_profile(["web"], "medium"))
        assert _ids(rule.apply(_profile(["web"], "medium"), [slow])) == ["slow"]

    def test_string_keys_accepted(self):
        rule = performance_floor_rule({"extreme": 8})
        assert rule.applies(_profile(["web"], "extreme"))
        assert "extreme>=8" in rule.description


# ── ConstraintRule contract ───────────────────────────────────────────────────


class TestConstraintRule:
    def test_apply_never_adds_candidates(self, make_candidate):
        a, b = make_candidate("a"), make_candidate("b")
        intruder = make_candidate("intruder")
        greedy = ConstraintRule(
            name="greedy",
            description="returns more than it was given",
            predicate=lambda p: True,
            transform=lambda p, cands: [intruder, *cands],
        )
        assert _ids(greedy.apply(_profile(["web"]), [a, b])) == ["a", "b"]

    def test_apply_preserves_input_order(self, make_candidate):
        a, b, c = make_candidate("a"), make_candidate("b"), make_candidate("c")
        reverse = ConstraintRule(
            name="reverse",
            description="reorders",
            predicate=lambda p: True,
            transform=lambda p, cands: list(reversed(cands))[:2],
        )
        assert _ids(reverse.apply(_profile(["web"]), [a, b, c])) == ["b", "c"]

    def test_predicate_false_returns_input(self, make_candidate):
        a = make_candidate("a")
        never = ConstraintRule("never", "", lambda p: False, lambda p, cands: [])
        assert _ids(never.apply(_profile(["web"]), [a])) == ["a"]


class TestDefaultRules:
    def test_ordering(self):
        rules = build_default_rules({PerformanceTier.HIGH: 6.0})
        assert [r.name for r in rules] == [
            "single_platform_exclusivity",
            "multi_platform_breadth",
            "tight_budget_shared_codebase",
            "performance_floor",
        ]
