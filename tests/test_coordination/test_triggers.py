"""
Tests for stack_advisor/coordination/triggers.py.

What we test
------------
changed_fields():
  - Lists every differing profile field in declaration order.
  - Identical profiles produce no changed fields.

classify_change() / diff_profiles():
  - Added platform → platform_added (takes precedence over everything).
  - Higher performance tier → performance_upgraded.
  - Any skill rating change → skill_shifted.
  - Everything else (budget, scale, platform removal, performance
    downgrade) → other.
  - diff_profiles() returns None when nothing changed.
"""

from __future__ import annotations

from stack_advisor.coordination.triggers import changed_fields, diff_profiles
from stack_advisor.profile.builder import build_profile
from stack_advisor.taxonomy.requirement_taxonomy import ChangeKind


def _profile(**overrides):
    raw = {
        "platforms": ["web", "ios"],
        "scale": "mvp",
        "performance": "medium",
        "team_skills": {"web": 5},
    }
    raw.update(overrides)
    return build_profile(raw)


class TestChangedFields:
    def test_identical(self):
        assert changed_fields(_profile(), _profile()) == ()

    def test_lists_every_change_in_order(self):
        fields = changed_fields(
            _profile(),
            _profile(budget="tight", platforms=["web"], team_skills={"web": 6}),
        )
        assert fields == ("platforms", "team_skills", "budget")


class TestDiffProfiles:
    def test_no_change_is_none(self):
        assert diff_profiles(_profile(), _profile()) is None

    def test_platform_added(self):
        event = diff_profiles(_profile(), _profile(platforms=["web", "ios", "android"]))
        assert event.kind is ChangeKind.PLATFORM_ADDED
        assert event.changed_fields == ("platforms",)

    def test_platform_added_wins_over_others(self):
        event = diff_profiles(
            _profile(),
            _profile(
                platforms=["web", "ios", "android"],
                performance="extreme",
                team_skills={"web": 1},
            ),
        )
        assert event.kind is ChangeKind.PLATFORM_ADDED

    def test_performance_upgraded(self):
        event = diff_profiles(_profile(), _profile(performance="high", team_skills={"web": 9}))
        assert event.kind is ChangeKind.PERFORMANCE_UPGRADED

    def test_skill_shifted(self):
        event = diff_profiles(_profile(), _profile(team_skills={"web": 5, "mobile": 4}))
        assert event.kind is ChangeKind.SKILL_SHIFTED

    def test_performance_downgrade_is_other(self):
        event = diff_profiles(_profile(performance="high"), _profile(performance="basic"))
        assert event.kind is ChangeKind.OTHER

    def test_platform_removed_is_other(self):
        event = diff_profiles(_profile(), _profile(platforms=["web"]))
        assert event.kind is ChangeKind.OTHER

    def test_budget_change_is_other(self):
        event = diff_profiles(_profile(), _profile(budget="ample"))
        assert event.kind is ChangeKind.OTHER
        assert event.changed_fields == ("budget",)

    def test_event_carries_profiles(self):
        old, new = _profile(), _profile(scale="mature")
        event = diff_profiles(old, new)
        assert event.previous == old
        assert event.current == new
