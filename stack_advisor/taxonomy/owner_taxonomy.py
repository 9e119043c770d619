"""
Delivery-owner taxonomy.

A delivery owner is the team role accountable for building a recommended
stack.  Owners form a closed enumeration; each declares the platforms it can
deliver and the skill dimensions it draws on.  Handoffs between owners are
described with data (``HandoffNotice``), never by swapping behaviour at
runtime.

The ``OWNER_CAPABILITIES`` dict is the canonical integrity contract:
  - Every ``DeliveryOwner`` must have an entry.
  - A catalog candidate may only list platforms its owner declares.

This module imports only from ``stack_advisor.taxonomy``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from stack_advisor.taxonomy.requirement_taxonomy import Platform, SkillDimension


class DeliveryOwner(StrEnum):
    """Role responsible for delivering a stack."""

    WEB_ENGINEER = "web_engineer"
    """Browser-first product engineer (React / Next.js)."""

    REACT_NATIVE_ENGINEER = "react_native_engineer"
    """Cross-platform mobile engineer working in the JavaScript ecosystem."""

    FLUTTER_ENGINEER = "flutter_engineer"
    """Cross-platform engineer working in Dart / Flutter."""

    IOS_ENGINEER = "ios_engineer"
    """Native Apple-platform engineer (Swift)."""

    ANDROID_ENGINEER = "android_engineer"
    """Native Android engineer (Kotlin)."""

    DESKTOP_ENGINEER = "desktop_engineer"
    """Desktop application engineer (Electron / Tauri)."""


@dataclass(frozen=True)
class OwnerCapabilities:
    """Declared delivery capabilities of one owner.

    Attributes:
        platforms: Platforms this owner can ship.
        skills:    Skill dimensions this owner's work relies on.
    """

    platforms: frozenset[Platform]
    skills:    frozenset[SkillDimension]


_DESKTOP = frozenset({Platform.DESKTOP_MAC, Platform.DESKTOP_WIN, Platform.DESKTOP_LINUX})

OWNER_CAPABILITIES: dict[DeliveryOwner, OwnerCapabilities] = {
    DeliveryOwner.WEB_ENGINEER: OwnerCapabilities(
        platforms=frozenset({Platform.WEB}),
        skills=frozenset({SkillDimension.WEB}),
    ),
    DeliveryOwner.REACT_NATIVE_ENGINEER: OwnerCapabilities(
        platforms=frozenset({Platform.WEB, Platform.IOS, Platform.ANDROID}),
        skills=frozenset({SkillDimension.WEB, SkillDimension.MOBILE}),
    ),
    DeliveryOwner.FLUTTER_ENGINEER: OwnerCapabilities(
        platforms=frozenset({Platform.WEB, Platform.IOS, Platform.ANDROID}) | _DESKTOP,
        skills=frozenset({SkillDimension.MOBILE, SkillDimension.DESKTOP}),
    ),
    DeliveryOwner.IOS_ENGINEER: OwnerCapabilities(
        platforms=frozenset({Platform.IOS, Platform.DESKTOP_MAC}),
        skills=frozenset({SkillDimension.IOS_NATIVE, SkillDimension.MOBILE}),
    ),
    DeliveryOwner.ANDROID_ENGINEER: OwnerCapabilities(
        platforms=frozenset({Platform.ANDROID}),
        skills=frozenset({SkillDimension.ANDROID_NATIVE, SkillDimension.MOBILE}),
    ),
    DeliveryOwner.DESKTOP_ENGINEER: OwnerCapabilities(
        platforms=_DESKTOP,
        skills=frozenset({SkillDimension.DESKTOP, SkillDimension.WEB, SkillDimension.SYSTEMS}),
    ),
}


def capabilities_for(owner: DeliveryOwner) -> OwnerCapabilities:
    """Return the declared capabilities of ``owner``."""
    return OWNER_CAPABILITIES[owner]
