"""Closed enumerations for hierarchy levels, roles, and filter modes.

Adding a level or a role is a change to these enums, not a new string
sprinkled through the codebase.
"""

from __future__ import annotations

from enum import StrEnum


class HierarchyLevel(StrEnum):
    """Organizational levels, highest first."""

    BATTALION = "battalion"
    COMPANY = "company"
    SECTION = "section"
    SUBSECTION = "subsection"


class RoleName(StrEnum):
    """Role names recognised by the scope resolver."""

    GLOBAL_ADMIN = "global-admin"
    ORG_ADMIN = "org-admin"
    UNIT_MANAGER = "unit-manager"
    COMPANY_MANAGER = "company-manager"
    SECTION_MANAGER = "section-manager"
    SUBSECTION_MANAGER = "subsection-manager"
    STANDARD_USER = "standard-user"


class FilterMode(StrEnum):
    """How a membership filter treats its value set."""

    INCLUDE = "include"
    EXCLUDE = "exclude"


# --- Level ordering ---

LEVEL_ORDER: dict[HierarchyLevel, int] = {
    HierarchyLevel.BATTALION: 0,
    HierarchyLevel.COMPANY: 1,
    HierarchyLevel.SECTION: 2,
    HierarchyLevel.SUBSECTION: 3,
}

# Names found in older datasets.
LEVEL_ALIASES: dict[str, HierarchyLevel] = {
    "ruc": HierarchyLevel.BATTALION,
    "unit": HierarchyLevel.BATTALION,
    "platoon": HierarchyLevel.SECTION,
    "work_section": HierarchyLevel.SUBSECTION,
    "work-section": HierarchyLevel.SUBSECTION,
}


def parse_level(value: str | HierarchyLevel) -> HierarchyLevel:
    """Return the :class:`HierarchyLevel` for *value*, accepting legacy aliases.

    Raises ``ValueError`` for names outside the closed set.

    Examples:
        >>> parse_level("company")
        <HierarchyLevel.COMPANY: 'company'>
        >>> parse_level("work_section")
        <HierarchyLevel.SUBSECTION: 'subsection'>
    """
    if isinstance(value, HierarchyLevel):
        return value
    key = value.strip().lower()
    if key in LEVEL_ALIASES:
        return LEVEL_ALIASES[key]
    return HierarchyLevel(key)


def level_depth(level: HierarchyLevel) -> int:
    """Zero-based depth of *level* (battalion is 0)."""
    return LEVEL_ORDER[level]


def child_level(level: HierarchyLevel) -> HierarchyLevel | None:
    """The level directly below *level*, or None for the lowest level."""
    depth = LEVEL_ORDER[level] + 1
    for candidate, order in LEVEL_ORDER.items():
        if order == depth:
            return candidate
    return None


def parse_role(value: str) -> RoleName | None:
    """Return the :class:`RoleName` for *value*, or None if unrecognised."""
    try:
        return RoleName(value.strip().lower())
    except ValueError:
        return None
