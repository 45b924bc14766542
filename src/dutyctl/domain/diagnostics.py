"""Diagnostic records returned alongside best-effort results.

INVARIANT: Diagnostics are data, never raised. Every query in the core
returns a well-defined answer plus an optional list of these.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel


class HierarchyErrorKind(StrEnum):
    """Structural problems detected while indexing the unit forest."""

    CYCLE = "cycle"
    ORPHANED_PARENT = "orphaned_parent"
    LEVEL_SKIP = "level_skip"
    DUPLICATE_ID = "duplicate_id"
    ORGANIZATION_MISMATCH = "organization_mismatch"


class ScopeErrorKind(StrEnum):
    UNKNOWN_ROLE = "unknown_role"


class ConfigurationErrorKind(StrEnum):
    EMPTY_FILTER_VALUES = "empty_filter_values"
    INVALID_RANK_RANGE = "invalid_rank_range"


class HierarchyError(BaseModel):
    """A unit excluded from traversal, and why."""

    model_config = {"frozen": True}

    kind: HierarchyErrorKind
    unit_id: str
    parent_id: str | None = None
    message: str


class ScopeError(BaseModel):
    """A role assignment that resolved to the empty scope."""

    model_config = {"frozen": True}

    kind: ScopeErrorKind
    role_name: str
    message: str


class ConfigurationError(BaseModel):
    """A duty type whose filter configuration is suspicious but usable."""

    model_config = {"frozen": True}

    kind: ConfigurationErrorKind
    duty_type_id: str
    setting: str
    message: str
