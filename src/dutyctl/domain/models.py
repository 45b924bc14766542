"""Roster records: org units, personnel, duty types, role assignments.

All records are frozen pydantic models. They are loaded in bulk by the
infrastructure layer and never mutated in place; a change produces a new
dataset and a new published snapshot.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from dutyctl.domain.types import FilterMode, HierarchyLevel, RoleName, parse_level, parse_role


class OrgUnit(BaseModel):
    """A node in one organization's unit tree."""

    model_config = {"frozen": True}

    id: str
    name: str
    hierarchy_level: HierarchyLevel
    parent_id: str | None = None
    organization_id: str
    code: str | None = None

    @field_validator("hierarchy_level", mode="before")
    @classmethod
    def _coerce_level(cls, value: object) -> object:
        if isinstance(value, str):
            return parse_level(value)
        return value

    @property
    def is_root(self) -> bool:
        return self.parent_id is None


class Personnel(BaseModel):
    """A service member assigned to exactly one unit."""

    model_config = {"frozen": True}

    id: str
    unit_id: str
    rank: str
    duty_score: float = Field(default=0.0, ge=0.0, allow_inf_nan=False)
    qualifications: frozenset[str] = Field(default_factory=frozenset)
    first_name: str | None = None
    last_name: str | None = None
    service_id: str | None = None

    @property
    def display_name(self) -> str:
        """Rank and last name, e.g. ``"E-5 SMITH"``; falls back to the id."""
        if self.last_name:
            return f"{self.rank} {self.last_name.upper()}"
        return self.id


class MembershipFilter(BaseModel):
    """Include/exclude filter over a set of values (ranks or unit ids)."""

    model_config = {"frozen": True}

    mode: FilterMode
    values: frozenset[str] = Field(default_factory=frozenset)


class RankRange(BaseModel):
    """Inclusive rank bounds; either end may be open."""

    model_config = {"frozen": True}

    min: str | None = None
    max: str | None = None


class SupernumeraryConfig(BaseModel):
    """Standby slot allotment for a duty type."""

    model_config = {"frozen": True}

    slots_per_period: int = Field(ge=1)
    period_days: int = Field(ge=1)
    standby_value: float = Field(default=0.0, ge=0.0, allow_inf_nan=False)


class DutyType(BaseModel):
    """A recurring duty defined for a unit and drawn from its subtree."""

    model_config = {"frozen": True}

    id: str
    unit_id: str
    name: str = ""
    slots_needed: int = Field(default=1, ge=0)
    is_active: bool = True
    rank_filter: MembershipFilter | None = None
    section_filter: MembershipFilter | None = None
    rank_range: RankRange | None = None
    required_qualifications: frozenset[str] = Field(default_factory=frozenset)
    supernumerary: SupernumeraryConfig | None = None


class RoleAssignment(BaseModel):
    """A role held by a principal, scoped to a unit (or global).

    ``role_name`` is kept as given so that unrecognised names survive
    loading and can be reported; use :attr:`role` for the parsed value.
    """

    model_config = {"frozen": True}

    role_name: str
    scope_unit_id: str | None = None
    principal_id: str | None = None

    @property
    def role(self) -> RoleName | None:
        return parse_role(self.role_name)


class RosterDataset(BaseModel):
    """Everything the bulk loader supplies in one consistent batch."""

    model_config = {"frozen": True}

    units: tuple[OrgUnit, ...] = Field(default_factory=tuple)
    personnel: tuple[Personnel, ...] = Field(default_factory=tuple)
    duty_types: tuple[DutyType, ...] = Field(default_factory=tuple)
    roles: tuple[RoleAssignment, ...] = Field(default_factory=tuple)
