"""Role tiers and the single-manager-role rule.

A principal holds at most one manager-tier role. Granting a new one
retires the old; :func:`assign_role` computes that outcome without
applying it, so callers decide when (and whether) to persist.
"""

from __future__ import annotations

from collections.abc import Sequence

from pydantic import BaseModel, Field

from dutyctl.domain.models import RoleAssignment
from dutyctl.domain.types import RoleName

# Highest authority first.
MANAGER_ROLES: tuple[RoleName, ...] = (
    RoleName.UNIT_MANAGER,
    RoleName.COMPANY_MANAGER,
    RoleName.SECTION_MANAGER,
    RoleName.SUBSECTION_MANAGER,
)

ADMIN_ROLES: tuple[RoleName, ...] = (RoleName.GLOBAL_ADMIN, RoleName.ORG_ADMIN)

# Lower number = broader authority.
ROLE_PRECEDENCE: dict[RoleName, int] = {
    RoleName.GLOBAL_ADMIN: 0,
    RoleName.ORG_ADMIN: 1,
    RoleName.UNIT_MANAGER: 2,
    RoleName.COMPANY_MANAGER: 3,
    RoleName.SECTION_MANAGER: 4,
    RoleName.SUBSECTION_MANAGER: 5,
    RoleName.STANDARD_USER: 6,
}


class RoleChange(BaseModel):
    """Outcome of granting a role: the resulting set and what it displaced."""

    model_config = {"frozen": True}

    roles: tuple[RoleAssignment, ...] = Field(default_factory=tuple)
    retired: tuple[RoleAssignment, ...] = Field(default_factory=tuple)
    added: bool = True


def is_manager_role(role: RoleName | None) -> bool:
    return role in MANAGER_ROLES


def is_admin_role(role: RoleName | None) -> bool:
    return role in ADMIN_ROLES


def _role_key(assignment: RoleAssignment) -> RoleName | str:
    # Unrecognised names fall back to their normalised spelling.
    return assignment.role or assignment.role_name.strip().lower()


def _same_assignment(a: RoleAssignment, b: RoleAssignment) -> bool:
    return _role_key(a) == _role_key(b) and a.scope_unit_id == b.scope_unit_id


def assign_role(current: Sequence[RoleAssignment], new: RoleAssignment) -> RoleChange:
    """Compute the roles a principal holds after being granted *new*.

    - Re-granting an identical assignment changes nothing.
    - A manager-tier role retires every manager-tier role already held.
    - Global admin is held at most once.
    """
    if any(_same_assignment(existing, new) for existing in current):
        return RoleChange(roles=tuple(current), added=False)

    new_role = new.role
    if new_role is RoleName.GLOBAL_ADMIN and any(
        r.role is RoleName.GLOBAL_ADMIN for r in current
    ):
        return RoleChange(roles=tuple(current), added=False)

    kept: list[RoleAssignment] = []
    retired: list[RoleAssignment] = []
    for existing in current:
        if is_manager_role(new_role) and is_manager_role(existing.role):
            retired.append(existing)
        else:
            kept.append(existing)
    kept.append(new)
    return RoleChange(roles=tuple(kept), retired=tuple(retired))


def manager_role(roles: Sequence[RoleAssignment]) -> RoleAssignment | None:
    """The manager-tier assignment among *roles*, if any (broadest first)."""
    managers = [r for r in roles if is_manager_role(r.role)]
    if not managers:
        return None
    return min(managers, key=lambda r: ROLE_PRECEDENCE[r.role])  # type: ignore[index]


def primary_role(roles: Sequence[RoleAssignment]) -> RoleAssignment | None:
    """The broadest recognised role in *roles* (used for display labels)."""
    known = [r for r in roles if r.role is not None]
    if not known:
        return None
    return min(known, key=lambda r: ROLE_PRECEDENCE[r.role])  # type: ignore[index]
