"""RoleService: role grants under the single-manager rule.

By default a grant is only previewed. With ``save=True`` the new role set
is written back to the dataset and the roster is notified of the change,
which republishes the snapshot.
"""

from __future__ import annotations

from dutyctl.domain.models import RoleAssignment
from dutyctl.domain.roles import assign_role, primary_role
from dutyctl.services.base import BaseService
from dutyctl.services.result import ErrorCode, ServiceResult, failure
from dutyctl.services.telemetry import traced


class RoleService(BaseService):
    """Role queries over the snapshot's role assignments."""

    @traced
    def assign(
        self,
        principal_id: str,
        role_name: str,
        scope_unit_id: str | None = None,
        *,
        save: bool = False,
    ) -> ServiceResult:
        """Grant *role_name* to *principal_id* and report the resulting role set.

        Granting a manager role retires any manager role the principal
        already holds. Nothing is persisted unless *save* is true.
        """
        snapshot = self._snapshot()
        new = RoleAssignment(
            role_name=role_name,
            scope_unit_id=scope_unit_id,
            principal_id=principal_id,
        )
        if new.role is None:
            return failure(
                "assign_role",
                ErrorCode.UNKNOWN_ROLE,
                f"Unknown role '{role_name}'",
                role_name=role_name,
            )

        warnings: list[str] = []
        if scope_unit_id is not None and snapshot.hierarchy.get(scope_unit_id) is None:
            warnings.append(f"Scope unit '{scope_unit_id}' does not exist; role grants no access")

        change = assign_role(snapshot.roles_for(principal_id), new)
        if save and change.added:
            dataset = self._roster.dataset
            others = tuple(r for r in dataset.roles if r.principal_id != principal_id)
            self._roster.save(dataset.model_copy(update={"roles": others + tuple(change.roles)}))
            warnings.extend(self._roster.notify_change("role", principal_id, "update"))

        primary = primary_role(change.roles)
        return ServiceResult(
            ok=True,
            op="assign_role",
            data={
                "principal_id": principal_id,
                "added": change.added,
                "saved": save and change.added,
                "roles": [_dump(r) for r in change.roles],
                "retired": [_dump(r) for r in change.retired],
                "primary_role": primary.role_name if primary else None,
            },
            warnings=warnings,
        )


def _dump(role: RoleAssignment) -> dict[str, str | None]:
    return {"role_name": role.role_name, "scope_unit_id": role.scope_unit_id}
