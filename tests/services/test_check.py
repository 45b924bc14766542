"""Tests for CheckService: hierarchy, personnel, duty type, and role checks."""

from __future__ import annotations

from pathlib import Path

import pytest

from dutyctl.config.settings import DutySettings
from dutyctl.domain.models import DutyType, MembershipFilter, RoleAssignment
from dutyctl.domain.types import FilterMode
from dutyctl.infrastructure.roster import Roster
from dutyctl.services.check import CheckService
from tests.conftest import (
    SAMPLE_DUTY_TYPES,
    SAMPLE_PERSONNEL,
    SAMPLE_ROLES,
    SAMPLE_UNITS,
    person,
    sample_dataset,
    unit,
)


@pytest.fixture
def broken_roster(tmp_path: Path) -> Roster:
    dataset = sample_dataset(
        units=(*SAMPLE_UNITS, unit("S9", "Skip Plt", "section", "B")),
        personnel=(
            *SAMPLE_PERSONNEL,
            person("P9", "S9", "E-3"),
            person("P10", "GONE", "E-3"),
            person("P11", "S1", "CIV"),
        ),
        duty_types=(
            *SAMPLE_DUTY_TYPES,
            DutyType(
                id="bad",
                unit_id="ZZ",
                rank_filter=MembershipFilter(mode=FilterMode.INCLUDE, values=frozenset()),
            ),
        ),
        roles=(
            *SAMPLE_ROLES,
            RoleAssignment(role_name="wizard", scope_unit_id="B", principal_id="user-w"),
            RoleAssignment(role_name="company-manager", principal_id="user-null"),
            RoleAssignment(role_name="section-manager", scope_unit_id="ZZ", principal_id="user-zz"),
            RoleAssignment(role_name="company-manager", scope_unit_id="C2", principal_id="user-cm"),
        ),
    )
    return Roster(DutySettings.from_cli(roster_root=tmp_path), dataset)


def _kinds(issues: list[dict]) -> set[tuple[str, str, str]]:  # type: ignore[type-arg]
    return {(i["category"], i["kind"], i["id"]) for i in issues}


class TestCheckClean:
    def test_sample_has_no_issues(self, memory_roster: Roster) -> None:
        result = CheckService(memory_roster).check()
        assert result.ok
        assert result.data["count"] == 0
        assert result.data["issues"] == []


class TestCheckProblems:
    def test_every_category_reported(self, broken_roster: Roster) -> None:
        issues = CheckService(broken_roster).check().data["issues"]
        assert _kinds(issues) >= {
            ("hierarchy", "level_skip", "S9"),
            ("personnel", "excluded_unit", "P9"),
            ("personnel", "unknown_unit", "P10"),
            ("personnel", "unknown_rank", "P11"),
            ("duty_types", "unknown_unit", "bad"),
            ("duty_types", "empty_filter_values", "bad"),
            ("roles", "unknown_role", "user-w"),
            ("roles", "null_scope", "user-null"),
            ("roles", "unknown_unit", "user-zz"),
            ("roles", "multiple_manager_roles", "user-cm"),
        }

    def test_min_severity_error(self, broken_roster: Roster) -> None:
        result = CheckService(broken_roster).check(min_severity="error")
        assert all(i["severity"] == "error" for i in result.data["issues"])
        assert result.data["errors"] == result.data["count"]
        assert ("personnel", "unknown_unit", "P10") in _kinds(result.data["issues"])

    def test_excluded_descendant_warning(self, tmp_path: Path) -> None:
        units = (
            *SAMPLE_UNITS,
            unit("S9", "Skip Plt", "section", "B"),
            unit("SS9", "Skip Sqd", "subsection", "S9"),
        )
        roster = Roster(DutySettings.from_cli(roster_root=tmp_path), sample_dataset(units=units))
        issues = CheckService(roster).check().data["issues"]
        assert ("hierarchy", "excluded_descendant", "SS9") in _kinds(issues)


class TestValidateHierarchy:
    def test_clean(self, memory_roster: Roster) -> None:
        result = CheckService(memory_roster).validate_hierarchy()
        assert result.op == "validate_hierarchy"
        assert result.data["count"] == 0

    def test_errors_listed(self, broken_roster: Roster) -> None:
        result = CheckService(broken_roster).validate_hierarchy()
        [error] = result.data["errors"]
        assert error["kind"] == "level_skip"
        assert error["unit_id"] == "S9"
