"""Tests for roster record models."""

import pytest
from pydantic import ValidationError

from dutyctl.domain.models import OrgUnit, Personnel, RoleAssignment, SupernumeraryConfig
from dutyctl.domain.types import HierarchyLevel, RoleName


class TestOrgUnit:
    def test_legacy_level_name(self) -> None:
        unit = OrgUnit(id="X", name="X", hierarchy_level="platoon", organization_id="O")
        assert unit.hierarchy_level is HierarchyLevel.SECTION
        assert unit.is_root

    def test_unknown_level_rejected(self) -> None:
        with pytest.raises(ValidationError):
            OrgUnit(id="X", name="X", hierarchy_level="corps", organization_id="O")

    def test_frozen(self) -> None:
        unit = OrgUnit(id="X", name="X", hierarchy_level="company", organization_id="O")
        with pytest.raises(ValidationError):
            unit.name = "Y"  # type: ignore[misc]


class TestPersonnel:
    def test_display_name(self) -> None:
        p = Personnel(id="P1", unit_id="S1", rank="E-5", last_name="Smith")
        assert p.display_name == "E-5 SMITH"

    def test_display_name_falls_back_to_id(self) -> None:
        assert Personnel(id="P1", unit_id="S1", rank="E-5").display_name == "P1"

    def test_negative_score_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Personnel(id="P1", unit_id="S1", rank="E-5", duty_score=-1)

    @pytest.mark.parametrize("score", [float("inf"), float("nan")])
    def test_non_finite_score_rejected(self, score: float) -> None:
        with pytest.raises(ValidationError):
            Personnel(id="P1", unit_id="S1", rank="E-5", duty_score=score)

    def test_qualifications_default_empty(self) -> None:
        assert Personnel(id="P1", unit_id="S1", rank="E-5").qualifications == frozenset()


def test_supernumerary_requires_positive_period() -> None:
    with pytest.raises(ValidationError):
        SupernumeraryConfig(slots_per_period=1, period_days=0)


def test_unknown_role_name_survives() -> None:
    role = RoleAssignment(role_name="wizard", scope_unit_id="B")
    assert role.role is None
    assert RoleAssignment(role_name="org-admin").role is RoleName.ORG_ADMIN
