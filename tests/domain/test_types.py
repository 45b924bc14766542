"""Tests for level, role, and filter-mode enums."""

import pytest

from dutyctl.domain.types import (
    HierarchyLevel,
    RoleName,
    child_level,
    level_depth,
    parse_level,
    parse_role,
)


class TestHierarchyLevel:
    def test_depths_are_consecutive(self) -> None:
        depths = [level_depth(level) for level in HierarchyLevel]
        assert depths == [0, 1, 2, 3]

    def test_child_level(self) -> None:
        assert child_level(HierarchyLevel.BATTALION) is HierarchyLevel.COMPANY
        assert child_level(HierarchyLevel.SECTION) is HierarchyLevel.SUBSECTION
        assert child_level(HierarchyLevel.SUBSECTION) is None

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("company", HierarchyLevel.COMPANY),
            ("  Section ", HierarchyLevel.SECTION),
            ("ruc", HierarchyLevel.BATTALION),
            ("unit", HierarchyLevel.BATTALION),
            ("platoon", HierarchyLevel.SECTION),
            ("work_section", HierarchyLevel.SUBSECTION),
        ],
    )
    def test_parse_level(self, raw: str, expected: HierarchyLevel) -> None:
        assert parse_level(raw) is expected

    def test_parse_level_passthrough(self) -> None:
        assert parse_level(HierarchyLevel.COMPANY) is HierarchyLevel.COMPANY

    def test_parse_level_rejects_unknown(self) -> None:
        with pytest.raises(ValueError):
            parse_level("division")


class TestRoleName:
    def test_values_are_kebab_case(self) -> None:
        assert RoleName.GLOBAL_ADMIN == "global-admin"
        assert RoleName.SUBSECTION_MANAGER == "subsection-manager"

    def test_parse_role(self) -> None:
        assert parse_role("Company-Manager") is RoleName.COMPANY_MANAGER

    def test_parse_role_unknown_is_none(self) -> None:
        assert parse_role("wizard") is None
