"""Shared pytest fixtures for dutyctl tests.

The sample roster used throughout:

    B   1st Bn (battalion)
    ├── C1  Alpha Co (company)
    │   ├── S1  1st Plt (section)
    │   │   └── SS1  1st Sqd (subsection)
    │   └── S2  2nd Plt (section)
    └── C2  Bravo Co (company)
        └── S3  3rd Plt (section)
"""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

from dutyctl.config.logging import clear_snapshot_context
from dutyctl.config.settings import DutySettings
from dutyctl.domain.models import (
    DutyType,
    MembershipFilter,
    OrgUnit,
    Personnel,
    RankRange,
    RoleAssignment,
    RosterDataset,
    SupernumeraryConfig,
)
from dutyctl.domain.types import FilterMode
from dutyctl.infrastructure.loader import dump_dataset
from dutyctl.infrastructure.roster import Roster
from dutyctl.services.telemetry import _current_span, disable_telemetry

ORG = "ORG1"


def unit(uid: str, name: str, level: str, parent: str | None = None, org: str = ORG) -> OrgUnit:
    return OrgUnit(
        id=uid,
        name=name,
        hierarchy_level=level,
        parent_id=parent,
        organization_id=org,
    )


def person(pid: str, unit_id: str, rank: str, score: float = 0.0, **kw: str) -> Personnel:
    return Personnel(id=pid, unit_id=unit_id, rank=rank, duty_score=score, **kw)


SAMPLE_UNITS = (
    unit("B", "1st Bn", "battalion"),
    unit("C1", "Alpha Co", "company", "B"),
    unit("C2", "Bravo Co", "company", "B"),
    unit("S1", "1st Plt", "section", "C1"),
    unit("S2", "2nd Plt", "section", "C1"),
    unit("S3", "3rd Plt", "section", "C2"),
    unit("SS1", "1st Sqd", "subsection", "S1"),
)

SAMPLE_PERSONNEL = (
    person("P1", "B", "O-3", 2, last_name="Adams"),
    person("P2", "C1", "E-5", 4, last_name="Baker"),
    person("P3", "S1", "E-4", 1),
    person("P4", "S2", "E-3", 1),
    person("P5", "SS1", "E-2", 3),
    person("P6", "C2", "E-6", 5),
    person("P7", "S3", "E-4", 0),
)

SAMPLE_DUTY_TYPES = (
    DutyType(
        id="guard",
        unit_id="C1",
        name="Guard",
        rank_range=RankRange(min="E-2", max="E-5"),
        supernumerary=SupernumeraryConfig(slots_per_period=2, period_days=15, standby_value=0.5),
    ),
    DutyType(
        id="staff",
        unit_id="B",
        name="Staff Duty",
        rank_filter=MembershipFilter(mode=FilterMode.INCLUDE, values=frozenset({"O-3", "E-6"})),
    ),
    DutyType(
        id="watch",
        unit_id="C2",
        name="Fire Watch",
        section_filter=MembershipFilter(mode=FilterMode.INCLUDE, values=frozenset({"S3"})),
    ),
    DutyType(id="retired", unit_id="B", name="Old Duty", is_active=False),
)

SAMPLE_ROLES = (
    RoleAssignment(role_name="company-manager", scope_unit_id="C1", principal_id="user-cm"),
    RoleAssignment(role_name="global-admin", principal_id="user-admin"),
    RoleAssignment(role_name="section-manager", scope_unit_id="S1", principal_id="user-multi"),
    RoleAssignment(role_name="standard-user", scope_unit_id="C2", principal_id="user-multi"),
)


def sample_dataset(**overrides: object) -> RosterDataset:
    """The sample roster, with any of its four record lists replaced."""
    fields: dict[str, object] = {
        "units": SAMPLE_UNITS,
        "personnel": SAMPLE_PERSONNEL,
        "duty_types": SAMPLE_DUTY_TYPES,
        "roles": SAMPLE_ROLES,
    }
    fields.update(overrides)
    return RosterDataset.model_validate(fields)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def dataset() -> RosterDataset:
    return sample_dataset()


@pytest.fixture
def roster_root(tmp_path: Path, dataset: RosterDataset) -> Path:
    """Temporary directory holding ``roster.yaml`` with the sample roster."""
    dump_dataset(dataset, tmp_path / "roster.yaml")
    return tmp_path


@pytest.fixture
def settings(roster_root: Path, monkeypatch: pytest.MonkeyPatch) -> DutySettings:
    monkeypatch.delenv("DUTYCTL_CONFIG", raising=False)
    return DutySettings.from_cli(roster_root=roster_root)


@pytest.fixture
def roster(settings: DutySettings) -> Roster:
    """File-backed roster over the sample dataset."""
    return Roster(settings)


@pytest.fixture
def memory_roster(dataset: RosterDataset, tmp_path: Path) -> Roster:
    """Detached roster over the sample dataset (no file I/O)."""
    return Roster(DutySettings.from_cli(roster_root=tmp_path), dataset)


@pytest.fixture
def _isolated_roster(roster_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp roster root so the CLI reads the sample roster.

    Use via ``@pytest.mark.usefixtures("_isolated_roster")`` on command test
    classes.
    """
    monkeypatch.delenv("DUTYCTL_CONFIG", raising=False)
    monkeypatch.chdir(roster_root)


@pytest.fixture(autouse=True)
def _reset_telemetry() -> Generator[None]:
    """The --verbose flag enables telemetry in a ContextVar; reset it between tests."""
    yield
    disable_telemetry()
    _current_span.set(None)
    clear_snapshot_context()
