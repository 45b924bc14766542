"""Bulk loader: reads a roster dataset from a YAML or JSON file.

The file holds four top-level lists (``units``, ``personnel``,
``duty_types``, ``roles``); any may be omitted. JSON is valid YAML, so a
single safe YAML parser handles both.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from dutyctl.domain.models import RosterDataset

DATASET_KEYS = ("units", "personnel", "duty_types", "roles")


class SnapshotError(Exception):
    """The dataset file is missing, unreadable, or fails validation."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


def _new_yaml() -> YAML:
    return YAML(typ="safe", pure=True)


def parse_dataset(raw: str, *, source: Path) -> RosterDataset:
    """Parse *raw* YAML/JSON text into a validated :class:`RosterDataset`."""
    try:
        data: Any = _new_yaml().load(raw)
    except YAMLError as exc:
        raise SnapshotError(source, f"invalid YAML/JSON: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise SnapshotError(source, "top level must be a mapping")

    unknown = sorted(set(data) - set(DATASET_KEYS))
    if unknown:
        raise SnapshotError(source, f"unknown top-level keys: {', '.join(unknown)}")

    try:
        return RosterDataset.model_validate({k: data.get(k) or [] for k in DATASET_KEYS})
    except ValidationError as exc:
        raise SnapshotError(source, f"invalid records: {exc}") from exc


def load_dataset(path: Path) -> RosterDataset:
    """Read and validate the dataset at *path*."""
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SnapshotError(path, f"cannot read file: {exc.strerror or exc}") from exc
    return parse_dataset(raw, source=path)


def dump_dataset(dataset: RosterDataset, path: Path) -> None:
    """Write *dataset* to *path* as YAML (used by fixtures and exports)."""
    payload = dataset.model_dump(mode="json", exclude_none=True)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as fh:
        _new_yaml().dump(payload, fh)
