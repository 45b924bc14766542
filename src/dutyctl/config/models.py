"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, dutyctl.toml only contains overrides.
A fresh roster needs only ``[roster] snapshot``.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

from dutyctl.domain.fairness import FAIR_THRESHOLD, GOOD_THRESHOLD, MAX_EXPECTED_STD_DEV
from dutyctl.domain.ranks import DEFAULT_RANKS


class RosterConfig(BaseModel):
    """[roster] section."""

    model_config = {"frozen": True}

    snapshot: str = "roster.yaml"


class FairnessConfig(BaseModel):
    """[fairness] section."""

    model_config = {"frozen": True}

    max_expected_std_dev: float = Field(default=MAX_EXPECTED_STD_DEV, gt=0)
    top_n: int = Field(default=5, ge=0)
    good_threshold: float = GOOD_THRESHOLD
    fair_threshold: float = FAIR_THRESHOLD

    @model_validator(mode="after")
    def _thresholds_ordered(self) -> FairnessConfig:
        if self.fair_threshold > self.good_threshold:
            msg = "fair_threshold must not exceed good_threshold"
            raise ValueError(msg)
        return self


class RanksConfig(BaseModel):
    """[ranks] section. Ordered lowest first."""

    model_config = {"frozen": True}

    vocabulary: tuple[str, ...] = DEFAULT_RANKS

