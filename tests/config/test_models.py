"""Tests for configuration section models."""

import pytest
from pydantic import ValidationError

from dutyctl.config.models import FairnessConfig, RanksConfig, RosterConfig


class TestDefaults:
    def test_section_defaults(self) -> None:
        assert RosterConfig().snapshot == "roster.yaml"
        assert FairnessConfig().max_expected_std_dev == 5.0
        assert FairnessConfig().top_n == 5
        assert RanksConfig().vocabulary[0] == "E-1"

    def test_frozen(self) -> None:
        with pytest.raises(ValidationError):
            RosterConfig().snapshot = "x.yaml"  # type: ignore[misc]


class TestFairnessConfig:
    def test_max_expected_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            FairnessConfig(max_expected_std_dev=0)

    def test_thresholds_ordered(self) -> None:
        with pytest.raises(ValidationError, match="fair_threshold"):
            FairnessConfig(good_threshold=50, fair_threshold=70)

    def test_custom_thresholds(self) -> None:
        cfg = FairnessConfig(good_threshold=90, fair_threshold=75)
        assert cfg.good_threshold == 90


def test_custom_rank_vocabulary() -> None:
    cfg = RanksConfig(vocabulary=["PVT", "CPL", "SGT"])
    assert cfg.vocabulary == ("PVT", "CPL", "SGT")
