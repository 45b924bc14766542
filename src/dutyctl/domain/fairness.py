"""Duty fairness: population statistics and a 0-100 fairness index.

``fairness_index = clamp(100 - std_dev / max_expected_std_dev * 100, 0, 100)``

Standard deviation is the population form (divide by N): the question
is how unequal *this* group is, not an estimate for a larger one.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence

from pydantic import BaseModel

from dutyctl.domain.models import Personnel

MAX_EXPECTED_STD_DEV = 5.0

GOOD_THRESHOLD = 80.0
FAIR_THRESHOLD = 60.0


class FairnessResult(BaseModel):
    """Descriptive statistics for one population's duty scores."""

    model_config = {"frozen": True}

    count: int
    mean: float
    std_dev: float
    fairness_index: float


class RankedPersonnel(BaseModel):
    """One row of a score ranking (position is 1-based)."""

    model_config = {"frozen": True}

    position: int
    personnel_id: str
    score: float


def compute_fairness(
    scores: Iterable[float],
    *,
    max_expected_std_dev: float = MAX_EXPECTED_STD_DEV,
) -> FairnessResult:
    """Mean, population standard deviation, and fairness index of *scores*.

    NaN and infinite scores are left out of the population. An empty
    population is even by definition: mean 0, std dev 0, index 100.
    """
    values = [v for v in map(float, scores) if math.isfinite(v)]
    if not values:
        return FairnessResult(count=0, mean=0.0, std_dev=0.0, fairness_index=100.0)

    # Work on values scaled into [-1, 1] so sums and squares cannot overflow.
    n = len(values)
    scale = max(abs(v) for v in values) or 1.0
    scaled = [v / scale for v in values]
    centre = math.fsum(scaled) / n
    spread = math.sqrt(math.fsum((x - centre) ** 2 for x in scaled) / n)
    mean = centre * scale
    std_dev = spread * scale
    return FairnessResult(
        count=len(values),
        mean=mean,
        std_dev=std_dev,
        fairness_index=fairness_index(std_dev, max_expected_std_dev=max_expected_std_dev),
    )


def fairness_index(std_dev: float, *, max_expected_std_dev: float = MAX_EXPECTED_STD_DEV) -> float:
    """Map a standard deviation onto 0-100, clamped at both ends."""
    if std_dev <= 0:
        return 100.0
    if max_expected_std_dev <= 0:
        return 0.0
    raw = 100.0 - (std_dev / max_expected_std_dev) * 100.0
    return max(0.0, min(100.0, raw))


def fairness_band(
    index: float,
    *,
    good: float = GOOD_THRESHOLD,
    fair: float = FAIR_THRESHOLD,
) -> str:
    """Classify an index as ``"good"``, ``"fair"`` or ``"poor"``."""
    if index >= good:
        return "good"
    if index >= fair:
        return "fair"
    return "poor"


def rank_by_score(people: Iterable[Personnel], *, descending: bool = True) -> list[RankedPersonnel]:
    """Rank *people* by duty score with personnel id as the tie-breaker.

    The order is total, so repeated calls over unchanged input assign
    identical positions. Ids always ascend within a tie, in either direction.
    """
    if descending:
        ordered = sorted(people, key=lambda p: (-p.duty_score, p.id))
    else:
        ordered = sorted(people, key=lambda p: (p.duty_score, p.id))
    return [
        RankedPersonnel(position=i, personnel_id=p.id, score=p.duty_score)
        for i, p in enumerate(ordered, start=1)
    ]


def highest(people: Sequence[Personnel], n: int) -> list[RankedPersonnel]:
    """The *n* people carrying the most duty load."""
    return rank_by_score(people, descending=True)[: max(0, n)]


def lowest(people: Sequence[Personnel], n: int) -> list[RankedPersonnel]:
    """The *n* people carrying the least duty load."""
    return rank_by_score(people, descending=False)[: max(0, n)]
