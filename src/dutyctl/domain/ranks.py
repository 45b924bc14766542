"""Rank vocabulary and ordering.

The default vocabulary is the DoD pay-grade ladder: enlisted, then
warrant, then commissioned. A vocabulary is any ordered sequence of rank
strings, lowest first; callers may pass their own (see ``[ranks]`` config).
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

DEFAULT_RANKS: tuple[str, ...] = (
    "E-1", "E-2", "E-3", "E-4", "E-5", "E-6", "E-7", "E-8", "E-9",
    "W-1", "W-2", "W-3", "W-4", "W-5",
    "O-1", "O-2", "O-3", "O-4", "O-5", "O-6", "O-7", "O-8", "O-9", "O-10",
)  # fmt: skip


def rank_index(rank: str, vocabulary: Sequence[str] = DEFAULT_RANKS) -> int | None:
    """Position of *rank* in *vocabulary* (0 = lowest), or None if unknown."""
    try:
        return vocabulary.index(rank)
    except ValueError:
        return None


def is_known_rank(rank: str, vocabulary: Sequence[str] = DEFAULT_RANKS) -> bool:
    return rank in vocabulary


def rank_in_range(
    rank: str,
    minimum: str | None,
    maximum: str | None,
    vocabulary: Sequence[str] = DEFAULT_RANKS,
) -> bool:
    """Whether *rank* lies within ``[minimum, maximum]`` (inclusive).

    Open bounds are None. A rank outside the vocabulary never passes a
    bounded range; an unknown bound makes the range match nothing.
    """
    if minimum is None and maximum is None:
        return True
    position = rank_index(rank, vocabulary)
    if position is None:
        return False
    if minimum is not None:
        low = rank_index(minimum, vocabulary)
        if low is None or position < low:
            return False
    if maximum is not None:
        high = rank_index(maximum, vocabulary)
        if high is None or position > high:
            return False
    return True


def sort_ranks(ranks: Iterable[str], vocabulary: Sequence[str] = DEFAULT_RANKS) -> list[str]:
    """Sort *ranks* lowest first; unknown ranks go last, alphabetically."""
    size = len(vocabulary)

    def _key(rank: str) -> tuple[int, str]:
        position = rank_index(rank, vocabulary)
        return (size if position is None else position, rank)

    return sorted(ranks, key=_key)
