"""
Rank-based survival distribution for parent selection.
A truncated geometric distribution over fitness ranks, index 0 being the best.
"""

import logging
from bisect import bisect_right
from typing import List, Optional, Sequence, Tuple

from evolution.errors import InvalidParameterError

logger = logging.getLogger(__name__)

# Allowed drift of the final cumulative value from 1.0
DISTRIBUTION_TOLERANCE = 0.01


def survival_distribution(size: int, survival_constant: float) -> List[float]:
    """
    Cumulative selection probabilities for `size` ranks.

    Rank i (below the last) carries (1 - c)^i * c; the last rank absorbs the
    remaining tail (1 - c)^(size - 1), so the final value is 1.0. A survival
    constant of 1 always selects rank 0.

    Args:
        size: Number of ranks, at least 1
        survival_constant: c in [0, 1]

    Returns:
        Non-decreasing list of cumulative probabilities of length `size`
    """
    if size < 1:
        raise InvalidParameterError(f"Distribution size must be >= 1, got {size}")
    if not 0.0 <= survival_constant <= 1.0:
        raise InvalidParameterError(
            f"Survival constant must be in [0, 1], got {survival_constant}"
        )

    survival = 1.0 - survival_constant
    cumulative = []
    total = 0.0
    for rank in range(size - 1):
        total += survival**rank * survival_constant
        cumulative.append(total)
    cumulative.append(total + survival ** (size - 1))

    return cumulative


def select_rank(distribution: Sequence[float], roll: float) -> int:
    """Smallest rank whose cumulative probability exceeds `roll`."""
    return min(bisect_right(distribution, roll), len(distribution) - 1)


class SelectionCache:
    """Keeps the last computed distribution keyed by (size, survival constant)."""

    def __init__(self):
        self._key: Optional[Tuple[int, float]] = None
        self._distribution: List[float] = []

    def get(self, size: int, survival_constant: float) -> List[float]:
        key = (size, survival_constant)
        if key != self._key:
            self._distribution = survival_distribution(size, survival_constant)
            self._key = key
            logger.debug(
                f"Computed survival distribution for {size} ranks, c={survival_constant}"
            )
        return self._distribution

    def invalidate(self) -> None:
        self._key = None
        self._distribution = []

    @property
    def is_cached(self) -> bool:
        return self._key is not None
