"""
TargetFinder: a demo Evolver that walks a cursor across a 2D grid.
Fitness rewards ending up close to the target point.
"""

import math
from typing import Dict, Tuple

from evolution.interfaces import Action, Evolver

START = (0, 0)
TARGET = (500, 500)

# Seed DNA used by the demo run
DEMO_DNA = (
    "aswawaawawswadswdwdwwswswssswsdddwddwdwdswawadwawawdasaawawdaaaaadwadad"
    "adsadwawadwswswwsawsaswawsawsaadwads"
)


def compute_distance(a: Tuple[int, int], b: Tuple[int, int]) -> int:
    """Euclidean distance rounded to the nearest integer."""
    return round(math.hypot(a[0] - b[0], a[1] - b[1]))


class TargetFinder(Evolver):
    """
    Moves one step per symbol: 'a' left, 'd' right, 'w' up, 's' down.

    Fitness is the distance from start to target minus the distance from the
    final position to target, so standing still scores 0.
    """

    def __init__(self, dna: str):
        self._x, self._y = START
        super().__init__(dna)

    @property
    def position(self) -> Tuple[int, int]:
        return (self._x, self._y)

    def define_behaviour(self) -> Dict[str, Action]:
        return {
            "a": lambda: self._move(-1, 0),
            "d": lambda: self._move(1, 0),
            "w": lambda: self._move(0, 1),
            "s": lambda: self._move(0, -1),
        }

    def reset(self) -> None:
        self._x, self._y = START

    def compute_fitness(self) -> int:
        return compute_distance(START, TARGET) - compute_distance(
            self.position, TARGET
        )

    def _move(self, dx: int, dy: int) -> None:
        self._x += dx
        self._y += dy
