"""DNA Evolve: Core Interface Definitions"""

import logging
import random
from abc import ABC, abstractmethod
from types import MappingProxyType
from typing import Callable, Dict, Mapping, Optional, Tuple

from evolution.operators import choose_splice_point, mutate_dna, splice_dna

logger = logging.getLogger(__name__)

# Type Aliases

Action = Callable[[], None]


# Core Interfaces


class Evolver(ABC):
    """
    One candidate solution: a DNA string, a symbol to action table and a fitness.

    Subclasses supply three hooks:
    - define_behaviour(): the symbol -> action table, built once per instance
    - reset(): return simulation state to its starting point
    - compute_fitness(): score the simulation state, higher is better

    The engine builds candidates with a single positional argument, the DNA.
    Fitness is only meaningful after simulate_life() has run since the last
    DNA change.
    """

    def __init__(self, dna: str):
        self._dna = dna
        self._fitness = 0
        self._actions: Mapping[str, Action] = MappingProxyType(
            dict(self.define_behaviour())
        )
        self._alphabet: Tuple[str, ...] = tuple(sorted(self._actions))

    @property
    def dna(self) -> str:
        """Current DNA. Changes after mutate() and cross_over()."""
        return self._dna

    @property
    def fitness(self) -> int:
        """Last computed fitness, 0 until the first evaluation."""
        return self._fitness

    @property
    def alphabet(self) -> Tuple[str, ...]:
        """Symbols with a registered action."""
        return self._alphabet

    def simulate_life(self) -> None:
        """Replay the DNA from a clean state and recompute fitness."""
        self.reset()
        for position, symbol in enumerate(self._dna):
            action = self._actions.get(symbol)
            if action is None:
                logger.warning(
                    f"No action for symbol '{symbol}' at position {position}, skipping"
                )
                continue
            action()
        self._fitness = self.compute_fitness()

    def mutate(
        self,
        dna_mutation_rate: float,
        reevaluate: bool = True,
        rng: Optional[random.Random] = None,
    ) -> None:
        """
        Mutate each DNA symbol to a different one with probability dna_mutation_rate.

        Args:
            dna_mutation_rate: Per-symbol mutation probability in [0, 1]
            reevaluate: Re-run simulate_life() afterwards. Pass False when
                batching several operations and evaluate once at the end.
            rng: Randomness provider
        """
        self._dna = mutate_dna(self._dna, self._alphabet, dna_mutation_rate, rng)
        if reevaluate:
            self.simulate_life()

    def cross_over(
        self,
        other: "Evolver",
        reevaluate: bool = True,
        rng: Optional[random.Random] = None,
    ) -> None:
        """
        Single-point crossover with a peer of the same type and DNA length.

        Both candidates keep their own prefix and take the other's suffix.
        Mismatched peers are ignored.
        """
        if type(other) is not type(self):
            logger.debug(
                f"Skipping crossover between {type(self).__name__} "
                f"and {type(other).__name__}"
            )
            return
        if len(other.dna) != len(self._dna):
            logger.debug(
                f"Skipping crossover between DNA lengths "
                f"{len(self._dna)} and {len(other.dna)}"
            )
            return

        point = choose_splice_point(len(self._dna), rng)
        self._dna, other._dna = splice_dna(self._dna, other._dna, point)

        if reevaluate:
            self.simulate_life()
            other.simulate_life()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(dna={self._dna!r}, fitness={self._fitness})"

    # Hooks

    @abstractmethod
    def define_behaviour(self) -> Dict[str, Action]:
        pass

    @abstractmethod
    def reset(self) -> None:
        pass

    @abstractmethod
    def compute_fitness(self) -> int:
        pass


# Constants (Defaults)

DEFAULT_POPULATION_SIZE = 10
DEFAULT_SURVIVAL_CONSTANT = 0.5
DEFAULT_INDIVIDUAL_MUTATION_RATE = 0.5
DEFAULT_DNA_MUTATION_RATE = 0.02
DEFAULT_CROSSOVER_RATE = 1.0
