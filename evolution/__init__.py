"""
Evolution module for DNA Evolve.
Provides the Evolver contract and the generational evolution engine.
"""

from .engine import EvolutionEngine, EvolutionParameters, EvolutionResult
from .errors import (
    EvolutionError,
    EvolverInstantiationError,
    IncompatibleEvolverError,
    InvalidParameterError,
)
from .interfaces import Action, Evolver
from .selection import SelectionCache, select_rank, survival_distribution
from .target_finder import TargetFinder

__all__ = [
    "Action",
    "Evolver",
    "EvolutionEngine",
    "EvolutionParameters",
    "EvolutionResult",
    "EvolutionError",
    "EvolverInstantiationError",
    "IncompatibleEvolverError",
    "InvalidParameterError",
    "SelectionCache",
    "select_rank",
    "survival_distribution",
    "TargetFinder",
]
