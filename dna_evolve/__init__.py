"""
DNA Evolve - genetic algorithm engine for DNA-encoded candidates.
"""

__version__ = "0.1.0"

from evolution import (
    EvolutionEngine,
    EvolutionParameters,
    EvolutionResult,
    Evolver,
    TargetFinder,
)
from monitoring import GenerationHistory

from .config import Config, EvolutionSettings, get_config

__all__ = [
    "Config",
    "EvolutionEngine",
    "EvolutionParameters",
    "EvolutionResult",
    "EvolutionSettings",
    "Evolver",
    "GenerationHistory",
    "TargetFinder",
    "get_config",
]
