"""
Monitoring module for DNA Evolve.
Provides per-generation fitness history.
"""

from .history import GenerationHistory, GenerationSnapshot

__all__ = ["GenerationHistory", "GenerationSnapshot"]
