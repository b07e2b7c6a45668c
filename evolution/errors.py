"""
Error types for the evolution engine.
Argument and type errors subclass the matching built-in so callers can catch either.
"""

from typing import Any, Dict, List, Optional


class EvolutionError(Exception):
    """Base exception for evolution engine errors."""

    def __init__(
        self,
        message: str,
        code: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain error payload."""
        return {
            "error": {
                "code": self.code,
                "message": str(self),
                "details": self.details,
            }
        }


class InvalidParameterError(EvolutionError, ValueError):
    """Raised when a population size, generation count or rate is out of range."""

    def __init__(self, message: str, errors: Optional[List[Any]] = None):
        super().__init__(
            message,
            "INVALID_PARAMETER",
            {"errors": errors or []},
        )


class IncompatibleEvolverError(EvolutionError, TypeError):
    """Raised when a candidate type does not implement the Evolver contract."""

    def __init__(self, evolver_type: Any):
        name = getattr(evolver_type, "__name__", repr(evolver_type))
        super().__init__(
            f"Cannot evolve {name}: not an Evolver subclass",
            "INCOMPATIBLE_EVOLVER",
            {"evolver_type": name},
        )


class EvolverInstantiationError(EvolutionError, RuntimeError):
    """Raised when a candidate cannot be built from a DNA string."""

    def __init__(self, evolver_type: Any, dna: str):
        name = getattr(evolver_type, "__name__", repr(evolver_type))
        super().__init__(
            f"Failed to create {name} from DNA of length {len(dna)}",
            "INSTANTIATION_FAILED",
            {"evolver_type": name, "dna": dna},
        )
