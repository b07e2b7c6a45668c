"""
Generation history for DNA Evolve.
Records fitness statistics per generation and detects convergence.
"""

import logging
import statistics
from collections import deque
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any, Deque, Dict, List, Optional, Sequence

if TYPE_CHECKING:
    from evolution.engine import EvolutionEngine
    from evolution.interfaces import Evolver

logger = logging.getLogger(__name__)


@dataclass
class GenerationSnapshot:
    """Fitness statistics of one generation."""

    generation: int
    best: int
    mean: float
    worst: int
    population_size: int
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["timestamp"] = self.timestamp.isoformat()
        return data


class GenerationHistory:
    """
    Collects a GenerationSnapshot for every generation an engine completes.

    Features:
    - Bounded in-memory storage
    - Attaches to an engine through its generation_completed event
    - Convergence detection over a sliding window of best fitness
    """

    def __init__(self, max_snapshots: int = 10000):
        self.max_snapshots = max_snapshots
        self._snapshots: Deque[GenerationSnapshot] = deque(maxlen=max_snapshots)

    def attach(self, engine: "EvolutionEngine") -> None:
        """Record the engine's current population and every later generation."""
        self.record(engine.generation_count, engine.current_generation)
        engine.add_event_listener("generation_completed", self._on_generation)

    def record(
        self, generation: int, population: Sequence["Evolver"]
    ) -> GenerationSnapshot:
        if not population:
            raise ValueError("Cannot record an empty population")

        fitnesses = [e.fitness for e in population]
        snapshot = GenerationSnapshot(
            generation=generation,
            best=max(fitnesses),
            mean=statistics.mean(fitnesses),
            worst=min(fitnesses),
            population_size=len(fitnesses),
        )
        self._snapshots.append(snapshot)
        return snapshot

    @property
    def snapshots(self) -> List[GenerationSnapshot]:
        return list(self._snapshots)

    @property
    def latest(self) -> Optional[GenerationSnapshot]:
        return self._snapshots[-1] if self._snapshots else None

    def improvement(self) -> int:
        """Best fitness gained between the first and latest snapshot."""
        if not self._snapshots:
            return 0
        return self._snapshots[-1].best - self._snapshots[0].best

    def is_converged(self, window: int = 10, threshold: float = 0.0) -> bool:
        """
        True when best fitness moved by at most `threshold` over the last
        `window` generations.
        """
        if window < 2 or len(self._snapshots) < window:
            return False

        recent = [s.best for s in list(self._snapshots)[-window:]]
        return max(recent) - min(recent) <= threshold

    def summary(self) -> Dict[str, Any]:
        if not self._snapshots:
            return {"generations": 0}

        first, last = self._snapshots[0], self._snapshots[-1]
        return {
            "generations": len(self._snapshots),
            "first_generation": first.generation,
            "last_generation": last.generation,
            "initial_best": first.best,
            "final_best": last.best,
            "peak_best": max(s.best for s in self._snapshots),
            "final_mean": last.mean,
            "improvement": last.best - first.best,
        }

    def clear(self) -> None:
        self._snapshots.clear()

    def _on_generation(self, data: Dict[str, Any]) -> None:
        snapshot = self.record(data["generation"], data["population"])
        logger.debug(
            f"Recorded generation {snapshot.generation}: "
            f"best={snapshot.best}, mean={snapshot.mean:.2f}"
        )
