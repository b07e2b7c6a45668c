"""
Console reporting of evolved populations.
Read-only consumers of EvolutionEngine.current_generation.
"""

from typing import Optional, Sequence

from evolution.interfaces import Evolver

from .logging_config import EvolutionLogger, get_logger

SEPARATOR = "=" * 16


def format_generation(
    population: Sequence[Evolver], generation: Optional[int] = None
) -> str:
    """Render one 'DNA - fitness' line per candidate, in the given order."""
    lines = []
    if generation is not None:
        lines.append(f"Generation {generation}")
    lines.append(SEPARATOR)
    lines.extend(f"{e.dna} - {e.fitness}" for e in population)
    return "\n".join(lines) + "\n"


def report_generation(
    population: Sequence[Evolver],
    generation: Optional[int] = None,
    logger: Optional[EvolutionLogger] = None,
) -> None:
    """Emit every candidate's DNA and fitness, then a generation summary."""
    logger = logger or get_logger("dna_evolve.reporting")
    if not population:
        logger.warning(
            "Nothing to report: empty population", extra={"generation": generation}
        )
        return

    for rank, evolver in enumerate(population):
        logger.candidate_report(generation, rank, evolver.dna, evolver.fitness)

    fitnesses = [e.fitness for e in population]
    logger.generation_complete(
        generation,
        max(fitnesses),
        sum(fitnesses) / len(fitnesses),
    )
