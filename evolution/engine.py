"""
Evolution Engine implementation for DNA Evolve.
Owns a population of Evolvers and advances it generation by generation.
"""

import logging
import random
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Tuple, Type

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from evolution.errors import (
    EvolverInstantiationError,
    IncompatibleEvolverError,
    InvalidParameterError,
)
from evolution.interfaces import (
    DEFAULT_CROSSOVER_RATE,
    DEFAULT_DNA_MUTATION_RATE,
    DEFAULT_INDIVIDUAL_MUTATION_RATE,
    DEFAULT_SURVIVAL_CONSTANT,
    Evolver,
)
from evolution.selection import SelectionCache, select_rank

if TYPE_CHECKING:
    from dna_evolve.config import EvolutionSettings

logger = logging.getLogger(__name__)


class EvolutionParameters(BaseModel):
    """Probabilities driving one generational step. All values lie in [0, 1]."""

    model_config = ConfigDict(frozen=True)

    survival_constant: float = Field(
        default=DEFAULT_SURVIVAL_CONSTANT,
        ge=0.0,
        le=1.0,
        strict=True,
        description="Bias of the rank distribution towards the fittest",
    )
    individual_mutation_rate: float = Field(
        default=DEFAULT_INDIVIDUAL_MUTATION_RATE,
        ge=0.0,
        le=1.0,
        strict=True,
        description="Probability that an offspring is mutated at all",
    )
    dna_mutation_rate: float = Field(
        default=DEFAULT_DNA_MUTATION_RATE,
        ge=0.0,
        le=1.0,
        strict=True,
        description="Per-symbol mutation probability of a mutated offspring",
    )
    crossover_rate: float = Field(
        default=DEFAULT_CROSSOVER_RATE,
        ge=0.0,
        le=1.0,
        strict=True,
        description="Probability that a pair of offspring crosses over",
    )

    @classmethod
    def build(cls, **values: Any) -> "EvolutionParameters":
        """Validate values, raising InvalidParameterError instead of ValidationError."""
        try:
            return cls(**values)
        except ValidationError as e:
            errors = [
                {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
                for err in e.errors()
            ]
            raise InvalidParameterError(
                f"Invalid evolution parameters: {errors}", errors
            ) from e


@dataclass
class EvolutionResult:
    """Outcome of one evolve() call"""

    generations: int
    generation_count: int
    best_fitness: int
    mean_fitness: float
    duration_seconds: float
    stopped: bool = False
    timestamp: datetime = field(default_factory=datetime.now)


class EvolutionEngine:
    """
    Generational genetic algorithm over Evolver candidates.

    Each generation selects parents by rank from a geometric survival
    distribution, clones them, crosses pairs over, mutates, evaluates and
    sorts the offspring, then replaces the whole population with them.
    """

    def __init__(
        self,
        evolver_type: Type[Evolver],
        population_size: int,
        seed_dna: str,
        parameters: Optional[EvolutionParameters] = None,
        rng: Optional[random.Random] = None,
    ):
        if not (isinstance(evolver_type, type) and issubclass(evolver_type, Evolver)):
            raise IncompatibleEvolverError(evolver_type)
        if isinstance(population_size, bool) or not isinstance(population_size, int):
            raise InvalidParameterError(
                f"Population size must be an integer, got {population_size!r}"
            )
        if population_size < 1:
            raise InvalidParameterError(
                f"Population size must be >= 1, got {population_size}"
            )

        self.evolver_type = evolver_type
        self.population_size = population_size
        self.rng = rng or random.Random()

        self._parameters = parameters or EvolutionParameters()
        self._selection = SelectionCache()
        self._generation_count = 0
        self._stop_requested = False
        self.event_listeners: List[Tuple[str, Callable]] = []

        self._population = self._seed_population(seed_dna)

        logger.info(
            f"Created {evolver_type.__name__} population of {population_size}, "
            f"best fitness {self._population[0].fitness}"
        )

    @classmethod
    def from_config(
        cls,
        evolver_type: Type[Evolver],
        seed_dna: str,
        settings: "EvolutionSettings",
        rng: Optional[random.Random] = None,
    ) -> "EvolutionEngine":
        """Build an engine from loaded EvolutionSettings."""
        if rng is None and settings.seed is not None:
            rng = random.Random(settings.seed)

        parameters = EvolutionParameters.build(
            survival_constant=settings.survival_constant,
            individual_mutation_rate=settings.individual_mutation_rate,
            dna_mutation_rate=settings.dna_mutation_rate,
            crossover_rate=settings.crossover_rate,
        )
        return cls(
            evolver_type,
            settings.population_size,
            seed_dna,
            parameters=parameters,
            rng=rng,
        )

    @property
    def generation_count(self) -> int:
        """Generations evolved so far. The initial population is generation 0."""
        return self._generation_count

    @property
    def current_generation(self) -> Tuple[Evolver, ...]:
        """
        Current population, fittest first.

        Candidates are already evaluated. The tuple cannot be resized or
        reordered, but the candidates themselves stay mutable through
        mutate() and cross_over(); changing them may slow convergence.
        """
        return tuple(self._population)

    @property
    def best(self) -> Evolver:
        return self._population[0]

    @property
    def default_parameters(self) -> EvolutionParameters:
        return self._parameters

    def set_default_evolution_parameters(
        self,
        survival_constant: float,
        individual_mutation_rate: float,
        dna_mutation_rate: float,
        crossover_rate: float,
    ) -> None:
        """Validate and store the parameters used by evolve() when none are given."""
        parameters = EvolutionParameters.build(
            survival_constant=survival_constant,
            individual_mutation_rate=individual_mutation_rate,
            dna_mutation_rate=dna_mutation_rate,
            crossover_rate=crossover_rate,
        )
        if parameters.survival_constant != self._parameters.survival_constant:
            self._selection.invalidate()
        self._parameters = parameters

    def evolve(
        self,
        generations: int,
        survival_constant: Optional[float] = None,
        individual_mutation_rate: Optional[float] = None,
        dna_mutation_rate: Optional[float] = None,
        crossover_rate: Optional[float] = None,
    ) -> EvolutionResult:
        """
        Run the generational loop `generations` times.

        Parameters left as None use the stored defaults. Everything is
        validated before the population is touched.

        Args:
            generations: Number of generations to run, >= 0
            survival_constant: Bias of parent selection towards the fittest
            individual_mutation_rate: Probability an offspring is mutated
            dna_mutation_rate: Per-symbol mutation probability
            crossover_rate: Probability a pair of offspring crosses over

        Returns:
            EvolutionResult describing the run
        """
        if isinstance(generations, bool) or not isinstance(generations, int):
            raise InvalidParameterError(
                f"Generation count must be an integer, got {generations!r}"
            )
        if generations < 0:
            raise InvalidParameterError(
                f"Generation count must be >= 0, got {generations}"
            )

        overrides = {
            "survival_constant": survival_constant,
            "individual_mutation_rate": individual_mutation_rate,
            "dna_mutation_rate": dna_mutation_rate,
            "crossover_rate": crossover_rate,
        }
        values = self._parameters.model_dump()
        values.update({k: v for k, v in overrides.items() if v is not None})
        parameters = EvolutionParameters.build(**values)

        start_time = time.perf_counter()
        self._stop_requested = False
        completed = 0

        for _ in range(generations):
            if self._stop_requested:
                logger.info(
                    f"Stop requested, halting after {completed}/{generations} generations"
                )
                break
            self._advance(parameters)
            completed += 1

        fitnesses = [e.fitness for e in self._population]
        result = EvolutionResult(
            generations=completed,
            generation_count=self._generation_count,
            best_fitness=fitnesses[0],
            mean_fitness=sum(fitnesses) / len(fitnesses),
            duration_seconds=time.perf_counter() - start_time,
            stopped=completed < generations,
        )

        self._emit_event(
            "evolution_completed",
            {"generations": completed, "generation_count": self._generation_count},
        )
        return result

    def request_stop(self) -> None:
        """Stop the running evolve() call before its next generation starts."""
        self._stop_requested = True

    def add_event_listener(self, event_type: str, callback: Callable):
        """Add event listener for evolution events"""
        self.event_listeners.append((event_type, callback))

    def _seed_population(self, seed_dna: str) -> List[Evolver]:
        """Generation 0: fully mutated copies of the seed DNA"""
        population = []
        for _ in range(self.population_size):
            individual = self._create_evolver(seed_dna)
            individual.mutate(1.0, reevaluate=False, rng=self.rng)
            population.append(individual)

        self._simulate(population)
        return population

    def _advance(self, parameters: EvolutionParameters) -> None:
        """Breed, evaluate and install the next generation"""
        offspring = self._select(parameters.survival_constant)
        self._cross_over(offspring, parameters.crossover_rate)
        self._mutate(
            offspring,
            parameters.individual_mutation_rate,
            parameters.dna_mutation_rate,
        )
        self._simulate(offspring)

        self._population = offspring
        self._generation_count += 1

        logger.debug(
            f"Generation {self._generation_count} - "
            f"Best: {offspring[0].fitness}, Worst: {offspring[-1].fitness}"
        )
        self._emit_event(
            "generation_completed",
            {
                "generation": self._generation_count,
                "best_fitness": offspring[0].fitness,
                "population": tuple(offspring),
            },
        )

    def _select(self, survival_constant: float) -> List[Evolver]:
        """Clone parents drawn by rank from the survival distribution"""
        distribution = self._selection.get(len(self._population), survival_constant)
        return [
            self._create_evolver(
                self._population[select_rank(distribution, self.rng.random())].dna
            )
            for _ in range(self.population_size)
        ]

    def _cross_over(self, population: List[Evolver], crossover_rate: float) -> None:
        self.rng.shuffle(population)
        for i in range(0, len(population) - 1, 2):
            if self.rng.random() < crossover_rate:
                population[i].cross_over(
                    population[i + 1], reevaluate=False, rng=self.rng
                )

    def _mutate(
        self,
        population: List[Evolver],
        individual_mutation_rate: float,
        dna_mutation_rate: float,
    ) -> None:
        self.rng.shuffle(population)
        for individual in population:
            if self.rng.random() < individual_mutation_rate:
                individual.mutate(dna_mutation_rate, reevaluate=False, rng=self.rng)

    @staticmethod
    def _simulate(population: List[Evolver]) -> None:
        """Evaluate every candidate, then sort fittest first"""
        for individual in population:
            individual.simulate_life()
        population.sort(key=lambda e: e.fitness, reverse=True)

    def _create_evolver(self, dna: str) -> Evolver:
        try:
            return self.evolver_type(dna)
        except Exception as e:
            logger.error(f"Failed to create {self.evolver_type.__name__}: {e}")
            raise EvolverInstantiationError(self.evolver_type, dna) from e

    def _emit_event(self, event_type: str, data: Dict[str, Any]):
        """Emit event to all registered listeners"""
        for listener_type, callback in self.event_listeners:
            if listener_type == event_type:
                try:
                    callback(data)
                except Exception as e:
                    logger.error(f"Event listener error: {e}")
