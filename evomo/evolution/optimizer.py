"""
Main evolutionary optimization loop.

Each epoch:
1. Grow the population by mutation and crossover (parallel)
2. Select survivors with the configured strategy (parallel)
3. Optionally top the survivors up to the target population size

The fitness function and the selection strategy are pluggable, which makes
the same loop usable for single-criterion and Pareto optimization.
"""

from dataclasses import dataclass, asdict
from typing import Any, Callable, Dict, Optional
import logging
import time

from ..errors import InvalidArgumentError
from .chromosome import Chromosome, FitnessFunction
from .history import EpochStats, OptimizationHistory
from .parallel import WorkerPool, chunk_ranges, partition, spawn_generators
from .population import Population, create_initial_population
from .selection import SelectionStrategy

logger = logging.getLogger(__name__)


def _check_rate(name: str, value: float) -> float:
    if not 0.0 <= value <= 1.0:
        raise InvalidArgumentError(f"{name} must be within [0, 1], got {value}")
    return float(value)


@dataclass
class OptimizerConfig:
    """Run-time tunables of the optimizer."""
    # Evolution rates
    mutation_rate: float = 0.08
    crossover_rate: float = 0.0

    # Parallelization
    parallelize: bool = False
    n_workers: Optional[int] = None   # None -> cpu_count()

    # Reproducibility
    seed: Optional[int] = None

    def __post_init__(self):
        _check_rate('mutation_rate', self.mutation_rate)
        _check_rate('crossover_rate', self.crossover_rate)
        if self.n_workers is not None and self.n_workers < 1:
            raise InvalidArgumentError(f"n_workers must be positive, got {self.n_workers}")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'OptimizerConfig':
        return cls(**data)


class Optimizer:
    """
    Single- and multi-criterion evolutionary optimizer.

    The optimizer owns the live population for its whole lifetime. Offspring
    are inserted concurrently under the population's lock; selection builds a
    new population that replaces the old one at the end of every epoch.
    """

    def __init__(
        self,
        ancestor: Chromosome,
        population_size: int,
        fitness_function: FitnessFunction,
        selection: SelectionStrategy,
        config: Optional[OptimizerConfig] = None,
    ):
        """
        Initialize the optimizer and seed its population.

        Args:
            ancestor: Template chromosome; becomes the first member
            population_size: Target size of the population
            fitness_function: Rates every chromosome
            selection: Strategy used in the selection phase
            config: Rates, parallelization and seed (defaults if omitted)

        Raises:
            InvalidArgumentError: If ancestor, fitness_function or selection
                is missing, or a rate is outside [0, 1]
        """
        if ancestor is None:
            raise InvalidArgumentError("ancestor is required")
        if fitness_function is None:
            raise InvalidArgumentError("fitness_function is required")
        if selection is None:
            raise InvalidArgumentError("selection is required")

        config = config or OptimizerConfig()

        self._population_size = population_size
        self.fitness_function = fitness_function
        self.selection = selection
        self.mutation_rate = config.mutation_rate
        self.crossover_rate = config.crossover_rate
        self.parallelize = config.parallelize

        self._pool = WorkerPool(config.n_workers)
        self.reseed(config.seed)

        self.history = OptimizationHistory()
        self.epoch = 0

        self._population = create_initial_population(
            ancestor, population_size, fitness_function,
        )
        logger.info(
            "Optimizer ready: population=%d, selection=%r, workers=%d",
            len(self._population), selection, self._pool.n_workers,
        )

    # ------------------------------------------------------------------
    # Configuration and observable state
    # ------------------------------------------------------------------

    @property
    def population_size(self) -> int:
        """Target size of the population (the live size is len(population))."""
        return self._population_size

    @property
    def population(self) -> Population:
        return self._population

    @property
    def best_chromosome(self) -> Optional[Chromosome]:
        """
        First member of the population, or None if it is empty.

        Only SingleCriterionSelection orders the population best first, and
        only when selection runs sequentially; parallel ranges are sorted
        separately and appended in completion order.
        """
        if len(self._population) > 0:
            return self._population[0]
        return None

    @property
    def mutation_rate(self) -> float:
        return self._mutation_rate

    @mutation_rate.setter
    def mutation_rate(self, value: float) -> None:
        self._mutation_rate = _check_rate('mutation_rate', value)

    @property
    def crossover_rate(self) -> float:
        return self._crossover_rate

    @crossover_rate.setter
    def crossover_rate(self, value: float) -> None:
        self._crossover_rate = _check_rate('crossover_rate', value)

    @property
    def n_workers(self) -> int:
        return self._pool.n_workers

    def reseed(self, seed: Optional[int] = None) -> None:
        """Re-initialize all random generators (fresh entropy if seed is None)."""
        self._rng, self._lane_rngs = spawn_generators(seed, self._pool.n_workers)

    # ------------------------------------------------------------------
    # Evolution loop
    # ------------------------------------------------------------------

    def run_epoch(self, enforce_size: bool = True) -> EpochStats:
        """
        Run a single epoch (mutate, crossover, select).

        Args:
            enforce_size: If True, selection output below the target size is
                topped up by random draws from the pre-selection population

        Returns:
            EpochStats for this epoch
        """
        start_time = time.time()
        self.epoch += 1
        size_before = len(self._population)

        iterations = 0
        while True:
            old_size = len(self._population)
            self._mutate()
            self._crossover()
            iterations += 1
            delta = (len(self._population) - old_size) - 1
            if not (len(self._population) < self.population_size and delta > 0):
                break

        size_after_growth = len(self._population)
        survivors = self._select(enforce_size)

        stats = self.history.record_epoch(
            epoch=self.epoch,
            population=self._population,
            size_before=size_before,
            size_after_growth=size_after_growth,
            growth_iterations=iterations,
            survivors=survivors,
            elapsed_seconds=time.time() - start_time,
        )
        logger.info(
            "Epoch %d: %d -> %d (grown %d, survivors %d) in %.3fs",
            self.epoch, size_before, stats.population_size,
            stats.offspring_added, survivors, stats.elapsed_seconds,
        )
        return stats

    def run(
        self,
        n_epochs: int,
        enforce_size: bool = True,
        progress_callback: Optional[Callable[[int, int, EpochStats], None]] = None,
    ) -> OptimizationHistory:
        """
        Run several epochs.

        Args:
            n_epochs: Number of epochs to run
            enforce_size: Passed to every run_epoch() call
            progress_callback: Optional callback(epoch, n_epochs, stats)

        Returns:
            The optimizer's history
        """
        for i in range(n_epochs):
            stats = self.run_epoch(enforce_size)
            if progress_callback:
                progress_callback(i + 1, n_epochs, stats)
        return self.history

    def _select(self, enforce_size: bool) -> int:
        """Replace the population with the selection output. Returns the raw survivor count."""
        old_population = self._population
        new_population = Population()
        n_items = len(old_population)

        if self._pool.should_fan_out(self.parallelize, n_items):
            ranges = chunk_ranges(n_items, self._pool.n_workers)
            logger.debug("Selecting over %d ranges of %d chromosomes", len(ranges), n_items)
            self._pool.run(
                self.selection.select,
                [(old_population, new_population, start, length) for start, length in ranges],
            )
        else:
            self.selection.select(old_population, new_population, 0, n_items)

        survivors = len(new_population)

        # Top up with replacement; an over-full selection is left as is
        if enforce_size and n_items > 0:
            while len(new_population) < self.population_size:
                index = int(self._rng.integers(n_items))
                new_population.append(old_population[index])

        self._population = new_population
        return survivors

    def _mutate(self) -> None:
        mutations = max(1, int(len(self._population) * self.mutation_rate))
        self._fan_out(mutations, self._do_mutate)

    def _crossover(self) -> None:
        if self.crossover_rate == 0 or self.population_size <= 2:
            return
        crossovers = int(len(self._population) * self.crossover_rate)
        if crossovers < 1:
            return
        self._fan_out(crossovers, self._do_crossover)

    def _fan_out(self, units: int, work: Callable[[int, Any], int]) -> None:
        """Run ``units`` of ``work`` on the pool, or inline when not worth it."""
        if self._pool.should_fan_out(self.parallelize, units):
            counts = partition(units, self._pool.n_workers)
            logger.debug("%s: %d units over %s", work.__name__, units, counts)
            self._pool.run(work, list(zip(counts, self._lane_rngs)))
        else:
            work(units, self._rng)

    # ------------------------------------------------------------------
    # Units of work (run on worker lanes)
    # ------------------------------------------------------------------

    def _do_mutate(self, mutations: int, rng) -> int:
        added = 0
        for _ in range(mutations):
            upper = min(max(self.population_size, 1), len(self._population))
            if upper < 1:
                logger.warning("Population is empty, nothing to mutate")
                break
            index = int(rng.integers(upper))
            chromosome = self._population[index].clone()
            chromosome.mutate()
            chromosome.evaluate(self.fitness_function)
            if self._population.add_unique(chromosome):
                added += 1
        return added

    def _do_crossover(self, crossovers: int, rng) -> int:
        added = 0
        for _ in range(crossovers):
            size = len(self._population)
            if size < 2:
                break
            first, second = rng.choice(size, size=2, replace=False)
            chromosome = self._population[int(first)].clone()
            chromosome.crossover(self._population[int(second)])
            chromosome.evaluate(self.fitness_function)
            if self._population.add_unique(chromosome):
                added += 1
        return added

    # ------------------------------------------------------------------
    # Resources
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Shut down the worker pool."""
        self._pool.close()

    def __enter__(self) -> 'Optimizer':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"Optimizer(epoch={self.epoch}, population={len(self._population)}/"
            f"{self.population_size}, selection={self.selection!r})"
        )
