"""
Chromosome and fitness function contracts.

A Chromosome represents one point of the problem space: everything that can
be altered by mutation or crossover. It carries no rating logic of its own;
its decision vector is produced by a FitnessFunction and stored on the
chromosome by evaluate().

The optimizer only ever talks to these two interfaces:
- Chromosome: generate, clone, create_new, mutate, crossover, evaluate
- FitnessFunction: evaluate(chromosome) -> decision vector
"""

from abc import ABC, abstractmethod
from typing import Callable, Optional, Sequence, Tuple


class FitnessFunction(ABC):
    """Base class for all fitness functions."""

    @abstractmethod
    def evaluate(self, chromosome: 'Chromosome') -> Sequence[float]:
        """
        Rate a chromosome.

        Args:
            chromosome: Chromosome to rate

        Returns:
            Decision vector, one score per objective. Higher is better.
        """


class CallableFitness(FitnessFunction):
    """Adapts a plain function ``func(chromosome) -> scores`` to FitnessFunction."""

    def __init__(self, func: Callable[['Chromosome'], Sequence[float]]):
        self.func = func

    def evaluate(self, chromosome: 'Chromosome') -> Sequence[float]:
        return self.func(chromosome)

    def __repr__(self) -> str:
        name = getattr(self.func, '__name__', repr(self.func))
        return f"CallableFitness({name})"


class Chromosome(ABC):
    """
    Base class for all chromosomes.

    Subclasses implement the problem-specific encoding. clone() must return a
    deep copy: anything altered by mutate() or crossover() may not be shared
    with the original.

    The decision vector is only valid after evaluate() has been called since
    the last mutate()/crossover(). The optimizer always evaluates offspring
    before inserting them into the population.
    """

    _decision_vector: Optional[Tuple[float, ...]] = None

    @abstractmethod
    def generate(self) -> None:
        """Fill this chromosome with fresh, possibly randomized, values."""

    @abstractmethod
    def clone(self) -> 'Chromosome':
        """Return a deep copy of this chromosome."""

    @abstractmethod
    def create_new(self) -> 'Chromosome':
        """Return an unrelated, freshly generated chromosome."""

    @abstractmethod
    def mutate(self) -> None:
        """
        Apply a small in-place perturbation.

        Changes should be as small as possible so the search space is
        explored finely.
        """

    @abstractmethod
    def crossover(self, partner: 'Chromosome') -> None:
        """Recombine in place with ``partner``. The partner is not modified."""

    def evaluate(self, fitness_function: FitnessFunction) -> None:
        """Recompute and store the decision vector."""
        self._decision_vector = tuple(
            float(score) for score in fitness_function.evaluate(self)
        )

    @property
    def decision_vector(self) -> Optional[Tuple[float, ...]]:
        """Per-objective scores from the last evaluation (None before)."""
        return self._decision_vector

    @property
    def is_evaluated(self) -> bool:
        return self._decision_vector is not None
