"""
Population management for the optimizer.

Handles:
- Initial population creation (ancestor + regenerated clones)
- A lock-owning container shared by concurrent workers

Only insertion is synchronised. Workers may read by index while others
append; reads never see a partially inserted chromosome.
"""

import logging
import threading
from collections.abc import Sequence
from typing import Iterable, Iterator, List, Optional

from .chromosome import Chromosome, FitnessFunction

logger = logging.getLogger(__name__)


class Population(Sequence):
    """
    Ordered collection of chromosomes with atomic check-then-insert.

    Duplicate detection uses ``in`` (``__eq__``, identity unless the
    chromosome class defines structural equality). It is best effort, not an
    invariant: extend() appends without checking.
    """

    def __init__(self, chromosomes: Optional[Iterable[Chromosome]] = None):
        self._items: List[Chromosome] = list(chromosomes or [])
        self.lock = threading.Lock()

    def __getitem__(self, index):
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Chromosome]:
        return iter(self._items)

    def __contains__(self, chromosome) -> bool:
        return chromosome in self._items

    def __repr__(self) -> str:
        return f"Population(size={len(self._items)})"

    def append(self, chromosome: Chromosome) -> None:
        with self.lock:
            self._items.append(chromosome)

    def add_unique(self, chromosome: Chromosome) -> bool:
        """Append ``chromosome`` unless an equal one is present. Returns True if added."""
        with self.lock:
            if chromosome in self._items:
                return False
            self._items.append(chromosome)
            return True

    def extend(self, chromosomes: Iterable[Chromosome]) -> List[Chromosome]:
        """Append all of ``chromosomes`` as one atomic step."""
        batch = list(chromosomes)
        with self.lock:
            self._items.extend(batch)
        return batch

    def extend_unique(self, chromosomes: Iterable[Chromosome]) -> List[Chromosome]:
        """Append those of ``chromosomes`` not already present. Returns the added ones."""
        added = []
        with self.lock:
            for chromosome in chromosomes:
                if chromosome not in self._items:
                    self._items.append(chromosome)
                    added.append(chromosome)
        return added


def create_initial_population(
    ancestor: Chromosome,
    population_size: int,
    fitness_function: FitnessFunction,
) -> Population:
    """
    Seed a population from an ancestor.

    The ancestor is evaluated and inserted first. The rest of the population
    is filled with clones of the ancestor, each regenerated and evaluated.

    Args:
        ancestor: Template chromosome (becomes member 0)
        population_size: Target size; values below 1 still yield the ancestor
        fitness_function: Used to evaluate every member

    Returns:
        Population of max(1, population_size) evaluated chromosomes
    """
    ancestor.evaluate(fitness_function)
    members = [ancestor]

    while len(members) < population_size:
        chromosome = ancestor.clone()
        chromosome.generate()
        chromosome.evaluate(fitness_function)
        members.append(chromosome)

    logger.debug("Seeded population with %d chromosomes", len(members))
    return Population(members)
