"""
Selection strategies.

A strategy looks at one contiguous index range of the old population and
contributes its survivors to a shared new population. The optimizer may run
several calls concurrently over disjoint ranges of the same old population,
so:
- the old population is only read
- filtering runs without locks
- appending to the new population happens under its lock

Strategies:
- SingleCriterionSelection: rank by the first objective
- MultiCriterionSelection: keep the Pareto non-dominated candidates
- EliteSelection: maintain a capped archive of non-dominated candidates
  across epochs
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Dict, List, Sequence

from ..errors import InvalidArgumentError, InvalidInputError
from .chromosome import Chromosome
from .dominance import evaluated_vector, is_dominated_in_population, non_dominated
from .population import Population

logger = logging.getLogger(__name__)


def _all_positive(chromosome: Chromosome) -> bool:
    return all(score > 0 for score in evaluated_vector(chromosome))


class SelectionStrategy(ABC):
    """Base class for all selection strategies."""

    @abstractmethod
    def select(
        self,
        old_population: Sequence[Chromosome],
        new_population: Population,
        start: int,
        length: int,
    ) -> List[Chromosome]:
        """
        Select survivors from ``old_population[start:start + length]``.

        Args:
            old_population: Population before selection (not modified)
            new_population: Shared accumulator receiving the survivors
            start: First index of the assigned range
            length: Number of indices in the range

        Returns:
            Chromosomes this call appended to ``new_population``
        """

    @staticmethod
    def candidate_range(
        old_population: Sequence[Chromosome],
        start: int,
        length: int,
    ) -> List[Chromosome]:
        """Members in the assigned range, clamped to the population bound."""
        start = max(start, 0)
        end = min(start + max(length, 0), len(old_population))
        return [old_population[i] for i in range(start, end)]

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class SingleCriterionSelection(SelectionStrategy):
    """
    Selection for single-objective problems.

    Candidates are ranked by their first objective, best first. A first
    objective of exactly zero marks an unusable candidate: it and everything
    ranked below it are dropped.
    """

    def select(self, old_population, new_population, start, length):
        candidates = self.candidate_range(old_population, start, length)
        ranked = sorted(
            candidates,
            key=lambda c: evaluated_vector(c)[0],
            reverse=True,
        )

        survivors = []
        for chromosome in ranked:
            if chromosome.decision_vector[0] == 0:
                break
            survivors.append(chromosome)

        return new_population.extend_unique(survivors)


class MultiCriterionSelection(SelectionStrategy):
    """
    Basic selection for multi-objective (Pareto) problems.

    Keeps candidates with strictly positive scores that no member of the
    whole old population dominates.
    """

    def select(self, old_population, new_population, start, length):
        batch: List[Chromosome] = []
        for chromosome in self.candidate_range(old_population, start, length):
            if (
                _all_positive(chromosome)
                and chromosome not in batch
                and not is_dominated_in_population(chromosome, old_population)
            ):
                batch.append(chromosome)

        return new_population.extend(batch)


class EliteSelection(SelectionStrategy):
    """
    Elitist selection backed by an archive of non-dominated chromosomes.

    The archive survives across epochs so good solutions found earlier are
    never lost to later selection rounds. It is keyed by the second
    objective; when two candidates share a key the one archived first is
    kept. Once the archive exceeds ``max_size`` the lowest keys are evicted.
    """

    def __init__(self, max_size: int):
        if max_size < 1:
            raise InvalidArgumentError(f"Elite size must be at least 1, got {max_size}")
        self.max_size = max_size
        self._archive: Dict[float, Chromosome] = {}
        self._archive_lock = threading.Lock()

    @property
    def elite(self) -> List[Chromosome]:
        """Archived chromosomes, best first objective first."""
        with self._archive_lock:
            members = list(self._archive.values())
        return sorted(members, key=lambda c: evaluated_vector(c)[0], reverse=True)

    @property
    def archive_keys(self) -> List[float]:
        with self._archive_lock:
            return sorted(self._archive)

    def select(self, old_population, new_population, start, length):
        candidates = [
            c for c in self.candidate_range(old_population, start, length)
            if _all_positive(c)
        ]

        with self._archive_lock:
            for chromosome in candidates:
                key = self._archive_key(chromosome)
                if key in self._archive:
                    if self._archive[key] is not chromosome:
                        logger.debug("Archive key %r already taken, skipping", key)
                    continue
                self._archive[key] = chromosome
            self._remove_dominated()
            self._evict_overflow()
            members = [self._archive[k] for k in sorted(self._archive)]

        return new_population.extend_unique(members)

    def _archive_key(self, chromosome: Chromosome) -> float:
        vector = evaluated_vector(chromosome)
        if len(vector) < 2:
            raise InvalidInputError(
                f"Elite selection needs at least two objectives, got {len(vector)}"
            )
        return vector[1]

    def _remove_dominated(self) -> None:
        """Drop archive members dominated by another member. Caller holds the lock."""
        members = list(self._archive.values())
        keep = {id(c) for c in non_dominated(members)}
        for key in [k for k, c in self._archive.items() if id(c) not in keep]:
            del self._archive[key]

    def _evict_overflow(self) -> None:
        """Evict lowest keys until within max_size. Caller holds the lock."""
        while len(self._archive) > self.max_size:
            del self._archive[min(self._archive)]

    def __repr__(self) -> str:
        return f"EliteSelection(max_size={self.max_size}, archived={len(self._archive)})"
