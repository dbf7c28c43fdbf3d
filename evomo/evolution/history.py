"""
Per-epoch run statistics.

Records what each epoch did to the population (growth, survivors, final
size) and summarises the decision vectors of the resulting population.
"""

from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from .chromosome import Chromosome


@dataclass
class EpochStats:
    """Statistics for a single epoch."""
    epoch: int
    size_before: int              # Population size when the epoch started
    size_after_growth: int        # Size once mutation/crossover stopped
    offspring_added: int
    growth_iterations: int
    survivors: int                # Raw selection output, before any top-up
    population_size: int          # Live population size at the end
    best_objectives: Optional[List[float]]
    mean_objectives: Optional[List[float]]
    elapsed_seconds: float
    timestamp: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class OptimizationHistory:
    """
    Tracks optimizer progress over epochs.

    best_trajectory holds the best first objective of each epoch (None when
    the population ended up empty).
    """

    def __init__(self):
        self.epochs: List[EpochStats] = []
        self.best_trajectory: List[Optional[float]] = []

    def __len__(self) -> int:
        return len(self.epochs)

    def record_epoch(
        self,
        epoch: int,
        population: Sequence[Chromosome],
        size_before: int,
        size_after_growth: int,
        growth_iterations: int,
        survivors: int,
        elapsed_seconds: float,
    ) -> EpochStats:
        """
        Record statistics for a completed epoch.

        Args:
            epoch: Epoch number (1-based)
            population: Live population after selection
            size_before: Population size when the epoch started
            size_after_growth: Population size before selection
            growth_iterations: Mutation/crossover iterations performed
            survivors: Number of chromosomes selection returned
            elapsed_seconds: Wall time of the epoch

        Returns:
            EpochStats for this epoch
        """
        vectors = [c.decision_vector for c in population if c.is_evaluated]

        best = mean = None
        if vectors:
            matrix = np.asarray(vectors, dtype=float)
            best = matrix.max(axis=0).tolist()
            mean = matrix.mean(axis=0).tolist()

        stats = EpochStats(
            epoch=epoch,
            size_before=size_before,
            size_after_growth=size_after_growth,
            offspring_added=size_after_growth - size_before,
            growth_iterations=growth_iterations,
            survivors=survivors,
            population_size=len(population),
            best_objectives=best,
            mean_objectives=mean,
            elapsed_seconds=elapsed_seconds,
            timestamp=datetime.now().isoformat(),
        )

        self.epochs.append(stats)
        self.best_trajectory.append(best[0] if best else None)
        return stats

    def to_dict(self) -> Dict[str, Any]:
        return {
            'epochs': [e.to_dict() for e in self.epochs],
            'best_trajectory': self.best_trajectory,
        }
