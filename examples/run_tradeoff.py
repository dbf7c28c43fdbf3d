#!/usr/bin/env python3
"""
Two-objective trade-off optimization with an elite archive.

Each chromosome is a vector of genes in [0, 1]. The first objective rewards a
high first gene, the second rewards a low one, and both reward the remaining
genes. The elite archive collects the Pareto front found along the way.

Usage:
    python examples/run_tradeoff.py
"""

import logging
import random
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from evomo import (
    Chromosome,
    EliteSelection,
    FitnessFunction,
    Optimizer,
    OptimizerConfig,
)

N_GENES = 4
POPULATION_SIZE = 40
EPOCHS = 50


class GeneVector(Chromosome):
    """Real-valued genes, each in [0, 1]."""

    def __init__(self, genes=None):
        self.genes = list(genes) if genes is not None else [0.5] * N_GENES

    def generate(self):
        self.genes = [random.random() for _ in range(N_GENES)]

    def clone(self):
        twin = GeneVector(self.genes)
        twin._decision_vector = self._decision_vector
        return twin

    def create_new(self):
        fresh = GeneVector()
        fresh.generate()
        return fresh

    def mutate(self):
        i = random.randrange(N_GENES)
        self.genes[i] = min(1.0, max(0.0, self.genes[i] + random.gauss(0, 0.05)))

    def crossover(self, partner):
        cut = random.randrange(1, N_GENES)
        self.genes = self.genes[:cut] + partner.genes[cut:]


class TradeOff(FitnessFunction):
    def evaluate(self, chromosome):
        head, *tail = chromosome.genes
        bonus = sum(tail) / len(tail)
        return [head + bonus + 0.01, (1.0 - head) + bonus + 0.01]


def progress_callback(epoch: int, total: int, stats):
    best = stats.best_objectives or [0.0, 0.0]
    print(
        f"\r   Epoch {epoch:3d}/{total} | "
        f"population {stats.population_size:3d} | "
        f"best ({best[0]:.3f}, {best[1]:.3f})",
        end='', flush=True
    )


def main():
    logging.basicConfig(level=logging.WARNING)
    random.seed(0)

    selection = EliteSelection(max_size=15)
    config = OptimizerConfig(
        mutation_rate=0.3,
        crossover_rate=0.2,
        parallelize=True,
        seed=0,
    )

    with Optimizer(GeneVector(), POPULATION_SIZE, TradeOff(), selection, config) as optimizer:
        optimizer.run(EPOCHS, progress_callback=progress_callback)

    print("\n\nPareto front (elite archive):")
    for chromosome in selection.elite:
        f1, f2 = chromosome.decision_vector
        genes = ', '.join(f"{g:.2f}" for g in chromosome.genes)
        print(f"   ({f1:.3f}, {f2:.3f})  genes=[{genes}]")


if __name__ == '__main__':
    main()
