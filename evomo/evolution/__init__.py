"""
Evolutionary single- and multi-criterion optimization.

Key components:
- Chromosome / FitnessFunction: contracts implemented by the problem
- dominates / is_dominated_in_population: Pareto dominance
- Selection strategies: single-criterion, multi-criterion, elite archive
- Optimizer: the epoch loop (mutate, crossover, select)
"""

from .chromosome import Chromosome, FitnessFunction, CallableFitness
from .dominance import dominates, is_dominated_in_population, non_dominated
from .population import Population, create_initial_population
from .selection import (
    SelectionStrategy,
    SingleCriterionSelection,
    MultiCriterionSelection,
    EliteSelection,
)
from .history import EpochStats, OptimizationHistory
from .optimizer import Optimizer, OptimizerConfig

__all__ = [
    # Contracts
    'Chromosome',
    'FitnessFunction',
    'CallableFitness',
    # Dominance
    'dominates',
    'is_dominated_in_population',
    'non_dominated',
    # Population
    'Population',
    'create_initial_population',
    # Selection
    'SelectionStrategy',
    'SingleCriterionSelection',
    'MultiCriterionSelection',
    'EliteSelection',
    # Optimizer
    'Optimizer',
    'OptimizerConfig',
    'EpochStats',
    'OptimizationHistory',
]
