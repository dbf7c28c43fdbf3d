"""
evomo - evolutionary multi-objective optimization.

Example usage:
    from evomo import Optimizer, OptimizerConfig, EliteSelection

    optimizer = Optimizer(
        ancestor=MyChromosome(),
        population_size=50,
        fitness_function=MyFitness(),
        selection=EliteSelection(max_size=20),
        config=OptimizerConfig(mutation_rate=0.2, crossover_rate=0.1, parallelize=True),
    )
    with optimizer:
        optimizer.run(n_epochs=100)

    print(optimizer.selection.elite)
"""

import logging

from .errors import EvolutionError, InvalidArgumentError, InvalidInputError
from .evolution import (
    Chromosome,
    FitnessFunction,
    CallableFitness,
    dominates,
    is_dominated_in_population,
    non_dominated,
    Population,
    SelectionStrategy,
    SingleCriterionSelection,
    MultiCriterionSelection,
    EliteSelection,
    Optimizer,
    OptimizerConfig,
    EpochStats,
    OptimizationHistory,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = '0.1.0'

__all__ = [
    'EvolutionError',
    'InvalidArgumentError',
    'InvalidInputError',
    'Chromosome',
    'FitnessFunction',
    'CallableFitness',
    'dominates',
    'is_dominated_in_population',
    'non_dominated',
    'Population',
    'SelectionStrategy',
    'SingleCriterionSelection',
    'MultiCriterionSelection',
    'EliteSelection',
    'Optimizer',
    'OptimizerConfig',
    'EpochStats',
    'OptimizationHistory',
]
