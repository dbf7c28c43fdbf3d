"""
Pareto dominance between decision vectors.

Higher objective values are better. A vector is dominated by another when the
other is at least as good in every objective and strictly better in at least
one. Equal vectors do not dominate each other.

All functions accept either chromosomes (their decision_vector is read) or
plain sequences of floats.
"""

import logging
from typing import Any, Iterable, List, Sequence

import numpy as np

from ..errors import InvalidInputError

logger = logging.getLogger(__name__)


def evaluated_vector(item: Any) -> Sequence[float]:
    """
    Decision vector of a chromosome, or a raw sequence unchanged.

    Raises:
        InvalidInputError: If a chromosome has not been evaluated
    """
    vector = getattr(item, 'decision_vector', item)
    if vector is None:
        raise InvalidInputError(f"{item!r} has not been evaluated")
    return vector


def _as_vector(item: Any) -> np.ndarray:
    return np.asarray(evaluated_vector(item), dtype=float)


def dominates(subject: Any, other: Any) -> bool:
    """
    Check whether ``subject`` is dominated by ``other``.

    Args:
        subject: Chromosome or decision vector under test
        other: Chromosome or decision vector it is compared against

    Returns:
        True if ``other`` is no worse in every objective and strictly better
        in at least one

    Raises:
        InvalidInputError: If the vectors differ in length or either side is
            an unevaluated chromosome
    """
    subject_dv = _as_vector(subject)
    other_dv = _as_vector(other)
    if subject_dv.shape != other_dv.shape:
        raise InvalidInputError(
            f"Decision vectors must have the same length "
            f"({subject_dv.size} != {other_dv.size})"
        )
    return bool(np.all(other_dv >= subject_dv) and np.any(other_dv > subject_dv))


def is_dominated_in_population(subject: Any, population: Iterable[Any]) -> bool:
    """
    Check whether any other member of ``population`` dominates ``subject``.

    ``subject`` itself (by identity) is skipped, so it may be a member.
    """
    for other in population:
        if other is subject:
            continue
        if dominates(subject, other):
            return True
    return False


def non_dominated(population: Sequence[Any]) -> List[Any]:
    """Members of ``population`` not dominated by any other member, in order."""
    front = [c for c in population if not is_dominated_in_population(c, population)]
    logger.debug("Non-dominated front: %d / %d", len(front), len(population))
    return front
