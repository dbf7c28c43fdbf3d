"""
Exception types raised by the optimizer and the selection subsystem.
"""


class EvolutionError(Exception):
    """Base class for all errors raised by evomo."""


class InvalidArgumentError(EvolutionError, ValueError):
    """A required collaborator is missing or a tunable is out of range."""


class InvalidInputError(EvolutionError, ValueError):
    """Chromosomes handed to a comparison violate the decision vector contract."""
