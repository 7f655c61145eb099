"""Helpers shared by the selection strategies."""

import numpy as np

from moga.errors import ConfigurationError
from moga.population import Population


def check_selectable(pop: Population, n_parents: int, name: str) -> None:
    """Reject selection from an empty population or for a non-positive count.

    Raises:
        ConfigurationError: If the population is empty or n_parents < 1.
    """
    if len(pop) == 0:
        raise ConfigurationError(f"{name} selection called on an empty population")
    if n_parents < 1:
        raise ConfigurationError(f"n_parents must be positive, got {n_parents}")


def objective_sum(pop: Population) -> np.ndarray:
    """Sum of objective values per individual, a scalar fallback fitness."""
    if pop.objectives is None:
        raise ValueError("Population must have objectives computed for selection")
    return pop.objectives.sum(axis=1)
