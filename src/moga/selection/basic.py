"""Simple selectors that ignore ranking state."""

import numpy as np

from moga.population import Population
from moga.selection.base import check_selectable, objective_sum


def all_selection():
    """Select every individual once, in order. Ignores ``n_parents``."""

    def selector(pop: Population, n_parents: int, rng: np.random.Generator, **kwargs: np.ndarray) -> np.ndarray:
        check_selectable(pop, max(n_parents, 1), "all")
        return np.arange(len(pop), dtype=np.intp)

    return selector


def first_selection():
    """Select the first ``n_parents`` individuals.

    'First' means first in the ranked order, which for both built-in rankers is
    best first.
    """

    def selector(pop: Population, n_parents: int, rng: np.random.Generator, **kwargs: np.ndarray) -> np.ndarray:
        check_selectable(pop, n_parents, "first")
        return np.arange(min(n_parents, len(pop)), dtype=np.intp)

    return selector


def random_selection(replace: bool = False):
    """Select ``n_parents`` individuals uniformly at random.

    Args:
        replace: Whether an individual can be picked more than once. Without
            replacement at most ``len(pop)`` parents are returned.
    """

    def selector(pop: Population, n_parents: int, rng: np.random.Generator, **kwargs: np.ndarray) -> np.ndarray:
        check_selectable(pop, n_parents, "random")
        size = n_parents if replace else min(n_parents, len(pop))
        return rng.choice(len(pop), size=size, replace=replace).astype(np.intp)

    return selector


def best_selection():
    """Select the ``n_parents`` individuals with the smallest sum of objectives.

    Ties keep population order.
    """

    def selector(pop: Population, n_parents: int, rng: np.random.Generator, **kwargs: np.ndarray) -> np.ndarray:
        check_selectable(pop, n_parents, "best")
        return np.argsort(objective_sum(pop), kind="stable")[:n_parents].astype(np.intp)

    return selector
