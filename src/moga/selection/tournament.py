"""Fitness tournament selection."""

import numpy as np

from moga.population import Population
from moga.selection.base import check_selectable, objective_sum


def fitness_tournament(tournament_size: int = 2):
    """Create a fitness-based tournament parent selector.

    Lower fitness wins. The SPEA2 ranker supplies 'fitness'; without it the
    sum of objective values is used.

    Args:
        tournament_size: Number of individuals competing in each tournament (default: 2).

    Returns:
        A ParentSelector callable.

    Example:
        >>> selector = fitness_tournament(tournament_size=3)
        >>> parents = selector(archive, n_parents=20, rng=rng, fitness=fitness)
    """
    if tournament_size <= 0:
        raise ValueError(f"tournament_size must be positive, got {tournament_size}")

    def selector(
        pop: Population,
        n_parents: int,
        rng: np.random.Generator,
        **kwargs: np.ndarray,
    ) -> np.ndarray:
        check_selectable(pop, n_parents, "fitness tournament")
        fitness = kwargs["fitness"] if "fitness" in kwargs else objective_sum(pop)

        candidates = rng.integers(0, len(pop), size=(n_parents, tournament_size))
        # argmin keeps the first candidate on ties
        winners = np.argmin(fitness[candidates], axis=1)
        return candidates[np.arange(n_parents), winners].astype(np.intp)

    return selector


def chunked_tournament(tournament_size: int = 2):
    """Create a tournament selector without replacement.

    The population is shuffled and split into consecutive chunks of
    ``tournament_size``; the best individual of each chunk (lowest fitness, or
    lowest objective sum) is selected. This yields ``ceil(n / tournament_size)``
    distinct parents and ignores ``n_parents``.

    Args:
        tournament_size: Chunk size (default: 2).

    Returns:
        A ParentSelector callable.
    """
    if tournament_size <= 0:
        raise ValueError(f"tournament_size must be positive, got {tournament_size}")

    def selector(
        pop: Population,
        n_parents: int,
        rng: np.random.Generator,
        **kwargs: np.ndarray,
    ) -> np.ndarray:
        check_selectable(pop, n_parents, "chunked tournament")
        fitness = kwargs["fitness"] if "fitness" in kwargs else objective_sum(pop)

        shuffled = rng.permutation(len(pop))
        winners = [
            chunk[np.argmin(fitness[chunk])]
            for chunk in np.array_split(shuffled, range(tournament_size, len(pop), tournament_size))
        ]
        return np.array(winners, dtype=np.intp)

    return selector
