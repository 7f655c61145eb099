"""Crowded tournament selection for NSGA-II ranked populations."""

import numpy as np

from moga.population import Population
from moga.selection.base import check_selectable


def crowded_tournament(tournament_size: int = 2):
    """Create a crowded tournament parent selector.

    In crowded tournament selection, individuals are compared by:
    1. Pareto rank (lower is better)
    2. If ranks are equal, crowding distance (higher is better for diversity)

    Args:
        tournament_size: Number of individuals in each tournament. Default 2.

    Returns:
        A ParentSelector callable that selects parent indices.

    Raises:
        ValueError: If tournament_size is not positive.

    Example:
        >>> selector = crowded_tournament(tournament_size=2)
        >>> parents = selector(pop, n_parents=20, rng=rng, rank=rank, crowding_distance=cd)
    """
    if tournament_size <= 0:
        raise ValueError(f"tournament_size must be positive, got {tournament_size}")

    def selector(
        pop: Population,
        n_parents: int,
        rng: np.random.Generator,
        **kwargs: np.ndarray,
    ) -> np.ndarray:
        """Select parents using crowded tournament selection.

        Raises:
            ConfigurationError: If the population is empty.
            ValueError: If 'rank' or 'crowding_distance' not in kwargs.
        """
        check_selectable(pop, n_parents, "crowded tournament")
        if "rank" not in kwargs:
            raise ValueError("crowded tournament selection requires 'rank' in kwargs")
        if "crowding_distance" not in kwargs:
            raise ValueError("crowded tournament selection requires 'crowding_distance' in kwargs")

        rank = kwargs["rank"]
        crowding_distance = kwargs["crowding_distance"]
        candidates = rng.integers(0, len(pop), size=(n_parents, tournament_size))

        selected = np.empty(n_parents, dtype=np.intp)
        for i, row in enumerate(candidates):
            best = row[0]
            for c in row[1:]:
                if rank[c] < rank[best] or (rank[c] == rank[best] and crowding_distance[c] > crowding_distance[best]):
                    best = c
            selected[i] = best

        return selected

    selector.required_state = ("rank", "crowding_distance")
    return selector
