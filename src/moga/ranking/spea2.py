"""SPEA2 ranking: strength, density and archive truncation.

The pool handed to this ranker is the previous archive plus the new
offspring. Its survivors are the next archive.
"""

import numpy as np

from moga.population import Population
from moga.strength import environmental_selection, spea2_fitness


def spea2_ranking():
    """Create a SPEA2 ranker.

    The ``n_survivors`` argument is the archive size.

    Returns:
        A Ranker callable that returns the archive indices and a state with
        'fitness', 'strength', 'raw_fitness' and 'density' arrays aligned with
        the archive members.

    Example:
        >>> ranker = spea2_ranking()
        >>> archive, state = ranker(pool, n_survivors=50)
        >>> non_dominated = archive[state["fitness"] < 1]
    """

    def ranker(
        pop: Population,
        n_survivors: int,
        **kwargs: np.ndarray,
    ) -> tuple[np.ndarray, dict[str, np.ndarray]]:
        """Assign SPEA2 fitness to the pool and fill the archive.

        Args:
            pop: Evaluated pool (archive plus offspring).
            n_survivors: Archive capacity.
            **kwargs: Unused.

        Returns:
            Tuple of (indices, state). Indices are ordered by ascending
            fitness; the state values are the ones computed over the whole pool.

        Raises:
            ValueError: If the pool has no objectives or n_survivors is not positive.
        """
        if pop.objectives is None:
            raise ValueError("Population must have objectives computed for ranking")
        if n_survivors <= 0:
            raise ValueError(f"n_survivors must be positive, got {n_survivors}")

        fitness = spea2_fitness(pop.objectives)
        archive = environmental_selection(pop.objectives, n_survivors, fitness=fitness["fitness"])
        return archive, {key: values[archive] for key, values in fitness.items()}

    ranker.state_keys = ("fitness", "strength", "raw_fitness", "density")
    return ranker
