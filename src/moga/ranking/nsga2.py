"""NSGA-II ranking: Pareto fronts first, crowding distance second.

The pool is partitioned into fronts with the fast non-dominated sort and each
front gets crowding distances. Survivors are taken in crowded order: whole
fronts while they fit, then the most isolated members of the critical front.
"""

import numpy as np

from moga.population import Population
from moga.primitives import crowded_order, crowding_distance_by_front, non_dominated_sort


def nsga2_ranking():
    """Create an NSGA-II ranker.

    Returns:
        A Ranker callable that selects survivor indices and returns state with
        'rank' and 'crowding_distance' arrays aligned with the survivors.

    Example:
        >>> ranker = nsga2_ranking()
        >>> survivors, state = ranker(pool, n_survivors=100)
        >>> front_0 = survivors[state["rank"] == 0]
    """

    def ranker(
        pop: Population,
        n_survivors: int,
        **kwargs: np.ndarray,
    ) -> tuple[np.ndarray, dict[str, np.ndarray]]:
        """Rank the pool and keep the best ``n_survivors`` in crowded order.

        Args:
            pop: Evaluated pool to rank.
            n_survivors: Number of survivors. If the pool is smaller, everyone
                survives.
            **kwargs: Unused. NSGA-II computes all metrics internally.

        Returns:
            Tuple of (indices, state) where:
            - indices: Survivor indices into ``pop`` ordered by front ascending,
              then crowding distance descending, ties by pool index.
            - state: Dictionary with keys:
                - 'rank': front index of each survivor.
                - 'crowding_distance': crowding distance of each survivor,
                  recomputed within the surviving part of its front.

        Raises:
            ValueError: If the pool has no objectives or n_survivors is not positive.
        """
        if pop.objectives is None:
            raise ValueError("Population must have objectives computed for ranking")
        if n_survivors <= 0:
            raise ValueError(f"n_survivors must be positive, got {n_survivors}")

        objectives = pop.objectives
        ranks = non_dominated_sort(objectives)
        cd = crowding_distance_by_front(objectives, ranks)
        selected = crowded_order(ranks, cd)[:n_survivors]

        # Truncating the critical front moves its boundaries
        survivor_ranks = ranks[selected]
        survivor_cd = crowding_distance_by_front(objectives[selected], survivor_ranks)
        order = crowded_order(survivor_ranks, survivor_cd)

        return selected[order], {
            "rank": survivor_ranks[order],
            "crowding_distance": survivor_cd[order],
        }

    ranker.state_keys = ("rank", "crowding_distance")
    return ranker
