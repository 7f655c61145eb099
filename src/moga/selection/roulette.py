"""Roulette wheel selection weighted by dominance strength."""

import numpy as np

from moga.population import Population
from moga.selection.base import check_selectable
from moga.strength import strength_values


def roulette_wheel():
    """Create a roulette wheel parent selector.

    The chance of selecting an individual is proportional to the number of
    individuals it dominates plus one, so even a dominated individual can be
    picked:

        weights_i = strength_i + 1
        p_i = weights_i / sum(weights_j)

    The SPEA2 ranker supplies 'strength'; otherwise it is computed from the
    population's objectives.

    Returns:
        A ParentSelector callable that selects with replacement.

    Example:
        >>> selector = roulette_wheel()
        >>> parents = selector(archive, n_parents=20, rng=rng, strength=strength)
    """

    def selector(
        pop: Population,
        n_parents: int,
        rng: np.random.Generator,
        **kwargs: np.ndarray,
    ) -> np.ndarray:
        check_selectable(pop, n_parents, "roulette wheel")
        if "strength" in kwargs:
            strength = kwargs["strength"]
        elif pop.objectives is not None:
            strength = strength_values(pop.objectives)
        else:
            raise ValueError("roulette wheel selection requires 'strength' in kwargs or evaluated objectives")

        weights = np.asarray(strength, dtype=np.float64) + 1.0
        probs = weights / weights.sum()
        return rng.choice(len(pop), size=n_parents, replace=True, p=probs).astype(np.intp)

    return selector
