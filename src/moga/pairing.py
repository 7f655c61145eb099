"""Pairing policies that turn selected parents into recombination pairs.

A pairing policy maps the number of selected parents and a random generator to
an array of index pairs, shape (n_pairs, 2). Each pair produces one offspring.
"""

from itertools import combinations

import numpy as np

from moga.registry import PairingRegistry


def consecutive_pairs(n_parents: int, rng: np.random.Generator) -> np.ndarray:
    """Pair each parent with the next one, wrapping around at the end.

    n parents produce n pairs, so the offspring count equals the parent count.
    A single parent is paired with itself.

    Example:
        >>> consecutive_pairs(3, np.random.default_rng(0)).tolist()
        [[0, 1], [1, 2], [2, 0]]
    """
    idx = np.arange(n_parents, dtype=np.intp)
    return np.column_stack([idx, np.roll(idx, -1)])


def all_pairs(n_parents: int, rng: np.random.Generator) -> np.ndarray:
    """Pair every parent with every later parent.

    n parents produce n * (n - 1) / 2 pairs. A single parent is paired with itself.

    Example:
        >>> all_pairs(3, np.random.default_rng(0)).tolist()
        [[0, 1], [0, 2], [1, 2]]
    """
    if n_parents == 1:
        return np.zeros((1, 2), dtype=np.intp)
    return np.array(list(combinations(range(n_parents), 2)), dtype=np.intp).reshape(-1, 2)


def random_pairs(n_parents: int, rng: np.random.Generator) -> np.ndarray:
    """Pair each parent with a uniformly drawn partner.

    n parents produce n pairs; the partner may be the parent itself.
    """
    idx = np.arange(n_parents, dtype=np.intp)
    return np.column_stack([idx, rng.integers(0, n_parents, size=n_parents)]).astype(np.intp)


PairingRegistry.register("consecutive", lambda: consecutive_pairs)
PairingRegistry.register("all", lambda: all_pairs)
PairingRegistry.register("random", lambda: random_pairs)
