"""SPEA2 primitives: strength, raw fitness, density and archive truncation.

These pure functions implement the fitness assignment and environmental
selection of the Strength Pareto Evolutionary Algorithm 2 (Zitzler, Laumanns
and Thiele, 2001):

- strength_values: how many individuals each individual dominates
- raw_fitness: sum of the strengths of an individual's dominators
- neighbor_distances: sorted objective-space distances to all other individuals
- density: 1 / (distance to the k-th nearest neighbour + 2)
- spea2_fitness: raw fitness plus density, lower is better
- truncate_archive: iterative removal of the most crowded individual
- environmental_selection: fill an archive of fixed capacity

All objectives are minimized.
"""

from math import isqrt

import numpy as np

from moga.primitives import dominates_matrix


def strength_values(objectives: np.ndarray) -> np.ndarray:
    """Count the individuals each individual dominates.

    Args:
        objectives: Objective values for all individuals. Shape (n, n_obj).

    Returns:
        Integer array of shape (n,).

    Examples:
        >>> strength_values(np.array([[1.0, 1.0], [2.0, 2.0], [3.0, 3.0]])).tolist()
        [2, 1, 0]
    """
    return dominates_matrix(objectives).sum(axis=1).astype(np.int64)


def raw_fitness(objectives: np.ndarray, strength: np.ndarray | None = None) -> np.ndarray:
    """Sum the strengths of all individuals dominating each individual.

    Raw fitness is 0 exactly for individuals that nobody dominates, and at
    least 1 otherwise.

    Args:
        objectives: Objective values for all individuals. Shape (n, n_obj).
        strength: Precomputed strength values, shape (n,). Computed if omitted.

    Returns:
        Integer array of shape (n,).

    Examples:
        >>> raw_fitness(np.array([[1.0, 1.0], [2.0, 2.0], [3.0, 3.0]])).tolist()
        [0, 2, 3]
    """
    dom = dominates_matrix(objectives)
    if strength is None:
        strength = dom.sum(axis=1)
    # column j collects the dominators of j
    return (dom * strength[:, np.newaxis]).sum(axis=0).astype(np.int64)


def _distance_matrix(objectives: np.ndarray) -> np.ndarray:
    diff = objectives[:, np.newaxis, :] - objectives[np.newaxis, :, :]
    return np.sqrt((diff**2).sum(axis=2))


def neighbor_distances(objectives: np.ndarray) -> np.ndarray:
    """Compute sorted Euclidean distances from each individual to all others.

    Args:
        objectives: Objective values for all individuals. Shape (n, n_obj).

    Returns:
        Array of shape (n, n - 1); row i holds the distances from individual i
        to every other individual in ascending order.
    """
    n = objectives.shape[0]
    if n == 0:
        return np.empty((0, 0), dtype=np.float64)
    dist = _distance_matrix(objectives)
    np.fill_diagonal(dist, np.inf)
    return np.sort(dist, axis=1)[:, : n - 1]


def kth_nearest(n: int) -> int:
    """Return k, the neighbour used for density estimation in a pool of n.

    k is the integer square root of the pool size, at least 1.
    """
    return max(1, isqrt(n))


def density(objectives: np.ndarray) -> np.ndarray:
    """Estimate density from the distance to the k-th nearest neighbour.

    ``density = 1 / (d_k + 2)``, which lies in (0, 0.5]. An individual alone in
    the pool has no neighbours and gets the maximum density of 0.5.

    Args:
        objectives: Objective values for all individuals. Shape (n, n_obj).

    Returns:
        Float array of shape (n,).
    """
    n = objectives.shape[0]
    if n == 0:
        return np.empty(0, dtype=np.float64)
    if n == 1:
        return np.array([0.5])
    d_k = neighbor_distances(objectives)[:, kth_nearest(n) - 1]
    return 1.0 / (d_k + 2.0)


def spea2_fitness(objectives: np.ndarray) -> dict[str, np.ndarray]:
    """Compute the full SPEA2 fitness assignment for a pool.

    Args:
        objectives: Objective values for the combined population and archive.
            Shape (n, n_obj).

    Returns:
        Dictionary with keys 'strength', 'raw_fitness', 'density' and
        'fitness' (raw fitness plus density), each of shape (n,). Individuals
        with fitness < 1 are exactly the non-dominated ones.
    """
    strength = strength_values(objectives)
    raw = raw_fitness(objectives, strength)
    dens = density(objectives)
    return {
        "strength": strength,
        "raw_fitness": raw,
        "density": dens,
        "fitness": raw.astype(np.float64) + dens,
    }


def truncate_archive(objectives: np.ndarray, candidates: np.ndarray, capacity: int) -> np.ndarray:
    """Shrink a set of candidates to ``capacity`` by removing crowded members.

    Each step removes the candidate whose sorted list of distances to the other
    remaining candidates is lexicographically smallest: the smallest nearest
    neighbour distance, then the second smallest, and so on. Distances are
    recomputed among the remaining candidates after every removal. When two
    candidates have identical distance lists the one with the larger index is
    removed, so earlier individuals survive.

    Args:
        objectives: Objective values for the whole pool. Shape (n, n_obj).
        candidates: Pool indices eligible for the archive.
        capacity: Number of candidates to keep. Must be positive.

    Returns:
        The kept pool indices, in their original relative order.

    Raises:
        ValueError: If capacity is not positive.
    """
    if capacity <= 0:
        raise ValueError(f"capacity must be positive, got {capacity}")

    alive = np.asarray(candidates, dtype=np.intp)
    if len(alive) <= capacity:
        return alive.copy()

    dist = _distance_matrix(objectives[alive])
    np.fill_diagonal(dist, np.inf)
    keep = np.arange(len(alive))

    while len(keep) > capacity:
        rows = np.sort(dist[np.ix_(keep, keep)], axis=1)[:, :-1]
        # np.lexsort treats the last key as primary: nearest distance first,
        # larger pool index as the final tie-break
        keys = (-alive[keep],) + tuple(rows[:, c] for c in range(rows.shape[1] - 1, -1, -1))
        victim = np.lexsort(keys)[0]
        keep = np.delete(keep, victim)

    return alive[keep]


def environmental_selection(
    objectives: np.ndarray,
    archive_size: int,
    fitness: np.ndarray | None = None,
) -> np.ndarray:
    """Choose the members of the next archive from a pool.

    1. All non-dominated individuals (fitness < 1) are candidates.
    2. If they fit exactly, they form the archive.
    3. If there are fewer, the remaining slots go to the best dominated
       individuals by ascending fitness (ties by pool index).
    4. If there are more, they are truncated with ``truncate_archive``.

    Args:
        objectives: Objective values for the pool. Shape (n, n_obj).
        archive_size: Archive capacity. Must be positive.
        fitness: Precomputed SPEA2 fitness, shape (n,). Computed if omitted.

    Returns:
        Pool indices of the archive members ordered by ascending fitness. The
        archive holds min(archive_size, n) individuals.

    Raises:
        ValueError: If archive_size is not positive.

    Examples:
        >>> objs = np.array([[1.0, 4.0], [4.0, 1.0], [2.0, 2.0], [3.0, 3.0]])
        >>> environmental_selection(objs, 2).tolist()  # [2, 2] is the most crowded
        [0, 1]
    """
    if archive_size <= 0:
        raise ValueError(f"archive_size must be positive, got {archive_size}")
    if fitness is None:
        fitness = spea2_fitness(objectives)["fitness"]

    non_dominated = np.flatnonzero(fitness < 1.0)
    if len(non_dominated) > archive_size:
        members = truncate_archive(objectives, non_dominated, archive_size)
    elif len(non_dominated) == archive_size:
        members = non_dominated
    else:
        members = np.argsort(fitness, kind="stable")[:archive_size]

    return members[np.argsort(fitness[members], kind="stable")].astype(np.intp)
