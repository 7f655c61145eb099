"""Pareto primitives for dominance ranking and diversity.

This module provides the pure functions behind the rank-and-crowding ranker:
- dominates: scalar Pareto dominance check
- dominates_matrix: vectorized pairwise dominance
- non_dominated_sort: Deb's fast non-dominated sorting algorithm
- pareto_fronts: the fronts themselves, as index arrays
- crowding_distance: diversity metric for solutions in one Pareto front
- crowding_distance_by_front: crowding distance for every front at once
- crowded_order: total order by front, then crowding distance

All objectives are minimized.
"""

import numpy as np


def dominates(a: np.ndarray, b: np.ndarray) -> bool:
    """Check if objective vector a Pareto-dominates objective vector b.

    a dominates b if and only if:
      - a[i] <= b[i] for ALL objectives (a is at least as good everywhere)
      - a[i] < b[i] for AT LEAST ONE objective (a is strictly better somewhere)

    A vector never dominates itself.

    Args:
        a: Objective values of the first individual. Shape (n_obj,).
        b: Objective values of the second individual. Shape (n_obj,).

    Returns:
        True if a dominates b, False otherwise.

    Examples:
        >>> dominates(np.array([1.0, 2.0]), np.array([2.0, 3.0]))
        True
        >>> dominates(np.array([1.0, 3.0]), np.array([2.0, 2.0]))
        False
    """
    a = np.asarray(a)
    b = np.asarray(b)
    return bool(np.all(a <= b) and np.any(a < b))


def dominates_matrix(objectives: np.ndarray) -> np.ndarray:
    """Compute pairwise dominance for all individuals.

    Args:
        objectives: Objective values for all individuals. Shape (n, n_obj).

    Returns:
        Boolean array of shape (n, n) where result[i, j] = True iff
        individual i dominates individual j. The diagonal is always False.
    """
    a = objectives[:, np.newaxis, :]
    b = objectives[np.newaxis, :, :]
    return np.all(a <= b, axis=2) & np.any(a < b, axis=2)


def non_dominated_sort(objectives: np.ndarray) -> np.ndarray:
    """Assign each individual to a Pareto front using Deb's fast algorithm.

    Builds, for every individual, the number of individuals dominating it and
    the list of individuals it dominates. Front 0 holds the individuals nobody
    dominates; each following front is found by peeling: for each member of the
    current front, decrement the count of everyone it dominates, and whoever
    reaches zero joins the next front.

    Time complexity: O(M * N^2) where M = number of objectives, N = population size.

    Args:
        objectives: Objective values for all individuals. Shape (n, n_obj).

    Returns:
        Integer array of shape (n,) where rank[i] is the front index of
        individual i. Rank 0 = Pareto front.

    Examples:
        >>> non_dominated_sort(np.array([[1.0, 1.0], [2.0, 2.0], [3.0, 3.0]]))
        array([0, 1, 2])
    """
    n = objectives.shape[0]
    ranks = np.full(n, -1, dtype=np.int64)
    if n == 0:
        return ranks

    dom = dominates_matrix(objectives)
    domination_count = dom.sum(axis=0).astype(np.int64)
    dominated_by = [np.flatnonzero(dom[i]) for i in range(n)]

    front = np.flatnonzero(domination_count == 0)
    current_rank = 0
    while front.size > 0:
        ranks[front] = current_rank
        next_front: list[int] = []
        for p in front:
            for q in dominated_by[p]:
                domination_count[q] -= 1
                if domination_count[q] == 0:
                    next_front.append(int(q))
        front = np.array(sorted(next_front), dtype=np.intp)
        current_rank += 1

    return ranks


def pareto_fronts(objectives: np.ndarray) -> list[np.ndarray]:
    """Partition individuals into Pareto fronts.

    Args:
        objectives: Objective values for all individuals. Shape (n, n_obj).

    Returns:
        List of index arrays, one per front, ordered by front index. Members of
        each front are in ascending index order.

    Examples:
        >>> [f.tolist() for f in pareto_fronts(np.array([[2.0, 2.0], [1.0, 3.0], [3.0, 3.0]]))]
        [[0, 1], [2]]
    """
    ranks = non_dominated_sort(objectives)
    if ranks.size == 0:
        return []
    return [np.flatnonzero(ranks == r) for r in range(int(ranks.max()) + 1)]


def crowding_distance(front_objectives: np.ndarray) -> np.ndarray:
    """Compute crowding distance for individuals in a single Pareto front.

    For each objective the front is sorted by that objective (stable sort, so
    ties keep their original order). The two extreme members get infinite
    distance; every interior member accumulates the gap between its neighbours
    normalized by the objective's range in the front. An objective whose range
    is zero contributes nothing.

    Args:
        front_objectives: Objective values for individuals in ONE front only.
            Shape (n_front, n_obj).

    Returns:
        Array of shape (n_front,) with crowding distances. Fronts with at most
        two members are all infinite.

    Examples:
        >>> cd = crowding_distance(np.array([[1.0, 4.0], [2.0, 3.0], [3.0, 2.0], [4.0, 1.0]]))
        >>> cd.tolist()
        [inf, 1.3333333333333333, 1.3333333333333333, inf]
    """
    n_front = front_objectives.shape[0]
    if n_front <= 2:
        return np.full(n_front, np.inf)

    distances = np.zeros(n_front, dtype=np.float64)
    for m in range(front_objectives.shape[1]):
        values = front_objectives[:, m]
        order = np.argsort(values, kind="stable")
        sorted_values = values[order]

        distances[order[0]] = np.inf
        distances[order[-1]] = np.inf

        obj_range = sorted_values[-1] - sorted_values[0]
        if obj_range > 0:
            gaps = (sorted_values[2:] - sorted_values[:-2]) / obj_range
            distances[order[1:-1]] += gaps

    return distances


def crowding_distance_by_front(objectives: np.ndarray, ranks: np.ndarray) -> np.ndarray:
    """Compute crowding distance for every individual, front by front.

    Args:
        objectives: Objective values for all individuals. Shape (n, n_obj).
        ranks: Front index of every individual. Shape (n,).

    Returns:
        Array of shape (n,) with each individual's crowding distance within
        its own front.
    """
    cd = np.zeros(len(objectives), dtype=np.float64)
    if len(objectives) == 0:
        return cd
    for r in np.unique(ranks):
        members = np.flatnonzero(ranks == r)
        cd[members] = crowding_distance(objectives[members])
    return cd


def crowded_order(ranks: np.ndarray, crowding: np.ndarray) -> np.ndarray:
    """Order individuals by front ascending, then crowding distance descending.

    Ties on both keys keep ascending index order, so the result is
    deterministic.

    Args:
        ranks: Front index of every individual. Shape (n,).
        crowding: Crowding distance of every individual. Shape (n,).

    Returns:
        Index array of shape (n,).

    Examples:
        >>> crowded_order(np.array([1, 0, 0]), np.array([np.inf, 0.5, np.inf])).tolist()
        [2, 1, 0]
    """
    # lexsort sorts by the last key first and is stable
    return np.lexsort((-crowding, ranks)).astype(np.intp)
