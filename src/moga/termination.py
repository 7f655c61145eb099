"""Termination criteria.

A terminator is called once per generation with the generation index and the
ranked survivors, and returns True to stop the run. Generation 0 is the ranked
initial population, so ``max_generations(0)`` stops before any offspring are
created.

Example:
    >>> stop = any_of(max_generations(100), target_objectives([0.0, 0.0]))
"""

from collections.abc import Callable, Sequence

import numpy as np

from moga.population import RankedPopulation
from moga.primitives import non_dominated_sort

TerminatorFn = Callable[[int, RankedPopulation], bool]


def max_generations(n: int) -> TerminatorFn:
    """Stop once ``n`` generations of offspring have been produced.

    Raises:
        ValueError: If n is negative.
    """
    if n < 0:
        raise ValueError(f"n must be non-negative, got {n}")

    def terminator(generation: int, ranked: RankedPopulation) -> bool:
        return generation >= n

    return terminator


def target_objectives(target: Sequence[float] | np.ndarray) -> TerminatorFn:
    """Stop once any survivor is at or below ``target`` in every objective.

    Args:
        target: Objective vector to reach, shape (n_obj,).

    Raises:
        ValueError: If target is not a non-empty 1D vector.
    """
    goal = np.asarray(target, dtype=np.float64)
    if goal.ndim != 1 or goal.size == 0:
        raise ValueError(f"target must be a non-empty 1D vector, got shape {goal.shape}")

    def terminator(generation: int, ranked: RankedPopulation) -> bool:
        if ranked.objectives.shape[1] != goal.size:
            raise ValueError(f"target has {goal.size} objectives, population has {ranked.objectives.shape[1]}")
        return bool(np.any(np.all(ranked.objectives <= goal, axis=1)))

    return terminator


def no_improvement(patience: int) -> TerminatorFn:
    """Stop when the non-dominated objective vectors stay unchanged for ``patience`` generations.

    The returned terminator is stateful: use a fresh one per run.

    Raises:
        ValueError: If patience is not positive.
    """
    if patience <= 0:
        raise ValueError(f"patience must be positive, got {patience}")

    last_front: np.ndarray | None = None
    stale = 0

    def terminator(generation: int, ranked: RankedPopulation) -> bool:
        nonlocal last_front, stale
        objs = ranked.objectives
        front = objs[non_dominated_sort(objs) == 0]
        # order-independent comparison of the front
        front = front[np.lexsort(front.T[::-1])]
        if last_front is not None and front.shape == last_front.shape and np.array_equal(front, last_front):
            stale += 1
        else:
            stale = 0
        last_front = front
        return stale >= patience

    return terminator


def any_of(*terminators: TerminatorFn) -> TerminatorFn:
    """Stop when any of the given terminators says so.

    Every terminator is called each generation so stateful ones stay in step.
    """
    if not terminators:
        raise ValueError("any_of requires at least one terminator")

    def terminator(generation: int, ranked: RankedPopulation) -> bool:
        decisions = [t(generation, ranked) for t in terminators]
        return any(decisions)

    return terminator
