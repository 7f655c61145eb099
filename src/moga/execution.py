"""Execution policies for per-individual operators.

Users write simple per-individual functions; the framework lifts them to work
on a whole list of items, either sequentially or fanned out over worker
threads with joblib. Every policy returns results in input order, and the
parallel ones join all tasks before returning.

- lift: sequential map
- lift_parallel: one task per item
- lift_batched: items split into one contiguous chunk per worker
- as_batch: the function already maps a list to a list
"""

from collections.abc import Callable
from enum import Enum
from typing import Any

import numpy as np
from joblib import Parallel, delayed, effective_n_jobs


class Execution(str, Enum):
    """How an operator is applied to a batch of items."""

    SEQUENTIAL = "sequential"
    PARALLEL_EACH = "parallel_each"
    PARALLEL_BATCH = "parallel_batch"
    BATCH = "batch"


def lift(fn: Callable[[Any], Any]) -> Callable[[list[Any]], list[Any]]:
    """Lift a per-item function to work on a list of items.

    Args:
        fn: Function that operates on a single item.

    Returns:
        A function mapping a list of items to the list of results.

    Example:
        >>> square_all = lift(lambda x: x * x)
        >>> square_all([1, 2, 3])
        [1, 4, 9]
    """

    def lifted(items: list[Any]) -> list[Any]:
        return [fn(item) for item in items]

    return lifted


def lift_parallel(fn: Callable[[Any], Any], n_workers: int) -> Callable[[list[Any]], list[Any]]:
    """Lift a per-item function to run each item as its own parallel task.

    Tasks run on joblib's thread backend, so ``fn`` does not need to be
    picklable. It must be safe to call from several threads at once.

    Args:
        fn: Function that operates on a single item.
        n_workers: Number of parallel workers. Use -1 for all CPU cores.

    Returns:
        A function mapping a list of items to the list of results, in order.

    Example:
        >>> square_all = lift_parallel(lambda x: x * x, n_workers=2)
        >>> square_all([1, 2, 3])
        [1, 4, 9]
    """

    def lifted(items: list[Any]) -> list[Any]:
        if not items:
            return []
        return list(Parallel(n_jobs=n_workers, prefer="threads")(delayed(fn)(item) for item in items))

    return lifted


def lift_batched(fn: Callable[[Any], Any], n_workers: int) -> Callable[[list[Any]], list[Any]]:
    """Lift a per-item function to run over one contiguous chunk per worker.

    Compared to ``lift_parallel`` this schedules fewer, larger tasks, which
    pays off when ``fn`` is cheap.

    Args:
        fn: Function that operates on a single item.
        n_workers: Number of parallel workers. Use -1 for all CPU cores.

    Returns:
        A function mapping a list of items to the list of results, in order.
    """
    serial = lift(fn)

    def lifted(items: list[Any]) -> list[Any]:
        if not items:
            return []
        n_chunks = min(effective_n_jobs(n_workers), len(items))
        bounds = np.linspace(0, len(items), n_chunks + 1).astype(int)
        chunks = [items[lo:hi] for lo, hi in zip(bounds[:-1], bounds[1:])]
        results = Parallel(n_jobs=n_workers, prefer="threads")(delayed(serial)(chunk) for chunk in chunks)
        return [out for chunk_out in results for out in chunk_out]

    return lifted


def as_batch(fn: Callable[[list[Any]], list[Any]]) -> Callable[[list[Any]], list[Any]]:
    """Use a function that already maps a whole list of items.

    The result must have one entry per input item, in input order.

    Raises:
        ValueError: When called, if ``fn`` returns a different number of results.
    """

    def lifted(items: list[Any]) -> list[Any]:
        results = list(fn(list(items)))
        if len(results) != len(items):
            raise ValueError(f"batch function returned {len(results)} results for {len(items)} items")
        return results

    return lifted


def apply_policy(fn: Callable[..., Any], policy: Execution | str, n_workers: int = 1) -> Callable[[list[Any]], list[Any]]:
    """Lift ``fn`` according to an execution policy.

    Args:
        fn: Per-item function, or a list-to-list function for ``Execution.BATCH``.
        policy: An ``Execution`` member or its string value.
        n_workers: Worker count for the parallel policies.

    Raises:
        ValueError: If the policy is unknown.
    """
    policy = Execution(policy)
    if policy is Execution.SEQUENTIAL:
        return lift(fn)
    if policy is Execution.PARALLEL_EACH:
        return lift_parallel(fn, n_workers)
    if policy is Execution.PARALLEL_BATCH:
        return lift_batched(fn, n_workers)
    return as_batch(fn)


def execute(fn: Callable[..., Any], items: list[Any], policy: Execution | str, n_workers: int = 1) -> list[Any]:
    """Apply ``fn`` to every item under ``policy`` and return the results in order.

    Example:
        >>> execute(lambda x: x + 1, [1, 2, 3], Execution.SEQUENTIAL)
        [2, 3, 4]
    """
    return apply_policy(fn, policy, n_workers)(items)
