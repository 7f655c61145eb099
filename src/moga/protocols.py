"""Protocol definitions for the pluggable parts of the optimizer.

The generational loop is assembled from small function-shaped contracts. Any
plain function, lambda, closure or object with a matching ``__call__`` can be
used; no base class is required.

The per-individual operators are simple callables:

- Evaluator: ``solution -> objective vector`` (shape (n_obj,))
- Recombinator: ``(parent_a, parent_b) -> offspring``
- Mutator: ``solution -> mutated solution``, or an in-place transform that
  returns None

The population-level strategies are protocols:

1. **ParentSelector**: picks the parents of the next offspring from the
   ranked survivors.
2. **Ranker**: ranks a pool of evaluated individuals and decides which of
   them survive (NSGA-II rank and crowding, SPEA2 strength and density).
3. **Terminator**: decides after ranking whether the run stops.

Example usage:
    ```python
    survivor_indices, state = ranker(pool, n_survivors=100)
    ranked = RankedPopulation(pool.take(survivor_indices), state)
    if not terminator(generation, ranked):
        parent_indices = selector(ranked.population, n_parents=100, rng=rng, **state)
    ```
"""

from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

import numpy as np

from moga.population import Population, RankedPopulation

Evaluator = Callable[[Any], np.ndarray]
"""Evaluate one solution, returning its objective vector of shape (n_obj,)."""

BatchEvaluator = Callable[[list[Any]], list[np.ndarray]]
"""Evaluate a list of solutions, returning their objective vectors in the same order."""

Recombinator = Callable[[Any, Any], Any]
"""Combine two parents into one offspring."""

Mutator = Callable[[Any], Any]
"""Return a mutated version of one solution, or mutate it in place and return None.

An in-place mutator changes the offspring object handed to it, so recombination
should return a new object rather than one of its parents.
"""


@runtime_checkable
class ParentSelector(Protocol):
    """Protocol for parent selection strategies.

    A selector that reads ranker state may list the keys it needs in a
    ``required_state`` attribute; the configuration checks them against the
    ranker's ``state_keys``.

    Parameters:
        pop: The ranked survivors to select parents from.
        n_parents: Number of parent indices requested. Strategies that decide
            the count themselves (e.g. selecting every individual) may ignore it.
        rng: NumPy random number generator for reproducible stochastic selection.
        **kwargs: Ranker state aligned with ``pop``: 'rank' and
            'crowding_distance' for NSGA-II, 'fitness', 'strength',
            'raw_fitness' and 'density' for SPEA2.

    Returns:
        Non-empty array of indices into ``pop``. Repeats are allowed.
    """

    def __call__(
        self,
        pop: Population,
        n_parents: int,
        rng: np.random.Generator,
        **kwargs: np.ndarray,
    ) -> np.ndarray: ...


@runtime_checkable
class Ranker(Protocol):
    """Protocol for ranking and survivor selection.

    A ranker may list the keys of its state in a ``state_keys`` attribute so
    selectors that need particular keys can be checked before the run.

    Parameters:
        pop: Evaluated pool (previous survivors plus new offspring).
        n_survivors: Maximum number of individuals to keep.
        **kwargs: Ranker-specific input.

    Returns:
        A tuple of:
        - indices: Unique indices into ``pop`` of the survivors, in the
          ranker's total order (best first). At most ``n_survivors`` long.
        - state: Dictionary of arrays aligned with the survivors, passed on to
          the selector and the terminator.
    """

    def __call__(
        self,
        pop: Population,
        n_survivors: int,
        **kwargs: Any,
    ) -> tuple[np.ndarray, dict[str, np.ndarray]]: ...


@runtime_checkable
class Terminator(Protocol):
    """Protocol for termination criteria.

    Called once per generation, after ranking and before selection. Generation
    numbers start at 0 for the initial population.

    Parameters:
        generation: Index of the generation that was just ranked.
        ranked: The ranked survivors of that generation.

    Returns:
        True to stop the run.
    """

    def __call__(self, generation: int, ranked: RankedPopulation) -> bool: ...
