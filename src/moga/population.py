"""Population data structures for multi-objective optimization.

This module provides the core data structures for representing populations
of candidate solutions:

- Population: ordered solutions paired with their objective vectors
- IndividualView: a read-only view of a single individual
- RankedPopulation: a population together with the ranker's per-individual state

Solutions are opaque: the framework never looks inside them, it only hands them
to the user's operators. A population is a sequence, not a set, so duplicate
solutions are legal and preserved. All classes are frozen dataclasses.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, cast

import numpy as np


@dataclass(frozen=True)
class IndividualView:
    """Read-only view of a single individual in a population.

    Attributes:
        solution: The user's solution object.
        objectives: Objective vector of this individual, shape (n_obj,), or None.

    Example:
        >>> pop = Population(solutions=[1.0, 2.0], objectives=np.array([[1.0, 1.0], [4.0, 0.0]]))
        >>> pop[1].solution
        2.0
    """

    solution: Any
    objectives: np.ndarray | None


@dataclass(frozen=True)
class Population:
    """Ordered solutions aligned with their objective vectors.

    Row ``i`` of ``objectives`` always belongs to ``solutions[i]``. Every
    transformation (``take``, ``concat``) preserves this alignment.

    Attributes:
        solutions: Candidate solutions, any Python objects.
        objectives: Objective values, shape (n, n_obj), or None if not evaluated.

    Example:
        >>> pop = Population(solutions=[0.0, 1.0, 2.0], objectives=np.array([[0.0, 4.0], [1.0, 1.0], [4.0, 0.0]]))
        >>> len(pop)
        3
        >>> pop.n_obj
        2
    """

    solutions: list[Any]
    objectives: np.ndarray | None = None

    def __post_init__(self) -> None:
        """Validate shapes and take ownership of the inputs.

        Raises:
            TypeError: If solutions is not a sequence or objectives is not a numpy array.
            ValueError: If objectives is not 2D or its row count differs from the solutions.
        """
        if isinstance(self.solutions, (str, bytes)) or not isinstance(self.solutions, Sequence):
            raise TypeError(f"solutions must be a sequence, got {type(self.solutions).__name__}")
        object.__setattr__(self, "solutions", list(self.solutions))

        if self.objectives is not None:
            if not isinstance(self.objectives, np.ndarray):
                raise TypeError(f"objectives must be a numpy array, got {type(self.objectives).__name__}")
            if self.objectives.ndim != 2:
                raise ValueError(f"objectives must be 2D, got shape {self.objectives.shape}")
            n = len(self.solutions)
            if self.objectives.shape[0] != n:
                raise ValueError(
                    f"objectives has {self.objectives.shape[0]} rows, expected {n} to match solutions"
                )
            object.__setattr__(self, "objectives", self.objectives.astype(np.float64, copy=True))

    def __len__(self) -> int:
        return len(self.solutions)

    def __getitem__(self, idx: int) -> IndividualView:
        """Get a read-only view of a single individual.

        Raises:
            TypeError: If idx is not an integer.
            IndexError: If idx is out of bounds.
        """
        if not isinstance(idx, (int, np.integer)):
            raise TypeError(f"indices must be integers, got {type(idx).__name__}")

        n = len(self)
        original_idx = idx
        if idx < 0:
            idx = n + idx
        if idx < 0 or idx >= n:
            raise IndexError(f"index {original_idx} is out of bounds for population with {n} individuals")

        return IndividualView(
            solution=self.solutions[idx],
            objectives=self.objectives[idx] if self.objectives is not None else None,
        )

    @property
    def n_individuals(self) -> int:
        """Number of individuals (same as len(self))."""
        return len(self.solutions)

    @property
    def n_obj(self) -> int | None:
        """Number of objectives, or None if not evaluated."""
        if self.objectives is None:
            return None
        return self.objectives.shape[1]

    def take(self, indices: Sequence[int] | np.ndarray) -> "Population":
        """Return a new population made of the individuals at ``indices``.

        Order follows ``indices``; repeated indices repeat the individual.

        Example:
            >>> pop = Population(solutions=["a", "b", "c"])
            >>> pop.take([2, 0]).solutions
            ['c', 'a']
        """
        idx = np.asarray(indices, dtype=np.intp)
        solutions = [self.solutions[i] for i in idx]
        objectives = self.objectives[idx] if self.objectives is not None else None
        return Population(solutions=solutions, objectives=objectives)

    def concat(self, other: "Population") -> "Population":
        """Append ``other`` after this population.

        Raises:
            ValueError: If exactly one of the two populations is evaluated, or the
                objective counts differ.
        """
        if (self.objectives is None) != (other.objectives is None):
            raise ValueError("cannot concatenate an evaluated population with an unevaluated one")
        objectives = None
        if self.objectives is not None and other.objectives is not None:
            if len(self) and len(other) and self.n_obj != other.n_obj:
                raise ValueError(f"objective counts differ: {self.n_obj} vs {other.n_obj}")
            objectives = np.concatenate([self.objectives, other.objectives])
        return Population(solutions=self.solutions + other.solutions, objectives=objectives)


@dataclass(frozen=True)
class RankedPopulation:
    """A population together with the state computed by a ranker.

    ``state`` maps names such as ``"rank"``, ``"crowding_distance"`` or
    ``"fitness"`` to arrays aligned with the population. This is what
    selectors and terminators receive.

    Attributes:
        population: The ranked, evaluated individuals.
        state: Per-individual ranking arrays, each of shape (n,).
    """

    population: Population
    state: dict[str, np.ndarray] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.population.objectives is None:
            raise ValueError("RankedPopulation requires an evaluated population")
        n = len(self.population)
        copied: dict[str, np.ndarray] = {}
        for key, values in self.state.items():
            arr = np.asarray(values)
            if arr.ndim != 1 or arr.shape[0] != n:
                raise ValueError(f"state '{key}' has shape {arr.shape}, expected ({n},)")
            copied[key] = arr.copy()
        object.__setattr__(self, "state", copied)

    def __len__(self) -> int:
        return len(self.population)

    @property
    def solutions(self) -> list[Any]:
        return self.population.solutions

    @property
    def objectives(self) -> np.ndarray:
        # __post_init__ rejects unevaluated populations
        return cast(np.ndarray, self.population.objectives)
