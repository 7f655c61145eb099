"""Result type returned by the optimizer.

The result is immutable (a frozen dataclass). Arrays are copied on
construction.
"""

from dataclasses import dataclass
from typing import Any

import numpy as np

from moga.population import Population, RankedPopulation


@dataclass(frozen=True)
class OptimizationResult:
    """Outcome of one optimization run.

    Attributes:
        solutions: The non-dominated solutions among the final survivors.
        objectives: Objective vectors aligned with ``solutions``, shape (k, n_obj).
        survivors: All final survivors with the ranker's state ('rank' and
            'crowding_distance' for NSGA-II, 'fitness' and friends for SPEA2).
        generations: Number of generations of offspring produced.
        evaluations: Total number of objective function evaluations performed.

    Example:
        >>> result = optimize(population, config)
        >>> for x, f in zip(result.solutions, result.objectives):
        ...     print(x, f)
    """

    solutions: list[Any]
    objectives: np.ndarray
    survivors: RankedPopulation
    generations: int
    evaluations: int

    def __post_init__(self) -> None:
        """Validate alignment and copy the inputs.

        Raises:
            TypeError: If objectives is not a numpy array.
            ValueError: If objectives is not 2D or does not match the solutions.
        """
        if not isinstance(self.objectives, np.ndarray):
            raise TypeError(f"objectives must be a numpy array, got {type(self.objectives).__name__}")
        if self.objectives.ndim != 2:
            raise ValueError(f"objectives must be 2D, got shape {self.objectives.shape}")
        if self.objectives.shape[0] != len(self.solutions):
            raise ValueError(
                f"objectives has {self.objectives.shape[0]} rows, expected {len(self.solutions)} to match solutions"
            )
        object.__setattr__(self, "solutions", list(self.solutions))
        object.__setattr__(self, "objectives", self.objectives.copy())

    def __len__(self) -> int:
        return len(self.solutions)

    @property
    def pareto_front(self) -> Population:
        """The non-dominated solutions and their objectives as a Population."""
        return Population(solutions=self.solutions, objectives=self.objectives)
