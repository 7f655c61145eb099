"""moga: multi-objective genetic algorithms over opaque solutions.

A pure numpy implementation of NSGA-II and SPEA2. The user supplies the
initial solutions and the operators (evaluation, recombination, mutation,
termination); the framework drives the generational loop and returns the
non-dominated solutions it found. Solutions can be any Python objects.

Example (NSGA-II):
    >>> import numpy as np
    >>> from moga import max_generations, nsga2
    >>> result = nsga2(
    ...     list(range(10)),
    ...     evaluate=lambda x: np.array([x**2, (x - 2) ** 2]),
    ...     recombine=lambda a, b: a,
    ...     mutate=lambda x: x,
    ...     terminate=max_generations(1),
    ...     seed=42,
    ... )
    >>> 9 in result.solutions
    False

Example (SPEA2 with a full configuration):
    >>> from moga import Execution, OptimizerConfig, optimize
    >>> config = OptimizerConfig(
    ...     evaluate=lambda x: np.array([x**2, (x - 2) ** 2]),
    ...     recombine=lambda a, b: (a + b) / 2,
    ...     mutate=lambda x: x,
    ...     terminate=max_generations(3),
    ...     ranking="spea2",
    ...     archive_size=4,
    ...     evaluation=Execution.PARALLEL_EACH,
    ...     n_workers=2,
    ...     seed=42,
    ... )
    >>> len(optimize([float(x) for x in range(10)], config).survivors)
    4
"""

from moga.config import OptimizerConfig
from moga.errors import ConfigurationError, EmptySelectionError, OperatorError, OptimizationError, Phase
from moga.execution import Execution, as_batch, execute, lift, lift_batched, lift_parallel
from moga.optimizer import nsga2, optimize, spea2
from moga.pairing import all_pairs, consecutive_pairs, random_pairs
from moga.population import IndividualView, Population, RankedPopulation
from moga.primitives import (
    crowded_order,
    crowding_distance,
    dominates,
    dominates_matrix,
    non_dominated_sort,
    pareto_fronts,
)
from moga.ranking import nsga2_ranking, spea2_ranking
from moga.registry import (
    PairingRegistry,
    RankingRegistry,
    SelectionRegistry,
    list_pairings,
    list_rankings,
    list_selections,
)
from moga.results import OptimizationResult
from moga.selection import (
    all_selection,
    best_selection,
    chunked_tournament,
    crowded_tournament,
    first_selection,
    fitness_tournament,
    random_selection,
    roulette_wheel,
)
from moga.strength import environmental_selection, spea2_fitness
from moga.termination import any_of, max_generations, no_improvement, target_objectives

__all__ = [
    # Optimizer
    "optimize",
    "nsga2",
    "spea2",
    "OptimizerConfig",
    "OptimizationResult",
    # Population
    "Population",
    "RankedPopulation",
    "IndividualView",
    # Errors
    "OptimizationError",
    "ConfigurationError",
    "OperatorError",
    "EmptySelectionError",
    "Phase",
    # Ranking
    "nsga2_ranking",
    "spea2_ranking",
    # Selection strategies
    "crowded_tournament",
    "fitness_tournament",
    "chunked_tournament",
    "roulette_wheel",
    "random_selection",
    "first_selection",
    "best_selection",
    "all_selection",
    # Pairing
    "consecutive_pairs",
    "all_pairs",
    "random_pairs",
    # Termination
    "max_generations",
    "target_objectives",
    "no_improvement",
    "any_of",
    # Execution
    "Execution",
    "execute",
    "lift",
    "lift_parallel",
    "lift_batched",
    "as_batch",
    # Primitives
    "dominates",
    "dominates_matrix",
    "non_dominated_sort",
    "pareto_fronts",
    "crowding_distance",
    "crowded_order",
    "spea2_fitness",
    "environmental_selection",
    # Registry system
    "SelectionRegistry",
    "RankingRegistry",
    "PairingRegistry",
    "list_selections",
    "list_rankings",
    "list_pairings",
]
