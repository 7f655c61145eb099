"""Generational loop for multi-objective optimization.

The loop is shared by every ranking strategy:

1. Evaluate the initial population (generation 0).
2. Rank the pool and keep the survivors (NSGA-II: rank and crowding,
   SPEA2: environmental selection into the archive).
3. Ask the terminator whether to stop.
4. Select parents from the survivors and pair them.
5. Recombine each pair into one offspring, then mutate the offspring.
6. Evaluate the offspring. The next pool is survivors plus offspring.

Survivors carry over between generations, so the best individuals found so far
are never lost, and only offspring are evaluated after generation 0.

Example:
    >>> import numpy as np
    >>> from moga import OptimizerConfig, max_generations, optimize
    >>> config = OptimizerConfig(
    ...     evaluate=lambda x: np.array([x**2, (x - 2) ** 2]),
    ...     recombine=lambda a, b: a,
    ...     mutate=lambda x: x,
    ...     terminate=max_generations(1),
    ... )
    >>> result = optimize(list(range(10)), config)
    >>> 2 in result.solutions, 9 in result.solutions
    (True, False)
"""

import logging
from collections.abc import Callable, Sequence
from typing import Any

import numpy as np

from moga.config import OptimizerConfig
from moga.errors import ConfigurationError, EmptySelectionError, OperatorError, Phase
from moga.execution import Execution, execute
from moga.population import Population, RankedPopulation
from moga.primitives import non_dominated_sort
from moga.protocols import ParentSelector
from moga.results import OptimizationResult

logger = logging.getLogger(__name__)


def _operator_error(phase: Phase, generation: int, exc: Exception) -> OperatorError:
    logger.error("%s failed in generation %d: %r", phase.value, generation, exc)
    return OperatorError(phase, generation, exc)


def _check_objectives(raw: Sequence[Any], n_expected: int, n_obj: int | None, generation: int) -> np.ndarray:
    """Validate evaluator output and stack it into an (n, n_obj) matrix.

    Raises:
        ConfigurationError: If the count differs from the number of solutions,
            a vector is not 1D or empty, or the objective count changes.
    """
    if len(raw) != n_expected:
        raise ConfigurationError(
            f"evaluation returned {len(raw)} objective vectors for {n_expected} solutions in generation {generation}"
        )
    rows = []
    for i, values in enumerate(raw):
        try:
            row = np.asarray(values, dtype=np.float64)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"objective vector {i} is not numeric: {values!r}") from exc
        if row.ndim != 1:
            raise ConfigurationError(f"objective vector {i} must be 1D, got shape {row.shape}")
        if row.size == 0:
            raise ConfigurationError(f"objective vector {i} is empty")
        if n_obj is None:
            n_obj = row.size
        elif row.size != n_obj:
            raise ConfigurationError(f"objective vector {i} has {row.size} objectives, expected {n_obj}")
        rows.append(row)
    if not rows:
        return np.empty((0, n_obj or 0), dtype=np.float64)
    return np.stack(rows)


def _evaluate(solutions: list[Any], config: OptimizerConfig, n_obj: int | None, generation: int) -> Population:
    try:
        if config.evaluation is Execution.BATCH:
            # the count is checked below, as for every other policy
            raw = list(config.evaluate(list(solutions)))
        else:
            raw = execute(config.evaluate, solutions, config.evaluation, config.n_workers)
    except Exception as exc:
        raise _operator_error(Phase.EVALUATION, generation, exc) from exc
    objectives = _check_objectives(raw, len(solutions), n_obj, generation)
    return Population(solutions=solutions, objectives=objectives)


def _rank(pool: Population, config: OptimizerConfig, n_survivors: int, generation: int) -> RankedPopulation:
    try:
        indices, state = config.ranker(pool, n_survivors)
        return RankedPopulation(pool.take(indices), state)
    except Exception as exc:
        raise _operator_error(Phase.RANKING, generation, exc) from exc


def _select(ranked: RankedPopulation, config: OptimizerConfig, n_parents: int, rng: np.random.Generator, generation: int) -> np.ndarray:
    try:
        chosen = config.selector(ranked.population, n_parents, rng, **ranked.state)
        indices = np.asarray(chosen, dtype=np.intp).ravel()
    except Exception as exc:
        raise _operator_error(Phase.SELECTION, generation, exc) from exc

    if indices.size == 0:
        logger.error("selector returned no parents in generation %d", generation)
        raise EmptySelectionError(generation)
    if indices.min() < 0 or indices.max() >= len(ranked):
        exc = IndexError(f"selected index out of range for {len(ranked)} survivors")
        raise _operator_error(Phase.SELECTION, generation, exc) from exc
    return indices


def _keep_if_none(mutate: Callable[[Any], Any]) -> Callable[[Any], Any]:
    """Wrap a mutator so that returning None keeps the object it changed in place.

    Under the batch policy the argument is the list of offspring.
    """

    def mutate_or_keep(item: Any) -> Any:
        mutated = mutate(item)
        return item if mutated is None else mutated

    return mutate_or_keep


def _breed(
    parents: list[Any],
    config: OptimizerConfig,
    rng: np.random.Generator,
    generation: int,
) -> list[Any]:
    """Pair the parents, recombine each pair and mutate every offspring."""
    try:
        pairs = np.asarray(config.pair(len(parents), rng), dtype=np.intp).reshape(-1, 2)
        couples = [(parents[a], parents[b]) for a, b in pairs]
        if config.recombination is Execution.BATCH:
            offspring = execute(config.recombine, couples, config.recombination, config.n_workers)
        else:
            offspring = execute(lambda couple: config.recombine(*couple), couples, config.recombination, config.n_workers)
    except Exception as exc:
        raise _operator_error(Phase.RECOMBINATION, generation, exc) from exc

    try:
        return execute(_keep_if_none(config.mutate), offspring, config.mutation, config.n_workers)
    except Exception as exc:
        raise _operator_error(Phase.MUTATION, generation, exc) from exc


def optimize(initial_population: Sequence[Any] | Population, config: OptimizerConfig) -> OptimizationResult:
    """Run the generational loop until the terminator stops it.

    Args:
        initial_population: Starting solutions, as a sequence or a Population.
            Any objectives already attached are ignored; every solution is
            evaluated.
        config: Operators and strategies for the run.

    Returns:
        OptimizationResult holding the non-dominated subset of the final
        survivors, the survivors with their ranking state, and run counters.

    Raises:
        ConfigurationError: If the initial population is empty or an
            evaluation returns inconsistent objective vectors.
        OperatorError: If a user operator or strategy raises. ``phase`` names
            the failing step and the original exception is the ``__cause__``.
        EmptySelectionError: If the selector returns no parents.
    """
    if isinstance(initial_population, Population):
        solutions = list(initial_population.solutions)
    else:
        solutions = list(initial_population)
    if not solutions:
        raise ConfigurationError("initial population is empty")

    n_survivors = config.archive_size if config.archive_size is not None else len(solutions)
    n_parents = config.n_parents if config.n_parents is not None else n_survivors
    rng = np.random.default_rng(config.seed)

    logger.info(
        "starting optimization: %d initial solutions, %d survivors per generation, %d parents",
        len(solutions),
        n_survivors,
        n_parents,
    )

    generation = 0
    pool = _evaluate(solutions, config, None, generation)
    n_obj = pool.n_obj
    evaluations = len(pool)

    while True:
        ranked = _rank(pool, config, n_survivors, generation)
        logger.debug(
            "generation %d: pool=%d survivors=%d evaluations=%d",
            generation,
            len(pool),
            len(ranked),
            evaluations,
        )

        try:
            stop = config.terminate(generation, ranked)
        except Exception as exc:
            raise _operator_error(Phase.TERMINATION, generation, exc) from exc
        if stop:
            break

        parent_indices = _select(ranked, config, n_parents, rng, generation)
        parents = [ranked.solutions[i] for i in parent_indices]
        offspring = _breed(parents, config, rng, generation)

        offspring_pop = _evaluate(list(offspring), config, n_obj, generation + 1)
        evaluations += len(offspring_pop)
        pool = ranked.population.concat(offspring_pop)
        generation += 1

    front = np.flatnonzero(non_dominated_sort(ranked.objectives) == 0)
    logger.info(
        "optimization finished after %d generations: %d non-dominated solutions, %d evaluations",
        generation,
        len(front),
        evaluations,
    )
    return OptimizationResult(
        solutions=[ranked.solutions[i] for i in front],
        objectives=ranked.objectives[front],
        survivors=ranked,
        generations=generation,
        evaluations=evaluations,
    )


def nsga2(
    initial_population: Sequence[Any] | Population,
    evaluate: Callable[[Any], Any],
    recombine: Callable[[Any, Any], Any],
    mutate: Callable[[Any], Any],
    terminate: Callable[[int, RankedPopulation], bool],
    select: str | ParentSelector = "crowded",
    seed: int | None = None,
    n_workers: int = 1,
    **kwargs: Any,
) -> OptimizationResult:
    """Run NSGA-II: rank-and-crowding survival over survivors plus offspring.

    The number of survivors equals the initial population size.

    Args:
        initial_population: Starting solutions.
        evaluate: Maps one solution to its objective vector.
        recombine: Combines two parents into one offspring.
        mutate: Returns a mutated solution.
        terminate: ``(generation, ranked) -> bool`` stop criterion.
        select: Parent selector name or callable (default: "crowded").
        seed: Random seed for reproducibility.
        n_workers: Workers for parallel execution policies.
        **kwargs: Further OptimizerConfig fields (pairing, execution policies, n_parents).

    Returns:
        OptimizationResult with the non-dominated solutions found.

    Example:
        >>> result = nsga2(
        ...     initial_population=rng.uniform(-10, 10, size=20).tolist(),
        ...     evaluate=lambda x: np.array([x**2, (x - 2) ** 2]),
        ...     recombine=lambda a, b: (a + b) / 2,
        ...     mutate=lambda x: x + rng.normal(0.0, 0.1),
        ...     terminate=max_generations(50),
        ...     seed=42,
        ... )
    """
    config = OptimizerConfig(
        evaluate=evaluate,
        recombine=recombine,
        mutate=mutate,
        terminate=terminate,
        ranking="nsga2",
        select=select,
        seed=seed,
        n_workers=n_workers,
        **kwargs,
    )
    return optimize(initial_population, config)


def spea2(
    initial_population: Sequence[Any] | Population,
    evaluate: Callable[[Any], Any],
    recombine: Callable[[Any, Any], Any],
    mutate: Callable[[Any], Any],
    terminate: Callable[[int, RankedPopulation], bool],
    archive_size: int | None = None,
    select: str | ParentSelector = "tournament",
    seed: int | None = None,
    n_workers: int = 1,
    **kwargs: Any,
) -> OptimizationResult:
    """Run SPEA2: strength and density fitness with a fixed-size archive.

    Args:
        initial_population: Starting solutions.
        evaluate: Maps one solution to its objective vector.
        recombine: Combines two parents into one offspring.
        mutate: Returns a mutated solution.
        terminate: ``(generation, ranked) -> bool`` stop criterion.
        archive_size: Archive capacity (default: initial population size).
        select: Parent selector name or callable (default: "tournament").
        seed: Random seed for reproducibility.
        n_workers: Workers for parallel execution policies.
        **kwargs: Further OptimizerConfig fields.

    Returns:
        OptimizationResult with the non-dominated archive members.
    """
    config = OptimizerConfig(
        evaluate=evaluate,
        recombine=recombine,
        mutate=mutate,
        terminate=terminate,
        ranking="spea2",
        select=select,
        archive_size=archive_size,
        seed=seed,
        n_workers=n_workers,
        **kwargs,
    )
    return optimize(initial_population, config)
