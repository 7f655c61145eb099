"""Shared test fixtures for moga tests.

This module provides common fixtures used across test modules:
- rng: Seeded random number generator
- front_population: Four mutually non-dominated individuals
- layered_population: Individuals spread over three Pareto fronts
- Operator fixtures for the optimizer loop
"""

import numpy as np
import pytest

from moga import Population


@pytest.fixture
def rng() -> np.random.Generator:
    """Provide a seeded random number generator for deterministic tests."""
    return np.random.default_rng(42)


@pytest.fixture
def front_population() -> Population:
    """Four individuals on one linear Pareto front."""
    objectives = np.array([[1.0, 4.0], [2.0, 3.0], [3.0, 2.0], [4.0, 1.0]])
    return Population(solutions=["a", "b", "c", "d"], objectives=objectives)


@pytest.fixture
def layered_population() -> Population:
    """Six individuals on three fronts: {0, 1}, {2, 3}, {4, 5}."""
    objectives = np.array(
        [
            [1.0, 2.0],
            [2.0, 1.0],
            [2.0, 3.0],
            [3.0, 2.0],
            [3.0, 4.0],
            [4.0, 3.0],
        ]
    )
    return Population(solutions=list(range(6)), objectives=objectives)


@pytest.fixture
def quadratic_evaluate():
    """Bi-objective evaluation f1 = x^2, f2 = (x - 2)^2 of a scalar solution."""

    def evaluate(x: float) -> np.ndarray:
        return np.array([x**2, (x - 2) ** 2], dtype=np.float64)

    return evaluate


@pytest.fixture
def first_parent():
    """Recombination that returns the first parent unchanged."""

    def recombine(a, b):
        return a

    return recombine


@pytest.fixture
def identity_mutate():
    """Mutation that returns the solution unchanged."""

    def mutate(x):
        return x

    return mutate


@pytest.fixture
def tracking_recombine():
    """Recombination that records every call.

    Returns a tuple of (recombine_fn, call_log).
    """
    call_log: list[tuple[float, float]] = []

    def recombine(a: float, b: float) -> float:
        call_log.append((a, b))
        return (a + b) / 2

    return recombine, call_log


@pytest.fixture
def schaffer_problem():
    """Schaffer N1 on a real interval with blend recombination and Gaussian mutation.

    Returns:
        Dict with evaluate, recombine and mutate functions and a mutation rng.
    """
    mutation_rng = np.random.default_rng(7)

    def evaluate(x: float) -> np.ndarray:
        return np.array([x**2, (x - 2) ** 2])

    def recombine(a: float, b: float) -> float:
        return (a + b) / 2

    def mutate(x: float) -> float:
        return float(np.clip(x + mutation_rng.normal(0.0, 0.1), -10.0, 10.0))

    return {"evaluate": evaluate, "recombine": recombine, "mutate": mutate}
