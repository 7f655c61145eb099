"""Classic bi-objective test problems.

Both problems have 2 objectives to minimize and a known Pareto front:

- Schaffer N1: one real variable, Pareto set x in [0, 2]
- Binh and Korn: two bounded real variables, convex front

Solutions are plain Python objects (a float, or an (x, y) tuple), which the
optimizer treats as opaque. Each problem bundles an initializer, the
evaluation function and variation operators suited to its representation.

References:
    Schaffer, J. D. (1985). Multiple objective optimization with vector
    evaluated genetic algorithms.
    Binh, T. T., & Korn, U. (1997). MOBES: A multiobjective evolution strategy
    for constrained optimization problems.
"""

from collections.abc import Callable
from dataclasses import dataclass

import numpy as np

SBX_ETA: float = 2.0
MUTATION_SIGMA: float = 0.1


@dataclass(frozen=True)
class Problem:
    """A benchmark problem and its operators.

    Attributes:
        name: Short problem name.
        init: Draws one random solution.
        evaluate: Objective vector of one solution.
        bounds: (lower, upper) bound per variable.
        ref_point: Hypervolume reference point, slightly worse than the nadir.
    """

    name: str
    init: Callable[[np.random.Generator], object]
    evaluate: Callable[[object], np.ndarray]
    bounds: tuple[tuple[float, float], ...]
    ref_point: np.ndarray


def sbx_pair(a: float, b: float, u: float, eta: float = SBX_ETA) -> tuple[float, float]:
    """Simulated binary crossover of two real values for a uniform draw ``u``."""
    beta = (2.0 * u) ** (1.0 / (eta + 1.0)) if u <= 0.5 else (1.0 / (2.0 * (1.0 - u))) ** (1.0 / (eta + 1.0))
    return 0.5 * ((a + b) - beta * (b - a)), 0.5 * ((a + b) + beta * (b - a))


def schaffer_n1(x: float) -> np.ndarray:
    """Schaffer N1: f1 = x^2, f2 = (x - 2)^2."""
    return np.array([x**2, (x - 2.0) ** 2])


def binh_korn(s: tuple[float, float]) -> np.ndarray:
    """Binh and Korn: f1 = 4x^2 + 4y^2, f2 = (x - 5)^2 + (y - 5)^2.

    The original problem has two constraints; here only the box bounds
    x in [0, 5], y in [0, 3] are enforced, by the operators.
    """
    x, y = s
    return np.array([4.0 * x**2 + 4.0 * y**2, (x - 5.0) ** 2 + (y - 5.0) ** 2])


SCHAFFER_N1 = Problem(
    name="schaffer_n1",
    init=lambda rng: float(rng.uniform(-10.0, 10.0)),
    evaluate=schaffer_n1,
    bounds=((-10.0, 10.0),),
    ref_point=np.array([4.4, 4.4]),
)

BINH_KORN = Problem(
    name="binh_korn",
    init=lambda rng: (float(rng.uniform(0.0, 5.0)), float(rng.uniform(0.0, 3.0))),
    evaluate=binh_korn,
    bounds=((0.0, 5.0), (0.0, 3.0)),
    ref_point=np.array([140.0, 55.0]),
)

PROBLEMS: dict[str, Problem] = {p.name: p for p in (SCHAFFER_N1, BINH_KORN)}


def make_operators(problem: Problem, rng: np.random.Generator):
    """Build SBX recombination and Gaussian mutation for a problem.

    Scalar problems use floats, multi-variable problems use tuples.

    Returns:
        Tuple of (recombine, mutate).
    """
    lower = np.array([b[0] for b in problem.bounds])
    upper = np.array([b[1] for b in problem.bounds])
    scalar = len(problem.bounds) == 1

    def pack(values: np.ndarray):
        values = np.clip(values, lower, upper)
        return float(values[0]) if scalar else tuple(float(v) for v in values)

    def recombine(a, b):
        va, vb = np.atleast_1d(np.asarray(a, dtype=np.float64)), np.atleast_1d(np.asarray(b, dtype=np.float64))
        child = np.array([sbx_pair(x1, x2, rng.random())[0] for x1, x2 in zip(va, vb)])
        return pack(child)

    def mutate(s):
        values = np.atleast_1d(np.asarray(s, dtype=np.float64))
        return pack(values + rng.normal(0.0, MUTATION_SIGMA * (upper - lower)))

    return recombine, mutate
