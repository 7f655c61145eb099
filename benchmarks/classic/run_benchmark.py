"""Benchmark runner comparing moga's NSGA-II and SPEA2, with Pymoo as reference.

Runs both rankers on the Schaffer N1 and Binh-Korn problems with consistent
parameters and reports the hypervolume of the returned fronts.

Usage:
    python benchmarks/classic/run_benchmark.py
"""

import json
import logging
import sys
import time
from collections import defaultdict
from datetime import UTC, datetime
from pathlib import Path

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent.parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

import numpy as np
from pymoo.algorithms.moo.nsga2 import NSGA2
from pymoo.core.problem import Problem as PymooProblem
from pymoo.optimize import minimize
from pymoo.termination import get_termination

from benchmarks.classic.problems import PROBLEMS, Problem, make_operators
from benchmarks.metrics import hypervolume
from moga import max_generations, nsga2, spea2

# Configure logging
logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)


# Experiment parameters
POP_SIZE = 100
N_GENERATIONS = 200
N_RUNS = 5
SEEDS = list(range(N_RUNS))
RUNNERS = ["moga-nsga2", "moga-spea2", "pymoo"]


def run_moga(problem: Problem, seed: int, ranking: str) -> tuple[float, float]:
    """Run one moga optimization.

    Args:
        problem: The benchmark problem.
        seed: Random seed for reproducibility.
        ranking: "nsga2" or "spea2".

    Returns:
        Tuple of (hypervolume, elapsed_time_seconds).
    """
    rng = np.random.default_rng(seed)
    recombine, mutate = make_operators(problem, np.random.default_rng(seed + 1000))
    initial = [problem.init(rng) for _ in range(POP_SIZE)]
    run = nsga2 if ranking == "nsga2" else spea2

    start_time = time.perf_counter()
    result = run(
        initial,
        evaluate=problem.evaluate,
        recombine=recombine,
        mutate=mutate,
        terminate=max_generations(N_GENERATIONS),
        seed=seed,
    )
    elapsed = time.perf_counter() - start_time

    return hypervolume(result.objectives, problem.ref_point), elapsed


class PymooWrapper(PymooProblem):
    """Wrapper to use a benchmark problem with Pymoo on real vectors."""

    def __init__(self, problem: Problem) -> None:
        lower = np.array([b[0] for b in problem.bounds])
        upper = np.array([b[1] for b in problem.bounds])
        super().__init__(n_var=len(problem.bounds), n_obj=2, xl=lower, xu=upper)
        self._problem = problem

    def _evaluate(self, x: np.ndarray, out: dict, *args, **kwargs) -> None:
        if self.n_var == 1:
            out["F"] = np.array([self._problem.evaluate(float(xi[0])) for xi in x])
        else:
            out["F"] = np.array([self._problem.evaluate(tuple(xi)) for xi in x])


def run_pymoo(problem: Problem, seed: int) -> tuple[float, float]:
    """Run NSGA-II using Pymoo with its default operators.

    Returns:
        Tuple of (hypervolume, elapsed_time_seconds).
    """
    start_time = time.perf_counter()
    result = minimize(
        PymooWrapper(problem),
        NSGA2(pop_size=POP_SIZE),
        get_termination("n_gen", N_GENERATIONS),
        seed=seed,
        verbose=False,
    )
    elapsed = time.perf_counter() - start_time

    return hypervolume(result.F, problem.ref_point), elapsed


def run_benchmark() -> dict:
    """Run the full benchmark suite.

    Returns:
        Dictionary containing metadata and results.
    """
    metadata = {
        "timestamp": datetime.now(UTC).isoformat(),
        "parameters": {
            "pop_size": POP_SIZE,
            "n_generations": N_GENERATIONS,
            "n_runs": N_RUNS,
            "seeds": SEEDS,
        },
    }

    results = []
    total_runs = len(PROBLEMS) * len(RUNNERS) * N_RUNS
    current_run = 0

    for problem in PROBLEMS.values():
        for runner in RUNNERS:
            for seed in SEEDS:
                current_run += 1
                logger.info("Running [%d/%d]: %s on %s (seed=%d)", current_run, total_runs, runner, problem.name, seed)

                if runner == "pymoo":
                    hv, elapsed = run_pymoo(problem, seed)
                else:
                    hv, elapsed = run_moga(problem, seed, runner.removeprefix("moga-"))

                results.append(
                    {
                        "runner": runner,
                        "problem": problem.name,
                        "seed": seed,
                        "hypervolume": hv,
                        "time_seconds": elapsed,
                    }
                )
                logger.info("  HV: %.4f, Time: %.2fs", hv, elapsed)

    return {"metadata": metadata, "results": results}


def print_summary(results: dict) -> None:
    """Print mean and standard deviation of hypervolume and mean run time."""
    hv_data = defaultdict(lambda: defaultdict(list))
    time_data = defaultdict(lambda: defaultdict(list))
    for r in results["results"]:
        hv_data[r["problem"]][r["runner"]].append(r["hypervolume"])
        time_data[r["problem"]][r["runner"]].append(r["time_seconds"])

    print("\n" + "=" * 80)
    print("BENCHMARK SUMMARY")
    print("=" * 80)
    print(f"\nParameters: pop_size={POP_SIZE}, generations={N_GENERATIONS}, runs={N_RUNS}\n")

    print(f"{'Problem':<14}" + "".join(f"{runner:>22}" for runner in RUNNERS))
    print("-" * 80)
    for problem in sorted(hv_data):
        row = f"{problem:<14}"
        for runner in RUNNERS:
            hvs = hv_data[problem][runner]
            row += f"{np.mean(hvs):>12.4f} +/- {np.std(hvs):.4f}" if hvs else f"{'N/A':>22}"
        print(row)
    print("-" * 80)

    print("\nTiming (mean seconds per run):")
    print(f"{'Problem':<14}" + "".join(f"{runner:>15}" for runner in RUNNERS))
    for problem in sorted(time_data):
        row = f"{problem:<14}"
        for runner in RUNNERS:
            times = time_data[problem][runner]
            row += f"{np.mean(times):>15.2f}" if times else f"{'N/A':>15}"
        print(row)
    print()


def main() -> None:
    """Main entry point for the benchmark."""
    logger.info("Starting classic benchmark suite")
    results = run_benchmark()

    output_path = Path(__file__).parent / "results" / "benchmark_results.json"
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w") as f:
        json.dump(results, f, indent=2)
    logger.info("Results saved to %s", output_path)

    print_summary(results)


if __name__ == "__main__":
    main()
