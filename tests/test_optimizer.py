"""Tests for the generational loop."""

import logging

import numpy as np
import pytest

from moga import nsga2, spea2
from moga.config import OptimizerConfig
from moga.errors import ConfigurationError, EmptySelectionError, OperatorError, Phase
from moga.execution import Execution
from moga.optimizer import optimize
from moga.population import Population, RankedPopulation
from moga.primitives import dominates_matrix
from moga.termination import max_generations


def make_config(evaluate, recombine, mutate, **kwargs) -> OptimizerConfig:
    kwargs.setdefault("terminate", max_generations(1))
    return OptimizerConfig(evaluate=evaluate, recombine=recombine, mutate=mutate, **kwargs)


class TestEndToEnd:
    """The integer example: x in {0..9}, f1 = x^2, f2 = (x - 2)^2."""

    @pytest.mark.parametrize("ranking", ["nsga2", "spea2"])
    def test_pareto_subset(self, ranking, quadratic_evaluate, first_parent, identity_mutate) -> None:
        """2 is on the front, 9 is not, and only 0..2 survive as non-dominated."""
        config = make_config(quadratic_evaluate, first_parent, identity_mutate, ranking=ranking, seed=1)
        result = optimize(list(range(10)), config)
        assert 2 in result.solutions
        assert 9 not in result.solutions
        assert set(result.solutions) <= {0, 1, 2}

    def test_objectives_aligned(self, quadratic_evaluate, first_parent, identity_mutate) -> None:
        """Result objectives belong to the result solutions."""
        result = optimize(list(range(10)), make_config(quadratic_evaluate, first_parent, identity_mutate))
        for x, f in zip(result.solutions, result.objectives):
            np.testing.assert_array_equal(f, quadratic_evaluate(x))

    def test_result_is_non_dominated(self, schaffer_problem, rng: np.random.Generator) -> None:
        """No returned solution dominates another."""
        initial = rng.uniform(-10, 10, size=20).tolist()
        result = nsga2(initial, **schaffer_problem, terminate=max_generations(15), seed=3)
        assert not dominates_matrix(result.objectives).any()
        assert len(result.survivors) == 20

    def test_converges_to_front(self, schaffer_problem, rng: np.random.Generator) -> None:
        """Both rankers move the population into the Pareto set [0, 2]."""
        initial = rng.uniform(-10, 10, size=20).tolist()
        for run in (nsga2, spea2):
            result = run(initial, **schaffer_problem, terminate=max_generations(40), seed=5)
            assert np.all(np.asarray(result.solutions) > -1.0)
            assert np.all(np.asarray(result.solutions) < 3.0)

    def test_accepts_population(self, quadratic_evaluate, first_parent, identity_mutate) -> None:
        """A Population is accepted and re-evaluated."""
        pop = Population(solutions=[0, 5, 9], objectives=np.zeros((3, 2)))
        result = optimize(pop, make_config(quadratic_evaluate, first_parent, identity_mutate))
        assert set(result.solutions) == {0}


class TestLoopBookkeeping:
    """Tests for counters, survivors and stopping."""

    def test_zero_generations(self, quadratic_evaluate, first_parent, identity_mutate) -> None:
        """Stopping at generation 0 evaluates the initial population only."""
        config = make_config(quadratic_evaluate, first_parent, identity_mutate, terminate=max_generations(0))
        result = optimize(list(range(10)), config)
        assert result.generations == 0
        assert result.evaluations == 10
        assert sorted(result.solutions) == [0, 1, 2]

    def test_evaluation_count(self, quadratic_evaluate, first_parent, identity_mutate) -> None:
        """Only offspring are evaluated after the initial population."""
        config = make_config(quadratic_evaluate, first_parent, identity_mutate, terminate=max_generations(3))
        result = optimize(list(range(10)), config)
        assert result.generations == 3
        assert result.evaluations == 10 + 3 * 10

    def test_all_pairing_offspring_count(self, quadratic_evaluate, tracking_recombine, identity_mutate) -> None:
        """All-pairs recombination produces one child per unordered pair."""
        recombine, log = tracking_recombine
        config = make_config(quadratic_evaluate, recombine, identity_mutate, pairing="all", select="first", n_parents=4)
        result = optimize([0.0, 1.0, 2.0, 3.0, 4.0], config)
        assert len(log) == 6
        assert result.evaluations == 5 + 6

    def test_archive_size(self, quadratic_evaluate, first_parent, identity_mutate) -> None:
        """SPEA2 keeps archive_size survivors."""
        config = make_config(
            quadratic_evaluate, first_parent, identity_mutate, ranking="spea2", archive_size=3, terminate=max_generations(2)
        )
        result = optimize(list(range(10)), config)
        assert len(result.survivors) == 3
        assert set(result.survivors.state) == {"fitness", "strength", "raw_fitness", "density"}

    def test_terminator_sees_ranked_population(self, quadratic_evaluate, first_parent, identity_mutate) -> None:
        """The terminator receives the generation number and ranked survivors."""
        seen: list[tuple[int, int]] = []

        def terminate(generation: int, ranked: RankedPopulation) -> bool:
            assert "rank" in ranked.state
            seen.append((generation, len(ranked)))
            return generation == 2

        optimize(list(range(6)), make_config(quadratic_evaluate, first_parent, identity_mutate, terminate=terminate))
        assert seen == [(0, 6), (1, 6), (2, 6)]

    def test_seed_reproducible(self, rng: np.random.Generator) -> None:
        """The same seed gives the same run when operators are deterministic."""
        initial = rng.uniform(-5, 5, size=12).tolist()

        def run() -> list[float]:
            config = make_config(
                lambda x: np.array([x**2, (x - 2) ** 2]),
                lambda a, b: (a + b) / 2,
                lambda x: x,
                select="random",
                pairing="random",
                terminate=max_generations(5),
                seed=11,
            )
            return optimize(initial, config).solutions

        assert run() == run()

    @pytest.mark.parametrize("policy", [Execution.PARALLEL_EACH, Execution.PARALLEL_BATCH])
    def test_parallel_matches_sequential(self, policy, quadratic_evaluate, first_parent, identity_mutate) -> None:
        """Parallel evaluation gives the same result as sequential."""
        sequential = optimize(list(range(10)), make_config(quadratic_evaluate, first_parent, identity_mutate, seed=4))
        parallel = optimize(
            list(range(10)),
            make_config(quadratic_evaluate, first_parent, identity_mutate, seed=4, evaluation=policy, n_workers=2),
        )
        assert parallel.solutions == sequential.solutions

    def test_batch_operators(self) -> None:
        """Batch policies hand whole lists to the operators."""
        config = make_config(
            lambda xs: [np.array([x**2, (x - 2) ** 2]) for x in xs],
            lambda couples: [a for a, _ in couples],
            lambda xs: list(xs),
            evaluation=Execution.BATCH,
            recombination=Execution.BATCH,
            mutation=Execution.BATCH,
        )
        result = optimize(list(range(10)), config)
        assert 9 not in result.solutions

    def test_logs_run(self, quadratic_evaluate, first_parent, identity_mutate, caplog) -> None:
        """Run start and end are logged at INFO, generations at DEBUG."""
        with caplog.at_level(logging.DEBUG, logger="moga.optimizer"):
            optimize(list(range(4)), make_config(quadratic_evaluate, first_parent, identity_mutate))
        messages = [r.getMessage() for r in caplog.records]
        assert any(m.startswith("starting optimization") for m in messages)
        assert any(m.startswith("generation 1") for m in messages)
        assert any(m.startswith("optimization finished after 1 generations") for m in messages)


class TestInPlaceMutation:
    """Mutators that change list-valued solutions in place and return None."""

    @staticmethod
    def run(mutate, **kwargs) -> list[list]:
        evaluated: list[list] = []

        def evaluate(x):
            evaluated.append(list(x))
            return np.array([x[0] ** 2, (x[0] - 2) ** 2])

        def recombine(a, b):
            return [(a[0] + b[0]) / 2]

        config = make_config(evaluate, recombine, mutate, terminate=max_generations(2), **kwargs)
        result = optimize([[float(x)] for x in range(10)], config)
        assert result.evaluations == 30
        assert all(isinstance(s, list) for s in result.survivors.solutions)
        return evaluated

    @pytest.mark.parametrize("policy", [Execution.SEQUENTIAL, Execution.PARALLEL_EACH])
    def test_offspring_kept(self, policy) -> None:
        """Returning None keeps the offspring with its in-place changes."""

        def mutate(x):
            x.append("mutated")

        evaluated = self.run(mutate, mutation=policy, n_workers=2)
        assert all(len(x) == 1 for x in evaluated[:10])
        assert all(x[1:] == ["mutated"] for x in evaluated[10:])

    def test_batch_offspring_kept(self) -> None:
        """A batch mutator returning None keeps the list it was given."""

        def mutate(xs):
            for x in xs:
                x.append("mutated")

        evaluated = self.run(mutate, mutation=Execution.BATCH)
        assert all(x[1:] == ["mutated"] for x in evaluated[10:])


class TestErrors:
    """Tests for error reporting."""

    def test_empty_initial_population(self, quadratic_evaluate, first_parent, identity_mutate) -> None:
        """An empty start is a configuration error."""
        with pytest.raises(ConfigurationError, match="empty"):
            optimize([], make_config(quadratic_evaluate, first_parent, identity_mutate))

    @pytest.mark.parametrize(
        ("evaluate", "message"),
        [
            (lambda x: np.array([]), "empty"),
            (lambda x: np.ones((2, 2)), "1D"),
            (lambda x: np.ones(2) if x < 5 else np.ones(3), "has 3 objectives, expected 2"),
        ],
    )
    def test_bad_objective_vectors(self, evaluate, message, first_parent, identity_mutate) -> None:
        """Malformed objective vectors are configuration errors."""
        with pytest.raises(ConfigurationError, match=message):
            optimize(list(range(10)), make_config(evaluate, first_parent, identity_mutate))

    def test_objective_count_checked_on_offspring(self, first_parent) -> None:
        """Offspring evaluations must keep the objective count."""
        calls = {"n": 0}

        def evaluate(x):
            calls["n"] += 1
            return np.ones(2) if calls["n"] <= 4 else np.ones(3)

        with pytest.raises(ConfigurationError, match="expected 2"):
            optimize(list(range(4)), make_config(evaluate, first_parent, lambda x: x))

    def test_batch_evaluation_wrong_count(self, first_parent, identity_mutate) -> None:
        """A batch evaluator must return one vector per solution."""
        config = make_config(lambda xs: [np.ones(2)], first_parent, identity_mutate, evaluation=Execution.BATCH)
        with pytest.raises(ConfigurationError, match="returned 1 objective vectors for 3 solutions"):
            optimize([1, 2, 3], config)

    @pytest.mark.parametrize("phase", [Phase.EVALUATION, Phase.RECOMBINATION, Phase.MUTATION, Phase.TERMINATION])
    def test_operator_failure_wrapped(self, phase, quadratic_evaluate, first_parent, identity_mutate, caplog) -> None:
        """A raising operator surfaces as OperatorError with its phase and cause."""
        boom = RuntimeError("boom")

        def fail(*args):
            raise boom

        operators = {
            Phase.EVALUATION: ("evaluate", fail),
            Phase.RECOMBINATION: ("recombine", fail),
            Phase.MUTATION: ("mutate", fail),
            Phase.TERMINATION: ("terminate", fail),
        }
        name, fn = operators[phase]
        kwargs = {
            "evaluate": quadratic_evaluate,
            "recombine": first_parent,
            "mutate": identity_mutate,
            "terminate": max_generations(1),
        }
        kwargs[name] = fn
        config = OptimizerConfig(**kwargs)

        with caplog.at_level(logging.ERROR, logger="moga.optimizer"), pytest.raises(OperatorError) as info:
            optimize(list(range(4)), config)
        assert info.value.phase is phase
        assert info.value.__cause__ is boom
        assert info.value.error is boom
        assert any(phase.value in r.getMessage() for r in caplog.records)

    def test_selector_failure(self, quadratic_evaluate, first_parent, identity_mutate) -> None:
        """A raising selector is a selection OperatorError."""

        def selector(pop, n_parents, rng, **kwargs):
            raise KeyError("fitness")

        config = make_config(quadratic_evaluate, first_parent, identity_mutate, select=selector)
        with pytest.raises(OperatorError) as info:
            optimize(list(range(4)), config)
        assert info.value.phase is Phase.SELECTION
        assert isinstance(info.value.__cause__, KeyError)

    def test_empty_selection(self, quadratic_evaluate, first_parent, identity_mutate) -> None:
        """A selector returning nothing raises EmptySelectionError."""
        config = make_config(
            quadratic_evaluate, first_parent, identity_mutate, select=lambda pop, n, rng, **kw: np.array([], dtype=int)
        )
        with pytest.raises(EmptySelectionError, match="no parents in generation 0") as info:
            optimize(list(range(4)), config)
        assert info.value.phase is Phase.SELECTION

    def test_out_of_range_selection(self, quadratic_evaluate, first_parent, identity_mutate) -> None:
        """Indices outside the survivors are a selection error."""
        config = make_config(quadratic_evaluate, first_parent, identity_mutate, select=lambda pop, n, rng, **kw: [0, 99])
        with pytest.raises(OperatorError) as info:
            optimize(list(range(4)), config)
        assert info.value.phase is Phase.SELECTION
        assert isinstance(info.value.error, IndexError)

    def test_ranker_failure(self, quadratic_evaluate, first_parent, identity_mutate) -> None:
        """A raising ranker is a ranking OperatorError."""

        def ranker(pop, n_survivors, **kwargs):
            raise ValueError("bad ranker")

        config = make_config(quadratic_evaluate, first_parent, identity_mutate, ranking=ranker)
        with pytest.raises(OperatorError) as info:
            optimize(list(range(4)), config)
        assert info.value.phase is Phase.RANKING
        assert info.value.generation == 0

    def test_nsga2_rejects_archive_size(self, schaffer_problem) -> None:
        """The NSGA-II helper has no archive."""
        with pytest.raises(ConfigurationError, match="archive_size"):
            nsga2([0.0, 1.0], **schaffer_problem, terminate=max_generations(1), archive_size=5)
