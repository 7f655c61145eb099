"""Tests for the NSGA-II and SPEA2 rankers."""

import numpy as np
import pytest

from moga.population import Population
from moga.primitives import non_dominated_sort
from moga.protocols import Ranker
from moga.ranking import nsga2_ranking, spea2_ranking
from moga.registry import RankingRegistry


class TestNsga2Ranking:
    """Tests for rank-and-crowding survival."""

    def test_whole_fronts_first(self, layered_population: Population) -> None:
        """Whole fronts survive before any member of a worse front."""
        indices, state = nsga2_ranking()(layered_population, 3)
        assert indices.tolist() == [0, 1, 2]
        assert state["rank"].tolist() == [0, 0, 1]

    def test_critical_front_by_crowding(self, front_population: Population) -> None:
        """The critical front keeps its most isolated members."""
        indices, state = nsga2_ranking()(front_population, 3)
        assert indices.tolist() == [0, 3, 1]
        assert state["rank"].tolist() == [0, 0, 0]

    def test_crowding_recomputed_among_survivors(self, front_population: Population) -> None:
        """Crowding in the state is measured among the survivors only."""
        _, state = nsga2_ranking()(front_population, 3)
        cd = state["crowding_distance"]
        assert np.isinf(cd[0]) and np.isinf(cd[1])
        assert cd[2] == pytest.approx(2.0)

    def test_everyone_survives_small_pool(self, layered_population: Population) -> None:
        """Asking for more survivors than the pool keeps the whole pool."""
        indices, state = nsga2_ranking()(layered_population, 10)
        assert sorted(indices.tolist()) == list(range(6))
        assert len(state["rank"]) == 6

    def test_idempotent(self, rng: np.random.Generator) -> None:
        """Re-ranking the survivors keeps all of them in the same order."""
        pop = Population(solutions=list(range(30)), objectives=rng.uniform(0, 1, size=(30, 2)))
        ranker = nsga2_ranking()
        indices, state = ranker(pop, 12)
        survivors = pop.take(indices)
        again, again_state = ranker(survivors, 12)
        assert again.tolist() == list(range(12))
        np.testing.assert_array_equal(again_state["rank"], state["rank"])

    def test_requires_objectives(self) -> None:
        """An unevaluated pool cannot be ranked."""
        with pytest.raises(ValueError, match="objectives"):
            nsga2_ranking()(Population(solutions=[1, 2]), 1)

    def test_invalid_survivor_count(self, layered_population: Population) -> None:
        """n_survivors must be positive."""
        with pytest.raises(ValueError, match="n_survivors must be positive"):
            nsga2_ranking()(layered_population, 0)


class TestSpea2Ranking:
    """Tests for the archive-based ranker."""

    def test_state_keys_aligned(self, layered_population: Population) -> None:
        """State arrays are aligned with the archive."""
        indices, state = spea2_ranking()(layered_population, 4)
        assert len(indices) == 4
        assert set(state) == {"fitness", "strength", "raw_fitness", "density"}
        for values in state.values():
            assert values.shape == (4,)

    def test_non_dominated_first(self, layered_population: Population) -> None:
        """Front 0 members come first with fitness below one."""
        indices, state = spea2_ranking()(layered_population, 4)
        assert sorted(indices[:2].tolist()) == [0, 1]
        assert np.all(state["fitness"][:2] < 1)
        assert np.all(state["fitness"][2:] >= 1)

    def test_archive_bounded(self, rng: np.random.Generator) -> None:
        """The archive never exceeds its capacity."""
        pop = Population(solutions=list(range(25)), objectives=rng.uniform(0, 1, size=(25, 3)))
        indices, _ = spea2_ranking()(pop, 7)
        assert len(indices) == 7
        assert len(set(indices.tolist())) == 7

    def test_overflowing_front_stays_non_dominated(self, rng: np.random.Generator) -> None:
        """With an overflowing front every archive member is non-dominated."""
        x = np.sort(rng.uniform(0, 1, size=20))
        pop = Population(solutions=list(x), objectives=np.column_stack([x, 1 - x]))
        indices, state = spea2_ranking()(pop, 5)
        assert np.all(non_dominated_sort(pop.objectives)[indices] == 0)
        assert np.all(state["raw_fitness"] == 0)

    def test_requires_objectives(self) -> None:
        """An unevaluated pool cannot be ranked."""
        with pytest.raises(ValueError, match="objectives"):
            spea2_ranking()(Population(solutions=[1, 2]), 1)


class TestRankingRegistry:
    """Tests for the built-in ranker registrations."""

    def test_builtin_names(self) -> None:
        """Both rankers are registered."""
        assert {"nsga2", "spea2"} <= set(RankingRegistry.list())

    def test_get_returns_ranker(self, layered_population: Population) -> None:
        """Registry lookups build working rankers."""
        indices, _ = RankingRegistry.get("nsga2")(layered_population, 2)
        assert sorted(indices.tolist()) == [0, 1]

    def test_satisfies_protocol(self) -> None:
        """Built-in rankers satisfy the Ranker protocol."""
        assert isinstance(nsga2_ranking(), Ranker)
        assert isinstance(spea2_ranking(), Ranker)

    @pytest.mark.parametrize("factory", [nsga2_ranking, spea2_ranking])
    def test_state_keys_match_state(self, factory, layered_population: Population) -> None:
        """Declared state keys are exactly the keys of the returned state."""
        ranker = factory()
        _, state = ranker(layered_population, 4)
        assert set(state) == set(ranker.state_keys)
