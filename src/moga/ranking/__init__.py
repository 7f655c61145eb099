"""Ranking strategies: how a pool of evaluated individuals is ranked and truncated."""

from moga.ranking.nsga2 import nsga2_ranking
from moga.ranking.spea2 import spea2_ranking
from moga.registry import RankingRegistry

# Register built-in ranking strategies
RankingRegistry.register("nsga2", nsga2_ranking)
RankingRegistry.register("spea2", spea2_ranking)

__all__ = ["nsga2_ranking", "spea2_ranking"]
