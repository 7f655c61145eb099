"""Selection strategies for choosing parents."""

from moga.registry import SelectionRegistry
from moga.selection.basic import all_selection, best_selection, first_selection, random_selection
from moga.selection.crowded import crowded_tournament
from moga.selection.roulette import roulette_wheel
from moga.selection.tournament import chunked_tournament, fitness_tournament

# Register built-in selection strategies
SelectionRegistry.register("crowded", crowded_tournament)
SelectionRegistry.register("tournament", fitness_tournament)
SelectionRegistry.register("chunked_tournament", chunked_tournament)
SelectionRegistry.register("roulette", roulette_wheel)
SelectionRegistry.register("all", all_selection)
SelectionRegistry.register("first", first_selection)
SelectionRegistry.register("random", random_selection)
SelectionRegistry.register("best", best_selection)

__all__ = [
    "all_selection",
    "best_selection",
    "chunked_tournament",
    "crowded_tournament",
    "first_selection",
    "fitness_tournament",
    "random_selection",
    "roulette_wheel",
]
