"""Registry system for named strategies.

Strategies are registered as factories: callables that take keyword
configuration and return a ready-to-use strategy. This allows an optimizer to
be configured with plain strings (e.g. from a config file) while still
accepting callables directly.

There are three independent registries:
1. **SelectionRegistry**: parent selectors (ParentSelector protocol)
2. **RankingRegistry**: rankers (Ranker protocol)
3. **PairingRegistry**: recombination pairing policies

Basic usage:
    ```python
    from moga.registry import SelectionRegistry

    def tournament_factory(tournament_size: int = 2):
        def selector(pop, n_parents, rng, **kwargs):
            ...
        return selector

    SelectionRegistry.register("tournament", tournament_factory)
    selector = SelectionRegistry.get("tournament", tournament_size=3)
    SelectionRegistry.list()  # ["tournament", ...]
    ```
"""

from collections.abc import Callable
from typing import Any, ClassVar


class _Registry:
    """Class-level mapping from strategy names to factories.

    Subclasses must define their own ``_registry`` dict and ``_kind`` label so
    registrations stay separate.
    """

    _registry: ClassVar[dict[str, Callable[..., Any]]]
    _kind: ClassVar[str]

    @classmethod
    def register(cls, name: str, factory: Callable[..., Any]) -> None:
        """Register a strategy factory under ``name``, replacing any previous one."""
        cls._registry[name] = factory

    @classmethod
    def get(cls, name: str, **kwargs: Any) -> Any:
        """Build a configured strategy by name.

        Args:
            name: Name of the registered strategy.
            **kwargs: Configuration passed to the factory.

        Returns:
            The strategy returned by the factory.

        Raises:
            KeyError: If the name is not registered. The message lists the
                available names.
        """
        if name not in cls._registry:
            available = ", ".join(sorted(cls._registry)) or "none"
            raise KeyError(f"{cls._kind} strategy '{name}' not found. Available strategies: {available}")
        return cls._registry[name](**kwargs)

    @classmethod
    def list(cls) -> list[str]:
        """Return the sorted registered names."""
        return sorted(cls._registry)


class SelectionRegistry(_Registry):
    """Registry for parent selection strategies."""

    _registry: ClassVar[dict[str, Callable[..., Any]]] = {}
    _kind = "Selection"


class RankingRegistry(_Registry):
    """Registry for ranking (survivor selection) strategies."""

    _registry: ClassVar[dict[str, Callable[..., Any]]] = {}
    _kind = "Ranking"


class PairingRegistry(_Registry):
    """Registry for recombination pairing policies."""

    _registry: ClassVar[dict[str, Callable[..., Any]]] = {}
    _kind = "Pairing"


def list_selections() -> list[str]:
    """List all registered parent selection strategies."""
    return SelectionRegistry.list()


def list_rankings() -> list[str]:
    """List all registered ranking strategies."""
    return RankingRegistry.list()


def list_pairings() -> list[str]:
    """List all registered pairing policies."""
    return PairingRegistry.list()
