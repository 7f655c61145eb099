"""Optimizer configuration.

``OptimizerConfig`` bundles the user's operators with the strategies that drive
the generational loop. Strategies can be given as registered names (e.g. from
a config file) or as callables. Everything is validated at construction so a
misconfigured run fails before any evaluation happens. That includes a selector
that reads ranker state the ranker does not produce, such as the crowded
tournament with the SPEA2 ranker.

Example:
    >>> config = OptimizerConfig(
    ...     evaluate=lambda x: np.array([x**2, (x - 2) ** 2]),
    ...     recombine=lambda a, b: (a + b) / 2,
    ...     mutate=lambda x: x + rng.normal(0.0, 0.1),
    ...     terminate=max_generations(50),
    ...     ranking="spea2",
    ...     archive_size=20,
    ... )
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

# Import strategy modules to trigger registration
import moga.pairing  # noqa: F401
import moga.ranking  # noqa: F401
import moga.selection  # noqa: F401
from moga.errors import ConfigurationError
from moga.execution import Execution
from moga.protocols import ParentSelector, Ranker
from moga.registry import PairingRegistry, RankingRegistry, SelectionRegistry

DEFAULT_SELECTION = {"nsga2": "crowded", "spea2": "tournament"}


def _resolve(registry: Any, name: str) -> Any:
    try:
        return registry.get(name)
    except KeyError as exc:
        raise ConfigurationError(exc.args[0]) from exc


@dataclass(frozen=True)
class OptimizerConfig:
    """Operators and strategies for one optimization run.

    Attributes:
        evaluate: Maps one solution to its objective vector, shape (n_obj,).
            With ``evaluation=Execution.BATCH`` it maps a list of solutions to
            a list of objective vectors.
        recombine: Combines two parents into one offspring. With
            ``recombination=Execution.BATCH`` it maps a list of parent pairs to
            a list of offspring.
        mutate: Returns a mutated copy of one solution, or changes it in place
            and returns None, in which case the changed object is kept. With
            ``mutation=Execution.BATCH`` it maps a list to a list, or mutates
            the list's items in place and returns None.
        terminate: Called as ``terminate(generation, ranked)`` after every
            ranking; True stops the run.
        ranking: "nsga2", "spea2" or a Ranker callable.
        select: Registered selector name or a ParentSelector callable. Defaults
            to "crowded" for NSGA-II and "tournament" for SPEA2 and custom
            rankers. Its ``required_state`` must be covered by the ranker's
            ``state_keys``.
        archive_size: Survivors kept per generation (the SPEA2 archive).
            Defaults to the initial population size. Not accepted with
            ranking="nsga2", which always keeps as many survivors as the
            initial population.
        n_parents: Parents requested from the selector per generation.
            Defaults to the number of survivors.
        pairing: Registered pairing name ("consecutive", "all", "random") or a
            callable ``(n_parents, rng) -> (n_pairs, 2)`` index array.
        evaluation: Execution policy for ``evaluate``.
        recombination: Execution policy for ``recombine``.
        mutation: Execution policy for ``mutate``.
        n_workers: Workers for the parallel policies. Positive, or -1 for all cores.
        seed: Seed for the run's random generator. None uses system entropy.

    Raises:
        ConfigurationError: If an operator is missing or not callable, a
            strategy name is unknown, a size is not positive, n_workers is
            invalid, an execution policy is unknown, or the selector needs
            ranker state the ranker does not provide.
    """

    evaluate: Callable[..., Any]
    recombine: Callable[..., Any]
    mutate: Callable[..., Any]
    terminate: Callable[..., bool]
    ranking: str | Ranker = "nsga2"
    select: str | ParentSelector | None = None
    archive_size: int | None = None
    n_parents: int | None = None
    pairing: str | Callable[..., Any] = "consecutive"
    evaluation: Execution | str = Execution.SEQUENTIAL
    recombination: Execution | str = Execution.SEQUENTIAL
    mutation: Execution | str = Execution.SEQUENTIAL
    n_workers: int = 1
    seed: int | None = None

    ranker: Ranker = field(init=False, repr=False, compare=False)
    selector: ParentSelector = field(init=False, repr=False, compare=False)
    pair: Callable[..., Any] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        for name in ("evaluate", "recombine", "mutate", "terminate"):
            if not callable(getattr(self, name)):
                raise ConfigurationError(f"{name} must be callable, got {getattr(self, name)!r}")

        if self.archive_size is not None and self.archive_size <= 0:
            raise ConfigurationError(f"archive_size must be positive, got {self.archive_size}")
        if self.archive_size is not None and self.ranking == "nsga2":
            raise ConfigurationError("nsga2 keeps as many survivors as the initial population; archive_size is not supported")
        if self.n_parents is not None and self.n_parents <= 0:
            raise ConfigurationError(f"n_parents must be positive, got {self.n_parents}")
        if self.n_workers < 1 and self.n_workers != -1:
            raise ConfigurationError(f"n_workers must be positive or -1 (all cores), got {self.n_workers}")

        for name in ("evaluation", "recombination", "mutation"):
            try:
                object.__setattr__(self, name, Execution(getattr(self, name)))
            except ValueError as exc:
                raise ConfigurationError(f"unknown {name} policy {getattr(self, name)!r}") from exc

        ranker = _resolve(RankingRegistry, self.ranking) if isinstance(self.ranking, str) else self.ranking
        select = self.select
        if select is None:
            select = DEFAULT_SELECTION.get(self.ranking, "tournament") if isinstance(self.ranking, str) else "tournament"
        selector = _resolve(SelectionRegistry, select) if isinstance(select, str) else select
        pair = _resolve(PairingRegistry, self.pairing) if isinstance(self.pairing, str) else self.pairing

        for name, strategy in (("ranking", ranker), ("select", selector), ("pairing", pair)):
            if not callable(strategy):
                raise ConfigurationError(f"{name} must be a registered name or callable, got {strategy!r}")

        required = tuple(getattr(selector, "required_state", ()))
        if required:
            provided = getattr(ranker, "state_keys", None)
            if provided is None:
                raise ConfigurationError(f"selector needs ranker state {required}, but the ranker declares no state_keys")
            missing = [key for key in required if key not in provided]
            if missing:
                raise ConfigurationError(f"selector needs ranker state {missing}, ranker provides {tuple(provided)}")

        object.__setattr__(self, "ranker", ranker)
        object.__setattr__(self, "selector", selector)
        object.__setattr__(self, "pair", pair)
