"""Exception types raised by the optimizer.

Every failure surfaced by ``optimize`` derives from OptimizationError:

- ConfigurationError: the run was set up wrongly (empty population, bad
  archive size, inconsistent objective vectors, unknown strategy name)
- OperatorError: a user-supplied operator raised; ``phase`` names the step
- EmptySelectionError: the selector returned no parents
"""

from enum import Enum


class Phase(str, Enum):
    """Step of the generational loop in which a failure occurred."""

    CONFIGURATION = "configuration"
    EVALUATION = "evaluation"
    RANKING = "ranking"
    TERMINATION = "termination"
    SELECTION = "selection"
    RECOMBINATION = "recombination"
    MUTATION = "mutation"


class OptimizationError(Exception):
    """Base class for all optimizer failures."""


class ConfigurationError(OptimizationError, ValueError):
    """Raised when the optimizer is configured inconsistently.

    Subclasses ValueError so callers validating arguments the usual way keep
    working.
    """

    phase = Phase.CONFIGURATION


class OperatorError(OptimizationError):
    """Raised when a pluggable operator fails during a run.

    The original exception is chained as ``__cause__`` and kept on ``error``.

    Attributes:
        phase: The loop step whose operator failed.
        generation: Generation number at the time of failure.
        error: The exception raised by the operator, or None.
    """

    def __init__(self, phase: Phase, generation: int, error: BaseException | None = None) -> None:
        self.phase = phase
        self.generation = generation
        self.error = error
        detail = f": {error!r}" if error is not None else ""
        super().__init__(f"{phase.value} failed in generation {generation}{detail}")


class EmptySelectionError(OperatorError):
    """Raised when the selector returns an empty sequence of parents."""

    def __init__(self, generation: int) -> None:
        super().__init__(Phase.SELECTION, generation)
        self.args = (f"selector returned no parents in generation {generation}",)
