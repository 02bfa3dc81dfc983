"""
Error taxonomy for the game-tree solver.

Every error here describes a defect in the tree or numeric configuration
handed to the solver by the scenario builder. None of them is transient:
they propagate unchanged to the top-level solve() call and no partial
Result is ever produced.

    UnboundVariableError    — a formula or get_var() reads a name not in state
    UnknownActorError       — get_util() asked for an actor with no utility
    EmptyChildSetError      — a DiscreteNode was given no children
    DegenerateSamplerError  — the Gaussian sampler was fed sigma2 <= 0
    InsufficientEliteError  — n_top is 0 or exceeds the population size

The two lookup errors subclass KeyError so that State behaves as a normal
Mapping (``in`` and ``.get()`` still work).
"""

from __future__ import annotations


class GameTreeError(Exception):
    """Base class for all solver errors."""


class UnboundVariableError(GameTreeError, KeyError):
    """A variable was read before any ancestor bound it."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"variable {self.name!r} is not bound in state"


class UnknownActorError(GameTreeError, KeyError):
    """No utility function is registered for the requested actor."""

    def __init__(self, actor: str, terminal_name: str | None = None) -> None:
        super().__init__(actor)
        self.actor = actor
        self.terminal_name = terminal_name

    def __str__(self) -> str:
        where = f" at terminal {self.terminal_name!r}" if self.terminal_name else ""
        return f"no utility for actor {self.actor!r}{where}"


class EmptyChildSetError(GameTreeError, ValueError):
    """A discrete choice node has nothing to choose from."""


class DegenerateSamplerError(GameTreeError, ValueError):
    """Sampling variance must be strictly positive."""


class InsufficientEliteError(GameTreeError, ValueError):
    """Elite count must satisfy 1 <= n_top <= n_samples."""
