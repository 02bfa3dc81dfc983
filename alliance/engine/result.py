"""
Result of solving a subtree.

Only a TerminalNode creates a Result. Discrete and Continuous nodes pass a
chosen child's Result upward unchanged, so the Result returned by the root
always names the leaf the game ended at and carries the full state that
was accumulated on the way down.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass

from .errors import UnknownActorError
from .state import State

# Utility of one actor as a closed-form function of the final state.
UtilityFn = Callable[[State], float]


@dataclass(frozen=True)
class Result:
    """Outcome of one top-to-bottom pass through a subtree.

    Attributes:
        terminal_name: Name of the TerminalNode that produced this Result.
        final_state:   State as it stood on reaching the terminal.
        utilities:     The terminal's actor → utility-function table.
    """

    terminal_name: str
    final_state: State
    utilities: Mapping[str, UtilityFn]

    def get_var(self, name: str) -> float:
        """Value of a bound variable; raises UnboundVariableError if absent."""
        return self.final_state[name]

    def get_util(self, actor: str) -> float:
        """Evaluate actor's utility against the final state.

        Recomputed on every call. Utility functions are pure, so repeated
        calls return the same value.

        Raises:
            UnknownActorError: If the terminal defines no utility for actor.
        """
        try:
            fn = self.utilities[actor]
        except KeyError:
            raise UnknownActorError(actor, self.terminal_name) from None
        return float(fn(self.final_state))

    def evaluate_all(self) -> dict[str, float]:
        """Snapshot of every actor's utility, in the terminal's actor order."""
        return {actor: self.get_util(actor) for actor in self.utilities}
