"""
Game-tree nodes for the Actor Alliance Game solver.

Every node exposes one operation, ``solve(state) -> Result``. Control flows
top-down: the root is solved once with the scenario's initial state, each
node inspects or extends the state and recurses into its children, and
only TerminalNode stops the recursion.

Node variants
-------------
  TerminalNode(name, utilities)
      End of the game. Wraps the incoming state and the actor → utility
      table into a Result.

  DiscreteNode(actor, children)
      Actor picks the best of a fixed list of continuations. Every child is
      solved on the same state (full exploration, no pruning) and the Result
      maximising actor's utility is returned. Ties go to the earliest child.

  ContinuousNode(child, variable_name, actor, config, rng)
      Actor picks a real value for one variable using the Cross-Entropy
      Method. Lives in ``alliance.solvers.cem`` next to its config.

This is a single greedy pass per node, not an equilibrium search: a
decision node optimises its own actor's payoff against whatever its
descendants return, with no mutual best-response iteration.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Protocol

from alliance.engine.errors import EmptyChildSetError
from alliance.engine.result import Result, UtilityFn
from alliance.engine.state import State


class Node(Protocol):
    """Anything that can be solved from a state."""

    def solve(self, state: Mapping[str, float]) -> Result: ...


# ─── Terminal ─────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class TerminalNode:
    """Leaf of the game tree.

    Attributes:
        name:      Label reported as Result.terminal_name.
        utilities: Actor name → function computing that actor's payoff from
                   the final state.

    Example:
        >>> leaf = TerminalNode("t", {"d": lambda s: s["bd"] - s["k"]})
        >>> round(leaf.solve({"bd": 0.6, "k": 0.1}).get_util("d"), 3)
        0.5
    """

    name: str
    utilities: Mapping[str, UtilityFn]

    def solve(self, state: Mapping[str, float]) -> Result:
        return Result(
            terminal_name=self.name,
            final_state=State.of(state),
            utilities=self.utilities,
        )


# ─── Discrete ─────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class DiscreteNode:
    """Actor chooses the best of several predefined continuations.

    Attributes:
        actor:    Actor whose utility ranks the children.
        children: Ordered continuations. Order matters only for tie-breaks.

    Raises:
        EmptyChildSetError: If children is empty.
    """

    actor: str
    children: Sequence[Node]

    def __post_init__(self) -> None:
        # Freeze the caller's list so later appends cannot change the tree.
        object.__setattr__(self, "children", tuple(self.children))
        if not self.children:
            raise EmptyChildSetError(
                f"DiscreteNode for actor {self.actor!r} has no children."
            )

    def solve(self, state: Mapping[str, float]) -> Result:
        state = State.of(state)

        results = [child.solve(state) for child in self.children]

        best = results[0]
        best_util = best.get_util(self.actor)
        for result in results[1:]:
            util = result.get_util(self.actor)
            # Strict > keeps the earliest child on ties.
            if util > best_util:
                best, best_util = result, util
        return best
