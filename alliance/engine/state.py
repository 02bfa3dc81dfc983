"""
Immutable game state: variable name → real value.

A State is created once from the scenario's initial parameters and then
extended, never mutated, as the solver descends the tree. Each
ContinuousNode layers its own binding on top of the state it receives:

    >>> s = State({"bd": 0.626})
    >>> s2 = s.extend("xi", 0.1)
    >>> sorted(s2)
    ['bd', 'xi']
    >>> sorted(s)
    ['bd']

Reading a name that was never bound raises UnboundVariableError, which is
also what a utility formula sees when it does ``s["xi"]`` too early.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping

from .errors import UnboundVariableError


class State(Mapping):
    """Read-only mapping of variable bindings.

    The backing dict is private and copied on construction, so neither the
    caller's dict nor any other State can alias it.
    """

    __slots__ = ("_values",)

    def __init__(self, values: Mapping[str, float] | None = None) -> None:
        self._values: dict[str, float] = (
            {name: float(value) for name, value in values.items()} if values else {}
        )

    @classmethod
    def of(cls, values: Mapping[str, float]) -> State:
        """Return values itself if it is already a State, else a State copy."""
        if isinstance(values, State):
            return values
        return cls(values)

    def extend(self, name: str, value: float) -> State:
        """Return a new State with name bound to value.

        The new binding takes precedence over any existing binding of the
        same name; every other binding passes through unchanged.
        """
        extended = State.__new__(State)
        extended._values = {**self._values, name: float(value)}
        return extended

    def __getitem__(self, name: str) -> float:
        try:
            return self._values[name]
        except KeyError:
            raise UnboundVariableError(name) from None

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"State({self._values!r})"
