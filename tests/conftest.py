"""
Shared pytest fixtures for the Actor Alliance Game solver tests.

Provides small tree builders so each test can state its payoffs inline.
"""

from __future__ import annotations

import numpy as np
import pytest

from alliance.scenario.alliance_game import get_state
from alliance.solvers.cem import CemConfig, ContinuousNode
from alliance.solvers.nodes import TerminalNode


def leaf(name: str, **utilities: float) -> TerminalNode:
    """Build a terminal whose utilities are constants.

    Examples:
        >>> leaf("t", d=1.0, r=-1.0).solve({}).get_util("r")
        -1.0
    """
    return TerminalNode(name, {actor: (lambda s, u=u: u) for actor, u in utilities.items()})


def quadratic(target: float, *, var: str = "v", actor: str = "p") -> TerminalNode:
    """Terminal with utility -(var - target)^2 for actor."""
    return TerminalNode("quad", {actor: lambda s: -((s[var] - target) ** 2)})


def probe(target: float, seed: int, config: CemConfig | None = None) -> ContinuousNode:
    """Continuous decision over quadratic(target) with a seeded generator."""
    return ContinuousNode(
        child=quadratic(target),
        variable_name="v",
        actor="p",
        config=config or CemConfig(),
        rng=np.random.default_rng(seed),
    )


@pytest.fixture
def reference_state():
    """Initial state of the reference scenario."""
    return get_state()


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(12345)
