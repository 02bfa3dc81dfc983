"""
Reference scenario: Brendan Cooley's Actor Alliance Game.

Three actors:
    "d" — defender (incumbent government)
    "r" — rebel group
    "a" — external actor who may side with either

State variables
~~~~~~~~~~~~~~~
  Parameters (ScenarioParams):
      pd1, pr1  — first-round win probabilities for defender / rebels
      pd2, pr2  — second-round win probabilities for defender / rebels
      pa        — external actor's contribution to a war effort
      k         — cost of fighting
  Baselines derived from the parameters:
      bd = pd1, br = pr1, ba = pa
  Transfers chosen by continuous decisions further down the tree:
      xi, xj, xk, yi, yj, yk

Only the terminal payoffs are fixed. The decision structure between them is
an unfinished draft: the declared root is the leaf t1, so solving the
reference scenario reaches t1 directly with no choice intervening. Terminals
t3..t11 read transfer variables and can only be solved under a tree whose
ContinuousNodes bind those names first.
"""

from __future__ import annotations

from dataclasses import dataclass

from alliance.engine.result import UtilityFn
from alliance.engine.state import State
from alliance.solvers.nodes import Node, TerminalNode

DEFENDER: str = "d"
REBEL: str = "r"
EXTERNAL: str = "a"
ACTORS: tuple[str, ...] = (DEFENDER, REBEL, EXTERNAL)

# Names bound by the scenario's continuous decisions.
CHOICE_VARIABLES: tuple[str, ...] = ("xi", "xj", "yi", "yj", "xk", "yk")


# ─── Parameters ───────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ScenarioParams:
    """Independent numeric parameters of the game.

    Defaults are the reference calibration.
    """

    pd1: float = 0.626
    pr1: float = 0.283
    pa: float = 0.1
    pd2: float = 0.426
    pr2: float = 0.483
    k: float = 0.15


def get_state(params: ScenarioParams | None = None) -> State:
    """Initial state: the six parameters plus three derived baselines.

    Examples:
        >>> s = get_state()
        >>> s["bd"], s["br"], s["ba"]
        (0.626, 0.283, 0.1)
    """
    p = params or ScenarioParams()
    return State(
        {
            "pd1": p.pd1,
            "pr1": p.pr1,
            "pa": p.pa,
            "pd2": p.pd2,
            "pr2": p.pr2,
            "k": p.k,
            "ba": p.pa,
            "bd": p.pd1,
            "br": p.pr1,
        }
    )


# ─── Payoff tables ────────────────────────────────────────────────────────────
# Several terminals share a payoff table; each builder returns a fresh dict.


def _first_round_war() -> dict[str, UtilityFn]:
    """Immediate war with no transfers (t1, t2)."""
    return {
        DEFENDER: lambda s: s["bd"] + s["pd1"] * s["br"] - s["pr1"] * s["bd"] - s["k"],
        REBEL: lambda s: s["br"] + s["pr1"] * s["bd"] - s["pd1"] * s["br"] - s["k"],
        EXTERNAL: lambda s: s["ba"],
    }


def _accepted_offers_ij() -> dict[str, UtilityFn]:
    """Settlement paying xi and yi to the rebels and xj to the external actor (t6)."""
    return {
        DEFENDER: lambda s: s["bd"] - s["xi"] - s["xj"] - s["yi"],
        REBEL: lambda s: s["br"] + s["xi"] + s["yi"],
        EXTERNAL: lambda s: s["ba"] + s["xj"],
    }


def _war_with_external_on_defender_side() -> dict[str, UtilityFn]:
    """Second-round war, external actor allied with the defender (t3, t7)."""

    def defender(s: State) -> float:
        held = s["bd"] - s["xi"] - s["xj"]
        share = s["pd2"] / (s["pd2"] + s["pa"])
        return (
            held
            + (s["pd2"] + s["pa"]) * (s["br"] + s["xi"]) * share
            - s["pr2"] * held
            - s["k"] * share
        )

    def rebel(s: State) -> float:
        held = s["br"] + s["xi"]
        return (
            held
            + s["pr2"] * (s["bd"] - s["xi"] + s["ba"])
            - (s["pd2"] + s["pa"]) * held
            - s["k"]
        )

    def external(s: State) -> float:
        held = s["ba"] + s["xj"]
        share = s["pa"] / (s["pd2"] + s["pa"])
        return (
            held
            + (s["pd2"] + s["pa"]) * (s["br"] + s["xi"]) * share
            - s["pr2"] * held
            - s["k"] * share
        )

    return {DEFENDER: defender, REBEL: rebel, EXTERNAL: external}


def _accepted_offer_j() -> dict[str, UtilityFn]:
    """Settlement paying xi and yj to the rebels (t8)."""
    return {
        DEFENDER: lambda s: s["bd"] - s["xi"] - s["yj"],
        REBEL: lambda s: s["br"] + s["xi"] + s["yj"],
        EXTERNAL: lambda s: s["ba"],
    }


def _bilateral_war() -> dict[str, UtilityFn]:
    """Second-round war without the external actor (t4, t9)."""
    return {
        DEFENDER: lambda s: (
            (s["bd"] - s["xi"])
            + s["pd2"] * (s["br"] + s["xi"])
            - s["pr2"] * (s["bd"] - s["xi"])
            - s["k"]
        ),
        REBEL: lambda s: (
            (s["br"] + s["xi"])
            + s["pr2"] * (s["bd"] - s["xi"])
            - s["pd2"] * (s["br"] + s["xi"])
            - s["k"]
        ),
        EXTERNAL: lambda s: s["ba"],
    }


def _accepted_offer_k() -> dict[str, UtilityFn]:
    """Settlement: rebels receive xi and yk and pass xk to the external actor (t10)."""
    return {
        DEFENDER: lambda s: s["bd"] - s["xi"] - s["yk"],
        REBEL: lambda s: s["br"] + s["xi"] - s["xk"] + s["yk"],
        EXTERNAL: lambda s: s["ba"] + s["xk"],
    }


def _war_with_external_on_rebel_side() -> dict[str, UtilityFn]:
    """Second-round war, external actor allied with the rebels (t5, t11)."""

    def defender(s: State) -> float:
        held = s["bd"] - s["xi"]
        return (
            held
            + s["pd2"] * (s["br"] + s["xi"] + s["ba"])
            - (s["pr2"] + s["pa"]) * held
            - s["k"]
        )

    def rebel(s: State) -> float:
        held = s["br"] + s["xi"] - s["xk"]
        share = s["pr2"] / (s["pr2"] + s["pa"])
        return (
            held
            + (s["pr2"] + s["pa"]) * (s["bd"] - s["xi"]) * share
            - s["pd2"] * held
            - s["k"] * share
        )

    def external(s: State) -> float:
        held = s["ba"] + s["xk"]
        share = s["pa"] / (s["pr2"] + s["pa"])
        return (
            held
            + (s["pr2"] + s["pa"]) * (s["bd"] - s["xi"]) * share
            - s["pd2"] * held
            - s["k"] * share
        )

    return {DEFENDER: defender, REBEL: rebel, EXTERNAL: external}


_TERMINAL_TABLES = {
    "t1": _first_round_war,
    "t2": _first_round_war,
    "t3": _war_with_external_on_defender_side,
    "t4": _bilateral_war,
    "t5": _war_with_external_on_rebel_side,
    "t6": _accepted_offers_ij,
    "t7": _war_with_external_on_defender_side,
    "t8": _accepted_offer_j,
    "t9": _bilateral_war,
    "t10": _accepted_offer_k,
    "t11": _war_with_external_on_rebel_side,
}


# ─── Tree ─────────────────────────────────────────────────────────────────────


def build_terminals() -> dict[str, TerminalNode]:
    """Return every terminal of the scenario keyed by name (t1..t11)."""
    return {name: TerminalNode(name, table()) for name, table in _TERMINAL_TABLES.items()}


def get_root() -> Node:
    """Root of the reference tree.

    The intermediate decisions (d0, r0, a0, d1..d3, r1..r3) are not yet
    modelled, so the root is the first-round-war leaf t1.
    """
    return build_terminals()["t1"]
