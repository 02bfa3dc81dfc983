"""Interactive Plotly view of one continuous decision's payoff landscape.

A ContinuousNode only ever sees its continuation through samples. This
module evaluates the continuation over a regular grid of candidate values
so the shape CEM is searching over can be inspected directly:

    compute_landscape(node, state, grid)   — per-actor utility arrays
    build_landscape_figure(landscape, ...) — one curve per actor
    save_landscape_html(fig, path)         — HTML export

Hovering a point shows the candidate value, the utility and the terminal
the continuation ended at.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

import numpy as np
import plotly.graph_objects as go

from alliance.engine.state import State
from alliance.solvers.cem import ContinuousNode

_ACTOR_COLORS: list[str] = ["#1f77b4", "#d62728", "#2ca02c", "#9467bd", "#ff7f0e"]


@dataclass
class Landscape:
    """Continuation payoffs over a grid of candidate values.

    Attributes:
        variable_name:  Variable the node binds.
        actor:          Actor who makes the choice.
        grid:           Candidate values (float64, length m).
        utilities:      Actor → utility at each grid point (float64, length m).
                        NaN where the reached terminal defines no utility for
                        that actor.
        terminal_names: Terminal reached at each grid point.
    """

    variable_name: str
    actor: str
    grid: np.ndarray
    utilities: dict[str, np.ndarray]
    terminal_names: list[str]

    def best_value(self) -> float:
        """Grid point with the highest utility for the choosing actor."""
        return float(self.grid[int(np.nanargmax(self.utilities[self.actor]))])


def compute_landscape(
    node: ContinuousNode,
    state: Mapping[str, float],
    grid: np.ndarray | None = None,
) -> Landscape:
    """Solve node's continuation at every grid value.

    Args:
        node:  The continuous decision to inspect.
        state: State reaching the node. Not modified.
        grid:  Candidate values. Defaults to 201 points spanning
               mu0 ± 3 standard deviations of the node's initial sampler.
    """
    state = State.of(state)
    if grid is None:
        spread = 3.0 * float(np.sqrt(node.config.sigma2_0))
        grid = np.linspace(node.config.mu0 - spread, node.config.mu0 + spread, 201)
    grid = np.asarray(grid, dtype=np.float64)

    results = [node.child.solve(state.extend(node.variable_name, float(v))) for v in grid]

    actors: list[str] = []
    for result in results:
        for actor in result.utilities:
            if actor not in actors:
                actors.append(actor)

    utilities = {
        actor: np.array(
            [r.get_util(actor) if actor in r.utilities else np.nan for r in results],
            dtype=np.float64,
        )
        for actor in actors
    }
    return Landscape(
        variable_name=node.variable_name,
        actor=node.actor,
        grid=grid,
        utilities=utilities,
        terminal_names=[r.terminal_name for r in results],
    )


def build_landscape_figure(
    landscape: Landscape,
    chosen_value: float | None = None,
) -> go.Figure:
    """Plot every actor's utility against the candidate value.

    The choosing actor's curve is drawn thicker. If chosen_value is given
    (typically the CEM result), it is marked with a vertical line.

    Returns:
        go.Figure with one scatter trace per actor.
    """
    fig = go.Figure()
    for i, (actor, values) in enumerate(landscape.utilities.items()):
        is_chooser = actor == landscape.actor
        hover = [
            f"{landscape.variable_name} = {v:.4f}<br>"
            f"U({actor}) = {u:.4f}<br>"
            f"Terminal: {t}"
            for v, u, t in zip(landscape.grid, values, landscape.terminal_names)
        ]
        fig.add_trace(
            go.Scatter(
                x=landscape.grid,
                y=values,
                mode="lines",
                name=f"{actor} (chooser)" if is_chooser else actor,
                line={
                    "color": _ACTOR_COLORS[i % len(_ACTOR_COLORS)],
                    "width": 3 if is_chooser else 1.5,
                },
                hovertext=hover,
                hoverinfo="text",
            )
        )

    if chosen_value is not None:
        fig.add_vline(
            x=chosen_value,
            line_dash="dash",
            line_color="#555555",
            annotation_text=f"CEM: {chosen_value:.4f}",
        )

    fig.update_layout(
        title=f"Payoff landscape — actor {landscape.actor} chooses {landscape.variable_name}",
        xaxis_title=landscape.variable_name,
        yaxis_title="Utility",
        hovermode="closest",
        template="plotly_white",
    )
    return fig


def save_landscape_html(fig: go.Figure, path: str) -> None:
    """Write fig to an HTML file that loads Plotly JS from the CDN."""
    fig.write_html(path, include_plotlyjs="cdn")
