"""Tests for alliance/analysis/landscape.py — Plotly payoff landscape.

Plotly figures are in-memory objects; no display server is required.
"""

from __future__ import annotations

import os

import numpy as np
import plotly.graph_objects as go
import pytest

from alliance.analysis.landscape import (
    Landscape,
    build_landscape_figure,
    compute_landscape,
    save_landscape_html,
)
from alliance.solvers.cem import ContinuousNode
from alliance.solvers.nodes import DiscreteNode, TerminalNode
from tests.conftest import probe


@pytest.fixture
def landscape() -> Landscape:
    return compute_landscape(probe(2.0, seed=0), {})


class TestComputeLandscape:
    def test_default_grid(self, landscape) -> None:
        spread = 3.0 * np.sqrt(10.0)
        assert landscape.grid.shape == (201,)
        assert landscape.grid[0] == pytest.approx(-spread)
        assert landscape.grid[-1] == pytest.approx(spread)

    def test_custom_grid(self) -> None:
        land = compute_landscape(probe(2.0, seed=0), {}, grid=[0.0, 1.0, 2.0])
        np.testing.assert_array_equal(land.utilities["p"], [-4.0, -1.0, 0.0])

    def test_best_value_near_optimum(self, landscape) -> None:
        assert landscape.best_value() == pytest.approx(2.0, abs=0.1)

    def test_terminal_per_point(self, landscape) -> None:
        assert len(landscape.terminal_names) == 201
        assert set(landscape.terminal_names) == {"quad"}

    def test_branching_continuation(self) -> None:
        """Chooser below switches terminal where the payoffs cross."""
        child = DiscreteNode(
            "q",
            [
                TerminalNode("left", {"p": lambda s: s["v"], "q": lambda s: -s["v"]}),
                TerminalNode("right", {"p": lambda s: -s["v"], "q": lambda s: s["v"]}),
            ],
        )
        node = ContinuousNode(child, "v", "p")
        land = compute_landscape(node, {}, grid=[-1.0, 1.0])
        assert land.terminal_names == ["left", "right"]
        np.testing.assert_array_equal(land.utilities["p"], [-1.0, -1.0])

    def test_missing_actor_is_nan(self) -> None:
        child = DiscreteNode(
            "p",
            [
                TerminalNode("a", {"p": lambda s: s["v"]}),
                TerminalNode("b", {"p": lambda s: -s["v"], "extra": lambda s: 1.0}),
            ],
        )
        land = compute_landscape(ContinuousNode(child, "v", "p"), {}, grid=[1.0, -1.0])
        assert np.isnan(land.utilities["extra"][0])
        assert land.utilities["extra"][1] == 1.0


class TestBuildLandscapeFigure:
    def test_returns_figure(self, landscape) -> None:
        assert isinstance(build_landscape_figure(landscape), go.Figure)

    def test_one_trace_per_actor(self, landscape) -> None:
        assert len(build_landscape_figure(landscape).data) == len(landscape.utilities)

    def test_chooser_labelled(self, landscape) -> None:
        names = [t.name for t in build_landscape_figure(landscape).data]
        assert "p (chooser)" in names

    def test_hover_mentions_terminal(self, landscape) -> None:
        trace = build_landscape_figure(landscape).data[0]
        assert "Terminal: quad" in trace.hovertext[0]

    def test_chosen_value_marker(self, landscape) -> None:
        fig = build_landscape_figure(landscape, chosen_value=2.0)
        assert len(fig.layout.shapes) == 1

    def test_save_html(self, landscape, tmp_path) -> None:
        path = tmp_path / "landscape.html"
        save_landscape_html(build_landscape_figure(landscape), str(path))
        assert os.path.getsize(path) > 0
