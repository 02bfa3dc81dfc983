"""Tests for alliance/analysis/trace_plots.py.

The Agg backend is activated before any pyplot import so the suite runs
without a display server.
"""

from __future__ import annotations

import os

import matplotlib

matplotlib.use("Agg")  # must precede any pyplot import

import matplotlib.figure
import matplotlib.pyplot as plt
import pytest

from alliance.analysis.convergence import run_convergence_study
from alliance.analysis.trace_plots import plot_cem_trace, plot_final_value_histogram
from tests.conftest import probe


@pytest.fixture(scope="module")
def trace():
    return probe(5.0, seed=0).optimize({})


@pytest.fixture(scope="module")
def study():
    return run_convergence_study(n_runs=10, seed=0)


@pytest.fixture(autouse=True)
def _close_figures():
    yield
    plt.close("all")


class TestPlotCemTrace:
    def test_returns_figure(self, trace) -> None:
        fig = plot_cem_trace(trace, show=False)
        assert isinstance(fig, matplotlib.figure.Figure)

    def test_two_axes(self, trace) -> None:
        assert len(plot_cem_trace(trace, show=False).axes) == 2

    def test_mu_line_has_one_point_per_iteration(self, trace) -> None:
        ax_mu = plot_cem_trace(trace, show=False).axes[0]
        assert len(ax_mu.lines[0].get_xdata()) == trace.n_iterations

    def test_target_line_added(self, trace) -> None:
        without = plot_cem_trace(trace, show=False).axes[0]
        with_target = plot_cem_trace(trace, target=5.0, show=False).axes[0]
        assert len(with_target.lines) == len(without.lines) + 1

    def test_title_names_variable(self, trace) -> None:
        fig = plot_cem_trace(trace, show=False)
        assert "variable v" in fig._suptitle.get_text()

    def test_save_path(self, trace, tmp_path) -> None:
        path = tmp_path / "trace.png"
        plot_cem_trace(trace, show=False, save_path=str(path))
        assert os.path.getsize(path) > 0


class TestPlotFinalValueHistogram:
    def test_returns_figure(self, study) -> None:
        fig = plot_final_value_histogram(study, show=False)
        assert isinstance(fig, matplotlib.figure.Figure)

    def test_title_has_hit_rate(self, study) -> None:
        ax = plot_final_value_histogram(study, show=False).axes[0]
        assert "hit rate" in ax.get_title()

    def test_save_path(self, study, tmp_path) -> None:
        path = tmp_path / "hist.png"
        plot_final_value_histogram(study, show=False, save_path=str(path))
        assert os.path.getsize(path) > 0
