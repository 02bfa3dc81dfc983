"""Matplotlib figures for CEM diagnostics.

    plot_cem_trace(trace, ...)              — mu and sigma2 per iteration
    plot_final_value_histogram(study, ...)  — spread of final values over runs

Both return a matplotlib Figure and accept ``show`` / ``save_path`` keywords.
"""

from __future__ import annotations

import matplotlib
import matplotlib.figure
import matplotlib.pyplot as plt
import numpy as np

from alliance.analysis.convergence import ConvergenceStudy
from alliance.solvers.cem import CemTrace

_MU_COLOR: str = "#1f77b4"
_SIGMA_COLOR: str = "#d62728"
_TARGET_COLOR: str = "#2ca02c"


def _finish(
    fig: matplotlib.figure.Figure,
    show: bool,
    save_path: str | None,
) -> matplotlib.figure.Figure:
    plt.tight_layout()
    if save_path is not None:
        fig.savefig(save_path, bbox_inches="tight", dpi=120)
    if show:
        plt.show()
    return fig


def plot_cem_trace(
    trace: CemTrace,
    *,
    target: float | None = None,
    show: bool = True,
    save_path: str | None = None,
) -> matplotlib.figure.Figure:
    """Plot the sampling mean and variance after each CEM iteration.

    Args:
        trace:     CemTrace from ContinuousNode.optimize().
        target:    If given, draw the known optimum as a horizontal line.
        show:      If True, call plt.show().
        save_path: If not None, save the figure to this path.

    Returns:
        1×2 matplotlib.figure.Figure (mu on the left, log sigma2 right).
    """
    iters = np.array([it.iteration for it in trace.history], dtype=np.int64)
    mus = np.array([it.mu for it in trace.history], dtype=np.float64)
    sigma2s = trace.variances

    fig, (ax_mu, ax_var) = plt.subplots(1, 2, figsize=(10, 4))
    fig.suptitle(
        f"CEM trace — actor {trace.actor}, variable {trace.variable_name}",
        fontsize=13,
        fontweight="bold",
    )

    ax_mu.plot(iters, mus, marker="o", color=_MU_COLOR, label="mu")
    if target is not None:
        ax_mu.axhline(target, color=_TARGET_COLOR, linestyle="--", label="optimum")
    ax_mu.set_title("Sampling mean", fontsize=10)
    ax_mu.set_xlabel("Iteration", fontsize=9)
    ax_mu.set_ylabel(trace.variable_name, fontsize=9)
    ax_mu.legend(fontsize=8)

    # Collapsed variances can reach exactly 0, which a log axis cannot show.
    positive = sigma2s > 0
    ax_var.semilogy(iters[positive], sigma2s[positive], marker="o", color=_SIGMA_COLOR)
    ax_var.set_title("Sampling variance", fontsize=10)
    ax_var.set_xlabel("Iteration", fontsize=9)
    ax_var.set_ylabel("sigma2 (log scale)", fontsize=9)

    return _finish(fig, show, save_path)


def plot_final_value_histogram(
    study: ConvergenceStudy,
    *,
    bins: int = 30,
    show: bool = True,
    save_path: str | None = None,
) -> matplotlib.figure.Figure:
    """Histogram of final values across a convergence study.

    The tolerance band around the target is shaded.
    """
    fig, ax = plt.subplots(figsize=(7, 4))
    ax.hist(study.final_values, bins=bins, color=_MU_COLOR, alpha=0.8)
    ax.axvline(study.target, color=_TARGET_COLOR, linestyle="--", label="optimum")
    ax.axvspan(
        study.target - study.tolerance,
        study.target + study.tolerance,
        color=_TARGET_COLOR,
        alpha=0.15,
        label=f"±{study.tolerance:g}",
    )
    ax.set_title(
        f"Final values over {study.n_runs} runs — hit rate {study.hit_rate * 100:.1f}%",
        fontsize=11,
    )
    ax.set_xlabel("Final bound value", fontsize=9)
    ax.set_ylabel("Runs", fontsize=9)
    ax.legend(fontsize=8)

    return _finish(fig, show, save_path)
