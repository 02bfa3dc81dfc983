"""Actor Alliance Game Solver — Streamlit Dashboard.

Three-tab dashboard:
  Tab 1 — Reference Scenario   (edit parameters, solve, per-actor utilities)
  Tab 2 — CEM Explorer         (one continuous decision: trace + landscape)
  Tab 3 — Convergence Study    (repeated seeded runs, hit-rate interval)

Run:
    streamlit run app.py
"""

from __future__ import annotations

import contextlib
import io

import matplotlib

matplotlib.use("Agg")  # must be set before any other matplotlib imports

import streamlit as st

# ─── Page config ──────────────────────────────────────────────────────────────

st.set_page_config(
    page_title="Actor Alliance Game Solver",
    layout="wide",
)

# ─── Lazy imports (inside functions to keep startup fast) ─────────────────────


@st.cache_resource
def _load_modules():
    """Import solver and analysis modules once (cached for the process lifetime)."""
    import numpy as np

    from alliance.analysis.convergence import (
        make_quadratic_probe,
        run_convergence_study,
        variance_is_non_increasing,
    )
    from alliance.analysis.landscape import build_landscape_figure, compute_landscape
    from alliance.analysis.report import print_cem_trace, print_result
    from alliance.analysis.trace_plots import plot_cem_trace, plot_final_value_histogram
    from alliance.scenario.alliance_game import ACTORS, ScenarioParams, get_root, get_state
    from alliance.solvers.cem import CemConfig

    return {
        "np": np,
        "make_quadratic_probe": make_quadratic_probe,
        "run_convergence_study": run_convergence_study,
        "variance_is_non_increasing": variance_is_non_increasing,
        "build_landscape_figure": build_landscape_figure,
        "compute_landscape": compute_landscape,
        "print_cem_trace": print_cem_trace,
        "print_result": print_result,
        "plot_cem_trace": plot_cem_trace,
        "plot_final_value_histogram": plot_final_value_histogram,
        "ACTORS": ACTORS,
        "ScenarioParams": ScenarioParams,
        "get_root": get_root,
        "get_state": get_state,
        "CemConfig": CemConfig,
    }


m = _load_modules()

# ─── Sidebar controls ─────────────────────────────────────────────────────────

with st.sidebar:
    st.title("Actor Alliance Game")
    st.markdown("---")
    st.subheader("CEM settings")

    sigma2_0 = st.number_input("Initial variance sigma2_0", min_value=0.01, value=10.0)
    n_samples = st.slider("Population size N", min_value=10, max_value=500, value=100, step=10)
    n_top = st.slider("Elite count nTop", min_value=1, max_value=100, value=10)
    max_iters = st.slider("Max iterations", min_value=1, max_value=200, value=50)
    seed = st.number_input("Seed", min_value=0, value=42, step=1)

    st.markdown("---")
    st.caption("Terminal / Discrete / Continuous nodes, CEM for continuous choices")

# Clamp so the slider combination can never violate n_top <= n_samples.
cem_config = m["CemConfig"](
    sigma2_0=float(sigma2_0),
    n_samples=int(n_samples),
    n_top=min(int(n_top), int(n_samples)),
    max_iters=int(max_iters),
)

# ─── Tabs ─────────────────────────────────────────────────────────────────────

tab1, tab2, tab3 = st.tabs(
    [
        "Reference Scenario",
        "CEM Explorer",
        "Convergence Study",
    ]
)

# ── Tab 1: Reference Scenario ─────────────────────────────────────────────────

with tab1:
    st.header("Reference Scenario")
    st.caption(
        "Baselines are derived from the parameters: bd = pd1, br = pr1, ba = pa. "
        "The declared root is terminal t1."
    )

    defaults = m["ScenarioParams"]()
    cols = st.columns(6)
    values = {}
    for col, name in zip(cols, ["pd1", "pr1", "pa", "pd2", "pr2", "k"]):
        values[name] = col.number_input(
            name, min_value=0.0, max_value=1.0, value=getattr(defaults, name), step=0.001,
            format="%.3f",
        )

    state = m["get_state"](m["ScenarioParams"](**values))
    result = m["get_root"]().solve(state)

    metric_cols = st.columns(len(m["ACTORS"]))
    for col, actor in zip(metric_cols, m["ACTORS"]):
        col.metric(f"U({actor})", f"{result.get_util(actor):+.4f}")

    buf = io.StringIO()
    with contextlib.redirect_stdout(buf):
        m["print_result"](result, m["ACTORS"])
    st.code(buf.getvalue(), language=None)

# ── Tab 2: CEM Explorer ───────────────────────────────────────────────────────

with tab2:
    st.header("CEM Explorer")
    st.caption("Single continuous decision with utility -(v - target)^2.")

    target = st.slider("Target", min_value=-10.0, max_value=10.0, value=5.0, step=0.5)

    rng = m["np"].random.default_rng(int(seed))
    probe = m["make_quadratic_probe"](target, cem_config, rng)
    trace = probe.optimize({})

    col1, col2, col3 = st.columns(3)
    col1.metric("Chosen v", f"{trace.mu:.4f}", f"{trace.mu - target:+.2e} vs target")
    col2.metric("Iterations", f"{trace.n_iterations}")
    col3.metric("Final sigma2", f"{trace.sigma2:.2e}")

    monotone = m["variance_is_non_increasing"](trace, cem_config.sigma2_0)
    st.caption(f"Variance non-increasing across iterations: {'yes' if monotone else 'no'}")

    st.pyplot(m["plot_cem_trace"](trace, target=target, show=False))

    landscape = m["compute_landscape"](probe, {})
    st.plotly_chart(
        m["build_landscape_figure"](landscape, chosen_value=trace.mu),
        use_container_width=True,
    )

    buf = io.StringIO()
    with contextlib.redirect_stdout(buf):
        m["print_cem_trace"](trace)
    st.code(buf.getvalue(), language=None)

# ── Tab 3: Convergence Study ──────────────────────────────────────────────────

with tab3:
    st.header("Convergence Study")
    st.caption("Independent seeded runs on the quadratic probe (target 5).")

    n_runs = st.slider("Runs", min_value=10, max_value=500, value=50, step=10)
    tolerance = st.number_input("Hit tolerance", min_value=0.001, value=0.1)

    with st.spinner(f"Running {n_runs} CEM optimisations …"):
        study = m["run_convergence_study"](
            n_runs=n_runs, tolerance=float(tolerance), seed=int(seed), config=cem_config
        )

    col1, col2, col3 = st.columns(3)
    col1.metric("Hit rate", f"{study.hit_rate * 100:.1f}%")
    col2.metric("95% CI", f"[{study.ci_95_low:.3f}, {study.ci_95_high:.3f}]")
    col3.metric("Stopped on variance", f"{study.n_converged}/{study.n_runs}")

    st.pyplot(m["plot_final_value_histogram"](study, show=False))
