"""Convergence diagnostics for the Cross-Entropy Method.

The probe problem is a single continuous decision over a concave payoff:

    ContinuousNode(child=TerminalNode(utility = -(v - target)^2), "v", "p")

Its optimum is known (v = target), so repeated seeded runs measure how
reliably CEM recovers it.

    make_quadratic_probe(target, config, rng) — build the probe tree
    run_convergence_study(n_runs, ...)        — repeated runs + hit-rate CI
    variance_is_non_increasing(trace, ...)    — monotone-variance check

Usage (standalone report):
    python -m alliance.analysis.convergence
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from scipy import stats

from alliance.engine.state import State
from alliance.solvers.cem import CemConfig, CemTrace, ContinuousNode
from alliance.solvers.nodes import TerminalNode

PROBE_VARIABLE: str = "v"
PROBE_ACTOR: str = "p"


# ─── Result type ──────────────────────────────────────────────────────────────


@dataclass
class ConvergenceStudy:
    """Aggregate outcome of repeated CEM runs on the quadratic probe.

    Attributes:
        target:          True optimum of the probe.
        tolerance:       A run is a hit if |final value - target| <= tolerance.
        n_runs:          Number of independent runs.
        n_hits:          Runs that landed within tolerance.
        hit_rate:        n_hits / n_runs.
        ci_95_low:       Clopper–Pearson 95% lower bound on the hit rate.
        ci_95_high:      Clopper–Pearson 95% upper bound on the hit rate.
        final_values:    Final bound value per run (float64, length n_runs).
        iterations:      CEM iterations used per run (int64, length n_runs).
        n_converged:     Runs that stopped on the variance threshold rather
                         than the iteration cap.
    """

    target: float
    tolerance: float
    n_runs: int
    n_hits: int
    hit_rate: float
    ci_95_low: float
    ci_95_high: float
    final_values: np.ndarray
    iterations: np.ndarray
    n_converged: int

    def __str__(self) -> str:
        return (
            f"Runs: {self.n_runs} | "
            f"Hits (|v - {self.target:g}| <= {self.tolerance:g}): {self.n_hits} "
            f"({self.hit_rate * 100:.1f}%) | "
            f"95% CI: [{self.ci_95_low:.3f}, {self.ci_95_high:.3f}] | "
            f"Mean iters: {float(np.mean(self.iterations)):.1f}"
        )


# ─── Probe ────────────────────────────────────────────────────────────────────


def make_quadratic_probe(
    target: float = 5.0,
    config: CemConfig | None = None,
    rng: np.random.Generator | None = None,
) -> ContinuousNode:
    """Continuous decision whose utility is -(v - target)^2."""
    leaf = TerminalNode(
        "probe",
        {PROBE_ACTOR: lambda s: -((s[PROBE_VARIABLE] - target) ** 2)},
    )
    return ContinuousNode(
        child=leaf,
        variable_name=PROBE_VARIABLE,
        actor=PROBE_ACTOR,
        config=config or CemConfig(),
        rng=rng,
    )


def run_convergence_study(
    n_runs: int = 100,
    target: float = 5.0,
    tolerance: float = 0.1,
    seed: int = 0,
    config: CemConfig | None = None,
) -> ConvergenceStudy:
    """Run the quadratic probe n_runs times with independent generators.

    Child generators are spawned from one SeedSequence so the whole study
    is reproducible from seed while every run draws an independent stream.

    Args:
        n_runs:    Number of runs. Must be >= 1.
        target:    Optimum of the probe.
        tolerance: Hit radius around target.
        seed:      Root seed for the study.
        config:    CEM tunables; defaults to CemConfig().

    Returns:
        ConvergenceStudy with hit rate and its exact binomial interval.
    """
    if n_runs < 1:
        raise ValueError(f"n_runs must be >= 1, got {n_runs}")

    state = State()
    children = np.random.SeedSequence(seed).spawn(n_runs)
    final_values = np.empty(n_runs, dtype=np.float64)
    iterations = np.empty(n_runs, dtype=np.int64)
    n_converged = 0

    for i, child_seed in enumerate(children):
        node = make_quadratic_probe(target, config, np.random.default_rng(child_seed))
        trace = node.optimize(state)
        final_values[i] = trace.mu
        iterations[i] = trace.n_iterations
        n_converged += int(trace.converged)

    n_hits = int(np.sum(np.abs(final_values - target) <= tolerance))
    ci = stats.binomtest(n_hits, n_runs).proportion_ci(confidence_level=0.95, method="exact")

    return ConvergenceStudy(
        target=target,
        tolerance=tolerance,
        n_runs=n_runs,
        n_hits=n_hits,
        hit_rate=n_hits / n_runs,
        ci_95_low=float(ci.low),
        ci_95_high=float(ci.high),
        final_values=final_values,
        iterations=iterations,
        n_converged=n_converged,
    )


def variance_is_non_increasing(trace: CemTrace, sigma2_0: float | None = None) -> bool:
    """True if the sampling variance never grew from one iteration to the next.

    Args:
        trace:    CemTrace from ContinuousNode.optimize().
        sigma2_0: Initial variance to prepend to the sequence, if known.
    """
    seq = trace.variances
    if sigma2_0 is not None:
        seq = np.concatenate(([sigma2_0], seq))
    return bool(np.all(np.diff(seq) <= 0.0))


# ─── __main__ ─────────────────────────────────────────────────────────────────

if __name__ == "__main__":
    print("CEM convergence study — quadratic probe, target 5.0, 200 runs\n")
    study = run_convergence_study(n_runs=200)
    print(study)
    print(f"Stopped on variance threshold: {study.n_converged}/{study.n_runs}")
    print(
        f"Final value mean {float(np.mean(study.final_values)):.6f}, "
        f"std {float(np.std(study.final_values)):.3e}"
    )
