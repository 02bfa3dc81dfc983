"""Tests for alliance/analysis/convergence.py — repeated-run CEM diagnostics."""

from __future__ import annotations

import numpy as np
import pytest

from alliance.analysis.convergence import (
    PROBE_ACTOR,
    PROBE_VARIABLE,
    ConvergenceStudy,
    make_quadratic_probe,
    run_convergence_study,
    variance_is_non_increasing,
)
from alliance.solvers.cem import CemConfig, CemIteration, CemTrace


@pytest.fixture(scope="module")
def study() -> ConvergenceStudy:
    return run_convergence_study(n_runs=60, seed=3)


def _trace(variances: list[float]) -> CemTrace:
    return CemTrace(
        variable_name="v",
        actor="p",
        mu=0.0,
        sigma2=variances[-1],
        n_iterations=len(variances),
        converged=False,
        history=[CemIteration(i + 1, 0.0, s2, 0.0, 0.0) for i, s2 in enumerate(variances)],
    )


class TestQuadraticProbe:
    def test_names(self) -> None:
        node = make_quadratic_probe(2.0)
        assert node.variable_name == PROBE_VARIABLE
        assert node.actor == PROBE_ACTOR

    def test_utility_peaks_at_target(self) -> None:
        leaf = make_quadratic_probe(2.0).child
        assert leaf.solve({"v": 2.0}).get_util(PROBE_ACTOR) == 0.0
        assert leaf.solve({"v": 3.0}).get_util(PROBE_ACTOR) == -1.0

    def test_solves_near_target(self) -> None:
        node = make_quadratic_probe(-4.0, rng=np.random.default_rng(0))
        assert node.solve({}).get_var(PROBE_VARIABLE) == pytest.approx(-4.0, abs=0.1)


class TestRunConvergenceStudy:
    def test_hit_rate_at_least_95_percent(self, study) -> None:
        assert study.hit_rate >= 0.95

    def test_counts_consistent(self, study) -> None:
        assert study.n_runs == 60
        assert study.final_values.shape == (60,)
        assert study.iterations.shape == (60,)
        assert study.n_hits == int(np.sum(np.abs(study.final_values - 5.0) <= 0.1))
        assert study.hit_rate == study.n_hits / study.n_runs

    def test_ci_brackets_hit_rate(self, study) -> None:
        assert 0.0 <= study.ci_95_low <= study.hit_rate <= study.ci_95_high <= 1.0

    def test_iterations_within_cap(self, study) -> None:
        assert np.all(study.iterations <= CemConfig().max_iters)
        assert np.all(study.iterations >= 1)

    def test_reproducible(self) -> None:
        a = run_convergence_study(n_runs=5, seed=9)
        b = run_convergence_study(n_runs=5, seed=9)
        np.testing.assert_array_equal(a.final_values, b.final_values)

    def test_runs_are_independent(self) -> None:
        s = run_convergence_study(n_runs=5, seed=9)
        assert len(set(s.final_values.tolist())) == 5

    def test_tight_budget_lowers_hit_rate(self) -> None:
        s = run_convergence_study(n_runs=20, seed=0, config=CemConfig(max_iters=1))
        assert s.n_converged == 0
        assert s.hit_rate < 0.95

    def test_str(self, study) -> None:
        text = str(study)
        assert "Runs: 60" in text
        assert "95% CI" in text

    def test_zero_runs_rejected(self) -> None:
        with pytest.raises(ValueError):
            run_convergence_study(n_runs=0)


class TestVarianceIsNonIncreasing:
    def test_monotone(self) -> None:
        assert variance_is_non_increasing(_trace([4.0, 1.0, 1.0, 0.01]))

    def test_increase_detected(self) -> None:
        assert not variance_is_non_increasing(_trace([4.0, 5.0]))

    def test_initial_variance_prepended(self) -> None:
        assert variance_is_non_increasing(_trace([4.0]))
        assert not variance_is_non_increasing(_trace([4.0]), sigma2_0=1.0)

    def test_empty_history(self) -> None:
        trace = CemTrace("v", "p", 0.0, 10.0, 0, False, [])
        assert variance_is_non_increasing(trace, sigma2_0=10.0)
