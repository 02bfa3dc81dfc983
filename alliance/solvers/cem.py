"""
Continuous-choice node solved with the Cross-Entropy Method (CEM).

An actor picks a real value for one state variable. The payoff as a
function of that value comes from recursively solving the continuation
subtree, which may branch internally and need not be smooth, so there is
no closed-form optimum to solve for. CEM treats the continuation as a
black box:

Algorithm
~~~~~~~~~
  Start from Normal(mu0, sigma2_0). While t < max_iters and sigma2 > epsilon:
    1. Draw n_samples values from Normal(mu, sigma2) (polar Box–Muller).
    2. Solve the child once per value v, on state + {variable_name: v}.
    3. Stable-sort the Results by the actor's utility, descending, and keep
       the first n_top as the elite set.
    4. Refit mu and sigma2 to the elite Results' bound values
       (population mean and divide-by-n variance).
  Then solve the child one last time with variable_name bound to mu and
  return that Result. The sampled Results are never returned themselves.

Running out of iterations and collapsing the variance below epsilon are
both normal exits.

Recursion depth is bounded by tree depth: each sample is one child solve
at the same depth, not a deeper nesting.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import NamedTuple

import numpy as np

from alliance.engine.errors import DegenerateSamplerError, InsufficientEliteError
from alliance.engine.result import Result
from alliance.engine.state import State
from alliance.engine.stats import get_mean, get_variance, sample_gaussian
from alliance.solvers.nodes import Node

logger = logging.getLogger(__name__)


# ─── Configuration ────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class CemConfig:
    """Cross-Entropy Method tunables for one ContinuousNode.

    Attributes:
        mu0:       Initial sampling mean.
        sigma2_0:  Initial sampling variance. A wide start (10) lets CEM find
                   optima several units away from mu0.
        max_iters: Hard cap on CEM iterations; the only non-termination guard.
        epsilon:   Stop once the sampling variance falls to this level.
        n_samples: Population size drawn per iteration.
        n_top:     Elite count kept per iteration.
        seed:      Seed for the node's generator when no rng is injected.
                   None draws fresh OS entropy.

    Raises:
        InsufficientEliteError: If n_top < 1 or n_top > n_samples.
        DegenerateSamplerError: If sigma2_0 <= 0.
        ValueError:             If max_iters or epsilon is negative.
    """

    mu0: float = 0.0
    sigma2_0: float = 10.0
    max_iters: int = 50
    epsilon: float = 0.0001
    n_samples: int = 100
    n_top: int = 10
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.n_top < 1 or self.n_top > self.n_samples:
            raise InsufficientEliteError(
                f"need 1 <= n_top <= n_samples, got n_top={self.n_top}, "
                f"n_samples={self.n_samples}"
            )
        if not self.sigma2_0 > 0:
            raise DegenerateSamplerError(
                f"sigma2_0 must be > 0, got {self.sigma2_0!r}"
            )
        if self.max_iters < 0:
            raise ValueError(f"max_iters must be >= 0, got {self.max_iters}")
        if self.epsilon < 0:
            raise ValueError(f"epsilon must be >= 0, got {self.epsilon}")


# ─── Trace types ──────────────────────────────────────────────────────────────


class CemIteration(NamedTuple):
    """Distribution and elite statistics after one CEM iteration.

    Attributes:
        iteration:          1-based iteration number.
        mu:                 Refitted sampling mean.
        sigma2:             Refitted sampling variance.
        best_utility:       Highest utility among this iteration's samples.
        elite_mean_utility: Mean utility over the elite set.
    """

    iteration: int
    mu: float
    sigma2: float
    best_utility: float
    elite_mean_utility: float


@dataclass
class CemTrace:
    """Output of ContinuousNode.optimize().

    Attributes:
        variable_name: Variable that was optimised.
        actor:         Actor whose utility was maximised.
        mu:            Final sampling mean; the value the node commits to.
        sigma2:        Final sampling variance.
        n_iterations:  Iterations actually run (<= max_iters).
        converged:     True if the loop stopped on sigma2 <= epsilon rather
                       than on the iteration cap.
        history:       One CemIteration per iteration, in order.
    """

    variable_name: str
    actor: str
    mu: float
    sigma2: float
    n_iterations: int
    converged: bool
    history: list[CemIteration] = field(default_factory=list)

    @property
    def variances(self) -> np.ndarray:
        """Sampling variance after each iteration, sigma2_0 excluded."""
        return np.array([it.sigma2 for it in self.history], dtype=np.float64)


# ─── Continuous node ──────────────────────────────────────────────────────────


@dataclass
class ContinuousNode:
    """Actor chooses the value of variable_name by Cross-Entropy search.

    Attributes:
        child:         Continuation solved once per sample.
        variable_name: Variable bound by this node. Must not be bound again
                       further down the same path.
        actor:         Actor whose utility ranks the samples.
        config:        CEM tunables.
        rng:           Random source. Defaults to
                       ``np.random.default_rng(config.seed)``. The generator
                       advances across solves, so repeated solves of one
                       node draw different samples.
    """

    child: Node
    variable_name: str
    actor: str
    config: CemConfig = field(default_factory=CemConfig)
    rng: np.random.Generator | None = None

    def __post_init__(self) -> None:
        if self.rng is None:
            self.rng = np.random.default_rng(self.config.seed)

    def _evaluate(self, state: State, samples: np.ndarray) -> list[Result]:
        """Solve the child once per sampled value, each on its own state."""
        return [
            self.child.solve(state.extend(self.variable_name, float(v)))
            for v in samples
        ]

    def optimize(self, state: Mapping[str, float]) -> CemTrace:
        """Run the CEM loop and return the converged distribution.

        Args:
            state: State reaching this node. Not modified.

        Returns:
            CemTrace with the final mu/sigma2 and per-iteration history.
        """
        state = State.of(state)
        cfg = self.config

        mu, sigma2 = cfg.mu0, cfg.sigma2_0
        history: list[CemIteration] = []
        t = 0

        while t < cfg.max_iters and sigma2 > cfg.epsilon:
            samples = sample_gaussian(mu, sigma2, cfg.n_samples, self.rng)
            results = self._evaluate(state, samples)

            utils = [result.get_util(self.actor) for result in results]
            # sorted() is stable with reverse=True: equal utilities keep
            # sample order.
            order = sorted(range(len(results)), key=utils.__getitem__, reverse=True)
            elite = order[: cfg.n_top]

            distro = [results[i].get_var(self.variable_name) for i in elite]
            mu = get_mean(distro)
            sigma2 = get_variance(distro)
            t += 1

            history.append(
                CemIteration(
                    iteration=t,
                    mu=mu,
                    sigma2=sigma2,
                    best_utility=utils[elite[0]],
                    elite_mean_utility=get_mean([utils[i] for i in elite]),
                )
            )
            logger.debug(
                "CEM %s/%s iter %d: mu=%.6f sigma2=%.6g best=%.6f",
                self.actor, self.variable_name, t, mu, sigma2, utils[elite[0]],
            )

        converged = sigma2 <= cfg.epsilon
        logger.debug(
            "CEM %s/%s finished after %d iterations (converged=%s): %s=%.6f",
            self.actor, self.variable_name, t, converged, self.variable_name, mu,
        )
        return CemTrace(
            variable_name=self.variable_name,
            actor=self.actor,
            mu=mu,
            sigma2=sigma2,
            n_iterations=t,
            converged=converged,
            history=history,
        )

    def solve(self, state: Mapping[str, float]) -> Result:
        state = State.of(state)
        trace = self.optimize(state)
        return self.child.solve(state.extend(self.variable_name, trace.mu))
