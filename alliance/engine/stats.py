"""
Statistics helpers for the Cross-Entropy Method.

Pure numeric utilities with no dependency on the game model:

    sample_gaussian(mu, sigma2, n, rng) — n draws from Normal(mu, sigma2)
    get_mean(values)                    — population mean
    get_variance(values)                — population (divide-by-n) variance

The sampler uses the polar form of the Box–Muller transform: points (u, v)
are drawn uniformly from the square [-1, 1)^2 and rejected unless their
squared radius r satisfies 0 < r <= 1. Each accepted pair yields one
deviate. There is no cap on the number of rejections; the acceptance rate
is pi/4 regardless of mu and sigma2.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from .errors import DegenerateSamplerError


def sample_gaussian(
    mu: float,
    sigma2: float,
    n: int,
    rng: np.random.Generator,
) -> np.ndarray:
    """Return exactly n samples from Normal(mu, sigma2).

    Args:
        mu:     Mean of the distribution.
        sigma2: Variance of the distribution. Must be > 0.
        n:      Number of samples to return.
        rng:    Source of uniform draws. Never the global NumPy state.

    Returns:
        float64 array of shape (n,).

    Raises:
        DegenerateSamplerError: If sigma2 <= 0.

    Examples:
        >>> rng = np.random.default_rng(0)
        >>> sample_gaussian(0.0, 1.0, 5, rng).shape
        (5,)
    """
    if not sigma2 > 0:
        raise DegenerateSamplerError(f"sampler variance must be > 0, got {sigma2!r}")

    std_dev = np.sqrt(sigma2)
    output = np.empty(n, dtype=np.float64)
    filled = 0

    while filled < n:
        needed = n - filled
        u = rng.uniform(-1.0, 1.0, size=needed)
        v = rng.uniform(-1.0, 1.0, size=needed)
        r = u * u + v * v

        accept = (r > 0.0) & (r <= 1.0)
        u, r = u[accept], r[accept]
        c = np.sqrt(-2.0 * np.log(r) / r)

        output[filled:filled + len(u)] = mu + std_dev * u * c
        filled += len(u)

    return output


def get_mean(values: Sequence[float] | np.ndarray) -> float:
    """Population mean of a non-empty sequence.

    Raises:
        ValueError: If values is empty.
    """
    arr = np.asarray(values, dtype=np.float64)
    if arr.size == 0:
        raise ValueError("Cannot take the mean of an empty sequence.")
    return float(arr.sum() / arr.size)


def get_variance(values: Sequence[float] | np.ndarray) -> float:
    """Population variance (divide by n, not n - 1) of a non-empty sequence.

    Raises:
        ValueError: If values is empty.

    Examples:
        >>> get_variance([1.0, 3.0])
        1.0
    """
    arr = np.asarray(values, dtype=np.float64)
    if arr.size == 0:
        raise ValueError("Cannot take the variance of an empty sequence.")
    mean = arr.sum() / arr.size
    return float(((arr - mean) ** 2).sum() / arr.size)
