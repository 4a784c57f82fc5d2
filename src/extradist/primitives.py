"""Special-function primitives and the random stream consumed by samplers.

Kernels never call a numerical library directly. They receive a
:class:`SpecialFunctions` bundle (defaulting to :data:`SCIPY_BACKEND`) and, for
sampling, a :class:`RandomSource`. Any backend honouring the standard
mathematical contracts can be substituted.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

import numpy as np
from scipy import special
from scipy import stats

Unary = Callable[[np.ndarray], np.ndarray]
Binary = Callable[[np.ndarray, np.ndarray], np.ndarray]
LocationScale = Callable[[np.ndarray, np.ndarray, np.ndarray], np.ndarray]


@dataclass(frozen=True, slots=True)
class SpecialFunctions:
    """Vectorised special functions used by the distribution kernels."""

    log_gamma: Unary
    normal_pdf: LocationScale
    normal_cdf: LocationScale
    normal_quantile: LocationScale
    poisson_pmf: Binary
    poisson_cdf: Binary
    poisson_quantile: Binary


def _normal_pdf(x: np.ndarray, mu: np.ndarray, sigma: np.ndarray) -> np.ndarray:
    return stats.norm.pdf(x, loc=mu, scale=sigma)


def _normal_cdf(x: np.ndarray, mu: np.ndarray, sigma: np.ndarray) -> np.ndarray:
    return stats.norm.cdf(x, loc=mu, scale=sigma)


def _normal_quantile(p: np.ndarray, mu: np.ndarray, sigma: np.ndarray) -> np.ndarray:
    return stats.norm.ppf(p, loc=mu, scale=sigma)


def _poisson_pmf(x: np.ndarray, lam: np.ndarray) -> np.ndarray:
    return stats.poisson.pmf(x, lam)


def _poisson_cdf(x: np.ndarray, lam: np.ndarray) -> np.ndarray:
    return stats.poisson.cdf(x, lam)


def _poisson_quantile(p: np.ndarray, lam: np.ndarray) -> np.ndarray:
    p, lam = np.broadcast_arrays(np.asarray(p, dtype=float), np.asarray(lam, dtype=float))
    with np.errstate(invalid="ignore"):
        out = np.asarray(stats.poisson.ppf(p, lam), dtype=float)
    out = np.where(p <= 0.0, 0.0, out)
    return np.where(p >= 1.0, np.inf, out)


SCIPY_BACKEND = SpecialFunctions(
    log_gamma=special.gammaln,
    normal_pdf=_normal_pdf,
    normal_cdf=_normal_cdf,
    normal_quantile=_normal_quantile,
    poisson_pmf=_poisson_pmf,
    poisson_cdf=_poisson_cdf,
    poisson_quantile=_poisson_quantile,
)


class RandomSource:
    """Sequential stream of scalar variates backed by a numpy generator."""

    def __init__(self, generator: np.random.Generator | None = None) -> None:
        self._rng = generator if generator is not None else np.random.default_rng()

    @property
    def generator(self) -> np.random.Generator:
        return self._rng

    def uniform(self) -> float:
        return float(self._rng.random())

    def normal(self) -> float:
        return float(self._rng.standard_normal())

    def poisson(self, lam: float) -> float:
        return float(self._rng.poisson(lam))


def as_random_source(
    random_state: RandomSource | np.random.Generator | int | None = None,
    *,
    seed: int | None = None,
) -> RandomSource:
    """Normalise the accepted ``random_state`` forms into a :class:`RandomSource`."""
    if isinstance(random_state, RandomSource):
        return random_state
    if isinstance(random_state, np.random.Generator):
        return RandomSource(random_state)
    if random_state is None:
        return RandomSource(np.random.default_rng(seed))
    return RandomSource(np.random.default_rng(random_state))


__all__ = [
    "RandomSource",
    "SCIPY_BACKEND",
    "SpecialFunctions",
    "as_random_source",
]
