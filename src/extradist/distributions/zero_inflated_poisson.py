"""Zero-inflated Poisson: a point mass ``pi`` at zero mixed with Poisson(``lam``)."""

from __future__ import annotations

import numpy as np

from ..adapters import apply_log, apply_tail, prepare_probabilities
from ..broadcast import as_vector, cycle_index, draw_count, recycle_all
from ..config import EngineConfig, random_stream, resolve_config
from ..core import ArrayLike, EvaluationResult
from ..diagnostics import DiagnosticReporter, surface
from ..primitives import SCIPY_BACKEND, RandomSource, SpecialFunctions, as_random_source
from ..validation import is_whole_number, valid_probability
from .base import Distribution

NAME = "zero_inflated_poisson"


def parameters_valid(lam: np.ndarray, pi: np.ndarray) -> np.ndarray:
    return (lam > 0.0) & (pi >= 0.0) & (pi <= 1.0)


def in_support(x: np.ndarray) -> np.ndarray:
    return (x >= 0.0) & is_whole_number(x)


def _recycled(*arrays: ArrayLike) -> tuple[int, list[np.ndarray], np.ndarray]:
    n, recycled = recycle_all(*(as_vector(arr) for arr in arrays))
    missing = np.zeros(n, dtype=bool)
    for arr in recycled:
        missing |= np.isnan(arr)
    return n, recycled, missing


def pmf(
    x: ArrayLike,
    lam: ArrayLike,
    pi: ArrayLike,
    *,
    log_prob: bool = False,
    backend: SpecialFunctions | None = None,
) -> EvaluationResult:
    fns = backend or SCIPY_BACKEND
    n, (xs, lams, pis), missing = _recycled(x, lam, pi)
    report = DiagnosticReporter(n, distribution=NAME, operation="pdf")
    report.flag(~missing & ~parameters_valid(lams, pis))
    ok = ~missing & ~report.invalid & in_support(xs)

    out = np.zeros(n, dtype=float)
    out[missing] = np.nan
    zero = ok & (xs == 0.0)
    positive = ok & (xs > 0.0)
    out[zero] = pis[zero] + (1.0 - pis[zero]) * np.exp(-lams[zero])
    out[positive] = (1.0 - pis[positive]) * fns.poisson_pmf(xs[positive], lams[positive])
    return report.finish(apply_log(out, log_prob))


def cdf(
    x: ArrayLike,
    lam: ArrayLike,
    pi: ArrayLike,
    *,
    lower_tail: bool = True,
    log_prob: bool = False,
    backend: SpecialFunctions | None = None,
) -> EvaluationResult:
    fns = backend or SCIPY_BACKEND
    n, (xs, lams, pis), missing = _recycled(x, lam, pi)
    report = DiagnosticReporter(n, distribution=NAME, operation="cdf")
    report.flag(~missing & ~parameters_valid(lams, pis))
    ok = ~missing & ~report.invalid & (xs >= 0.0)

    out = np.zeros(n, dtype=float)
    out[missing] = np.nan
    out[ok] = _cdf_core(xs[ok], lams[ok], pis[ok], fns)
    return report.finish(apply_log(apply_tail(out, lower_tail), log_prob))


def _cdf_core(
    x: np.ndarray, lam: np.ndarray, pi: np.ndarray, fns: SpecialFunctions
) -> np.ndarray:
    return pi + (1.0 - pi) * fns.poisson_cdf(x, lam)


def _settle_counts(
    q: np.ndarray, p: np.ndarray, lam: np.ndarray, pi: np.ndarray, fns: SpecialFunctions
) -> np.ndarray:
    """Move candidate counts to the smallest ``q`` with ``cdf(q) >= p``.

    The Poisson inversion works on ``(p - pi) / (1 - pi)``, whose rounding can
    leave the candidate one or more steps off the mixture's own cdf.
    """
    q = q.copy()
    finite = np.isfinite(q)
    down = finite & (q > 0.0)
    down[down] = _cdf_core(q[down] - 1.0, lam[down], pi[down], fns) >= p[down]
    while np.any(down):
        q[down] -= 1.0
        down &= q > 0.0
        down[down] = _cdf_core(q[down] - 1.0, lam[down], pi[down], fns) >= p[down]

    up = finite.copy()
    up[up] = fns.poisson_cdf(q[up], lam[up]) < 1.0
    up[up] = _cdf_core(q[up], lam[up], pi[up], fns) < p[up]
    while np.any(up):
        q[up] += 1.0
        up[up] = fns.poisson_cdf(q[up], lam[up]) < 1.0
        up[up] = _cdf_core(q[up], lam[up], pi[up], fns) < p[up]
    return q


def quantile(
    p: ArrayLike,
    lam: ArrayLike,
    pi: ArrayLike,
    *,
    lower_tail: bool = True,
    log_prob: bool = False,
    backend: SpecialFunctions | None = None,
) -> EvaluationResult:
    """Smallest count whose cumulative probability reaches ``p``.

    Probabilities below the zero-inflation weight map straight to zero; the
    remainder is rescaled onto the Poisson component.
    """
    fns = backend or SCIPY_BACKEND
    probs = prepare_probabilities(as_vector(p), lower_tail, log_prob)
    n, (ps, lams, pis), missing = _recycled(probs, lam, pi)
    report = DiagnosticReporter(n, distribution=NAME, operation="quantile")
    report.flag(~missing & ~(parameters_valid(lams, pis) & valid_probability(ps)))
    ok = ~missing & ~report.invalid

    out = np.full(n, np.nan, dtype=float)
    zero = ok & ((ps < pis) | (pis == 1.0))
    rest = ok & ~zero
    out[zero] = 0.0
    rescaled = (ps[rest] - pis[rest]) / (1.0 - pis[rest])
    candidate = np.asarray(fns.poisson_quantile(rescaled, lams[rest]), dtype=float)
    out[rest] = _settle_counts(candidate, ps[rest], lams[rest], pis[rest], fns)
    return report.finish(out)


def sample(
    n: int,
    lam: ArrayLike,
    pi: ArrayLike,
    *,
    random_state: RandomSource | np.random.Generator | int | None = None,
    seed: int | None = None,
) -> EvaluationResult:
    """Draw one uniform per position and a Poisson variate only outside the zero branch."""
    lams = as_vector(lam)
    pis = as_vector(pi)
    count = draw_count(n, lams.size, pis.size)
    rng = as_random_source(random_state, seed=seed)
    report = DiagnosticReporter(count, distribution=NAME, operation="sample")

    out = np.full(count, np.nan, dtype=float)
    for i in range(count):
        rate = lams[cycle_index(i, lams.size)]
        weight = pis[cycle_index(i, pis.size)]
        if not (rate > 0.0 and 0.0 <= weight <= 1.0):
            report.flag(True, i)
            continue
        if rng.uniform() < weight:
            out[i] = 0.0
        else:
            out[i] = rng.poisson(rate)
    return report.finish(out)


def zero_inflated_poisson_pmf(
    x: ArrayLike,
    lam: ArrayLike,
    pi: ArrayLike,
    *,
    log_prob: bool = False,
    backend: SpecialFunctions | None = None,
    config: EngineConfig | None = None,
) -> np.ndarray:
    """Probability mass, recycled elementwise over ``x``, ``lam`` and ``pi``."""
    return surface(pmf(x, lam, pi, log_prob=log_prob, backend=backend), config)


def zero_inflated_poisson_cdf(
    x: ArrayLike,
    lam: ArrayLike,
    pi: ArrayLike,
    *,
    lower_tail: bool = True,
    log_prob: bool = False,
    backend: SpecialFunctions | None = None,
    config: EngineConfig | None = None,
) -> np.ndarray:
    result = cdf(x, lam, pi, lower_tail=lower_tail, log_prob=log_prob, backend=backend)
    return surface(result, config)


def zero_inflated_poisson_quantile(
    p: ArrayLike,
    lam: ArrayLike,
    pi: ArrayLike,
    *,
    lower_tail: bool = True,
    log_prob: bool = False,
    backend: SpecialFunctions | None = None,
    config: EngineConfig | None = None,
) -> np.ndarray:
    result = quantile(p, lam, pi, lower_tail=lower_tail, log_prob=log_prob, backend=backend)
    return surface(result, config)


def zero_inflated_poisson_sample(
    n: int,
    lam: ArrayLike,
    pi: ArrayLike,
    *,
    random_state: RandomSource | np.random.Generator | int | None = None,
    config: EngineConfig | None = None,
) -> np.ndarray:
    cfg = resolve_config(config)
    rng = random_state if random_state is not None else random_stream(cfg)
    return surface(sample(n, lam, pi, random_state=rng), cfg)


DISTRIBUTION = Distribution(
    name=NAME,
    parameters=("lam", "pi"),
    pdf=pmf,
    cdf=cdf,
    quantile=quantile,
    sample=sample,
    discrete=True,
    notes="Poisson(lam) with extra probability pi of a structural zero.",
)

__all__ = [
    "DISTRIBUTION",
    "zero_inflated_poisson_cdf",
    "zero_inflated_poisson_pmf",
    "zero_inflated_poisson_quantile",
    "zero_inflated_poisson_sample",
]
