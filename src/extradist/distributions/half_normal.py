"""Half-normal distribution with scale ``sigma``.

Support ``x >= 0``; parameter ``sigma > 0``. NaN inputs propagate silently,
a non-positive ``sigma`` (or a quantile probability outside ``[0, 1]``)
yields NaN and one aggregated diagnostic for the call.
"""

from __future__ import annotations

import numpy as np

from ..adapters import apply_log, apply_tail, prepare_probabilities
from ..broadcast import as_vector, cycle_index, draw_count, recycle_all
from ..config import EngineConfig, random_stream, resolve_config
from ..core import ArrayLike, EvaluationResult
from ..diagnostics import NAS_PRODUCED, DiagnosticReporter, surface
from ..primitives import SCIPY_BACKEND, RandomSource, SpecialFunctions, as_random_source
from ..validation import valid_probability
from .base import Distribution

NAME = "half_normal"


def parameters_valid(sigma: np.ndarray) -> np.ndarray:
    return sigma > 0.0


def in_support(x: np.ndarray) -> np.ndarray:
    return x >= 0.0


def pdf(
    x: ArrayLike,
    sigma: ArrayLike,
    *,
    log_prob: bool = False,
    backend: SpecialFunctions | None = None,
) -> EvaluationResult:
    fns = backend or SCIPY_BACKEND
    n, (xs, sigmas) = recycle_all(as_vector(x), as_vector(sigma))
    report = DiagnosticReporter(n, distribution=NAME, operation="pdf")

    missing = np.isnan(xs) | np.isnan(sigmas)
    report.flag(~missing & ~parameters_valid(sigmas))
    ok = ~missing & ~report.invalid & in_support(xs)

    out = np.zeros(n, dtype=float)
    out[missing] = np.nan
    out[ok] = 2.0 * fns.normal_pdf(xs[ok], 0.0, sigmas[ok])
    return report.finish(apply_log(out, log_prob))


def cdf(
    x: ArrayLike,
    sigma: ArrayLike,
    *,
    lower_tail: bool = True,
    log_prob: bool = False,
    backend: SpecialFunctions | None = None,
) -> EvaluationResult:
    fns = backend or SCIPY_BACKEND
    n, (xs, sigmas) = recycle_all(as_vector(x), as_vector(sigma))
    report = DiagnosticReporter(n, distribution=NAME, operation="cdf")

    missing = np.isnan(xs) | np.isnan(sigmas)
    report.flag(~missing & ~parameters_valid(sigmas))
    ok = ~missing & ~report.invalid & in_support(xs)

    out = np.zeros(n, dtype=float)
    out[missing] = np.nan
    out[ok] = 2.0 * fns.normal_cdf(xs[ok], 0.0, sigmas[ok]) - 1.0
    return report.finish(apply_log(apply_tail(out, lower_tail), log_prob))


def quantile(
    p: ArrayLike,
    sigma: ArrayLike,
    *,
    lower_tail: bool = True,
    log_prob: bool = False,
    backend: SpecialFunctions | None = None,
) -> EvaluationResult:
    fns = backend or SCIPY_BACKEND
    probs = prepare_probabilities(as_vector(p), lower_tail, log_prob)
    n, (ps, sigmas) = recycle_all(probs, as_vector(sigma))
    report = DiagnosticReporter(n, distribution=NAME, operation="quantile")

    missing = np.isnan(ps) | np.isnan(sigmas)
    report.flag(~missing & ~(parameters_valid(sigmas) & valid_probability(ps)))
    ok = ~missing & ~report.invalid

    out = np.full(n, np.nan, dtype=float)
    out[ok] = fns.normal_quantile((ps[ok] + 1.0) / 2.0, 0.0, sigmas[ok])
    return report.finish(out)


def sample(
    n: int,
    sigma: ArrayLike,
    *,
    random_state: RandomSource | np.random.Generator | int | None = None,
    seed: int | None = None,
) -> EvaluationResult:
    """Draw ``sigma * |Z|`` for each position, in ascending order."""
    sigmas = as_vector(sigma)
    count = draw_count(n, sigmas.size)
    rng = as_random_source(random_state, seed=seed)
    report = DiagnosticReporter(
        count, distribution=NAME, operation="sample", message=NAS_PRODUCED
    )

    out = np.full(count, np.nan, dtype=float)
    for i in range(count):
        scale = sigmas[cycle_index(i, sigmas.size)]
        if np.isnan(scale) or scale <= 0.0:
            report.flag(True, i)
            continue
        out[i] = abs(rng.normal()) * scale
    return report.finish(out)


def half_normal_pdf(
    x: ArrayLike,
    sigma: ArrayLike,
    *,
    log_prob: bool = False,
    backend: SpecialFunctions | None = None,
    config: EngineConfig | None = None,
) -> np.ndarray:
    """Density ``2 * phi(x / sigma) / sigma`` for ``x >= 0``, recycled elementwise."""
    return surface(pdf(x, sigma, log_prob=log_prob, backend=backend), config)


def half_normal_cdf(
    x: ArrayLike,
    sigma: ArrayLike,
    *,
    lower_tail: bool = True,
    log_prob: bool = False,
    backend: SpecialFunctions | None = None,
    config: EngineConfig | None = None,
) -> np.ndarray:
    """Cumulative probability ``2 * Phi(x / sigma) - 1``."""
    result = cdf(x, sigma, lower_tail=lower_tail, log_prob=log_prob, backend=backend)
    return surface(result, config)


def half_normal_quantile(
    p: ArrayLike,
    sigma: ArrayLike,
    *,
    lower_tail: bool = True,
    log_prob: bool = False,
    backend: SpecialFunctions | None = None,
    config: EngineConfig | None = None,
) -> np.ndarray:
    """Quantile ``sigma * Phi^-1((p + 1) / 2)``."""
    result = quantile(p, sigma, lower_tail=lower_tail, log_prob=log_prob, backend=backend)
    return surface(result, config)


def half_normal_sample(
    n: int,
    sigma: ArrayLike,
    *,
    random_state: RandomSource | np.random.Generator | int | None = None,
    config: EngineConfig | None = None,
) -> np.ndarray:
    cfg = resolve_config(config)
    rng = random_state if random_state is not None else random_stream(cfg)
    return surface(sample(n, sigma, random_state=rng), cfg)


DISTRIBUTION = Distribution(
    name=NAME,
    parameters=("sigma",),
    pdf=pdf,
    cdf=cdf,
    quantile=quantile,
    sample=sample,
    notes="Half-normal (folded zero-mean normal) with scale sigma.",
)

__all__ = [
    "DISTRIBUTION",
    "half_normal_cdf",
    "half_normal_pdf",
    "half_normal_quantile",
    "half_normal_sample",
]
