"""Dirichlet-multinomial (multivariate Polya) distribution.

Each observation is a row of non-negative integer counts over ``k >= 2``
categories that sums to ``size``; each concentration row has ``k`` strictly
positive entries. Rows of ``x``, rows of ``alpha`` and entries of ``size``
recycle independently, but the column counts of ``x`` and ``alpha`` must
agree exactly or the whole call is aborted.

The mass is evaluated in log-space,

    log p = logG(size + 1) + logG(sum(alpha)) - logG(size + sum(alpha))
            + sum_j [logG(x_j + alpha_j) - logG(x_j + 1) - logG(alpha_j)]

and exponentiated only when the natural scale is requested.
"""

from __future__ import annotations

import numpy as np

from ..adapters import apply_exp
from ..broadcast import as_matrix, as_vector, recycle_all
from ..config import EngineConfig, resolve_config
from ..core import ArrayLike, EvaluationResult, TableLike
from ..diagnostics import DiagnosticReporter, surface
from ..primitives import SCIPY_BACKEND, SpecialFunctions
from ..validation import is_whole_number, tol_equal
from .base import Distribution

NAME = "dirichlet_multinomial"

DEFAULT_SUM_TOLERANCE = 1e-7


def parameters_valid(size: np.ndarray, alpha: np.ndarray) -> np.ndarray:
    return (size > 0.0) & np.all(alpha > 0.0, axis=1)


def in_support(x: np.ndarray) -> np.ndarray:
    return np.all((x >= 0.0) & is_whole_number(x), axis=1)


def pmf(
    x: TableLike,
    size: ArrayLike,
    alpha: TableLike,
    *,
    log_prob: bool = False,
    tolerance: float = DEFAULT_SUM_TOLERANCE,
    backend: SpecialFunctions | None = None,
) -> EvaluationResult:
    fns = backend or SCIPY_BACKEND
    n, (xs, sizes, alphas) = recycle_all(as_matrix(x), as_vector(size), as_matrix(alpha))
    report = DiagnosticReporter(n, distribution=NAME, operation="pdf")
    if n == 0:
        return report.finish(np.empty(0, dtype=float))

    m = xs.shape[1]
    k = alphas.shape[1]
    if min(m, k) < 2:
        return report.abort("Number of columns in 'alpha' should be >= 2.")
    if m != k:
        return report.abort(
            f"Number of columns in 'x' ({m}) does not equal number of columns in 'alpha' ({k})."
        )

    params_ok = parameters_valid(sizes, alphas)
    report.flag(~params_ok)
    support = in_support(xs)
    report.flag(params_ok & support & ~tol_equal(xs.sum(axis=1), sizes, tolerance))
    ok = ~report.invalid & support

    log_gamma = fns.log_gamma
    counts = xs[ok]
    conc = alphas[ok]
    total = sizes[ok]
    conc_sum = conc.sum(axis=1)
    log_p = np.full(n, -np.inf, dtype=float)
    log_p[ok] = (
        log_gamma(total + 1.0)
        + log_gamma(conc_sum)
        - log_gamma(total + conc_sum)
        + np.sum(log_gamma(counts + conc) - log_gamma(counts + 1.0) - log_gamma(conc), axis=1)
    )
    return report.finish(apply_exp(log_p, log_prob))


def dirichlet_multinomial_pmf(
    x: TableLike,
    size: ArrayLike,
    alpha: TableLike,
    *,
    log_prob: bool = False,
    backend: SpecialFunctions | None = None,
    config: EngineConfig | None = None,
) -> np.ndarray:
    """Probability of each composition row of ``x`` given ``size`` and ``alpha``.

    Raises :class:`~extradist.core.ShapeMismatchError` when ``x`` and ``alpha``
    have different column counts or fewer than two categories.
    """
    cfg = resolve_config(config)
    result = pmf(
        x, size, alpha, log_prob=log_prob, tolerance=cfg.sum_tolerance, backend=backend
    )
    return surface(result, cfg)


DISTRIBUTION = Distribution(
    name=NAME,
    parameters=("size", "alpha"),
    pdf=pmf,
    discrete=True,
    multivariate=True,
    matrix_parameters=("alpha",),
    notes="Dirichlet-multinomial over k >= 2 categories; mass only.",
)

__all__ = [
    "DEFAULT_SUM_TOLERANCE",
    "DISTRIBUTION",
    "dirichlet_multinomial_pmf",
]
