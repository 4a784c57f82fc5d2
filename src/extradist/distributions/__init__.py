"""Distribution registry and the built-in kernels."""

from __future__ import annotations

from .base import (
    OPERATIONS,
    Distribution,
    Operation,
    get_distribution,
    list_distributions,
    register_distribution,
)
from .dirichlet_multinomial import DISTRIBUTION as DIRICHLET_MULTINOMIAL
from .dirichlet_multinomial import dirichlet_multinomial_pmf
from .half_normal import DISTRIBUTION as HALF_NORMAL
from .half_normal import (
    half_normal_cdf,
    half_normal_pdf,
    half_normal_quantile,
    half_normal_sample,
)
from .zero_inflated_poisson import DISTRIBUTION as ZERO_INFLATED_POISSON
from .zero_inflated_poisson import (
    zero_inflated_poisson_cdf,
    zero_inflated_poisson_pmf,
    zero_inflated_poisson_quantile,
    zero_inflated_poisson_sample,
)

STANDARD_DISTRIBUTIONS = [HALF_NORMAL, ZERO_INFLATED_POISSON, DIRICHLET_MULTINOMIAL]


def _register_builtin() -> None:
    for dist in STANDARD_DISTRIBUTIONS:
        register_distribution(dist, overwrite=True)


_register_builtin()

__all__ = [
    "DIRICHLET_MULTINOMIAL",
    "Distribution",
    "HALF_NORMAL",
    "OPERATIONS",
    "Operation",
    "STANDARD_DISTRIBUTIONS",
    "ZERO_INFLATED_POISSON",
    "dirichlet_multinomial_pmf",
    "get_distribution",
    "half_normal_cdf",
    "half_normal_pdf",
    "half_normal_quantile",
    "half_normal_sample",
    "list_distributions",
    "register_distribution",
    "zero_inflated_poisson_cdf",
    "zero_inflated_poisson_pmf",
    "zero_inflated_poisson_quantile",
    "zero_inflated_poisson_sample",
]
