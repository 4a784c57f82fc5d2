"""Top-level package exports for extradist."""

from __future__ import annotations

from importlib import metadata

__version__ = "0.1.0"

try:
    __version__ = metadata.version("extradist")
except metadata.PackageNotFoundError:  # pragma: no cover - local dev fallback
    pass

from . import core as core  # noqa: F401
from . import distributions as distributions  # noqa: F401
from .config import EngineConfig, get_config, load_config, set_config  # noqa: F401
from .core import (  # noqa: F401
    CallStatus,
    DomainError,
    DomainWarning,
    EvaluationResult,
    ShapeMismatchError,
)
from .distributions import (  # noqa: F401
    dirichlet_multinomial_pmf,
    half_normal_cdf,
    half_normal_pdf,
    half_normal_quantile,
    half_normal_sample,
    zero_inflated_poisson_cdf,
    zero_inflated_poisson_pmf,
    zero_inflated_poisson_quantile,
    zero_inflated_poisson_sample,
)
from .engine import evaluate, evaluate_values  # noqa: F401
from .primitives import SCIPY_BACKEND, RandomSource, SpecialFunctions  # noqa: F401

__all__ = [
    "__version__",
    "core",
    "distributions",
    "CallStatus",
    "DomainError",
    "DomainWarning",
    "EngineConfig",
    "EvaluationResult",
    "RandomSource",
    "SCIPY_BACKEND",
    "ShapeMismatchError",
    "SpecialFunctions",
    "dirichlet_multinomial_pmf",
    "evaluate",
    "evaluate_values",
    "get_config",
    "half_normal_cdf",
    "half_normal_pdf",
    "half_normal_quantile",
    "half_normal_sample",
    "load_config",
    "set_config",
    "zero_inflated_poisson_cdf",
    "zero_inflated_poisson_pmf",
    "zero_inflated_poisson_quantile",
    "zero_inflated_poisson_sample",
]
