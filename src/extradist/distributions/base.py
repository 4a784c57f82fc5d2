"""Registry of the built-in distribution families."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from ..core import EvaluationResult

Operation = Callable[..., EvaluationResult]

OPERATIONS: tuple[str, ...] = ("pdf", "cdf", "quantile", "sample")


@dataclass(slots=True)
class Distribution:
    """Describe a distribution family and its result-returning operations."""

    name: str
    parameters: tuple[str, ...]
    pdf: Operation
    cdf: Operation | None = None
    quantile: Operation | None = None
    sample: Operation | None = None
    discrete: bool = False
    multivariate: bool = False
    matrix_parameters: tuple[str, ...] = ()
    notes: str | None = None

    def operations(self) -> tuple[str, ...]:
        """Names of the operations this family supports."""
        return tuple(name for name in OPERATIONS if getattr(self, name) is not None)

    def operation(self, name: str) -> Operation:
        key = name.lower()
        if key == "pmf":
            key = "pdf"
        if key not in OPERATIONS:
            raise ValueError(
                f"Unknown operation '{name}'. Expected one of: {', '.join(OPERATIONS)}."
            )
        func = getattr(self, key)
        if func is None:
            raise ValueError(f"Operation '{key}' is not defined for distribution '{self.name}'.")
        return func


_REGISTRY: dict[str, Distribution] = {}


def list_distributions() -> Iterable[str]:
    """Return registered distribution names."""
    return sorted(_REGISTRY.keys())


def get_distribution(name: str) -> Distribution:
    """Retrieve a distribution by name."""
    key = name.lower().replace("-", "_")
    if key not in _REGISTRY:
        raise KeyError(f"Unknown distribution '{name}'.")
    return _REGISTRY[key]


def register_distribution(distribution: Distribution, *, overwrite: bool = False) -> None:
    """Register a built-in family under its lower-case name."""
    key = distribution.name.lower()
    if key in _REGISTRY and not overwrite:
        raise ValueError(f"Distribution '{distribution.name}' already registered.")
    _REGISTRY[key] = distribution


__all__ = [
    "Distribution",
    "OPERATIONS",
    "Operation",
    "get_distribution",
    "list_distributions",
    "register_distribution",
]
