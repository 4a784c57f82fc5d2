"""Shared predicates used by the per-distribution domain validators."""

from __future__ import annotations

import numpy as np


def is_whole_number(x: np.ndarray) -> np.ndarray:
    """Mask of finite entries with no fractional part."""
    with np.errstate(invalid="ignore"):
        return np.isfinite(x) & (np.floor(x) == x)


def tol_equal(a: np.ndarray, b: np.ndarray, tolerance: float) -> np.ndarray:
    """Elementwise ``|a - b| < tolerance``, the exact case always counting as equal."""
    with np.errstate(invalid="ignore"):
        return (a == b) | (np.abs(a - b) < tolerance)


def valid_probability(p: np.ndarray) -> np.ndarray:
    """Mask of probabilities inside ``[0, 1]``; NaN entries are not flagged."""
    return ~((p < 0.0) | (p > 1.0))


__all__ = ["is_whole_number", "tol_equal", "valid_probability"]
