"""Cyclic recycling of vectors to a common output length."""

from __future__ import annotations

import numpy as np


def broadcast_length(*lengths: int) -> int:
    """Return the output length for inputs of the given lengths.

    Any empty input yields an empty output.
    """
    if not lengths or min(lengths) == 0:
        return 0
    return int(max(lengths))


def cycle_index(i: int | np.ndarray, length: int) -> int | np.ndarray:
    """Map output position(s) ``i`` onto an input of ``length`` entries."""
    return i % length


def recycle(values: np.ndarray, n: int) -> np.ndarray:
    """Extend or truncate ``values`` along axis 0 to ``n`` entries by cycling."""
    arr = np.asarray(values)
    if n == 0 or arr.shape[0] == 0:
        return arr[:0]
    return arr[cycle_index(np.arange(n), arr.shape[0])]


def draw_count(n: int, *lengths: int) -> int:
    """Number of variates to draw: ``n``, or none when a parameter vector is empty."""
    count = int(n)
    if count < 0:
        raise ValueError("Number of draws must be a non-negative integer.")
    if lengths and min(lengths) == 0:
        return 0
    return count


def as_vector(values: np.ndarray | float | list[float]) -> np.ndarray:
    """Coerce scalars and sequences to a 1-D float array."""
    return np.atleast_1d(np.asarray(values, dtype=float)).ravel()


def as_matrix(values) -> np.ndarray:
    """Coerce a table-like input to a 2-D float array; vectors become one row.

    An empty vector becomes a matrix with no rows.
    """
    arr = np.asarray(values, dtype=float)
    if arr.ndim == 0:
        return arr.reshape(1, 1)
    if arr.ndim == 1:
        return arr.reshape(1, -1) if arr.size else arr.reshape(0, 0)
    if arr.ndim != 2:
        raise ValueError(f"Expected a vector or matrix, got an array with {arr.ndim} dimensions.")
    return arr


def recycle_all(*arrays: np.ndarray) -> tuple[int, list[np.ndarray]]:
    """Recycle every array to the common output length of the call."""
    n = broadcast_length(*(np.asarray(arr).shape[0] for arr in arrays))
    return n, [recycle(arr, n) for arr in arrays]


__all__ = [
    "as_matrix",
    "as_vector",
    "broadcast_length",
    "cycle_index",
    "draw_count",
    "recycle",
    "recycle_all",
]
