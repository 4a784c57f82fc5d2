"""Log-scale and upper-tail transforms applied around kernel results.

Kernels that work on the natural scale are logged after the fact, and the
upper tail is always ``1 - lower``. Both choices trade some precision in the
extreme tails for simplicity.
"""

from __future__ import annotations

import numpy as np


def apply_tail(values: np.ndarray, lower_tail: bool) -> np.ndarray:
    if lower_tail:
        return values
    return 1.0 - values


def apply_log(values: np.ndarray, log_prob: bool) -> np.ndarray:
    if not log_prob:
        return values
    with np.errstate(divide="ignore", invalid="ignore"):
        return np.log(values)


def apply_exp(log_values: np.ndarray, log_prob: bool) -> np.ndarray:
    """Leave log-space results alone or bring them back to the natural scale."""
    if log_prob:
        return log_values
    return np.exp(log_values)


def prepare_probabilities(p: np.ndarray, lower_tail: bool, log_prob: bool) -> np.ndarray:
    """Map quantile inputs onto lower-tail, natural-scale probabilities."""
    probs = np.array(p, dtype=float, copy=True)
    if log_prob:
        probs = np.exp(probs)
    if not lower_tail:
        probs = 1.0 - probs
    return probs


__all__ = [
    "apply_exp",
    "apply_log",
    "apply_tail",
    "prepare_probabilities",
]
