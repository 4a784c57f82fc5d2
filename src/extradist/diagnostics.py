"""Per-call aggregation and surfacing of parameter-domain violations."""

from __future__ import annotations

import logging
from warnings import warn

import numpy as np

from .config import EngineConfig, resolve_config
from .core import CallStatus, DomainError, DomainWarning, EvaluationResult, ShapeMismatchError

logger = logging.getLogger(__name__)

NANS_PRODUCED = "NaNs produced"
NAS_PRODUCED = "NAs produced"


class DiagnosticReporter:
    """Collect invalid positions over one vectorised call.

    Masks flagged through :meth:`flag` are OR-ed together; :meth:`finish`
    turns them into a single :class:`EvaluationResult` no matter how many
    positions were invalid.
    """

    def __init__(
        self,
        n: int,
        *,
        distribution: str | None = None,
        operation: str | None = None,
        message: str = NANS_PRODUCED,
    ) -> None:
        self._invalid = np.zeros(n, dtype=bool)
        self.distribution = distribution
        self.operation = operation
        self.message = message

    @property
    def invalid(self) -> np.ndarray:
        return self._invalid

    def flag(self, mask: np.ndarray | bool, index: int | None = None) -> None:
        if index is not None:
            self._invalid[index] |= bool(mask)
        else:
            self._invalid |= np.asarray(mask, dtype=bool)

    def finish(self, values: np.ndarray) -> EvaluationResult:
        values = np.asarray(values, dtype=float)
        values[self._invalid] = np.nan
        if not self._invalid.any():
            return EvaluationResult(
                values=values,
                distribution=self.distribution,
                operation=self.operation,
            )
        return EvaluationResult(
            values=values,
            status=CallStatus.PARTIAL_INVALID,
            invalid_mask=self._invalid.copy(),
            message=self.message,
            distribution=self.distribution,
            operation=self.operation,
        )

    def abort(self, reason: str) -> EvaluationResult:
        return EvaluationResult(
            values=np.empty(0, dtype=float),
            status=CallStatus.ABORTED,
            message=reason,
            distribution=self.distribution,
            operation=self.operation,
        )


def surface(result: EvaluationResult, config: EngineConfig | None = None) -> np.ndarray:
    """Report the outcome of a call according to the warning policy and return its values."""
    if result.status is CallStatus.ABORTED:
        raise ShapeMismatchError(result.message or "Evaluation aborted.")
    if result.status is CallStatus.OK:
        return result.values

    cfg = resolve_config(config)
    label = f"{result.distribution}.{result.operation}" if result.distribution else "evaluation"
    message = result.message or NANS_PRODUCED
    if cfg.warning_policy == "warn":
        warn(message, DomainWarning, stacklevel=3)
    elif cfg.warning_policy == "log":
        logger.warning("%s: %s (%d invalid position(s))", label, message, result.invalid)
    elif cfg.warning_policy == "raise":
        raise DomainError(f"{label}: {message} ({result.invalid} invalid position(s)).")
    else:
        logger.debug("%s: %s suppressed by policy", label, message)
    return result.values


__all__ = [
    "DiagnosticReporter",
    "NANS_PRODUCED",
    "NAS_PRODUCED",
    "surface",
]
