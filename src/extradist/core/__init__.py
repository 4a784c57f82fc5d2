"""Core dataclasses, exceptions and shared type aliases for extradist modules."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeAlias

import numpy as np
import pandas as pd

ArrayLike: TypeAlias = np.ndarray | Sequence[float] | float
TableLike: TypeAlias = pd.DataFrame | np.ndarray | Sequence[Sequence[float]] | Sequence[float]


class ShapeMismatchError(ValueError):
    """Raised when matrix inputs disagree on their column layout."""


class DomainError(ValueError):
    """Raised for parameter-domain violations under the ``raise`` policy."""


class DomainWarning(RuntimeWarning):
    """Aggregated warning emitted once per call with invalid parameters."""


class CallStatus(str, Enum):
    """Outcome of one vectorised evaluation."""

    OK = "ok"
    PARTIAL_INVALID = "partial_invalid"
    ABORTED = "aborted"


@dataclass(frozen=True, slots=True)
class EvaluationResult:
    """Output vector of a call together with its diagnostic outcome."""

    values: np.ndarray
    status: CallStatus = CallStatus.OK
    invalid_mask: np.ndarray | None = None
    message: str | None = None
    distribution: str | None = None
    operation: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is CallStatus.OK

    @property
    def invalid(self) -> int:
        """Number of positions with a parameter-domain violation."""
        if self.invalid_mask is None:
            return 0
        return int(np.count_nonzero(self.invalid_mask))

    @property
    def valid_mask(self) -> np.ndarray:
        """Positions that did not hit a parameter-domain violation."""
        if self.invalid_mask is None:
            return np.ones(self.values.shape, dtype=bool)
        return ~self.invalid_mask

    def unwrap(self) -> np.ndarray:
        """Return the values, raising if the call was aborted."""
        if self.status is CallStatus.ABORTED:
            raise ShapeMismatchError(self.message or "Evaluation aborted.")
        return self.values

    def to_frame(self) -> pd.DataFrame:
        """Return a tidy data frame with one row per output position."""
        records: list[dict[str, Any]] = []
        valid = self.valid_mask
        for index, value in enumerate(self.values):
            records.append({"index": index, "value": float(value), "valid": bool(valid[index])})
        return pd.DataFrame.from_records(records, columns=["index", "value", "valid"])


__all__ = [
    "ArrayLike",
    "TableLike",
    "CallStatus",
    "EvaluationResult",
    "ShapeMismatchError",
    "DomainError",
    "DomainWarning",
]
