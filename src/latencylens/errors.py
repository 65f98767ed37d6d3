from __future__ import annotations

from typing import Literal


class HistogramError(ValueError):
    """Base class for histogram misuse."""


class InvalidBoundsError(HistogramError):
    """Raised when interval upper bounds are not positive and strictly increasing."""

    def __init__(
        self,
        value: int | None,
        previous: int | None,
        reason: Literal["empty", "non_positive", "not_increasing"],
    ) -> None:
        self.value = value
        self.previous = previous
        self.reason = reason
        if reason == "empty":
            message = "Bounds must contain at least one value."
        elif reason == "non_positive":
            message = f"Bounds must be positive values, got {value}."
        else:
            message = f"bound {value} is not greater than {previous}."
        super().__init__(message)


class IncompatibleHistogramsError(HistogramError):
    """Raised when merging histograms whose intervals differ."""

    def __init__(self, size: int, other_size: int, index: int | None = None) -> None:
        self.size = size
        self.other_size = other_size
        self.index = index
        if index is None:
            detail = f"sizes {size} and {other_size} differ"
        else:
            detail = f"bounds differ at index {index}"
        super().__init__(f"Histograms must have matching intervals: {detail}.")


class InvalidFactorError(HistogramError):
    """Raised when a percentile factor is outside (0, 1)."""

    def __init__(self, factor: float) -> None:
        self.factor = factor
        super().__init__(f"factor must be in (0, 1), got {factor}.")
