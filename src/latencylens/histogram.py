from __future__ import annotations

import logging
import math
import operator
from bisect import bisect_left
from collections.abc import Iterable, Sequence
from decimal import Decimal

import numpy as np
from numpy.typing import ArrayLike, NDArray

from latencylens.errors import (
    IncompatibleHistogramsError,
    InvalidBoundsError,
    InvalidFactorError,
)
from latencylens.models import BucketCount, HistogramSummary

logger = logging.getLogger(__name__)

_INT64_MIN = int(np.iinfo(np.int64).min)

MIN_SENTINEL = int(np.iinfo(np.int64).max)
"""Tracked minimum while no observation has been recorded."""

TWO_NINES = 0.99
FOUR_NINES = 0.9999


def _validate_bounds(upper_bounds: Sequence[int]) -> None:
    if len(upper_bounds) == 0:
        logger.error("Histogram bounds are empty.")
        raise InvalidBoundsError(None, None, "empty")

    previous: int | None = None
    for bound in upper_bounds:
        if bound <= 0:
            logger.error("Histogram bound %d is not positive.", bound)
            raise InvalidBoundsError(bound, previous, "non_positive")
        if previous is not None and bound <= previous:
            logger.error(
                "Histogram bound %d is not greater than %d.", bound, previous
            )
            raise InvalidBoundsError(bound, previous, "not_increasing")
        previous = bound


def _half_toward_zero(span: int) -> int:
    half = abs(span) // 2
    return half if span >= 0 else -half


def _round_half_up(numerator: int, denominator: int) -> int:
    quotient, remainder = divmod(abs(numerator), denominator)
    if remainder * 2 >= denominator:
        quotient += 1
    return quotient if numerator >= 0 else -quotient


class Histogram:
    """Frequency of observations falling under fixed interval upper bounds.

    Bucket ``i`` covers ``(upper_bounds[i - 1], upper_bounds[i]]``; the first
    bucket also takes every value at or below its bound, including zero and
    negative values. Values above the last bound are rejected.

    Instances are single-writer: ``add_observation``, ``record_many``,
    ``add_observations`` and ``clear`` must not run concurrently with any
    other call. Producers on several threads should each own a histogram and
    merge them with ``add_observations``.
    """

    def __init__(self, upper_bounds: Iterable[int]) -> None:
        bounds = tuple(operator.index(bound) for bound in upper_bounds)
        _validate_bounds(bounds)

        self._bound_keys: tuple[int, ...] = bounds
        self._top_bound = bounds[-1]
        self._bounds: NDArray[np.int64] = np.array(bounds, dtype=np.int64)
        self._bounds.setflags(write=False)
        self._counts: NDArray[np.int64] = np.zeros(len(bounds), dtype=np.int64)
        self._min_value = MIN_SENTINEL
        self._max_value = 0
        logger.debug(
            "Created histogram with %d buckets up to %d.", len(bounds), self._top_bound
        )

    @property
    def size(self) -> int:
        """Number of buckets."""
        return len(self._bound_keys)

    @property
    def upper_bounds(self) -> NDArray[np.int64]:
        """Read-only view of the interval upper bounds."""
        return self._bounds

    @property
    def counts(self) -> NDArray[np.int64]:
        """Copy of the per-bucket counts."""
        return self._counts.copy()

    def get_upper_bound_at(self, index: int) -> int:
        self._check_index(index)
        return self._bound_keys[index]

    def get_count_at(self, index: int) -> int:
        self._check_index(index)
        return int(self._counts[index])

    def add_observation(self, value: int) -> bool:
        """Record ``value`` in the first bucket whose upper bound is >= value.

        Returns False, leaving the histogram untouched, when the value exceeds
        every upper bound.
        Values below the signed 64-bit range raise OverflowError.
        """
        value = operator.index(value)
        if value > self._top_bound:
            return False
        if value < _INT64_MIN:
            logger.error("Observation %d is below the signed 64-bit range.", value)
            raise OverflowError(
                f"Observation {value} is below the signed 64-bit range."
            )

        self._counts[bisect_left(self._bound_keys, value)] += 1
        self._track_range(value)
        return True

    def record_many(self, values: ArrayLike) -> int:
        """Record a batch of integer values, returning how many were accepted.

        The resulting counts and min/max trackers match calling
        ``add_observation`` on each value in order.
        """
        data = np.asarray(values).ravel()
        if data.size == 0:
            return 0
        if not np.issubdtype(data.dtype, np.integer):
            logger.error("record_many called with non-integer dtype %s.", data.dtype)
            raise TypeError(f"values must be integers, got dtype {data.dtype}.")

        total = int(data.size)
        if data.dtype == np.uint64:
            data = data[data <= np.uint64(self._top_bound)]
        data = data.astype(np.int64, copy=False)
        accepted = data[data <= self._top_bound]
        rejected = total - int(accepted.size)
        if accepted.size == 0:
            logger.debug("Rejected all %d values above %d.", rejected, self._top_bound)
            return 0

        indices = np.searchsorted(self._bounds, accepted, side="left")
        self._counts += np.bincount(indices, minlength=self.size).astype(np.int64)

        # A value only competes for the max when it did not set a new min.
        running_min = np.minimum.accumulate(
            np.concatenate((np.array([self._min_value], dtype=np.int64), accepted))
        )
        new_min = accepted < running_min[:-1]
        self._min_value = int(running_min[-1])
        max_candidates = accepted[~new_min]
        if max_candidates.size:
            self._max_value = max(self._max_value, int(max_candidates.max()))

        logger.debug(
            "Recorded %d values (%d rejected) min=%d max=%d.",
            int(accepted.size),
            rejected,
            self._min_value,
            self._max_value,
        )
        return int(accepted.size)

    def has_same_bounds(self, other: Histogram) -> bool:
        return self.size == other.size and bool(
            np.array_equal(self._bounds, other._bounds)
        )

    def add_observations(self, other: Histogram) -> None:
        """Merge the counts and tracked range of ``other`` into this histogram."""
        if self.size != other.size:
            logger.error(
                "Cannot merge histograms with %d and %d buckets.",
                self.size,
                other.size,
            )
            raise IncompatibleHistogramsError(self.size, other.size)

        mismatched = np.flatnonzero(self._bounds != other._bounds)
        if mismatched.size:
            index = int(mismatched[0])
            logger.error(
                "Cannot merge histograms: bound %d != %d at index %d.",
                self._bound_keys[index],
                other._bound_keys[index],
                index,
            )
            raise IncompatibleHistogramsError(self.size, other.size, index)

        self._counts += other._counts
        self._track_range(other._min_value)
        self._track_range(other._max_value)
        logger.debug(
            "Merged histogram count=%d min=%d max=%d.",
            self.get_count(),
            self._min_value,
            self._max_value,
        )

    def clear(self) -> None:
        self._max_value = 0
        self._min_value = MIN_SENTINEL
        self._counts.fill(0)
        logger.debug("Cleared histogram with %d buckets.", self.size)

    def copy(self) -> Histogram:
        clone = Histogram(self._bound_keys)
        clone._counts[:] = self._counts
        clone._min_value = self._min_value
        clone._max_value = self._max_value
        return clone

    def get_count(self) -> int:
        return int(self._counts.sum())

    def get_min(self) -> int:
        """Smallest observation, or ``MIN_SENTINEL`` when nothing was recorded."""
        return self._min_value

    def get_max(self) -> int:
        """Largest observation, or 0 when nothing was recorded."""
        return self._max_value

    def get_mean(self) -> Decimal:
        """Mean of bucket midpoints weighted by count, to two decimal places.

        The bottom bucket starts at the tracked minimum and the top occupied
        bucket is clipped to the tracked maximum. Ties round half up.
        """
        total_count = self.get_count()
        if total_count == 0:
            return Decimal(0).scaleb(-2)

        counts = self._counts.tolist()
        lower = self._min_value if counts[0] > 0 else 0
        total = 0
        for bound, count in zip(self._bound_keys, counts):
            if count:
                upper = min(bound, self._max_value)
                midpoint = lower + _half_toward_zero(upper - lower)
                total += midpoint * count
            lower = max(bound + 1, self._min_value)

        cents = _round_half_up(total * 100, total_count)
        return Decimal(cents).scaleb(-2)

    def get_two_nines_upper_bound(self) -> int:
        return self.get_upper_bound_for_factor(TWO_NINES)

    def get_four_nines_upper_bound(self) -> int:
        return self.get_upper_bound_for_factor(FOUR_NINES)

    def get_upper_bound_for_factor(self, factor: float) -> int:
        """Upper bound of the bucket below which ``factor`` of observations fall.

        Returns 0 when the histogram is empty.
        """
        if not 0.0 < factor < 1.0:
            logger.error("Invalid percentile factor %s.", factor)
            raise InvalidFactorError(factor)

        total_count = self.get_count()
        tail_target = total_count - math.floor(total_count * factor + 0.5)
        tail_count = 0
        counts = self._counts.tolist()
        for index in range(self.size - 1, -1, -1):
            if counts[index]:
                tail_count += counts[index]
                if tail_count >= tail_target:
                    return self._bound_keys[index]
        return 0

    def summary(self) -> HistogramSummary:
        count = self.get_count()
        return HistogramSummary(
            count=count,
            min=self._min_value if count else None,
            max=self._max_value,
            mean=float(self.get_mean()),
            two_nines=self.get_two_nines_upper_bound(),
            four_nines=self.get_four_nines_upper_bound(),
            buckets=[
                BucketCount(upper_bound=bound, count=bucket_count)
                for bound, bucket_count in zip(
                    self._bound_keys, self._counts.tolist()
                )
            ],
        )

    def _track_range(self, value: int) -> None:
        if value < self._min_value:
            self._min_value = value
        elif value > self._max_value:
            self._max_value = value

    def _check_index(self, index: int) -> None:
        if not 0 <= index < self.size:
            raise IndexError(
                f"Bucket index {index} out of range for {self.size} buckets."
            )

    def __repr__(self) -> str:
        return f"Histogram(upper_bounds={list(self._bound_keys)})"

    def __str__(self) -> str:
        buckets = ", ".join(
            f"{bound}={count}"
            for bound, count in zip(self._bound_keys, self._counts.tolist())
        )
        return (
            f"Histogram{{min={self._min_value}, max={self._max_value}, "
            f"mean={self.get_mean()}, "
            f"99%={self.get_two_nines_upper_bound()}, "
            f"99.99%={self.get_four_nines_upper_bound()}, "
            f"[{buckets}]}}"
        )
