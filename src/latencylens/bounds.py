from __future__ import annotations

from collections.abc import Sequence

import numpy as np


def linear_bounds(step: int, count: int) -> list[int]:
    """Return ``count`` evenly spaced upper bounds ``step, 2*step, ...``."""
    if step <= 0:
        raise ValueError("step must be positive.")
    if count <= 0:
        raise ValueError("count must be positive.")
    return (np.arange(1, count + 1, dtype=np.int64) * step).tolist()


def exponential_bounds(start: int, factor: float, count: int) -> list[int]:
    """Return ``count`` upper bounds growing geometrically from ``start``.

    Each bound is the previous one times ``factor``, rounded, and at least one
    greater than its predecessor so the sequence stays strictly increasing.
    """
    if start <= 0:
        raise ValueError("start must be positive.")
    if factor <= 1.0:
        raise ValueError("factor must be greater than 1.")
    if count <= 0:
        raise ValueError("count must be positive.")

    bounds = [int(start)]
    for _ in range(count - 1):
        previous = bounds[-1]
        bounds.append(max(int(round(previous * factor)), previous + 1))
    return bounds


def decade_bounds(
    first: int, last: int, mantissas: Sequence[int] = (1, 2, 5)
) -> list[int]:
    """Return ``mantissa * 10**k`` style bounds from ``first`` up to ``last``.

    With the default mantissas this is the familiar 1-2-5 series, e.g.
    ``decade_bounds(1, 100)`` -> ``[1, 2, 5, 10, 20, 50, 100]``.
    """
    if first <= 0:
        raise ValueError("first must be positive.")
    if last < first:
        raise ValueError("last must not be smaller than first.")
    if not mantissas:
        raise ValueError("mantissas must not be empty.")
    previous = 0
    for mantissa in mantissas:
        if not previous < mantissa < 10:
            raise ValueError("mantissas must be strictly increasing within [1, 9].")
        previous = mantissa

    bounds: list[int] = []
    scale = first
    while scale * mantissas[0] <= last:
        for mantissa in mantissas:
            bound = mantissa * scale
            if bound > last:
                break
            bounds.append(bound)
        scale *= 10
    return bounds


DEFAULT_LATENCY_BOUNDS_NS: tuple[int, ...] = tuple(
    decade_bounds(1_000, 10_000_000_000)
)
"""1-2-5 latency layout from 1 microsecond to 10 seconds, in nanoseconds."""
