from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class BucketCount(BaseModel):
    """Observation count for a single interval."""

    model_config = ConfigDict(extra="forbid", strict=True, frozen=True)

    upper_bound: int
    count: int


class HistogramSummary(BaseModel):
    """Immutable snapshot of a histogram's aggregates and buckets."""

    model_config = ConfigDict(extra="forbid", strict=True, frozen=True)

    count: int
    min: int | None
    max: int
    mean: float
    two_nines: int
    four_nines: int
    buckets: list[BucketCount]
