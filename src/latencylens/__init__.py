import logging

from .bounds import (
    DEFAULT_LATENCY_BOUNDS_NS,
    decade_bounds,
    exponential_bounds,
    linear_bounds,
)
from .contracts import Reporter
from .errors import (
    HistogramError,
    IncompatibleHistogramsError,
    InvalidBoundsError,
    InvalidFactorError,
)
from .histogram import FOUR_NINES, MIN_SENTINEL, TWO_NINES, Histogram
from .models import BucketCount, HistogramSummary

__all__ = [
    "DEFAULT_LATENCY_BOUNDS_NS",
    "FOUR_NINES",
    "MIN_SENTINEL",
    "TWO_NINES",
    "BucketCount",
    "Histogram",
    "HistogramError",
    "HistogramSummary",
    "IncompatibleHistogramsError",
    "InvalidBoundsError",
    "InvalidFactorError",
    "Reporter",
    "decade_bounds",
    "exponential_bounds",
    "linear_bounds",
]

logging.getLogger(__name__).addHandler(logging.NullHandler())
