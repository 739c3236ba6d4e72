"""Per-bucket aggregation and edge trimming."""

from __future__ import annotations

import math
from decimal import ROUND_HALF_DOWN, ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Sequence

import numpy as np

from nicetimechart.core.types import Bucket

# Mean reported for a bucket without points. Kept at 0 so scales and
# renderers never see NaN; note it pulls a shared Y minimum towards 0.
EMPTY_BUCKET_MEAN = 0.0


def bucket_mean(bucket: Bucket) -> float:
    """Arithmetic mean of the bucket's y values, or EMPTY_BUCKET_MEAN when empty."""
    if bucket.is_empty:
        return EMPTY_BUCKET_MEAN
    return float(np.mean(bucket.values))


def aggregate(buckets: Sequence[Bucket]) -> list[Bucket]:
    """Return copies of ``buckets`` with ``mean`` filled in."""
    return [b.with_mean(bucket_mean(b)) for b in buckets]


def trim_empty_buckets(buckets: Sequence[Bucket]) -> list[Bucket]:
    """Drop empty buckets at the start and end; interior empties are kept."""
    start = 0
    stop = len(buckets)
    while start < stop and buckets[start].is_empty:
        start += 1
    while stop > start and buckets[stop - 1].is_empty:
        stop -= 1
    return list(buckets[start:stop])


def round_value(value: float, decimals: int = 0) -> float:
    """Round a displayed aggregate to ``decimals`` places, halves toward +infinity.

    Matches JavaScript ``Math.round``: 2.5 becomes 3 and -2.5 becomes -2.
    NaN and infinities display as 0.
    """
    if value is None or not math.isfinite(value):
        return 0.0
    if decimals < 0:
        raise ValueError(f"decimals must be >= 0, got {decimals}")
    quant = Decimal("1").scaleb(-decimals)
    rounding = ROUND_HALF_UP if value >= 0 else ROUND_HALF_DOWN
    try:
        return float(Decimal(repr(float(value))).quantize(quant, rounding=rounding))
    except InvalidOperation:
        return float(value)
