"""Value types shared by the binning, scaling and interaction steps.

Everything here is immutable: a render pass builds fresh instances and
interactions keep references to them without risk of a later render
mutating them.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

import numpy as np
import pandas as pd


def to_timestamp(value: Any) -> pd.Timestamp:
    """Coerce ``value`` to a naive (UTC) pandas Timestamp.

    Timezone-aware values are converted to UTC first.

    Raises:
        ValueError: If ``value`` cannot be parsed or is NaT.
    """
    ts = pd.Timestamp(value)
    if pd.isna(ts):
        raise ValueError(f"not a valid timestamp: {value!r}")
    if ts.tzinfo is not None:
        ts = ts.tz_convert("UTC").tz_localize(None)
    return ts


@dataclass(frozen=True)
class DataPoint:
    """A single (time, value) sample."""

    x: pd.Timestamp
    y: float


@dataclass(frozen=True)
class TimeDomain:
    """Closed time interval ``[start, end]`` shared by every series of a chart."""

    start: pd.Timestamp
    end: pd.Timestamp

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(f"TimeDomain start {self.start} is after end {self.end}")

    @property
    def is_degenerate(self) -> bool:
        return self.start == self.end

    @property
    def span(self) -> pd.Timedelta:
        return self.end - self.start

    def contains(self, t: pd.Timestamp) -> bool:
        return self.start <= t <= self.end


@dataclass(frozen=True)
class Bucket:
    """Time bucket ``[x0, x1)`` holding the points assigned to it.

    ``closed_right`` is set on the last bucket of a domain, which also owns
    points sitting exactly on the domain end. That bucket has zero width
    (``x0 == x1 == end``) when the end falls on a tick boundary.
    """

    x0: pd.Timestamp
    x1: pd.Timestamp
    points: tuple[DataPoint, ...] = ()
    mean: float = 0.0
    closed_right: bool = False

    @property
    def count(self) -> int:
        return len(self.points)

    @property
    def is_empty(self) -> bool:
        return not self.points

    @property
    def width(self) -> pd.Timedelta:
        return self.x1 - self.x0

    @property
    def midpoint(self) -> pd.Timestamp:
        return self.x0 + (self.x1 - self.x0) / 2

    @property
    def values(self) -> np.ndarray:
        return np.asarray([p.y for p in self.points], dtype=np.float64)

    def contains(self, t: pd.Timestamp) -> bool:
        if self.closed_right:
            return self.x0 <= t <= self.x1
        return self.x0 <= t < self.x1

    def with_mean(self, mean: float) -> "Bucket":
        return replace(self, mean=float(mean))


@dataclass(frozen=True)
class SeriesBins:
    """Aggregated, edge-trimmed buckets of one series."""

    series_index: int
    buckets: tuple[Bucket, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.buckets)

    @property
    def is_empty(self) -> bool:
        return not self.buckets

    @property
    def means(self) -> np.ndarray:
        return np.asarray([b.mean for b in self.buckets], dtype=np.float64)

    def extent(self) -> tuple[float, float]:
        """Return ``(min, max)`` of the bucket means.

        Raises:
            ValueError: If there are no buckets.
        """
        if not self.buckets:
            raise ValueError(f"series {self.series_index} has no buckets")
        means = self.means
        return float(np.min(means)), float(np.max(means))
