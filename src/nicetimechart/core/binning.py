"""Time binning: shared time domain and uniform calendar buckets.

Bucket edges are ``[domain.start, t1, ..., tn, domain.end]`` where ``t1..tn``
are the tick boundaries strictly inside the domain. Buckets are half-open
``[x0, x1)``. When ``domain.end`` is itself a boundary, points stamped on it
get a zero-width final bucket ``[end, end]``; otherwise the last bucket is
closed on the right.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
import pandas as pd

from nicetimechart.core.errors import EmptyDatasetError
from nicetimechart.core.tick_unit import TickUnit
from nicetimechart.core.types import Bucket, DataPoint, TimeDomain
from nicetimechart.utils.logging import get_logger

logger = get_logger(__name__)


def derive_time_domain(series_list: Sequence[Sequence[DataPoint]], tick_unit: TickUnit) -> TimeDomain:
    """Min/max of the x values of all series combined.

    When every point shares one timestamp the domain is widened by one tick
    unit on each side so binning never sees a zero-width interval.

    Raises:
        EmptyDatasetError: If no series holds any point.
    """
    xs = [p.x for points in series_list for p in points]
    if not xs:
        raise EmptyDatasetError("no data points in any series", reason="empty_dataset")
    lower = min(xs)
    upper = max(xs)
    if lower == upper:
        logger.debug("single timestamp %s, expanding domain by one %s each side", lower, tick_unit)
        lower = tick_unit.offset(lower, -1)
        upper = tick_unit.offset(upper, 1)
    return TimeDomain(start=lower, end=upper)


def bucket_edges(domain: TimeDomain, tick_unit: TickUnit) -> list[pd.Timestamp]:
    """Edges of the buckets subdividing ``domain``, in ascending order.

    ``domain.end`` appears twice when it falls on a tick boundary; the last
    pair then describes the zero-width bucket at the end.
    """
    inner = [t for t in tick_unit.range(domain.start, domain.end) if t > domain.start]
    edges = [domain.start, *inner, domain.end]
    if domain.end > domain.start and tick_unit.floor(domain.end) == domain.end:
        edges.append(domain.end)
    return edges


def bin_series(points: Sequence[DataPoint], domain: TimeDomain, tick_unit: TickUnit) -> list[Bucket]:
    """Assign points to the buckets subdividing ``domain``.

    Every bucket of the subdivision is returned, empty or not; trimming is
    left to the caller.

    Args:
        points: Cleaned points of one series (any order).
        domain: Shared time domain, already expanded if degenerate.
        tick_unit: Granularity that sets the bucket boundaries.

    Returns:
        Buckets in ascending time order with ``mean`` left at 0.0.

    Raises:
        ValueError: If ``domain`` has zero width.
    """
    if domain.is_degenerate:
        raise ValueError(
            f"cannot bin a zero-width domain at {domain.start}; expand it by one {tick_unit} each side first"
        )

    edges = bucket_edges(domain, tick_unit)
    n_buckets = len(edges) - 1
    members: list[list[DataPoint]] = [[] for _ in range(n_buckets)]

    if points:
        xs = np.asarray([p.x.value for p in points], dtype=np.int64)
        thresholds = np.asarray([t.value for t in edges[1:-1]], dtype=np.int64)
        in_domain = (xs >= domain.start.value) & (xs <= domain.end.value)
        # side="right": a point on a threshold starts the next bucket.
        idx = np.searchsorted(thresholds, xs, side="right")
        dropped = int(np.count_nonzero(~in_domain))
        if dropped:
            logger.debug("dropping %s point(s) outside domain [%s, %s]", dropped, domain.start, domain.end)
        for point, i, keep in zip(points, idx.tolist(), in_domain.tolist()):
            if keep:
                members[i].append(point)

    last = n_buckets - 1
    return [
        Bucket(
            x0=edges[i],
            x1=edges[i + 1],
            points=tuple(sorted(members[i], key=lambda p: p.x)),
            closed_right=(i == last),
        )
        for i in range(n_buckets)
    ]
