"""Pointer hit-testing against aggregated buckets (tooltips).

The pointer time is matched to the first bucket with ``x0 <= t <= x1``;
when it is nearer that bucket's upper edge and a following bucket exists,
the following bucket wins. Series may have different bucket counts after
edge trimming, so multi-series lookups resolve an index per series by time
rather than reusing one index for all of them.
"""

from __future__ import annotations

import bisect
from dataclasses import dataclass
from typing import Literal, Mapping, Optional, Sequence

import pandas as pd

from nicetimechart.core.aggregation import round_value
from nicetimechart.core.alignment import AlignedChart
from nicetimechart.core.scales import LinearScale
from nicetimechart.core.types import Bucket
from nicetimechart.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class BinHit:
    """Bucket resolved for one series at a pointer position."""

    series_index: int
    bucket_index: int
    bucket: Bucket
    value: float


@dataclass(frozen=True)
class LabelPlacement:
    """Pixel position and text anchor for a tooltip value label."""

    x: float
    y: float
    anchor: Literal["start", "end"]


def locate(buckets: Sequence[Bucket], t: pd.Timestamp) -> int:
    """Index of the bucket under pointer time ``t``.

    A pointer before the first bucket maps to 0 and one after the last
    bucket maps to the last index.

    Raises:
        ValueError: If ``buckets`` is empty.
    """
    if not buckets:
        raise ValueError("cannot locate a pointer in an empty bucket list")
    t = pd.Timestamp(t)
    last = len(buckets) - 1

    # First bucket whose upper edge is >= t; buckets are contiguous or
    # separated by trimmed gaps, so that is the first with x0 <= t <= x1
    # whenever one exists.
    upper_edges = [b.x1 for b in buckets]
    index = bisect.bisect_left(upper_edges, t)
    if index > last:
        return last
    bucket = buckets[index]
    if t < bucket.x0:
        return index

    if (t - bucket.x0) > (bucket.x1 - t) and index < last:
        index += 1
    return index


def locate_all(
    aligned: AlignedChart,
    t: pd.Timestamp,
    *,
    decimals: int | Mapping[int, int] = 0,
) -> tuple[BinHit, ...]:
    """Resolve the bucket under ``t`` for every rendered series.

    Args:
        aligned: Result of SeriesAligner.align for the current render.
        t: Pointer position in domain time.
        decimals: Display precision for ``BinHit.value``; either one value
            for all series or a mapping of series index to precision.
    """
    hits: list[BinHit] = []
    for sb in aligned.series_bins:
        if sb.is_empty:
            continue
        index = locate(sb.buckets, t)
        bucket = sb.buckets[index]
        places = decimals.get(sb.series_index, 0) if isinstance(decimals, Mapping) else decimals
        hits.append(
            BinHit(
                series_index=sb.series_index,
                bucket_index=index,
                bucket=bucket,
                value=round_value(bucket.mean, places),
            )
        )
    return tuple(hits)


def locate_pixel(
    aligned: AlignedChart,
    pixel_x: float,
    *,
    decimals: int | Mapping[int, int] = 0,
) -> tuple[pd.Timestamp, tuple[BinHit, ...]]:
    """Invert ``pixel_x`` through the X scale, then locate_all."""
    t = aligned.x_scale.invert(pixel_x)
    return t, locate_all(aligned, t, decimals=decimals)


def label_placement(
    buckets: Sequence[Bucket],
    index: int,
    x_pixel: float,
    y_scale: LinearScale,
    canvas_height: float,
    *,
    offset: float = 20.0,
) -> LabelPlacement:
    """Place a tooltip value label next to the marker of ``buckets[index]``.

    Labels in the first half of the series are anchored at their start and
    compared against the next point; labels in the second half are anchored
    at their end and compared against the previous point. The label moves
    ``offset`` pixels away from that neighbour (up when the neighbour is
    lower on screen) and is kept ``offset`` pixels inside the canvas.
    """
    y = y_scale.apply(buckets[index].mean)
    neighbour: Optional[int]
    if index < len(buckets) / 2:
        anchor: Literal["start", "end"] = "start"
        neighbour = index + 1 if index + 1 < len(buckets) else None
    else:
        anchor = "end"
        neighbour = index - 1 if index >= 1 else None

    if neighbour is None:
        y -= offset
    else:
        neighbour_y = y_scale.apply(buckets[neighbour].mean)
        y = y - offset if neighbour_y > y else y + offset

    y = min(max(y, offset), canvas_height - offset)
    return LabelPlacement(x=float(x_pixel), y=float(y), anchor=anchor)
