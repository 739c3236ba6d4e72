"""Multi-series alignment: one shared time axis, shared or per-series Y axes.

For every series the aligner drops malformed points, bins against the
domain derived from all series together, aggregates, and trims empty
buckets off that series' own edges. The X and Y scales are then derived
from the result. Nothing is cached: each call recomputes from the data it
is given.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Optional, Sequence, Union

import numpy as np
import pandas as pd

from nicetimechart.core.aggregation import aggregate, trim_empty_buckets
from nicetimechart.core.binning import bin_series, derive_time_domain
from nicetimechart.core.errors import EmptyDatasetError
from nicetimechart.core.scales import DerivedScales, LinearScale, ScaleDeriver, TimeScale
from nicetimechart.core.tick_unit import TickUnit
from nicetimechart.core.types import DataPoint, SeriesBins, TimeDomain
from nicetimechart.utils.logging import get_logger

logger = get_logger(__name__)

SeriesInput = Union[pd.DataFrame, Iterable[Any]]


class EmptySeriesPolicy(str, Enum):
    """What a render pass does when some series has no usable points.

    SKIP_RENDER skips the whole pass. DROP_SERIES renders the other series.
    Either way a pass with no data at all is skipped.
    """

    SKIP_RENDER = "skip_render"
    DROP_SERIES = "drop_series"


def _to_frame(raw: SeriesInput) -> pd.DataFrame:
    if isinstance(raw, pd.DataFrame):
        missing = [c for c in ("x", "y") if c not in raw.columns]
        if missing:
            raise ValueError(f"series DataFrame must contain columns 'x' and 'y', missing {missing}")
        return raw[["x", "y"]]
    rows: list[tuple[Any, Any]] = []
    for item in raw:
        if isinstance(item, DataPoint):
            rows.append((item.x, item.y))
        elif isinstance(item, dict):
            rows.append((item.get("x"), item.get("y")))
        else:
            x, y = item
            rows.append((x, y))
    return pd.DataFrame(rows, columns=["x", "y"])


def clean_points(raw: SeriesInput) -> tuple[DataPoint, ...]:
    """Coerce one series to DataPoints, silently dropping malformed rows.

    Accepts a DataFrame with ``x``/``y`` columns, or an iterable of
    DataPoint, ``(x, y)`` pairs or ``{"x": ..., "y": ...}`` dicts. Rows whose
    x is not a timestamp or whose y is not a finite number are dropped.
    Timezone-aware x values are converted to naive UTC.
    """
    df = _to_frame(raw)
    if df.empty:
        return ()
    x = pd.to_datetime(df["x"], errors="coerce", utc=True).dt.tz_localize(None)
    y = pd.to_numeric(df["y"], errors="coerce").astype("float64")
    keep = x.notna().to_numpy() & np.isfinite(y.to_numpy())
    dropped = int(len(df) - np.count_nonzero(keep))
    if dropped:
        logger.debug("dropped %s malformed point(s) of %s", dropped, len(df))
    return tuple(DataPoint(x=xv, y=float(yv)) for xv, yv in zip(x[keep], y[keep]))


@dataclass(frozen=True)
class AlignedChart:
    """Geometry inputs for one render pass.

    Attributes:
        domain: Shared (possibly expanded) time domain.
        tick_unit: Granularity used for the buckets.
        series_bins: Aggregated, trimmed buckets of each rendered series, in
            series order; ``series_index`` refers to the caller's list.
        scales: X scale plus the Y scale of each rendered series.
        skipped: Indices of series left out under DROP_SERIES.
    """

    domain: TimeDomain
    tick_unit: TickUnit
    series_bins: tuple[SeriesBins, ...]
    scales: DerivedScales
    skipped: tuple[int, ...] = ()

    @property
    def x_scale(self) -> TimeScale:
        return self.scales.x_scale

    @property
    def shared_y(self) -> bool:
        return self.scales.shared_y

    @property
    def y_scales(self) -> tuple[LinearScale, ...]:
        """One scale in shared mode, one per rendered series otherwise."""
        return tuple(self.scales.unique_y_scales)

    @property
    def rendered_indices(self) -> tuple[int, ...]:
        return tuple(sb.series_index for sb in self.series_bins)

    def y_scale_for(self, series_index: int) -> LinearScale:
        return self.scales.y_scale_for(series_index)

    def bins_for(self, series_index: int) -> SeriesBins:
        for sb in self.series_bins:
            if sb.series_index == series_index:
                return sb
        raise KeyError(f"series {series_index} was not rendered")


class SeriesAligner:
    """Runs binning, aggregation and scale derivation over several series.

    Args:
        tick_unit: Bucket granularity; a TickUnit or a string such as "month".
        canvas_width: Drawable width in pixels.
        canvas_height: Drawable height in pixels.
        shared_y: True for one Y scale over all series, False for one each.
        empty_series_policy: See EmptySeriesPolicy.
        y_from_zero: Extend every Y domain down to include 0.
    """

    def __init__(
        self,
        tick_unit: Optional[Union[TickUnit, str]] = None,
        *,
        canvas_width: float,
        canvas_height: float,
        shared_y: bool = True,
        empty_series_policy: Union[EmptySeriesPolicy, str] = EmptySeriesPolicy.SKIP_RENDER,
        y_from_zero: bool = False,
    ) -> None:
        self.tick_unit = TickUnit.from_value(tick_unit)
        self.scale_deriver = ScaleDeriver(canvas_width, canvas_height)
        self.shared_y = bool(shared_y)
        self.empty_series_policy = EmptySeriesPolicy(empty_series_policy)
        self.y_from_zero = bool(y_from_zero)

    def align(self, series_list: Sequence[SeriesInput]) -> AlignedChart:
        """Bin, aggregate and scale every series against one time axis.

        Raises:
            EmptyDatasetError: If every series is empty, or if one is empty
                under EmptySeriesPolicy.SKIP_RENDER.
        """
        cleaned = [clean_points(raw) for raw in series_list]
        empty = tuple(i for i, pts in enumerate(cleaned) if not pts)

        if len(empty) == len(cleaned):
            raise EmptyDatasetError("every series is empty", reason="empty_dataset", series_indices=empty)
        if empty and self.empty_series_policy is EmptySeriesPolicy.SKIP_RENDER:
            raise EmptyDatasetError(
                f"series {list(empty)} empty, skipping render",
                reason="empty_series",
                series_indices=empty,
            )

        domain = derive_time_domain(cleaned, self.tick_unit)

        series_bins: list[SeriesBins] = []
        for index, points in enumerate(cleaned):
            if not points:
                continue
            buckets = aggregate(bin_series(points, domain, self.tick_unit))
            trimmed = trim_empty_buckets(buckets)
            series_bins.append(SeriesBins(series_index=index, buckets=tuple(trimmed)))

        scales = self.scale_deriver.derive(
            domain,
            series_bins,
            shared_y=self.shared_y,
            from_zero=self.y_from_zero,
        )
        logger.debug(
            "aligned %s series over [%s, %s] by %s: buckets=%s",
            len(series_bins),
            domain.start,
            domain.end,
            self.tick_unit,
            [len(sb) for sb in series_bins],
        )
        return AlignedChart(
            domain=domain,
            tick_unit=self.tick_unit,
            series_bins=tuple(series_bins),
            scales=scales,
            skipped=empty,
        )
