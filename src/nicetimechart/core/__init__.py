"""Data-to-geometry pipeline for binned time-series charts.

Pure pandas/numpy code with no UI imports: time binning, aggregation,
scale derivation, multi-series alignment, pointer hit-testing and brush
range snapping.
"""

from nicetimechart.core.aggregation import EMPTY_BUCKET_MEAN, aggregate, round_value, trim_empty_buckets
from nicetimechart.core.alignment import AlignedChart, EmptySeriesPolicy, SeriesAligner, clean_points
from nicetimechart.core.binning import bin_series, bucket_edges, derive_time_domain
from nicetimechart.core.errors import ChartConfigError, ChartError, EmptyDatasetError
from nicetimechart.core.locator import BinHit, LabelPlacement, label_placement, locate, locate_all, locate_pixel
from nicetimechart.core.range_snap import EMPTY_SELECTION, RangeSnapper, Selection
from nicetimechart.core.scales import DerivedScales, LinearScale, ScaleDeriver, TimeScale
from nicetimechart.core.tick_unit import DEFAULT_TICK_UNIT, TickUnit
from nicetimechart.core.types import Bucket, DataPoint, SeriesBins, TimeDomain, to_timestamp

__all__ = [
    "AlignedChart",
    "BinHit",
    "Bucket",
    "ChartConfigError",
    "ChartError",
    "DEFAULT_TICK_UNIT",
    "DataPoint",
    "DerivedScales",
    "EMPTY_BUCKET_MEAN",
    "EMPTY_SELECTION",
    "EmptyDatasetError",
    "EmptySeriesPolicy",
    "LabelPlacement",
    "LinearScale",
    "RangeSnapper",
    "ScaleDeriver",
    "Selection",
    "SeriesAligner",
    "SeriesBins",
    "TickUnit",
    "TimeDomain",
    "TimeScale",
    "aggregate",
    "bin_series",
    "bucket_edges",
    "clean_points",
    "derive_time_domain",
    "label_placement",
    "locate",
    "locate_all",
    "locate_pixel",
    "round_value",
    "to_timestamp",
    "trim_empty_buckets",
]
