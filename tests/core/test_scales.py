"""Tests for TimeScale, LinearScale and ScaleDeriver."""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from nicetimechart.core.aggregation import aggregate
from nicetimechart.core.scales import DerivedScales, LinearScale, ScaleDeriver, TimeScale
from nicetimechart.core.tick_unit import TickUnit
from nicetimechart.core.types import Bucket, SeriesBins, TimeDomain


def ts(value: str) -> pd.Timestamp:
    return pd.Timestamp(value)


def series_bins(index: int, means: list[float], yearly_buckets) -> SeriesBins:
    years = list(range(2020, 2020 + len(means)))
    return SeriesBins(series_index=index, buckets=tuple(yearly_buckets(years, means)))


# --- TimeScale ---


def test_time_scale_maps_domain_to_canvas_width() -> None:
    scale = ScaleDeriver(100, 50).x_scale(TimeDomain(ts("2020-01-01"), ts("2020-01-11")))
    assert scale.apply(ts("2020-01-01")) == 0
    assert scale.apply(ts("2020-01-11")) == 100
    assert scale.apply(ts("2020-01-06")) == 50
    assert scale.invert(50) == ts("2020-01-06")


def test_time_scale_rounds_to_whole_pixels() -> None:
    scale = TimeScale(TimeDomain(ts("2020-01-01"), ts("2020-01-03")), (0.0, 3.0))
    # 1 day of 2 -> 1.5 px, rounded half up
    assert scale.apply_exact(ts("2020-01-02")) == pytest.approx(1.5)
    assert scale.apply(ts("2020-01-02")) == 2


def test_time_scale_ticks_follow_unit() -> None:
    scale = TimeScale(TimeDomain(ts("2020-01-01"), ts("2022-01-01")), (0.0, 100.0))
    assert scale.ticks(TickUnit("year")) == [ts("2020-01-01"), ts("2021-01-01"), ts("2022-01-01")]


def test_time_scale_rejects_zero_width_domain() -> None:
    with pytest.raises(ValueError):
        TimeScale(TimeDomain(ts("2020-01-01"), ts("2020-01-01")), (0.0, 100.0))


# --- LinearScale ---


def test_y_scale_is_inverted() -> None:
    scale = ScaleDeriver(100, 50).y_scale(0.0, 10.0)
    assert scale.apply(0.0) == 50.0
    assert scale.apply(10.0) == 0.0
    assert scale.invert(25.0) == pytest.approx(5.0)


@pytest.mark.parametrize(
    "value, expected",
    [
        (5.0, (4.0, 6.0)),
        (100.0, (95.0, 105.0)),
        (0.0, (-1.0, 1.0)),
    ],
)
def test_flat_domain_is_padded(value: float, expected: tuple[float, float]) -> None:
    scale = ScaleDeriver(100, 50).y_scale(value, value)
    assert scale.domain == pytest.approx(expected)
    assert scale.raw_domain == (value, value)


def test_from_zero_extends_domain() -> None:
    assert ScaleDeriver(100, 50).y_scale(5.0, 10.0, from_zero=True).domain == (0.0, 10.0)


def test_linear_ticks_are_round_numbers() -> None:
    ticks = LinearScale((0.0, 10.0), (50.0, 0.0)).ticks()
    np.testing.assert_allclose(ticks, np.arange(0.0, 11.0))
    ticks = LinearScale((0.0, 110.0), (50.0, 0.0)).ticks()
    assert ticks[0] == 0.0
    assert ticks[-1] <= 110.0
    assert np.all(np.diff(ticks) == 10.0)


def test_non_finite_domain_rejected() -> None:
    with pytest.raises(ValueError):
        LinearScale((0.0, float("nan")), (50.0, 0.0))


# --- ScaleDeriver ---


def test_canvas_must_be_positive() -> None:
    with pytest.raises(ValueError):
        ScaleDeriver(0, 10)


def test_shared_versus_independent_y(yearly_buckets) -> None:
    bins = [series_bins(0, [0.0, 10.0], yearly_buckets), series_bins(1, [100.0, 110.0], yearly_buckets)]
    domain = TimeDomain(ts("2020-01-01"), ts("2022-01-01"))
    deriver = ScaleDeriver(200, 100)

    shared = deriver.derive(domain, bins, shared_y=True)
    assert shared.y_scale_for(0) is shared.y_scale_for(1)
    assert shared.y_scale_for(0).domain == (0.0, 110.0)
    assert len(shared.unique_y_scales) == 1

    independent = deriver.derive(domain, bins, shared_y=False)
    assert independent.y_scale_for(0).domain == (0.0, 10.0)
    assert independent.y_scale_for(1).domain == (100.0, 110.0)
    assert len(independent.unique_y_scales) == 2


def test_interior_empty_bucket_pulls_shared_min_to_zero(yearly_buckets) -> None:
    filled = yearly_buckets([2020, 2021, 2022], [50.0, 60.0, 70.0])
    hole = Bucket(x0=filled[1].x0, x1=filled[1].x1)
    buckets = aggregate([filled[0], hole, filled[2]])
    bins = [SeriesBins(series_index=0, buckets=tuple(buckets))]
    scale = ScaleDeriver(200, 100).shared_y_scale(bins)
    assert scale.domain == (0.0, 70.0)


def test_missing_series_scale_raises_key_error() -> None:
    x_scale = TimeScale(TimeDomain(ts("2020-01-01"), ts("2021-01-01")), (0.0, 100.0))
    scales = DerivedScales(x_scale=x_scale, y_scales={}, shared_y=True)
    with pytest.raises(KeyError):
        scales.y_scale_for(3)


def test_time_scale_clamp() -> None:
    domain = TimeDomain(ts("2020-01-01"), ts("2020-01-11"))
    clamped = TimeScale(domain, (0.0, 100.0), clamp=True)
    assert clamped.apply(ts("2019-01-01")) == 0
    assert clamped.apply(ts("2021-01-01")) == 100
    assert clamped.invert(250) == ts("2020-01-11")
    assert TimeScale(domain, (0.0, 100.0)).apply(ts("2020-01-21")) == 200
