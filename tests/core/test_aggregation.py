"""Tests for bucket means, edge trimming and display rounding."""

from __future__ import annotations

import math

import pandas as pd
import pytest

from nicetimechart.core.aggregation import (
    EMPTY_BUCKET_MEAN,
    aggregate,
    bucket_mean,
    round_value,
    trim_empty_buckets,
)
from nicetimechart.core.types import Bucket, DataPoint


def make_bucket(year: int, values: list[float]) -> Bucket:
    x0 = pd.Timestamp(year=year, month=1, day=1)
    return Bucket(
        x0=x0,
        x1=pd.Timestamp(year=year + 1, month=1, day=1),
        points=tuple(DataPoint(x=x0, y=v) for v in values),
    )


def test_mean_of_values() -> None:
    assert bucket_mean(make_bucket(2020, [2.0, 4.0, 6.0])) == 4.0


def test_empty_bucket_mean_is_zero() -> None:
    assert bucket_mean(make_bucket(2020, [])) == EMPTY_BUCKET_MEAN == 0.0


def test_aggregate_fills_means_without_touching_input() -> None:
    buckets = [make_bucket(2020, [1.0, 3.0]), make_bucket(2021, [])]
    out = aggregate(buckets)
    assert [b.mean for b in out] == [2.0, 0.0]
    assert buckets[0].mean == 0.0
    assert out[0].points == buckets[0].points


def test_trim_removes_only_edge_empties() -> None:
    buckets = [
        make_bucket(2019, []),
        make_bucket(2020, [1.0]),
        make_bucket(2021, []),
        make_bucket(2022, [2.0]),
        make_bucket(2023, []),
    ]
    trimmed = trim_empty_buckets(buckets)
    assert [b.x0.year for b in trimmed] == [2020, 2021, 2022]
    assert trimmed[1].is_empty


def test_trim_is_idempotent() -> None:
    buckets = [make_bucket(2019, []), make_bucket(2020, [1.0]), make_bucket(2021, [])]
    once = trim_empty_buckets(buckets)
    assert trim_empty_buckets(once) == once


def test_trim_all_empty_gives_nothing() -> None:
    assert trim_empty_buckets([make_bucket(2020, []), make_bucket(2021, [])]) == []


@pytest.mark.parametrize(
    "value, decimals, expected",
    [
        (2.5, 0, 3.0),
        (-2.5, 0, -2.0),
        (1.234, 2, 1.23),
        (1.235, 2, 1.24),
        (7.0, 1, 7.0),
    ],
)
def test_round_value(value: float, decimals: int, expected: float) -> None:
    assert round_value(value, decimals) == expected


def test_round_value_non_finite_displays_zero() -> None:
    assert round_value(math.nan) == 0.0
    assert round_value(math.inf, 2) == 0.0


def test_round_value_negative_decimals_rejected() -> None:
    with pytest.raises(ValueError):
        round_value(1.0, -1)


@pytest.mark.parametrize(
    "value, decimals, expected",
    [
        (-0.5, 0, 0.0),
        (-1.5, 0, -1.0),
        (-3.51, 0, -4.0),
        (-1.245, 2, -1.24),
        (-1.2451, 2, -1.25),
    ],
)
def test_round_value_negative_halves_go_up(value: float, decimals: int, expected: float) -> None:
    assert round_value(value, decimals) == expected
