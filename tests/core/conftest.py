"""Fixtures for core pipeline tests."""

from __future__ import annotations

from typing import Callable

import pandas as pd
import pytest

from nicetimechart.core.aggregation import aggregate
from nicetimechart.core.types import Bucket, DataPoint

SeriesRows = list[tuple[pd.Timestamp, float]]


def _yearly_buckets(years: list[int], means: list[float]) -> list[Bucket]:
    buckets = []
    for i, (year, mean) in enumerate(zip(years, means)):
        x0 = pd.Timestamp(year=year, month=1, day=1)
        x1 = pd.Timestamp(year=year + 1, month=1, day=1)
        buckets.append(
            Bucket(
                x0=x0,
                x1=x1,
                points=(DataPoint(x=x0, y=mean),),
                closed_right=(i == len(years) - 1),
            )
        )
    return aggregate(buckets)


@pytest.fixture
def yearly_buckets() -> Callable[[list[int], list[float]], list[Bucket]]:
    """Factory for contiguous one-year buckets holding one point each."""
    return _yearly_buckets


@pytest.fixture
def two_series() -> tuple[SeriesRows, SeriesRows]:
    """Series A covers 2020-2021 (means 0, 10), series B covers 2021-2022 (means 100, 110)."""
    a = [(pd.Timestamp("2020-01-01"), 0.0), (pd.Timestamp("2021-06-01"), 10.0)]
    b = [(pd.Timestamp("2021-06-01"), 100.0), (pd.Timestamp("2022-12-31"), 110.0)]
    return a, b
