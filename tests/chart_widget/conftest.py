"""Fixtures for chart widget tests."""

from __future__ import annotations

import pandas as pd
import pytest

from nicetimechart.chart_widget.config import ChartConfig, SeriesConfig
from nicetimechart.chart_widget.data_source import DataFrameSource


@pytest.fixture
def frame_a() -> pd.DataFrame:
    """Yearly means 0 (2020) and 10 (2021)."""
    return pd.DataFrame(
        {"x": pd.to_datetime(["2020-01-01", "2021-06-01"]), "y": [0.0, 10.0]},
    )


@pytest.fixture
def frame_b() -> pd.DataFrame:
    """Yearly means 100 (2021) and 110 (2022)."""
    return pd.DataFrame(
        {"x": pd.to_datetime(["2021-06-01", "2022-12-31"]), "y": [100.0, 110.0]},
    )


@pytest.fixture
def two_series_config() -> ChartConfig:
    # canvas 270 x 100 with the default margins
    return ChartConfig(
        series=(SeriesConfig(name="a"), SeriesConfig(name="b", kind="bar")),
        width=330,
        height=140,
        tick_unit="year",
        selectable=True,
    )


@pytest.fixture
def sources(frame_a: pd.DataFrame, frame_b: pd.DataFrame) -> list[DataFrameSource]:
    return [DataFrameSource(frame_a, name="a"), DataFrameSource(frame_b, name="b")]
