"""Tests for the TimeSeriesChart controller."""

from __future__ import annotations

from dataclasses import replace
from typing import Optional

import pandas as pd
import pytest

from nicetimechart.chart_widget.chart_controller import PointerEvent, TimeSeriesChart
from nicetimechart.chart_widget.config import ChartConfig, SeriesConfig
from nicetimechart.chart_widget.data_source import DataFrameSource
from nicetimechart.core.alignment import AlignedChart, EmptySeriesPolicy
from nicetimechart.core.errors import ChartConfigError, ChartError
from nicetimechart.core.range_snap import EMPTY_SELECTION, RangeSnapper, Selection


def ts(value: str) -> pd.Timestamp:
    return pd.Timestamp(value)


@pytest.fixture
def chart(two_series_config: ChartConfig, sources: list[DataFrameSource]) -> TimeSeriesChart:
    chart = TimeSeriesChart(two_series_config, sources)
    chart.render()
    return chart


# --- construction ---


def test_no_sources_is_fatal(two_series_config: ChartConfig) -> None:
    with pytest.raises(ChartConfigError):
        TimeSeriesChart(two_series_config, [])


def test_source_count_must_match_series(two_series_config: ChartConfig) -> None:
    with pytest.raises(ChartConfigError):
        TimeSeriesChart(two_series_config, [DataFrameSource()])


# --- rendering ---


def test_render_produces_geometry_and_figure(two_series_config, sources) -> None:
    figures: list[dict] = []
    chart = TimeSeriesChart(two_series_config, sources)
    chart.add_figure_listener(figures.append)

    aligned = chart.render()
    assert isinstance(aligned, AlignedChart)
    assert chart.aligned is aligned
    assert aligned.rendered_indices == (0, 1)
    assert len(figures) == 1
    assert len(figures[0]["data"]) == 2


def test_source_change_rerenders(chart: TimeSeriesChart, sources) -> None:
    figures: list[dict] = []
    chart.add_figure_listener(figures.append)
    sources[0].append([(ts("2023-06-01"), 20.0)])
    assert len(figures) == 1
    assert chart.aligned is not None
    assert chart.aligned.domain.end == ts("2023-06-01")


def test_empty_series_skips_render(chart: TimeSeriesChart, sources) -> None:
    figures: list[dict] = []
    chart.add_figure_listener(figures.append)
    sources[1].clear()
    assert chart.aligned is None
    assert figures[-1]["data"] == []


def test_drop_series_policy_renders_others(two_series_config, sources) -> None:
    cfg = replace(two_series_config, empty_series_policy=EmptySeriesPolicy.DROP_SERIES)
    sources[1].clear()
    aligned = TimeSeriesChart(cfg, sources).render()
    assert aligned is not None
    assert aligned.rendered_indices == (0,)


def test_failing_listener_does_not_break_render(chart: TimeSeriesChart) -> None:
    def boom(_fig: dict) -> None:
        raise RuntimeError("listener failure")

    received: list[dict] = []
    chart.add_figure_listener(boom)
    chart.add_figure_listener(received.append)
    chart.render()
    assert len(received) == 1


# --- pointer ---


def test_pointer_before_render_is_none(two_series_config, sources) -> None:
    chart = TimeSeriesChart(two_series_config, sources)
    assert chart.pointer_move(10) is None


def test_pointer_move_time_reports_hits(chart: TimeSeriesChart) -> None:
    events: list[Optional[PointerEvent]] = []
    chart.add_pointer_listener(events.append)

    event = chart.pointer_move_time(ts("2021-03-01"))
    assert event is not None
    assert events == [event]
    assert [(h.series_index, h.bucket_index, h.value) for h in event.hits] == [(0, 1, 10.0), (1, 0, 100.0)]
    assert len(event.labels) == 2

    chart.pointer_leave()
    assert events[-1] is None


def test_pointer_move_pixel_inverts_scale(chart: TimeSeriesChart) -> None:
    event = chart.pointer_move(0)
    assert event is not None
    assert event.time == chart.aligned.domain.start


# --- brush ---


def test_brush_disabled_raises(two_series_config, sources) -> None:
    chart = TimeSeriesChart(replace(two_series_config, selectable=False), sources)
    chart.render()
    assert not chart.capabilities.supports_selection
    with pytest.raises(ChartError):
        chart.begin_brush()
    chart.enable_selection()
    assert chart.capabilities.supports_selection
    chart.begin_brush()
    assert chart.brushing


def test_end_brush_emits_snapped_selection(chart: TimeSeriesChart) -> None:
    selections: list[Selection] = []
    chart.add_selection_listener(selections.append)
    x_scale = chart.aligned.x_scale

    chart.begin_brush()
    selection = chart.end_brush((x_scale.apply(ts("2020-03-01")), x_scale.apply(ts("2021-10-01"))))

    assert selection == Selection(ts("2020-01-01"), ts("2022-01-01"))
    assert chart.selection == selection
    assert selections == [selection]
    assert not chart.brushing


def test_end_brush_none_clears(chart: TimeSeriesChart) -> None:
    chart.end_brush_time((ts("2020-03-01"), ts("2021-10-01")))
    assert chart.end_brush(None) is EMPTY_SELECTION
    assert chart.selection.is_empty


def test_brush_keeps_scale_of_gesture_start(chart: TimeSeriesChart, sources) -> None:
    start_scale = chart.aligned.x_scale
    chart.begin_brush()
    sources[1].append([(ts("2029-06-01"), 120.0)])
    assert chart.aligned.x_scale != start_scale

    pixels = (40.0, 120.0)
    expected = RangeSnapper(start_scale, chart.aligned.tick_unit).brush_move(pixels)
    assert chart.brush(pixels) == expected


def test_brush_time_snaps(chart: TimeSeriesChart) -> None:
    assert chart.brush_time((ts("2020-03-01"), ts("2020-04-01"))) == (ts("2020-01-01"), ts("2021-01-01"))


def test_make_figure_draws_given_selection_without_committing(chart: TimeSeriesChart) -> None:
    in_flight = Selection(ts("2021-01-01"), ts("2022-01-01"))
    box = chart.make_figure(selection=in_flight)["layout"]["selections"][0]
    assert (box["x0"], box["x1"]) == ("2021-01-01T00:00:00", "2022-01-01T00:00:00")
    assert chart.selection == EMPTY_SELECTION
    assert not chart.make_figure()["layout"].get("selections")


def test_disable_selection_clears(chart: TimeSeriesChart) -> None:
    selections: list[Selection] = []
    chart.add_selection_listener(selections.append)
    chart.end_brush_time((ts("2020-03-01"), ts("2021-10-01")))
    chart.disable_selection()
    assert chart.selection.is_empty
    assert selections[-1] is EMPTY_SELECTION


def test_unsubscribe_listener(chart: TimeSeriesChart) -> None:
    received: list[dict] = []
    remove = chart.add_figure_listener(received.append)
    remove()
    chart.render()
    assert received == []


def test_close_detaches_sources(chart: TimeSeriesChart, sources) -> None:
    before = chart.aligned
    chart.close()
    sources[0].append([(ts("2023-06-01"), 20.0)])
    assert chart.aligned is before


def test_capabilities_follow_config(two_series_config, sources) -> None:
    caps = TimeSeriesChart(two_series_config, sources).capabilities
    assert caps.supports_multi_series
    assert caps.supports_shared_axis
    assert caps.supports_selection

    single = ChartConfig(series=(SeriesConfig(),))
    assert not TimeSeriesChart(single, [DataFrameSource()]).capabilities.supports_multi_series
