"""
Demo of TimeSeriesChartWidget with two data sources.

Demonstrates:
- Line and bar series on a shared monthly time axis
- Toggling shared / independent Y axes
- Hover hit-testing and snapped brush selection (callback pattern)
- Live updates when a data source changes

Run:
    python examples/time_series_chart_demo.py
"""

import numpy as np
import pandas as pd
from nicegui import ui

from nicetimechart import (
    ChartConfig,
    DataFrameSource,
    SeriesConfig,
    TimeSeriesChart,
    TimeSeriesChartWidget,
    configure_logging,
)

configure_logging(level="INFO")


def create_sample_series(start: str, periods: int, base: float, seed: int) -> pd.DataFrame:
    """Daily samples with noise around a seasonal curve."""
    rng = np.random.default_rng(seed)
    x = pd.date_range(start, periods=periods, freq="D")
    season = np.sin(np.linspace(0, 4 * np.pi, periods))
    y = base + 10 * season + rng.normal(0, 2, periods)
    return pd.DataFrame({"x": x, "y": y})


@ui.page("/")
def index():
    ui.label("nicetimechart demo").classes("text-3xl font-bold mb-6")

    temperature = DataFrameSource(create_sample_series("2022-01-01", 500, 15.0, 0), name="temperature")
    rainfall = DataFrameSource(create_sample_series("2022-03-01", 400, 80.0, 1), name="rainfall")

    def build_chart(shared: bool) -> TimeSeriesChart:
        config = ChartConfig(
            series=(
                SeriesConfig(name="temperature", kind="line", value_decimals=1),
                SeriesConfig(name="rainfall", kind="bar", color="#4c78a8"),
            ),
            width=900,
            height=420,
            tick_unit="month",
            shared_y_axis=shared,
            selectable=True,
            x_title="month",
            y_title="mean",
        )
        chart = TimeSeriesChart(config, [temperature, rainfall])
        chart.add_pointer_listener(on_pointer)
        chart.add_selection_listener(on_selection)
        return chart

    pointer_label = ui.label("Hover the chart").classes("text-sm")
    selection_label = ui.label("Drag horizontally to select").classes("text-sm")

    def on_pointer(event) -> None:
        if event is None:
            pointer_label.text = "Hover the chart"
            return
        parts = [f"{h.bucket.x0:%Y-%m}: {h.value:g}" for h in event.hits]
        pointer_label.text = " | ".join(parts)

    def on_selection(selection) -> None:
        if selection.is_empty:
            selection_label.text = "Selection cleared"
        else:
            selection_label.text = f"Selected {selection.start:%Y-%m-%d} to {selection.end:%Y-%m-%d}"

    container = ui.column().classes("w-full")
    state = {"widget": None}

    def rebuild(shared: bool) -> None:
        if state["widget"] is not None:
            state["widget"].close()
            state["widget"].chart.close()
        container.clear()
        with container:
            widget = TimeSeriesChartWidget(build_chart(shared))
            widget.render()
        state["widget"] = widget

    def add_week() -> None:
        last = rainfall.get_data()["x"].max()
        rng = np.random.default_rng()
        rainfall.append(
            [(last + pd.Timedelta(days=i + 1), 80.0 + rng.normal(0, 5)) for i in range(7)]
        )

    with ui.row().classes("items-center gap-4"):
        ui.switch("Shared Y axis", value=True, on_change=lambda e: rebuild(e.value))
        ui.button("Append a week of rainfall", on_click=add_week)

    rebuild(True)


ui.run()
