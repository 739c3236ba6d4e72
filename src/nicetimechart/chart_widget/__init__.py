"""Time-series chart widget: configuration, data sources, Plotly figures and the NiceGUI view."""

from nicetimechart.chart_widget.chart_controller import PointerEvent, TimeSeriesChart
from nicetimechart.chart_widget.chart_widget import TimeSeriesChartWidget
from nicetimechart.chart_widget.config import ChartCapabilities, ChartConfig, Margin, SeriesConfig
from nicetimechart.chart_widget.config_store import ChartConfigStore
from nicetimechart.chart_widget.data_source import DataFrameSource, DataSource
from nicetimechart.chart_widget.figure_generator import FigureGenerator
from nicetimechart.chart_widget.theme import ThemeMode

__all__ = [
    "ChartCapabilities",
    "ChartConfig",
    "ChartConfigStore",
    "DataFrameSource",
    "DataSource",
    "FigureGenerator",
    "Margin",
    "PointerEvent",
    "SeriesConfig",
    "ThemeMode",
    "TimeSeriesChart",
    "TimeSeriesChartWidget",
]
