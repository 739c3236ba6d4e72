"""
nicetimechart: Binned time-series charts for NiceGUI.

This package provides:
- core: pandas/numpy pipeline turning raw (time, value) points into
  buckets, scales, pointer hits and snapped brush selections
- TimeSeriesChart: UI-independent controller driven by data sources
- TimeSeriesChartWidget: ui.plotly view of a TimeSeriesChart
- Logging utilities for library and application use

For logging configuration in standalone scripts/demos:
    ```python
    from nicetimechart.utils.logging import configure_logging
    configure_logging(level="DEBUG")
    ```

When used as a library (imported by other applications), logging is
automatically handled by the parent application's configuration.
"""

import logging

from nicetimechart.utils.logging import configure_logging, get_logger

from nicetimechart.chart_widget import (
    ChartConfig,
    ChartConfigStore,
    DataFrameSource,
    SeriesConfig,
    TimeSeriesChart,
    TimeSeriesChartWidget,
)
from nicetimechart.core import EmptySeriesPolicy, Selection, SeriesAligner, TickUnit

# Ensure nicetimechart logger has NullHandler so logs don't propagate to root
# when no application has configured logging. Applications/demos call
# configure_logging() to replace this with a real handler.
_logger = logging.getLogger("nicetimechart")
if not _logger.handlers:
    _logger.addHandler(logging.NullHandler())

__all__ = [
    "ChartConfig",
    "ChartConfigStore",
    "DataFrameSource",
    "EmptySeriesPolicy",
    "Selection",
    "SeriesAligner",
    "SeriesConfig",
    "TickUnit",
    "TimeSeriesChart",
    "TimeSeriesChartWidget",
    "configure_logging",
    "get_logger",
]

__version__ = "0.1.0"
