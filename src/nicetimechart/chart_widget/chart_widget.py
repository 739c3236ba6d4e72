"""NiceGUI view for TimeSeriesChart.

Renders the chart as a ui.plotly element (Plotly dicts only, never
go.Figure), forwards hover to the controller's pointer hit-test, redraws the
box on whole-tick boundaries while it is dragged and turns the finished box
into a snapped Selection.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

import pandas as pd
from nicegui import ui
from nicegui.events import GenericEventArguments

from nicetimechart.chart_widget.chart_controller import TimeSeriesChart
from nicetimechart.core.errors import ChartError
from nicetimechart.core.range_snap import Selection
from nicetimechart.utils.logging import get_logger

logger = get_logger(__name__)


def _safe_call(func: Callable, *args, **kwargs) -> None:
    """Safely call a function, catching 'client deleted' RuntimeErrors only."""
    try:
        func(*args, **kwargs)
    except RuntimeError as e:
        if "deleted" not in str(e).lower():
            raise


def _parse_time(value: Any) -> Optional[pd.Timestamp]:
    if value is None:
        return None
    try:
        t = pd.Timestamp(value)
    except (TypeError, ValueError):
        return None
    if pd.isna(t):
        return None
    if t.tzinfo is not None:
        t = t.tz_convert("UTC").tz_localize(None)
    return t


def parse_selection_range(payload: dict) -> tuple[bool, Optional[tuple[pd.Timestamp, pd.Timestamp]]]:
    """Extract the X range of a box selection from a plotly_relayout payload.

    Returns:
        (is_selection_event, time_range). time_range is None when the
        selection was cleared or could not be parsed.
    """
    x0 = payload.get("selections[0].x0")
    x1 = payload.get("selections[0].x1")
    if x0 is None or x1 is None:
        if "selections" not in payload:
            return False, None
        selections = payload.get("selections") or []
        if not selections or not isinstance(selections[0], dict):
            return True, None
        x0, x1 = selections[0].get("x0"), selections[0].get("x1")

    t0, t1 = _parse_time(x0), _parse_time(x1)
    if t0 is None or t1 is None:
        logger.warning("Could not parse selection range x0=%r x1=%r", x0, x1)
        return True, None
    return True, (t0, t1)


def parse_selecting_range(payload: dict) -> Optional[tuple[pd.Timestamp, pd.Timestamp]]:
    """Extract the X range of an in-flight box from a plotly_selecting payload."""
    x_range = (payload.get("range") or {}).get("x")
    if not isinstance(x_range, (list, tuple)) or len(x_range) != 2:
        return None
    t0, t1 = _parse_time(x_range[0]), _parse_time(x_range[1])
    if t0 is None or t1 is None:
        return None
    return t0, t1


class TimeSeriesChartWidget:
    """Plotly view of a TimeSeriesChart.

    Call render() inside a NiceGUI container; every figure the controller
    produces afterwards is pushed to the browser.
    """

    def __init__(self, chart: TimeSeriesChart) -> None:
        self.chart = chart
        self._plot: Optional[ui.plotly] = None
        self._remove_figure_listener: Optional[Callable[[], None]] = None

    @property
    def plot(self) -> Optional[ui.plotly]:
        return self._plot

    def render(self) -> None:
        """Create the plot in the current container and draw the current data."""
        if self._remove_figure_listener is not None:
            self._remove_figure_listener()

        cfg = self.chart.config
        self._plot = ui.plotly(self.chart.make_figure()).style(
            f"width: {cfg.width}px; height: {cfg.height}px"
        )
        self._plot.on("plotly_hover", self._on_hover)
        self._plot.on("plotly_unhover", self._on_unhover)
        self._plot.on("plotly_selecting", self._on_selecting)
        self._plot.on("plotly_relayout", self._on_relayout)

        self._remove_figure_listener = self.chart.add_figure_listener(self._on_figure)
        self.chart.render()

    def close(self) -> None:
        if self._remove_figure_listener is not None:
            self._remove_figure_listener()
            self._remove_figure_listener = None
        self._plot = None

    def _on_figure(self, fig_dict: dict) -> None:
        _safe_call(self._update_figure, fig_dict)

    def _update_figure(self, fig_dict: dict) -> None:
        if self._plot is None:
            return
        self._plot.update_figure(fig_dict)

    def _on_hover(self, e: GenericEventArguments) -> None:
        points = (e.args or {}).get("points") or []
        if not points:
            return
        t = _parse_time(points[0].get("x"))
        if t is None:
            return
        self.chart.pointer_move_time(t)

    def _on_unhover(self, e: GenericEventArguments) -> None:
        self.chart.pointer_leave()

    def _on_selecting(self, e: GenericEventArguments) -> None:
        if not self.chart.selection_enabled or self.chart.aligned is None:
            return
        if not self.chart.brushing:
            self.chart.begin_brush()
        payload = e.args if isinstance(e.args, dict) else {}
        time_range = parse_selecting_range(payload)
        if time_range is None:
            return
        try:
            start, end = self.chart.brush_time(time_range)
        except ChartError as err:
            logger.warning("Ignoring brush: %s", err)
            return
        # Box jumps between whole ticks while dragging.
        _safe_call(self._update_figure, self.chart.make_figure(selection=Selection(start, end)))

    def _on_relayout(self, e: GenericEventArguments) -> None:
        payload = e.args if isinstance(e.args, dict) else {}
        is_selection, time_range = parse_selection_range(payload)
        if not is_selection or not self.chart.selection_enabled:
            return
        previous: Selection = self.chart.selection
        if time_range is None and previous.is_empty:
            return
        try:
            selection = self.chart.end_brush_time(time_range)
        except ChartError as err:
            logger.warning("Ignoring selection: %s", err)
            return
        if selection != previous:
            # Redraw so the box sits on the snapped boundaries.
            _safe_call(self._update_figure, self.chart.make_figure())
