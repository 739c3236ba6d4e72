"""Chart controller tying data sources, the alignment pipeline and figures together.

Provides TimeSeriesChart, the UI-independent entry point: it re-renders from
scratch whenever a data source changes, answers pointer hit-tests and snaps
brush gestures. The NiceGUI widget (chart_widget.py) is a thin view over it.

**Public API:**

- **__init__(config, sources)**: One data source per SeriesConfig, positionally matched.
- **render()**: Recompute geometry and push a new figure to figure listeners.
- **make_figure(selection=None)**: Figure dict, optionally with an in-flight brush box.
- **pointer_move(pixel_x) / pointer_move_time(t)**: Bucket hits for a pointer position.
- **begin_brush() / brush(pixel_range) / end_brush(pixel_range | None)**: Brush gesture.
- **add_figure_listener / add_pointer_listener / add_selection_listener**: Callbacks.
- **close()**: Detach from the data sources.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable, Optional, Sequence, TypeVar

import pandas as pd

from nicetimechart.chart_widget.config import ChartCapabilities, ChartConfig
from nicetimechart.chart_widget.data_source import DataSource
from nicetimechart.chart_widget.figure_generator import FigureGenerator
from nicetimechart.core.alignment import AlignedChart, SeriesAligner
from nicetimechart.core.errors import ChartConfigError, ChartError, EmptyDatasetError
from nicetimechart.core.locator import BinHit, LabelPlacement, label_placement, locate_all
from nicetimechart.core.range_snap import EMPTY_SELECTION, RangeSnapper, Selection
from nicetimechart.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class PointerEvent:
    """Pointer hit-test result.

    Attributes:
        time: Pointer position in domain time.
        hits: Bucket under the pointer for each rendered series.
        labels: Tooltip label placement for each hit, in the same order.
    """

    time: pd.Timestamp
    hits: tuple[BinHit, ...]
    labels: tuple[LabelPlacement, ...] = ()


FigureListener = Callable[[dict], None]
PointerListener = Callable[[Optional[PointerEvent]], None]
SelectionListener = Callable[[Selection], None]

_L = TypeVar("_L")


class TimeSeriesChart:
    """Controller for one time-series chart.

    Args:
        config: Chart configuration; ``config.series`` must have one entry
            per data source.
        sources: Data sources, one per series.

    Raises:
        ChartConfigError: If no sources are given or their count does not
            match the series configs.
    """

    def __init__(self, config: ChartConfig, sources: Sequence[DataSource]) -> None:
        sources = list(sources)
        if not sources:
            raise ChartConfigError("Data series not defined: at least one data source is required")
        if len(sources) != len(config.series):
            raise ChartConfigError(
                f"Got {len(sources)} data source(s) for {len(config.series)} series config(s)"
            )

        self.config = config
        self._sources = sources
        self._aligner = SeriesAligner(
            config.tick_unit,
            canvas_width=config.canvas_width,
            canvas_height=config.canvas_height,
            shared_y=config.shared_y_axis,
            empty_series_policy=config.empty_series_policy,
            y_from_zero=config.y_from_zero,
        )
        self._figure_generator = FigureGenerator(config)

        self._aligned: Optional[AlignedChart] = None
        self._selection: Selection = EMPTY_SELECTION
        self._selection_enabled: bool = config.selectable
        self._brush_snapper: Optional[RangeSnapper] = None

        self._figure_listeners: list[FigureListener] = []
        self._pointer_listeners: list[PointerListener] = []
        self._selection_listeners: list[SelectionListener] = []

        self._unsubscribes = [source.subscribe(self._on_source_changed) for source in sources]

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def aligned(self) -> Optional[AlignedChart]:
        """Geometry of the last successful render, None if it was skipped."""
        return self._aligned

    @property
    def selection(self) -> Selection:
        return self._selection

    @property
    def selection_enabled(self) -> bool:
        return self._selection_enabled

    @property
    def brushing(self) -> bool:
        """True between begin_brush() and the end of the gesture."""
        return self._brush_snapper is not None

    @property
    def capabilities(self) -> ChartCapabilities:
        return replace(self.config.capabilities, supports_selection=self._selection_enabled)

    def make_figure(self, selection: Optional[Selection] = None) -> dict:
        """Figure dict for the current geometry.

        Draws ``selection`` instead of the committed selection when given,
        e.g. the snapped box of a gesture still in flight.
        """
        if selection is None:
            selection = self._selection
        return self._figure_generator.make_figure(self._aligned, selection=selection)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render(self) -> Optional[AlignedChart]:
        """Recompute all geometry from the current source data.

        Returns None (and clears the previous geometry) when the data is
        empty or a series is empty under the skip-render policy.
        """
        frames = [source.get_data() for source in self._sources]
        try:
            self._aligned = self._aligner.align(frames)
        except EmptyDatasetError as e:
            logger.warning("Render skipped (%s): %s", e.reason, e)
            self._aligned = None
        else:
            logger.info(
                "Rendered %s series by %s: buckets=%s",
                len(self._aligned.series_bins),
                self._aligned.tick_unit,
                [len(sb) for sb in self._aligned.series_bins],
            )
            if self._aligned.skipped:
                logger.info("Rendered without empty series %s", list(self._aligned.skipped))
        self._emit(self._figure_listeners, self.make_figure())
        return self._aligned

    def _on_source_changed(self) -> None:
        logger.debug("Data source changed, re-rendering")
        self.render()

    # ------------------------------------------------------------------
    # Pointer
    # ------------------------------------------------------------------

    def pointer_move(self, pixel_x: float) -> Optional[PointerEvent]:
        """Hit-test a pointer at canvas pixel ``pixel_x``."""
        if self._aligned is None:
            return None
        return self.pointer_move_time(self._aligned.x_scale.invert(pixel_x))

    def pointer_move_time(self, t: pd.Timestamp) -> Optional[PointerEvent]:
        """Hit-test a pointer at domain time ``t``; listeners get the event."""
        aligned = self._aligned
        if aligned is None:
            return None
        t = pd.Timestamp(t)
        decimals = {i: self.config.decimals_for(i) for i in aligned.rendered_indices}
        hits = locate_all(aligned, t, decimals=decimals)
        labels = tuple(
            label_placement(
                aligned.bins_for(hit.series_index).buckets,
                hit.bucket_index,
                aligned.x_scale.apply(hit.bucket.x0),
                aligned.y_scale_for(hit.series_index),
                self.config.canvas_height,
            )
            for hit in hits
        )
        event = PointerEvent(time=t, hits=hits, labels=labels)
        self._emit(self._pointer_listeners, event)
        return event

    def pointer_leave(self) -> None:
        """Pointer left the canvas; listeners get None."""
        self._emit(self._pointer_listeners, None)

    # ------------------------------------------------------------------
    # Brush selection
    # ------------------------------------------------------------------

    def enable_selection(self) -> None:
        self._selection_enabled = True

    def disable_selection(self) -> None:
        """Disable brushing and clear any current selection."""
        self._selection_enabled = False
        self._brush_snapper = None
        if not self._selection.is_empty:
            self._set_selection(EMPTY_SELECTION)

    def begin_brush(self) -> None:
        """Start a gesture against the X scale of the current render.

        The gesture keeps using that scale even if a re-render happens
        before it ends.
        """
        self._brush_snapper = self._snapper()

    def brush(self, pixel_range: tuple[float, float]) -> tuple[int, int]:
        """Snapped pixel range to draw while the gesture is in flight."""
        snapper = self._brush_snapper or self._snapper()
        return snapper.brush_move(pixel_range)

    def brush_time(self, time_range: tuple[pd.Timestamp, pd.Timestamp]) -> tuple[pd.Timestamp, pd.Timestamp]:
        """Snapped time range to draw while the gesture is in flight."""
        snapper = self._brush_snapper or self._snapper()
        return snapper.snap_times(time_range)

    def end_brush(self, pixel_range: Optional[tuple[float, float]]) -> Selection:
        """Finish the gesture; None clears the selection."""
        snapper = self._brush_snapper or self._snapper()
        self._brush_snapper = None
        selection = snapper.brush_end(pixel_range)
        self._set_selection(selection)
        return selection

    def end_brush_time(self, time_range: Optional[tuple[pd.Timestamp, pd.Timestamp]]) -> Selection:
        """As end_brush, for a range already expressed in domain time."""
        snapper = self._brush_snapper or self._snapper()
        self._brush_snapper = None
        selection = snapper.brush_end_times(time_range)
        self._set_selection(selection)
        return selection

    def clear_selection(self) -> None:
        self._brush_snapper = None
        self._set_selection(EMPTY_SELECTION)

    def _snapper(self) -> RangeSnapper:
        if not self._selection_enabled:
            raise ChartError("Selection is disabled for this chart")
        if self._aligned is None:
            raise ChartError("Nothing rendered to select on")
        return RangeSnapper(self._aligned.x_scale, self._aligned.tick_unit)

    def _set_selection(self, selection: Selection) -> None:
        self._selection = selection
        logger.info("Selection: %s", "cleared" if selection.is_empty else selection.as_tuple())
        self._emit(self._selection_listeners, selection)

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def add_figure_listener(self, listener: FigureListener) -> Callable[[], None]:
        return self._add(self._figure_listeners, listener)

    def add_pointer_listener(self, listener: PointerListener) -> Callable[[], None]:
        return self._add(self._pointer_listeners, listener)

    def add_selection_listener(self, listener: SelectionListener) -> Callable[[], None]:
        return self._add(self._selection_listeners, listener)

    @staticmethod
    def _add(listeners: list[_L], listener: _L) -> Callable[[], None]:
        listeners.append(listener)

        def _remove() -> None:
            if listener in listeners:
                listeners.remove(listener)

        return _remove

    @staticmethod
    def _emit(listeners: list, payload: object) -> None:
        for listener in list(listeners):
            try:
                listener(payload)
            except Exception:
                logger.exception("Chart listener %r failed", listener)

    def close(self) -> None:
        """Unsubscribe from all data sources and drop listeners."""
        for unsubscribe in self._unsubscribes:
            unsubscribe()
        self._unsubscribes = []
        self._figure_listeners.clear()
        self._pointer_listeners.clear()
        self._selection_listeners.clear()
