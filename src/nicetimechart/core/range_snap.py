"""Brush range snapping to tick-unit boundaries."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import pandas as pd

from nicetimechart.core.scales import TimeScale
from nicetimechart.core.tick_unit import TickUnit
from nicetimechart.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Selection:
    """A selected time range ``[start, end)``, or the cleared selection.

    The cleared selection has ``start`` and ``end`` set to None and is
    distinct from any range, including a one-tick range.
    """

    start: Optional[pd.Timestamp] = None
    end: Optional[pd.Timestamp] = None

    def __post_init__(self) -> None:
        if (self.start is None) != (self.end is None):
            raise ValueError("Selection needs both start and end, or neither")

    @property
    def is_empty(self) -> bool:
        return self.start is None

    def as_tuple(self) -> tuple[pd.Timestamp, pd.Timestamp] | tuple[()]:
        if self.is_empty:
            return ()
        return (self.start, self.end)  # type: ignore[return-value]

    def contains(self, t: pd.Timestamp) -> bool:
        if self.is_empty:
            return False
        return self.start <= pd.Timestamp(t) < self.end  # type: ignore[operator]


EMPTY_SELECTION = Selection()


class RangeSnapper:
    """Snaps pixel or time ranges on the X axis to tick-unit boundaries.

    Args:
        x_scale: X scale of the render the gesture started on.
        tick_unit: Granularity to snap to.
    """

    def __init__(self, x_scale: TimeScale, tick_unit: TickUnit) -> None:
        self.x_scale = x_scale
        self.tick_unit = tick_unit

    def snap_times(self, time_range: tuple[pd.Timestamp, pd.Timestamp]) -> tuple[pd.Timestamp, pd.Timestamp]:
        """Round both ends to the nearest boundary.

        If rounding leaves an empty or inverted range, the start is floored
        and the end placed exactly one tick unit later.
        """
        t0, t1 = sorted(pd.Timestamp(t) for t in time_range)
        start = self.tick_unit.round(t0)
        end = self.tick_unit.round(t1)
        if start >= end:
            start = self.tick_unit.floor(t0)
            end = self.tick_unit.offset(start, 1)
        return start, end

    def snap(self, pixel_range: tuple[float, float]) -> tuple[pd.Timestamp, pd.Timestamp]:
        """Invert a pixel range through the X scale and snap it."""
        p0, p1 = pixel_range
        return self.snap_times((self.x_scale.invert(p0), self.x_scale.invert(p1)))

    def brush_move(self, pixel_range: tuple[float, float]) -> tuple[int, int]:
        """Pixel range to draw the brush at while dragging.

        The snapped range is projected back through the X scale, so the
        handles move in whole-tick jumps.
        """
        start, end = self.snap(pixel_range)
        return self.x_scale.apply(start), self.x_scale.apply(end)

    def brush_end(self, pixel_range: Optional[tuple[float, float]]) -> Selection:
        """Final selection when the gesture ends; EMPTY_SELECTION when cleared."""
        if pixel_range is None:
            logger.debug("brush cleared")
            return EMPTY_SELECTION
        start, end = self.snap(pixel_range)
        return Selection(start=start, end=end)

    def brush_end_times(self, time_range: Optional[tuple[pd.Timestamp, pd.Timestamp]]) -> Selection:
        """As brush_end, for a range already expressed in domain time."""
        if time_range is None:
            logger.debug("brush cleared")
            return EMPTY_SELECTION
        start, end = self.snap_times(time_range)
        return Selection(start=start, end=end)
