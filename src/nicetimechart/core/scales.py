"""Coordinate scales and their derivation from aggregated buckets.

TimeScale maps the shared time domain onto ``[0, canvas_width]`` (linear in
elapsed time). LinearScale maps bucket means onto ``[canvas_height, 0]``;
the range is inverted because the screen origin is top-left.

Scales are frozen: a render builds new ones, so an interaction that holds
on to a scale from an earlier render keeps a consistent mapping.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np
import pandas as pd

from nicetimechart.core.tick_unit import TickUnit
from nicetimechart.core.types import SeriesBins, TimeDomain
from nicetimechart.utils.logging import get_logger

logger = get_logger(__name__)

# Relative padding applied around a flat Y domain (min == max).
FLAT_DOMAIN_PAD_RATIO = 0.05


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class TimeScale:
    """Linear mapping from timestamps to horizontal pixels.

    With ``clamp`` set, times outside the domain map to the nearest range end
    and pixels outside the range invert to the nearest domain end.
    """

    domain: TimeDomain
    range_: tuple[float, float]
    clamp: bool = False

    def __post_init__(self) -> None:
        if self.domain.is_degenerate:
            raise ValueError("TimeScale needs a non-zero-width time domain")

    @property
    def _span_ns(self) -> int:
        return self.domain.end.value - self.domain.start.value

    def apply_exact(self, t: pd.Timestamp) -> float:
        r0, r1 = self.range_
        frac = (pd.Timestamp(t).value - self.domain.start.value) / self._span_ns
        if self.clamp:
            frac = min(max(frac, 0.0), 1.0)
        return r0 + frac * (r1 - r0)

    def apply(self, t: pd.Timestamp) -> int:
        """Pixel for ``t``, rounded to a whole pixel."""
        return _round_half_up(self.apply_exact(t))

    def invert(self, pixel: float) -> pd.Timestamp:
        r0, r1 = self.range_
        frac = (float(pixel) - r0) / (r1 - r0)
        if self.clamp:
            frac = min(max(frac, 0.0), 1.0)
        ns = self.domain.start.value + int(round(frac * self._span_ns))
        return pd.Timestamp(ns, unit="ns")

    def ticks(self, tick_unit: TickUnit) -> list[pd.Timestamp]:
        """Tick boundaries of ``tick_unit`` inside the domain, ends inclusive."""
        return tick_unit.ticks(self.domain.start, self.domain.end)


@dataclass(frozen=True)
class LinearScale:
    """Linear mapping from values to vertical pixels.

    A flat domain is padded by ``max(1, |v| * FLAT_DOMAIN_PAD_RATIO)`` on each
    side at construction; ``raw_domain`` keeps the extent as computed.
    """

    domain: tuple[float, float]
    range_: tuple[float, float]
    raw_domain: Optional[tuple[float, float]] = None

    def __post_init__(self) -> None:
        lo, hi = (float(v) for v in self.domain)
        if not (math.isfinite(lo) and math.isfinite(hi)):
            raise ValueError(f"LinearScale domain must be finite, got {self.domain!r}")
        if lo > hi:
            lo, hi = hi, lo
        object.__setattr__(self, "raw_domain", self.raw_domain or (lo, hi))
        if lo == hi:
            delta = max(1.0, abs(lo) * FLAT_DOMAIN_PAD_RATIO)
            lo -= delta
            hi += delta
        object.__setattr__(self, "domain", (lo, hi))

    def apply(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range_
        return r0 + (float(value) - d0) / (d1 - d0) * (r1 - r0)

    def invert(self, pixel: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range_
        return d0 + (float(pixel) - r0) / (r1 - r0) * (d1 - d0)

    def ticks(self, count: int = 10) -> np.ndarray:
        """Round-numbered ticks (1/2/5 x 10^n steps) within the domain."""
        if count <= 0:
            raise ValueError("count must be > 0")
        lo, hi = self.domain
        step = _nice_number((hi - lo) / max(count - 1, 1))
        start = math.ceil(lo / step) * step
        ticks = np.arange(start, hi + 0.5 * step, step, dtype=np.float64)
        ticks = ticks[ticks <= hi + step * 1e-9]
        # Clear floating drift such as -4.44e-16.
        ticks = np.rint(ticks / step) * step
        ticks[np.isclose(ticks, 0.0, rtol=0.0, atol=step * 1e-9)] = 0.0
        return ticks


def _nice_number(value: float) -> float:
    exp = np.floor(np.log10(value))
    frac = value / (10**exp)
    if frac < 1.5:
        nice = 1.0
    elif frac < 3.0:
        nice = 2.0
    elif frac < 7.0:
        nice = 5.0
    else:
        nice = 10.0
    return float(nice * (10**exp))


@dataclass(frozen=True)
class DerivedScales:
    """Scales for one render: a shared X scale and one or more Y scales.

    ``y_scales`` maps series index to its scale. In shared mode every
    rendered series maps to the same LinearScale instance.
    """

    x_scale: TimeScale
    y_scales: dict[int, LinearScale]
    shared_y: bool

    def y_scale_for(self, series_index: int) -> LinearScale:
        try:
            return self.y_scales[series_index]
        except KeyError:
            raise KeyError(f"no Y scale for series {series_index} (not rendered)") from None

    @property
    def unique_y_scales(self) -> list[LinearScale]:
        seen: list[LinearScale] = []
        for scale in self.y_scales.values():
            if not any(scale is s for s in seen):
                seen.append(scale)
        return seen


class ScaleDeriver:
    """Derives X and Y scales for a canvas of fixed pixel size.

    Attributes:
        canvas_width: Drawable width in pixels (container minus margins).
        canvas_height: Drawable height in pixels.
    """

    def __init__(self, canvas_width: float, canvas_height: float) -> None:
        if canvas_width <= 0 or canvas_height <= 0:
            raise ValueError(f"canvas must be positive, got {canvas_width}x{canvas_height}")
        self.canvas_width = float(canvas_width)
        self.canvas_height = float(canvas_height)

    def x_scale(self, domain: TimeDomain) -> TimeScale:
        return TimeScale(domain=domain, range_=(0.0, self.canvas_width))

    def y_scale(self, lo: float, hi: float, *, from_zero: bool = False) -> LinearScale:
        if from_zero:
            lo = min(0.0, lo)
        return LinearScale(domain=(lo, hi), range_=(self.canvas_height, 0.0))

    def shared_y_scale(self, series_bins: Sequence[SeriesBins], *, from_zero: bool = False) -> LinearScale:
        """One scale over the pooled bucket means of every non-empty series."""
        pooled = [sb.means for sb in series_bins if not sb.is_empty]
        if not pooled:
            raise ValueError("no buckets to derive a Y scale from")
        means = np.concatenate(pooled)
        return self.y_scale(float(np.min(means)), float(np.max(means)), from_zero=from_zero)

    def independent_y_scales(
        self, series_bins: Sequence[SeriesBins], *, from_zero: bool = False
    ) -> dict[int, LinearScale]:
        """One scale per non-empty series, from that series' own extent."""
        scales: dict[int, LinearScale] = {}
        for sb in series_bins:
            if sb.is_empty:
                logger.debug("series %s has no buckets, no Y scale", sb.series_index)
                continue
            lo, hi = sb.extent()
            scales[sb.series_index] = self.y_scale(lo, hi, from_zero=from_zero)
        return scales

    def derive(
        self,
        domain: TimeDomain,
        series_bins: Sequence[SeriesBins],
        *,
        shared_y: bool = True,
        from_zero: bool = False,
    ) -> DerivedScales:
        x_scale = self.x_scale(domain)
        if shared_y:
            shared = self.shared_y_scale(series_bins, from_zero=from_zero)
            y_scales = {sb.series_index: shared for sb in series_bins if not sb.is_empty}
        else:
            y_scales = self.independent_y_scales(series_bins, from_zero=from_zero)
        return DerivedScales(x_scale=x_scale, y_scales=y_scales, shared_y=shared_y)
