"""Chart configuration.

ChartConfig is immutable and validated once at construction; every option
the chart recognizes is a field here. ``to_dict``/``from_dict`` give a
JSON-friendly form used by ChartConfigStore.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Literal, Optional

from nicetimechart.chart_widget.theme import ThemeMode, resolve_theme
from nicetimechart.core.alignment import EmptySeriesPolicy
from nicetimechart.core.errors import ChartConfigError
from nicetimechart.core.tick_unit import TickUnit
from nicetimechart.utils.logging import get_logger

logger = get_logger(__name__)

SeriesKind = Literal["line", "bar"]
SERIES_KINDS: tuple[str, ...] = ("line", "bar")

# Room needed for an axis title; applied to the left/bottom margin when the
# matching title is set.
TITLE_MARGIN = 40


@dataclass(frozen=True)
class Margin:
    """Pixel margins between the container edge and the drawable canvas."""

    top: int = 10
    right: int = 30
    bottom: int = 30
    left: int = 30

    def __post_init__(self) -> None:
        for name in ("top", "right", "bottom", "left"):
            if getattr(self, name) < 0:
                raise ChartConfigError(f"margin.{name} must be >= 0")

    def to_dict(self) -> dict[str, int]:
        return {"top": self.top, "right": self.right, "bottom": self.bottom, "left": self.left}


@dataclass(frozen=True)
class SeriesConfig:
    """Display options for one data series.

    Attributes:
        name: Legend / hover name.
        kind: "line" (markers joined at bucket starts) or "bar" (one bar per bucket).
        color: Any plotly colour; None uses the template colour cycle.
        value_decimals: Precision of displayed bucket means; None inherits
            ChartConfig.value_decimals.
        show_values: Draw the rounded mean next to every bucket.
        marker: Draw markers on line series.
    """

    name: str = ""
    kind: SeriesKind = "line"
    color: Optional[str] = None
    value_decimals: Optional[int] = None
    show_values: bool = False
    marker: bool = True

    def __post_init__(self) -> None:
        if self.kind not in SERIES_KINDS:
            raise ChartConfigError(f"Unknown series kind {self.kind!r}; expected one of {SERIES_KINDS}")
        if self.value_decimals is not None and self.value_decimals < 0:
            raise ChartConfigError("series value_decimals must be >= 0")

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "kind": self.kind,
            "color": self.color,
            "value_decimals": self.value_decimals,
            "show_values": self.show_values,
            "marker": self.marker,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SeriesConfig":
        decimals = data.get("value_decimals")
        return cls(
            name=str(data.get("name", "")),
            kind=str(data.get("kind", "line")),  # type: ignore[arg-type]
            color=data.get("color"),
            value_decimals=None if decimals is None else int(decimals),
            show_values=bool(data.get("show_values", False)),
            marker=bool(data.get("marker", True)),
        )


@dataclass(frozen=True)
class ChartCapabilities:
    """What a configured chart supports."""

    supports_shared_axis: bool
    supports_multi_series: bool
    supports_selection: bool


@dataclass(frozen=True)
class ChartConfig:
    """Configuration for a TimeSeriesChart.

    Attributes:
        series: One SeriesConfig per data source, positionally matched.
        width: Container width in pixels.
        height: Container height in pixels.
        margin: Margins around the canvas; raised to TITLE_MARGIN on the
            left/bottom when ``y_title``/``x_title`` is set.
        tick_unit: Bucket and tick granularity (default one year).
        shared_y_axis: One Y axis for all series (True) or one per series.
        value_decimals: Default display precision of bucket means.
        empty_series_policy: "skip_render" or "drop_series".
        y_from_zero: Extend Y domains down to include 0.
        y_grid: Draw horizontal grid lines at the Y ticks.
        x_title: Optional X axis title.
        y_title: Optional Y axis title.
        selectable: Enable brush selection along the X axis.
        theme: "light" or "dark".
    """

    series: tuple[SeriesConfig, ...] = field(default_factory=lambda: (SeriesConfig(),))
    width: int = 800
    height: int = 400
    margin: Margin = field(default_factory=Margin)
    tick_unit: TickUnit = field(default_factory=TickUnit)
    shared_y_axis: bool = True
    value_decimals: int = 0
    empty_series_policy: EmptySeriesPolicy = EmptySeriesPolicy.SKIP_RENDER
    y_from_zero: bool = False
    y_grid: bool = False
    x_title: Optional[str] = None
    y_title: Optional[str] = None
    selectable: bool = False
    theme: ThemeMode = ThemeMode.LIGHT

    def __post_init__(self) -> None:
        series = tuple(self.series)
        if not series:
            raise ChartConfigError("Data series not defined: at least one series is required")
        object.__setattr__(self, "series", series)

        try:
            object.__setattr__(self, "tick_unit", TickUnit.from_value(self.tick_unit))
        except ValueError as e:
            raise ChartConfigError(str(e)) from e
        try:
            object.__setattr__(self, "empty_series_policy", EmptySeriesPolicy(self.empty_series_policy))
        except ValueError as e:
            raise ChartConfigError(f"Unknown empty_series_policy {self.empty_series_policy!r}") from e
        object.__setattr__(self, "theme", resolve_theme(self.theme))

        margin = self.margin
        if self.y_title and margin.left < TITLE_MARGIN:
            margin = replace(margin, left=TITLE_MARGIN)
        if self.x_title and margin.bottom < TITLE_MARGIN:
            margin = replace(margin, bottom=TITLE_MARGIN)
        object.__setattr__(self, "margin", margin)

        if self.value_decimals < 0:
            raise ChartConfigError("value_decimals must be >= 0")
        if self.canvas_width <= 0 or self.canvas_height <= 0:
            raise ChartConfigError(
                f"Chart {self.width}x{self.height} leaves no canvas inside margins {margin.to_dict()}"
            )

    @property
    def canvas_width(self) -> int:
        return self.width - self.margin.left - self.margin.right

    @property
    def canvas_height(self) -> int:
        return self.height - self.margin.top - self.margin.bottom

    @property
    def capabilities(self) -> ChartCapabilities:
        return ChartCapabilities(
            supports_shared_axis=self.shared_y_axis,
            supports_multi_series=len(self.series) > 1,
            supports_selection=self.selectable,
        )

    def decimals_for(self, series_index: int) -> int:
        """Display precision for a series, falling back to value_decimals."""
        decimals = self.series[series_index].value_decimals
        return self.value_decimals if decimals is None else decimals

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-friendly dict.

        The margin written is the effective one (after title adjustment).
        """
        return {
            "series": [s.to_dict() for s in self.series],
            "width": self.width,
            "height": self.height,
            "margin": self.margin.to_dict(),
            "tick_unit": str(self.tick_unit),
            "shared_y_axis": self.shared_y_axis,
            "value_decimals": self.value_decimals,
            "empty_series_policy": self.empty_series_policy.value,
            "y_from_zero": self.y_from_zero,
            "y_grid": self.y_grid,
            "x_title": self.x_title,
            "y_title": self.y_title,
            "selectable": self.selectable,
            "theme": self.theme.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ChartConfig":
        """Deserialize from a dict; unknown keys are logged and ignored.

        Raises:
            ChartConfigError: If the values do not form a valid config.
        """
        known = {
            "series",
            "width",
            "height",
            "margin",
            "tick_unit",
            "shared_y_axis",
            "value_decimals",
            "empty_series_policy",
            "y_from_zero",
            "y_grid",
            "x_title",
            "y_title",
            "selectable",
            "theme",
        }
        for key in data:
            if key not in known:
                logger.warning("Unknown chart config key %r, ignoring", key)

        series_raw = data.get("series") or [{}]
        if not isinstance(series_raw, list):
            raise ChartConfigError("series must be a list")
        margin_raw = data.get("margin") or {}
        if not isinstance(margin_raw, dict):
            raise ChartConfigError("margin must be a dict")

        try:
            margin = Margin(
                top=int(margin_raw.get("top", 10)),
                right=int(margin_raw.get("right", 30)),
                bottom=int(margin_raw.get("bottom", 30)),
                left=int(margin_raw.get("left", 30)),
            )
            return cls(
                series=tuple(SeriesConfig.from_dict(s) for s in series_raw),
                width=int(data.get("width", 800)),
                height=int(data.get("height", 400)),
                margin=margin,
                tick_unit=data.get("tick_unit", "year"),  # type: ignore[arg-type]
                shared_y_axis=bool(data.get("shared_y_axis", True)),
                value_decimals=int(data.get("value_decimals", 0)),
                empty_series_policy=data.get("empty_series_policy", EmptySeriesPolicy.SKIP_RENDER.value),  # type: ignore[arg-type]
                y_from_zero=bool(data.get("y_from_zero", False)),
                y_grid=bool(data.get("y_grid", False)),
                x_title=data.get("x_title"),
                y_title=data.get("y_title"),
                selectable=bool(data.get("selectable", False)),
                theme=data.get("theme", ThemeMode.LIGHT.value),  # type: ignore[arg-type]
            )
        except (AttributeError, TypeError, ValueError) as e:
            if isinstance(e, ChartConfigError):
                raise
            raise ChartConfigError(f"Invalid chart config: {e}") from e
