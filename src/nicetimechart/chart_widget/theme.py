"""Light and dark palettes for the chart figure."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class ThemeMode(str, Enum):
    LIGHT = "light"
    DARK = "dark"


@dataclass(frozen=True)
class ChartPalette:
    """Colors the figure generator paints a chart with.

    Attributes:
        template: Plotly template the layout starts from.
        background: Paper and plot area fill.
        foreground: Text, axis lines and tick labels.
        grid: Horizontal Y grid lines.
        selection: Outline of the brush box.
    """

    template: str
    background: str
    foreground: str
    grid: str
    selection: str


_PALETTES: dict[ThemeMode, ChartPalette] = {
    ThemeMode.LIGHT: ChartPalette(
        template="plotly_white",
        background="#ffffff",
        foreground="#000000",
        grid="#cccccc",
        selection="rgba(0, 200, 255, 0.2)",
    ),
    ThemeMode.DARK: ChartPalette(
        template="plotly_dark",
        background="#000000",
        foreground="#ffffff",
        grid="rgba(255,255,255,0.2)",
        selection="rgba(0, 200, 255, 0.4)",
    ),
}


def resolve_theme(theme: Union[str, ThemeMode]) -> ThemeMode:
    """Accepts a ThemeMode, its value or a Plotly template name; unknown means light."""
    if isinstance(theme, ThemeMode):
        return theme
    name = str(theme).lower()
    return ThemeMode.DARK if name in ("dark", "plotly_dark") else ThemeMode.LIGHT


def palette_for(theme: Union[str, ThemeMode]) -> ChartPalette:
    return _PALETTES[resolve_theme(theme)]
