"""Plotly figure generation for time-series charts.

Turns an AlignedChart into a Plotly figure dict (never a go.Figure) for
ui.plotly / update_figure. Axis ranges and tick positions come from the
derived scales so the figure matches the geometry used for hit-testing and
brush snapping.
"""

from __future__ import annotations

from typing import Any, Optional

import pandas as pd
import plotly.graph_objects as go

from nicetimechart.chart_widget.config import ChartConfig
from nicetimechart.chart_widget.theme import palette_for
from nicetimechart.core.aggregation import round_value
from nicetimechart.core.alignment import AlignedChart
from nicetimechart.core.range_snap import Selection
from nicetimechart.core.scales import LinearScale
from nicetimechart.core.types import SeriesBins
from nicetimechart.utils.logging import get_logger

logger = get_logger(__name__)


def _iso(t: pd.Timestamp) -> str:
    return pd.Timestamp(t).isoformat()


def _axis_key(position: int) -> str:
    """Layout key of the n-th Y axis: yaxis, yaxis2, yaxis3, ..."""
    return "yaxis" if position == 0 else f"yaxis{position + 1}"


def _axis_ref(position: int) -> str:
    """Trace reference of the n-th Y axis: y, y2, y3, ..."""
    return "y" if position == 0 else f"y{position + 1}"


class FigureGenerator:
    """Builds Plotly figure dicts from aligned chart geometry.

    Attributes:
        config: Chart configuration (size, margins, series styles, theme).
    """

    def __init__(self, config: ChartConfig) -> None:
        self.config = config

    def make_figure(
        self,
        aligned: Optional[AlignedChart],
        *,
        selection: Optional[Selection] = None,
    ) -> dict:
        """Generate the figure dict.

        Args:
            aligned: Geometry of the current render, or None for an empty chart.
            selection: Current brush selection to draw, if any.

        Returns:
            Plotly figure dictionary.
        """
        fig = go.Figure()
        fig.update_layout(**self._base_layout())
        if aligned is None:
            return fig.to_dict()

        logger.debug(
            "make_figure: series=%s shared_y=%s tick_unit=%s",
            list(aligned.rendered_indices),
            aligned.shared_y,
            aligned.tick_unit,
        )

        axis_positions: dict[int, int] = {}
        for position, scale in enumerate(aligned.y_scales):
            for sb in aligned.series_bins:
                if aligned.y_scale_for(sb.series_index) is scale:
                    axis_positions[sb.series_index] = position
            fig.update_layout(**{_axis_key(position): self._y_axis_layout(scale, position, aligned)})

        for sb in aligned.series_bins:
            fig.add_trace(self._trace(sb, _axis_ref(axis_positions[sb.series_index])))

        fig.update_layout(xaxis=self._x_axis_layout(aligned))

        if selection is not None and not selection.is_empty:
            fig.update_layout(
                selections=[
                    dict(
                        type="rect",
                        xref="x",
                        yref="paper",
                        x0=_iso(selection.start),
                        x1=_iso(selection.end),
                        y0=0,
                        y1=1,
                    )
                ],
            )
        return fig.to_dict()

    def _base_layout(self) -> dict[str, Any]:
        cfg = self.config
        palette = palette_for(cfg.theme)
        return dict(
            template=palette.template,
            paper_bgcolor=palette.background,
            plot_bgcolor=palette.background,
            font=dict(color=palette.foreground),
            width=cfg.width,
            height=cfg.height,
            autosize=False,
            margin=dict(
                t=cfg.margin.top,
                r=cfg.margin.right,
                b=cfg.margin.bottom,
                l=cfg.margin.left,
                pad=0,
            ),
            showlegend=len(cfg.series) > 1,
            hovermode="x",
            dragmode="select" if cfg.selectable else False,
            selectdirection="h",
            newselection=dict(line=dict(color=palette.selection)),
        )

    def _x_axis_layout(self, aligned: AlignedChart) -> dict[str, Any]:
        fg_color = palette_for(self.config.theme).foreground
        ticks = aligned.x_scale.ticks(aligned.tick_unit)
        axis: dict[str, Any] = dict(
            type="date",
            range=[_iso(aligned.domain.start), _iso(aligned.domain.end)],
            tickmode="array",
            tickvals=[_iso(t) for t in ticks],
            color=fg_color,
            showgrid=False,
            fixedrange=True,
        )
        if self.config.x_title:
            axis["title"] = dict(text=self.config.x_title)
        return axis

    def _y_axis_layout(self, scale: LinearScale, position: int, aligned: AlignedChart) -> dict[str, Any]:
        cfg = self.config
        palette = palette_for(cfg.theme)
        axis: dict[str, Any] = dict(
            range=list(scale.domain),
            tickmode="array",
            tickvals=scale.ticks().tolist(),
            color=palette.foreground,
            showgrid=cfg.y_grid and position == 0,
            gridcolor=palette.grid,
            griddash="dash",
            zeroline=False,
            fixedrange=True,
        )
        if position == 0:
            if cfg.y_title:
                axis["title"] = dict(text=cfg.y_title)
        else:
            axis.update(overlaying="y", side="right" if position % 2 else "left", anchor="x")
            if not aligned.shared_y:
                series_cfg = cfg.series[self._series_on_axis(scale, aligned)]
                if series_cfg.name:
                    axis["title"] = dict(text=series_cfg.name)
                if series_cfg.color:
                    axis["color"] = series_cfg.color
        return axis

    @staticmethod
    def _series_on_axis(scale: LinearScale, aligned: AlignedChart) -> int:
        for sb in aligned.series_bins:
            if aligned.y_scale_for(sb.series_index) is scale:
                return sb.series_index
        raise KeyError("scale is not used by any series")

    def _trace(self, sb: SeriesBins, yaxis: str) -> go.BaseTraceType:
        series_cfg = self.config.series[sb.series_index]
        decimals = self.config.decimals_for(sb.series_index)
        name = series_cfg.name or f"Series {sb.series_index + 1}"
        x0 = [_iso(b.x0) for b in sb.buckets]
        means = [b.mean for b in sb.buckets]
        labels = [round_value(m, decimals) for m in means]
        customdata = [[b.count, _iso(b.x1), label] for b, label in zip(sb.buckets, labels)]
        hovertemplate = "%{x|%Y-%m-%d %H:%M:%S} - %{customdata[1]}<br>mean=%{customdata[2]} (n=%{customdata[0]})"
        text = [f"{v:g}" for v in labels] if series_cfg.show_values else None

        if series_cfg.kind == "bar":
            widths_ms = [b.width.total_seconds() * 1000.0 for b in sb.buckets]
            return go.Bar(
                x=x0,
                y=means,
                width=widths_ms,
                offset=0,
                name=name,
                yaxis=yaxis,
                marker=dict(color=series_cfg.color) if series_cfg.color else None,
                text=text,
                textposition="inside" if text else None,
                customdata=customdata,
                hovertemplate=hovertemplate,
            )

        return go.Scatter(
            x=x0,
            y=means,
            mode="lines+markers+text" if text else ("lines+markers" if series_cfg.marker else "lines"),
            name=name,
            yaxis=yaxis,
            line=dict(color=series_cfg.color) if series_cfg.color else None,
            text=text,
            textposition="bottom right" if text else None,
            customdata=customdata,
            hovertemplate=hovertemplate,
        )
