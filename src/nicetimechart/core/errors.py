"""Exceptions raised by the chart pipeline."""

from __future__ import annotations


class ChartError(Exception):
    """Base class for nicetimechart errors."""


class ChartConfigError(ChartError, ValueError):
    """Missing or invalid chart configuration. Fatal at construction time."""


class EmptyDatasetError(ChartError):
    """No geometry can be produced for the current data snapshot.

    Attributes:
        reason: ``"empty_dataset"`` when every series is empty,
            ``"empty_series"`` when the policy skips the pass because one
            series is empty.
        series_indices: Indices of the series that were empty.
    """

    def __init__(self, message: str, *, reason: str = "empty_dataset", series_indices: tuple[int, ...] = ()) -> None:
        super().__init__(message)
        self.reason = reason
        self.series_indices = series_indices
