"""Data sources feeding a chart.

A data source exposes its current points through ``get_data()`` and
notifies subscribers after every change. The chart re-renders from scratch
on each notification.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Optional, Protocol, runtime_checkable

import pandas as pd

from nicetimechart.utils.logging import get_logger

logger = get_logger(__name__)

ChangeListener = Callable[[], None]
Unsubscribe = Callable[[], None]


@runtime_checkable
class DataSource(Protocol):
    """Pull accessor plus change notification."""

    def get_data(self) -> pd.DataFrame: ...

    def subscribe(self, listener: ChangeListener) -> Unsubscribe: ...


def _as_frame(data: Any) -> pd.DataFrame:
    if data is None:
        return pd.DataFrame({"x": pd.Series(dtype="datetime64[ns]"), "y": pd.Series(dtype="float64")})
    if isinstance(data, pd.DataFrame):
        missing = [c for c in ("x", "y") if c not in data.columns]
        if missing:
            raise ValueError(f"data must contain columns 'x' and 'y', missing {missing}")
        return data[["x", "y"]].reset_index(drop=True).copy()
    rows = list(data)
    if rows and isinstance(rows[0], dict):
        return pd.DataFrame([{"x": r.get("x"), "y": r.get("y")} for r in rows], columns=["x", "y"])
    return pd.DataFrame(rows, columns=["x", "y"])


class DataFrameSource:
    """In-memory data source backed by a pandas DataFrame with x/y columns.

    Rows are stored as given; malformed rows are kept here and dropped by
    the chart when binning.
    """

    def __init__(self, data: Optional[Any] = None, *, name: str = "") -> None:
        self.name = name
        self._df = _as_frame(data)
        self._listeners: list[ChangeListener] = []

    def get_data(self) -> pd.DataFrame:
        return self._df.copy()

    def __len__(self) -> int:
        return len(self._df)

    def subscribe(self, listener: ChangeListener) -> Unsubscribe:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def set_data(self, data: Any) -> None:
        """Replace all rows."""
        self._df = _as_frame(data)
        self._notify()

    def append(self, rows: Iterable[Any] | pd.DataFrame) -> None:
        """Append rows (DataFrame, (x, y) pairs or x/y dicts)."""
        new = _as_frame(rows)
        if new.empty:
            return
        self._df = new if self._df.empty else pd.concat([self._df, new], ignore_index=True)
        self._notify()

    def clear(self) -> None:
        self._df = _as_frame(None)
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                logger.exception("Data change listener failed for source %r", self.name)
