"""Calendar granularity used for bucket widths, axis ticks and brush snapping.

A TickUnit is a calendar field (year, month, week, ...) plus a ``step``.
Boundaries fall on field values divisible by ``step`` ("every 5 years"
lands on 1995, 2000, 2005, ...). Months and days count from zero for this
purpose, so "every 3 months" is Jan/Apr/Jul/Oct. Weeks start on Sunday and
multi-week steps are counted from the first Sunday after the Unix epoch.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal, Optional, Union

import pandas as pd

TickUnitName = Literal["year", "month", "week", "day", "hour", "minute", "second"]

UNIT_NAMES: tuple[str, ...] = ("year", "month", "week", "day", "hour", "minute", "second")

_ALIASES: dict[str, str] = {
    "y": "year",
    "yr": "year",
    "yrs": "year",
    "year": "year",
    "years": "year",
    "mo": "month",
    "mon": "month",
    "month": "month",
    "months": "month",
    "w": "week",
    "wk": "week",
    "week": "week",
    "weeks": "week",
    "d": "day",
    "day": "day",
    "days": "day",
    "h": "hour",
    "hr": "hour",
    "hour": "hour",
    "hours": "hour",
    "min": "minute",
    "minute": "minute",
    "minutes": "minute",
    "s": "second",
    "sec": "second",
    "second": "second",
    "seconds": "second",
}

_PARSE_RE = re.compile(r"^\s*(\d+)?\s*([A-Za-z]+)\s*$")

# 1970-01-04 is the first Sunday after the Unix epoch.
_EPOCH_SUNDAY = pd.Timestamp("1970-01-04")


@dataclass(frozen=True)
class TickUnit:
    """A calendar granularity such as "one year" or "every 15 minutes"."""

    name: TickUnitName = "year"
    step: int = 1

    def __post_init__(self) -> None:
        if self.name not in UNIT_NAMES:
            raise ValueError(f"Unknown tick unit {self.name!r}; expected one of {', '.join(UNIT_NAMES)}")
        if int(self.step) != self.step or self.step < 1:
            raise ValueError(f"tick unit step must be a positive integer, got {self.step!r}")

    def __str__(self) -> str:
        if self.step == 1:
            return self.name
        return f"{self.step} {self.name}s"

    @classmethod
    def parse(cls, text: str) -> "TickUnit":
        """Parse ``"year"``, ``"2 months"``, ``"15min"``, ``"5y"`` and similar."""
        match = _PARSE_RE.match(str(text))
        if match is None:
            raise ValueError(f"Cannot parse tick unit {text!r}")
        count, word = match.groups()
        name = _ALIASES.get(word.lower())
        if name is None:
            raise ValueError(f"Unknown tick unit {word!r} in {text!r}")
        return cls(name=name, step=int(count) if count else 1)  # type: ignore[arg-type]

    @classmethod
    def from_value(cls, value: Optional[Union["TickUnit", str]]) -> "TickUnit":
        """Accept a TickUnit, a parseable string, or None (one year)."""
        if value is None:
            return cls()
        if isinstance(value, TickUnit):
            return value
        return cls.parse(value)

    # ------------------------------------------------------------------
    # Calendar arithmetic
    # ------------------------------------------------------------------

    def floor(self, t: pd.Timestamp) -> pd.Timestamp:
        """Latest boundary at or before ``t``."""
        t = pd.Timestamp(t)
        step = self.step
        if self.name == "year":
            return pd.Timestamp(year=t.year - t.year % step, month=1, day=1)
        if self.name == "month":
            m0 = t.month - 1
            return pd.Timestamp(year=t.year, month=m0 - m0 % step + 1, day=1)
        if self.name == "week":
            day = t.normalize()
            sunday = day - pd.Timedelta(days=(day.dayofweek + 1) % 7)
            if step > 1:
                weeks = (sunday - _EPOCH_SUNDAY).days // 7
                sunday -= pd.Timedelta(weeks=weeks % step)
            return sunday
        if self.name == "day":
            d0 = t.day - 1
            return t.normalize().replace(day=d0 - d0 % step + 1)
        if self.name == "hour":
            base = t.floor("h")
            return base.replace(hour=base.hour - base.hour % step)
        if self.name == "minute":
            base = t.floor("min")
            return base.replace(minute=base.minute - base.minute % step)
        base = t.floor("s")
        return base.replace(second=base.second - base.second % step)

    def ceil(self, t: pd.Timestamp) -> pd.Timestamp:
        """Earliest boundary at or after ``t``."""
        t = pd.Timestamp(t)
        f = self.floor(t)
        if f == t:
            return f
        return self._next_boundary(f)

    def round(self, t: pd.Timestamp) -> pd.Timestamp:
        """Nearest boundary to ``t``; an exact tie goes to the later boundary."""
        t = pd.Timestamp(t)
        lower = self.floor(t)
        if lower == t:
            return lower
        upper = self._next_boundary(lower)
        return lower if t - lower < upper - t else upper

    def offset(self, t: pd.Timestamp, n: int = 1) -> pd.Timestamp:
        """Shift ``t`` by ``n`` whole tick units (``n * step`` calendar fields)."""
        return self._shift(pd.Timestamp(t), int(n) * self.step)

    def range(self, start: pd.Timestamp, stop: pd.Timestamp) -> list[pd.Timestamp]:
        """Boundaries in ``[start, stop)``."""
        out: list[pd.Timestamp] = []
        t = self.ceil(start)
        stop = pd.Timestamp(stop)
        while t < stop:
            out.append(t)
            t = self._next_boundary(t)
        return out

    def ticks(self, start: pd.Timestamp, end: pd.Timestamp) -> list[pd.Timestamp]:
        """Boundaries in ``[start, end]`` (end inclusive), for axis ticks."""
        out = self.range(start, end)
        end = pd.Timestamp(end)
        if self.floor(end) == end and (not out or out[-1] != end) and end >= pd.Timestamp(start):
            out.append(end)
        return out

    def _next_boundary(self, boundary: pd.Timestamp) -> pd.Timestamp:
        # Step one calendar field at a time; "every N" boundaries can restart
        # inside a larger field (e.g. every 10 days restarts each month).
        c = self._shift(boundary, 1)
        while self.floor(c) != c:
            c = self._shift(c, 1)
        return c

    def _shift(self, t: pd.Timestamp, fields: int) -> pd.Timestamp:
        if self.name == "year":
            return t + pd.DateOffset(years=fields)
        if self.name == "month":
            return t + pd.DateOffset(months=fields)
        if self.name == "week":
            return t + pd.Timedelta(weeks=fields)
        if self.name == "day":
            return t + pd.Timedelta(days=fields)
        if self.name == "hour":
            return t + pd.Timedelta(hours=fields)
        if self.name == "minute":
            return t + pd.Timedelta(minutes=fields)
        return t + pd.Timedelta(seconds=fields)


DEFAULT_TICK_UNIT = TickUnit()
