"""Resolve named reporting windows into half-open calendar date intervals."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable

import pendulum

from ..schemas import Assessment

EARLIEST_DATE = pendulum.date(1, 1, 1)


@dataclass(frozen=True, slots=True)
class DateWindow:
    """``[start, end)`` interval of calendar dates."""

    name: str
    start: pendulum.Date
    end: pendulum.Date

    def contains(self, value: date) -> bool:
        return self.start <= value < self.end

    def filter(self, assessments: Iterable[Assessment]) -> list[Assessment]:
        return [item for item in assessments if self.contains(item.assessment_date)]

    @property
    def last_day(self) -> pendulum.Date:
        return self.end.subtract(days=1)


def reference_date(now: datetime | date | None = None) -> pendulum.Date:
    """Normalise "now" to a UTC calendar date."""
    if now is None:
        return pendulum.now("UTC").date()
    if isinstance(now, datetime):
        return pendulum.instance(now).in_timezone("UTC").date()
    return pendulum.date(now.year, now.month, now.day)


class PeriodResolver:
    """Map window names (month, quarter, ytd, last-N-months, all-time) to date windows."""

    WINDOWS: tuple[str, ...] = ("month", "quarter", "ytd", "all-time", "previous-month")

    _ALIASES: dict[str, str] = {
        "current-month": "month",
        "this-month": "month",
        "year-to-date": "ytd",
        "all_time": "all-time",
        "alltime": "all-time",
        "previous_month": "previous-month",
    }
    _LAST_N_MONTHS = re.compile(r"^last[-_](\d+)[-_]months?$")

    def resolve(self, now: datetime | date | None, window: str) -> DateWindow:
        today = reference_date(now)
        name = self._normalize(window)
        end = today.add(days=1)
        month_start = today.start_of("month")

        if name == "month":
            return DateWindow(name, month_start, end)
        if name == "quarter":
            first_month = (today.month - 1) // 3 * 3 + 1
            return DateWindow(name, pendulum.date(today.year, first_month, 1), end)
        if name == "ytd":
            return DateWindow(name, pendulum.date(today.year, 1, 1), end)
        if name == "all-time":
            return DateWindow(name, EARLIEST_DATE, end)
        if name == "previous-month":
            return DateWindow(name, month_start.subtract(months=1), month_start)

        match = self._LAST_N_MONTHS.match(name)
        if match:
            months = int(match.group(1))
            if months < 1:
                raise ValueError("last-N-months window needs N >= 1")
            return DateWindow(f"last-{months}-months", month_start.subtract(months=months), end)

        raise ValueError(
            f"Unknown window: {window!r}; expected one of {', '.join(self.WINDOWS)} or last-N-months"
        )

    def last_n_months(self, now: datetime | date | None, months: int) -> DateWindow:
        return self.resolve(now, f"last-{months}-months")

    def month_bucket(self, now: datetime | date | None, offset: int) -> DateWindow:
        """Whole calendar month ``offset`` months before the current one."""
        start = reference_date(now).start_of("month").subtract(months=offset)
        return DateWindow(start.format("YYYY-MM"), start, start.add(months=1))

    @staticmethod
    def quarter_bucket(year: int, quarter: int) -> DateWindow:
        if quarter not in (1, 2, 3, 4):
            raise ValueError(f"Quarter must be 1-4, got {quarter}")
        start = pendulum.date(year, (quarter - 1) * 3 + 1, 1)
        return DateWindow(f"Q{quarter} {year}", start, start.add(months=3))

    def _normalize(self, window: str) -> str:
        name = str(window).strip().lower()
        return self._ALIASES.get(name, name)
