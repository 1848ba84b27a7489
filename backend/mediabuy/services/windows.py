from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum


class DateWindow(str, Enum):
    YESTERDAY = "yesterday"
    LAST_7_DAYS = "7d"
    LAST_14_DAYS = "14d"
    MONTH_TO_DATE = "mtd"
    LAST_30_DAYS = "30d"
    LAST_60_DAYS = "60d"
    LAST_MONTH = "lastMonth"
    YEAR_TO_DATE = "ytd"
    CUSTOM = "custom"


TRAILING_WINDOW_DAYS = {
    DateWindow.LAST_7_DAYS: 7,
    DateWindow.LAST_14_DAYS: 14,
    DateWindow.LAST_30_DAYS: 30,
    DateWindow.LAST_60_DAYS: 60,
}


@dataclass(frozen=True)
class DateInterval:
    """Inclusive range of calendar days. ``start > end`` means empty."""

    start: date
    end: date

    @property
    def days(self) -> int:
        return max((self.end - self.start).days + 1, 0)

    @property
    def is_empty(self) -> bool:
        return self.days == 0

    def contains(self, value: date) -> bool:
        return self.start <= value <= self.end

    def dates(self) -> list[date]:
        return [self.start + timedelta(days=offset) for offset in range(self.days)]


def parse_window(raw_value: str) -> DateWindow:
    try:
        return DateWindow(raw_value)
    except ValueError:
        normalized = raw_value.strip().lower()
        for window in DateWindow:
            if window.value.lower() == normalized or window.name.lower() == normalized:
                return window
    raise ValueError(f"Unknown date window: {raw_value!r}")


def trailing_days(anchor: date, days: int) -> DateInterval:
    return DateInterval(start=anchor - timedelta(days=days - 1), end=anchor)


def resolve_window(
    window: DateWindow | str,
    anchor: date,
    custom_start: date | None = None,
) -> DateInterval:
    """Resolve a named window against the anchor date.

    ``yesterday`` is the anchor day itself: the anchor is the latest day
    present in the batch, i.e. the most recently completed one.
    """
    if isinstance(window, str):
        window = parse_window(window)

    if window is DateWindow.YESTERDAY:
        return DateInterval(start=anchor, end=anchor)
    if window in TRAILING_WINDOW_DAYS:
        return trailing_days(anchor, TRAILING_WINDOW_DAYS[window])
    if window is DateWindow.MONTH_TO_DATE:
        return DateInterval(start=anchor.replace(day=1), end=anchor)
    if window is DateWindow.LAST_MONTH:
        last_day = anchor.replace(day=1) - timedelta(days=1)
        return DateInterval(start=last_day.replace(day=1), end=last_day)
    if window is DateWindow.YEAR_TO_DATE:
        return DateInterval(start=anchor.replace(month=1, day=1), end=anchor)
    if window is DateWindow.CUSTOM:
        if custom_start is None:
            raise ValueError("A start date is required for the custom window")
        return DateInterval(start=custom_start, end=anchor)
    raise ValueError(f"Unsupported date window: {window}")


def previous_period(interval: DateInterval) -> DateInterval:
    previous_end = interval.start - timedelta(days=1)
    if interval.is_empty:
        return DateInterval(start=interval.start, end=previous_end)
    previous_start = previous_end - timedelta(days=interval.days - 1)
    return DateInterval(start=previous_start, end=previous_end)
