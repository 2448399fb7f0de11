"""
Time windows used to scope aggregations.

DESIGN DECISION: "today", "trailing N days" and "calendar month" are
distinct kinds. They are easy to conflate (a rolling 30-day range is not
"this month") and swapping them produces silently wrong reports.

All calendar comparisons happen in the timezone carried by `now`.
"""

import calendar
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class WindowKind(str, Enum):
    """Kinds of aggregation window."""
    DAY = "day"
    TRAILING_DAYS = "trailing_days"
    CALENDAR_MONTH = "calendar_month"


def local_now() -> datetime:
    """Current instant as an aware datetime in the local timezone."""
    return datetime.now().astimezone()


class TimeWindow(BaseModel):
    """
    A time range resolved against a reference instant `now`.

    - DAY: a fixed `day`, or the day `days_back` before now's date
    - TRAILING_DAYS: [now - `days` days, now], both bounds inclusive
    - CALENDAR_MONTH: a fixed `year`/`month`, or the month containing now
    """
    model_config = ConfigDict(frozen=True)

    kind: WindowKind
    day: Optional[date] = None
    days_back: int = Field(default=0, ge=0)
    days: Optional[int] = Field(default=None, ge=1)
    year: Optional[int] = Field(default=None, ge=1)
    month: Optional[int] = Field(default=None, ge=1, le=12)

    @model_validator(mode="after")
    def check_parameters(self) -> "TimeWindow":
        if self.kind == WindowKind.TRAILING_DAYS and self.days is None:
            raise ValueError("Trailing window needs a number of days")
        if (self.year is None) != (self.month is None):
            raise ValueError("Calendar month needs both year and month")
        return self

    # -- constructors -------------------------------------------------------

    @classmethod
    def today(cls) -> "TimeWindow":
        return cls(kind=WindowKind.DAY)

    @classmethod
    def yesterday(cls) -> "TimeWindow":
        return cls(kind=WindowKind.DAY, days_back=1)

    @classmethod
    def on(cls, day: date) -> "TimeWindow":
        return cls(kind=WindowKind.DAY, day=day)

    @classmethod
    def trailing_days(cls, days: int) -> "TimeWindow":
        return cls(kind=WindowKind.TRAILING_DAYS, days=days)

    @classmethod
    def calendar_month(
        cls,
        year: Optional[int] = None,
        month: Optional[int] = None,
    ) -> "TimeWindow":
        return cls(kind=WindowKind.CALENDAR_MONTH, year=year, month=month)

    # -- evaluation ---------------------------------------------------------

    def target_day(self, now: datetime) -> date:
        """The calendar day a DAY window selects."""
        if self.day is not None:
            return self.day
        return now.date() - timedelta(days=self.days_back)

    def target_month(self, now: datetime) -> tuple[int, int]:
        """The (year, month) a CALENDAR_MONTH window selects."""
        if self.year is not None and self.month is not None:
            return self.year, self.month
        return now.year, now.month

    def contains(self, timestamp: datetime, now: Optional[datetime] = None) -> bool:
        """Whether `timestamp` falls inside this window relative to `now`."""
        now = now or local_now()
        local = timestamp.astimezone(now.tzinfo)

        if self.kind == WindowKind.DAY:
            return local.date() == self.target_day(now)
        if self.kind == WindowKind.TRAILING_DAYS:
            return now - timedelta(days=self.days) <= timestamp <= now
        year, month = self.target_month(now)
        return local.year == year and local.month == month

    def span_days(self, now: Optional[datetime] = None) -> int:
        """Number of calendar days the window covers."""
        now = now or local_now()
        if self.kind == WindowKind.DAY:
            return 1
        if self.kind == WindowKind.TRAILING_DAYS:
            return self.days
        year, month = self.target_month(now)
        return calendar.monthrange(year, month)[1]

    def describe(self, now: Optional[datetime] = None) -> str:
        """Human-readable description of the window."""
        now = now or local_now()
        if self.kind == WindowKind.DAY:
            if self.day is None and self.days_back == 0:
                return "today"
            if self.day is None and self.days_back == 1:
                return "yesterday"
            return f"on {self.target_day(now).strftime('%d %b %Y')}"
        if self.kind == WindowKind.TRAILING_DAYS:
            return f"last {self.days} days"
        year, month = self.target_month(now)
        return f"in {date(year, month, 1).strftime('%B %Y')}"


# Named periods shown as tabs in the history view
PERIOD_PRESETS: dict[str, TimeWindow] = {
    "today": TimeWindow.today(),
    "yesterday": TimeWindow.yesterday(),
    "week": TimeWindow.trailing_days(7),
    "month": TimeWindow.calendar_month(),
}
