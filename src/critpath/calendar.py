"""Working-time calendars used by the scheduling passes.

The engine only needs three operations from a calendar: move forward by an
amount of working time, move backward by an amount of working time, and
measure the working time between two instants. ``ElapsedTimeCalendar`` is the
no-exclusions default. ``WorkingCalendar`` excludes non-working weekdays and
holiday periods at whole-day granularity.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Any, Protocol

from pydantic import BaseModel, Field, field_validator, model_validator

# Upper bound on consecutive non-working days before a calendar is considered broken
MAX_NON_WORKING_RUN = 3660

_ONE_DAY = timedelta(days=1)

WEEKDAY_NAMES = {
    "mon": 0,
    "monday": 0,
    "tue": 1,
    "tuesday": 1,
    "wed": 2,
    "wednesday": 2,
    "thu": 3,
    "thursday": 3,
    "fri": 4,
    "friday": 4,
    "sat": 5,
    "saturday": 5,
    "sun": 6,
    "sunday": 6,
}


class WorkingTimeCalendar(Protocol):
    """Calendar collaborator consumed by the scheduling passes.

    Implementations must be synchronous and pure: the same arguments always
    give the same answer.
    """

    def add_working_time(self, start: datetime, duration: timedelta) -> datetime:
        """Return the instant reached by adding working time to start."""
        ...

    def subtract_working_time(self, end: datetime, duration: timedelta) -> datetime:
        """Return the instant reached by removing working time from end."""
        ...

    def working_time_between(self, start: datetime, end: datetime) -> timedelta:
        """Return the (signed) working time from start to end."""
        ...


class ElapsedTimeCalendar:
    """Plain calendar arithmetic with no excluded time."""

    def add_working_time(self, start: datetime, duration: timedelta) -> datetime:
        return start + duration

    def subtract_working_time(self, end: datetime, duration: timedelta) -> datetime:
        return end - duration

    def working_time_between(self, start: datetime, end: datetime) -> timedelta:
        return end - start


def shift(calendar: WorkingTimeCalendar, when: datetime, delta: timedelta) -> datetime:
    """Move an instant by a signed amount of working time."""
    if delta >= timedelta(0):
        return calendar.add_working_time(when, delta)
    return calendar.subtract_working_time(when, -delta)


class NonWorkingPeriod(BaseModel):
    """A holiday or shutdown period (inclusive dates)."""

    start: date
    end: date | None = None
    name: str = ""
    yearly: bool = False  # Repeat on the same month/day range every year from start

    @model_validator(mode="after")
    def validate_end_after_start(self) -> NonWorkingPeriod:
        """Ensure end date is not before start date."""
        if self.end is not None and self.end < self.start:
            raise ValueError("end date must not be before start date")
        return self

    @property
    def effective_end(self) -> date:
        return self.end or self.start

    def applies_to(self, day: date) -> bool:
        """Check whether this period covers the given day."""
        if not self.yearly:
            return self.start <= day <= self.effective_end

        if day.year < self.start.year:
            return False
        first = (self.start.month, self.start.day)
        last = (self.effective_end.month, self.effective_end.day)
        current = (day.month, day.day)
        if first <= last:
            return first <= current <= last
        # Period wraps around the new year (e.g. Dec 24 - Jan 2)
        return current >= first or current <= last


class WorkingCalendar(BaseModel):
    """Whole-day working calendar.

    Every working day contributes a full day of working time. Days are
    non-working when their weekday is not listed or a holiday period covers
    them; ``extra_working_dates`` override both rules.
    """

    name: str = "Standard Calendar"
    working_weekdays: list[int] = Field(default_factory=lambda: [0, 1, 2, 3, 4])
    holidays: list[NonWorkingPeriod] = Field(default_factory=list[NonWorkingPeriod])
    extra_working_dates: list[date] = Field(default_factory=list[date])

    @field_validator("working_weekdays", mode="before")
    @classmethod
    def parse_weekdays(cls, v: Any) -> list[int]:
        """Accept weekday numbers (Monday=0) or names ("mon", "Friday")."""
        if v is None:
            return []
        if not isinstance(v, list):
            v = [v]
        result: list[int] = []
        for item in v:  # type: ignore[union-attr]
            if isinstance(item, str):
                key = item.strip().lower()
                if key not in WEEKDAY_NAMES:
                    raise ValueError(f"Unknown weekday: {item!r}")
                result.append(WEEKDAY_NAMES[key])
            else:
                result.append(int(item))
        return result

    @model_validator(mode="after")
    def validate_weekdays(self) -> WorkingCalendar:
        """Ensure the calendar has at least one valid working weekday."""
        if not self.working_weekdays:
            raise ValueError("calendar must have at least one working weekday")
        for weekday in self.working_weekdays:
            if not 0 <= weekday <= 6:
                raise ValueError(f"weekday must be between 0 (Monday) and 6, got {weekday}")
        return self

    def is_working_day(self, day: date) -> bool:
        """Check whether the whole day counts as working time."""
        if day in self.extra_working_dates:
            return True
        if any(period.applies_to(day) for period in self.holidays):
            return False
        return day.weekday() in self.working_weekdays

    def add_working_time(self, start: datetime, duration: timedelta) -> datetime:
        """Add working time, landing on the earliest working instant.

        When the exact result falls at the end of a working day the instant is
        rolled forward past any following non-working days.
        """
        if duration < timedelta(0):
            return self.subtract_working_time(start, -duration)

        current = start
        remaining = duration
        while True:
            day = current.date()
            if not self.is_working_day(day):
                current = self._next_working_day_start(day, current)
                continue
            day_end = _midnight(day + _ONE_DAY, current)
            available = day_end - current
            if remaining < available:
                return current + remaining
            remaining -= available
            current = day_end

    def subtract_working_time(self, end: datetime, duration: timedelta) -> datetime:
        """Remove working time from end, returning the exact instant reached."""
        if duration < timedelta(0):
            return self.add_working_time(end, -duration)

        current = end
        remaining = duration
        skipped = 0
        while remaining > timedelta(0):
            day_start = _midnight(current.date(), current)
            if current == day_start:
                day_start -= _ONE_DAY
            if not self.is_working_day(day_start.date()):
                skipped += 1
                if skipped > MAX_NON_WORKING_RUN:
                    raise ValueError(
                        f"No working day within {MAX_NON_WORKING_RUN} days before {end}"
                    )
                current = day_start
                continue
            skipped = 0
            span = current - day_start
            if remaining <= span:
                return current - remaining
            remaining -= span
            current = day_start
        return current

    def working_time_between(self, start: datetime, end: datetime) -> timedelta:
        """Measure working time between two instants (negative if end < start)."""
        if end < start:
            return -self.working_time_between(end, start)

        total = timedelta(0)
        day = start.date()
        while day <= end.date():
            if self.is_working_day(day):
                day_start = _midnight(day, start)
                window_start = max(start, day_start)
                window_end = min(end, day_start + _ONE_DAY)
                if window_end > window_start:
                    total += window_end - window_start
            day += _ONE_DAY
        return total

    def _next_working_day_start(self, day: date, like: datetime) -> datetime:
        candidate = day + _ONE_DAY
        for _ in range(MAX_NON_WORKING_RUN):
            if self.is_working_day(candidate):
                return _midnight(candidate, like)
            candidate += _ONE_DAY
        raise ValueError(f"No working day within {MAX_NON_WORKING_RUN} days after {day}")


def _midnight(day: date, like: datetime) -> datetime:
    """Midnight at the start of day, with the same tzinfo as like."""
    return datetime.combine(day, time(), tzinfo=like.tzinfo)
