"""
Value objects for week arithmetic, hour rounding and tenant policy.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, List, Union

from .base import ValueObject, ValidationError


DAYS_IN_WEEK = 7
MAX_HOURS_PER_ENTRY = Decimal("24")
TWO_PLACES = Decimal("0.01")

Number = Union[Decimal, float, int]


def to_decimal(value: Number) -> Decimal:
    """Convert a numeric value to Decimal without float noise."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_hours(value: Number) -> float:
    """Round an hour total to two decimal places, halves away from zero."""
    return float(to_decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP))


def js_weekday(day: date) -> int:
    """Weekday number with Sunday=0 .. Saturday=6."""
    return (day.weekday() + 1) % 7


@dataclass(frozen=True)
class Week(ValueObject):
    """A seven day window anchored on its first calendar date."""

    start: date

    def validate(self) -> None:
        if not isinstance(self.start, date):
            raise ValidationError("Week start must be a date", "week_start_date")

    @classmethod
    def current(cls, week_start_day: int = 1, today: Optional[date] = None) -> "Week":
        """Week containing ``today`` for a tenant whose weeks start on ``week_start_day``."""
        if not 0 <= week_start_day <= 6:
            raise ValidationError("Week start day must be between 0 and 6", "week_start")
        today = today or date.today()
        days_back = (js_weekday(today) - week_start_day) % 7
        return cls(today - timedelta(days=days_back))

    @property
    def end(self) -> date:
        return self.start + timedelta(days=DAYS_IN_WEEK - 1)

    @property
    def dates(self) -> List[date]:
        return [self.start + timedelta(days=offset) for offset in range(DAYS_IN_WEEK)]

    def date_for(self, day_of_week: int) -> date:
        """Calendar date of an entry logged on ``day_of_week`` of this week."""
        return self.start + timedelta(days=day_of_week)

    def __str__(self) -> str:
        return self.start.isoformat()


@dataclass(frozen=True)
class TimesheetPolicy(ValueObject):
    """Per-tenant timesheet configuration owned by tenant settings."""

    week_start: int = 1
    max_hours_per_day: Optional[Decimal] = None

    def validate(self) -> None:
        if not 0 <= self.week_start <= 6:
            raise ValidationError("Week start must be between 0 and 6", "week_start")
        if self.max_hours_per_day is not None and self.max_hours_per_day <= 0:
            raise ValidationError("Max hours per day must be positive", "max_hours_per_day")
