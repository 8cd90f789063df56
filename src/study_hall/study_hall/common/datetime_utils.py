from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timezone, tzinfo
from typing import Optional, Union

from ..core.constants import DATE_FORMAT, MONTH_FORMAT
from ..core.exceptions import ValidationError


@dataclass(frozen=True, order=True)
class YearMonth:
    year: int
    month: int

    def __post_init__(self):
        if not 1 <= self.month <= 12:
            raise ValidationError(f"Invalid month: {self.month}")

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    def next(self) -> "YearMonth":
        if self.month == 12:
            return YearMonth(self.year + 1, 1)
        return YearMonth(self.year, self.month + 1)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    @classmethod
    def of(cls, value: datetime | date) -> "YearMonth":
        return cls(value.year, value.month)


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid date (expected YYYY-MM-DD): {value!r}") from e


def parse_year_month(value: str) -> YearMonth:
    """Parse YYYY-MM string into YearMonth."""
    try:
        parsed = datetime.strptime(value, MONTH_FORMAT)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid month (expected YYYY-MM): {value!r}") from e
    return YearMonth(parsed.year, parsed.month)


def as_date(value: Union[date, str]) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_iso_date(value)


def as_year_month(value: Union[YearMonth, str]) -> YearMonth:
    if isinstance(value, YearMonth):
        return value
    return parse_year_month(value)


def day_bounds(day: date, tz: tzinfo) -> tuple[datetime, datetime]:
    """Half-open [start, end) of a calendar day in the given timezone."""
    start = datetime.combine(day, time.min, tzinfo=tz)
    end = datetime.combine(date.fromordinal(day.toordinal() + 1), time.min, tzinfo=tz)
    return start, end


def month_bounds(ym: YearMonth, tz: tzinfo) -> tuple[datetime, datetime]:
    start = datetime.combine(ym.first_day, time.min, tzinfo=tz)
    end = datetime.combine(ym.next().first_day, time.min, tzinfo=tz)
    return start, end


def to_iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def to_utc_naive(value: datetime) -> datetime:
    """Aware datetime -> naive UTC, the form stored in DATETIME columns."""
    if value.tzinfo is None:
        raise ValueError("Naive datetime given where an aware instant is required")
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def from_utc_naive(value: datetime, tz: tzinfo) -> datetime:
    return value.replace(tzinfo=timezone.utc).astimezone(tz)
