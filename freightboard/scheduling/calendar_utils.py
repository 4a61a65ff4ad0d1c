"""Mini README: Date-key normalisation and month arithmetic.

Structure:
    * to_date_only / is_date_in_range - turn loose date values into
      ``YYYY-MM-DD`` keys and compare them inclusively.
    * month_start / add_months / days_in_month / occurrence_date - month
      stepping plus the due-day clamp shared by income and expense expansion.
    * Clock, SystemClock, FixedClock - injectable source of "today".
    * DateRange, DateRangePreset, range_for_preset, default_range - query
      windows offered to operators.

Every helper works on calendar days only. Unparsable input becomes the empty
key ``""`` which callers treat as "exclude this record".
"""

from __future__ import annotations

import calendar
import re
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Optional, Protocol, Union
from zoneinfo import ZoneInfo

from dateutil.parser import isoparse
from dateutil.relativedelta import relativedelta

from ..configuration import get_settings
from ..errors import DateRangeError
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)

DateKey = str
DateLike = Union[str, date, datetime, None]

_DATE_ONLY_PATTERN = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


def _business_zone(timezone: Optional[str] = None) -> ZoneInfo:
    return ZoneInfo(timezone or get_settings().business_timezone)


def to_date_only(value: DateLike, *, timezone: Optional[str] = None) -> DateKey:
    """Normalise a date-like value into a ``YYYY-MM-DD`` key.

    Plain date keys are validated and returned as-is. Timestamps carrying an
    offset are converted into the business time zone before the calendar
    day is taken; naive timestamps are assumed to already be local. Anything
    that cannot be parsed yields ``""``.
    """

    if value is None:
        return ""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(_business_zone(timezone))
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if not isinstance(value, str):
        return ""

    trimmed = value.strip()
    if not trimmed:
        return ""
    match = _DATE_ONLY_PATTERN.match(trimmed)
    if match:
        try:
            return date(int(match.group(1)), int(match.group(2)), int(match.group(3))).isoformat()
        except ValueError:
            return ""
    try:
        parsed = isoparse(trimmed)
    except (ValueError, OverflowError):
        return ""
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(_business_zone(timezone))
    return parsed.date().isoformat()


def is_date_in_range(value: DateLike, from_date: DateKey, to_date: DateKey) -> bool:
    """Return True when the normalised value lies within the inclusive bounds."""

    day = to_date_only(value)
    if not day:
        return False
    return from_date <= day <= to_date


def _as_date(value: Union[DateKey, date]) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    key = to_date_only(value)
    if not key:
        raise ValueError(f"Not a calendar date: {value!r}")
    return date.fromisoformat(key)


def month_start(value: Union[DateKey, date]) -> date:
    """Return the first day of the month containing ``value``."""

    return _as_date(value).replace(day=1)


def add_months(month: date, months: int) -> date:
    """Step a month by ``months`` (negative allowed), landing on day 1."""

    return month.replace(day=1) + relativedelta(months=months)


def days_in_month(month: date) -> int:
    return calendar.monthrange(month.year, month.month)[1]


def occurrence_date(month: date, due_day: int) -> DateKey:
    """Place ``due_day`` inside ``month``, clamped to the month's real length.

    A due day of 31 lands on the 30th in April and on the 28th or 29th in
    February. Values below 1 clamp to the first day.
    """

    safe_day = min(max(int(round(due_day)), 1), days_in_month(month))
    return month.replace(day=safe_day).isoformat()


class Clock(Protocol):
    """Capability returning today's date key."""

    def today(self) -> DateKey:  # pragma: no cover - interface
        ...


class SystemClock:
    """Wall-clock "today" in the business time zone."""

    def __init__(self, timezone: Optional[str] = None) -> None:
        self.timezone = timezone

    def today(self) -> DateKey:
        return datetime.now(_business_zone(self.timezone)).date().isoformat()


@dataclass(frozen=True)
class FixedClock:
    """Clock pinned to a single day, used by tests and replayed projections."""

    day: DateKey

    def today(self) -> DateKey:
        return self.day


def due_day_from_date(value: DateLike, clock: Clock) -> int:
    """Derive a due day from a date, falling back to today's day of month."""

    key = to_date_only(value) or clock.today()
    return int(key[8:10])


def monthly_anchor_date(due_day: int, reference: DateLike, clock: Clock) -> DateKey:
    """Anchor ``due_day`` into the reference month (or the current month)."""

    reference_key = to_date_only(reference) or clock.today()
    return occurrence_date(month_start(reference_key), due_day)


@dataclass(frozen=True)
class DateRange:
    """Inclusive query window expressed as two date keys."""

    from_date: DateKey
    to_date: DateKey

    @classmethod
    def validated(cls, from_date: DateLike, to_date: DateLike) -> "DateRange":
        """Normalise both bounds and reject windows that cannot be answered."""

        start = to_date_only(from_date)
        end = to_date_only(to_date)
        if not start:
            raise DateRangeError(f"Range start is not a valid date: {from_date!r}")
        if not end:
            raise DateRangeError(f"Range end is not a valid date: {to_date!r}")
        if end < start:
            raise DateRangeError(f"Range end {end} is before range start {start}.")
        return cls(from_date=start, to_date=end)

    def contains(self, value: DateLike) -> bool:
        return is_date_in_range(value, self.from_date, self.to_date)

    def as_dict(self) -> dict:
        return {"from": self.from_date, "to": self.to_date}


class DateRangePreset(str, Enum):
    """Named windows offered next to the manual range picker."""

    LAST_MONTH = "LAST_MONTH"
    THIS_MONTH = "THIS_MONTH"
    NEXT_MONTH = "NEXT_MONTH"
    THIS_YEAR = "THIS_YEAR"

    @classmethod
    def from_str(cls, value: str) -> "DateRangePreset":
        try:
            return cls(value.strip().upper().replace("-", "_"))
        except (ValueError, AttributeError) as error:
            raise ValueError(f"Unsupported date range preset: {value}") from error


def _month_range(month: date) -> DateRange:
    first = month.replace(day=1)
    last = first.replace(day=days_in_month(first))
    return DateRange(from_date=first.isoformat(), to_date=last.isoformat())


def range_for_preset(preset: DateRangePreset, clock: Clock) -> DateRange:
    """Compute the window for a named preset relative to the clock's today."""

    current = month_start(clock.today())
    if preset is DateRangePreset.LAST_MONTH:
        return _month_range(add_months(current, -1))
    if preset is DateRangePreset.THIS_MONTH:
        return _month_range(current)
    if preset is DateRangePreset.NEXT_MONTH:
        return _month_range(add_months(current, 1))
    return DateRange(
        from_date=f"{current.year:04d}-01-01",
        to_date=f"{current.year:04d}-12-31",
    )


def default_range(clock: Clock) -> DateRange:
    """First day of this month through the last day of the month after next."""

    current = month_start(clock.today())
    last_month = add_months(current, 2)
    window = DateRange(
        from_date=current.isoformat(),
        to_date=last_month.replace(day=days_in_month(last_month)).isoformat(),
    )
    LOGGER.debug("Default range resolved to %s..%s", window.from_date, window.to_date)
    return window
