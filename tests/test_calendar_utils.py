"""Mini README: Tests for date-key normalisation, month maths and range presets.

Structure:
    * test_to_date_only_* - strict keys, timestamps and rejected input.
    * test_occurrence_date_clamps_to_month_length - due-day clamp incl. leap years.
    * test_add_months_crosses_year_boundaries - month stepping lands on day one.
    * test_range_for_preset_* / test_default_range_* - named windows from a fixed clock.
    * test_date_range_validated_rejects_bad_windows - structural errors are raised.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from freightboard.errors import DateRangeError
from freightboard.scheduling import (
    DateRange,
    DateRangePreset,
    FixedClock,
    add_months,
    days_in_month,
    default_range,
    due_day_from_date,
    is_date_in_range,
    monthly_anchor_date,
    occurrence_date,
    range_for_preset,
    to_date_only,
)


def test_to_date_only_keeps_valid_date_keys() -> None:
    assert to_date_only("2024-02-29") == "2024-02-29"
    assert to_date_only("  2024-03-01 ") == "2024-03-01"
    assert to_date_only(date(2024, 1, 5)) == "2024-01-05"


def test_to_date_only_rejects_unparsable_values() -> None:
    """Impossible days and junk text collapse to the empty key."""

    assert to_date_only("2023-02-29") == ""
    assert to_date_only("yesterday") == ""
    assert to_date_only("") == ""
    assert to_date_only(None) == ""
    assert to_date_only(12345) == ""


def test_to_date_only_converts_aware_timestamps_to_business_zone() -> None:
    # 23:30 UTC on the 31st is already the 1st in Belgrade (UTC+1 in winter).
    assert to_date_only("2024-01-31T23:30:00Z") == "2024-02-01"
    assert to_date_only("2024-01-31T23:30:00Z", timezone="UTC") == "2024-01-31"
    aware = datetime(2024, 1, 31, 23, 30, tzinfo=timezone.utc)
    assert to_date_only(aware) == "2024-02-01"


def test_to_date_only_treats_naive_timestamps_as_local() -> None:
    assert to_date_only("2024-01-31T23:30:00") == "2024-01-31"
    assert to_date_only(datetime(2024, 6, 1, 8, 0)) == "2024-06-01"


def test_is_date_in_range_is_inclusive() -> None:
    assert is_date_in_range("2024-01-01", "2024-01-01", "2024-01-31")
    assert is_date_in_range("2024-01-31", "2024-01-01", "2024-01-31")
    assert not is_date_in_range("2024-02-01", "2024-01-01", "2024-01-31")
    assert not is_date_in_range("not a date", "2024-01-01", "2024-01-31")


def test_occurrence_date_clamps_to_month_length() -> None:
    assert occurrence_date(date(2024, 2, 1), 31) == "2024-02-29"
    assert occurrence_date(date(2023, 2, 1), 31) == "2023-02-28"
    assert occurrence_date(date(2024, 4, 1), 31) == "2024-04-30"
    assert occurrence_date(date(2024, 4, 1), 0) == "2024-04-01"
    assert days_in_month(date(2100, 2, 1)) == 28


def test_add_months_crosses_year_boundaries() -> None:
    assert add_months(date(2024, 11, 1), 3) == date(2025, 2, 1)
    assert add_months(date(2024, 1, 31), -1) == date(2023, 12, 1)


def test_due_day_and_anchor_fall_back_to_clock() -> None:
    clock = FixedClock("2024-04-03")

    assert due_day_from_date("2024-01-27", clock) == 27
    assert due_day_from_date(None, clock) == 3
    assert monthly_anchor_date(31, None, clock) == "2024-04-30"
    assert monthly_anchor_date(31, "2024-02-10", clock) == "2024-02-29"


@pytest.mark.parametrize(
    ("preset", "expected"),
    [
        (DateRangePreset.LAST_MONTH, ("2023-12-01", "2023-12-31")),
        (DateRangePreset.THIS_MONTH, ("2024-01-01", "2024-01-31")),
        (DateRangePreset.NEXT_MONTH, ("2024-02-01", "2024-02-29")),
        (DateRangePreset.THIS_YEAR, ("2024-01-01", "2024-12-31")),
    ],
)
def test_range_for_preset_uses_clock(preset: DateRangePreset, expected: tuple) -> None:
    window = range_for_preset(preset, FixedClock("2024-01-15"))

    assert (window.from_date, window.to_date) == expected


def test_default_range_spans_three_months() -> None:
    window = default_range(FixedClock("2024-11-20"))

    assert window.as_dict() == {"from": "2024-11-01", "to": "2025-01-31"}


def test_preset_from_str_accepts_loose_names() -> None:
    assert DateRangePreset.from_str("next-month") is DateRangePreset.NEXT_MONTH
    with pytest.raises(ValueError):
        DateRangePreset.from_str("fortnight")


def test_date_range_validated_rejects_bad_windows() -> None:
    assert DateRange.validated("2024-01-01", "2024-01-01").contains("2024-01-01")
    with pytest.raises(DateRangeError):
        DateRange.validated("2024-02-01", "2024-01-31")
    with pytest.raises(DateRangeError):
        DateRange.validated("soon", "2024-01-31")
    with pytest.raises(DateRangeError):
        DateRange.validated("2024-01-01", "")
