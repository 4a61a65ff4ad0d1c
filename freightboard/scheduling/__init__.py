"""Mini README: Calendar helpers used by the finance engine.

The scheduling package owns every date rule the ledger depends on: date-key
normalisation, month stepping, due-day clamping and the named date-range
presets offered to operators. "Today" always comes from an injected
``Clock`` so projections stay reproducible.
"""

from .calendar_utils import (
    Clock,
    DateKey,
    DateRange,
    DateRangePreset,
    FixedClock,
    SystemClock,
    add_months,
    days_in_month,
    default_range,
    due_day_from_date,
    is_date_in_range,
    month_start,
    monthly_anchor_date,
    occurrence_date,
    range_for_preset,
    to_date_only,
)

__all__ = [
    "Clock",
    "DateKey",
    "DateRange",
    "DateRangePreset",
    "FixedClock",
    "SystemClock",
    "add_months",
    "days_in_month",
    "default_range",
    "due_day_from_date",
    "is_date_in_range",
    "month_start",
    "monthly_anchor_date",
    "occurrence_date",
    "range_for_preset",
    "to_date_only",
]
