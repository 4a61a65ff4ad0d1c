"""Mini README: Tests for currency conversion and the board's form validators.

Structure:
    * test_convert_* - EUR passthrough, RSD division and unknown currencies.
    * test_build_fixed_expense_* - conversion, due-day anchoring and error messages.
    * test_build_*_income_* - recurring and one-off custom income rules.
    * test_build_variable_expense_and_posting - one-off costs and posting updates.
"""

from __future__ import annotations

import pytest

from freightboard.errors import UnsupportedCurrencyError, ValidationError
from freightboard.finance import (
    InputCurrency,
    build_fixed_expense,
    build_one_time_income,
    build_posting_update,
    build_recurring_income,
    build_variable_expense,
    convert,
)
from freightboard.scheduling import FixedClock

CLOCK = FixedClock("2024-02-10")


def test_convert_passes_eur_through() -> None:
    assert convert(100, "eur") == 100.0
    assert convert("42.5", InputCurrency.EUR) == 42.5


def test_convert_divides_rsd_by_configured_rate() -> None:
    assert convert(118, "RSD") == 1.0
    assert convert(1, InputCurrency.RSD, divisor=3) == 0.33


def test_convert_rejects_unknown_currency() -> None:
    with pytest.raises(UnsupportedCurrencyError):
        convert(10, "USD")


def test_convert_reads_divisor_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("FREIGHTBOARD_RSD_TO_EUR_DIVISOR", "100")

    assert convert(250, "RSD") == 2.5


def test_build_fixed_expense_converts_and_anchors() -> None:
    payload = build_fixed_expense(
        category="leasing",
        amount="1180",
        due_day=31,
        clock=CLOCK,
        input_currency="RSD",
        label="  Truck lease ",
    )

    assert payload["amount"] == 10.0
    assert payload["inputAmount"] == 1180.0
    assert payload["category"] == "LEASING"
    assert payload["expenseDate"] == "2024-02-29"
    assert payload["recurrenceType"] == "MONTHLY"
    assert payload["recurringLabel"] == "Truck lease"


def test_build_fixed_expense_keeps_original_month_when_editing() -> None:
    payload = build_fixed_expense(
        category="INSURANCE", amount=90, due_day=15, clock=CLOCK, anchor_reference="2023-11-02"
    )

    assert payload["expenseDate"] == "2023-11-15"
    assert payload["stopDate"] is None


@pytest.mark.parametrize(
    ("overrides", "message"),
    [
        ({"amount": 0}, "Fixed expense amount must be greater than 0."),
        ({"amount": "abc"}, "Fixed expense amount must be greater than 0."),
        ({"due_day": 32}, "Due day must be a number between 1 and 31."),
        ({"due_day": "soon"}, "Due day must be a number between 1 and 31."),
        ({"stop_date": "later"}, "Stop date is not a valid date."),
        ({"category": "SNACKS"}, "Unsupported expense category: SNACKS"),
    ],
)
def test_build_fixed_expense_rejects_bad_input(overrides: dict, message: str) -> None:
    values = dict(category="LEASING", amount=100, due_day=5, clock=CLOCK)
    values.update(overrides)

    with pytest.raises(ValidationError) as excinfo:
        build_fixed_expense(**values)

    assert excinfo.value.message == message


def test_build_recurring_income_validates_in_order() -> None:
    with pytest.raises(ValidationError, match="Custom income description is required."):
        build_recurring_income(description="  ", amount=100, due_day=5, clock=CLOCK)
    with pytest.raises(ValidationError, match="Custom income amount must be greater than 0."):
        build_recurring_income(description="Sublet", amount=-1, due_day=5, clock=CLOCK)
    with pytest.raises(ValidationError) as excinfo:
        build_recurring_income(description="Sublet", amount=100, due_day=0, clock=CLOCK)

    assert excinfo.value.message == "Due day must be between 1 and 31."
    assert excinfo.value.field == "dueDay"


def test_build_recurring_income_payload() -> None:
    payload = build_recurring_income(
        description="Sublet", amount=400, due_day=30, clock=CLOCK, stop_date="2024-12-31", notes=" yard B "
    )

    assert payload["incomeDate"] == "2024-02-29"
    assert payload["dueDay"] == 30
    assert payload["isOneTime"] is False
    assert payload["stopDate"] == "2024-12-31"
    assert payload["notes"] == "yard B"


def test_build_one_time_income() -> None:
    with pytest.raises(ValidationError, match="Custom income date is required."):
        build_one_time_income(description="Refund", amount=10, income_date="")

    payload = build_one_time_income(description="Refund", amount=59, income_date="2024-03-15", input_currency="RSD")

    assert payload["amount"] == 0.5
    assert payload["dueDay"] == 15
    assert payload["isOneTime"] is True
    assert payload["stopDate"] is None


def test_build_one_time_income_rejects_unknown_currency() -> None:
    with pytest.raises(ValidationError) as excinfo:
        build_one_time_income(description="Refund", amount=10, income_date="2024-03-15", input_currency="GBP")

    assert excinfo.value.field == "inputCurrency"


def test_build_variable_expense_and_posting() -> None:
    with pytest.raises(ValidationError, match="Variable expense amount must be greater than 0."):
        build_variable_expense(category="FUEL", amount=-5, expense_date="2024-02-01")

    payload = build_variable_expense(category="fuel", amount=80.4, expense_date="2024-02-01T08:00:00")
    assert payload["status"] == "PENDING"
    assert payload["expenseDate"] == "2024-02-01"
    assert payload["expenseType"] == "VARIABLE"

    with pytest.raises(ValidationError, match="Final amount must be greater than 0."):
        build_posting_update(final_amount=0)
    assert build_posting_update(final_amount="95.10")["status"] == "POSTED"
