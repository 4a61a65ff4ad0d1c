"""Mini README: Tests for record parsing and runtime settings.

Structure:
    * test_from_dict_accepts_both_key_styles - camelCase and snake_case payloads.
    * test_from_dict_coerces_loose_values - numbers and enums degrade gracefully.
    * test_snapshot_skips_malformed_entries - one bad record never sinks the snapshot.
    * test_snapshot_skips_sources_that_are_not_lists - scalar sources are ignored.
    * test_settings_* - environment overrides and validation.
"""

from __future__ import annotations

import pytest

from freightboard.configuration import get_settings
from freightboard.finance import DriverPayRecord, ExpenseRecord, FinanceSnapshot, PaymentRecord
from freightboard.finance.records import ExpenseRecurrence, ExpenseType, PaymentStatus, to_number


def test_from_dict_accepts_both_key_styles() -> None:
    camel = ExpenseRecord.from_dict(
        {"id": "e1", "expenseType": "FIXED", "amount": 10, "expenseDate": "2024-01-01", "recurrenceType": "MONTHLY"}
    )
    snake = ExpenseRecord.from_dict(
        {"expense_id": "e1", "expense_type": "fixed", "amount": "10", "expense_date": "2024-01-01", "recurrence_type": "monthly"}
    )

    assert camel == snake
    assert camel.expense_type is ExpenseType.FIXED
    assert camel.recurrence_type is ExpenseRecurrence.MONTHLY
    assert camel.is_recurring_template


def test_from_dict_coerces_loose_values() -> None:
    payment = PaymentRecord.from_dict(
        {"id": "p1", "loadId": "L1", "amount": "n/a", "status": "LOST", "load": {"referenceNumber": "R-9"}}
    )
    driver = DriverPayRecord.from_dict({"id": "d1", "driverId": "abcdefghijkl", "year": "2024", "month": 3})

    assert payment.amount == 0.0
    assert payment.status is None
    assert payment.load_reference == "R-9"
    assert driver.label == "Driver abcdefgh"
    assert driver.year == 2024
    assert to_number(float("nan")) == 0.0
    assert to_number(True) == 0.0


def test_from_dict_requires_identifiers() -> None:
    with pytest.raises(ValueError):
        PaymentRecord.from_dict({"loadId": "L1", "amount": 10})


def test_snapshot_skips_malformed_entries() -> None:
    snapshot = FinanceSnapshot.from_dict(
        {
            "payments": [{"id": "p1", "loadId": "L1", "amount": 10, "status": "paid"}, {"amount": 5}],
            "driver_pay": [{"id": "d1", "driverId": "x", "year": 2024, "month": 1}],
        }
    )

    assert [payment.payment_id for payment in snapshot.payments] == ["p1"]
    assert snapshot.payments[0].status is PaymentStatus.PAID
    assert len(snapshot.driver_pay) == 1
    assert not snapshot.is_empty
    assert FinanceSnapshot.from_dict({}).is_empty


def test_settings_read_environment(monkeypatch) -> None:
    monkeypatch.setenv("FREIGHTBOARD_BUSINESS_TIMEZONE", "UTC")
    monkeypatch.setenv("FREIGHTBOARD_SETTLEMENT_CURRENCY", " eur ")

    settings = get_settings()

    assert settings.business_timezone == "UTC"
    assert settings.settlement_currency == "EUR"
    assert settings.rsd_to_eur_divisor == 118.0


def test_settings_reject_unknown_timezone(monkeypatch) -> None:
    monkeypatch.setenv("FREIGHTBOARD_BUSINESS_TIMEZONE", "Mars/Olympus")

    with pytest.raises(ValueError):
        get_settings()


def test_snapshot_skips_sources_that_are_not_lists() -> None:
    snapshot = FinanceSnapshot.from_dict(
        {"expenses": 5, "payments": "p1", "loads": [{"id": "L1"}]}
    )

    assert snapshot.expenses == ()
    assert snapshot.payments == ()
    assert [load.load_id for load in snapshot.loads] == ["L1"]
