"""Mini README: Validation of operator input before records are created.

Structure:
    * build_fixed_expense - monthly fixed expense (leasing, insurance, ...).
    * build_variable_expense - one-off cost such as fuel or maintenance.
    * build_recurring_income / build_one_time_income - custom income entries.
    * build_posting_update - turns a pending one-off cost into a posted one.

Each builder either returns the complete payload handed to the API client or
raises ``ValidationError`` with one human-readable message. Nothing is
partially built. Amounts entered in RSD are converted to EUR here, once.
"""

from __future__ import annotations

import math
from typing import Any, Dict, Optional

from ..errors import UnsupportedCurrencyError, ValidationError
from ..logging_utils import get_logger
from ..scheduling import Clock, monthly_anchor_date, to_date_only
from .currency import InputCurrency, convert
from .records import ExpenseCategory, ExpenseRecurrence, ExpenseStatus, ExpenseType, to_number

LOGGER = get_logger(__name__)


def _currency(value: Any) -> InputCurrency:
    try:
        return InputCurrency.from_str(value)
    except UnsupportedCurrencyError as error:
        raise ValidationError(str(error), field="inputCurrency") from error


def _category(value: Any) -> ExpenseCategory:
    try:
        return ExpenseCategory(str(getattr(value, "value", value)).strip().upper())
    except ValueError as error:
        raise ValidationError(f"Unsupported expense category: {value}", field="category") from error


def _due_day(value: Any, message: str) -> int:
    try:
        number = float(value)
    except (TypeError, ValueError) as error:
        raise ValidationError(message, field="dueDay") from error
    if not math.isfinite(number):
        raise ValidationError(message, field="dueDay")
    day = math.trunc(number)
    if day < 1 or day > 31:
        raise ValidationError(message, field="dueDay")
    return int(day)


def _optional_date(value: Any, label: str) -> Optional[str]:
    if value is None or not str(value).strip():
        return None
    key = to_date_only(value)
    if not key:
        raise ValidationError(f"{label} is not a valid date.", field="stopDate")
    return key


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


def build_fixed_expense(
    *,
    category: Any,
    amount: Any,
    due_day: Any,
    clock: Clock,
    input_currency: Any = InputCurrency.EUR,
    stop_date: Any = None,
    label: Optional[str] = None,
    anchor_reference: Any = None,
) -> Dict[str, Any]:
    """Validate and build a monthly fixed-expense payload.

    ``anchor_reference`` is the current expense date when editing, so the
    anchor stays in the original month; new templates anchor in this month.
    """

    raw_amount = to_number(amount)
    if raw_amount <= 0:
        raise ValidationError("Fixed expense amount must be greater than 0.", field="amount")
    day = _due_day(due_day, "Due day must be a number between 1 and 31.")
    currency = _currency(input_currency)
    expense_category = _category(category)
    stop = _optional_date(stop_date, "Stop date")

    payload: Dict[str, Any] = {
        "category": expense_category.value,
        "expenseType": ExpenseType.FIXED.value,
        "amount": convert(raw_amount, currency),
        "inputAmount": raw_amount,
        "inputCurrency": currency.value,
        "currency": "EUR",
        "expenseDate": monthly_anchor_date(day, anchor_reference, clock),
        "recurrenceType": ExpenseRecurrence.MONTHLY.value,
        "stopDate": stop,
        "isRecurring": True,
    }
    text = _clean(label)
    if text:
        payload["recurringLabel"] = text
        payload["description"] = text
    LOGGER.debug("Built fixed expense payload anchored on %s", payload["expenseDate"])
    return payload


def build_variable_expense(
    *,
    category: Any,
    amount: Any,
    expense_date: Any,
    status: Any = ExpenseStatus.PENDING,
    label: Optional[str] = None,
) -> Dict[str, Any]:
    raw_amount = to_number(amount)
    if raw_amount <= 0:
        raise ValidationError("Variable expense amount must be greater than 0.", field="amount")
    day = to_date_only(expense_date)
    if not day:
        raise ValidationError("Variable expense date is required.", field="expenseDate")
    try:
        expense_status = ExpenseStatus(str(getattr(status, "value", status)).strip().upper())
    except ValueError as error:
        raise ValidationError(f"Unsupported expense status: {status}", field="status") from error

    payload: Dict[str, Any] = {
        "category": _category(category).value,
        "expenseType": ExpenseType.VARIABLE.value,
        "status": expense_status.value,
        "amount": raw_amount,
        "currency": "EUR",
        "expenseDate": day,
        "recurrenceType": ExpenseRecurrence.ONE_TIME.value,
        "isRecurring": False,
    }
    text = _clean(label)
    if text:
        payload["description"] = text
    return payload


def build_recurring_income(
    *,
    description: Optional[str],
    amount: Any,
    due_day: Any,
    clock: Clock,
    input_currency: Any = InputCurrency.EUR,
    stop_date: Any = None,
    notes: Optional[str] = None,
    anchor_reference: Any = None,
) -> Dict[str, Any]:
    text = _clean(description)
    if not text:
        raise ValidationError("Custom income description is required.", field="description")
    raw_amount = to_number(amount)
    if raw_amount <= 0:
        raise ValidationError("Custom income amount must be greater than 0.", field="amount")
    day = _due_day(due_day, "Due day must be between 1 and 31.")
    currency = _currency(input_currency)
    stop = _optional_date(stop_date, "Stop date")

    payload: Dict[str, Any] = {
        "amount": convert(raw_amount, currency),
        "currency": "EUR",
        "inputAmount": raw_amount,
        "inputCurrency": currency.value,
        "isOneTime": False,
        "dueDay": day,
        "incomeDate": monthly_anchor_date(day, anchor_reference, clock),
        "description": text,
    }
    if stop:
        payload["stopDate"] = stop
    if _clean(notes):
        payload["notes"] = _clean(notes)
    return payload


def build_one_time_income(
    *,
    description: Optional[str],
    amount: Any,
    income_date: Any,
    input_currency: Any = InputCurrency.EUR,
    notes: Optional[str] = None,
) -> Dict[str, Any]:
    text = _clean(description)
    if not text:
        raise ValidationError("Custom income description is required.", field="description")
    raw_amount = to_number(amount)
    if raw_amount <= 0:
        raise ValidationError("Custom income amount must be greater than 0.", field="amount")
    day = to_date_only(income_date)
    if not day:
        raise ValidationError("Custom income date is required.", field="incomeDate")
    currency = _currency(input_currency)

    payload: Dict[str, Any] = {
        "amount": convert(raw_amount, currency),
        "currency": "EUR",
        "inputAmount": raw_amount,
        "inputCurrency": currency.value,
        "isOneTime": True,
        "dueDay": int(day[8:10]),
        "incomeDate": day,
        "description": text,
        "stopDate": None,
    }
    if _clean(notes):
        payload["notes"] = _clean(notes)
    return payload


def build_posting_update(*, final_amount: Any) -> Dict[str, Any]:
    """Payload that posts a pending one-off cost with its final amount."""

    amount = to_number(final_amount)
    if amount <= 0:
        raise ValidationError("Final amount must be greater than 0.", field="amount")
    return {
        "status": ExpenseStatus.POSTED.value,
        "amount": amount,
        "inputAmount": amount,
        "inputCurrency": InputCurrency.EUR.value,
        "currency": "EUR",
    }
