"""Mini README: Expand recurring income and expense templates into occurrences.

Structure:
    * RecurringTemplate - monthly rule (amount, due day, start/stop window).
    * Occurrence - one dated instance of a template inside a query window.
    * expand_templates - pure expansion of templates over a window.
    * templates_from_expenses / templates_from_custom_income - build
      templates from the raw API records.

Occurrence identity is ``<template_id>-<date>`` so a template can never
produce two occurrences on the same day. Expansion is deterministic: the
same templates and window always produce an equal, identically ordered list.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, List, Optional

from ..logging_utils import get_logger
from ..scheduling import (
    Clock,
    DateKey,
    DateRange,
    add_months,
    due_day_from_date,
    month_start,
    occurrence_date,
    to_date_only,
)
from .records import CustomIncomeRecord, ExpenseRecord, ExpenseType, to_number

LOGGER = get_logger(__name__)


class TemplateSource(str, Enum):
    """Which record family a template was built from."""

    EXPENSE = "EXPENSE"
    CUSTOM_INCOME = "CUSTOM_INCOME"


@dataclass(frozen=True)
class RecurringTemplate:
    """Monthly rule describing a future income or expense."""

    template_id: str
    label: str
    amount: float
    due_day: int
    start_date: Optional[DateKey] = None
    stop_date: Optional[DateKey] = None
    is_one_time: bool = False
    source: TemplateSource = TemplateSource.EXPENSE

    def overlaps(self, window: DateRange) -> bool:
        """True when the template's active period touches the window."""

        start = to_date_only(self.start_date) or window.from_date
        stop = to_date_only(self.stop_date)
        return start <= window.to_date and (not stop or stop >= window.from_date)


@dataclass(frozen=True)
class Occurrence:
    """A concrete, dated instance of a template."""

    occurrence_id: str
    template_id: str
    date: DateKey
    label: str
    amount: float


def _occurrences_for(template: RecurringTemplate, window: DateRange) -> Iterator[Occurrence]:
    amount = to_number(template.amount)
    if amount <= 0:
        LOGGER.debug("Template %s skipped: non-positive amount", template.template_id)
        return

    start = to_date_only(template.start_date) or window.from_date
    stop = to_date_only(template.stop_date)
    if start > window.to_date or (stop and stop < window.from_date):
        return
    if stop and stop < start:
        LOGGER.debug("Template %s skipped: stop date precedes start date", template.template_id)
        return

    if template.is_one_time:
        if window.from_date <= start <= window.to_date:
            yield Occurrence(f"{template.template_id}-{start}", template.template_id, start, template.label, amount)
        return

    cursor = month_start(max(start, window.from_date))
    last_month = month_start(stop if stop and stop < window.to_date else window.to_date)
    while cursor <= last_month:
        day = occurrence_date(cursor, template.due_day)
        if (
            window.from_date <= day <= window.to_date
            and day >= start
            and (not stop or day <= stop)
        ):
            yield Occurrence(
                occurrence_id=f"{template.template_id}-{day}",
                template_id=template.template_id,
                date=day,
                label=template.label,
                amount=amount,
            )
        if cursor == last_month:
            break
        cursor = add_months(cursor, 1)


def expand_templates(
    templates: Iterable[RecurringTemplate], from_date: DateKey, to_date: DateKey
) -> List[Occurrence]:
    """Materialise every occurrence of ``templates`` inside ``[from_date, to_date]``.

    Results are ordered by ``(date, occurrence_id)``. Raises ``DateRangeError``
    when the window itself is invalid.
    """

    window = DateRange.validated(from_date, to_date)
    occurrences: List[Occurrence] = []
    for template in templates:
        occurrences.extend(_occurrences_for(template, window))
    occurrences.sort(key=lambda occurrence: (occurrence.date, occurrence.occurrence_id))
    return occurrences


def _clamp_due_day(value: int) -> int:
    return min(max(int(value), 1), 31)


def expense_label(expense: ExpenseRecord) -> str:
    return expense.recurring_label or expense.description or expense.category


def templates_from_expenses(expenses: Iterable[ExpenseRecord], clock: Clock) -> List[RecurringTemplate]:
    """Fixed expenses flagged as monthly become templates; everything else is skipped."""

    templates: List[RecurringTemplate] = []
    for expense in expenses:
        if expense.expense_type is not ExpenseType.FIXED or not expense.is_recurring_template:
            continue
        templates.append(
            RecurringTemplate(
                template_id=expense.expense_id,
                label=expense_label(expense),
                amount=expense.effective_amount,
                due_day=_clamp_due_day(due_day_from_date(expense.expense_date, clock)),
                start_date=to_date_only(expense.expense_date) or None,
                stop_date=to_date_only(expense.stop_date) or None,
                source=TemplateSource.EXPENSE,
            )
        )
    return templates


def income_due_day(income: CustomIncomeRecord, clock: Clock) -> int:
    """Stored due day when valid, otherwise the day of the income date."""

    if income.due_day is not None and 1 <= income.due_day <= 31:
        return income.due_day
    return _clamp_due_day(due_day_from_date(income.income_date, clock))


def templates_from_custom_income(
    incomes: Iterable[CustomIncomeRecord], clock: Clock
) -> List[RecurringTemplate]:
    """Recurring custom income entries become templates; one-off entries are skipped."""

    return [
        RecurringTemplate(
            template_id=income.income_id,
            label=income.description,
            amount=income.amount,
            due_day=income_due_day(income, clock),
            start_date=to_date_only(income.income_date) or None,
            stop_date=to_date_only(income.stop_date) or None,
            source=TemplateSource.CUSTOM_INCOME,
        )
        for income in incomes
        if not income.is_one_time
    ]
