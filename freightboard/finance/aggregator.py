"""Mini README: Merge every finance source into one ledger event list.

Structure:
    * VariableCostRow - normalised row over variable expenses and driver pay.
    * resolve_income_date / resolve_driver_pay_date - date rules per source.
    * LedgerAggregator - maps the six sources for one window and merges them.

Sources, in merge order: load payments, recurring custom income, one-time
custom income, recurring fixed expenses, one-time fixed expenses and
variable costs (expenses plus driver pay). The merged list is ordered by
``(date, event_id)``. Sources are independent, so the same load can show up
once through its payment and again through a custom income entry.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from ..logging_utils import get_logger
from ..scheduling import Clock, DateKey, DateRange, default_range, to_date_only
from .events import (
    CustomIncomeEvent,
    FixedExpenseEvent,
    LedgerEvent,
    OneTimeFixedExpenseEvent,
    PaymentIncomeEvent,
    VariableCostEvent,
)
from .records import (
    CustomIncomeRecord,
    DriverPayRecord,
    ExpenseRecord,
    ExpenseStatus,
    ExpenseType,
    FinanceSnapshot,
    LoadRecord,
    PaymentRecord,
    to_number,
)
from .recurrence import (
    Occurrence,
    expand_templates,
    expense_label,
    templates_from_custom_income,
    templates_from_expenses,
)

LOGGER = get_logger(__name__)


class CostRowSource(str, Enum):
    EXPENSE = "EXPENSE"
    DRIVER_PAY = "DRIVER_PAY"


@dataclass(frozen=True)
class VariableCostRow:
    """One line of the variable-cost table."""

    row_id: str
    date: DateKey
    source: CostRowSource
    category: str
    label: str
    status: str
    amount: float
    expense_status: Optional[ExpenseStatus] = None

    def as_dict(self) -> Dict[str, object]:
        return {
            "id": self.row_id,
            "date": self.date,
            "source": self.source.value,
            "category": self.category,
            "label": self.label,
            "status": self.status,
            "expenseStatus": self.expense_status.value if self.expense_status else None,
            "amount": self.amount,
        }


def resolve_income_date(payment: PaymentRecord, fallback: DateKey) -> DateKey:
    """Due date, then issue date, then creation date, then ``fallback``."""

    return (
        to_date_only(payment.due_date)
        or to_date_only(payment.issue_date)
        or to_date_only(payment.created_at)
        or fallback
    )


def resolve_driver_pay_date(record: DriverPayRecord, fallback: DateKey) -> DateKey:
    """Paid date when recorded, otherwise the first day of the pay month."""

    if record.paid_date:
        return to_date_only(record.paid_date) or fallback
    if not 1 <= record.month <= 12 or record.year < 1:
        return ""
    return f"{record.year:04d}-{record.month:02d}-01"


class LedgerAggregator:
    """Build the unified ledger for one query window."""

    def __init__(self, window: DateRange, clock: Clock) -> None:
        self.window = window
        self.clock = clock
        self._fallback = default_range(clock).to_date

    def payment_events(
        self, payments: Iterable[PaymentRecord], loads_by_id: Mapping[str, LoadRecord]
    ) -> List[PaymentIncomeEvent]:
        events: List[PaymentIncomeEvent] = []
        for payment in payments:
            day = resolve_income_date(payment, self._fallback)
            if not self.window.contains(day):
                continue
            linked = loads_by_id.get(payment.load_id)
            reference = payment.load_reference or (linked.reference_number if linked else None)
            events.append(
                PaymentIncomeEvent(
                    event_id=f"income-{payment.payment_id}",
                    date=day,
                    label=f"Income {reference or payment.load_id}",
                    amount=payment.effective_amount,
                    load_id=payment.load_id,
                )
            )
        return events

    def custom_income_events(self, occurrences: Iterable[Occurrence]) -> List[CustomIncomeEvent]:
        return [
            CustomIncomeEvent(
                event_id=f"custom-income-{occurrence.occurrence_id}",
                date=occurrence.date,
                label=occurrence.label,
                amount=to_number(occurrence.amount),
                income_id=occurrence.template_id,
                recurring=True,
            )
            for occurrence in occurrences
        ]

    def one_time_incomes(self, incomes: Iterable[CustomIncomeRecord]) -> List[CustomIncomeRecord]:
        """One-off custom incomes inside the window, ordered by date then id."""

        selected = [
            income for income in incomes if income.is_one_time and self.window.contains(income.income_date)
        ]
        return sorted(selected, key=lambda income: (to_date_only(income.income_date), income.income_id))

    def one_time_income_events(self, incomes: Iterable[CustomIncomeRecord]) -> List[CustomIncomeEvent]:
        return [
            CustomIncomeEvent(
                event_id=f"custom-income-one-time-{income.income_id}",
                date=to_date_only(income.income_date),
                label=income.description,
                amount=to_number(income.amount),
                income_id=income.income_id,
                recurring=False,
            )
            for income in self.one_time_incomes(incomes)
        ]

    def fixed_expense_events(self, occurrences: Iterable[Occurrence]) -> List[FixedExpenseEvent]:
        return [
            FixedExpenseEvent(
                event_id=f"fixed-{occurrence.occurrence_id}",
                date=occurrence.date,
                label=occurrence.label,
                amount=to_number(occurrence.amount),
                expense_id=occurrence.template_id,
            )
            for occurrence in occurrences
        ]

    def one_time_fixed_expense_events(
        self, expenses: Iterable[ExpenseRecord]
    ) -> List[OneTimeFixedExpenseEvent]:
        events: List[OneTimeFixedExpenseEvent] = []
        for expense in expenses:
            if expense.expense_type is not ExpenseType.FIXED or expense.is_recurring_template:
                continue
            if not self.window.contains(expense.expense_date):
                continue
            events.append(
                OneTimeFixedExpenseEvent(
                    event_id=f"fixed-onetime-{expense.expense_id}",
                    date=to_date_only(expense.expense_date),
                    label=expense_label(expense),
                    amount=expense.effective_amount,
                    expense_id=expense.expense_id,
                )
            )
        return events

    def variable_cost_rows(
        self, expenses: Iterable[ExpenseRecord], driver_pay: Iterable[DriverPayRecord]
    ) -> List[VariableCostRow]:
        """Variable expenses and driver pay in the window, newest first."""

        rows: List[VariableCostRow] = []
        for expense in expenses:
            if expense.expense_type is ExpenseType.FIXED:
                continue
            if not self.window.contains(expense.expense_date):
                continue
            status = expense.status or ExpenseStatus.POSTED
            rows.append(
                VariableCostRow(
                    row_id=expense.expense_id,
                    date=to_date_only(expense.expense_date),
                    source=CostRowSource.EXPENSE,
                    category=expense.category,
                    label=expense.description or expense.reference_number or expense.category,
                    status=status.value,
                    amount=expense.effective_amount,
                    expense_status=status,
                )
            )
        for record in driver_pay:
            day = resolve_driver_pay_date(record, self._fallback)
            if not day:
                LOGGER.debug("Driver pay %s dropped: no resolvable date", record.record_id)
                continue
            if not self.window.contains(day):
                continue
            rows.append(
                VariableCostRow(
                    row_id=f"driver-pay-{record.record_id}",
                    date=day,
                    source=CostRowSource.DRIVER_PAY,
                    category=CostRowSource.DRIVER_PAY.value,
                    label=record.label,
                    status=record.status.value if record.status else "",
                    amount=to_number(record.total_pay),
                )
            )
        return sorted(rows, key=lambda row: row.date, reverse=True)

    def variable_cost_events(self, rows: Sequence[VariableCostRow]) -> List[VariableCostEvent]:
        return [
            VariableCostEvent(
                event_id=f"variable-{row.row_id}",
                date=row.date,
                label=row.label,
                amount=to_number(row.amount),
                expense_id=row.row_id if row.source is CostRowSource.EXPENSE else None,
                status=row.expense_status,
            )
            for row in rows
        ]

    def aggregate(self, snapshot: FinanceSnapshot) -> List[LedgerEvent]:
        """Map every source of ``snapshot`` and merge into one ordered list."""

        window = self.window
        income_occurrences = expand_templates(
            templates_from_custom_income(snapshot.custom_incomes, self.clock),
            window.from_date,
            window.to_date,
        )
        expense_occurrences = expand_templates(
            templates_from_expenses(snapshot.expenses, self.clock),
            window.from_date,
            window.to_date,
        )
        rows = self.variable_cost_rows(snapshot.expenses, snapshot.driver_pay)

        events: List[LedgerEvent] = []
        events.extend(self.payment_events(snapshot.payments, snapshot.loads_by_id()))
        events.extend(self.custom_income_events(income_occurrences))
        events.extend(self.one_time_income_events(snapshot.custom_incomes))
        events.extend(self.fixed_expense_events(expense_occurrences))
        events.extend(self.one_time_fixed_expense_events(snapshot.expenses))
        events.extend(self.variable_cost_events(rows))

        dated = [event for event in events if event.date]
        if len(dated) != len(events):
            LOGGER.debug("Dropped %s events without a resolvable date", len(events) - len(dated))
        dated.sort(key=lambda event: (event.date, event.event_id))
        LOGGER.info(
            "Aggregated %s ledger events for %s..%s", len(dated), window.from_date, window.to_date
        )
        return dated
