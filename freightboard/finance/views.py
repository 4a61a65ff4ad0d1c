"""Mini README: Filtering and ordering of ledger events and template tables.

Structure:
    * SimulationView / filter_events - combined, one-time cost or income views.
    * SortKey / SortDirection / SortState - column sorting with toggle rules.
    * ledger_type_key / sort_events / apply_view - ordered event lists.
    * sort_fixed_expense_templates / sort_income_templates - ordering for the
      recurring expense and recurring income tables.

Every ordering ends in a ``(date, event_id)`` tie-break so equal keys never
produce an unstable result. Filtering always happens before sorting.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterable, List, Sequence, Tuple, TypeVar

from ..scheduling import Clock, due_day_from_date, to_date_only
from .events import EventKind, LedgerEvent
from .records import CustomIncomeRecord, ExpenseCategory, ExpenseRecord
from .recurrence import income_due_day

T = TypeVar("T")


class SimulationView(str, Enum):
    COMBINED = "COMBINED"
    VARIABLE_ONLY = "VARIABLE_ONLY"
    UPCOMING_INCOME_ONLY = "UPCOMING_INCOME_ONLY"


class SortKey(str, Enum):
    DATE = "DATE"
    TYPE = "TYPE"
    LABEL = "LABEL"
    AMOUNT = "AMOUNT"

    @property
    def default_direction(self) -> "SortDirection":
        return SortDirection.DESC if self is SortKey.AMOUNT else SortDirection.ASC


class SortDirection(str, Enum):
    ASC = "ASC"
    DESC = "DESC"

    def flipped(self) -> "SortDirection":
        return SortDirection.DESC if self is SortDirection.ASC else SortDirection.ASC


@dataclass(frozen=True)
class SortState:
    """Active sort column and direction of the simulation table."""

    key: SortKey = SortKey.DATE
    direction: SortDirection = SortDirection.ASC

    def toggle(self, key: SortKey) -> "SortState":
        """Re-selecting the active key flips direction; a new key starts at its default."""

        if key is self.key:
            return SortState(key=key, direction=self.direction.flipped())
        return SortState(key=key, direction=key.default_direction)


def filter_events(events: Iterable[LedgerEvent], view: SimulationView) -> List[LedgerEvent]:
    if view is SimulationView.VARIABLE_ONLY:
        return [event for event in events if event.kind is EventKind.VARIABLE]
    if view is SimulationView.UPCOMING_INCOME_ONLY:
        return [event for event in events if event.kind is EventKind.INCOME]
    return list(events)


def ledger_type_key(event: LedgerEvent) -> str:
    """Two-level category used by the TYPE column, e.g. ``EXPENSE_RECURRING``."""

    if event.kind is EventKind.FIXED:
        return "EXPENSE_RECURRING"
    if event.kind is EventKind.VARIABLE:
        return "EXPENSE_ONE-TIME"
    return "INCOME_RECURRING" if event.is_recurring else "INCOME_ONE-TIME"


def _label_key(event: LedgerEvent) -> Tuple[str, str]:
    return (event.label.casefold(), event.label)


_PRIMARY_KEYS: Dict[SortKey, Callable[[LedgerEvent], object]] = {
    SortKey.TYPE: ledger_type_key,
    SortKey.LABEL: _label_key,
    SortKey.AMOUNT: lambda event: event.amount,
}


def sort_events(
    events: Iterable[LedgerEvent],
    key: SortKey = SortKey.DATE,
    direction: SortDirection = SortDirection.ASC,
) -> List[LedgerEvent]:
    """Order events by ``key`` with a ``(date, event_id)`` tie-break.

    The direction applies to the whole comparison, tie-break included, so a
    descending sort is the exact reverse of the ascending one.
    """

    primary = _PRIMARY_KEYS.get(key)
    if primary is None:
        sort_key = lambda event: (event.date, event.event_id)  # noqa: E731
    else:
        sort_key = lambda event: (primary(event), event.date, event.event_id)  # noqa: E731
    return sorted(events, key=sort_key, reverse=direction is SortDirection.DESC)


def apply_view(
    events: Iterable[LedgerEvent], view: SimulationView, sort_state: SortState
) -> List[LedgerEvent]:
    return sort_events(filter_events(events, view), sort_state.key, sort_state.direction)


EXPENSE_CATEGORY_LABELS: Dict[str, str] = {
    ExpenseCategory.LEASING.value: "Leasing",
    ExpenseCategory.BANK_LOAN.value: "Bank Loan",
    ExpenseCategory.INSURANCE.value: "Insurance",
    ExpenseCategory.PERMITS.value: "Permits",
    ExpenseCategory.OFFICE.value: "Office",
    ExpenseCategory.SOFTWARE.value: "Software",
    ExpenseCategory.SALARY.value: "Salary Tax",
    ExpenseCategory.OTHER.value: "Other",
}


def expense_category_label(category: str) -> str:
    return EXPENSE_CATEGORY_LABELS.get(category, category)


class FixedExpenseSortKey(str, Enum):
    DUE_DAY = "DUE_DAY"
    CATEGORY = "CATEGORY"
    AMOUNT = "AMOUNT"


class IncomeTemplateSortKey(str, Enum):
    DUE_DAY = "DUE_DAY"
    DESCRIPTION = "DESCRIPTION"
    AMOUNT = "AMOUNT"


def _sort_with_tiebreak(
    items: Sequence[T],
    primary: Callable[[T], object],
    start_date: Callable[[T], str],
    identifier: Callable[[T], str],
    direction: SortDirection,
) -> List[T]:
    # Stable passes: id ascending, then start date newest first, then the column.
    ordered = sorted(items, key=identifier)
    ordered.sort(key=start_date, reverse=True)
    ordered.sort(key=primary, reverse=direction is SortDirection.DESC)
    return ordered


def sort_fixed_expense_templates(
    expenses: Sequence[ExpenseRecord],
    key: FixedExpenseSortKey,
    direction: SortDirection,
    clock: Clock,
) -> List[ExpenseRecord]:
    """Order the recurring fixed-expense table."""

    primaries: Dict[FixedExpenseSortKey, Callable[[ExpenseRecord], object]] = {
        FixedExpenseSortKey.DUE_DAY: lambda expense: due_day_from_date(expense.expense_date, clock),
        FixedExpenseSortKey.CATEGORY: lambda expense: expense_category_label(expense.category).casefold(),
        FixedExpenseSortKey.AMOUNT: lambda expense: expense.effective_amount,
    }
    return _sort_with_tiebreak(
        expenses,
        primaries[key],
        lambda expense: to_date_only(expense.expense_date),
        lambda expense: expense.expense_id,
        direction,
    )


def sort_income_templates(
    incomes: Sequence[CustomIncomeRecord],
    key: IncomeTemplateSortKey,
    direction: SortDirection,
    clock: Clock,
) -> List[CustomIncomeRecord]:
    """Order the recurring income table."""

    primaries: Dict[IncomeTemplateSortKey, Callable[[CustomIncomeRecord], object]] = {
        IncomeTemplateSortKey.DUE_DAY: lambda income: income_due_day(income, clock),
        IncomeTemplateSortKey.DESCRIPTION: lambda income: income.description.casefold(),
        IncomeTemplateSortKey.AMOUNT: lambda income: income.amount,
    }
    return _sort_with_tiebreak(
        incomes,
        primaries[key],
        lambda income: to_date_only(income.income_date),
        lambda income: income.income_id,
        direction,
    )
