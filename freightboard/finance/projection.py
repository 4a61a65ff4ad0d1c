"""Mini README: One-call cash-flow projection for the finance board.

Structure:
    * CashFlowProjection - everything the board renders for one query.
    * CashFlowPlanner - wires aggregation, views and simulation together.

The planner runs the pipeline in one direction: records are expanded and
merged into ledger events, the active view filters and sorts them, and the
balance simulator folds the visible rows. Template tables and the variable
cost table are computed alongside from the same snapshot and window.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ..logging_utils import get_logger
from ..scheduling import Clock, DateRange, SystemClock, default_range, due_day_from_date, to_date_only
from .aggregator import LedgerAggregator, VariableCostRow
from .events import LedgerEvent
from .records import CustomIncomeRecord, ExpenseRecord, ExpenseType, FinanceSnapshot
from .recurrence import (
    expense_label,
    income_due_day,
    templates_from_custom_income,
    templates_from_expenses,
)
from .simulation import SimulationResult, SimulationRow, round2, simulate_balance
from .views import (
    FixedExpenseSortKey,
    IncomeTemplateSortKey,
    SimulationView,
    SortDirection,
    SortState,
    apply_view,
    expense_category_label,
    sort_fixed_expense_templates,
    sort_income_templates,
)

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class CashFlowProjection:
    """Result of ``CashFlowPlanner.project`` for one window and view."""

    window: DateRange
    view: SimulationView
    sort_state: SortState
    events: Tuple[LedgerEvent, ...]
    simulation: SimulationResult
    clock: Clock
    fixed_expense_templates: Tuple[ExpenseRecord, ...] = field(default_factory=tuple)
    income_templates: Tuple[CustomIncomeRecord, ...] = field(default_factory=tuple)
    variable_cost_rows: Tuple[VariableCostRow, ...] = field(default_factory=tuple)
    fixed_expenses_total: float = 0.0
    fixed_income_monthly_total: float = 0.0

    @property
    def rows(self) -> Tuple[SimulationRow, ...]:
        return self.simulation.rows

    def _expense_template_dict(self, expense: ExpenseRecord) -> Dict[str, object]:
        return {
            "id": expense.expense_id,
            "category": expense.category,
            "categoryLabel": expense_category_label(expense.category),
            "label": expense_label(expense),
            "dueDay": due_day_from_date(expense.expense_date, self.clock),
            "amount": expense.effective_amount,
            "startDate": to_date_only(expense.expense_date) or None,
            "stopDate": to_date_only(expense.stop_date) or None,
        }

    def _income_template_dict(self, income: CustomIncomeRecord) -> Dict[str, object]:
        return {
            "id": income.income_id,
            "description": income.description,
            "dueDay": income_due_day(income, self.clock),
            "amount": income.amount,
            "startDate": to_date_only(income.income_date) or None,
            "stopDate": to_date_only(income.stop_date) or None,
            "notes": income.notes,
        }

    def as_dict(self) -> Dict[str, object]:
        payload: Dict[str, object] = {
            "range": self.window.as_dict(),
            "view": self.view.value,
            "sort": {"key": self.sort_state.key.value, "direction": self.sort_state.direction.value},
            "fixedExpenses": [self._expense_template_dict(item) for item in self.fixed_expense_templates],
            "fixedExpensesTotal": self.fixed_expenses_total,
            "incomeTemplates": [self._income_template_dict(item) for item in self.income_templates],
            "fixedIncomeMonthlyTotal": self.fixed_income_monthly_total,
            "variableCosts": [row.as_dict() for row in self.variable_cost_rows],
        }
        payload.update(self.simulation.as_dict())
        return payload


class CashFlowPlanner:
    """Facade the web layer and CLI use to build projections."""

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self.clock = clock or SystemClock()

    def resolve_window(self, from_date: Optional[str] = None, to_date: Optional[str] = None) -> DateRange:
        """Explicit bounds when given; missing bounds come from the default range."""

        fallback = default_range(self.clock)
        return DateRange.validated(from_date or fallback.from_date, to_date or fallback.to_date)

    def fixed_expense_templates(
        self,
        snapshot: FinanceSnapshot,
        window: DateRange,
        key: FixedExpenseSortKey = FixedExpenseSortKey.DUE_DAY,
        direction: SortDirection = SortDirection.ASC,
    ) -> List[ExpenseRecord]:
        """Recurring fixed expenses whose active period touches ``window``."""

        active = {
            template.template_id
            for template in templates_from_expenses(snapshot.expenses, self.clock)
            if template.overlaps(window)
        }
        selected = [
            expense
            for expense in snapshot.expenses
            if expense.expense_type is ExpenseType.FIXED and expense.expense_id in active
        ]
        return sort_fixed_expense_templates(selected, key, direction, self.clock)

    def income_templates(
        self,
        snapshot: FinanceSnapshot,
        window: DateRange,
        key: IncomeTemplateSortKey = IncomeTemplateSortKey.DUE_DAY,
        direction: SortDirection = SortDirection.ASC,
    ) -> List[CustomIncomeRecord]:
        """Recurring custom incomes whose active period touches ``window``."""

        active = {
            template.template_id
            for template in templates_from_custom_income(snapshot.custom_incomes, self.clock)
            if template.overlaps(window)
        }
        selected = [income for income in snapshot.custom_incomes if income.income_id in active]
        return sort_income_templates(selected, key, direction, self.clock)

    def project(
        self,
        snapshot: FinanceSnapshot,
        window: Optional[DateRange] = None,
        *,
        view: SimulationView = SimulationView.COMBINED,
        sort_state: Optional[SortState] = None,
        opening_balance: float = 0.0,
        fixed_sort: Tuple[FixedExpenseSortKey, SortDirection] = (
            FixedExpenseSortKey.DUE_DAY,
            SortDirection.ASC,
        ),
        income_sort: Tuple[IncomeTemplateSortKey, SortDirection] = (
            IncomeTemplateSortKey.DUE_DAY,
            SortDirection.ASC,
        ),
    ) -> CashFlowProjection:
        """Run the full pipeline for ``snapshot`` inside ``window``."""

        if window is None:
            window = default_range(self.clock)
        else:
            window = DateRange.validated(window.from_date, window.to_date)
        sort_state = sort_state or SortState()

        aggregator = LedgerAggregator(window, self.clock)
        events = aggregator.aggregate(snapshot)
        visible = apply_view(events, view, sort_state)
        simulation = simulate_balance(opening_balance, visible)

        fixed_templates = self.fixed_expense_templates(snapshot, window, *fixed_sort)
        incomes = self.income_templates(snapshot, window, *income_sort)
        projection = CashFlowProjection(
            window=window,
            view=view,
            sort_state=sort_state,
            events=tuple(visible),
            simulation=simulation,
            fixed_expense_templates=tuple(fixed_templates),
            income_templates=tuple(incomes),
            variable_cost_rows=tuple(aggregator.variable_cost_rows(snapshot.expenses, snapshot.driver_pay)),
            fixed_expenses_total=round2(sum(item.effective_amount for item in fixed_templates)),
            fixed_income_monthly_total=round2(sum(item.amount for item in incomes)),
            clock=self.clock,
        )
        LOGGER.info(
            "Projection %s..%s view=%s: %s rows, projected balance %.2f",
            window.from_date,
            window.to_date,
            view.value,
            len(visible),
            simulation.projected_balance,
        )
        return projection
