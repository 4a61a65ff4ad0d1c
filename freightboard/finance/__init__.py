"""Mini README: Cash-flow ledger engine for the dispatch board.

The package turns raw finance records (expenses, load payments, driver pay,
custom income and loads) into a dated ledger and a running-balance
projection. Modules are layered leaves first: ``records`` and
``recurrence`` feed ``aggregator``; ``views`` orders the merged events and
``simulation`` folds them. ``projection.CashFlowPlanner`` wires the whole
pipeline, while ``forms``, ``currency`` and ``load_payments`` support the
board's input forms and payment table.
"""

from .aggregator import CostRowSource, LedgerAggregator, VariableCostRow
from .currency import InputCurrency, convert
from .events import (
    CustomIncomeEvent,
    EditableType,
    EditTarget,
    EventKind,
    FixedExpenseEvent,
    IncomeSource,
    LedgerEvent,
    OneTimeFixedExpenseEvent,
    PaymentIncomeEvent,
    VariableCostEvent,
    edit_target,
)
from .forms import (
    build_fixed_expense,
    build_one_time_income,
    build_posting_update,
    build_recurring_income,
    build_variable_expense,
)
from .load_payments import LoadPaymentFilter, LoadPaymentRow, build_load_payment_rows
from .projection import CashFlowPlanner, CashFlowProjection
from .records import (
    CustomIncomeRecord,
    DriverPayRecord,
    ExpenseRecord,
    FinanceSnapshot,
    LoadRecord,
    PaymentRecord,
)
from .recurrence import Occurrence, RecurringTemplate, TemplateSource, expand_templates
from .simulation import SimulationResult, SimulationRow, round2, simulate_balance
from .views import (
    FixedExpenseSortKey,
    IncomeTemplateSortKey,
    SimulationView,
    SortDirection,
    SortKey,
    SortState,
    apply_view,
    filter_events,
    sort_events,
)

__all__ = [
    "CashFlowPlanner",
    "CashFlowProjection",
    "CostRowSource",
    "CustomIncomeEvent",
    "CustomIncomeRecord",
    "DriverPayRecord",
    "EditTarget",
    "EditableType",
    "EventKind",
    "ExpenseRecord",
    "FinanceSnapshot",
    "FixedExpenseEvent",
    "FixedExpenseSortKey",
    "IncomeSource",
    "IncomeTemplateSortKey",
    "InputCurrency",
    "LedgerAggregator",
    "LedgerEvent",
    "LoadPaymentFilter",
    "LoadPaymentRow",
    "LoadRecord",
    "Occurrence",
    "OneTimeFixedExpenseEvent",
    "PaymentIncomeEvent",
    "PaymentRecord",
    "RecurringTemplate",
    "SimulationResult",
    "SimulationRow",
    "SimulationView",
    "SortDirection",
    "SortKey",
    "SortState",
    "TemplateSource",
    "VariableCostEvent",
    "VariableCostRow",
    "apply_view",
    "build_fixed_expense",
    "build_load_payment_rows",
    "build_one_time_income",
    "build_posting_update",
    "build_recurring_income",
    "build_variable_expense",
    "convert",
    "edit_target",
    "expand_templates",
    "filter_events",
    "round2",
    "simulate_balance",
    "sort_events",
]
