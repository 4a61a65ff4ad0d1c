"""Mini README: FastAPI-powered JSON API for the freight board finance view.

Structure:
    * Request models - pydantic bodies for projection and load payment calls.
    * FormKind - the input forms the board validates before saving.
    * create_application - application factory wiring routes to the engine.

The API is stateless: callers post a snapshot of their finance records with
each request and receive the computed projection. Engine errors are mapped
onto HTTP status codes here and nowhere else.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Dict, Optional

from fastapi import Body, FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..configuration import get_settings
from ..errors import DateRangeError, ValidationError
from ..finance import (
    CashFlowPlanner,
    FinanceSnapshot,
    FixedExpenseSortKey,
    IncomeTemplateSortKey,
    LoadPaymentFilter,
    SimulationView,
    SortDirection,
    SortKey,
    SortState,
    build_fixed_expense,
    build_load_payment_rows,
    build_one_time_income,
    build_posting_update,
    build_recurring_income,
    build_variable_expense,
)
from ..logging_utils import configure_root_logger, get_logger
from ..scheduling import Clock, DateRangePreset, SystemClock, default_range, range_for_preset

LOGGER = get_logger(__name__)


class ProjectionRequest(BaseModel):
    """Body of ``POST /cash-flow/projection``."""

    snapshot: Dict[str, Any] = Field(default_factory=dict, description="Raw finance records.")
    from_date: Optional[str] = Field(None, alias="from", description="Range start (YYYY-MM-DD).")
    to_date: Optional[str] = Field(None, alias="to", description="Range end (YYYY-MM-DD).")
    view: SimulationView = SimulationView.COMBINED
    sort_key: SortKey = SortKey.DATE
    sort_direction: Optional[SortDirection] = None
    opening_balance: float = 0.0
    fixed_expense_sort: FixedExpenseSortKey = FixedExpenseSortKey.DUE_DAY
    fixed_expense_direction: SortDirection = SortDirection.ASC
    income_sort: IncomeTemplateSortKey = IncomeTemplateSortKey.DUE_DAY
    income_direction: SortDirection = SortDirection.ASC


class LoadPaymentsRequest(BaseModel):
    """Body of ``POST /load-payments``."""

    snapshot: Dict[str, Any] = Field(default_factory=dict)
    filter: LoadPaymentFilter = LoadPaymentFilter.COMPLETED


class FormKind(str, Enum):
    FIXED_EXPENSE = "fixed-expense"
    VARIABLE_EXPENSE = "variable-expense"
    RECURRING_INCOME = "recurring-income"
    ONE_TIME_INCOME = "one-time-income"
    POSTING = "posting"


def _form_builders(clock: Clock) -> Dict[FormKind, Callable[[Dict[str, Any]], Dict[str, Any]]]:
    return {
        FormKind.FIXED_EXPENSE: lambda data: build_fixed_expense(
            category=data.get("category"),
            amount=data.get("amount"),
            due_day=data.get("dueDay"),
            clock=clock,
            input_currency=data.get("inputCurrency") or "EUR",
            stop_date=data.get("stopDate"),
            label=data.get("label"),
            anchor_reference=data.get("anchorReference"),
        ),
        FormKind.VARIABLE_EXPENSE: lambda data: build_variable_expense(
            category=data.get("category"),
            amount=data.get("amount"),
            expense_date=data.get("expenseDate"),
            status=data.get("status") or "PENDING",
            label=data.get("label"),
        ),
        FormKind.RECURRING_INCOME: lambda data: build_recurring_income(
            description=data.get("description"),
            amount=data.get("amount"),
            due_day=data.get("dueDay"),
            clock=clock,
            input_currency=data.get("inputCurrency") or "EUR",
            stop_date=data.get("stopDate"),
            notes=data.get("notes"),
            anchor_reference=data.get("anchorReference"),
        ),
        FormKind.ONE_TIME_INCOME: lambda data: build_one_time_income(
            description=data.get("description"),
            amount=data.get("amount"),
            income_date=data.get("incomeDate"),
            input_currency=data.get("inputCurrency") or "EUR",
            notes=data.get("notes"),
        ),
        FormKind.POSTING: lambda data: build_posting_update(final_amount=data.get("finalAmount")),
    }


def create_application(clock: Optional[Clock] = None) -> FastAPI:
    """Create the FastAPI application with routes and dependencies."""

    settings = get_settings()
    configure_root_logger(settings.log_level)
    app = FastAPI(title="Freightboard Finance", version="0.1.0")
    clock = clock or SystemClock(settings.business_timezone)
    planner = CashFlowPlanner(clock)
    builders = _form_builders(clock)

    @app.get("/health")
    async def health() -> JSONResponse:
        return JSONResponse(
            {"status": "ok", "environment": settings.environment, "today": clock.today()}
        )

    @app.get("/date-ranges")
    async def date_ranges() -> JSONResponse:
        """Return the default window and every named preset."""

        presets = {preset.value: range_for_preset(preset, clock).as_dict() for preset in DateRangePreset}
        return JSONResponse({"default": default_range(clock).as_dict(), "presets": presets})

    @app.get("/date-ranges/{preset}")
    async def date_range(preset: str) -> JSONResponse:
        try:
            selected = DateRangePreset.from_str(preset)
        except ValueError as error:
            raise HTTPException(status_code=404, detail=str(error)) from error
        return JSONResponse(range_for_preset(selected, clock).as_dict())

    @app.post("/cash-flow/projection")
    async def cash_flow_projection(request: ProjectionRequest) -> JSONResponse:
        """Aggregate, filter, sort and simulate the posted snapshot."""

        snapshot = FinanceSnapshot.from_dict(request.snapshot)
        try:
            window = planner.resolve_window(request.from_date, request.to_date)
        except DateRangeError as error:
            raise HTTPException(status_code=400, detail=str(error)) from error
        sort_state = SortState(
            key=request.sort_key,
            direction=request.sort_direction or request.sort_key.default_direction,
        )
        projection = planner.project(
            snapshot,
            window,
            view=request.view,
            sort_state=sort_state,
            opening_balance=request.opening_balance,
            fixed_sort=(request.fixed_expense_sort, request.fixed_expense_direction),
            income_sort=(request.income_sort, request.income_direction),
        )
        return JSONResponse(projection.as_dict())

    @app.post("/cash-flow/validate/{form}")
    async def validate_form(form: FormKind, data: Dict[str, Any] = Body(...)) -> JSONResponse:
        """Validate one board form and return the record payload it would save."""

        try:
            payload = builders[form](data)
        except ValidationError as error:
            LOGGER.info("Rejected %s form: %s", form.value, error.message)
            raise HTTPException(status_code=422, detail=error.message) from error
        return JSONResponse({"form": form.value, "payload": payload})

    @app.post("/load-payments")
    async def load_payments(request: LoadPaymentsRequest) -> JSONResponse:
        snapshot = FinanceSnapshot.from_dict(request.snapshot)
        rows = build_load_payment_rows(snapshot.loads, snapshot.payments, request.filter)
        LOGGER.debug("Returning %s load payment rows for %s", len(rows), request.filter.value)
        return JSONResponse({"filter": request.filter.value, "rows": [row.as_dict() for row in rows]})

    return app
