"""Mini README: Unified ledger event types.

Structure:
    * EventKind / EditableType / IncomeSource - enumerations shared with the
      presentation layer.
    * LedgerEvent - common shape (id, date, label, amount) every source maps to.
    * PaymentIncomeEvent, CustomIncomeEvent, FixedExpenseEvent,
      OneTimeFixedExpenseEvent, VariableCostEvent - one variant per origin,
      each carrying only the back-reference fields relevant to it.
    * EditTarget / edit_target - resolve the record an event was derived from.

``kind`` decides the sign during simulation: INCOME adds, FIXED and VARIABLE
subtract. Back-references are read-only; the engine never edits records.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Dict, Optional

from ..scheduling import DateKey
from .records import ExpenseStatus


class EventKind(str, Enum):
    INCOME = "INCOME"
    FIXED = "FIXED"
    VARIABLE = "VARIABLE"


class EditableType(str, Enum):
    """Record family an event routes back to when an operator edits it."""

    FIXED_EXPENSE = "FIXED_EXPENSE"
    FIXED_INCOME = "FIXED_INCOME"
    ONE_TIME_INCOME = "ONE_TIME_INCOME"
    VARIABLE_EXPENSE = "VARIABLE_EXPENSE"
    PAYMENT_INCOME = "PAYMENT_INCOME"


class IncomeSource(str, Enum):
    PAYMENT = "PAYMENT"
    CUSTOM = "CUSTOM"


@dataclass(frozen=True)
class EditTarget:
    editable_type: EditableType
    entity_id: str


@dataclass(frozen=True)
class LedgerEvent:
    """Dated amount merged from any source."""

    event_id: str
    date: DateKey
    label: str
    amount: float

    kind: ClassVar[EventKind] = EventKind.VARIABLE

    @property
    def is_income(self) -> bool:
        return self.kind is EventKind.INCOME

    @property
    def is_recurring(self) -> bool:
        return False

    @property
    def source(self) -> Optional[IncomeSource]:
        return None

    @property
    def editable_type(self) -> Optional[EditableType]:
        return None

    @property
    def entity_id(self) -> Optional[str]:
        return None

    @property
    def expense_status(self) -> Optional[ExpenseStatus]:
        return None

    def as_dict(self) -> Dict[str, object]:
        """Export the event with serialisable values."""

        payload: Dict[str, object] = {
            "id": self.event_id,
            "date": self.date,
            "kind": self.kind.value,
            "label": self.label,
            "amount": self.amount,
        }
        if self.source is not None:
            payload["source"] = self.source.value
        if self.editable_type is not None:
            payload["editableType"] = self.editable_type.value
            payload["entityId"] = self.entity_id
        if self.expense_status is not None:
            payload["expenseStatus"] = self.expense_status.value
        return payload


@dataclass(frozen=True)
class PaymentIncomeEvent(LedgerEvent):
    """Expected payment for a delivered or scheduled load."""

    load_id: str = ""

    kind: ClassVar[EventKind] = EventKind.INCOME

    @property
    def source(self) -> Optional[IncomeSource]:
        return IncomeSource.PAYMENT

    @property
    def editable_type(self) -> Optional[EditableType]:
        return EditableType.PAYMENT_INCOME

    @property
    def entity_id(self) -> Optional[str]:
        return self.load_id


@dataclass(frozen=True)
class CustomIncomeEvent(LedgerEvent):
    """Manually entered income: a recurring occurrence or a one-off entry."""

    income_id: str = ""
    recurring: bool = True

    kind: ClassVar[EventKind] = EventKind.INCOME

    @property
    def is_recurring(self) -> bool:
        return self.recurring

    @property
    def source(self) -> Optional[IncomeSource]:
        return IncomeSource.CUSTOM

    @property
    def editable_type(self) -> Optional[EditableType]:
        return EditableType.FIXED_INCOME if self.recurring else EditableType.ONE_TIME_INCOME

    @property
    def entity_id(self) -> Optional[str]:
        return self.income_id


@dataclass(frozen=True)
class FixedExpenseEvent(LedgerEvent):
    """Occurrence of a monthly fixed expense (leasing, insurance, ...)."""

    expense_id: str = ""

    kind: ClassVar[EventKind] = EventKind.FIXED

    @property
    def is_recurring(self) -> bool:
        return True

    @property
    def editable_type(self) -> Optional[EditableType]:
        return EditableType.FIXED_EXPENSE

    @property
    def entity_id(self) -> Optional[str]:
        return self.expense_id


@dataclass(frozen=True)
class OneTimeFixedExpenseEvent(LedgerEvent):
    """Fixed-category expense booked once; counted as a one-off cost."""

    expense_id: str = ""

    kind: ClassVar[EventKind] = EventKind.VARIABLE

    @property
    def editable_type(self) -> Optional[EditableType]:
        return EditableType.FIXED_EXPENSE

    @property
    def entity_id(self) -> Optional[str]:
        return self.expense_id


@dataclass(frozen=True)
class VariableCostEvent(LedgerEvent):
    """Variable expense or driver pay. Only expense rows are editable."""

    expense_id: Optional[str] = None
    status: Optional[ExpenseStatus] = None

    kind: ClassVar[EventKind] = EventKind.VARIABLE

    @property
    def editable_type(self) -> Optional[EditableType]:
        return EditableType.VARIABLE_EXPENSE if self.expense_id else None

    @property
    def entity_id(self) -> Optional[str]:
        return self.expense_id

    @property
    def expense_status(self) -> Optional[ExpenseStatus]:
        return self.status if self.expense_id else None


def edit_target(event: LedgerEvent) -> Optional[EditTarget]:
    """Return the record an operator edits when selecting ``event``."""

    editable_type = event.editable_type
    entity_id = event.entity_id
    if editable_type is None or not entity_id:
        return None
    return EditTarget(editable_type=editable_type, entity_id=entity_id)
