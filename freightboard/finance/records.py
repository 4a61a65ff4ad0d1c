"""Mini README: Read-only snapshots of the records the finance engine consumes.

Structure:
    * Enumerations for expense, payment, driver-pay and load states.
    * ExpenseRecord, PaymentRecord, DriverPayRecord, CustomIncomeRecord and
      LoadRecord - immutable views of the API client's payloads.
    * FinanceSnapshot - one consistent bundle of all five record lists.

Records are built from API payloads through ``from_dict`` which accepts
camelCase or snake_case keys. Loose values are coerced the same way the
board does: numbers that cannot be read become ``0.0`` and unknown enum
values fall back to a neutral default. A payload missing its identifier is
rejected, and ``FinanceSnapshot.from_dict`` skips such payloads with a
warning instead of failing the whole snapshot.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple, Type, TypeVar

from ..logging_utils import get_logger

LOGGER = get_logger(__name__)

E = TypeVar("E", bound=Enum)
R = TypeVar("R")


class ExpenseType(str, Enum):
    FIXED = "FIXED"
    VARIABLE = "VARIABLE"


class ExpenseCategory(str, Enum):
    FUEL = "FUEL"
    TOLL = "TOLL"
    MAINTENANCE = "MAINTENANCE"
    INSURANCE = "INSURANCE"
    LEASING = "LEASING"
    BANK_LOAN = "BANK_LOAN"
    PERMITS = "PERMITS"
    OFFICE = "OFFICE"
    SOFTWARE = "SOFTWARE"
    SALARY = "SALARY"
    OTHER = "OTHER"


class ExpenseStatus(str, Enum):
    PENDING = "PENDING"
    POSTED = "POSTED"


class ExpenseRecurrence(str, Enum):
    ONE_TIME = "ONE_TIME"
    MONTHLY = "MONTHLY"


class PaymentStatus(str, Enum):
    PENDING = "PENDING"
    INVOICED = "INVOICED"
    PAID = "PAID"
    OVERDUE = "OVERDUE"
    DISPUTED = "DISPUTED"
    WRITTEN_OFF = "WRITTEN_OFF"


class DriverPayStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    PAID = "PAID"


class LoadStatus(str, Enum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    NEGOTIATING = "NEGOTIATING"
    TAKEN = "TAKEN"
    ON_BOARD = "ON_BOARD"
    IN_TRANSIT = "IN_TRANSIT"
    DELIVERED = "DELIVERED"
    CANCELED = "CANCELED"
    NOT_INTERESTED = "NOT_INTERESTED"


def to_number(value: Any) -> float:
    """Coerce loose numeric input, returning ``0.0`` for anything unreadable."""

    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def _coerce_enum(enum_cls: Type[E], value: Any, default: Optional[E]) -> Optional[E]:
    if value is None:
        return default
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().upper())
    except ValueError:
        LOGGER.debug("Unknown %s value %r, using %s", enum_cls.__name__, value, default)
        return default


def _pick(payload: Mapping[str, Any], *keys: str) -> Any:
    """Return the first present key, so camelCase and snake_case both work."""

    for key in keys:
        if key in payload and payload[key] is not None:
            return payload[key]
    return None


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _require_id(payload: Mapping[str, Any], *keys: str) -> str:
    identifier = _optional_str(_pick(payload, *keys))
    if not identifier:
        raise ValueError(f"Record is missing its identifier ({'/'.join(keys)}).")
    return identifier


def _optional_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return int(math.trunc(number))


@dataclass(frozen=True)
class ExpenseRecord:
    """Fixed or variable expense as stored by the expense API."""

    expense_id: str
    category: str
    expense_type: ExpenseType
    amount: float
    expense_date: Optional[str]
    total_with_vat: Optional[float] = None
    recurrence_type: Optional[ExpenseRecurrence] = None
    is_recurring: bool = False
    stop_date: Optional[str] = None
    status: Optional[ExpenseStatus] = None
    description: Optional[str] = None
    recurring_label: Optional[str] = None
    reference_number: Optional[str] = None

    @property
    def effective_amount(self) -> float:
        """VAT-inclusive total when known, otherwise the net amount."""

        if self.total_with_vat is not None:
            return to_number(self.total_with_vat)
        return to_number(self.amount)

    @property
    def is_recurring_template(self) -> bool:
        return self.recurrence_type is ExpenseRecurrence.MONTHLY or self.is_recurring

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "ExpenseRecord":
        total = _pick(payload, "totalWithVat", "total_with_vat")
        category = _pick(payload, "category") or ExpenseCategory.OTHER.value
        return cls(
            expense_id=_require_id(payload, "id", "expense_id"),
            category=str(getattr(category, "value", category)),
            expense_type=_coerce_enum(
                ExpenseType, _pick(payload, "expenseType", "expense_type"), ExpenseType.VARIABLE
            ),
            amount=to_number(_pick(payload, "amount")),
            total_with_vat=None if total is None else to_number(total),
            expense_date=_optional_str(_pick(payload, "expenseDate", "expense_date")),
            recurrence_type=_coerce_enum(
                ExpenseRecurrence, _pick(payload, "recurrenceType", "recurrence_type"), None
            ),
            is_recurring=bool(_pick(payload, "isRecurring", "is_recurring") or False),
            stop_date=_optional_str(_pick(payload, "stopDate", "stop_date")),
            status=_coerce_enum(ExpenseStatus, _pick(payload, "status"), None),
            description=_optional_str(_pick(payload, "description")),
            recurring_label=_optional_str(_pick(payload, "recurringLabel", "recurring_label")),
            reference_number=_optional_str(_pick(payload, "referenceNumber", "reference_number")),
        )


@dataclass(frozen=True)
class PaymentRecord:
    """Payment expected (or received) for a single load."""

    payment_id: str
    load_id: str
    amount: float
    status: Optional[PaymentStatus] = None
    total_with_vat: Optional[float] = None
    due_date: Optional[str] = None
    issue_date: Optional[str] = None
    created_at: Optional[str] = None
    load_reference: Optional[str] = None

    @property
    def effective_amount(self) -> float:
        if self.total_with_vat is not None:
            return to_number(self.total_with_vat)
        return to_number(self.amount)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "PaymentRecord":
        total = _pick(payload, "totalWithVat", "total_with_vat")
        embedded_load = _pick(payload, "load")
        load_reference = None
        if isinstance(embedded_load, Mapping):
            load_reference = _optional_str(_pick(embedded_load, "referenceNumber", "reference_number"))
        return cls(
            payment_id=_require_id(payload, "id", "payment_id"),
            load_id=_require_id(payload, "loadId", "load_id"),
            amount=to_number(_pick(payload, "amount")),
            status=_coerce_enum(PaymentStatus, _pick(payload, "status"), None),
            total_with_vat=None if total is None else to_number(total),
            due_date=_optional_str(_pick(payload, "dueDate", "due_date")),
            issue_date=_optional_str(_pick(payload, "issueDate", "issue_date")),
            created_at=_optional_str(_pick(payload, "createdAt", "created_at")),
            load_reference=load_reference,
        )


@dataclass(frozen=True)
class DriverPayRecord:
    """Monthly pay owed to a driver."""

    record_id: str
    driver_id: str
    year: int
    month: int
    total_pay: float
    status: Optional[DriverPayStatus] = None
    paid_date: Optional[str] = None
    driver_name: Optional[str] = None

    @property
    def label(self) -> str:
        if self.driver_name:
            return self.driver_name
        return f"Driver {self.driver_id[:8]}"

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "DriverPayRecord":
        driver = _pick(payload, "driver")
        driver_name = None
        if isinstance(driver, Mapping):
            first = _optional_str(_pick(driver, "firstName", "first_name")) or ""
            last = _optional_str(_pick(driver, "lastName", "last_name")) or ""
            driver_name = f"{first} {last}".strip() or None
        driver_name = driver_name or _optional_str(_pick(payload, "driverName", "driver_name"))
        return cls(
            record_id=_require_id(payload, "id", "record_id"),
            driver_id=_require_id(payload, "driverId", "driver_id"),
            year=int(to_number(_pick(payload, "year"))),
            month=int(to_number(_pick(payload, "month"))),
            total_pay=to_number(_pick(payload, "totalPay", "total_pay")),
            status=_coerce_enum(DriverPayStatus, _pick(payload, "status"), None),
            paid_date=_optional_str(_pick(payload, "paidDate", "paid_date")),
            driver_name=driver_name,
        )


@dataclass(frozen=True)
class CustomIncomeRecord:
    """Manually entered income, either a monthly template or a one-off entry."""

    income_id: str
    description: str
    amount: float
    income_date: Optional[str]
    is_one_time: bool = False
    due_day: Optional[int] = None
    stop_date: Optional[str] = None
    notes: Optional[str] = None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "CustomIncomeRecord":
        return cls(
            income_id=_require_id(payload, "id", "income_id"),
            description=_optional_str(_pick(payload, "description")) or "",
            amount=to_number(_pick(payload, "amount")),
            income_date=_optional_str(_pick(payload, "incomeDate", "income_date")),
            is_one_time=bool(_pick(payload, "isOneTime", "is_one_time") or False),
            due_day=_optional_int(_pick(payload, "dueDay", "due_day")),
            stop_date=_optional_str(_pick(payload, "stopDate", "stop_date")),
            notes=_optional_str(_pick(payload, "notes")),
        )


@dataclass(frozen=True)
class LoadRecord:
    """The slice of a load the finance views need."""

    load_id: str
    reference_number: Optional[str] = None
    status: Optional[LoadStatus] = None
    is_inactive: bool = False
    agreed_price: Optional[float] = None
    published_price: Optional[float] = None
    delivery_date_from: Optional[str] = None
    delivery_date_to: Optional[str] = None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "LoadRecord":
        agreed = _pick(payload, "agreedPrice", "agreed_price")
        published = _pick(payload, "publishedPrice", "published_price")
        return cls(
            load_id=_require_id(payload, "id", "load_id"),
            reference_number=_optional_str(_pick(payload, "referenceNumber", "reference_number")),
            status=_coerce_enum(LoadStatus, _pick(payload, "status"), None),
            is_inactive=bool(_pick(payload, "isInactive", "is_inactive") or False),
            agreed_price=None if agreed is None else to_number(agreed),
            published_price=None if published is None else to_number(published),
            delivery_date_from=_optional_str(_pick(payload, "deliveryDateFrom", "delivery_date_from")),
            delivery_date_to=_optional_str(_pick(payload, "deliveryDateTo", "delivery_date_to")),
        )


def _parse_many(
    payloads: Iterable[Mapping[str, Any]], factory: Callable[[Mapping[str, Any]], R], kind: str
) -> Tuple[R, ...]:
    if payloads is None:
        return ()
    if not isinstance(payloads, (list, tuple)):
        LOGGER.warning("Skipping %s payloads that are not a list: %r", kind, payloads)
        return ()
    parsed: List[R] = []
    for payload in payloads:
        if not isinstance(payload, Mapping):
            LOGGER.warning("Skipping %s payload that is not an object: %r", kind, payload)
            continue
        try:
            parsed.append(factory(payload))
        except ValueError as error:
            LOGGER.warning("Skipping malformed %s payload: %s", kind, error)
    return tuple(parsed)


@dataclass(frozen=True)
class FinanceSnapshot:
    """Materialised, in-memory copy of every record source at one moment."""

    expenses: Tuple[ExpenseRecord, ...] = field(default_factory=tuple)
    payments: Tuple[PaymentRecord, ...] = field(default_factory=tuple)
    driver_pay: Tuple[DriverPayRecord, ...] = field(default_factory=tuple)
    custom_incomes: Tuple[CustomIncomeRecord, ...] = field(default_factory=tuple)
    loads: Tuple[LoadRecord, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return not (self.expenses or self.payments or self.driver_pay or self.custom_incomes)

    def loads_by_id(self) -> Dict[str, LoadRecord]:
        return {load.load_id: load for load in self.loads}

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "FinanceSnapshot":
        """Build a snapshot from API-shaped lists, skipping malformed entries."""

        snapshot = cls(
            expenses=_parse_many(payload.get("expenses", ()), ExpenseRecord.from_dict, "expense"),
            payments=_parse_many(payload.get("payments", ()), PaymentRecord.from_dict, "payment"),
            driver_pay=_parse_many(
                _pick(payload, "driverPay", "driver_pay") or (), DriverPayRecord.from_dict, "driver pay"
            ),
            custom_incomes=_parse_many(
                _pick(payload, "customIncomes", "custom_incomes") or (),
                CustomIncomeRecord.from_dict,
                "custom income",
            ),
            loads=_parse_many(payload.get("loads", ()), LoadRecord.from_dict, "load"),
        )
        LOGGER.debug(
            "Snapshot parsed: %s expenses, %s payments, %s driver pay, %s custom incomes, %s loads",
            len(snapshot.expenses),
            len(snapshot.payments),
            len(snapshot.driver_pay),
            len(snapshot.custom_incomes),
            len(snapshot.loads),
        )
        return snapshot
