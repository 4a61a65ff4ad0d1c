"""Mini README: Load payment board rows.

Structure:
    * LoadPaymentFilter - quick filters above the payment board.
    * LoadPaymentRow - a load with its latest payment and expected amount.
    * latest_payment_by_load / build_load_payment_rows - row construction.

The board lists active loads, newest delivery first, with the most recent
payment record per load. It shares the date normalisation of the ledger but
is independent from the cash-flow simulation.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional

from ..logging_utils import get_logger
from ..scheduling import DateKey, to_date_only
from .records import LoadRecord, LoadStatus, PaymentRecord, PaymentStatus, to_number

LOGGER = get_logger(__name__)

TAKEN_LIKE_STATUSES = frozenset({LoadStatus.TAKEN, LoadStatus.ON_BOARD, LoadStatus.IN_TRANSIT})
SCHEDULED_PAYMENT_STATUSES = frozenset(
    {PaymentStatus.PENDING, PaymentStatus.INVOICED, PaymentStatus.OVERDUE, PaymentStatus.DISPUTED}
)


class LoadPaymentFilter(str, Enum):
    ALL = "ALL"
    TAKEN = "TAKEN"
    COMPLETED = "COMPLETED"
    PAID = "PAID"
    PAYMENT_SCHEDULED = "PAYMENT_SCHEDULED"


@dataclass(frozen=True)
class LoadPaymentRow:
    load: LoadRecord
    payment: Optional[PaymentRecord]
    expected_amount: float
    payment_date: DateKey

    @property
    def status_label(self) -> str:
        if self.load.status is None:
            return ""
        if self.load.status is LoadStatus.DELIVERED:
            return "COMPLETED"
        return self.load.status.value.replace("_", " ")

    def as_dict(self) -> Dict[str, object]:
        return {
            "loadId": self.load.load_id,
            "referenceNumber": self.load.reference_number,
            "loadStatus": self.status_label,
            "paymentId": self.payment.payment_id if self.payment else None,
            "paymentStatus": self.payment.status.value if self.payment and self.payment.status else None,
            "expectedAmount": self.expected_amount,
            "paymentDate": self.payment_date,
        }


def _payment_sort_date(payment: PaymentRecord) -> DateKey:
    return (
        to_date_only(payment.due_date)
        or to_date_only(payment.issue_date)
        or to_date_only(payment.created_at)
    )


def latest_payment_by_load(payments: Iterable[PaymentRecord]) -> Dict[str, PaymentRecord]:
    """Most recent payment per load; on equal dates the later record wins."""

    latest: Dict[str, PaymentRecord] = {}
    for payment in payments:
        existing = latest.get(payment.load_id)
        if existing is None or _payment_sort_date(payment) >= _payment_sort_date(existing):
            latest[payment.load_id] = payment
    return latest


def _expected_amount(load: LoadRecord, payment: Optional[PaymentRecord]) -> float:
    if payment is not None:
        return payment.effective_amount
    if load.agreed_price is not None:
        return to_number(load.agreed_price)
    return to_number(load.published_price)


def _matches(row: LoadPaymentRow, selected: LoadPaymentFilter) -> bool:
    if selected is LoadPaymentFilter.TAKEN:
        return row.load.status in TAKEN_LIKE_STATUSES
    if selected is LoadPaymentFilter.COMPLETED:
        return row.load.status is LoadStatus.DELIVERED
    if selected is LoadPaymentFilter.PAID:
        return row.payment is not None and row.payment.status is PaymentStatus.PAID
    if selected is LoadPaymentFilter.PAYMENT_SCHEDULED:
        return row.payment is not None and row.payment.status in SCHEDULED_PAYMENT_STATUSES
    return True


def build_load_payment_rows(
    loads: Iterable[LoadRecord],
    payments: Iterable[PaymentRecord],
    selected: LoadPaymentFilter = LoadPaymentFilter.COMPLETED,
) -> List[LoadPaymentRow]:
    latest = latest_payment_by_load(payments)
    rows: List[LoadPaymentRow] = []
    for load in loads:
        if load.is_inactive:
            continue
        payment = latest.get(load.load_id)
        payment_date = (
            (to_date_only(payment.due_date) if payment else "")
            or (to_date_only(payment.issue_date) if payment else "")
            or to_date_only(load.delivery_date_to)
            or to_date_only(load.delivery_date_from)
        )
        rows.append(
            LoadPaymentRow(
                load=load,
                payment=payment,
                expected_amount=_expected_amount(load, payment),
                payment_date=payment_date,
            )
        )
    rows.sort(key=lambda row: to_date_only(row.load.delivery_date_from), reverse=True)
    filtered = [row for row in rows if _matches(row, selected)]
    LOGGER.debug("Load payment board: %s of %s rows match %s", len(filtered), len(rows), selected.value)
    return filtered
