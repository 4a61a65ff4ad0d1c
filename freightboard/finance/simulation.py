"""Mini README: Running-balance projection over an ordered ledger.

Structure:
    * round2 - half-up rounding to cents used for every reported figure.
    * SimulationRow - a ledger event paired with the balance after it.
    * SimulationResult - rows plus range totals.
    * simulate_balance - fold events over an opening balance.

The simulator consumes events in the order it is given. A running balance is
only a true timeline when that order is chronological; other orders (by
amount or label) still produce well-defined arithmetic, which
``SimulationResult.is_chronological`` lets callers flag.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Tuple

from ..logging_utils import get_logger
from .events import EventKind, LedgerEvent
from .records import to_number

LOGGER = get_logger(__name__)


def round2(value: float) -> float:
    """Round to two decimals with halves rounded up, matching the board UI."""

    return math.floor(value * 100 + 0.5) / 100


@dataclass(frozen=True)
class SimulationRow:
    event: LedgerEvent
    running_balance: float

    def as_dict(self) -> Dict[str, object]:
        payload = self.event.as_dict()
        payload["runningBalance"] = self.running_balance
        return payload


@dataclass(frozen=True)
class SimulationResult:
    """Outcome of one simulation call."""

    opening_balance: float
    rows: Tuple[SimulationRow, ...] = field(default_factory=tuple)
    total_income: float = 0.0
    total_out: float = 0.0
    projected_balance: float = 0.0

    @property
    def is_chronological(self) -> bool:
        keys = [row.event.date for row in self.rows]
        return all(earlier <= later for earlier, later in zip(keys, keys[1:]))

    @property
    def running_balances(self) -> List[float]:
        return [row.running_balance for row in self.rows]

    def as_dict(self) -> Dict[str, object]:
        return {
            "openingBalance": self.opening_balance,
            "rows": [row.as_dict() for row in self.rows],
            "totalIncome": self.total_income,
            "totalOut": self.total_out,
            "projectedBalance": self.projected_balance,
            "isChronological": self.is_chronological,
        }


def simulate_balance(opening_balance: float, events: Iterable[LedgerEvent]) -> SimulationResult:
    """Apply ``events`` in order: income adds, every other kind subtracts."""

    opening = to_number(opening_balance)
    running = opening
    total_income = 0.0
    total_out = 0.0
    rows: List[SimulationRow] = []
    for event in events:
        amount = to_number(event.amount)
        if event.kind is EventKind.INCOME:
            running += amount
            total_income += amount
        else:
            running -= amount
            total_out += amount
        rows.append(SimulationRow(event=event, running_balance=round2(running)))

    total_income = round2(total_income)
    total_out = round2(total_out)
    result = SimulationResult(
        opening_balance=opening,
        rows=tuple(rows),
        total_income=total_income,
        total_out=total_out,
        projected_balance=round2(opening + total_income - total_out),
    )
    if not result.is_chronological:
        LOGGER.debug("Simulated %s rows in non-chronological order", len(rows))
    return result
