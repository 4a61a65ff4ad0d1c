"""Mini README: Shared pytest fixtures for the Freightboard test-suite.

Structure:
    * clock - FixedClock pinned to 2024-01-15 so "today" never drifts.
    * snapshot_payload - API-shaped records covering every ledger source.
    * snapshot - the same payload parsed into a FinanceSnapshot.

The January 2024 window over ``snapshot_payload`` yields eight ledger events:
four incomes, one recurring fixed expense and three one-off costs.
"""

from __future__ import annotations

from typing import Any, Dict

import pytest

from freightboard.configuration import get_settings
from freightboard.finance import FinanceSnapshot
from freightboard.scheduling import FixedClock


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock("2024-01-15")


@pytest.fixture
def snapshot_payload() -> Dict[str, Any]:
    return {
        "expenses": [
            {
                "id": "lease",
                "category": "LEASING",
                "expenseType": "FIXED",
                "amount": 1000,
                "totalWithVat": 1200,
                "expenseDate": "2023-11-05",
                "recurrenceType": "MONTHLY",
            },
            {
                "id": "old-lease",
                "category": "LEASING",
                "expenseType": "FIXED",
                "amount": 700,
                "expenseDate": "2023-01-10",
                "recurrenceType": "MONTHLY",
                "stopDate": "2023-12-31",
            },
            {
                "id": "permit",
                "category": "PERMITS",
                "expenseType": "FIXED",
                "amount": 300,
                "expenseDate": "2024-01-20",
                "recurrenceType": "ONE_TIME",
                "description": "Annual permit",
            },
            {
                "id": "fuel-1",
                "category": "FUEL",
                "expenseType": "VARIABLE",
                "amount": 250.5,
                "expenseDate": "2024-01-10",
                "status": "PENDING",
                "description": "Diesel",
            },
            {
                "id": "fuel-old",
                "category": "FUEL",
                "expenseType": "VARIABLE",
                "amount": 99,
                "expenseDate": "2023-12-30",
            },
        ],
        "payments": [
            {
                "id": "p1",
                "loadId": "L1",
                "amount": 2000,
                "totalWithVat": 2400,
                "dueDate": "2024-01-25",
                "status": "INVOICED",
            },
            {"id": "p2", "loadId": "L2", "amount": 500, "issueDate": "2024-01-12T10:00:00Z"},
            {"id": "p3", "loadId": "L1", "amount": 100, "dueDate": "2024-02-05"},
        ],
        "driverPay": [
            {
                "id": "dp1",
                "driverId": "drv-123456789",
                "year": 2024,
                "month": 1,
                "totalPay": 1800,
                "status": "APPROVED",
                "driver": {"firstName": "Ana", "lastName": "Petrovic"},
            },
            {"id": "dp2", "driverId": "drv-2", "year": 2024, "month": 13, "totalPay": 10},
        ],
        "customIncomes": [
            {
                "id": "ci1",
                "description": "Warehouse sublet",
                "amount": 400,
                "incomeDate": "2023-10-03",
                "dueDay": 3,
                "isOneTime": False,
            },
            {
                "id": "ci2",
                "description": "Insurance refund",
                "amount": 150,
                "incomeDate": "2024-01-18",
                "isOneTime": True,
            },
        ],
        "loads": [{"id": "L1", "referenceNumber": "REF-1", "status": "DELIVERED"}],
    }


@pytest.fixture
def snapshot(snapshot_payload: Dict[str, Any]) -> FinanceSnapshot:
    return FinanceSnapshot.from_dict(snapshot_payload)
