# ledger_tracker/aggregator.py
"""Monthly aggregation and projection over a snapshot of transactions.

Every function here is pure: it receives the full collection and returns a
freshly computed result without touching the store. Functions that depend on
the current month accept ``today`` so callers and tests can pin the clock.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ledger_tracker.core.models import EXPENSE, INCOME, Transaction
from ledger_tracker.recurring import (
    recurring_templates,
    synthesize_instance,
    synthesize_recurring,
)
from ledger_tracker.utils import in_month

__all__ = [
    "MonthlyTotals",
    "MonthProjection",
    "RecurringOverview",
    "accumulated_prior_balance",
    "average_per_day",
    "is_future_month",
    "month_transactions",
    "monthly_balances",
    "monthly_totals",
    "project_month",
    "recurring_overview",
    "synthesize_recurring",
]


@dataclass(frozen=True)
class MonthlyTotals:
    total_income: float = 0.0
    total_expenses: float = 0.0

    @property
    def balance(self) -> float:
        return self.total_income - self.total_expenses


@dataclass(frozen=True)
class RecurringOverview:
    count: int
    monthly_value: float


@dataclass(frozen=True)
class MonthProjection:
    year: int
    month: int
    is_future: bool
    transactions: Tuple[Transaction, ...]
    opening_balance: float
    totals: MonthlyTotals
    recurring_income_count: int
    recurring_expense_count: int

    @property
    def monthly_balance(self) -> float:
        return self.totals.balance

    @property
    def closing_balance(self) -> float:
        return self.opening_balance + self.totals.balance


def is_future_month(year: int, month: int, today: Optional[date] = None) -> bool:
    """True when ``year``/``month`` is strictly after the current month."""
    today = today or date.today()
    return (year, month) > (today.year, today.month)


def month_transactions(
    transactions: Iterable[Transaction],
    year: int,
    month: int,
    today: Optional[date] = None,
) -> List[Transaction]:
    """Return the entries relevant to ``year``/``month``.

    Past and current months only see the real transactions dated in them.
    Future months see one synthesized instance per recurring template plus any
    real one-time transactions already dated in that month. Input order is
    preserved; a template's instance takes the template's position.
    """
    if not is_future_month(year, month, today):
        return [tx for tx in transactions if in_month(tx, year, month)]

    result = []
    for tx in transactions:
        if tx.is_recurring:
            result.append(synthesize_instance(tx, year, month))
        elif in_month(tx, year, month):
            result.append(tx)
    return result


def monthly_totals(transactions: Iterable[Transaction]) -> MonthlyTotals:
    income = 0.0
    expenses = 0.0
    for tx in transactions:
        if tx.kind == INCOME:
            income += tx.amount
        elif tx.kind == EXPENSE:
            expenses += tx.amount
    return MonthlyTotals(total_income=income, total_expenses=expenses)


def accumulated_prior_balance(
    transactions: Iterable[Transaction],
    year: int,
    month: int,
) -> float:
    """Signed sum of every real transaction dated before the first day of the month."""
    start = date(year, month, 1)
    return sum(tx.signed_amount for tx in transactions if tx.occurred_at < start)


def monthly_balances(
    transactions: Iterable[Transaction],
) -> List[Tuple[int, int, MonthlyTotals]]:
    """Totals for every month that has real transactions, oldest first."""
    buckets: Dict[Tuple[int, int], List[Transaction]] = defaultdict(list)
    for tx in transactions:
        buckets[(tx.occurred_at.year, tx.occurred_at.month)].append(tx)
    return [
        (year, month, monthly_totals(buckets[(year, month)]))
        for year, month in sorted(buckets)
    ]


def recurring_overview(transactions: Iterable[Transaction]) -> RecurringOverview:
    templates = recurring_templates(transactions)
    return RecurringOverview(
        count=len(templates),
        monthly_value=sum(tx.signed_amount for tx in templates),
    )


def average_per_day(balance: float, today: Optional[date] = None) -> float:
    """Absolute balance spread over the days elapsed in the current month."""
    today = today or date.today()
    return abs(balance) / today.day


def project_month(
    transactions: Sequence[Transaction],
    year: int,
    month: int,
    today: Optional[date] = None,
) -> MonthProjection:
    entries = month_transactions(transactions, year, month, today)
    templates = recurring_templates(transactions)
    return MonthProjection(
        year=year,
        month=month,
        is_future=is_future_month(year, month, today),
        transactions=tuple(entries),
        opening_balance=accumulated_prior_balance(transactions, year, month),
        totals=monthly_totals(entries),
        recurring_income_count=sum(1 for tx in templates if tx.kind == INCOME),
        recurring_expense_count=sum(1 for tx in templates if tx.kind == EXPENSE),
    )
