# ledger_tracker/recurring.py
from __future__ import annotations

from calendar import monthrange
from dataclasses import replace
from datetime import date
from typing import Iterable, List

from ledger_tracker.core.models import Transaction


def _clamped_date(year: int, month: int, day: int) -> date:
    # Day 31 in a 30-day month lands on the 30th, never on the 1st of the next month.
    return date(year, month, min(day, monthrange(year, month)[1]))


def recurring_id(template_id: str, year: int, month: int) -> str:
    return f"recurring-{template_id}-{year}-{month}"


def recurring_templates(transactions: Iterable[Transaction]) -> List[Transaction]:
    return [tx for tx in transactions if tx.is_recurring]


def synthesize_instance(template: Transaction, year: int, month: int) -> Transaction:
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be between 1 and 12, got {month}.")
    return replace(
        template,
        id=recurring_id(template.id, year, month),
        occurred_at=_clamped_date(year, month, template.occurred_at.day),
        is_recurring=True,
    )


def synthesize_recurring(
    transactions: Iterable[Transaction],
    year: int,
    month: int,
) -> List[Transaction]:
    """Project every recurring template into ``year``/``month``.

    Templates are replayed on their original day-of-month, clamped to the last
    day of the target month. The returned instances are never persisted.
    """
    return [
        synthesize_instance(tx, year, month)
        for tx in recurring_templates(transactions)
    ]
