# ledger_tracker/core/models.py
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime

INCOME = "income"
EXPENSE = "expense"
KINDS = (INCOME, EXPENSE)


@dataclass(frozen=True)
class Transaction:
    id: str
    description: str
    amount: float
    kind: str
    category: str
    occurred_at: date
    is_recurring: bool = False

    @property
    def signed_amount(self) -> float:
        return self.amount if self.kind == INCOME else -self.amount

    def to_dict(self) -> dict:
        """Return the serialized record stored under the collection key."""
        return {
            "id": self.id,
            "description": self.description,
            "amount": self.amount,
            "type": self.kind,
            "category": self.category,
            "date": self.occurred_at.isoformat(),
            "isRecurring": self.is_recurring,
        }

    @classmethod
    def from_dict(cls, entry: dict) -> "Transaction":
        for field in ("id", "amount", "type", "date"):
            if entry.get(field) is None:
                raise ValueError(f"Missing '{field}' in stored transaction: {entry}")
        kind = entry["type"]
        if kind not in KINDS:
            raise ValueError(f"Unrecognized type '{kind}' in stored transaction: {entry}")
        amount = float(entry["amount"])
        if not math.isfinite(amount) or amount < 0:
            raise ValueError(f"Amount must be a finite non-negative number: {entry}")
        is_recurring = entry.get("isRecurring")
        if is_recurring is None:
            is_recurring = False
        elif not isinstance(is_recurring, bool):
            raise ValueError(f"'isRecurring' must be true or false: {entry}")
        return cls(
            id=str(entry["id"]),
            description=entry.get("description", ""),
            amount=amount,
            kind=kind,
            category=entry.get("category", ""),
            occurred_at=parse_date(entry["date"]),
            is_recurring=is_recurring,
        )


def parse_date(value) -> date:
    """Accept a date, a YYYY-MM-DD string or a full ISO timestamp."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        return datetime.fromisoformat(text).date()
    raise ValueError(f"Unrecognized date: {value!r}")
