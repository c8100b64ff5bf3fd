# ledger_tracker/core/categorizer.py
import math

from ledger_tracker.core.models import EXPENSE, INCOME, KINDS

INCOME_CATEGORIES = (
    "Salary",
    "Freelance",
    "Investments",
    "Sales",
    "Other Income",
)

EXPENSE_CATEGORIES = (
    "Food",
    "Transport",
    "Housing",
    "Health",
    "Education",
    "Leisure",
    "Shopping",
    "Other Expenses",
)

_FALLBACK = {INCOME: "Other Income", EXPENSE: "Other Expenses"}


def categories_for(kind):
    if kind == INCOME:
        return INCOME_CATEGORIES
    if kind == EXPENSE:
        return EXPENSE_CATEGORIES
    raise ValueError(f"Unsupported type '{kind}'. Expected one of {', '.join(KINDS)}.")


def categorize(description, kind, categories_map):
    """
    Suggest a category for a description using the keyword lists configured
    under ``categories.<kind>``. Falls back to the kind's catch-all category.
    """
    name = (description or "").lower()
    allowed = categories_for(kind)
    for cat, keywords in (categories_map.get(kind) or {}).items():
        if cat not in allowed:
            continue
        for kw in keywords or []:
            if kw.lower() in name:
                return cat
    return _FALLBACK[kind]


def parse_amount(value):
    """Parse user input into a finite, non-negative amount."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValueError("Missing 'amount'.")
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"Could not parse amount '{value}'.")
    if not math.isfinite(amount) or amount < 0:
        raise ValueError(f"Amount must be a non-negative number, got '{value}'.")
    return amount


def validate_transaction(description, amount, kind, category):
    """
    Reject incomplete input before it reaches the store.
    Returns the cleaned (description, amount, kind, category) tuple.
    """
    description = (description or "").strip()
    if not description:
        raise ValueError("Missing 'description'.")
    amount = parse_amount(amount)
    allowed = categories_for(kind)
    if not category:
        raise ValueError("Missing 'category'.")
    if category not in allowed:
        raise ValueError(
            f"Category '{category}' is not valid for {kind}. "
            f"Choose one of: {', '.join(allowed)}."
        )
    return description, amount, kind, category
