# ledger_tracker/utils.py
from datetime import date


def parse_month(month_str):
    """
    Parse a YYYY-MM string into a (year, month) tuple.
    """
    try:
        year, month = map(int, month_str.split('-'))
    except (AttributeError, ValueError):
        raise ValueError(f"Invalid month '{month_str}'. Expected YYYY-MM.")
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month '{month_str}'. Expected YYYY-MM.")
    return year, month


def format_month(year, month):
    return f"{year:04d}-{month:02d}"


def month_title(year, month):
    return date(year, month, 1).strftime('%B %Y')


def in_month(tx, year, month):
    return tx.occurred_at.year == year and tx.occurred_at.month == month
