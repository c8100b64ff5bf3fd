# ledger_tracker/loaders/csv_loader.py
import re
import pandas as pd
from ledger_tracker.loaders.base import BaseLoader
from ledger_tracker.core.categorizer import categorize, categories_for, parse_amount
from ledger_tracker.core.models import EXPENSE, INCOME, KINDS

_CLEAN_AMOUNT = re.compile(r"[^\d\-\.]")
_TRUE_VALUES = {'1', 'true', 'yes', 'y', 'x'}


class CSVLoader(BaseLoader):
    """
    Loader for CSV exports with a header row.
    Required columns: date, description, amount.
    Optional columns: type (income/expense), category, recurring.

    Without a type column, negative amounts are read as expenses and positive
    ones as income. Missing or unknown categories are suggested from the
    configured keyword lists.
    """
    def load(self, file_path, categories=None):
        df = pd.read_csv(file_path, dtype=str, keep_default_na=False)

        cols = {c.strip().lower(): c for c in df.columns}
        def find(*names):
            return next((cols[n] for n in names if n in cols), None)

        date_col     = find('date')
        desc_col     = find('description')
        amt_col      = find('amount')
        type_col     = find('type', 'kind')
        cat_col      = find('category')
        rec_col      = find('recurring', 'isrecurring', 'is_recurring')

        for name, col in (('date', date_col), ('description', desc_col), ('amount', amt_col)):
            if col is None:
                raise RuntimeError(f"Missing required column '{name}' in {file_path}")

        for _, row in df.iterrows():
            desc = str(row[desc_col]).strip()
            amt_raw = str(row[amt_col]).strip()
            cleaned = _CLEAN_AMOUNT.sub("", amt_raw)
            # Blank rows (no description and no amount) are not transactions.
            if not cleaned and not desc:
                continue

            d_raw = str(row[date_col]).strip()
            if not d_raw:
                raise ValueError(f"Missing date for '{desc}' in {file_path}")
            try:
                d = pd.to_datetime(d_raw).date()
            except (ValueError, TypeError) as e:
                raise ValueError(f"Could not parse date '{d_raw}' in {file_path}: {e}")

            try:
                signed = float(cleaned)
            except ValueError:
                raise ValueError(f"Could not parse amount '{amt_raw}' in {file_path}")

            kind = str(row[type_col]).strip().lower() if type_col else ''
            if kind and kind not in KINDS:
                raise ValueError(f"Unrecognized type '{kind}' in {file_path}")
            if not kind:
                kind = EXPENSE if signed < 0 else INCOME

            cat = str(row[cat_col]).strip() if cat_col else ''
            if cat not in categories_for(kind):
                cat = categorize(desc, kind, categories or {})

            recurring = bool(rec_col) and str(row[rec_col]).strip().lower() in _TRUE_VALUES

            yield {
                'description': desc,
                'amount': parse_amount(abs(signed)),
                'kind': kind,
                'category': cat,
                'occurred_at': d,
                'is_recurring': recurring,
            }
