# ledger_tracker/outputs/csv_output.py

import os
import csv
from decimal import Decimal
from ledger_tracker.outputs.base import BaseOutput
from ledger_tracker.utils import format_month


class CSVOutput(BaseOutput):
    """
    Writes transactions to Ledger.csv, or Ledger<YYYY-MM>.csv when a month is
    given, sorted by date (oldest to latest).
    """
    def __init__(self, config):
        self.config      = config
        self.output_dir  = config.get('output_dir', 'data')
        os.makedirs(self.output_dir, exist_ok=True)

    def write(self, transactions, year=None, month=None, opening_balance=0.0):
        if year is not None and month is not None:
            filename = f"Ledger{format_month(year, month)}.csv"
        else:
            filename = "Ledger.csv"
        out_path = os.path.join(self.output_dir, filename)

        # sorted() is stable, so same-day entries keep their collection order
        records = sorted(transactions, key=lambda tx: tx.occurred_at)

        with open(out_path, 'w', newline='', encoding='utf-8') as f:
            writer = csv.writer(f)
            writer.writerow(['id', 'date', 'description', 'type', 'category', 'recurring', 'amount'])
            for tx in records:
                writer.writerow([
                    tx.id,
                    tx.occurred_at.isoformat(),
                    tx.description.strip(),
                    tx.kind,
                    tx.category,
                    'yes' if tx.is_recurring else 'no',
                    f"{Decimal(str(tx.amount)):.2f}",
                ])

        print(f"Written {len(records)} transactions to {out_path}")
        return out_path
