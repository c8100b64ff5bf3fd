# ledger_tracker/outputs/html_output.py

import os
from html import escape
from ledger_tracker.aggregator import monthly_balances
from ledger_tracker.outputs.base import BaseOutput
from ledger_tracker.utils import format_month, in_month, month_title


class HTMLOutput(BaseOutput):
    """Generate a static HTML report: one table per month plus a balance summary."""

    def __init__(self, config):
        self.config = config
        self.output_dir = config.get('output_dir', 'data')
        os.makedirs(self.output_dir, exist_ok=True)

    def write(self, transactions, year=None, month=None, opening_balance=0.0):
        txs = list(transactions)
        history = monthly_balances(txs)
        if year is not None and month is not None:
            title = month_title(year, month)
            filename = f"Ledger{format_month(year, month)}.html"
        else:
            title = "All months"
            filename = "Ledger.html"

        def tx_row(tx):
            sign = '+' if tx.kind == 'income' else '-'
            recurring = 'Monthly' if tx.is_recurring else ''
            return (
                f"<tr><td>{tx.occurred_at.isoformat()}</td><td>{escape(tx.description)}</td>"
                f"<td>{escape(tx.category)}</td><td>{recurring}</td>"
                f"<td class='{tx.kind}'>{sign}{tx.amount:.2f}</td></tr>"
            )

        html_parts = [
            "<html><head><meta charset='UTF-8'>",
            "<style>body{font-family:sans-serif;}table{border-collapse:collapse;margin-bottom:20px;}th,td{border:1px solid #ccc;padding:4px 8px;}th{background:#eee;}.income{color:#15803d;}.expense{color:#b91c1c;}</style>",
            "</head><body>",
            f"<h1>Ledger: {escape(title)}</h1>",
        ]

        # Monthly tables
        for y, m, _ in history:
            html_parts.append(f"<h2>{month_title(y, m)}</h2>")
            html_parts.append("<table><tr><th>Date</th><th>Description</th><th>Category</th><th>Recurring</th><th>Amount</th></tr>")
            for tx in sorted((tx for tx in txs if in_month(tx, y, m)), key=lambda t: t.occurred_at):
                html_parts.append(tx_row(tx))
            html_parts.append("</table>")

        # Summary table with the balance carried from month to month
        html_parts.append("<h2>Summary</h2>")
        html_parts.append("<table><tr><th>Month</th><th>Income</th><th>Expenses</th><th>Balance</th><th>Running balance</th></tr>")
        running = opening_balance
        if opening_balance:
            html_parts.append(
                f"<tr><td>Carried forward</td><td></td><td></td><td></td>"
                f"<td>{running:.2f}</td></tr>"
            )
        for y, m, totals in history:
            running += totals.balance
            html_parts.append(
                f"<tr><td>{month_title(y, m)}</td><td>{totals.total_income:.2f}</td>"
                f"<td>{totals.total_expenses:.2f}</td><td>{totals.balance:.2f}</td>"
                f"<td>{running:.2f}</td></tr>"
            )
        html_parts.append("</table>")

        html_parts.append("</body></html>")

        out_path = os.path.join(self.output_dir, filename)
        with open(out_path, 'w', encoding='utf-8') as f:
            f.write("\n".join(html_parts))

        print(f"Written {len(txs)} transactions to {out_path}")
        return out_path
