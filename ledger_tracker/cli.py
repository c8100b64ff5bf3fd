# ledger_tracker/cli.py
import logging
from datetime import date

import click
from dotenv import load_dotenv

from ledger_tracker.aggregator import (
    accumulated_prior_balance,
    average_per_day,
    month_transactions,
    monthly_totals,
    project_month,
    recurring_overview,
)
from ledger_tracker.config import configure_logging, load_config
from ledger_tracker.core.categorizer import EXPENSE_CATEGORIES, INCOME_CATEGORIES, parse_amount
from ledger_tracker.core.models import INCOME
from ledger_tracker.loaders import get_loader
from ledger_tracker.notifier import get_notifier
from ledger_tracker.outputs import get_output
from ledger_tracker.store import TransactionNotFound, open_store
from ledger_tracker.utils import format_month, month_title, parse_month

logger = logging.getLogger(__name__)


def _month_option(value):
    if value is None:
        today = date.today()
        return today.year, today.month
    try:
        return parse_month(value)
    except ValueError as e:
        raise click.BadParameter(str(e))


def _month_callback(ctx, param, value):
    return _month_option(value)


def _format_tx(tx):
    sign = '+' if tx.kind == INCOME else '-'
    line = (
        f"{tx.id}  {tx.occurred_at.isoformat()}  {sign}{tx.amount:.2f}  "
        f"{tx.description}  [{tx.category}]"
    )
    if tx.is_recurring:
        line += "  (monthly)"
    return line


def _store(ctx):
    return ctx.obj['store']


@click.group()
@click.option(
    '--config', 'config_path',
    default='config.yaml',
    type=click.Path(dir_okay=False),
    help='Path to config.yaml (defaults are used when the file is missing)'
)
@click.option(
    '--env-file', 'env_file',
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help='Optional .env file, e.g. to set POCKETLEDGER_LOG_LEVEL'
)
@click.option(
    '--store', 'store_path',
    default=None,
    type=click.Path(),
    help='Override the storage path from the config file'
)
@click.pass_context
def main(ctx, config_path, env_file, store_path):
    """
    Track income and expenses month by month, and project future months
    from recurring transactions.
    """
    if env_file:
        load_dotenv(env_file)

    cfg = load_config(config_path)
    configure_logging(cfg)
    if store_path:
        cfg['storage'] = dict(cfg['storage'], path=store_path)

    try:
        notifier = get_notifier(cfg.get('notifier', 'echo'))
    except ValueError as e:
        raise click.ClickException(str(e))
    logger.debug("Using storage %s", cfg['storage'])
    ctx.obj = {
        'config': cfg,
        'store': open_store(cfg, notifier=notifier),
    }


@main.command()
@click.option('--type', 'kind', type=click.Choice(['income', 'expense']), default='expense', show_default=True)
@click.option('--description', required=True)
@click.option('--amount', required=True, help='Non-negative amount, e.g. 12.50')
@click.option(
    '--category', required=True,
    help=f"Income: {', '.join(INCOME_CATEGORIES)}. Expense: {', '.join(EXPENSE_CATEGORIES)}."
)
@click.option('--date', 'occurred_at', default=None, help='YYYY-MM-DD (default: today)')
@click.option('--recurring', is_flag=True, default=False, help='Repeat this transaction every month')
@click.pass_context
def add(ctx, kind, description, amount, category, occurred_at, recurring):
    """Record a new income or expense."""
    try:
        tx = _store(ctx).add(
            description=description,
            amount=amount,
            kind=kind,
            category=category,
            occurred_at=occurred_at,
            is_recurring=recurring,
        )
    except ValueError as e:
        raise click.ClickException(str(e))
    click.echo(_format_tx(tx))


@main.command()
@click.argument('tx_id')
@click.option('--type', 'kind', type=click.Choice(['income', 'expense']), default=None)
@click.option('--description', default=None)
@click.option('--amount', default=None)
@click.option('--category', default=None)
@click.option('--date', 'occurred_at', default=None, help='YYYY-MM-DD')
@click.option('--recurring/--one-time', 'recurring', default=None)
@click.pass_context
def edit(ctx, tx_id, kind, description, amount, category, occurred_at, recurring):
    """Replace fields of an existing transaction."""
    try:
        tx = _store(ctx).edit(
            tx_id,
            kind=kind,
            description=description,
            amount=parse_amount(amount) if amount is not None else None,
            category=category,
            occurred_at=occurred_at,
            is_recurring=recurring,
        )
    except TransactionNotFound:
        raise click.ClickException(f"No transaction with id '{tx_id}'.")
    except ValueError as e:
        raise click.ClickException(str(e))
    click.echo(_format_tx(tx))


@main.command()
@click.argument('tx_id')
@click.pass_context
def delete(ctx, tx_id):
    """Remove one transaction by id."""
    try:
        _store(ctx).delete(tx_id)
    except TransactionNotFound:
        raise click.ClickException(f"No transaction with id '{tx_id}'.")


@main.command()
@click.confirmation_option(prompt='Remove all transactions?')
@click.pass_context
def clear(ctx):
    """Remove every transaction."""
    count = _store(ctx).clear()
    click.echo(f"Removed {count} transaction(s).")


@main.command('list')
@click.option('--month', default=None, help='YYYY-MM (default: every transaction)')
@click.pass_context
def list_transactions(ctx, month):
    """List transactions, most recent first."""
    txs = _store(ctx).transactions
    if month is not None:
        year, mon = _month_option(month)
        txs = month_transactions(txs, year, mon)
    if not txs:
        click.echo("No transactions yet.")
        return
    for tx in txs:
        click.echo(_format_tx(tx))


@main.command()
@click.option('--month', default=None, callback=_month_callback, help='YYYY-MM (default: current month)')
@click.pass_context
def summary(ctx, month):
    """Show income, expenses and balance for a month."""
    year, mon = month
    txs = _store(ctx).transactions
    entries = month_transactions(txs, year, mon)
    totals = monthly_totals(entries)
    recurring = recurring_overview(txs)

    click.echo(month_title(year, mon))
    click.echo(f"  Income:        {totals.total_income:.2f}")
    click.echo(f"  Expenses:      {totals.total_expenses:.2f}")
    click.echo(f"  Balance:       {totals.balance:.2f}")
    click.echo(f"  Transactions:  {len(entries)}")
    click.echo(f"  Per day:       {average_per_day(totals.balance):.2f}")
    click.echo(f"  Recurring:     {recurring.count} ({recurring.monthly_value:.2f}/month)")


@main.command()
@click.option('--month', default=None, callback=_month_callback, help='YYYY-MM (default: current month)')
@click.pass_context
def projection(ctx, month):
    """Carry the balance forward into a month, projecting recurring entries."""
    year, mon = month
    proj = project_month(_store(ctx).transactions, year, mon)

    status = "Projection" if proj.is_future else "Current"
    click.echo(f"{month_title(year, mon)} [{status}]")
    click.echo(f"  Opening balance: {proj.opening_balance:.2f}")
    click.echo(f"  Income:          +{proj.totals.total_income:.2f}")
    click.echo(f"  Expenses:        -{proj.totals.total_expenses:.2f}")
    click.echo(f"  Month balance:   {proj.monthly_balance:.2f}")
    click.echo(f"  Closing balance: {proj.closing_balance:.2f}")
    if proj.is_future:
        click.echo(
            f"  Fixed items:     {proj.recurring_income_count} income, "
            f"{proj.recurring_expense_count} expense"
        )
        if not proj.recurring_income_count and not proj.recurring_expense_count:
            click.echo("No recurring transactions configured; add fixed income and costs for a better projection.")
    for tx in proj.transactions:
        click.echo("  " + _format_tx(tx))


@main.command('import')
@click.argument('file_path', type=click.Path(exists=True, dir_okay=False))
@click.option('--loader', 'loader_name', default='csv', show_default=True)
@click.pass_context
def import_transactions(ctx, file_path, loader_name):
    """Import transactions from a file through a configured loader."""
    cfg = ctx.obj['config']
    store = _store(ctx)
    try:
        loader = get_loader(loader_name, cfg)
        drafts = list(loader.load(file_path, categories=cfg.get('categories', {})))
        for draft in drafts:
            store.add(**draft)
    except (ValueError, RuntimeError) as e:
        raise click.ClickException(f"Error importing {file_path}: {e}")
    click.echo(f"Imported {len(drafts)} transaction(s) from {file_path}.")


@main.command()
@click.option('--output', 'output_format', default='csv', show_default=True, help='Configured output module, e.g. csv or html')
@click.option('--month', default=None, help='YYYY-MM (default: every transaction)')
@click.pass_context
def export(ctx, output_format, month):
    """Write transactions to a report file."""
    cfg = ctx.obj['config']
    txs = _store(ctx).transactions
    year = mon = None
    opening = 0.0
    if month is not None:
        year, mon = _month_option(month)
        opening = accumulated_prior_balance(txs, year, mon)
        txs = month_transactions(txs, year, mon)
    try:
        outputter = get_output(output_format, cfg)
    except ValueError as e:
        raise click.ClickException(str(e))
    outputter.write(txs, year=year, month=mon, opening_balance=opening)
    label = format_month(year, mon) if month is not None else "all months"
    click.echo(f"Exported {len(txs)} transaction(s) for {label} to {output_format.upper()}.")
