import json
from datetime import date

import yaml
from click.testing import CliRunner

from ledger_tracker.cli import main as cli
from ledger_tracker.store import COLLECTION_KEY


def write_config(tmp_path, backend="json", **extra):
    store_path = tmp_path / ("ledger.db" if backend == "sqlite" else "store")
    cfg = {
        "storage": {"backend": backend, "path": str(store_path)},
        "output_dir": str(tmp_path / "reports"),
        "categories": {"expense": {"Food": ["grocery"]}},
    }
    cfg.update(extra)
    path = tmp_path / "config.yaml"
    with open(path, "w") as f:
        yaml.safe_dump(cfg, f)
    return path


def run(config_path, *args, **kwargs):
    return CliRunner().invoke(cli, ["--config", str(config_path), *args], **kwargs)


def stored(tmp_path):
    return json.loads((tmp_path / "store" / f"{COLLECTION_KEY}.json").read_text())


def next_month(today):
    if today.month == 12:
        return today.year + 1, 1
    return today.year, today.month + 1


def test_add_list_and_summary_current_month(tmp_path):
    cfg = write_config(tmp_path)
    today = date.today().isoformat()

    res = run(cfg, "add", "--type", "income", "--description", "Salary",
              "--amount", "1000", "--category", "Salary", "--date", today)
    assert res.exit_code == 0, res.output
    assert "Transaction added!" in res.output

    res = run(cfg, "add", "--description", "Groceries", "--amount", "250.50",
              "--category", "Food", "--date", today)
    assert res.exit_code == 0, res.output

    entries = stored(tmp_path)
    assert [e["description"] for e in entries] == ["Groceries", "Salary"]

    res = run(cfg, "list")
    assert res.exit_code == 0, res.output
    lines = res.output.strip().splitlines()
    assert "Groceries" in lines[0] and "-250.50" in lines[0]
    assert "Salary" in lines[1] and "+1000.00" in lines[1]

    res = run(cfg, "summary")
    assert res.exit_code == 0, res.output
    assert "Income:        1000.00" in res.output
    assert "Expenses:      250.50" in res.output
    assert "Balance:       749.50" in res.output
    assert "Transactions:  2" in res.output


def test_add_rejects_missing_category(tmp_path):
    cfg = write_config(tmp_path)

    res = run(cfg, "add", "--description", "Lunch", "--amount", "12", "--category", "Salary")

    assert res.exit_code != 0
    assert "not valid for expense" in res.output
    assert not (tmp_path / "store" / f"{COLLECTION_KEY}.json").exists()


def test_projection_for_future_month_uses_recurring(tmp_path):
    cfg = write_config(tmp_path)
    today = date.today()
    this_month = today.replace(day=1).isoformat()

    run(cfg, "add", "--type", "income", "--description", "Salary", "--amount", "3000",
        "--category", "Salary", "--date", this_month, "--recurring")
    run(cfg, "add", "--description", "Rent", "--amount", "1200",
        "--category", "Housing", "--date", this_month, "--recurring")
    run(cfg, "add", "--description", "Dinner", "--amount", "80",
        "--category", "Leisure", "--date", this_month)

    year, month = next_month(today)
    res = run(cfg, "projection", "--month", f"{year:04d}-{month:02d}")

    assert res.exit_code == 0, res.output
    assert "[Projection]" in res.output
    assert "Opening balance: 1720.00" in res.output
    assert "Income:          +3000.00" in res.output
    assert "Expenses:        -1200.00" in res.output
    assert "Closing balance: 3520.00" in res.output
    assert "Fixed items:     1 income, 1 expense" in res.output
    assert f"{year:04d}-{month:02d}-01" in res.output
    assert "Dinner" not in res.output


def test_projection_without_recurring_warns(tmp_path):
    cfg = write_config(tmp_path)
    year, month = next_month(date.today())

    res = run(cfg, "projection", "--month", f"{year:04d}-{month:02d}")

    assert res.exit_code == 0, res.output
    assert "No recurring transactions configured" in res.output


def test_invalid_month_is_rejected(tmp_path):
    cfg = write_config(tmp_path)

    res = run(cfg, "summary", "--month", "2024-13")

    assert res.exit_code != 0
    assert "Expected YYYY-MM" in res.output


def test_edit_delete_and_clear(tmp_path):
    cfg = write_config(tmp_path, backend="sqlite")

    run(cfg, "add", "--description", "Bus", "--amount", "4", "--category", "Transport",
        "--date", "2024-01-03")
    run(cfg, "add", "--description", "Cinema", "--amount", "20", "--category", "Leisure",
        "--date", "2024-01-04")
    res = run(cfg, "list", "--month", "2024-01")
    cinema_id = res.output.splitlines()[0].split()[0]
    bus_id = res.output.splitlines()[1].split()[0]

    res = run(cfg, "edit", cinema_id, "--amount", "22.5", "--recurring")
    assert res.exit_code == 0, res.output
    assert "22.50" in res.output and "(monthly)" in res.output

    res = run(cfg, "edit", "nope", "--amount", "1")
    assert res.exit_code != 0
    assert "No transaction with id 'nope'" in res.output

    res = run(cfg, "delete", bus_id)
    assert res.exit_code == 0, res.output
    assert "Transaction removed!" in res.output

    res = run(cfg, "list")
    assert bus_id not in res.output
    assert cinema_id in res.output

    res = run(cfg, "clear", input="n\n")
    assert res.exit_code != 0

    res = run(cfg, "clear", "--yes")
    assert res.exit_code == 0, res.output
    assert "Removed 1 transaction(s)." in res.output
    assert "No transactions yet." in run(cfg, "list").output


def test_malformed_store_starts_empty(tmp_path):
    cfg = write_config(tmp_path)
    (tmp_path / "store").mkdir()
    (tmp_path / "store" / f"{COLLECTION_KEY}.json").write_text("{broken")

    res = run(cfg, "list")

    assert res.exit_code == 0, res.output
    assert "Could not load transactions!" in res.output
    assert "No transactions yet." in res.output


def test_import_and_export(tmp_path):
    cfg = write_config(tmp_path)
    csv_path = tmp_path / "bank.csv"
    csv_path.write_text(
        "date,description,amount\n"
        "2024-03-01,Payroll,2000\n"
        "2024-03-02,Grocery Mart,-75.25\n"
    )

    res = run(cfg, "import", str(csv_path))
    assert res.exit_code == 0, res.output
    assert "Imported 2 transaction(s)" in res.output
    categories = {e["description"]: e["category"] for e in stored(tmp_path)}
    assert categories == {"Payroll": "Salary", "Grocery Mart": "Food"}

    res = run(cfg, "export", "--output", "csv", "--month", "2024-03")
    assert res.exit_code == 0, res.output
    assert (tmp_path / "reports" / "Ledger2024-03.csv").exists()

    res = run(cfg, "export", "--output", "html")
    assert res.exit_code == 0, res.output
    assert (tmp_path / "reports" / "Ledger.html").exists()

    res = run(cfg, "export", "--output", "pdf")
    assert res.exit_code != 0


def test_import_reports_loader_errors(tmp_path):
    cfg = write_config(tmp_path)
    csv_path = tmp_path / "bad.csv"
    csv_path.write_text("when,what\n2024-01-01,x\n")

    res = run(cfg, "import", str(csv_path))

    assert res.exit_code != 0
    assert "Missing required column" in res.output


def test_store_option_overrides_config(tmp_path):
    cfg = write_config(tmp_path)
    other = tmp_path / "elsewhere"

    res = run(cfg, "--store", str(other), "add", "--description", "Gift", "--amount", "5",
              "--category", "Other Income", "--type", "income")

    assert res.exit_code == 0, res.output
    assert (other / f"{COLLECTION_KEY}.json").exists()


def test_log_notifier_keeps_terminal_quiet(tmp_path):
    cfg = write_config(tmp_path, notifier="log")

    res = run(cfg, "add", "--description", "Bus", "--amount", "4", "--category", "Transport")

    assert res.exit_code == 0, res.output
    assert "Transaction added!" not in res.output
    assert len(stored(tmp_path)) == 1


def test_unknown_notifier_is_rejected(tmp_path):
    cfg = write_config(tmp_path, notifier="pager")

    res = run(cfg, "list")

    assert res.exit_code != 0
    assert "Unsupported notifier 'pager'" in res.output


def test_html_month_export_carries_prior_balance(tmp_path):
    cfg = write_config(tmp_path)
    run(cfg, "add", "--type", "income", "--description", "Salary", "--amount", "1000",
        "--category", "Salary", "--date", "2024-01-05")
    run(cfg, "add", "--description", "Rent", "--amount", "400",
        "--category", "Housing", "--date", "2024-02-01")

    res = run(cfg, "export", "--output", "html", "--month", "2024-02")

    assert res.exit_code == 0, res.output
    html = (tmp_path / "reports" / "Ledger2024-02.html").read_text()
    assert "<td>1000.00</td></tr>" in html
    assert "<td>-400.00</td><td>600.00</td>" in html
