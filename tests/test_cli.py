# ruff: noqa: E402, I001
from __future__ import annotations

import json
import sys
from datetime import date
from pathlib import Path

import pytest
from typer.testing import CliRunner

_ROOT = Path(__file__).resolve().parents[1]
sys.path[:0] = [p for p in [str(_ROOT / "packages"), str(_ROOT)] if p not in sys.path]

from db.client import session_scope

from finance_dashboard.cli import app
from tests.helpers.db import add_account, add_item, add_transaction

runner = CliRunner()


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    # Keep a developer's .env out of the CLI's dotenv lookup.
    monkeypatch.chdir(tmp_path)


@pytest.fixture()
def export_file(tmp_path: Path) -> Path:
    path = tmp_path / "transactions.json"
    rows = [
        ("1", "2024-01-15", "Grocer", -50, "Checking", "Grocery", ""),
        ("2", "2024-06-01", "Utility", -200, "Checking", "Bill", "Acme"),
        ("3", "2024-06-15", "Salary", 2500, "Checking", "Income", "Employer"),
        ("4", "2023-11-02", "Flight", -420.1, "Card", "Travel", "Airline"),
        ("5", "2024-06-20", "Bookshop", -12.34, "Card", None, None),
    ]
    payload = {
        "transactions": [
            {
                "id": i,
                "date": d,
                "name": n,
                "amount": a,
                "accountName": acct,
                "personalFinanceCategory": cat,
                "merchant": m,
            }
            for i, d, n, a, acct, cat, m in rows
        ]
    }
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def _lines(output: str) -> list[list[str]]:
    return [line.split("\t") for line in output.strip().splitlines()]


def test_transactions_from_export_with_filters_and_sort(export_file: Path) -> None:
    result = runner.invoke(
        app,
        [
            "transactions",
            "--from-json",
            str(export_file),
            "--date-mode",
            "ytd",
            "--today",
            "2024-07-01",
            "--account",
            "Checking",
            "--account",
            "Card",
            "--sort",
            "amount",
            "--order",
            "desc",
        ],
    )
    assert result.exit_code == 0, result.output
    lines = _lines(result.output)
    assert [row[4] for row in lines[:-1]] == ["2500.00", "-12.34", "-50.00", "-200.00"]
    assert lines[1] == ["2024-06-20", "Card", "", "(No Merchant)", "-12.34"]
    assert lines[-1] == ["Total", "2237.66"]


def test_transactions_month_mode(export_file: Path) -> None:
    result = runner.invoke(
        app,
        [
            "transactions",
            "--from-json",
            str(export_file),
            "--date-mode",
            "month",
            "--month",
            "11",
            "--year",
            "2023",
        ],
    )
    assert result.exit_code == 0, result.output
    lines = _lines(result.output)
    assert [row[0] for row in lines[:-1]] == ["2023-11-02"]


def test_month_mode_without_year_is_an_error(export_file: Path) -> None:
    result = runner.invoke(
        app, ["transactions", "--from-json", str(export_file), "--date-mode", "month", "--month", "3"]
    )
    assert result.exit_code == 1
    assert "Error:" in result.output


def test_totals_by_category_and_account(export_file: Path) -> None:
    result = runner.invoke(
        app,
        ["totals", "--from-json", str(export_file), "--merchant", "(No Merchant)"],
    )
    assert result.exit_code == 0, result.output
    assert _lines(result.output) == [["Uncategorized", "-12.34"], ["Grocery", "-50.00"]]

    result = runner.invoke(app, ["totals", "--by", "account", "--from-json", str(export_file)])
    assert result.exit_code == 0, result.output
    assert _lines(result.output) == [["Checking", "2250.00"], ["Card", "-432.44"]]


def test_missing_export_file_reports_error(tmp_path: Path) -> None:
    result = runner.invoke(app, ["totals", "--from-json", str(tmp_path / "nope.json")])
    assert result.exit_code == 1
    assert "File not found" in result.output


def test_database_commands_round_trip(database_url: str, tmp_path: Path) -> None:
    with session_scope(database_url=database_url) as s:
        item = add_item(s, item_id="item_old", institution_id="ins_9", institution_name="Union")
        acct = add_account(
            s,
            item,
            provider_account_id="old_1",
            name="Checking",
            type="depository",
            subtype="checking",
            mask="4321",
            current="100.00",
        )
        add_transaction(
            s,
            id="t1",
            date=date(2024, 5, 1),
            name="Rent",
            amount="-900.00",
            account=acct,
            personal_finance_category="RENT_AND_UTILITIES",
        )

    result = runner.invoke(
        app, ["set-category", "t1", "Housing", "--database-url", database_url]
    )
    assert result.exit_code == 0, result.output
    assert _lines(result.output) == [["t1", "Housing"]]

    result = runner.invoke(app, ["set-category", "missing", "X", "--database-url", database_url])
    assert result.exit_code == 1
    assert "transaction not found" in result.output

    link = tmp_path / "link.json"
    link.write_text(
        json.dumps(
            {
                "access_token": "access-2",
                "item": {"item_id": "item_new", "institution_id": "ins_9"},
                "institution": {"name": "Union"},
                "accounts": [
                    {
                        "account_id": "new_1",
                        "name": "Checking",
                        "mask": "4321",
                        "type": "depository",
                        "subtype": "checking",
                        "balances": {"current": 150},
                    },
                    {
                        "account_id": "new_2",
                        "name": "Visa",
                        "mask": "8888",
                        "type": "credit",
                        "subtype": "credit card",
                        "balances": {"current": 40},
                    },
                ],
            }
        ),
        encoding="utf-8",
    )
    result = runner.invoke(
        app, ["link-accounts", "--json-path", str(link), "--database-url", database_url]
    )
    assert result.exit_code == 0, result.output
    assert _lines(result.output) == [["matched", "Checking", "4321"], ["new", "Visa", "8888"]]

    sync = tmp_path / "sync.json"
    sync.write_text(
        json.dumps(
            {
                "added": [
                    {
                        "transaction_id": "t9",
                        "account_id": "new_2",
                        "date": "2024-05-03",
                        "name": "Coffee",
                        "amount": 3.5,
                    }
                ]
            }
        ),
        encoding="utf-8",
    )
    result = runner.invoke(
        app, ["import-transactions", "--json-path", str(sync), "--database-url", database_url]
    )
    assert result.exit_code == 0, result.output
    assert _lines(result.output) == [["written", "1"], ["removed", "0"]]

    result = runner.invoke(app, ["transactions", "--database-url", database_url])
    assert result.exit_code == 0, result.output
    assert _lines(result.output) == [
        ["2024-05-03", "Visa", "", "(No Merchant)", "-3.50"],
        ["2024-05-01", "Checking", "Housing", "(No Merchant)", "-900.00"],
        ["Total", "-903.50"],
    ]

    result = runner.invoke(app, ["accounts", "--database-url", database_url])
    assert result.exit_code == 0, result.output
    assert _lines(result.output) == [
        ["Union", "Checking", "depository", "checking", "4321", "150.00"],
        ["Union", "Visa", "credit", "credit card", "8888", "40.00"],
        ["Assets", "150.00"],
        ["Liabilities", "40.00"],
        ["Net worth", "110.00"],
    ]


def test_database_url_is_required() -> None:
    result = runner.invoke(app, ["accounts"])
    assert result.exit_code == 1
    assert "DATABASE_URL is not set" in result.output
