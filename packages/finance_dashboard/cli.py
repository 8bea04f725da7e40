# ruff: noqa: I001
"""CLI for the ``finance_dashboard`` package.

This module exposes callable command handlers (``cmd_*``, returning a process
exit code) and a Typer-based console interface on top of them. Environment
variables (notably ``DATABASE_URL``) are loaded from a local ``.env`` using
``python-dotenv`` before any command runs. Business logic lives in
``finance_dashboard.api`` and related modules.
"""

from __future__ import annotations

import sys
from collections.abc import Sequence
from datetime import date, datetime
from enum import StrEnum
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from typer.models import OptionInfo

from .aggregate import round_cents
from .filters import normalize_merchant
from .logging_setup import configure_logging, get_logger
from .models import (
    AggregateOrder,
    DateMode,
    FilterCriteria,
    SortKey,
    SortOrder,
    SortState,
    Transaction,
)

logger = get_logger("finance_dashboard.cli")


class TotalsBy(StrEnum):
    CATEGORY = "category"
    ACCOUNT = "account"


# ---- Small module-level helpers used by CLI commands -------------------------


def _err(message: str) -> int:
    print(f"Error: {message}", file=sys.stderr)
    return 1


def _as_date(value: datetime | date | None) -> date | None:
    if value is None:
        return None
    return value.date() if isinstance(value, datetime) else value


def _build_criteria(
    *,
    date_mode: DateMode,
    month: int | None,
    year: int | None,
    start: date | None,
    end: date | None,
    accounts: Sequence[str] | None,
    categories: Sequence[str] | None,
    merchants: Sequence[str] | None,
) -> FilterCriteria:
    return FilterCriteria(
        date_mode=date_mode,
        month=month,
        year=year,
        start_date=start,
        end_date=end,
        accounts=frozenset(accounts or ()),
        categories=frozenset(categories or ()),
        merchants=frozenset(merchants or ()),
    )


def _load_source(from_json: Path | None, database_url: str | None) -> list[Transaction]:
    """Read transactions from an export file when given, else from the database."""

    if from_json is not None:
        from .ingest.adapters.plaid_json import transactions_from_export
        from .ingest.utils import load_json

        txs = transactions_from_export(load_json(from_json))
        logger.debug("Loaded %d transactions from %s", len(txs), from_json)
        return txs

    from db.client import session_scope
    from .persistence import load_transactions

    with session_scope(database_url=database_url) as session:
        txs = load_transactions(session)
    logger.debug("Loaded %d transactions from the database", len(txs))
    return txs


def _fmt_row(tx: Transaction) -> str:
    return "\t".join(
        [
            tx.date.isoformat(),
            tx.account_name or "",
            tx.category or "",
            normalize_merchant(tx.merchant),
            f"{round_cents(tx.amount):.2f}",
        ]
    )


# ---- Command handlers ---------------------------------------------------------


def cmd_transactions(
    criteria: FilterCriteria,
    *,
    sort: SortState,
    from_json: Path | None = None,
    database_url: str | None = None,
    today: date | None = None,
) -> int:
    """Print filtered, sorted transactions as ``date\\taccount\\tcategory\\tmerchant\\tamount``.

    A final ``Total`` line carries the sum of the printed amounts.
    """

    from .api import build_transactions_view

    try:
        source = _load_source(from_json, database_url)
        view = build_transactions_view(source, criteria, sort=sort, today=today)
    except FileNotFoundError as e:
        return _err(f"File not found: {e.filename}")
    except Exception as e:
        return _err(f"failed to load transactions: {e}")

    for tx in view.rows:
        print(_fmt_row(tx))
    print(f"Total\t{round_cents(view.total):.2f}")
    return 0


def cmd_totals(
    criteria: FilterCriteria,
    *,
    by: TotalsBy,
    order: AggregateOrder,
    from_json: Path | None = None,
    database_url: str | None = None,
    today: date | None = None,
) -> int:
    """Print ``label\\ttotal`` aggregate entries over the filtered transactions."""

    from .aggregate import account_totals, category_totals
    from .filters import filter_transactions

    if by not in (TotalsBy.CATEGORY, TotalsBy.ACCOUNT):
        return _err(f"--by must be 'category' or 'account', got {by!r}")

    try:
        filtered = filter_transactions(_load_source(from_json, database_url), criteria, today=today)
    except FileNotFoundError as e:
        return _err(f"File not found: {e.filename}")
    except Exception as e:
        return _err(f"failed to load transactions: {e}")

    totals_fn = category_totals if by == TotalsBy.CATEGORY else account_totals
    for entry in totals_fn(filtered, order=order):
        print(f"{entry.label}\t{round_cents(entry.total):.2f}")
    return 0


def cmd_set_category(
    transaction_id: str, category: str, *, database_url: str | None = None
) -> int:
    """Run the category update flow and report the refetched row."""

    from db.client import session_scope
    from .api import recategorize
    from .errors import TransactionNotFoundError

    try:
        with session_scope(database_url=database_url) as session:
            refreshed = recategorize(session, transaction_id, category)
    except TransactionNotFoundError as e:
        return _err(str(e))
    except Exception as e:
        return _err(f"category update failed: {e}")

    for tx in refreshed:
        if tx.id == transaction_id:
            print(f"{tx.id}\t{tx.category or ''}")
            break
    return 0


def cmd_link_accounts(json_path: Path, *, database_url: str | None = None) -> int:
    """Record a connection from a link payload and reconcile its accounts.

    Prints one ``matched``/``new`` line per fetched account.
    """

    from db.client import session_scope
    from .api import link_accounts
    from .ingest.adapters.plaid_json import account_record, parse_link_payload
    from .ingest.utils import load_json

    try:
        payload = parse_link_payload(load_json(json_path))
    except FileNotFoundError:
        return _err(f"File not found: {json_path}")
    except Exception as e:
        return _err(f"failed to read link payload: {e}")

    try:
        with session_scope(database_url=database_url) as session:
            plan = link_accounts(
                session,
                item_id=payload.item.item_id,
                access_token=payload.access_token,
                institution_id=payload.item.institution_id,
                institution_name=payload.institution.name,
                logo=payload.institution.logo,
                fetched=[account_record(a) for a in payload.accounts],
            )
    except Exception as e:
        return _err(f"linking accounts failed: {e}")

    for fetched, _stored in plan.matched:
        print(f"matched\t{fetched.name or ''}\t{fetched.mask or ''}")
    for fetched in plan.new:
        print(f"new\t{fetched.name or ''}\t{fetched.mask or ''}")
    return 0


def cmd_import_transactions(json_path: Path, *, database_url: str | None = None) -> int:
    """Apply a ``transactions/sync`` payload to the database."""

    from db.client import session_scope
    from .ingest.adapters.plaid_json import parse_sync_payload
    from .ingest.utils import load_json
    from .persistence import apply_sync_payload

    try:
        payload = parse_sync_payload(load_json(json_path))
    except FileNotFoundError:
        return _err(f"File not found: {json_path}")
    except Exception as e:
        return _err(f"failed to read transactions payload: {e}")

    try:
        with session_scope(database_url=database_url) as session:
            written, removed = apply_sync_payload(session, payload)
    except Exception as e:
        return _err(f"importing transactions failed: {e}")

    print(f"written\t{written}")
    print(f"removed\t{removed}")
    return 0


def cmd_accounts(*, include_hidden: bool = False, database_url: str | None = None) -> int:
    """List stored accounts with their latest balance, then net worth."""

    from db.client import session_scope
    from .aggregate import net_worth
    from .persistence import load_account_records

    try:
        with session_scope(database_url=database_url) as session:
            accounts = load_account_records(session, include_hidden=include_hidden)
    except Exception as e:
        return _err(f"failed to load accounts: {e}")

    for acct in accounts:
        current = "" if acct.current is None else f"{acct.current:.2f}"
        print(
            "\t".join(
                [
                    acct.institution or "",
                    acct.nickname or acct.name or "",
                    acct.type,
                    acct.subtype or "",
                    acct.mask or "",
                    current,
                ]
            )
        )
    worth = net_worth(accounts)
    print(f"Assets\t{round_cents(worth.assets):.2f}")
    print(f"Liabilities\t{round_cents(worth.liabilities):.2f}")
    print(f"Net worth\t{round_cents(worth.net):.2f}")
    return 0


# ---- Typer-based console interface -------------------------------------------

# Module-level option objects to satisfy ruff B008 (no calls in parameter
# defaults). Several commands share them.
DATABASE_URL_OPTION: OptionInfo = typer.Option(
    "--database-url", help="Override DATABASE_URL (falls back to env var)."
)
FROM_JSON_OPTION: OptionInfo = typer.Option(
    "--from-json",
    help="Read transactions from a dashboard export JSON file instead of the database.",
    dir_okay=False,
)
JSON_PATH_OPTION: OptionInfo = typer.Option(
    ..., "--json-path", help="Path to the JSON payload.", dir_okay=False
)
DATE_MODE_OPTION: OptionInfo = typer.Option("--date-mode", help="Date preset.")
MONTH_OPTION: OptionInfo = typer.Option(
    "--month", min=1, max=12, help="Month (1-12) for --date-mode month."
)
YEAR_OPTION: OptionInfo = typer.Option("--year", help="Year for --date-mode month.")
START_OPTION: OptionInfo = typer.Option(
    "--start", formats=["%Y-%m-%d"], help="Inclusive start date (YYYY-MM-DD)."
)
END_OPTION: OptionInfo = typer.Option(
    "--end", formats=["%Y-%m-%d"], help="Inclusive end date (YYYY-MM-DD)."
)
TODAY_OPTION: OptionInfo = typer.Option(
    "--today", formats=["%Y-%m-%d"], help="Reference date for relative presets."
)
ACCOUNT_OPTION: OptionInfo = typer.Option("--account", help="Allowed account (repeatable).")
CATEGORY_OPTION: OptionInfo = typer.Option("--category", help="Allowed category (repeatable).")
MERCHANT_OPTION: OptionInfo = typer.Option(
    "--merchant", help="Allowed merchant (repeatable); '(No Merchant)' selects blanks."
)


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Personal-finance dashboard: filter, total and sort transactions; link "
        "institution accounts. Loads DATABASE_URL from a local .env."
    ),
)


@app.callback()
def _root(
    log_level: Annotated[
        str | None, typer.Option("--log-level", help="Log level (default from env or INFO).")
    ] = None,
) -> None:
    """Load ``.env`` from the working directory and configure logging."""

    # override=False keeps variables already present in the environment.
    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging(log_level)


@app.command("transactions")
def transactions_cmd(
    date_mode: Annotated[DateMode, DATE_MODE_OPTION] = DateMode.ALL,
    month: Annotated[int | None, MONTH_OPTION] = None,
    year: Annotated[int | None, YEAR_OPTION] = None,
    start: Annotated[datetime | None, START_OPTION] = None,
    end: Annotated[datetime | None, END_OPTION] = None,
    account: Annotated[list[str] | None, ACCOUNT_OPTION] = None,
    category: Annotated[list[str] | None, CATEGORY_OPTION] = None,
    merchant: Annotated[list[str] | None, MERCHANT_OPTION] = None,
    sort: Annotated[SortKey | None, typer.Option("--sort", help="Sort column.")] = None,
    order: Annotated[SortOrder, typer.Option("--order", help="Sort order.")] = SortOrder.ASC,
    today: Annotated[datetime | None, TODAY_OPTION] = None,
    from_json: Annotated[Path | None, FROM_JSON_OPTION] = None,
    database_url: Annotated[str | None, DATABASE_URL_OPTION] = None,
) -> None:
    """Print the filtered transaction table."""

    try:
        criteria = _build_criteria(
            date_mode=date_mode,
            month=month,
            year=year,
            start=_as_date(start),
            end=_as_date(end),
            accounts=account,
            categories=category,
            merchants=merchant,
        )
    except ValueError as e:
        raise typer.Exit(_err(str(e))) from e
    code = cmd_transactions(
        criteria,
        sort=SortState(key=sort, order=order),
        from_json=from_json,
        database_url=database_url,
        today=_as_date(today),
    )
    raise typer.Exit(code)


@app.command("totals")
def totals_cmd(
    by: Annotated[
        TotalsBy, typer.Option("--by", help="Group by category or account.")
    ] = TotalsBy.CATEGORY,
    order: Annotated[
        AggregateOrder, typer.Option("--order", help="Entry order.")
    ] = AggregateOrder.TOTAL_DESC,
    date_mode: Annotated[DateMode, DATE_MODE_OPTION] = DateMode.ALL,
    month: Annotated[int | None, MONTH_OPTION] = None,
    year: Annotated[int | None, YEAR_OPTION] = None,
    start: Annotated[datetime | None, START_OPTION] = None,
    end: Annotated[datetime | None, END_OPTION] = None,
    account: Annotated[list[str] | None, ACCOUNT_OPTION] = None,
    category: Annotated[list[str] | None, CATEGORY_OPTION] = None,
    merchant: Annotated[list[str] | None, MERCHANT_OPTION] = None,
    today: Annotated[datetime | None, TODAY_OPTION] = None,
    from_json: Annotated[Path | None, FROM_JSON_OPTION] = None,
    database_url: Annotated[str | None, DATABASE_URL_OPTION] = None,
) -> None:
    """Print category or account totals of the filtered transactions."""

    try:
        criteria = _build_criteria(
            date_mode=date_mode,
            month=month,
            year=year,
            start=_as_date(start),
            end=_as_date(end),
            accounts=account,
            categories=category,
            merchants=merchant,
        )
    except ValueError as e:
        raise typer.Exit(_err(str(e))) from e
    code = cmd_totals(
        criteria,
        by=by,
        order=order,
        from_json=from_json,
        database_url=database_url,
        today=_as_date(today),
    )
    raise typer.Exit(code)


@app.command("set-category")
def set_category_cmd(
    transaction_id: Annotated[str, typer.Argument(help="Transaction id.")],
    category: Annotated[str, typer.Argument(help="New category label.")],
    database_url: Annotated[str | None, DATABASE_URL_OPTION] = None,
) -> None:
    """Re-categorize one transaction."""

    raise typer.Exit(cmd_set_category(transaction_id, category, database_url=database_url))


@app.command("link-accounts")
def link_accounts_cmd(
    json_path: Annotated[Path, JSON_PATH_OPTION],
    database_url: Annotated[str | None, DATABASE_URL_OPTION] = None,
) -> None:
    """Record a new connection and reconcile its accounts with stored ones."""

    raise typer.Exit(cmd_link_accounts(json_path, database_url=database_url))


@app.command("import-transactions")
def import_transactions_cmd(
    json_path: Annotated[Path, JSON_PATH_OPTION],
    database_url: Annotated[str | None, DATABASE_URL_OPTION] = None,
) -> None:
    """Apply a transactions/sync payload."""

    raise typer.Exit(cmd_import_transactions(json_path, database_url=database_url))


@app.command("accounts")
def accounts_cmd(
    include_hidden: Annotated[
        bool, typer.Option("--include-hidden", help="Also list hidden accounts.")
    ] = False,
    database_url: Annotated[str | None, DATABASE_URL_OPTION] = None,
) -> None:
    """List accounts with balances and net worth."""

    raise typer.Exit(cmd_accounts(include_hidden=include_hidden, database_url=database_url))


def main() -> None:
    """Console entrypoint for ``finance-dashboard``."""

    app()


if __name__ == "__main__":  # pragma: no cover
    main()
