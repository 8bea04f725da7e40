"""Category/account totals and balance summaries for the dashboard charts.

Aggregates are derived on demand from an already filtered transaction list
and are never persisted. Amounts are summed with their sign, so refunds and
credits net against debits in the same bucket.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from decimal import ROUND_HALF_UP, Decimal

from .models import (
    UNCATEGORIZED,
    AccountRecord,
    AggregateEntry,
    AggregateOrder,
    NetWorth,
    Transaction,
)

# Account types whose balances are owed rather than held.
LIABILITY_TYPES: frozenset[str] = frozenset({"credit", "loan"})


def aggregate_by_key(
    transactions: Iterable[Transaction],
    key_fn: Callable[[Transaction], str | None],
    *,
    default_label: str = UNCATEGORIZED,
    order: AggregateOrder | str = AggregateOrder.TOTAL_DESC,
) -> list[AggregateEntry]:
    """Group ``transactions`` by ``key_fn`` and sum signed amounts per label.

    Parameters
    ----------
    key_fn:
        Extracts the grouping label; ``None`` or ``""`` map to
        ``default_label``.
    order:
        ``TOTAL_DESC`` (legend/chart display) sorts by descending total, with
        ties in first-seen order. ``INSERTION`` keeps first-seen order (chart
        series labels).
    """

    totals: dict[str, float] = {}
    for tx in transactions:
        label = key_fn(tx)
        if label is None or label == "":
            label = default_label
        totals[label] = totals.get(label, 0.0) + tx.amount

    entries = [AggregateEntry(label, total) for label, total in totals.items()]
    if AggregateOrder(order) is AggregateOrder.TOTAL_DESC:
        # sorted() is stable, so equal totals keep first-seen order.
        entries = sorted(entries, key=lambda e: e.total, reverse=True)
    return entries


def category_totals(
    transactions: Iterable[Transaction],
    *,
    order: AggregateOrder | str = AggregateOrder.TOTAL_DESC,
) -> list[AggregateEntry]:
    return aggregate_by_key(transactions, lambda tx: tx.category, order=order)


def account_totals(
    transactions: Iterable[Transaction],
    *,
    order: AggregateOrder | str = AggregateOrder.TOTAL_DESC,
) -> list[AggregateEntry]:
    return aggregate_by_key(transactions, lambda tx: tx.account_name, order=order)


def total_amount(transactions: Iterable[Transaction]) -> float:
    return sum((tx.amount for tx in transactions), 0.0)


def round_cents(value: float) -> float:
    """Round half-up to two decimals for display."""

    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def net_worth(accounts: Iterable[AccountRecord]) -> NetWorth:
    """Summarize current balances of visible accounts.

    ``credit`` and ``loan`` balances count as liabilities (the aggregation API
    reports them as positive amounts owed); every other type is an asset.
    Hidden accounts and accounts without a current balance are skipped.
    """

    assets = 0.0
    liabilities = 0.0
    for acct in accounts:
        if acct.hidden or acct.current is None:
            continue
        if acct.type in LIABILITY_TYPES:
            liabilities += acct.current
        else:
            assets += acct.current
    return NetWorth(assets=assets, liabilities=liabilities, net=assets - liabilities)


__all__ = [
    "LIABILITY_TYPES",
    "aggregate_by_key",
    "category_totals",
    "account_totals",
    "total_amount",
    "round_cents",
    "net_worth",
]
