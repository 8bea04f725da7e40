"""Public API for the presentation layer.

The engine operations (:func:`filter_transactions`, :func:`aggregate_by_key`,
:func:`sort_transactions`, :func:`find_match`) are independently usable pure
functions. This module adds the compositions the dashboard screens use:

- :func:`build_transactions_view` derives everything the transactions screen
  renders from one transaction list, one criteria value and one sort state.
- :func:`recategorize` runs the category update flow: write through the sink,
  then refetch the full list.
- :func:`link_accounts` records a new connection and reconciles its accounts.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import date

from sqlalchemy.orm import Session

from .aggregate import account_totals, category_totals, total_amount
from .filters import filter_options, filter_transactions
from .models import (
    AccountRecord,
    AccountSyncPlan,
    AggregateEntry,
    FilterCriteria,
    FilterOptions,
    SortState,
    Transaction,
)
from .sorting import sort_transactions


@dataclass(frozen=True, slots=True)
class TransactionsView:
    """Derived view model of the transactions screen.

    Attributes
    ----------
    rows:
        Filtered transactions in table order.
    category_totals, account_totals:
        Aggregates over ``rows`` ordered by descending total.
    total:
        Sum of ``rows`` amounts.
    options:
        Picker options computed from the unfiltered list.
    """

    rows: tuple[Transaction, ...]
    category_totals: tuple[AggregateEntry, ...]
    account_totals: tuple[AggregateEntry, ...]
    total: float
    options: FilterOptions


def build_transactions_view(
    transactions: Iterable[Transaction],
    criteria: FilterCriteria,
    *,
    sort: SortState | None = None,
    today: date | None = None,
) -> TransactionsView:
    all_rows = list(transactions)
    filtered = filter_transactions(all_rows, criteria, today=today)
    state = sort if sort is not None else SortState()
    ordered = sort_transactions(filtered, state.key, state.order)
    return TransactionsView(
        rows=tuple(ordered),
        category_totals=tuple(category_totals(filtered)),
        account_totals=tuple(account_totals(filtered)),
        total=total_amount(filtered),
        options=filter_options(all_rows),
    )


def recategorize(session: Session, transaction_id: str, category: str) -> list[Transaction]:
    """Persist a new category and return the refetched transaction list."""

    from .persistence import load_transactions, update_transaction_category

    update_transaction_category(session, transaction_id, category)
    return load_transactions(session)


def link_accounts(
    session: Session,
    *,
    item_id: str,
    access_token: str,
    institution_id: str,
    institution_name: str,
    fetched: Sequence[AccountRecord],
    logo: str | None = None,
    fallback_logos: Mapping[str, str] | None = None,
) -> AccountSyncPlan:
    """Record a new connection and store its accounts without duplicating known ones."""

    from .persistence import create_item, sync_item_accounts

    item = create_item(
        session,
        item_id=item_id,
        access_token=access_token,
        institution_id=institution_id,
        institution_name=institution_name,
        logo=logo,
        fallback_logos=fallback_logos,
    )
    return sync_item_accounts(session, item=item, fetched=fetched)


__all__ = [
    "TransactionsView",
    "build_transactions_view",
    "recategorize",
    "link_accounts",
]
