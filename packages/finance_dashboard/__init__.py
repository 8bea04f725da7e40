"""Public interface for the ``finance_dashboard`` package.

This module exposes the engine operations and public models/types as the
stable import surface. There is no runtime logic here, only re-exports.
Database-backed helpers live in :mod:`finance_dashboard.persistence` and are
not imported eagerly.
"""

from .aggregate import (
    account_totals,
    aggregate_by_key,
    category_totals,
    net_worth,
    round_cents,
    total_amount,
)
from .api import TransactionsView, build_transactions_view
from .criteria import toggle_all, toggle_value, with_bounds, with_date_mode
from .errors import DataError, TransactionNotFoundError
from .filters import filter_options, filter_transactions, normalize_merchant
from .models import (
    EMPTY_MERCHANT,
    NO_MERCHANT,
    UNCATEGORIZED,
    AccountRecord,
    AccountSyncPlan,
    AggregateEntry,
    AggregateOrder,
    DateMode,
    FilterCriteria,
    FilterDimension,
    FilterOptions,
    NetWorth,
    SortKey,
    SortOrder,
    SortState,
    Transaction,
)
from .reconcile import find_match, format_logo_url, plan_account_sync
from .sorting import next_sort_state, sort_transactions

__all__ = [
    # Engine
    "filter_transactions",
    "filter_options",
    "normalize_merchant",
    "aggregate_by_key",
    "category_totals",
    "account_totals",
    "total_amount",
    "round_cents",
    "net_worth",
    "sort_transactions",
    "next_sort_state",
    "toggle_value",
    "toggle_all",
    "with_date_mode",
    "with_bounds",
    # Reconciliation
    "find_match",
    "plan_account_sync",
    "format_logo_url",
    # Views
    "TransactionsView",
    "build_transactions_view",
    # Models / types
    "Transaction",
    "FilterCriteria",
    "FilterDimension",
    "FilterOptions",
    "DateMode",
    "AggregateEntry",
    "AggregateOrder",
    "SortKey",
    "SortOrder",
    "SortState",
    "AccountRecord",
    "AccountSyncPlan",
    "NetWorth",
    "NO_MERCHANT",
    "UNCATEGORIZED",
    "EMPTY_MERCHANT",
    # Errors
    "DataError",
    "TransactionNotFoundError",
]
