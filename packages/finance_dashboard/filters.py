"""Transaction filtering for the dashboard's transaction table and charts.

:func:`filter_transactions` applies every active predicate conjunctively: a
transaction is kept only when it passes the merchant, account, date and
category checks (plus the single-account/single-merchant selectors when set).
Each predicate is a small function over one transaction so the dimensions stay
independent of one another.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date

from .dates import previous_month_bounds
from .models import (
    EMPTY_MERCHANT,
    NO_MERCHANT,
    DateMode,
    FilterCriteria,
    FilterOptions,
    Transaction,
)


def normalize_merchant(merchant: str | None) -> str:
    """Return ``merchant`` or the ``"(No Merchant)"`` sentinel when blank."""

    if merchant is None or merchant.strip() == "":
        return NO_MERCHANT
    return merchant


def _label_or_empty(value: str | None) -> str:
    return "" if value is None else value


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------


def _passes_merchants(tx: Transaction, allowed: frozenset[str]) -> bool:
    return not allowed or normalize_merchant(tx.merchant) in allowed


def _passes_accounts(tx: Transaction, allowed: frozenset[str]) -> bool:
    return not allowed or _label_or_empty(tx.account_name) in allowed


def _passes_categories(tx: Transaction, allowed: frozenset[str]) -> bool:
    return not allowed or _label_or_empty(tx.category) in allowed


def _passes_date_mode(tx: Transaction, criteria: FilterCriteria, today: date) -> bool:
    d = tx.date
    mode = criteria.date_mode
    if mode is DateMode.ALL:
        return True
    if mode is DateMode.YEAR_TO_DATE:
        # Future-dated entries of the current year are excluded.
        return d.year == today.year and d <= today
    if mode is DateMode.LAST_YEAR:
        return d.year == today.year - 1
    if mode is DateMode.THIS_MONTH:
        return d.year == today.year and d.month == today.month
    if mode is DateMode.PAST_MONTH:
        first, last = previous_month_bounds(today)
        return first <= d <= last
    if mode is DateMode.MONTH:
        return d.year == criteria.year and d.month == criteria.month
    raise ValueError(f"unsupported date mode: {mode!r}")


def _passes_bounds(tx: Transaction, criteria: FilterCriteria) -> bool:
    if criteria.start_date is not None and tx.date < criteria.start_date:
        return False
    if criteria.end_date is not None and tx.date > criteria.end_date:
        return False
    return True


def _passes_single_account(tx: Transaction, account: str | None) -> bool:
    return account is None or tx.account_name == account


def _passes_single_merchant(tx: Transaction, merchant: str | None) -> bool:
    if merchant is None:
        return True
    if merchant == EMPTY_MERCHANT:
        return tx.merchant is None or tx.merchant == ""
    return tx.merchant == merchant


def matches(tx: Transaction, criteria: FilterCriteria, *, today: date | None = None) -> bool:
    """Return ``True`` when ``tx`` passes every active filter in ``criteria``."""

    today = date.today() if today is None else today
    return (
        _passes_merchants(tx, criteria.merchants)
        and _passes_accounts(tx, criteria.accounts)
        and _passes_date_mode(tx, criteria, today)
        and _passes_single_account(tx, criteria.account)
        and _passes_categories(tx, criteria.categories)
        and _passes_single_merchant(tx, criteria.merchant)
        and _passes_bounds(tx, criteria)
    )


def filter_transactions(
    transactions: Iterable[Transaction],
    criteria: FilterCriteria,
    *,
    today: date | None = None,
) -> list[Transaction]:
    """Return the transactions passing ``criteria``, in input order.

    Parameters
    ----------
    transactions:
        Transactions to filter; the engine does not rely on their order.
    criteria:
        Filter configuration. Empty allow-sets do not restrict.
    today:
        Reference date for the relative date modes. Defaults to
        :meth:`datetime.date.today`, resolved once per call so every
        transaction is judged against the same day.
    """

    today = date.today() if today is None else today
    return [tx for tx in transactions if matches(tx, criteria, today=today)]


def filter_options(transactions: Iterable[Transaction]) -> FilterOptions:
    """Build the sorted picker options from the *unfiltered* transactions.

    Accounts and categories skip absent/empty labels; merchants are
    normalized, so the sentinel appears whenever a merchant is missing.
    """

    accounts: set[str] = set()
    categories: set[str] = set()
    merchants: set[str] = set()
    for tx in transactions:
        if tx.account_name is not None and tx.account_name != "":
            accounts.add(tx.account_name)
        if tx.category is not None and tx.category != "":
            categories.add(tx.category)
        merchants.add(normalize_merchant(tx.merchant))
    return FilterOptions(
        accounts=tuple(sorted(accounts)),
        categories=tuple(sorted(categories)),
        merchants=tuple(sorted(merchants)),
    )


__all__ = ["normalize_merchant", "matches", "filter_transactions", "filter_options"]
