"""Data models and value types for ``finance_dashboard``.

Every type here is an immutable value. The engine functions take these values
and return fresh ones; nothing in this package mutates a caller's records or
filter configuration in place.

Optional text fields are ``None`` when the collaborator did not record them.
Collaborators that deliver empty strings instead get the same treatment:
defaults are applied by explicit ``is None``/``== ""`` checks, never by
truthiness, so a zero amount is never mistaken for a missing one.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
from enum import StrEnum
from typing import Any, NamedTuple, TypeAlias

from .dates import parse_transaction_date
from .errors import DataError

# Reserved display values standing in for absent fields.
NO_MERCHANT = "(No Merchant)"
UNCATEGORIZED = "Uncategorized"
# Single-merchant selector value meaning "no merchant recorded".
EMPTY_MERCHANT = "__EMPTY__"


# ---------------------------------------------------------------------------
# Transactions
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Transaction:
    """A single transaction as delivered by the transaction source.

    Attributes
    ----------
    id:
        Unique identifier.
    date:
        Calendar date. Strings are parsed on construction; an unparseable
        value raises :class:`~finance_dashboard.errors.DataError`.
    name:
        Display name.
    amount:
        Signed amount: positive is a credit, negative a debit.
    account_name, category, merchant, payment_channel:
        Optional labels; ``None`` when absent.
    """

    id: str
    date: date
    name: str
    amount: float
    account_name: str | None = None
    category: str | None = None
    merchant: str | None = None
    payment_channel: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "date", parse_transaction_date(self.date))
        if isinstance(self.amount, bool):
            raise DataError(f"invalid amount for transaction {self.id!r}: {self.amount!r}")
        try:
            amount = float(self.amount)
        except (TypeError, ValueError) as exc:
            raise DataError(
                f"invalid amount for transaction {self.id!r}: {self.amount!r}"
            ) from exc
        object.__setattr__(self, "amount", amount)


Transactions: TypeAlias = Iterable[Transaction]


# ---------------------------------------------------------------------------
# Filter configuration
# ---------------------------------------------------------------------------


class DateMode(StrEnum):
    ALL = "all"
    YEAR_TO_DATE = "ytd"
    LAST_YEAR = "last_year"
    THIS_MONTH = "this_month"
    PAST_MONTH = "past_month"
    MONTH = "month"


class FilterDimension(StrEnum):
    """Allow-set dimensions of :class:`FilterCriteria`."""

    ACCOUNTS = "accounts"
    CATEGORIES = "categories"
    MERCHANTS = "merchants"


def _as_frozenset(values: Iterable[str] | None) -> frozenset[str]:
    if values is None:
        return frozenset()
    if isinstance(values, str):
        # A bare string is one value, not a set of characters.
        return frozenset({values})
    return frozenset(values)


def _as_optional_date(value: Any) -> date | None:
    if value is None:
        return None
    return parse_transaction_date(value)


@dataclass(frozen=True, slots=True)
class FilterCriteria:
    """Immutable filter configuration for :func:`filter_transactions`.

    An empty allow-set means "no restriction" on that dimension, which a
    caller cannot tell apart from selecting every value. ``month`` is
    1-indexed (January is ``1``) and is compared against 1-indexed calendar
    months.
    """

    date_mode: DateMode = DateMode.ALL
    month: int | None = None
    year: int | None = None
    start_date: date | None = None
    end_date: date | None = None
    accounts: frozenset[str] = field(default_factory=frozenset)
    categories: frozenset[str] = field(default_factory=frozenset)
    merchants: frozenset[str] = field(default_factory=frozenset)
    account: str | None = None
    merchant: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "date_mode", DateMode(self.date_mode))
        object.__setattr__(self, "start_date", _as_optional_date(self.start_date))
        object.__setattr__(self, "end_date", _as_optional_date(self.end_date))
        for name in ("accounts", "categories", "merchants"):
            object.__setattr__(self, name, _as_frozenset(getattr(self, name)))

        if self.date_mode is DateMode.MONTH:
            if self.year is None or self.month is None:
                raise ValueError("date_mode 'month' requires both month and year")
        if self.month is not None:
            if isinstance(self.month, bool) or not isinstance(self.month, int):
                raise ValueError(f"month must be an integer 1..12, got {self.month!r}")
            if not 1 <= self.month <= 12:
                raise ValueError(f"month must be within 1..12, got {self.month}")

    def allow_set(self, dimension: FilterDimension | str) -> frozenset[str]:
        return getattr(self, FilterDimension(dimension).value)


class FilterOptions(NamedTuple):
    """Sorted option lists for the filter pickers, from the unfiltered list."""

    accounts: tuple[str, ...]
    categories: tuple[str, ...]
    merchants: tuple[str, ...]


# ---------------------------------------------------------------------------
# Aggregation and sorting
# ---------------------------------------------------------------------------


class AggregateEntry(NamedTuple):
    label: str
    total: float


class AggregateOrder(StrEnum):
    TOTAL_DESC = "total_desc"
    INSERTION = "insertion"


class SortKey(StrEnum):
    DATE = "date"
    AMOUNT = "amount"
    NAME = "name"
    ACCOUNT_NAME = "account_name"
    CATEGORY = "category"
    MERCHANT = "merchant"
    PAYMENT_CHANNEL = "payment_channel"
    ID = "id"


class SortOrder(StrEnum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True, slots=True)
class SortState:
    """Column/order state of the transactions table; ``key=None`` is unsorted."""

    key: SortKey | None = None
    order: SortOrder = SortOrder.ASC

    def __post_init__(self) -> None:
        if self.key is not None:
            object.__setattr__(self, "key", SortKey(self.key))
        object.__setattr__(self, "order", SortOrder(self.order))


# ---------------------------------------------------------------------------
# Accounts and reconciliation
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class AccountRecord:
    """An account as fetched from the aggregation API or as stored.

    Only ``mask``, ``type`` and ``subtype`` take part in reconciliation; the
    remaining fields identify and describe the account.
    """

    type: str
    mask: str | None = None
    subtype: str | None = None
    account_id: str | None = None
    name: str | None = None
    official_name: str | None = None
    current: float | None = None
    available: float | None = None
    limit: float | None = None
    # Stored accounts only
    id: int | None = None
    nickname: str | None = None
    hidden: bool = False
    institution: str | None = None


@dataclass(frozen=True, slots=True)
class AccountSyncPlan:
    """Outcome of reconciling fetched accounts against stored ones.

    ``matched`` holds ``(fetched, stored)`` pairs; ``new`` holds fetched
    accounts without a stored counterpart. Both keep the fetched order.
    """

    matched: tuple[tuple[AccountRecord, AccountRecord], ...] = ()
    new: tuple[AccountRecord, ...] = ()


class NetWorth(NamedTuple):
    assets: float
    liabilities: float
    net: float


__all__ = [
    "NO_MERCHANT",
    "UNCATEGORIZED",
    "EMPTY_MERCHANT",
    "Transaction",
    "Transactions",
    "DateMode",
    "FilterDimension",
    "FilterCriteria",
    "FilterOptions",
    "AggregateEntry",
    "AggregateOrder",
    "SortKey",
    "SortOrder",
    "SortState",
    "AccountRecord",
    "AccountSyncPlan",
    "NetWorth",
]
