"""Adapters from aggregation-API / dashboard JSON to ``finance_dashboard`` values.

Mapping rules
-------------
- Accounts (the ``accounts`` list of a link result): one :class:`AccountRecord`
  per entry via :func:`account_record`; blank ``mask``/``subtype`` become
  ``None``; balances are copied as-is.
- Provider transactions (``transactions/sync``): the provider reports money
  leaving the account as a positive ``amount``; the dashboard convention is the
  opposite (credits positive), so amounts are negated. The category is the
  ``personal_finance_category.primary`` label.
- Exported transactions (the dashboard's ``{"transactions": [...]}`` JSON):
  camelCase keys map onto :class:`Transaction` fields unchanged.

Validation failures raise :class:`~finance_dashboard.errors.DataError` with
the underlying pydantic error chained.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from ...errors import DataError
from ...models import AccountRecord, Transaction
from ..schemas import (
    AccountPayload,
    LinkPayload,
    ProviderTransactionPayload,
    TransactionsExportPayload,
    TransactionsSyncPayload,
)

_M = TypeVar("_M", bound=BaseModel)


def _validate(model: type[_M], payload: Any, what: str) -> _M:
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise DataError(f"invalid {what} payload: {exc}") from exc


def account_record(acct: AccountPayload) -> AccountRecord:
    return AccountRecord(
        type=acct.type,
        mask=acct.mask,
        subtype=acct.subtype,
        account_id=acct.account_id,
        name=acct.name,
        official_name=acct.official_name,
        current=acct.balances.current,
        available=acct.balances.available,
        limit=acct.balances.limit,
    )


def parse_link_payload(payload: Mapping[str, Any]) -> LinkPayload:
    return _validate(LinkPayload, payload, "link")


def parse_sync_payload(payload: Mapping[str, Any]) -> TransactionsSyncPayload:
    return _validate(TransactionsSyncPayload, payload, "transactions/sync")


def provider_category(tx: ProviderTransactionPayload) -> str | None:
    pfc = tx.personal_finance_category
    return None if pfc is None else pfc.primary


def dashboard_amount(provider_amount: float) -> float:
    """Convert a provider amount (positive = outflow) to the dashboard sign."""

    # 0.0 - x avoids producing -0.0 for zero amounts.
    return 0.0 - provider_amount


def transactions_from_export(payload: Mapping[str, Any]) -> list[Transaction]:
    """Map the dashboard's transaction export to :class:`Transaction` values."""

    parsed = _validate(TransactionsExportPayload, payload, "transactions export")
    return [
        Transaction(
            id=t.id,
            date=t.date,
            name=t.name,
            amount=t.amount,
            account_name=t.account_name,
            category=t.category,
            merchant=t.merchant,
            payment_channel=t.payment_channel,
        )
        for t in parsed.transactions
    ]


__all__ = [
    "account_record",
    "parse_link_payload",
    "parse_sync_payload",
    "provider_category",
    "dashboard_amount",
    "transactions_from_export",
]
