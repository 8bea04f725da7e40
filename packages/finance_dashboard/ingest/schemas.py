"""Typed, validated payloads for aggregation-API and dashboard JSON.

The shapes follow the aggregation API's ``accounts/get`` and
``transactions/sync`` responses, plus the dashboard's own transaction export
(camelCase keys). Unknown keys are ignored so provider additions do not break
ingestion.
"""

from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..dates import parse_transaction_date


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True, frozen=True)


def _blank_to_none(v: str | None) -> str | None:
    if v is None or v == "":
        return None
    return v


# ---------------------------------------------------------------------------
# accounts/get
# ---------------------------------------------------------------------------


class BalancesPayload(_Payload):
    current: float | None = None
    available: float | None = None
    limit: float | None = None


class AccountPayload(_Payload):
    account_id: str
    name: str
    official_name: str | None = None
    mask: str | None = None
    type: str
    subtype: str | None = None
    balances: BalancesPayload = Field(default_factory=BalancesPayload)

    @field_validator("mask", "subtype", "official_name")
    @classmethod
    def _optional_text(cls, v: str | None) -> str | None:
        return _blank_to_none(v)


class ItemPayload(_Payload):
    item_id: str
    institution_id: str


class InstitutionPayload(_Payload):
    name: str
    logo: str | None = None


class LinkPayload(_Payload):
    """A completed connection: token exchange result plus ``accounts/get`` data."""

    access_token: str
    item: ItemPayload
    institution: InstitutionPayload
    accounts: list[AccountPayload]


# ---------------------------------------------------------------------------
# transactions/sync
# ---------------------------------------------------------------------------


class CategoryPayload(_Payload):
    primary: str | None = None
    detailed: str | None = None


class ProviderTransactionPayload(_Payload):
    """A provider transaction; ``amount`` is positive for money leaving the account."""

    transaction_id: str
    account_id: str
    date: dt.date
    name: str
    amount: float
    merchant_name: str | None = None
    payment_channel: str | None = None
    personal_finance_category: CategoryPayload | None = None

    @field_validator("date", mode="before")
    @classmethod
    def _parse_date(cls, v: object) -> dt.date:
        return parse_transaction_date(v)

    @field_validator("merchant_name", "payment_channel")
    @classmethod
    def _optional_text(cls, v: str | None) -> str | None:
        return _blank_to_none(v)


class RemovedTransactionPayload(_Payload):
    transaction_id: str


class TransactionsSyncPayload(_Payload):
    added: list[ProviderTransactionPayload] = Field(default_factory=list)
    modified: list[ProviderTransactionPayload] = Field(default_factory=list)
    removed: list[RemovedTransactionPayload] = Field(default_factory=list)
    next_cursor: str | None = None
    has_more: bool = False


# ---------------------------------------------------------------------------
# Dashboard transaction export
# ---------------------------------------------------------------------------


class ExportedTransactionPayload(_Payload):
    model_config = ConfigDict(
        extra="ignore", str_strip_whitespace=False, frozen=True, populate_by_name=True
    )

    id: str
    date: dt.date
    name: str
    amount: float
    account_name: str | None = Field(default=None, alias="accountName")
    category: str | None = Field(default=None, alias="personalFinanceCategory")
    merchant: str | None = None
    payment_channel: str | None = Field(default=None, alias="paymentChannel")

    @field_validator("date", mode="before")
    @classmethod
    def _parse_date(cls, v: object) -> dt.date:
        return parse_transaction_date(v)


class TransactionsExportPayload(_Payload):
    transactions: list[ExportedTransactionPayload] = Field(default_factory=list)


__all__ = [
    "BalancesPayload",
    "AccountPayload",
    "ItemPayload",
    "InstitutionPayload",
    "LinkPayload",
    "CategoryPayload",
    "ProviderTransactionPayload",
    "RemovedTransactionPayload",
    "TransactionsSyncPayload",
    "ExportedTransactionPayload",
    "TransactionsExportPayload",
]
