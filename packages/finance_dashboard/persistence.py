# ruff: noqa: I001
"""Persistence integration for finance_dashboard.

Functions here read and write the shared database owned by ``libs/db``. They
rely on the SQLAlchemy ORM models in ``db.models.finance`` and on a session
provided by the caller (usually ``db.client.session_scope``). Committing is
the caller's responsibility.

Scope:
- Transaction source: load stored transactions as engine values.
- Category update sink: record a user category for one transaction.
- Account source/sink: stored accounts per institution, item creation and
  account synchronization through the reconciliation matcher.
- Upsert provider transactions from a ``transactions/sync`` payload.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session, selectinload

from db.models.finance import FdAccount, FdAccountBalance, FdItem, FdTransaction
from .errors import DataError, TransactionNotFoundError
from .ingest.adapters.plaid_json import dashboard_amount, provider_category
from .ingest.schemas import ProviderTransactionPayload, TransactionsSyncPayload
from .logging_setup import get_logger
from .models import AccountRecord, AccountSyncPlan, Transaction
from .reconcile import find_match, format_logo_url

logger = get_logger("finance_dashboard.persistence")


def _to_decimal_2(raw: float | None) -> Decimal | None:
    if raw is None:
        return None
    try:
        d = Decimal(str(raw))
    except (InvalidOperation, ValueError) as exc:
        raise DataError(f"invalid amount: {raw!r}") from exc
    return d.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def _to_float(d: Decimal | None) -> float | None:
    return None if d is None else float(d)


def _non_empty(value: str | None) -> str | None:
    return None if value is None or value == "" else value


# ---------------------------------------------------------------------------
# Transaction source and category update sink
# ---------------------------------------------------------------------------


def _account_label(acct: FdAccount | None) -> str:
    if acct is None:
        return ""
    return _non_empty(acct.nickname) or _non_empty(acct.name) or ""


def _to_transaction(row: FdTransaction) -> Transaction:
    # A user override (category update sink) wins over the provider label.
    category = _non_empty(row.category) or _non_empty(row.personal_finance_category)
    return Transaction(
        id=row.id,
        date=row.date,
        name=row.name,
        amount=float(row.amount),
        account_name=_account_label(row.account),
        category=category,
        merchant=row.merchant_name,
        payment_channel=row.payment_channel,
    )


def load_transactions(session: Session) -> list[Transaction]:
    """Return every stored transaction, newest first.

    Account names prefer the user nickname over the provider name; a
    transaction without an account gets ``""``.
    """

    stmt = (
        select(FdTransaction)
        .options(selectinload(FdTransaction.account))
        .order_by(FdTransaction.date.desc(), FdTransaction.id)
    )
    return [_to_transaction(row) for row in session.execute(stmt).scalars()]


def update_transaction_category(session: Session, transaction_id: str, category: str) -> None:
    """Persist a user-chosen category for one transaction.

    Callers refetch the full transaction list afterwards; no in-place patching
    of previously loaded values exists.
    """

    row = session.get(FdTransaction, transaction_id)
    if row is None:
        raise TransactionNotFoundError(transaction_id)
    row.category = category
    row.updated_at = func.now()
    session.flush()
    logger.info("Updated category of transaction %s to %r", transaction_id, category)


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------


def _latest_balance(acct: FdAccount) -> FdAccountBalance | None:
    return acct.balances[-1] if acct.balances else None


def _to_record(acct: FdAccount) -> AccountRecord:
    bal = _latest_balance(acct)
    return AccountRecord(
        type=acct.type,
        mask=acct.mask,
        subtype=acct.subtype,
        account_id=acct.provider_account_id,
        name=acct.name,
        official_name=acct.official_name,
        current=_to_float(bal.current) if bal is not None else None,
        available=_to_float(bal.available) if bal is not None else None,
        limit=_to_float(bal.credit_limit) if bal is not None else None,
        id=acct.id,
        nickname=acct.nickname,
        hidden=acct.hidden,
        institution=acct.item.institution_name,
    )


def load_institution_accounts(session: Session, institution_id: str) -> list[AccountRecord]:
    """Return the stored accounts of an institution across all its items, by id."""

    stmt = (
        select(FdAccount)
        .join(FdAccount.item)
        .where(FdItem.institution_id == institution_id)
        .options(selectinload(FdAccount.balances), selectinload(FdAccount.item))
        .order_by(FdAccount.id)
    )
    return [_to_record(acct) for acct in session.execute(stmt).scalars()]


def load_account_records(session: Session, *, include_hidden: bool = True) -> list[AccountRecord]:
    """Return every stored account with its latest balance snapshot."""

    stmt = (
        select(FdAccount)
        .options(selectinload(FdAccount.balances), selectinload(FdAccount.item))
        .order_by(FdAccount.id)
    )
    if not include_hidden:
        stmt = stmt.where(FdAccount.hidden.is_(False))
    return [_to_record(acct) for acct in session.execute(stmt).scalars()]


def create_item(
    session: Session,
    *,
    item_id: str,
    access_token: str,
    institution_id: str,
    institution_name: str,
    logo: str | None = None,
    fallback_logos: Mapping[str, str] | None = None,
) -> FdItem:
    """Record a new connection. Every (re)connection gets its own item."""

    item = FdItem(
        item_id=item_id,
        access_token=access_token,
        institution_id=institution_id,
        institution_name=institution_name,
        institution_logo=format_logo_url(logo, institution_id, fallback_logos),
    )
    session.add(item)
    session.flush()
    logger.info("Created item %s for institution %s", item_id, institution_name)
    return item


def _add_balance(session: Session, acct: FdAccount, record: AccountRecord) -> None:
    # A missing current balance is stored as zero.
    current = _to_decimal_2(record.current) if record.current is not None else Decimal("0.00")
    session.add(
        FdAccountBalance(
            account=acct,
            current=current,
            available=_to_decimal_2(record.available),
            credit_limit=_to_decimal_2(record.limit),
        )
    )


def _refresh_matched(
    session: Session, item: FdItem, fetched_acct: AccountRecord, stored_acct: AccountRecord
) -> None:
    row = session.get(FdAccount, stored_acct.id)
    assert row is not None  # loaded above in the same session
    row.provider_account_id = fetched_acct.account_id
    row.item = item
    row.name = fetched_acct.name or row.name
    row.official_name = fetched_acct.official_name
    row.updated_at = func.now()
    _add_balance(session, row, fetched_acct)
    logger.info("Reusing account %s for %s (%s)", row.id, fetched_acct.name, fetched_acct.mask)


def _create_account(session: Session, item: FdItem, acct: AccountRecord) -> None:
    row = FdAccount(
        provider_account_id=acct.account_id,
        name=acct.name or "",
        official_name=acct.official_name,
        type=acct.type,
        subtype=_non_empty(acct.subtype),
        mask=_non_empty(acct.mask),
        item=item,
    )
    session.add(row)
    _add_balance(session, row, acct)
    logger.info("Creating new account: %s (%s)", acct.name, acct.mask)


def sync_item_accounts(
    session: Session, *, item: FdItem, fetched: Sequence[AccountRecord]
) -> AccountSyncPlan:
    """Store ``fetched`` accounts for ``item``, reusing recognized stored accounts.

    Matched stored accounts are re-pointed to the new item and refreshed with
    the provider's identifiers and names (nickname and hidden flag are kept).
    Unmatched accounts are created. Every fetched account gets a balance
    snapshot. When two fetched accounts match the same stored account, only the
    first claims it and the second is created as a new account. Accounts are
    written in fetched order, and the returned plan keeps that order.
    """

    for acct in fetched:
        if acct.account_id is None or acct.account_id == "":
            raise DataError(f"fetched account {acct.name!r} has no provider account id")

    stored = load_institution_accounts(session, item.institution_id)

    matched: list[tuple[AccountRecord, AccountRecord]] = []
    new: list[AccountRecord] = []
    claimed: set[int | None] = set()
    for acct in fetched:
        stored_acct = find_match(acct, stored)
        if stored_acct is not None and stored_acct.id in claimed:
            logger.warning(
                "Stored account %s already matched in this sync; creating %s as new",
                stored_acct.id,
                acct.account_id,
            )
            stored_acct = None
        if stored_acct is None:
            _create_account(session, item, acct)
            new.append(acct)
            continue
        claimed.add(stored_acct.id)
        _refresh_matched(session, item, acct, stored_acct)
        matched.append((acct, stored_acct))

    session.flush()
    return AccountSyncPlan(matched=tuple(matched), new=tuple(new))


# ---------------------------------------------------------------------------
# Provider transactions
# ---------------------------------------------------------------------------


def upsert_transactions(
    session: Session, transactions: Iterable[ProviderTransactionPayload]
) -> int:
    """Insert or update provider transactions keyed on the provider transaction id.

    Provider fields are refreshed on update; a user category override is left
    untouched. A transaction whose account is unknown is stored without one, or
    keeps the account it is already linked to.
    Returns the number of rows written.
    """

    items = list(transactions)
    if not items:
        return 0

    account_ids = {t.account_id for t in items}
    accounts = {
        a.provider_account_id: a
        for a in session.execute(
            select(FdAccount).where(FdAccount.provider_account_id.in_(account_ids))
        ).scalars()
    }

    for t in items:
        acct = accounts.get(t.account_id)
        if acct is None:
            logger.warning("Transaction %s references unknown account %s", t.transaction_id, t.account_id)
        amount = _to_decimal_2(dashboard_amount(t.amount))
        assert amount is not None
        row = session.get(FdTransaction, t.transaction_id)
        if row is None:
            row = FdTransaction(id=t.transaction_id)
            session.add(row)
        if acct is not None:
            row.account = acct
        row.date = t.date
        row.name = t.name
        row.amount = amount
        row.merchant_name = t.merchant_name
        row.payment_channel = t.payment_channel
        row.personal_finance_category = provider_category(t)
        row.updated_at = func.now()

    session.flush()
    logger.info("Upserted %d transactions", len(items))
    return len(items)


def remove_transactions(session: Session, transaction_ids: Iterable[str]) -> int:
    ids = list(transaction_ids)
    if not ids:
        return 0
    result = session.execute(delete(FdTransaction).where(FdTransaction.id.in_(ids)))
    return int(result.rowcount or 0)


def apply_sync_payload(session: Session, payload: TransactionsSyncPayload) -> tuple[int, int]:
    """Apply a ``transactions/sync`` page; returns ``(written, removed)``."""

    written = upsert_transactions(session, [*payload.added, *payload.modified])
    removed = remove_transactions(session, [r.transaction_id for r in payload.removed])
    return written, removed


__all__ = [
    "load_transactions",
    "update_transaction_category",
    "load_institution_accounts",
    "load_account_records",
    "create_item",
    "sync_item_accounts",
    "upsert_transactions",
    "remove_transactions",
    "apply_sync_payload",
]
