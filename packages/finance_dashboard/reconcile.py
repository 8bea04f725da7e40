"""Account reconciliation for institution (re)connections.

When an institution is linked again, the aggregation API hands back accounts
with fresh identifiers. :func:`find_match` recognizes an already stored
account by mask, type and subtype so the caller can update it instead of
creating a duplicate.

The heuristic is conservative: accounts without a mask never match, there is
no fuzzy matching on names or balances, and the first qualifying stored
account in list order wins. A duplicate is preferred over merging two distinct
accounts.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

from .logging_setup import get_logger
from .models import AccountRecord, AccountSyncPlan

logger = get_logger("finance_dashboard.reconcile")


def _present(value: str | None) -> bool:
    return value is not None and value != ""


def _subtypes_compatible(candidate: str | None, stored: str | None) -> bool:
    if not _present(candidate) and not _present(stored):
        return True
    return _present(candidate) and _present(stored) and candidate == stored


def is_match(candidate: AccountRecord, stored: AccountRecord) -> bool:
    """Return ``True`` when ``stored`` is the same account as ``candidate``."""

    return (
        _present(candidate.mask)
        and stored.mask == candidate.mask
        and stored.type == candidate.type
        and _subtypes_compatible(candidate.subtype, stored.subtype)
    )


def find_match(
    candidate: AccountRecord, stored_accounts: Iterable[AccountRecord]
) -> AccountRecord | None:
    """Return the first stored account matching ``candidate``, else ``None``.

    ``None`` is the normal "create a new account" outcome; this function does
    not raise.
    """

    if not _present(candidate.mask):
        return None
    for stored in stored_accounts:
        if is_match(candidate, stored):
            return stored
    return None


def plan_account_sync(
    fetched: Iterable[AccountRecord], stored: Sequence[AccountRecord]
) -> AccountSyncPlan:
    """Split ``fetched`` into accounts matching a stored one and new accounts.

    Each fetched account is matched independently against the full stored
    list, in fetched order.
    """

    matched: list[tuple[AccountRecord, AccountRecord]] = []
    new: list[AccountRecord] = []
    for acct in fetched:
        hit = find_match(acct, stored)
        if hit is None:
            logger.debug("No stored match for %s (%s)", acct.name, acct.mask)
            new.append(acct)
        else:
            logger.debug("Matched %s (%s) to stored account %s", acct.name, acct.mask, hit.id)
            matched.append((acct, hit))
    logger.info("Account sync plan: %d matched, %d new", len(matched), len(new))
    return AccountSyncPlan(matched=tuple(matched), new=tuple(new))


def format_logo_url(
    logo: str | None,
    institution_id: str,
    fallbacks: Mapping[str, str] | None = None,
) -> str | None:
    """Return a displayable logo URL for an institution.

    The provider logo wins: ``data:`` and ``http(s)`` URLs pass through, any
    other value is taken as base64 PNG data. Without a provider logo the
    ``fallbacks`` entry for ``institution_id`` is used, if any.
    """

    if logo is not None and logo != "":
        if logo.startswith("data:") or logo.startswith("http"):
            return logo
        return f"data:image/png;base64,{logo}"
    if fallbacks is None:
        return None
    return fallbacks.get(institution_id)


__all__ = ["is_match", "find_match", "plan_account_sync", "format_logo_url"]
