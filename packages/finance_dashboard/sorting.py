"""Stable multi-key sorting for the transactions table."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

from .models import SortKey, SortOrder, SortState, Transaction


def _sort_value(key: SortKey) -> Callable[[Transaction], Any]:
    if key is SortKey.DATE:
        return lambda tx: tx.date
    if key is SortKey.AMOUNT:
        return lambda tx: tx.amount
    attr = key.value

    def _text(tx: Transaction) -> str:
        value = getattr(tx, attr)
        return "" if value is None else str(value).lower()

    return _text


def sort_transactions(
    transactions: Iterable[Transaction],
    key: SortKey | str | None,
    order: SortOrder | str = SortOrder.ASC,
) -> list[Transaction]:
    """Return a new list sorted by ``key``.

    Dates and amounts compare by value; every other key compares
    case-insensitively as text with absent values as ``""``. The sort is
    stable in both directions: transactions with equal keys keep their input
    order. ``key=None`` returns the input order unchanged.
    """

    items = list(transactions)
    if key is None:
        return items
    # reverse=True keeps equal elements in their original relative order.
    return sorted(
        items,
        key=_sort_value(SortKey(key)),
        reverse=SortOrder(order) is SortOrder.DESC,
    )


def next_sort_state(state: SortState, key: SortKey | str) -> SortState:
    """Header-click transition: same key flips the order, a new key resets to ascending."""

    key = SortKey(key)
    if state.key is key:
        flipped = SortOrder.DESC if state.order is SortOrder.ASC else SortOrder.ASC
        return SortState(key=key, order=flipped)
    return SortState(key=key, order=SortOrder.ASC)


__all__ = ["sort_transactions", "next_sort_state"]
