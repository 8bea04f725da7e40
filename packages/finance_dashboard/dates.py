"""Calendar helpers for transaction dates.

Transactions carry calendar dates only; time-of-day and timezone are
discarded when a timestamp is supplied.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Any

from .errors import DataError


def parse_transaction_date(value: Any) -> date:
    """Return ``value`` as a :class:`datetime.date` or raise :class:`DataError`.

    Accepts ``date`` and ``datetime`` instances and ISO strings
    (``YYYY-MM-DD``, optionally followed by ``T``/space and a time part).
    """

    # datetime is a date subclass; check it first to drop the time part.
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise DataError(f"invalid transaction date: {value!r}")
    s = value.strip()
    if not s:
        raise DataError("transaction date is empty")
    first = s.split()[0].split("T", 1)[0]
    try:
        return date.fromisoformat(first)
    except ValueError as exc:
        raise DataError(f"invalid transaction date: {value!r}") from exc


def previous_month_bounds(today: date) -> tuple[date, date]:
    """Return the first and last day of the calendar month before ``today``."""

    last = today.replace(day=1) - timedelta(days=1)
    return last.replace(day=1), last


__all__ = ["parse_transaction_date", "previous_month_bounds"]
