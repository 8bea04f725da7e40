"""Pure transitions over :class:`~finance_dashboard.models.FilterCriteria`.

UI event handlers call these to obtain a new criteria value instead of
mutating shared filter state.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace
from datetime import date

from .models import DateMode, FilterCriteria, FilterDimension


def toggle_value(
    criteria: FilterCriteria, dimension: FilterDimension | str, value: str
) -> FilterCriteria:
    """Checkbox behavior: add ``value`` to the allow-set, or remove it if present."""

    dim = FilterDimension(dimension)
    current = criteria.allow_set(dim)
    updated = current - {value} if value in current else current | {value}
    return replace(criteria, **{dim.value: updated})


def toggle_all(
    criteria: FilterCriteria, dimension: FilterDimension | str, universe: Iterable[str]
) -> FilterCriteria:
    """The "All" checkbox.

    When every value of ``universe`` is already selected the allow-set is
    cleared (which means unrestricted); otherwise it becomes the universe.
    """

    dim = FilterDimension(dimension)
    everything = frozenset(universe)
    if criteria.allow_set(dim) == everything:
        return replace(criteria, **{dim.value: frozenset()})
    return replace(criteria, **{dim.value: everything})


def with_date_mode(
    criteria: FilterCriteria,
    mode: DateMode | str,
    *,
    month: int | None = None,
    year: int | None = None,
) -> FilterCriteria:
    """Switch the date mode; ``month``/``year`` are kept only for ``month`` mode."""

    mode = DateMode(mode)
    if mode is DateMode.MONTH:
        return replace(criteria, date_mode=mode, month=month, year=year)
    return replace(criteria, date_mode=mode, month=None, year=None)


def with_bounds(
    criteria: FilterCriteria, *, start_date: date | None, end_date: date | None
) -> FilterCriteria:
    return replace(criteria, start_date=start_date, end_date=end_date)


__all__ = ["toggle_value", "toggle_all", "with_date_mode", "with_bounds"]
