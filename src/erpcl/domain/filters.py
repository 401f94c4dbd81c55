"""Client-side search and filter predicates shared by the list services."""

from datetime import date
from typing import Callable, Iterable, Optional, TypeVar

T = TypeVar("T")


def matches_search(search: Optional[str], *fields: Optional[str]) -> bool:
    """Case-insensitive substring match against any of ``fields``.

    An empty or missing search term matches everything.
    """
    if not search:
        return True
    needle = search.strip().lower()
    return any(needle in (value or "").lower() for value in fields)


def in_date_range(
    value: Optional[date], start_date: Optional[date], end_date: Optional[date]
) -> bool:
    """Inclusive date range check. Open bounds always match.

    A record without a date only matches when no bound is given.
    """
    if start_date is None and end_date is None:
        return True
    if value is None:
        return False
    if start_date is not None and value < start_date:
        return False
    if end_date is not None and value > end_date:
        return False
    return True


def matches_value(wanted, actual) -> bool:
    """Equality filter where None means 'any'."""
    return wanted is None or wanted == actual


def apply(records: Iterable[T], predicate: Callable[[T], bool]) -> tuple[T, ...]:
    return tuple(record for record in records if predicate(record))
