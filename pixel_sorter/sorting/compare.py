"""Comparison functions used to order the elements being sorted."""

from __future__ import annotations

from math import isnan
from typing import TYPE_CHECKING, Any, Callable, TypeVar

if TYPE_CHECKING:
    from collections.abc import Sequence

T = TypeVar("T")

Comparator = Callable[[T, T], int]
"""Returns a negative number, zero or a positive number (a < b, a == b, a > b)."""

KeyFunction = Callable[[T], Any]


def compare_number(a: float, b: float, /) -> int:
    """Compare two numbers with a total order.

    NaN is treated as greater than every other number and equal to itself, so
    NaN keys always sort last in ascending order.
    """
    a_nan, b_nan = isnan(a), isnan(b)
    if a_nan or b_nan:
        return int(a_nan) - int(b_nan)

    return int(a > b) - int(a < b)


def descending(compare: Comparator[T], /) -> Comparator[T]:
    """Reverse a comparator. Equal elements stay equal, so stability is kept."""

    def _descending(a: T, b: T, /) -> int:
        return compare(b, a)

    return _descending


def by_key(
    key: KeyFunction[T],
    /,
    compare: Comparator[Any] = compare_number,
) -> Comparator[T]:
    """Build a comparator which compares the keys derived from each element."""

    def _by_key(a: T, b: T, /) -> int:
        return compare(key(a), key(b))

    return _by_key


def then_by(primary: Comparator[T], *tie_breakers: Comparator[T]) -> Comparator[T]:
    """Chain comparators; each tie breaker is only consulted when all before it tie."""

    def _then_by(a: T, b: T, /) -> int:
        for compare in (primary, *tie_breakers):
            if (result := compare(a, b)) != 0:
                return result

        return 0

    return _then_by


def is_sorted(list_: Sequence[T], compare: Comparator[T], /) -> bool:
    """Return whether the sequence is non-decreasing under the comparator."""
    return all(compare(list_[i], list_[i + 1]) <= 0 for i in range(len(list_) - 1))


__all__ = [
    "Comparator",
    "KeyFunction",
    "by_key",
    "compare_number",
    "descending",
    "is_sorted",
    "then_by",
]
