"""Primitive operations: the only sanctioned ways to mutate a sequence under sort.

Algorithms never assign to a sequence position directly. Every change goes through
`exchange`, `copy_from_list` or `swap_out`, each of which returns an `Operation`
describing what happened. Instrumentation (counting, animation hooks) is layered on
top by wrapping the primitives, so the algorithms are unaware of it.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field, replace
from enum import StrEnum, auto
from functools import wraps
from typing import TYPE_CHECKING, Any, Callable, Protocol, TypeVar

import numpy as np

if TYPE_CHECKING:
    from .compare import Comparator

T = TypeVar("T")


class SortError(Exception):
    """Base class for all errors raised by the sorting engine."""


class IndexOutOfRangeError(SortError, IndexError):
    """Raised when a primitive is called with an index outside the sequence."""

    def __init__(self, *, kind: OperationType, index: int, length: int) -> None:
        self.kind = kind
        self.index = index
        self.length = length

        super().__init__(f"{kind} index {index} out of range for sequence of length {length}")


class MutableList(Protocol[T]):
    """Fixed-length, index-addressable, mutable sequence."""

    def __len__(self) -> int: ...

    def __getitem__(self, index: int, /) -> T: ...

    def __setitem__(self, index: int, value: T, /) -> None: ...


class OperationType(StrEnum):
    """Kinds of primitive operation."""

    EXCHANGE = auto()
    """Two positions swap their values."""

    COPY = auto()
    """One-way overwrite of a position with a value taken from elsewhere."""

    SWAP_OUT = auto()
    """A position is replaced with an external value; the old value is handed back."""


@dataclass(frozen=True, slots=True)
class Operation:
    """A single primitive operation, as applied to a sequence."""

    kind: OperationType
    indices: tuple[int, ...]
    values: tuple[Any, ...]
    """For exchanges, the values at each index before the swap. Otherwise (old, new)."""

    @property
    def replaced(self) -> Any:
        """The value that was at the (first) index before the operation."""
        return self.values[0]

    @property
    def is_noop(self) -> bool:
        """Whether the operation left the sequence unchanged."""
        if self.kind is OperationType.EXCHANGE:
            return self.indices[0] == self.indices[1]

        old, new = self.values
        if old is new:
            return True

        try:
            return bool(old == new)
        except ValueError:
            # Element-wise equality, e.g. between numpy arrays
            return bool(np.array_equal(old, new))


def _check_index(list_: MutableList[Any], index: int, kind: OperationType) -> None:
    if not 0 <= index < len(list_):
        raise IndexOutOfRangeError(kind=kind, index=index, length=len(list_))


def exchange(list_: MutableList[T], i: int, j: int, /) -> Operation:
    """Swap the elements at positions `i` and `j` in place."""
    _check_index(list_, i, OperationType.EXCHANGE)
    _check_index(list_, j, OperationType.EXCHANGE)

    value_i, value_j = list_[i], list_[j]

    if i != j:
        list_[i], list_[j] = value_j, value_i

    return Operation(OperationType.EXCHANGE, (i, j), (value_i, value_j))


def copy_from_list(list_: MutableList[T], i: int, value: T, /) -> Operation:
    """Overwrite position `i` with `value`."""
    _check_index(list_, i, OperationType.COPY)

    old = list_[i]
    list_[i] = value

    return Operation(OperationType.COPY, (i,), (old, value))


def swap_out(list_: MutableList[T], i: int, value: T, /) -> Operation:
    """Replace the element at `i` with `value`; the old element is `Operation.replaced`."""
    _check_index(list_, i, OperationType.SWAP_OUT)

    old = list_[i]
    list_[i] = value

    return Operation(OperationType.SWAP_OUT, (i,), (old, value))


Primitive = Callable[..., Operation]
OperationListener = Callable[[Operation], Any]


def instrument(primitive: Primitive, /, *listeners: OperationListener) -> Primitive:
    """Wrap a primitive so that every operation it performs is passed to each listener."""

    @wraps(primitive)
    def _instrumented(*args: Any) -> Operation:
        operation = primitive(*args)

        for listener in listeners:
            listener(operation)

        return operation

    return _instrumented


@dataclass(frozen=True, slots=True)
class Primitives:
    """The set of primitives handed to an algorithm."""

    exchange: Primitive = exchange
    copy_from_list: Primitive = copy_from_list
    swap_out: Primitive = swap_out

    def instrumented(self, *listeners: OperationListener) -> Primitives:
        """Return a copy of these primitives with each one wrapped by `instrument`."""
        if not listeners:
            return self

        return replace(
            self,
            exchange=instrument(self.exchange, *listeners),
            copy_from_list=instrument(self.copy_from_list, *listeners),
            swap_out=instrument(self.swap_out, *listeners),
        )


RAW_PRIMITIVES = Primitives()


@dataclass(slots=True)
class OperationCounter:
    """Operation listener which tallies operations (and optionally comparisons)."""

    operations: Counter[OperationType] = field(default_factory=Counter)
    noops: Counter[OperationType] = field(default_factory=Counter)
    comparisons: int = 0

    def __call__(self, operation: Operation, /) -> None:
        """Record an operation."""
        self.operations[operation.kind] += 1

        if operation.is_noop:
            self.noops[operation.kind] += 1

    def count_comparisons(self, compare: Comparator[T], /) -> Comparator[T]:
        """Wrap a comparator so that each call increments `comparisons`."""

        @wraps(compare)
        def _counted(a: T, b: T, /) -> int:
            self.comparisons += 1
            return compare(a, b)

        return _counted

    @property
    def total(self) -> int:
        """Total number of primitive operations."""
        return sum(self.operations.values())

    @property
    def effective(self) -> int:
        """Number of primitive operations which actually changed the sequence."""
        return self.total - sum(self.noops.values())

    def __getitem__(self, kind: OperationType) -> int:
        """Return the number of operations of the given kind."""
        return self.operations[kind]

    def __json__(self) -> dict[str, Any]:
        """Return the JSON representation of the counter."""
        return {
            "operations": {str(kind): count for kind, count in self.operations.items()},
            "noops": {str(kind): count for kind, count in self.noops.items()},
            "comparisons": self.comparisons,
        }


__all__ = [
    "RAW_PRIMITIVES",
    "IndexOutOfRangeError",
    "MutableList",
    "Operation",
    "OperationCounter",
    "OperationListener",
    "OperationType",
    "Primitives",
    "SortError",
    "copy_from_list",
    "exchange",
    "instrument",
    "swap_out",
]
