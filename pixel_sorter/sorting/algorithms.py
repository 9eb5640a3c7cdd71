"""Sorting algorithms, written purely in terms of the primitive operations.

Each algorithm is a generator: it yields the `Operation` returned by every primitive
call, immediately after making it. One step of the generator is therefore exactly one
primitive operation, and the generator can be suspended (or abandoned) between any two
of them without leaving the sequence or the algorithm's indices inconsistent.
"""

from __future__ import annotations

from enum import StrEnum, auto
from math import floor
from operator import index
from typing import TYPE_CHECKING, Any, ClassVar, Generator, TypeVar

from pixel_sorter.utils import const
from wg_utilities.loggers import get_streaming_logger

from .compare import is_sorted
from .operations import RAW_PRIMITIVES, SortError

if TYPE_CHECKING:
    import numpy as np

    from .compare import Comparator, KeyFunction
    from .operations import MutableList, Operation, Primitives

LOGGER = get_streaming_logger(__name__)

T = TypeVar("T")

Stepper = Generator["Operation", None, None]


class ConfigurationError(SortError, ValueError):
    """Raised when an algorithm is invoked without what it needs to run."""


class InvalidKeyError(SortError, ValueError):
    """Raised when a distribution sort is given a key it cannot bucket."""

    def __init__(self, key: Any, *, key_range: int, reason: str) -> None:
        self.key = key
        self.key_range = key_range

        super().__init__(f"Invalid key {key!r} for key range [0, {key_range}): {reason}")


def _integral_key(key: Any, key_range: int) -> int:
    """Convert a key to an int bucket in [0, key_range), or raise."""
    try:
        bucket = index(key)
    except TypeError:
        if not (isinstance(key, float) and key.is_integer()):
            raise InvalidKeyError(key, key_range=key_range, reason="not an integer") from None

        bucket = int(key)

    if not 0 <= bucket < key_range:
        raise InvalidKeyError(key, key_range=key_range, reason="out of range")

    return bucket


def _fixed_point_keys(keys: list[Any], key_range: int) -> tuple[list[int], int]:
    """Convert keys to non-negative ints, using fixed point if any key is fractional.

    Returns the converted keys and the scale that was applied (1 for integral keys).
    """
    for key in keys:
        if not 0 <= key < key_range:
            raise InvalidKeyError(key, key_range=key_range, reason="out of range")

    try:
        return [index(key) for key in keys], 1
    except TypeError:
        pass

    scale = 10**const.RADIX_FRACTIONAL_DIGITS
    return [floor(key * scale) for key in keys], scale


def _sift_down(
    primitives: Primitives,
    compare: Comparator[T],
    list_: MutableList[T],
    /,
    root: int,
    end: int,
) -> Stepper:
    """Move `list_[root]` down the max-heap occupying `list_[:end]`."""
    while (child := 2 * root + 1) < end:
        if child + 1 < end and compare(list_[child], list_[child + 1]) < 0:
            child += 1

        if compare(list_[root], list_[child]) >= 0:
            return

        yield primitives.exchange(list_, root, child)
        root = child


def _merge(
    primitives: Primitives,
    compare: Comparator[T],
    list_: MutableList[T],
    /,
    l: int,  # noqa: E741
    m: int,
    r: int,
) -> Stepper:
    """Merges two adjacent sorted runs of the list back into the list.

    The first run is list_[l..m)
    The second run is list_[m..r)

    Ties are taken from the left run, which keeps the merge stable. Once the left run
    is exhausted, the rest of the right run is already in position and isn't rewritten.
    """
    left = [list_[l + i] for i in range(m - l)]
    right = [list_[m + i] for i in range(r - m)]

    i, j, k = 0, 0, l

    while i < len(left) and j < len(right):
        if compare(left[i], right[j]) <= 0:
            value = left[i]
            i += 1
        else:
            value = right[j]
            j += 1

        yield primitives.copy_from_list(list_, k, value)
        k += 1

    while i < len(left):
        yield primitives.copy_from_list(list_, k, left[i])
        k += 1
        i += 1


# =============================================================================
# Algorithm Implementations


class SortingAlgorithm(StrEnum):
    """Enumeration of sorting algorithms."""

    BOGO_SORT = auto()
    SELECTION_SORT = auto()
    CYCLE_SORT = auto()
    INSERTION_SORT = auto()
    BUBBLE_SORT = auto()
    COCKTAIL_SORT = auto()
    COMB_SORT = auto()
    SHELL_SORT = auto()
    HEAP_SORT = auto()
    MERGE_SORT = auto()
    QUICK_SORT = auto()
    COUNTING_SORT = auto()
    RADIX_SORT = auto()

    _DISTRIBUTION: ClassVar[frozenset[str]]
    _STABLE: ClassVar[frozenset[str]]

    def __call__(
        self,
        primitives: Primitives,
        list_: MutableList[T],
        /,
        *,
        compare: Comparator[T] | None = None,
        key: KeyFunction[T] | None = None,
        key_range: int | None = None,
        reverse: bool = False,
        rng: np.random.Generator | None = None,
    ) -> Stepper:
        """Return the stepper for this algorithm.

        Comparison sorts need `compare` (and sort ascending under it); distribution sorts
        need `key` and `key_range`, and honour `reverse` themselves.
        """
        if self.is_distribution:
            if key is None or key_range is None:
                raise ConfigurationError(f"{self} requires a key function and a key range")

            if key_range < 1:
                raise ConfigurationError(f"Key range must be positive, got {key_range}")

            return getattr(self, self)(key_range, primitives, key, list_, reverse=reverse)  # type: ignore[no-any-return]

        if compare is None:
            raise ConfigurationError(f"{self} requires a comparator")

        if self is SortingAlgorithm.BOGO_SORT:
            return self.bogo_sort(primitives, compare, list_, rng=rng)

        return getattr(self, self)(primitives, compare, list_)  # type: ignore[no-any-return]

    @property
    def is_distribution(self) -> bool:
        """Whether this is a non-comparison sort, driven by a key and key range."""
        return self in self._DISTRIBUTION

    @property
    def is_stable(self) -> bool:
        """Whether elements with equal keys keep their relative input order."""
        return self in self._STABLE

    @staticmethod
    def bogo_sort(
        primitives: Primitives,
        compare: Comparator[T],
        list_: MutableList[T],
        *,
        rng: np.random.Generator | None = None,
    ) -> Stepper:
        """Shuffle the list until a full scan confirms it's sorted.

        Only terminates with probability 1, so keep lists very short.
        """
        rng = rng or const.RNG
        shuffles = 0

        while not is_sorted(list_, compare):
            for i in range(len(list_) - 1, 0, -1):
                yield primitives.exchange(list_, i, int(rng.integers(0, i + 1)))

            shuffles += 1

        LOGGER.debug("Bogo sort finished after %i shuffles", shuffles)

    @staticmethod
    def selection_sort(
        primitives: Primitives,
        compare: Comparator[T],
        list_: MutableList[T],
    ) -> Stepper:
        """Swap the smallest remaining element into each position in turn.

        Every position up to the penultimate costs exactly one exchange, even if the
        element is already in place.
        """
        n = len(list_)
        for i in range(n - 1):
            min_idx = i
            for j in range(i + 1, n):
                if compare(list_[j], list_[min_idx]) < 0:
                    min_idx = j

            yield primitives.exchange(list_, i, min_idx)

    @staticmethod
    def cycle_sort(
        primitives: Primitives,
        compare: Comparator[T],
        list_: MutableList[T],
    ) -> Stepper:
        """Rotate each cycle of the permutation into place, writing each element once."""
        n = len(list_)
        for start in range(n - 1):
            item = list_[start]

            pos = start + sum(1 for i in range(start + 1, n) if compare(list_[i], item) < 0)
            if pos == start:
                continue

            while compare(item, list_[pos]) == 0:
                pos += 1

            operation = primitives.swap_out(list_, pos, item)
            item = operation.replaced
            yield operation

            while pos != start:
                pos = start + sum(
                    1 for i in range(start + 1, n) if compare(list_[i], item) < 0
                )

                while compare(item, list_[pos]) == 0:
                    pos += 1

                operation = primitives.swap_out(list_, pos, item)
                item = operation.replaced
                yield operation

    @staticmethod
    def insertion_sort(
        primitives: Primitives,
        compare: Comparator[T],
        list_: MutableList[T],
    ) -> Stepper:
        """Exchange each new element backwards until it's in place in the sorted prefix."""
        for i in range(1, len(list_)):
            j = i
            while j > 0 and compare(list_[j], list_[j - 1]) < 0:
                yield primitives.exchange(list_, j, j - 1)
                j -= 1

    @staticmethod
    def bubble_sort(
        primitives: Primitives,
        compare: Comparator[T],
        list_: MutableList[T],
    ) -> Stepper:
        """Swap adjacent elements which are out of order."""
        for iter_num in range(len(list_) - 1, 0, -1):
            swapped = False
            for idx in range(iter_num):
                if compare(list_[idx], list_[idx + 1]) > 0:
                    yield primitives.exchange(list_, idx, idx + 1)
                    swapped = True

            if not swapped:
                break

    @staticmethod
    def cocktail_sort(
        primitives: Primitives,
        compare: Comparator[T],
        list_: MutableList[T],
    ) -> Stepper:
        """Compare and swap adjacent elements in both directions."""
        start = 0
        end = len(list_) - 1
        swapped = True

        while swapped:
            swapped = False
            for i in range(start, end):
                if compare(list_[i], list_[i + 1]) > 0:
                    yield primitives.exchange(list_, i, i + 1)
                    swapped = True

            if not swapped:
                break

            swapped = False
            end -= 1
            for i in range(end - 1, start - 1, -1):
                if compare(list_[i], list_[i + 1]) > 0:
                    yield primitives.exchange(list_, i, i + 1)
                    swapped = True

            start += 1

    @staticmethod
    def comb_sort(
        primitives: Primitives,
        compare: Comparator[T],
        list_: MutableList[T],
    ) -> Stepper:
        """Compare and swap elements with a gap that shrinks by ~1.3 each pass."""
        n = len(list_)
        gap = n
        is_sorted_ = False

        while not is_sorted_:
            gap = int(gap / const.COMB_SHRINK_FACTOR)
            if gap <= 1:
                gap = 1
                is_sorted_ = True

            for i in range(n - gap):
                if compare(list_[i], list_[i + gap]) > 0:
                    yield primitives.exchange(list_, i, i + gap)
                    is_sorted_ = False

    @staticmethod
    def shell_sort(
        primitives: Primitives,
        compare: Comparator[T],
        list_: MutableList[T],
    ) -> Stepper:
        """Insertion sort over the gaps 1, 4, 13, 40, ... (largest first)."""
        n = len(list_)
        gap = 1
        while gap < n // 3:
            gap = 3 * gap + 1

        while gap >= 1:
            for i in range(gap, n):
                j = i
                while j >= gap and compare(list_[j], list_[j - gap]) < 0:
                    yield primitives.exchange(list_, j, j - gap)
                    j -= gap

            gap //= 3

    @staticmethod
    def heap_sort(
        primitives: Primitives,
        compare: Comparator[T],
        list_: MutableList[T],
    ) -> Stepper:
        """Build a max-heap in place, then repeatedly swap the root to the end."""
        n = len(list_)
        for start in range(n // 2 - 1, -1, -1):
            yield from _sift_down(primitives, compare, list_, start, n)

        for end in range(n - 1, 0, -1):
            yield primitives.exchange(list_, 0, end)
            yield from _sift_down(primitives, compare, list_, 0, end)

    @staticmethod
    def merge_sort(
        primitives: Primitives,
        compare: Comparator[T],
        list_: MutableList[T],
    ) -> Stepper:
        """Merge runs of doubling size, bottom-up."""
        n = len(list_)

        size = 1
        while size < n:
            for left in range(0, n, 2 * size):
                mid = min(n, left + size)
                right = min(n, left + 2 * size)

                if mid < right:
                    yield from _merge(primitives, compare, list_, left, mid, right)

            size *= 2

    @staticmethod
    def quick_sort(
        primitives: Primitives,
        compare: Comparator[T],
        list_: MutableList[T],
    ) -> Stepper:
        """Lomuto partitioning around the last element of each range.

        Elements equal to the pivot stay on its left, so a sorted range is left untouched.
        """
        ranges = [(0, len(list_) - 1)]

        while ranges:
            lo, hi = ranges.pop()
            if lo >= hi:
                continue

            pivot = list_[hi]
            i = lo
            for j in range(lo, hi):
                if compare(list_[j], pivot) <= 0:
                    yield primitives.exchange(list_, i, j)
                    i += 1

            yield primitives.exchange(list_, i, hi)

            ranges.append((i + 1, hi))
            ranges.append((lo, i - 1))

    @staticmethod
    def counting_sort(
        key_range: int,
        primitives: Primitives,
        key: KeyFunction[T],
        list_: MutableList[T],
        *,
        reverse: bool = False,
    ) -> Stepper:
        """Count each integer key, then copy every element straight to its final position."""
        values = [list_[i] for i in range(len(list_))]
        buckets = [_integral_key(key(value), key_range) for value in values]

        counts = [0] * key_range
        for bucket in buckets:
            counts[bucket] += 1

        positions = [0] * key_range
        total = 0
        for bucket in reversed(range(key_range)) if reverse else range(key_range):
            positions[bucket] = total
            total += counts[bucket]

        output: list[Any] = [None] * len(values)
        for value, bucket in zip(values, buckets, strict=True):
            output[positions[bucket]] = value
            positions[bucket] += 1

        for idx, value in enumerate(output):
            yield primitives.copy_from_list(list_, idx, value)

    @staticmethod
    def radix_sort(
        key_range: int,
        primitives: Primitives,
        key: KeyFunction[T],
        list_: MutableList[T],
        *,
        reverse: bool = False,
    ) -> Stepper:
        """Most-significant-digit radix sort, bucketing each range on one digit at a time.

        Every distribution keeps the relative order of its elements, so the sort is
        stable, and an already-sorted range is written back unchanged. Fractional keys are
        converted to fixed point with `const.RADIX_FRACTIONAL_DIGITS` decimal places, so
        keys that only differ beyond that precision keep their input order.
        """
        base = const.RADIX_BASE
        values = [list_[i] for i in range(len(list_))]
        fixed, scale = _fixed_point_keys([key(value) for value in values], key_range)

        largest = max(fixed, default=0)
        digits = 1
        while base**digits <= largest:
            digits += 1

        LOGGER.debug(
            "Radix sorting %i elements on %i digits (base=%i, scale=%i)",
            len(values),
            digits,
            base,
            scale,
        )

        pairs = list(zip(fixed, values, strict=True))
        ranges = [(0, len(pairs), digits - 1)]

        while ranges:
            lo, hi, digit = ranges.pop()
            divisor = base**digit

            buckets: list[list[tuple[int, Any]]] = [[] for _ in range(base)]
            for pair in pairs[lo:hi]:
                buckets[(pair[0] // divisor) % base].append(pair)

            if reverse:
                buckets.reverse()

            sub_ranges = []
            idx = lo
            for bucket in buckets:
                if digit > 0 and len(bucket) > 1:
                    sub_ranges.append((idx, idx + len(bucket), digit - 1))

                for pair in bucket:
                    pairs[idx] = pair
                    yield primitives.copy_from_list(list_, idx, pair[1])
                    idx += 1

            ranges.extend(reversed(sub_ranges))


SortingAlgorithm._DISTRIBUTION = frozenset(
    {SortingAlgorithm.COUNTING_SORT, SortingAlgorithm.RADIX_SORT},
)
SortingAlgorithm._STABLE = frozenset(
    {
        SortingAlgorithm.INSERTION_SORT,
        SortingAlgorithm.BUBBLE_SORT,
        SortingAlgorithm.COCKTAIL_SORT,
        SortingAlgorithm.MERGE_SORT,
        SortingAlgorithm.COUNTING_SORT,
        SortingAlgorithm.RADIX_SORT,
    },
)


def sort(
    algorithm: SortingAlgorithm,
    list_: MutableList[T],
    /,
    primitives: Primitives = RAW_PRIMITIVES,
    **kwargs: Any,
) -> MutableList[T]:
    """Run an algorithm to completion and return the (same, now sorted) list."""
    for _ in algorithm(primitives, list_, **kwargs):
        pass

    return list_


__all__ = [
    "ConfigurationError",
    "InvalidKeyError",
    "SortingAlgorithm",
    "Stepper",
    "sort",
]
