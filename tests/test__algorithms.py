"""Unit tests for the sorting algorithms."""

from __future__ import annotations

from collections import Counter
from math import isnan, nan
from typing import Any

import pytest
from numpy.random import default_rng
from pixel_sorter.sorting.algorithms import (
    ConfigurationError,
    InvalidKeyError,
    SortingAlgorithm,
    sort,
)
from pixel_sorter.sorting.compare import compare_number, descending, is_sorted
from pixel_sorter.sorting.operations import (
    RAW_PRIMITIVES,
    OperationCounter,
    OperationType,
    Primitives,
)

KEY_RANGE = 100

DETERMINISTIC = [
    algorithm for algorithm in SortingAlgorithm if algorithm is not SortingAlgorithm.BOGO_SORT
]
STABLE = [algorithm for algorithm in SortingAlgorithm if algorithm.is_stable]


def _val(item: dict[str, Any]) -> Any:
    return item["val"]


def _compare_val(a: dict[str, Any], b: dict[str, Any]) -> int:
    return compare_number(a["val"], b["val"])


def _sort(
    algorithm: SortingAlgorithm,
    list_: list[Any],
    *,
    reverse: bool = False,
    primitives: Primitives = RAW_PRIMITIVES,
) -> list[Any]:
    if algorithm.is_distribution:
        return sort(  # type: ignore[return-value]
            algorithm,
            list_,
            primitives,
            key=_val,
            key_range=KEY_RANGE,
            reverse=reverse,
        )

    return sort(  # type: ignore[return-value]
        algorithm,
        list_,
        primitives,
        compare=descending(_compare_val) if reverse else _compare_val,
        rng=default_rng(0),
    )


@pytest.mark.parametrize("algorithm", DETERMINISTIC, ids=str)
def test_sorts(algorithm: SortingAlgorithm, rands: list[dict[str, Any]]) -> None:
    """Test that each algorithm sorts, in place, into a permutation of its input."""
    list_ = list(rands)

    result = _sort(algorithm, list_)

    assert result is list_
    assert [_val(item) for item in list_] == sorted(_val(item) for item in rands)
    assert Counter(item["id"] for item in list_) == Counter(item["id"] for item in rands)


@pytest.mark.parametrize("algorithm", DETERMINISTIC, ids=str)
def test_sorts_descending(algorithm: SortingAlgorithm, rands: list[dict[str, Any]]) -> None:
    """Test that each algorithm can produce a non-increasing sequence."""
    list_ = list(rands)

    _sort(algorithm, list_, reverse=True)

    assert [_val(item) for item in list_] == sorted((_val(item) for item in rands), reverse=True)


@pytest.mark.parametrize("algorithm", STABLE, ids=str)
def test_stable_with_duplicate_keys(algorithm: SortingAlgorithm) -> None:
    """Test that equal keys keep their relative input order."""
    list_ = [{"val": 2, "id": "a"}, {"val": 1, "id": "b"}, {"val": 2, "id": "c"}]

    _sort(algorithm, list_)

    assert [item["id"] for item in list_] == ["b", "a", "c"]


@pytest.mark.parametrize("algorithm", STABLE, ids=str)
@pytest.mark.parametrize("reverse", [False, True], ids=["ascending", "descending"])
def test_stable_random(
    algorithm: SortingAlgorithm,
    reverse: bool,  # noqa: FBT001
    rands: list[dict[str, Any]],
) -> None:
    """Test stability against Python's (stable) built-in sort."""
    list_ = list(rands)

    _sort(algorithm, list_, reverse=reverse)

    assert [item["id"] for item in list_] == [
        item["id"] for item in sorted(rands, key=_val, reverse=reverse)
    ]


@pytest.mark.parametrize(
    "algorithm",
    [algorithm for algorithm in SortingAlgorithm if algorithm is not SortingAlgorithm.HEAP_SORT],
    ids=str,
)
@pytest.mark.parametrize(
    "vals",
    [
        pytest.param(list(range(0, 60, 3)), id="distinct keys"),
        pytest.param([1, 1, 2, 2], id="pairs of equal keys"),
        pytest.param([0, 4, 4, 4, 7, 9, 9, 12, 12, 12, 12, 50], id="runs of equal keys"),
        pytest.param([5] * 6, id="all equal keys"),
    ],
)
def test_already_sorted_is_untouched(
    algorithm: SortingAlgorithm,
    vals: list[int],
    counter: OperationCounter,
) -> None:
    """Test that sorting a sorted sequence doesn't move anything, even with ties.

    Heap sort is excluded: building the heap necessarily reorders a sorted sequence.
    """
    list_ = [{"val": val, "id": idx} for idx, val in enumerate(vals)]
    expected = list(list_)

    _sort(algorithm, list_, primitives=RAW_PRIMITIVES.instrumented(counter))

    assert list_ == expected
    assert counter.effective == 0


@pytest.mark.parametrize("algorithm", list(SortingAlgorithm), ids=str)
@pytest.mark.parametrize(
    "list_",
    [
        pytest.param([], id="empty"),
        pytest.param([{"val": 7, "id": 0}], id="single"),
        pytest.param([{"val": 7, "id": 0}, {"val": 7, "id": 1}], id="two equal"),
        pytest.param([{"val": 9, "id": 0}, {"val": 1, "id": 1}], id="two reversed"),
    ],
)
def test_small_inputs(algorithm: SortingAlgorithm, list_: list[dict[str, Any]]) -> None:
    """Test degenerate input sizes."""
    original = list(list_)

    _sort(algorithm, list_)

    assert len(list_) == len(original)
    assert is_sorted(list_, _compare_val)


def test_selection_sort_exchange_count(counter: OperationCounter) -> None:
    """Test that selection sort exchanges exactly once per position but the last."""
    list_ = [5, 3, 1, 4, 2]

    sort(
        SortingAlgorithm.SELECTION_SORT,
        list_,
        RAW_PRIMITIVES.instrumented(counter),
        compare=compare_number,
    )

    assert list_ == [1, 2, 3, 4, 5]
    assert counter[OperationType.EXCHANGE] == 4
    assert counter.total == 4


@pytest.mark.parametrize(
    ("algorithm", "kinds"),
    [
        pytest.param(SortingAlgorithm.CYCLE_SORT, {OperationType.SWAP_OUT}, id="cycle"),
        pytest.param(SortingAlgorithm.INSERTION_SORT, {OperationType.EXCHANGE}, id="insertion"),
        pytest.param(SortingAlgorithm.HEAP_SORT, {OperationType.EXCHANGE}, id="heap"),
        pytest.param(SortingAlgorithm.QUICK_SORT, {OperationType.EXCHANGE}, id="quick"),
        pytest.param(SortingAlgorithm.MERGE_SORT, {OperationType.COPY}, id="merge"),
        pytest.param(SortingAlgorithm.COUNTING_SORT, {OperationType.COPY}, id="counting"),
        pytest.param(SortingAlgorithm.RADIX_SORT, {OperationType.COPY}, id="radix"),
    ],
)
def test_primitives_used(
    algorithm: SortingAlgorithm,
    kinds: set[OperationType],
    rands: list[dict[str, Any]],
    counter: OperationCounter,
) -> None:
    """Test that each algorithm moves elements with the expected primitive(s)."""
    _sort(algorithm, list(rands), primitives=RAW_PRIMITIVES.instrumented(counter))

    assert set(counter.operations) == kinds


def test_every_step_is_one_operation(rands: list[dict[str, Any]]) -> None:
    """Test that the stepper yields exactly the operations the primitives performed."""
    seen: list[Any] = []
    list_ = list(rands)

    steps = list(
        SortingAlgorithm.SHELL_SORT(
            RAW_PRIMITIVES.instrumented(seen.append),
            list_,
            compare=_compare_val,
        ),
    )

    assert steps == seen
    assert is_sorted(list_, _compare_val)


def test_radix_sort_decimals(rand_floats: list[dict[str, Any]]) -> None:
    """Test that radix sort handles fractional keys."""
    list_ = list(rand_floats)

    _sort(SortingAlgorithm.RADIX_SORT, list_)

    assert [_val(item) for item in list_] == sorted(_val(item) for item in rand_floats)


def test_radix_sort_large_integers() -> None:
    """Test that keys with more digits than the base are fully sorted."""
    values = [{"val": val, "id": idx} for idx, val in enumerate([907, 15, 300, 8, 15, 999, 42])]

    sort(SortingAlgorithm.RADIX_SORT, values, key=_val, key_range=1000)

    assert [_val(item) for item in values] == [8, 15, 15, 42, 300, 907, 999]
    assert [item["id"] for item in values][1:3] == [1, 4]


@pytest.mark.parametrize(
    ("algorithm", "val"),
    [
        pytest.param(SortingAlgorithm.COUNTING_SORT, 2.5, id="counting fractional"),
        pytest.param(SortingAlgorithm.COUNTING_SORT, KEY_RANGE, id="counting too large"),
        pytest.param(SortingAlgorithm.COUNTING_SORT, -1, id="counting negative"),
        pytest.param(SortingAlgorithm.RADIX_SORT, KEY_RANGE + 0.5, id="radix too large"),
        pytest.param(SortingAlgorithm.RADIX_SORT, -0.5, id="radix negative"),
        pytest.param(SortingAlgorithm.RADIX_SORT, nan, id="radix nan"),
    ],
)
def test_invalid_keys(algorithm: SortingAlgorithm, val: float) -> None:
    """Test that keys which can't be bucketed are rejected before anything is moved."""
    list_ = [{"val": 1, "id": 0}, {"val": val, "id": 1}]
    counter = OperationCounter()

    with pytest.raises(InvalidKeyError):
        _sort(algorithm, list_, primitives=RAW_PRIMITIVES.instrumented(counter))

    assert counter.total == 0


def test_counting_sort_accepts_integral_floats() -> None:
    """Test that float keys with no fractional part are bucketed."""
    list_ = [{"val": 3.0, "id": 0}, {"val": 1.0, "id": 1}]

    _sort(SortingAlgorithm.COUNTING_SORT, list_)

    assert [item["id"] for item in list_] == [1, 0]


def test_nan_sorts_last() -> None:
    """Test that NaN keys end up at the end under the default comparator."""
    list_ = [3.0, nan, 1.0, 2.0]

    sort(SortingAlgorithm.INSERTION_SORT, list_, compare=compare_number)

    assert list_[:3] == [1.0, 2.0, 3.0]
    assert isnan(list_[3])


def test_bogo_sort() -> None:
    """Test that bogo sort eventually sorts a short list."""
    list_ = [4, 2, 3, 1, 0]

    sort(SortingAlgorithm.BOGO_SORT, list_, compare=compare_number, rng=default_rng(7))

    assert list_ == [0, 1, 2, 3, 4]


@pytest.mark.parametrize(
    ("algorithm", "kwargs"),
    [
        pytest.param(SortingAlgorithm.QUICK_SORT, {}, id="comparison without comparator"),
        pytest.param(SortingAlgorithm.RADIX_SORT, {"key": _val}, id="distribution without range"),
        pytest.param(
            SortingAlgorithm.COUNTING_SORT,
            {"key_range": KEY_RANGE},
            id="distribution without key",
        ),
        pytest.param(
            SortingAlgorithm.COUNTING_SORT,
            {"key": _val, "key_range": 0},
            id="empty key range",
        ),
    ],
)
def test_missing_configuration(algorithm: SortingAlgorithm, kwargs: dict[str, Any]) -> None:
    """Test that algorithms refuse to start without what they need."""
    with pytest.raises(ConfigurationError):
        algorithm(RAW_PRIMITIVES, [], **kwargs)


def test_stability_flags() -> None:
    """Test which algorithms claim to be stable."""
    assert {algorithm for algorithm in SortingAlgorithm if algorithm.is_stable} == {
        SortingAlgorithm.INSERTION_SORT,
        SortingAlgorithm.BUBBLE_SORT,
        SortingAlgorithm.COCKTAIL_SORT,
        SortingAlgorithm.MERGE_SORT,
        SortingAlgorithm.COUNTING_SORT,
        SortingAlgorithm.RADIX_SORT,
    }
