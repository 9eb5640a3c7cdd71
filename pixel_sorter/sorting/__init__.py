from __future__ import annotations

from .algorithms import ConfigurationError, InvalidKeyError, SortingAlgorithm, sort
from .compare import by_key, compare_number, descending, is_sorted, then_by
from .config import Direction, RunConfiguration
from .controller import (
    InvalidTransitionError,
    PixelSorter,
    SortRun,
    SortState,
    StopType,
)
from .operations import (
    RAW_PRIMITIVES,
    IndexOutOfRangeError,
    Operation,
    OperationCounter,
    OperationType,
    Primitives,
    SortError,
    copy_from_list,
    exchange,
    swap_out,
)

__all__ = [
    "RAW_PRIMITIVES",
    "ConfigurationError",
    "Direction",
    "IndexOutOfRangeError",
    "InvalidKeyError",
    "InvalidTransitionError",
    "Operation",
    "OperationCounter",
    "OperationType",
    "PixelSorter",
    "Primitives",
    "RunConfiguration",
    "SortError",
    "SortRun",
    "SortState",
    "SortingAlgorithm",
    "StopType",
    "by_key",
    "compare_number",
    "copy_from_list",
    "descending",
    "exchange",
    "is_sorted",
    "sort",
    "swap_out",
    "then_by",
]
