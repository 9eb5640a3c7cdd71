"""The sort controller: drives an algorithm's stepper incrementally.

Execution is cooperative and single-threaded. The host pulls frames of operations from a
`SortRun` (e.g. once per rendered frame) and is free to pause, resume or stop between any
two steps. A single `PixelSorter` must only ever be driven by one thread at a time.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, StrEnum, auto
from logging import DEBUG
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Iterator,
    Protocol,
    runtime_checkable,
)

import numpy as np
from pixel_sorter.utils import const
from wg_utilities.loggers import get_streaming_logger

from .compare import descending
from .operations import RAW_PRIMITIVES, OperationCounter, SortError

if TYPE_CHECKING:
    from .algorithms import Stepper
    from .compare import Comparator, KeyFunction
    from .config import RunConfiguration
    from .operations import MutableList, Operation, OperationListener

LOGGER = get_streaming_logger(__name__)

if const.DEBUG_MODE:
    LOGGER.setLevel(DEBUG)


class SortState(StrEnum):
    """State of a `PixelSorter`."""

    NOT_RUNNING = auto()
    RUNNING = auto()
    PAUSED = auto()


class StopType(Enum):
    """Why a run ended."""

    COMPLETE = auto()
    """The algorithm ran to completion."""

    CANCEL = auto()
    """The run was stopped via `PixelSorter.stop`."""

    ERROR = auto()
    """The algorithm raised an exception, e.g. an out-of-range primitive call."""


class InvalidTransitionError(SortError, RuntimeError):
    """Raised when a controller action isn't valid in the current state."""

    def __init__(self, action: str, state: SortState) -> None:
        self.action = action
        self.state = state

        super().__init__(f"Cannot {action} while {state}")


@runtime_checkable
class Lockable(Protocol):
    """A sequence which can refuse outside writes whilst it's borrowed for a run."""

    def lock(self) -> None: ...

    def unlock(self) -> None: ...


@dataclass(slots=True, eq=False)
class SortRun:
    """Handle for a single run of a `PixelSorter`.

    Iterating over the handle drives the run, yielding one tuple of operations per frame.
    Iteration ends when the run is paused, stopped or complete; after `resume()` the same
    handle can be iterated again.
    """

    sorter: PixelSorter = field(repr=False)
    config: RunConfiguration

    counter: OperationCounter = field(default_factory=OperationCounter)
    stop_reason: StopType | None = field(default=None, init=False)
    error: Exception | None = field(default=None, init=False, repr=False)

    _callbacks: list[Callable[[SortRun], Any]] = field(
        default_factory=list,
        init=False,
        repr=False,
    )

    @property
    def done(self) -> bool:
        """Whether the run has ended (for whatever reason)."""
        return self.stop_reason is not None

    def add_done_callback(self, callback: Callable[[SortRun], Any], /) -> None:
        """Call `callback` with this run once it ends (immediately if it already has)."""
        if self.done:
            callback(self)
        else:
            self._callbacks.append(callback)

    def frames(self, steps_per_frame: int | None = None) -> Iterator[tuple[Operation, ...]]:
        """Drive the run, yielding the operations applied in each frame."""
        steps = steps_per_frame or self.sorter.steps_per_frame

        while self.sorter.active_run is self and self.sorter.state is SortState.RUNNING:
            if frame := self.sorter.advance(steps):
                yield frame

    def wait(self) -> StopType | None:
        """Drive the run until it's paused or has ended; return the stop reason, if any."""
        for _ in self.frames():
            pass

        return self.stop_reason

    def _finish(self, stop_reason: StopType, error: Exception | None = None) -> None:
        self.stop_reason = stop_reason
        self.error = error

        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback(self)

    def __iter__(self) -> Iterator[tuple[Operation, ...]]:
        """Iterate over the frames."""
        return self.frames()


@dataclass(kw_only=True, slots=True)
class PixelSorter:
    """Runs sorting algorithms against a borrowed sequence, one operation at a time."""

    steps_per_frame: int = const.STEPS_PER_FRAME
    """The default number of operations applied per frame."""

    listeners: list[OperationListener] = field(default_factory=list)
    """Extra observers which receive every operation as it's applied."""

    _state: SortState = field(default=SortState.NOT_RUNNING, init=False)
    _stepper: Stepper | None = field(default=None, init=False, repr=False)
    _sequence: MutableList[Any] | None = field(default=None, init=False, repr=False)
    _run: SortRun | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        """Validate the frame size."""
        if self.steps_per_frame < 1:
            raise ValueError(f"steps_per_frame must be positive, got {self.steps_per_frame}")

    @property
    def state(self) -> SortState:
        """Return the state of the sorter."""
        return self._state

    @property
    def active_run(self) -> SortRun | None:
        """Return the current run, if there is one."""
        return self._run

    @property
    def sequence(self) -> MutableList[Any] | None:
        """Return the sequence currently borrowed for a run, if there is one."""
        return self._sequence

    def run(
        self,
        compare: Comparator[Any] | None,
        sequence: MutableList[Any],
        config: RunConfiguration,
        *,
        key: KeyFunction[Any] | None = None,
    ) -> SortRun:
        """Start sorting `sequence` in place.

        Comparison sorts order by `compare`; distribution sorts need `key` (and the
        config's `key_range`) instead. Nothing is applied until the run is driven.
        """
        if self._state is not SortState.NOT_RUNNING:
            raise InvalidTransitionError("run", self._state)

        sort_run = SortRun(sorter=self, config=config)
        primitives = RAW_PRIMITIVES.instrumented(sort_run.counter, *self.listeners)
        reverse = config.direction.reverse

        if config.algorithm.is_distribution:
            stepper = config.algorithm(
                primitives,
                sequence,
                key=key,
                key_range=config.key_range,
                reverse=reverse,
            )
        else:
            if compare is not None:
                compare = sort_run.counter.count_comparisons(
                    descending(compare) if reverse else compare,
                )

            stepper = config.algorithm(
                primitives,
                sequence,
                compare=compare,
                rng=None if config.seed is None else np.random.default_rng(config.seed),
            )

        if isinstance(sequence, Lockable):
            sequence.lock()

        self._stepper = stepper
        self._sequence = sequence
        self._run = sort_run
        self._state = SortState.RUNNING

        LOGGER.info(
            "Started %s (%s) on %i elements",
            config.algorithm,
            config.direction,
            len(sequence),
        )

        return sort_run

    def pause(self) -> None:
        """Suspend the run after the current step."""
        if self._state is not SortState.RUNNING:
            raise InvalidTransitionError("pause", self._state)

        self._state = SortState.PAUSED
        LOGGER.debug("Paused %r", self._run)

    def resume(self) -> SortRun:
        """Continue a paused run from exactly where it was suspended."""
        if self._state is not SortState.PAUSED or self._run is None:
            raise InvalidTransitionError("resume", self._state)

        self._state = SortState.RUNNING
        LOGGER.debug("Resumed %r", self._run)

        return self._run

    def stop(self) -> None:
        """Discard the run's progress. Changes already applied to the sequence remain."""
        if self._run is not None:
            self._finish(StopType.CANCEL)

    def step(self) -> Operation | None:
        """Apply one operation; return None (and finish the run) once the algorithm is done."""
        if self._state is not SortState.RUNNING or self._stepper is None:
            raise InvalidTransitionError("step", self._state)

        try:
            return next(self._stepper)
        except StopIteration:
            self._finish(StopType.COMPLETE)
        except Exception as err:
            LOGGER.exception("Aborting %r: %s", self._run, err)  # noqa: TRY401
            self._finish(StopType.ERROR, err)
            raise

        return None

    def advance(self, limit: int | None = None) -> tuple[Operation, ...]:
        """Apply up to `limit` operations, stopping early if the run leaves RUNNING."""
        limit = limit or self.steps_per_frame
        operations: list[Operation] = []

        while len(operations) < limit and self._state is SortState.RUNNING:
            if (operation := self.step()) is None:
                break

            operations.append(operation)

        return tuple(operations)

    def _finish(self, stop_reason: StopType, error: Exception | None = None) -> None:
        sort_run, self._run = self._run, None
        stepper, self._stepper = self._stepper, None
        sequence, self._sequence = self._sequence, None

        # The stepper can't be closed from inside itself (i.e. `stop` via a listener)
        if stepper is not None and not stepper.gi_running:
            stepper.close()

        if isinstance(sequence, Lockable):
            sequence.unlock()

        self._state = SortState.NOT_RUNNING

        if sort_run is None:
            return

        LOGGER.info(
            "Run of %s ended (%s) after %i operations and %i comparisons",
            sort_run.config.algorithm,
            stop_reason.name,
            sort_run.counter.total,
            sort_run.counter.comparisons,
        )

        sort_run._finish(stop_reason, error)  # noqa: SLF001


__all__ = [
    "InvalidTransitionError",
    "Lockable",
    "PixelSorter",
    "SortRun",
    "SortState",
    "StopType",
]
