"""Constant values."""

from __future__ import annotations

from datetime import UTC, datetime
from os import getenv
from typing import Final

import numpy as np

DEBUG_MODE: Final[bool] = bool(int(getenv("DEBUG_MODE", "0")))

RNG_SEED: Final[int] = int(getenv("RNG_SEED", int(datetime.now(UTC).timestamp())))
RNG = np.random.default_rng(RNG_SEED)

TICKS_PER_SECOND: Final[int] = int(getenv("TICKS_PER_SECOND", "60"))  # frames
TICK_LENGTH: Final[float] = 1 / TICKS_PER_SECOND  # seconds

STEPS_PER_FRAME: Final[int] = int(getenv("STEPS_PER_FRAME", "50"))
"""Number of primitive operations applied between two rendered frames."""

COMB_SHRINK_FACTOR: Final[float] = 1.3

RADIX_BASE: Final[int] = int(getenv("RADIX_BASE", "10"))
RADIX_FRACTIONAL_DIGITS: Final[int] = int(getenv("RADIX_FRACTIONAL_DIGITS", "6"))
"""Decimal places kept when fractional keys are converted to fixed point."""

MAX_GIF_FRAMES: Final[int] = int(getenv("MAX_GIF_FRAMES", "1000"))


def ticks_to_milliseconds(ticks: int) -> int:
    """Convert ticks to whole milliseconds, as used for GIF frame durations."""
    return round(ticks * TICK_LENGTH * 1000)
