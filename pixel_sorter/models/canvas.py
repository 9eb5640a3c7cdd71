"""Pixel canvas which sort runs mutate in place."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from operator import index as as_index
from typing import TYPE_CHECKING, NamedTuple

import numpy as np
from PIL import Image
from pixel_sorter.sorting.config import Direction
from pixel_sorter.sorting.operations import SortError
from wg_utilities.loggers import get_streaming_logger

if TYPE_CHECKING:
    from pathlib import Path

    from numpy.typing import NDArray
    from pixel_sorter.sorting.operations import Operation

LOGGER = get_streaming_logger(__name__)


class SequenceLockedError(SortError, RuntimeError):
    """Raised when the canvas is written to whilst it's borrowed by a sort run."""


class Pixel(NamedTuple):
    """A single RGBA pixel."""

    red: int
    green: int
    blue: int
    alpha: int = 255


@dataclass(kw_only=True, slots=True)
class PixelCanvas:
    """An image held as a mutable RGBA buffer."""

    image: Image.Image = field(repr=False)
    """The source image, used to (re)populate the buffer."""

    scale: float = 1.0

    pixels: NDArray[np.uint8] = field(init=False, repr=False)
    """Shape (height, width, 4)."""

    locked: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        """Populate the pixel buffer from the source image."""
        if self.scale <= 0:
            raise ValueError(f"Scale must be positive, got {self.scale}")

        self.pixels = self._load()

        LOGGER.info("Loaded %ix%i canvas (scale=%s)", self.width, self.height, self.scale)

    @classmethod
    def open(cls, path: Path, *, scale: float = 1.0) -> PixelCanvas:
        """Load a canvas from an image file."""
        with Image.open(path) as image:
            image.load()
            return cls(image=image.copy(), scale=scale)

    def _load(self) -> NDArray[np.uint8]:
        image = self.image.convert("RGBA")

        if self.scale != 1:
            image = image.resize(
                (
                    max(1, round(image.width * self.scale)),
                    max(1, round(image.height * self.scale)),
                ),
                Image.Resampling.NEAREST,
            )

        return np.array(image, dtype=np.uint8)

    def sequence(self, direction: Direction = Direction.LEFT_TO_RIGHT) -> PixelSequence:
        """Return a fixed-length view over the pixels, traversed to suit `direction`."""
        return PixelSequence(canvas=self, vertical=direction.is_vertical)

    def reset(self) -> None:
        """Restore the source image into the existing buffer."""
        if self.locked:
            raise SequenceLockedError("Cannot reset the canvas whilst it's being sorted")

        self.pixels[...] = self._load()
        LOGGER.debug("Reset canvas to source image")

    def to_image(self) -> Image.Image:
        """Return the current state of the canvas as an image."""
        return Image.fromarray(self.pixels)

    def save(self, path: Path) -> Path:
        """Save the current state of the canvas."""
        image = self.to_image()
        if path.suffix.lower() in {".jpg", ".jpeg"}:
            image = image.convert("RGB")

        image.save(path)
        LOGGER.info("Saved canvas to %s", path)

        return path

    @property
    def height(self) -> int:
        """Return the height of the canvas."""
        return int(self.pixels.shape[0])

    @property
    def width(self) -> int:
        """Return the width of the canvas."""
        return int(self.pixels.shape[1])


@dataclass(slots=True, eq=False)
class PixelSequence(Sequence[Pixel]):
    """Fixed-length view over a canvas' pixels.

    Row-major unless `vertical`, in which case the canvas is read column by column. Writes
    go straight into the canvas buffer, so the rendered image always tracks the sort.
    """

    canvas: PixelCanvas
    vertical: bool = False

    def position(self, idx: int, /) -> tuple[int, int]:
        """Return the (x, y) canvas coordinates of the pixel at `idx`."""
        length = len(self)
        idx = as_index(idx)
        if idx < 0:
            idx += length

        if not 0 <= idx < length:
            raise IndexError(f"Pixel index out of range: {idx}")

        if self.vertical:
            return divmod(idx, self.canvas.height)

        y, x = divmod(idx, self.canvas.width)
        return x, y

    def positions(self, operation: Operation, /) -> list[tuple[int, int]]:
        """Return the canvas coordinates an operation touched, i.e. those to redraw."""
        if operation.is_noop:
            return []

        return [self.position(idx) for idx in operation.indices]

    def lock(self) -> None:
        """Borrow the canvas for a sort run."""
        if self.canvas.locked:
            raise SequenceLockedError("Canvas is already being sorted")

        self.canvas.locked = True

    def unlock(self) -> None:
        """Hand the canvas back to its owner."""
        self.canvas.locked = False

    def __getitem__(self, idx: int) -> Pixel:  # type: ignore[override]
        """Return the pixel at `idx`."""
        x, y = self.position(idx)
        return Pixel(*(int(channel) for channel in self.canvas.pixels[y, x]))

    def __setitem__(self, idx: int, value: Sequence[int]) -> None:
        """Overwrite the pixel at `idx`."""
        x, y = self.position(idx)
        self.canvas.pixels[y, x] = tuple(value)

    def __len__(self) -> int:
        """Return the number of pixels on the canvas."""
        return self.canvas.height * self.canvas.width


__all__ = ["Pixel", "PixelCanvas", "PixelSequence", "SequenceLockedError"]
