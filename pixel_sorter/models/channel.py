"""Colour channels which pixels can be sorted by."""

from __future__ import annotations

from colorsys import rgb_to_hsv
from enum import StrEnum, auto
from typing import TYPE_CHECKING, ClassVar

from pixel_sorter.sorting.compare import by_key

if TYPE_CHECKING:
    from pixel_sorter.sorting.compare import Comparator

    from .canvas import Pixel


class Channel(StrEnum):
    """Enumeration of sort keys derived from a pixel."""

    RED = auto()
    GREEN = auto()
    BLUE = auto()
    GRAY = auto()
    HUE = auto()
    """Degrees, in [0, 360)."""

    SATURATION = auto()
    """Percentage, in [0, 100]."""

    BRIGHTNESS = auto()
    """Percentage, in [0, 100]."""

    _KEY_RANGES: ClassVar[dict[str, int]]

    def __call__(self, pixel: Pixel, /) -> float:
        """Return the key of the pixel for this channel."""
        return getattr(self, self)(pixel)  # type: ignore[no-any-return]

    @property
    def key_range(self) -> int:
        """Exclusive upper bound of this channel's keys."""
        return self._KEY_RANGES[self]

    @property
    def is_integral(self) -> bool:
        """Whether this channel's keys are always integers."""
        return self in {Channel.RED, Channel.GREEN, Channel.BLUE}

    @property
    def comparator(self) -> Comparator[Pixel]:
        """Return a comparator ordering pixels by this channel."""
        return by_key(self)

    @staticmethod
    def red(pixel: Pixel) -> int:
        """The red component, in [0, 255]."""
        return pixel[0]

    @staticmethod
    def green(pixel: Pixel) -> int:
        """The green component, in [0, 255]."""
        return pixel[1]

    @staticmethod
    def blue(pixel: Pixel) -> int:
        """The blue component, in [0, 255]."""
        return pixel[2]

    @staticmethod
    def gray(pixel: Pixel) -> float:
        """Luma, as used for greyscale conversion."""
        return 0.299 * pixel[0] + 0.587 * pixel[1] + 0.114 * pixel[2]

    @staticmethod
    def _hsv(pixel: Pixel) -> tuple[float, float, float]:
        return rgb_to_hsv(pixel[0] / 255, pixel[1] / 255, pixel[2] / 255)

    @staticmethod
    def hue(pixel: Pixel) -> float:
        """Hue in degrees; greys have a hue of 0."""
        return (Channel._hsv(pixel)[0] * 360) % 360

    @staticmethod
    def saturation(pixel: Pixel) -> float:
        """HSV saturation as a percentage."""
        return Channel._hsv(pixel)[1] * 100

    @staticmethod
    def brightness(pixel: Pixel) -> float:
        """HSV value (the largest component) as a percentage."""
        return Channel._hsv(pixel)[2] * 100


Channel._KEY_RANGES = {
    Channel.RED: 256,
    Channel.GREEN: 256,
    Channel.BLUE: 256,
    Channel.GRAY: 256,
    Channel.HUE: 360,
    Channel.SATURATION: 101,
    Channel.BRIGHTNESS: 101,
}


__all__ = ["Channel"]
