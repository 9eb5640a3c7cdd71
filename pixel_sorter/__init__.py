"""Visualise sorting algorithms by sorting the pixels of an image."""

from __future__ import annotations

from .models import Channel, PixelCanvas
from .sorting import Direction, PixelSorter, RunConfiguration, SortingAlgorithm

__all__ = [
    "Channel",
    "Direction",
    "PixelCanvas",
    "PixelSorter",
    "RunConfiguration",
    "SortingAlgorithm",
]
