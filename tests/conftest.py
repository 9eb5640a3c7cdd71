"""Conftest file for the tests."""

from __future__ import annotations

from typing import Any

import numpy as np
import pytest
from PIL import Image
from pixel_sorter.models import PixelCanvas
from pixel_sorter.sorting import OperationCounter, PixelSorter

RANDS_LENGTH = 20
RANDS_RANGE = 100


@pytest.fixture(name="rands")
def rands_() -> list[dict[str, Any]]:
    """Integer-keyed items, with plenty of duplicate keys."""
    rng = np.random.default_rng(1234)
    return [
        {"val": int(val), "id": idx}
        for idx, val in enumerate(rng.integers(0, RANDS_RANGE // 4, RANDS_LENGTH))
    ]


@pytest.fixture(name="rand_floats")
def rand_floats_() -> list[dict[str, Any]]:
    """Fractional-keyed items."""
    rng = np.random.default_rng(5678)
    return [
        {"val": round(float(val), 4), "id": idx}
        for idx, val in enumerate(rng.uniform(0, RANDS_RANGE, RANDS_LENGTH))
    ]


@pytest.fixture(name="counter")
def counter_() -> OperationCounter:
    """Operation counter fixture."""
    return OperationCounter()


@pytest.fixture(name="sorter")
def sorter_() -> PixelSorter:
    """Sorter fixture, with small frames."""
    return PixelSorter(steps_per_frame=5)


@pytest.fixture(name="image")
def image_() -> Image.Image:
    """A small, random, opaque RGBA image."""
    rng = np.random.default_rng(42)
    pixels = rng.integers(0, 256, (6, 8, 4), dtype=np.uint8)
    pixels[..., 3] = 255
    return Image.fromarray(pixels)


@pytest.fixture(name="canvas")
def canvas_(image: Image.Image) -> PixelCanvas:
    """Canvas fixture."""
    return PixelCanvas(image=image)
