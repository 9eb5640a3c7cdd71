from __future__ import annotations

from .canvas import Pixel, PixelCanvas, PixelSequence, SequenceLockedError
from .channel import Channel
from .recorder import FrameRecorder

__all__ = [
    "Channel",
    "FrameRecorder",
    "Pixel",
    "PixelCanvas",
    "PixelSequence",
    "SequenceLockedError",
]
