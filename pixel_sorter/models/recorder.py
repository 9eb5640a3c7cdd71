"""Capture canvas frames as an animated GIF."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from pixel_sorter.utils import const
from wg_utilities.loggers import get_streaming_logger

if TYPE_CHECKING:
    from pathlib import Path

    from PIL import Image

    from .canvas import PixelCanvas

LOGGER = get_streaming_logger(__name__)


@dataclass(kw_only=True, slots=True)
class FrameRecorder:
    """Samples a canvas every `every` frames, independently of the sort engine."""

    canvas: PixelCanvas = field(repr=False)

    every: int = 1
    """Capture one in every N frames."""

    max_frames: int = const.MAX_GIF_FRAMES

    frames: list[Image.Image] = field(default_factory=list, init=False, repr=False)
    frame_count: int = field(default=0, init=False)
    dropped: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        """Validate the sampling interval."""
        if self.every < 1:
            LOGGER.warning("Capture interval is less than 1, setting to 1")
            self.every = 1

    def capture(self) -> bool:
        """Offer the canvas' current frame; return whether it was kept."""
        self.frame_count += 1

        if (self.frame_count - 1) % self.every:
            return False

        if len(self.frames) >= self.max_frames:
            if not self.dropped:
                LOGGER.warning("Reached the limit of %i frames, dropping the rest", self.max_frames)

            self.dropped += 1
            return False

        self.frames.append(self.canvas.to_image().convert("RGB"))
        return True

    def save(self, path: Path) -> Path:
        """Write the captured frames to `path`, one tick per frame captured."""
        if not self.frames:
            raise ValueError("No frames have been captured")

        first, *rest = self.frames
        first.save(
            path,
            save_all=True,
            append_images=rest,
            duration=const.ticks_to_milliseconds(self.every),
            loop=0,
        )

        LOGGER.info("Saved %i frames to %s", len(self.frames), path)

        return path


__all__ = ["FrameRecorder"]
