"""Sort the pixels of an image, frame by frame."""

from __future__ import annotations

import signal
from argparse import ArgumentParser, Namespace
from json import dumps
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pixel_sorter.models import Channel, FrameRecorder, PixelCanvas
from pixel_sorter.sorting import (
    Direction,
    PixelSorter,
    RunConfiguration,
    SortingAlgorithm,
)
from pixel_sorter.utils import const
from wg_utilities.decorators import process_exception
from wg_utilities.loggers import get_streaming_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from pixel_sorter.sorting import SortRun

LOGGER = get_streaming_logger(__name__)


def parse_args(argv: Sequence[str] | None = None) -> Namespace:
    """Parse the command line arguments."""
    parser = ArgumentParser(
        prog="pixel-sorter",
        description="Sort the pixels of an image by a colour channel, one operation at a time.",
    )
    parser.add_argument("image", type=Path, help="Image to sort")
    parser.add_argument(
        "--algorithm",
        type=SortingAlgorithm,
        choices=list(SortingAlgorithm),
        default=SortingAlgorithm.SHELL_SORT,
    )
    parser.add_argument(
        "--direction",
        type=Direction,
        choices=list(Direction),
        default=Direction.LEFT_TO_RIGHT,
    )
    parser.add_argument(
        "--channel",
        type=Channel,
        choices=list(Channel),
        default=Channel.RED,
    )
    parser.add_argument("--scale", type=float, default=1.0)
    parser.add_argument("--steps-per-frame", type=int, default=const.STEPS_PER_FRAME)
    parser.add_argument("--seed", type=int, default=None, help="Seed for bogo sort")
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Where to save the result (default: <image>-sorted.png)",
    )
    parser.add_argument("--gif", type=Path, default=None, help="Record the sort as a GIF")
    parser.add_argument("--gif-every", type=int, default=1, help="Record every Nth frame")

    args = parser.parse_args(argv)

    if args.algorithm is SortingAlgorithm.COUNTING_SORT and not args.channel.is_integral:
        parser.error(f"{args.algorithm} needs an integral channel, not {args.channel}")

    return args


def start_run(canvas: PixelCanvas, sorter: PixelSorter, args: Namespace) -> SortRun:
    """Borrow the canvas' pixels and start sorting them."""
    algorithm: SortingAlgorithm = args.algorithm
    channel: Channel = args.channel

    config = RunConfiguration(
        algorithm=algorithm,
        direction=args.direction,
        key_range=channel.key_range if algorithm.is_distribution else None,
        seed=args.seed,
    )

    return sorter.run(
        channel.comparator,
        canvas.sequence(args.direction),
        config,
        key=channel,
    )


@process_exception(logger=LOGGER)
def main(argv: Sequence[str] | None = None) -> None:
    """Sort an image and save the result (and optionally a recording of it)."""
    args = parse_args(argv)

    canvas = PixelCanvas.open(args.image, scale=args.scale)
    sorter = PixelSorter(steps_per_frame=args.steps_per_frame)
    recorder = FrameRecorder(canvas=canvas, every=args.gif_every) if args.gif else None

    def _signal_handler(signum: int, _frame: Any) -> None:
        """Stop the run, leaving the canvas as it is."""
        LOGGER.info("Received signal %s, stopping...", signum)
        sorter.stop()

    previous_handlers = {
        signum: signal.signal(signum, _signal_handler)
        for signum in (signal.SIGINT, signal.SIGTERM)
    }

    try:
        sort_run = start_run(canvas, sorter, args)

        if recorder is not None:
            recorder.capture()

        for _ in sort_run:
            if recorder is not None:
                recorder.capture()
    finally:
        for signum, handler in previous_handlers.items():
            signal.signal(signum, handler)

    canvas.save(args.output or args.image.with_name(f"{args.image.stem}-sorted.png"))

    if recorder is not None:
        recorder.save(args.gif)

    LOGGER.info(
        "%s finished (%s): %s",
        args.algorithm,
        sort_run.stop_reason.name if sort_run.stop_reason else "UNKNOWN",
        dumps(sort_run.counter, default=lambda obj: obj.__json__()),
    )


if __name__ == "__main__":
    main()
