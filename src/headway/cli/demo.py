"""Demo CLI command.

Simulates a download whose speed ramps up and down, displayed with a live
progress bar, then prints a completion summary.

Usage:
    python -m headway.cli demo
    python -m headway.cli demo --size 2GiB --show-speed --show-time-left
"""

from __future__ import annotations

import dataclasses
import logging
import re
import sys
import time
from typing import TYPE_CHECKING, TextIO

from headway.config import get_settings
from headway.probar import Bar, BarOptions
from headway.tracker import ByteAmount, Tracker
from headway.united import format_duration

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

logger = logging.getLogger(__name__)

_SIZE_PATTERN = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*([KMGT]i?B|B)?\s*$", re.IGNORECASE)

_SIZE_MULTIPLIERS: dict[str, int] = {
    "B": 1,
    "KB": 1024,
    "KIB": 1024,
    "MB": 1024**2,
    "MIB": 1024**2,
    "GB": 1024**3,
    "GIB": 1024**3,
    "TB": 1024**4,
    "TIB": 1024**4,
}

# Milestones printed above the bar
MILESTONES: tuple[tuple[float, str], ...] = (
    (0.1, "Already 10% done!"),
    (0.9, "Almost there!"),
)


def parse_size(text: str) -> int:
    """Parse a byte size such as ``1024``, ``64KiB`` or ``1.5GiB``.

    Args:
        text: Size with an optional binary unit suffix.

    Returns:
        Size in bytes.

    Raises:
        ValueError: If the text is not a positive size.
    """
    match = _SIZE_PATTERN.match(text)
    if match is None:
        raise ValueError(f"Invalid size: {text!r}")

    number, unit = match.groups()
    size = int(float(number) * _SIZE_MULTIPLIERS[(unit or "B").upper()])
    if size <= 0:
        raise ValueError(f"Size must be positive: {text!r}")
    return size


def simulated_progress(
    *,
    initial_speed: float = 0.002,
    factor: float = 1.07,
    rounds_per_direction: int = 40,
) -> Iterator[float]:
    """Yield progress values of a download alternately speeding up and down.

    The speed is multiplied (then divided) by ``factor`` at every step,
    switching direction every ``rounds_per_direction`` steps. The last
    value yielded is exactly 1.0.

    Args:
        initial_speed: Progress made on the first step.
        factor: Speed change per step.
        rounds_per_direction: Steps before the speed trend reverses.

    Yields:
        Increasing progress values, ending with 1.0.
    """
    speed = initial_speed
    progress = 0.0
    rounds = 0
    accelerating = True

    while True:
        rounds += 1
        if rounds > rounds_per_direction:
            accelerating = not accelerating
            rounds = 0

        speed = speed * factor if accelerating else speed / factor
        progress += speed
        if progress >= 1.0:
            yield 1.0
            return
        yield progress


def run_demo(
    *,
    size: int,
    duration: float = 8.0,
    show_speed: bool = False,
    show_time_left: bool = False,
    prefix: str = "",
    postfix: str = "",
    stream: TextIO | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """Run the fake download.

    Args:
        size: Simulated download size in bytes.
        duration: Approximate total duration in seconds.
        show_speed: Show bandwidth on the bar.
        show_time_left: Show estimated time left on the bar.
        prefix: Text shown before the bar.
        postfix: Text shown after the bar.
        stream: Where to draw (sys.stdout when None).
        sleep: Function used to wait between steps.

    Returns:
        Exit code (0 for success).
    """
    settings = get_settings()
    out = stream if stream is not None else sys.stdout

    steps = list(simulated_progress())
    delay = max(duration, 0.0) / len(steps)

    tracker = Tracker(
        byte_amount=ByteAmount(size),
        measurement_interval=min(settings.measurement_interval, max(delay, 0.001)),
    )
    options = dataclasses.replace(
        BarOptions.from_settings(settings, stream=out),
        show_speed=show_speed,
        show_time_left=show_time_left,
    )
    bar = Bar(tracker, options)
    bar.set_prefix(prefix)
    bar.set_postfix(postfix)

    logger.info(
        "Simulating download of %s in %d steps (%.3fs apart)",
        tracker.byte_amount,
        len(steps),
        delay,
    )

    pending = list(MILESTONES)
    for value in steps:
        sleep(delay)
        tracker.set_progress(value)

        while pending and value >= pending[0][0]:
            bar.println(pending.pop(0)[1])

    stats = tracker.finish()
    bar.join(timeout=1.0)

    out.write(
        f"Fake-downloaded {stats.byte_amount} in {format_duration(stats.duration)}, "
        f"@ {stats.average_bps} on average\n"
    )
    out.flush()
    return 0
