"""Live terminal progress bar driven by a Tracker.

The bar redraws a single fixed-width line from a background thread, on a
fixed cadence, until the tracker finishes. Lines printed through the bar
are flushed above it on the next redraw so they don't corrupt the line
being redrawn in place.

Example usage:
    from headway.probar import Bar, BarOptions
    from headway.tracker import ByteAmount, Tracker

    tracker = Tracker(byte_amount=ByteAmount(542 * 1024 * 1024))
    bar = Bar(tracker, BarOptions(show_speed=True, show_time_left=True))
    bar.set_postfix("Fake download")

    for chunk in chunks:
        ...
        tracker.set_progress(done / total)
        if warning:
            bar.println("Retrying chunk")

    tracker.finish()  # clears the bar and stops redrawing
"""

from __future__ import annotations

import logging
import math
import sys
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TextIO

from headway.state import Consumer, MessageLevel, ProgressTheme, resolve_theme
from headway.united import Units, format_duration

if TYPE_CHECKING:
    from headway.config import HeadwaySettings
    from headway.tracker import Stats, Tracker

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BarOptions:
    """Configuration for a progress bar.

    Attributes:
        refresh_rate: Seconds between redraws (default: 0.2)
        time_box_width: Minimum width of the time-left field (default: 13)
        speed_box_width: Minimum width of the bandwidth field (default: 13)
        bar_width: Maximum width of the bar itself (default: 20)
        width: Total width of the line (default: 80)
        show_speed: Show bandwidth, for byte-denominated tasks
        show_time_left: Show the estimated time left
        theme: Characters to draw with (resolved from the environment
               when None)
        stream: Where to write (sys.stdout when None)
    """

    refresh_rate: float = 0.2
    time_box_width: int = 13
    speed_box_width: int = 13
    bar_width: int = 20
    width: int = 80
    show_speed: bool = False
    show_time_left: bool = False
    theme: ProgressTheme | None = None
    stream: TextIO | None = None

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.refresh_rate <= 0:
            raise ValueError("refresh_rate must be positive")
        for name in ("time_box_width", "speed_box_width", "bar_width", "width"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")

    @classmethod
    def from_settings(
        cls,
        settings: HeadwaySettings,
        *,
        stream: TextIO | None = None,
    ) -> BarOptions:
        """Build options from loaded settings.

        Args:
            settings: Settings, usually from ``get_settings()``.
            stream: Where to write (sys.stdout when None).

        Returns:
            BarOptions mirroring the settings.
        """
        return cls(
            refresh_rate=settings.refresh_rate,
            time_box_width=settings.time_box_width,
            speed_box_width=settings.speed_box_width,
            bar_width=settings.bar_width,
            width=settings.width,
            show_speed=settings.show_speed,
            show_time_left=settings.show_time_left,
            theme=resolve_theme(settings.theme),
            stream=stream,
        )


class Bar:
    """Progress bar redrawn in place from a tracker's snapshots.

    Display state (prefix, postfix, scale, pending lines) is guarded by the
    bar's own lock; the tracker is only read through its public API.

    The bar registers itself as a finish observer of the tracker: finishing
    the tracker clears the line once and stops the redraw thread.
    """

    def __init__(self, tracker: Tracker, options: BarOptions | None = None) -> None:
        """Create the bar, draw it once and start redrawing.

        Args:
            tracker: Tracker to display. Not owned by the bar.
            options: Bar configuration (defaults when None).
        """
        self._tracker = tracker
        self._options = options if options is not None else BarOptions()
        self._theme = (
            self._options.theme if self._options.theme is not None else resolve_theme()
        )
        self._units = tracker.units

        self._lock = threading.Lock()
        self._finish_event = threading.Event()
        self._finished = False

        self._prefix = ""
        self._postfix = ""
        self._scale = 1.0
        self._lines: list[str] = []

        tracker.on_finish(self._finish)
        if tracker.finished:
            # Observers already ran, nothing left to display
            self._finish()

        self.redraw()
        self._thread = threading.Thread(
            target=self._run,
            name="headway-bar",
            daemon=True,
        )
        self._thread.start()

        logger.debug(
            "Started progress bar: refresh_rate=%.3fs, width=%d",
            self._options.refresh_rate,
            self._options.width,
        )

    @property
    def options(self) -> BarOptions:
        """Configuration of this bar."""
        return self._options

    @property
    def finished(self) -> bool:
        """True once the tracker finished and the bar was cleared."""
        with self._lock:
            return self._finished

    def set_prefix(self, prefix: str) -> None:
        """Set the text shown before the bar."""
        with self._lock:
            self._prefix = prefix

    def set_postfix(self, postfix: str) -> None:
        """Set the text shown after the bar."""
        with self._lock:
            self._postfix = postfix

    def set_scale(self, scale: float) -> None:
        """Set the visual scale of the bar, from 0.0 to 1.0.

        The scale shrinks the drawn bar independently of the tracked value,
        e.g. to show the progress of a first task among several.
        """
        with self._lock:
            self._scale = min(1.0, max(0.0, scale))

    def println(self, line: str) -> None:
        """Print a line without interfering with the progress bar."""
        with self._lock:
            self._lines.append(line)

    def printfln(self, msg: str, *args: Any) -> None:
        """Print a %-formatted line without interfering with the progress bar."""
        self.println(msg % args if args else msg)

    def redraw(self) -> None:
        """Draw the bar now. Does nothing once the bar is finished."""
        with self._lock:
            if self._finished:
                return
            self._write()

    def join(self, timeout: float | None = None) -> bool:
        """Wait for the redraw thread to stop.

        Args:
            timeout: Seconds to wait, or None to wait until it stops.

        Returns:
            True if the thread has stopped.
        """
        self._thread.join(timeout)
        return not self._thread.is_alive()

    def consumer(self, *, theme: ProgressTheme | None = None) -> Consumer:
        """Create a Consumer that drives this bar and its tracker.

        Progress, pause and resume go to the tracker, labels become the
        postfix and messages are printed above the bar.

        Args:
            theme: Theme for op/stat signs (the bar's theme when None).

        Returns:
            A wired Consumer.
        """

        def on_message(level: MessageLevel, msg: str) -> None:
            if level in (MessageLevel.WARNING, MessageLevel.ERROR):
                msg = f"{level.value}: {msg}"
            self.println(msg)

        return Consumer(
            on_progress=self._tracker.set_progress,
            on_pause_progress=self._tracker.pause,
            on_resume_progress=self._tracker.resume,
            on_progress_label=self.set_postfix,
            on_message=on_message,
            theme=theme if theme is not None else self._theme,
        )

    def _finish(self) -> None:
        """Clear the bar and stop redrawing. Called when the tracker finishes."""
        with self._lock:
            if self._finished:
                return
            self._finished = True
            self._finish_event.set()
            self._clear()
            if self._lines:
                self._emit("".join(f"{line}\n" for line in self._lines))
                self._lines = []
        logger.debug("Stopped progress bar")

    def _run(self) -> None:
        """Redraw loop, until the finish signal."""
        while not self._finish_event.wait(self._options.refresh_rate):
            try:
                self.redraw()
            except Exception:
                logger.exception("Error redrawing progress bar")

    def _emit(self, text: str) -> None:
        stream = self._options.stream if self._options.stream is not None else sys.stdout
        stream.write(text)
        stream.flush()

    def _clear(self) -> None:
        self._emit("\r" + " " * self._options.width + "\r")

    def _write(self) -> None:
        """Write pending lines and the bar. Must hold the lock."""
        if self._lines:
            self._clear()
            self._emit("".join(f"{line}\n" for line in self._lines))
            self._lines = []

        stats = self._tracker.stats()
        current = self._tracker.progress
        self._emit("\r" + self._compose(stats, current))

    def _compose(self, stats: Stats | None, current: float) -> str:
        """Build the full-width bar line. Must hold the lock."""
        opts = self._options
        th = self._theme

        percent_box = f" {current * 100.0:6.2f}% "

        time_left_box = ""
        if opts.show_time_left:
            if stats is not None and stats.time_left is not None:
                time_left_box = format_duration(stats.time_left) + " "
            time_left_box = time_left_box.rjust(opts.time_box_width)

        speed_box = ""
        if opts.show_speed and self._units == Units.BYTES:
            bps = stats.bps if stats is not None else None
            if bps is not None:
                speed_box = f"{bps} "
            speed_box = speed_box.rjust(opts.speed_box_width)

        prefix = f"{self._prefix} " if self._prefix else ""
        postfix = f" {self._postfix}" if self._postfix else ""

        # len() counts code points, so multi-byte glyphs take one column
        others_width = len(
            th.bar_start + th.bar_end + percent_box + time_left_box + speed_box + prefix + postfix
        )

        full_size = min(opts.bar_width, opts.width - others_width)
        size = math.ceil(full_size * self._scale)
        pad_size = full_size - size

        bar_box = ""
        if size > 0:
            filled = min(math.ceil(current * size), size)
            bar_box = th.bar_start + th.current * filled + th.empty * (size - filled)
            if pad_size > 0:
                bar_box += " " * (pad_size - 1)
            bar_box += th.bar_end
        elif pad_size > 0:
            bar_box = th.bar_start + " " * (pad_size - 1) + th.bar_end

        out = prefix + bar_box + percent_box + speed_box + time_left_box + postfix
        return out.ljust(opts.width)
