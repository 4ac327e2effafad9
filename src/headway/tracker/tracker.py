"""Progress tracker with speed and time-left estimation.

The tracker receives fractional progress samples (0.0 to 1.0) from any
number of threads and derives:
- An instantaneous speed for every accepted measurement interval
- Smoothed speed and seconds-left series (exponential moving averages)
- Lifetime minimum and maximum speed
- The time spent tracking, excluding pauses

Samples closer together than the measurement interval only update the
current value. A sample lower than the previous measurement resets all
rate data, as does pausing or resuming.

Example usage:
    from headway.tracker import ByteAmount, Tracker

    tracker = Tracker(byte_amount=ByteAmount(542 * 1024 * 1024))
    for done in download():
        tracker.set_progress(done)
        stats = tracker.stats()
        if stats is not None:
            print(stats)

    completion = tracker.finish()
    print(f"took {completion.duration}, @ {completion.average_bps}")
"""

from __future__ import annotations

import logging
import math
import threading
import time
from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING, Protocol

from headway.ewma import MovingAverage
from headway.united import Units, format_bps_value, format_bytes

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)

DEFAULT_MEASUREMENT_INTERVAL = timedelta(seconds=1)

# Longest time left a timedelta can hold
_MAX_TIME_LEFT_SECONDS = timedelta.max.total_seconds()


class FinishCallback(Protocol):
    """Protocol for tracker finish callbacks."""

    def __call__(self) -> None:
        """Called once when the tracked task finishes."""
        ...


@dataclass(frozen=True, slots=True)
class ByteAmount:
    """An amount in bytes."""

    value: int

    def __str__(self) -> str:
        return format_bytes(self.value)


@dataclass(frozen=True, slots=True)
class BPS:
    """A bandwidth, in bytes per second."""

    value: float

    def __str__(self) -> str:
        return format_bps_value(self.value)


@dataclass(frozen=True, slots=True)
class Measurement:
    """A progress sample used as the anchor for the next rate computation.

    Attributes:
        time: Clock reading when the sample was taken, in seconds.
        value: Progress value of the sample.
    """

    time: float
    value: float


@dataclass(frozen=True, slots=True)
class Stats:
    """Snapshot of a tracker's estimates.

    Only available once the tracker has recorded a non-zero speed.

    Attributes:
        value: Current progress of the task.
        speed: Smoothed progress speed, in progress units per second.
        time_left: Estimated time until completion at the smoothed speed,
            None when no meaningful estimate exists.
        byte_amount: Byte amount of the task, if any.
        smoothed_time_left: Moving average of the seconds-left estimates
            computed at each measurement.
    """

    value: float
    speed: float
    time_left: timedelta | None = None
    byte_amount: ByteAmount | None = None
    smoothed_time_left: timedelta | None = None

    @property
    def bps(self) -> BPS | None:
        """Current bandwidth, only if the task has a byte amount."""
        return _to_bps(self.byte_amount, self.speed)

    def __str__(self) -> str:
        left = "unknown time left"
        if self.time_left is not None:
            left = f"{self.time_left} left"
        return f"({self.value * 100.0:.2f}% done @ {self.speed:.2f}/sec, {left})"


@dataclass(frozen=True, slots=True)
class CompletionStats:
    """Statistics on the duration and speed of a finished task.

    ``average_speed`` is the overall throughput, ``1 / duration``: it
    assumes the whole task was traversed during the tracked duration. It
    differs from the smoothed speed reported by ``Tracker.stats()``.

    Attributes:
        duration: Time spent tracking, excluding pauses.
        average_speed: Progress units per second over the whole duration.
        min_speed: Lowest instantaneous speed recorded, None if none was.
        max_speed: Highest instantaneous speed recorded, None if none was.
        byte_amount: Byte amount of the task, if any.
    """

    duration: timedelta
    average_speed: float
    min_speed: float | None = None
    max_speed: float | None = None
    byte_amount: ByteAmount | None = None

    @property
    def average_bps(self) -> BPS | None:
        """Average bandwidth, only if the task has a byte amount."""
        return _to_bps(self.byte_amount, self.average_speed)

    def __str__(self) -> str:
        return (
            f"({self.duration} total, "
            f"avg {self.average_speed:.2f}/sec, "
            f"min {self.min_speed or 0.0:.2f}/sec, "
            f"max {self.max_speed or 0.0:.2f}/sec)"
        )


class Tracker:
    """Track the progress of a task and estimate its speed and time left.

    All operations are safe to call from multiple threads. Finish
    observers are invoked outside the internal lock, so they may call back
    into the tracker.

    Example:
        >>> tracker = Tracker(measurement_interval=0.5)
        >>> tracker.set_progress(0.25)
        >>> tracker.progress
        0.25
    """

    def __init__(
        self,
        *,
        value: float = 0.0,
        measurement_interval: timedelta | float | None = None,
        byte_amount: ByteAmount | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the tracker.

        Args:
            value: Initial progress value, clamped to [0, 1] (NaN is 0.0).
            measurement_interval: Minimum spacing between samples counted
                toward rate computation. Defaults to one second.
            byte_amount: Total size of the task, if it is byte-denominated.
            clock: Monotonic clock returning seconds.

        Raises:
            ValueError: If the measurement interval is negative.
        """
        interval = _interval_seconds(measurement_interval)
        if interval < 0:
            raise ValueError("measurement_interval must not be negative")
        if interval == 0:
            interval = DEFAULT_MEASUREMENT_INTERVAL.total_seconds()

        self._clock = clock
        self._interval = interval
        self._byte_amount = byte_amount
        self._value = _clamp(value)

        self._lock = threading.Lock()
        self._paused = False
        self._finished = False
        self._completion: CompletionStats | None = None
        self._on_finish: list[FinishCallback | Callable[[], None]] = []

        # Accumulated, in seconds
        self._duration = 0.0

        self._speed = 0.0
        self._min_speed: float | None = None
        self._max_speed: float | None = None
        self._speed_average = MovingAverage()
        self._seconds_left_average = MovingAverage()
        self._last_measurement: Measurement | None = None

        logger.debug(
            "Initialized Tracker: value=%.4f, measurement_interval=%.3fs, byte_amount=%s",
            self._value,
            self._interval,
            byte_amount,
        )

    @property
    def measurement_interval(self) -> timedelta:
        """Minimum spacing between samples counted toward rate computation."""
        return timedelta(seconds=self._interval)

    @property
    def byte_amount(self) -> ByteAmount | None:
        """Amount of bytes the tracked task goes through, if relevant."""
        return self._byte_amount

    @property
    def units(self) -> Units:
        """Units the progress is best displayed in."""
        return Units.BYTES if self._byte_amount is not None else Units.NONE

    @property
    def paused(self) -> bool:
        """True while progress tracking is temporarily paused."""
        with self._lock:
            return self._paused

    @property
    def finished(self) -> bool:
        """True once ``finish`` has been called."""
        with self._lock:
            return self._finished

    @property
    def progress(self) -> float:
        """Current progress value, in [0, 1]."""
        with self._lock:
            return self._value

    @property
    def duration(self) -> timedelta:
        """Time spent tracking progress, excluding pauses."""
        with self._lock:
            return timedelta(seconds=self._duration)

    def set_progress(self, value: float) -> None:
        """Set the current progress value.

        Values outside [0, 1] are clamped and NaN counts as 0.0. Setting a
        value lower than the last measurement resets speed and time-left
        estimates.

        Args:
            value: Progress of the task, from 0.0 to 1.0.
        """
        value = _clamp(value)

        with self._lock:
            if self._finished:
                logger.debug("Ignoring progress %.4f on finished tracker", value)
                return
            self._locked_update_measurement(value)
            self._value = value

    def pause(self) -> None:
        """Temporarily stop progress tracking (resets speed and time left)."""
        with self._lock:
            if self._finished:
                return
            self._paused = True
            self._locked_reset_measurement()
        logger.debug("Tracker paused")

    def resume(self) -> None:
        """Restart progress tracking (resets speed and time left)."""
        with self._lock:
            if self._finished:
                return
            self._paused = False
            self._locked_reset_measurement()
        logger.debug("Tracker resumed")

    def on_finish(self, callback: FinishCallback | Callable[[], None]) -> None:
        """Register a callback invoked once when the tracker finishes.

        Callbacks run in registration order.

        Args:
            callback: Zero-argument callable.
        """
        with self._lock:
            self._on_finish.append(callback)

    def stats(self) -> Stats | None:
        """Return speed and time-left estimates, if accurate enough.

        Returns:
            A Stats snapshot, or None when no speed has been recorded since
            the last reset.
        """
        with self._lock:
            if self._speed == 0.0 or self._last_measurement is None:
                return None

            speed = self._speed_average.value
            smoothed_left = None
            if self._seconds_left_average.has_data:
                smoothed_left = _to_time_left(self._seconds_left_average.value)

            return Stats(
                value=self._value,
                speed=speed,
                time_left=_to_time_left(_seconds_left(self._value, speed)),
                byte_amount=self._byte_amount,
                smoothed_time_left=smoothed_left,
            )

    def finish(self) -> CompletionStats:
        """Mark the task as finished and return its completion statistics.

        Finish observers run once, on the first call. Later calls return
        the same statistics.

        Precondition: some time must have been tracked; a zero duration
        reports an infinite average speed.

        Returns:
            CompletionStats for the task.
        """
        with self._lock:
            first_call = not self._finished
            self._finished = True
            callbacks = list(self._on_finish) if first_call else []

        for callback in callbacks:
            try:
                callback()
            except Exception:
                logger.exception("Error in finish callback")

        with self._lock:
            if self._completion is not None:
                return self._completion

            if self._last_measurement is not None:
                self._duration += max(0.0, self._clock() - self._last_measurement.time)
                self._last_measurement = None

            average_speed = math.inf
            if self._duration > 0:
                average_speed = 1.0 / self._duration

            self._completion = CompletionStats(
                duration=timedelta(seconds=self._duration),
                average_speed=average_speed,
                min_speed=self._min_speed,
                max_speed=self._max_speed,
                byte_amount=self._byte_amount,
            )

        logger.debug("Tracker finished: %s", self._completion)
        return self._completion

    def _locked_update_measurement(self, value: float) -> None:
        """Fold a sample into the rate estimates. Must hold the lock."""
        if self._paused:
            self._locked_reset_measurement()

        now = self._clock()

        last = self._last_measurement
        if last is None:
            self._last_measurement = Measurement(time=now, value=value)
            return

        since_last = now - last.time
        if since_last < self._interval:
            # Too soon, keep the current anchor
            return

        value_delta = value - last.value
        if value_delta < 0:
            logger.debug(
                "Progress went back from %.4f to %.4f, resetting measurement",
                last.value,
                value,
            )
            self._locked_reset_measurement()
            self._last_measurement = Measurement(time=now, value=value)
            return

        self._duration += since_last

        self._speed = value_delta / since_last
        self._speed_average.add(self._speed)

        if self._max_speed is None or self._speed > self._max_speed:
            self._max_speed = self._speed
        if self._min_speed is None or self._speed < self._min_speed:
            self._min_speed = self._speed

        average = self._speed_average.value
        if average > 0:
            self._seconds_left_average.add(_seconds_left(value, average))

        self._last_measurement = Measurement(time=now, value=value)

    def _locked_reset_measurement(self) -> None:
        """Discard all rate data. Must hold the lock."""
        self._last_measurement = None
        self._speed = 0.0
        self._min_speed = None
        self._max_speed = None
        self._speed_average.reset()
        self._seconds_left_average.reset()

    def __repr__(self) -> str:
        return (
            f"Tracker("
            f"value={self._value:.4f}, "
            f"paused={self._paused}, "
            f"finished={self._finished}, "
            f"duration={self._duration:.3f}s)"
        )


def _clamp(value: float) -> float:
    if math.isnan(value):
        return 0.0
    if value > 1.0:
        return 1.0
    if value < 0.0:
        return 0.0
    return float(value)


def _interval_seconds(interval: timedelta | float | None) -> float:
    if interval is None:
        return 0.0
    if isinstance(interval, timedelta):
        return interval.total_seconds()
    return float(interval)


def _seconds_left(value: float, speed: float) -> float:
    if speed <= 0:
        return math.inf
    return (1.0 - value) / speed


def _to_time_left(seconds: float) -> timedelta | None:
    if seconds < 0 or not math.isfinite(seconds):
        return None
    if seconds >= _MAX_TIME_LEFT_SECONDS:
        return None
    return timedelta(milliseconds=int(seconds * 1000.0))


def _to_bps(byte_amount: ByteAmount | None, speed: float) -> BPS | None:
    if byte_amount is None:
        return None
    return BPS(value=speed * byte_amount.value)
