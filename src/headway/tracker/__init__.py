"""Progress tracking with speed and time-left estimation.

Example usage:
    from headway.tracker import Tracker

    tracker = Tracker(measurement_interval=0.5)
    for step in range(1, 11):
        do_work()
        tracker.set_progress(step / 10)

    completion = tracker.finish()
"""

from headway.tracker.tracker import (
    BPS,
    DEFAULT_MEASUREMENT_INTERVAL,
    ByteAmount,
    CompletionStats,
    FinishCallback,
    Measurement,
    Stats,
    Tracker,
)

__all__ = [
    "BPS",
    "DEFAULT_MEASUREMENT_INTERVAL",
    "ByteAmount",
    "CompletionStats",
    "FinishCallback",
    "Measurement",
    "Stats",
    "Tracker",
]
