"""headway: progress tracking with speed and time-left estimation.

Example usage:
    from headway import Bar, BarOptions, Tracker

    tracker = Tracker()
    Bar(tracker, BarOptions(show_time_left=True))
    for step in range(1, 101):
        do_work()
        tracker.set_progress(step / 100)
    print(tracker.finish())
"""

from headway.ewma import MovingAverage
from headway.probar import Bar, BarOptions
from headway.tracker import BPS, ByteAmount, CompletionStats, Stats, Tracker

__all__ = [
    "BPS",
    "Bar",
    "BarOptions",
    "ByteAmount",
    "CompletionStats",
    "MovingAverage",
    "Stats",
    "Tracker",
]
