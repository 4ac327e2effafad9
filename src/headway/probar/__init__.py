"""Simple live terminal progress bar.

Example usage:
    from headway.probar import Bar, BarOptions
    from headway.tracker import Tracker

    tracker = Tracker()
    Bar(tracker, BarOptions(refresh_rate=0.02))
    for step in range(20):
        time.sleep(0.03)
        tracker.set_progress(step / 20)
    tracker.finish()
"""

from headway.probar.bar import Bar, BarOptions

__all__ = [
    "Bar",
    "BarOptions",
]
