"""Exponentially weighted moving averages."""

from headway.ewma.average import DEFAULT_METRIC_AGE, MovingAverage, decay_for_age

__all__ = [
    "DEFAULT_METRIC_AGE",
    "MovingAverage",
    "decay_for_age",
]
