"""Exponentially weighted moving average.

The default metric age of 5 samples averages over a window of roughly 10
samples, giving a decay factor of 2 / (5 + 1).

Example usage:
    avg = MovingAverage()
    avg.add(1.0)  # cold start, value == 1.0
    avg.add(4.0)  # value == 2.0
"""

from __future__ import annotations

DEFAULT_METRIC_AGE = 5.0


def decay_for_age(age: float) -> float:
    """Return the decay factor for an average metric age."""
    return 2.0 / (age + 1.0)


class MovingAverage:
    """Exponentially weighted moving average of a series of numbers.

    Whether the average holds data is tracked explicitly, so a series that
    legitimately converges to zero keeps smoothing instead of restarting.

    Attributes:
        decay: Weight given to each new sample.
    """

    __slots__ = ("_has_data", "_value", "decay")

    def __init__(
        self,
        initial: float | None = None,
        *,
        age: float = DEFAULT_METRIC_AGE,
    ) -> None:
        """Initialize the average.

        Args:
            initial: Optional seed value. A seed counts as data, so the
                first ``add`` smooths against it.
            age: Average metric age, in samples.
        """
        if age <= 0:
            raise ValueError("age must be positive")

        self.decay = decay_for_age(age)
        self._value = initial if initial is not None else 0.0
        self._has_data = initial is not None

    @property
    def value(self) -> float:
        """Current value of the moving average."""
        return self._value

    @property
    def has_data(self) -> bool:
        """Whether any value has been folded into the average."""
        return self._has_data

    def add(self, value: float) -> None:
        """Add a value to the series and update the moving average."""
        if not self._has_data:
            self._value = value
            self._has_data = True
            return
        self._value = value * self.decay + self._value * (1.0 - self.decay)

    def reset(self) -> None:
        """Forget all data; the next ``add`` starts the series over."""
        self._value = 0.0
        self._has_data = False

    def __repr__(self) -> str:
        return f"MovingAverage(value={self._value}, decay={self.decay:.4f})"
