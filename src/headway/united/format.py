"""Human-readable formatting for byte amounts, bandwidth and durations.

Example usage:
    from headway.united import format_bytes, format_duration

    format_bytes(1_572_864)  # '1.50 MiB'
    format_duration(3725)  # '1h2m5s'
"""

from __future__ import annotations

import math
from datetime import timedelta
from enum import Enum

KIB = 1024
MIB = KIB * 1024
GIB = MIB * 1024
TIB = GIB * 1024

_SECONDS_PER_DAY = 24 * 60 * 60


class Units(Enum):
    """Units a task's progress is measured in."""

    NONE = "none"
    BYTES = "bytes"


def format_bytes(amount: int) -> str:
    """Format a byte count, e.g. ``52 B``, ``64.20 KiB``, ``2.00 MiB``.

    Args:
        amount: Number of bytes.

    Returns:
        The amount scaled to the largest unit it exceeds.
    """
    if amount > TIB:
        return f"{amount / TIB:.2f} TiB"
    if amount > GIB:
        return f"{amount / GIB:.2f} GiB"
    if amount > MIB:
        return f"{amount / MIB:.2f} MiB"
    if amount > KIB:
        return f"{amount / KIB:.2f} KiB"
    return f"{amount} B"


def format_bps_value(bps: float) -> str:
    """Format a bandwidth given in bytes per second."""
    if not math.isfinite(bps):
        return f"{bps} B/s"
    return f"{format_bytes(int(bps))}/s"


def format_bps(size: int, duration: timedelta | float) -> str:
    """Format the bandwidth of ``size`` bytes processed over ``duration``."""
    seconds = _to_seconds(duration)
    if seconds <= 0:
        return format_bps_value(0.0)
    return format_bps_value(size / seconds)


def format_duration(duration: timedelta | float) -> str:
    """Format a duration compactly, e.g. ``2d3h0m5s``, ``4m5s``, ``250ms``.

    Durations of a day or more get a leading day count. Sub-second
    durations are shown in milliseconds, longer ones are rounded to the
    second.

    Args:
        duration: A timedelta or a number of seconds.

    Returns:
        Compact duration string.
    """
    seconds = _to_seconds(duration)
    if seconds < 0:
        return "-" + format_duration(-seconds)
    if seconds < 1:
        millis = int(seconds * 1000)
        return f"{millis}ms" if millis else "0s"

    total = int(round(seconds))
    days, total = divmod(total, _SECONDS_PER_DAY)
    hours, total = divmod(total, 3600)
    minutes, secs = divmod(total, 60)

    result = f"{days}d" if days else ""
    if days or hours:
        result += f"{hours}h{minutes}m"
    elif minutes:
        result += f"{minutes}m"
    return f"{result}{secs}s"


def _to_seconds(duration: timedelta | float) -> float:
    if isinstance(duration, timedelta):
        return duration.total_seconds()
    return float(duration)
