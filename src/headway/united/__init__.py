"""Unit formatting helpers (bytes, bandwidth, durations)."""

from headway.united.format import (
    Units,
    format_bps,
    format_bps_value,
    format_bytes,
    format_duration,
)

__all__ = [
    "Units",
    "format_bps",
    "format_bps_value",
    "format_bytes",
    "format_duration",
]
