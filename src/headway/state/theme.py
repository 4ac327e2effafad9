"""Character themes used to draw progress.

A theme is resolved once by the hosting application, from the platform and
locale environment variables, and passed to whatever draws progress.

Example usage:
    from headway.state import resolve_theme

    theme = resolve_theme()  # detected from LC_ALL / LC_CTYPE / LANG
    ascii_theme = resolve_theme("ascii")
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

LOCALE_ENV_KEYS: tuple[str, ...] = ("LC_ALL", "LC_CTYPE", "LANG")


@dataclass(frozen=True, slots=True)
class ProgressTheme:
    """All the characters needed to show progress.

    Attributes:
        bar_start: Left edge of the bar.
        bar_end: Right edge of the bar.
        current: Filled cell.
        current_half_tone: Half-filled cell.
        empty: Empty cell.
        op_sign: Prefix for "operation" messages (e.g. "Extracting file.zip").
        stat_sign: Prefix for "stat" messages (e.g. "Extracted 26 files").
        separator: Separator between fields.
    """

    bar_start: str
    bar_end: str
    current: str
    current_half_tone: str
    empty: str
    op_sign: str
    stat_sign: str
    separator: str


THEMES: dict[str, ProgressTheme] = {
    "unicode": ProgressTheme("▐", "▌", "▓", "▒", "░", "•", "✓", "•"),
    "ascii": ProgressTheme("|", "|", "#", "=", "-", ">", "<", "|"),
    "cp437": ProgressTheme("▐", "▌", "█", "▒", "░", "∙", "√", "∙"),
}


def detect_charset(
    environ: Mapping[str, str] | None = None,
    platform: str | None = None,
) -> str:
    """Pick the palette name best suited to the current terminal.

    Args:
        environ: Environment variables (defaults to ``os.environ``).
        platform: Platform identifier (defaults to ``sys.platform``).

    Returns:
        "cp437" on Windows consoles, "unicode" for UTF-8 locales,
        "ascii" otherwise.
    """
    if environ is None:
        environ = os.environ
    if platform is None:
        platform = sys.platform

    if platform.startswith("win") and environ.get("OS") != "CYGWIN":
        return "cp437"

    for key in LOCALE_ENV_KEYS:
        value = environ.get(key, "")
        if value.endswith((".UTF-8", ".utf8")):
            return "unicode"

    return "ascii"


def resolve_theme(
    name: str | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    platform: str | None = None,
) -> ProgressTheme:
    """Resolve a progress theme.

    Args:
        name: Palette name ("unicode", "ascii", "cp437"). Detected from
            the environment when None.
        environ: Environment variables used for detection.
        platform: Platform identifier used for detection.

    Returns:
        The matching ProgressTheme.

    Raises:
        ValueError: If ``name`` is not a known palette.
    """
    if name is None:
        name = detect_charset(environ, platform)

    try:
        return THEMES[name.lower()]
    except KeyError:
        known = ", ".join(sorted(THEMES))
        raise ValueError(f"Unknown theme {name!r} (expected one of: {known})") from None
