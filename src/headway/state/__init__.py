"""Task state collaborators: progress themes and consumer callbacks."""

from headway.state.consumer import Consumer, MessageLevel
from headway.state.theme import (
    THEMES,
    ProgressTheme,
    detect_charset,
    resolve_theme,
)

__all__ = [
    "THEMES",
    "Consumer",
    "MessageLevel",
    "ProgressTheme",
    "detect_charset",
    "resolve_theme",
]
