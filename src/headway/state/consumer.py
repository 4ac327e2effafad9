"""Consumer callbacks for task state changes.

A Consumer bundles the callbacks one might want to receive while a task
runs: progress updates, pause/resume, label changes and log messages.
Every callback defaults to a no-op, so producers can notify a Consumer
unconditionally.

Example usage:
    import logging

    from headway.state import Consumer

    consumer = Consumer.from_logger(logging.getLogger("extract"))
    consumer.opf("Extracting (%s)", "file.zip")
    consumer.progress(0.5)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from headway.state.theme import ProgressTheme, resolve_theme

if TYPE_CHECKING:
    from collections.abc import Callable


class MessageLevel(Enum):
    """Level of a consumer log message."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


_LOGGING_LEVELS: dict[MessageLevel, int] = {
    MessageLevel.DEBUG: logging.DEBUG,
    MessageLevel.INFO: logging.INFO,
    MessageLevel.WARNING: logging.WARNING,
    MessageLevel.ERROR: logging.ERROR,
}


def _ignore(*args: Any) -> None:
    """Default callback: does nothing."""


@dataclass
class Consumer:
    """Callbacks for the state changes of a task.

    Attributes:
        on_progress: Receives the degree of completion, in [0, 1].
        on_pause_progress: Called when progress display should pause.
        on_resume_progress: Called when progress display should resume.
        on_progress_label: Receives extra info about the current step.
        on_message: Receives a level and an already-formatted message.
        theme: Theme supplying the op and stat signs.
    """

    on_progress: Callable[[float], None] = _ignore
    on_pause_progress: Callable[[], None] = _ignore
    on_resume_progress: Callable[[], None] = _ignore
    on_progress_label: Callable[[str], None] = _ignore
    on_message: Callable[[MessageLevel, str], None] = _ignore
    theme: ProgressTheme = field(default_factory=resolve_theme)

    @classmethod
    def from_logger(
        cls,
        log: logging.Logger,
        *,
        theme: ProgressTheme | None = None,
    ) -> Consumer:
        """Create a consumer that forwards messages to a stdlib logger.

        Args:
            log: Logger receiving the messages.
            theme: Theme for op/stat signs (resolved from the environment
                when None).

        Returns:
            A Consumer whose progress callbacks are no-ops.
        """

        def on_message(level: MessageLevel, msg: str) -> None:
            log.log(_LOGGING_LEVELS[level], msg)

        return cls(
            on_message=on_message,
            theme=theme if theme is not None else resolve_theme(),
        )

    def progress(self, alpha: float) -> None:
        """Announce the degree of completion of a task, in [0, 1]."""
        self.on_progress(alpha)

    def pause_progress(self) -> None:
        """Temporarily stop updating progress."""
        self.on_pause_progress()

    def resume_progress(self) -> None:
        """Resume updating progress."""
        self.on_resume_progress()

    def progress_label(self, label: str) -> None:
        """Give extra info about which step is currently running."""
        self.on_progress_label(label)

    def debug(self, msg: str, *args: Any) -> None:
        self._emit(MessageLevel.DEBUG, msg, args)

    def info(self, msg: str, *args: Any) -> None:
        self._emit(MessageLevel.INFO, msg, args)

    def logf(self, msg: str, *args: Any) -> None:
        """Alias of ``info``."""
        self.info(msg, *args)

    def warn(self, msg: str, *args: Any) -> None:
        self._emit(MessageLevel.WARNING, msg, args)

    def error(self, msg: str, *args: Any) -> None:
        self._emit(MessageLevel.ERROR, msg, args)

    def opf(self, msg: str, *args: Any) -> None:
        """Log an "operation" message, e.g. "Extracting (file.zip)"."""
        self.info("%s %s", self.theme.op_sign, _format(msg, args))

    def statf(self, msg: str, *args: Any) -> None:
        """Log a "stat" message, e.g. "Extracted 26 files"."""
        self.info("%s %s", self.theme.stat_sign, _format(msg, args))

    def count_callback(self, total_size: int) -> Callable[[int], None]:
        """Return a callback turning a byte count into a progress update.

        Args:
            total_size: Total number of bytes the task goes through.

        Returns:
            Callable taking the number of bytes processed so far.
        """

        def on_count(count: int) -> None:
            if total_size <= 0:
                return
            self.progress(count / total_size)

        return on_count

    def _emit(self, level: MessageLevel, msg: str, args: tuple[Any, ...]) -> None:
        self.on_message(level, _format(msg, args))


def _format(msg: str, args: tuple[Any, ...]) -> str:
    return msg % args if args else msg
