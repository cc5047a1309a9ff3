"""
Progress reporting utilities for vcsrepo.

Provides consistent progress reporting on stderr that keeps stdout clean
for data and respects piping and redirection.
"""

import os
import sys
from enum import Enum
from typing import Optional, TextIO


class LogLevel(Enum):
    """Log levels for progress messages."""
    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3
    SUCCESS = 4


class ProgressReporter:
    """Handles progress reporting to stderr while keeping stdout clean for data."""

    def __init__(self, enabled: Optional[bool] = None, force_tty: bool = False,
                 use_colors: Optional[bool] = None, stream: Optional[TextIO] = None):
        """
        Initialize progress reporter.

        Args:
            enabled: Explicitly enable/disable progress. None = auto-detect
            force_tty: Treat the stream as a TTY even if it's not (for testing)
            use_colors: Use ANSI colors in output
            stream: Output stream (default: sys.stderr at call time)
        """
        self._stream = stream
        self.force_tty = force_tty

        if enabled is None:
            # Auto-detect: show progress if stderr is a terminal
            self.enabled = self.is_tty
        else:
            self.enabled = enabled

        if use_colors is None:
            self.use_colors = self.is_tty and os.environ.get('NO_COLOR') is None
        else:
            self.use_colors = use_colors

        # Length of the status line currently on screen
        self._last_overwrite = 0

        self.colors = {
            'reset': '\033[0m',
            'bold': '\033[1m',
            'dim': '\033[2m',
            'red': '\033[31m',
            'green': '\033[32m',
            'yellow': '\033[33m',
        }

    @property
    def stream(self) -> TextIO:
        return self._stream or sys.stderr

    @property
    def is_tty(self) -> bool:
        return self.force_tty or self.stream.isatty()

    def _colorize(self, text: str, color: str) -> str:
        """Add color to text if colors are enabled."""
        if self.use_colors and color in self.colors:
            return f"{self.colors[color]}{text}{self.colors['reset']}"
        return text

    def __call__(self, message: str, force: bool = False, level: LogLevel = LogLevel.INFO):
        """
        Output progress message to stderr if enabled.

        Args:
            message: Progress message to display
            force: Force output even if disabled
            level: Log level for the message
        """
        if force or self.enabled:
            if level == LogLevel.ERROR:
                message = self._colorize(f"✗ {message}", 'red')
            elif level == LogLevel.WARNING:
                message = self._colorize(f"⚠ {message}", 'yellow')
            elif level == LogLevel.SUCCESS:
                message = self._colorize(f"✓ {message}", 'green')
            elif level == LogLevel.DEBUG:
                message = self._colorize(f"  {message}", 'dim')
            self.write(message)

    def write(self, message: str) -> None:
        """Write a full line, clearing any status line first. Always shown."""
        self._clear_status()
        print(message, file=self.stream, flush=True)

    def overwrite(self, message: str, newline: bool = False) -> None:
        """
        Replace the current status line.

        Only drawn when progress is enabled and the stream is a terminal;
        an empty message just clears the line.
        """
        if not (self.enabled and self.is_tty):
            return
        padding = max(0, self._last_overwrite - len(message))
        end = "\n" if newline else ""
        print(f"\r{message}{' ' * padding}", end=end, file=self.stream, flush=True)
        self._last_overwrite = 0 if newline else len(message)

    def _clear_status(self) -> None:
        if self._last_overwrite:
            print(f"\r{' ' * self._last_overwrite}\r", end="", file=self.stream, flush=True)
            self._last_overwrite = 0

    def error(self, message: str):
        """Always output errors to stderr."""
        self.write(self._colorize(f"ERROR: {message}", 'red'))

    def warning(self, message: str):
        """Output warnings to stderr if enabled."""
        if self.enabled:
            self.write(self._colorize(f"WARNING: {message}", 'yellow'))

    def success(self, message: str):
        """Output success message if enabled."""
        if self.enabled:
            self(message, level=LogLevel.SUCCESS)


# Global progress reporter instance
_progress = None


def get_progress(enabled: Optional[bool] = None) -> ProgressReporter:
    """
    Get the global progress reporter.

    Args:
        enabled: Override auto-detection of progress display

    Returns:
        ProgressReporter instance
    """
    global _progress
    if _progress is None or enabled is not None:
        _progress = ProgressReporter(enabled)
    return _progress


# Environment variable override
if os.environ.get('VCSREPO_PROGRESS') == '0':
    _progress = ProgressReporter(enabled=False)
elif os.environ.get('VCSREPO_PROGRESS') == '1':
    _progress = ProgressReporter(enabled=True)
