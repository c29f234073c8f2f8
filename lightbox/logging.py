"""Logging with wall-clock offsets and frame numbers.

Every line is prefixed with the seconds since start-up and the frame counter
maintained by the main loop, so a trace can be lined up with what was on
screen at the time.
"""

from __future__ import annotations
import sys
import time
from typing import Optional, TextIO

from .config import DEBUG


class Logger:
    """Application logger with timestamps and frame counts."""

    def __init__(self, stream: Optional[TextIO] = None, debug: bool = DEBUG):
        self._start_time: float = time.perf_counter()
        self._frame: int = 0
        self._stream = stream
        self.debug_enabled = debug

    @property
    def frame(self) -> int:
        return self._frame

    @frame.setter
    def frame(self, value: int) -> None:
        self._frame = value

    def increment_frame(self) -> None:
        self._frame += 1

    @property
    def elapsed(self) -> float:
        """Seconds since logger was created."""
        return time.perf_counter() - self._start_time

    def format(self, msg: str) -> str:
        return f"[{self.elapsed:7.3f}s F{self._frame:06d}] {msg}\n"

    def log(self, msg: str) -> None:
        """Write a line to stdout, falling back to stderr if stdout is gone."""
        line = self.format(msg)
        stream = self._stream or sys.stdout
        try:
            stream.write(line)
            stream.flush()
        except (OSError, ValueError):
            try:
                sys.stderr.write(line)
                sys.stderr.flush()
            except (OSError, ValueError):
                pass

    def debug(self, msg: str) -> None:
        if self.debug_enabled:
            self.log(msg)

    def __call__(self, msg: str) -> None:
        self.log(msg)


# Global logger instance
_logger: Optional[Logger] = None


def get_logger() -> Logger:
    """Get or create the global logger instance."""
    global _logger
    if _logger is None:
        _logger = Logger()
    return _logger


def set_logger(logger: Logger) -> Logger:
    """Replace the global logger (tests capture output this way)."""
    global _logger
    _logger = logger
    return logger


def log(msg: str) -> None:
    get_logger().log(msg)


def debug(msg: str) -> None:
    get_logger().debug(msg)


def get_frame() -> int:
    return get_logger().frame


def increment_frame() -> None:
    get_logger().increment_frame()


def now() -> float:
    """Current time in seconds (high precision)."""
    return time.perf_counter()
