"""Thread-safe logger writing timestamped lines to a stream and a file."""

from __future__ import annotations

import sys
import threading
from datetime import datetime
from enum import IntEnum
from typing import IO, Optional


class Level(IntEnum):
    """Log severity, ordered from least to most severe."""

    TRACE = 0
    DEBUG = 1
    INFO = 2
    WARNING = 3
    ERROR = 4
    FATAL = 5


class Logger:
    """Writes formatted log lines to a console stream and an optional file."""

    def __init__(self, level: Level = Level.INFO) -> None:
        self._min_level = Level(level)
        self._stream: Optional[IO[str]] = None
        self._console_output = True
        self._file: Optional[IO[str]] = None
        self._lock = threading.Lock()

    @property
    def level(self) -> Level:
        return self._min_level

    def set_log_file(self, filename: str) -> None:
        """Append log lines to ``filename``; report to stderr if it cannot be opened."""
        with self._lock:
            self._close_file()
            try:
                self._file = open(filename, "a", encoding="utf-8")
            except OSError:
                print(f"Cannot open log file: {filename}", file=sys.stderr)

    def set_stream(self, stream: IO[str]) -> None:
        """Send console output to ``stream`` instead of standard output."""
        with self._lock:
            self._stream = stream

    def set_console_output(self, enable: bool) -> None:
        with self._lock:
            self._console_output = bool(enable)

    def set_level(self, level: Level) -> None:
        with self._lock:
            self._min_level = Level(level)

    def log(self, level: Level, message: str) -> None:
        """Write ``message`` if ``level`` reaches the minimum level."""
        if level < self._min_level:
            return
        line = f"{_timestamp()} [{_level_name(level)}] {message}"
        with self._lock:
            if self._console_output:
                stream = self._stream if self._stream is not None else sys.stdout
                stream.write(line + "\n")
                stream.flush()
            if self._file is not None:
                self._file.write(line + "\n")
                self._file.flush()

    def trace(self, message: str) -> None:
        self.log(Level.TRACE, message)

    def debug(self, message: str) -> None:
        self.log(Level.DEBUG, message)

    def info(self, message: str) -> None:
        self.log(Level.INFO, message)

    def warning(self, message: str) -> None:
        self.log(Level.WARNING, message)

    def error(self, message: str) -> None:
        self.log(Level.ERROR, message)

    def fatal(self, message: str) -> None:
        self.log(Level.FATAL, message)

    def close(self) -> None:
        """Close the log file, if one is open."""
        with self._lock:
            self._close_file()

    def _close_file(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> "Logger":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def _level_name(level: int) -> str:
    try:
        return Level(level).name
    except ValueError:
        return "UNKNOWN"


def _timestamp() -> str:
    now = datetime.now()
    return f"{now:%Y-%m-%d %H:%M:%S}.{now.microsecond // 1000:03d}"


_INSTANCE = Logger()


def get_logger() -> Logger:
    """Return the process-wide logger."""
    return _INSTANCE