"""
Run Logger

Leveled, categorised console logging for pipeline runs and channel sweeps.
Messages go to stderr so the report table on stdout stays clean; an
optional log file receives the same lines without colour codes.
"""

from collections import Counter
from datetime import datetime
from enum import IntEnum
from typing import Optional, TextIO
import os
import re
import sys

from config import DEFAULT_LOG_LEVEL


class LogLevel(IntEnum):
    """Severity, lowest first."""
    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3
    CRITICAL = 4

    @classmethod
    def parse(cls, value) -> 'LogLevel':
        """Accept a LogLevel, its integer value or its name (any case)."""
        if isinstance(value, str):
            try:
                return cls[value.upper()]
            except KeyError:
                raise ValueError(f"Unknown log level: {value}") from None
        return cls(value)


_ANSI = re.compile(r'\033\[[0-9;]*m')


class SimulationLogger:
    """
    Console logger for simulation runs.

    Each line carries an optional timestamp, the level, the logger name and
    an optional category such as RUN, STAGE or SWEEP. Counts are kept per
    level and per category for the end-of-run summary.

    Attributes:
        name: Shown in brackets on every line
        level: Messages below this level are dropped
        stream: Console stream (stderr by default)
        file: Log file, if one was opened
    """

    LEVEL_COLORS = {
        LogLevel.DEBUG: '\033[36m',
        LogLevel.INFO: '\033[32m',
        LogLevel.WARNING: '\033[33m',
        LogLevel.ERROR: '\033[31m',
        LogLevel.CRITICAL: '\033[1;35m',
    }
    RESET = '\033[0m'

    def __init__(
        self,
        name: str = "FEC",
        level=DEFAULT_LOG_LEVEL,
        log_file: Optional[str] = None,
        stream: Optional[TextIO] = None,
        use_colors: Optional[bool] = None,
        include_timestamp: bool = True
    ):
        """
        Args:
            name: Logger name
            level: Minimum level (LogLevel, int or name)
            log_file: Also write every line to this file
            stream: Console stream, stderr when None
            use_colors: Colour the level; by default only on a terminal
            include_timestamp: Prefix lines with the wall-clock time
        """
        self.name = name
        self.level = LogLevel.parse(level)
        self.stream = stream if stream is not None else sys.stderr
        if use_colors is None:
            use_colors = hasattr(self.stream, 'isatty') and self.stream.isatty()
        self.use_colors = use_colors
        self.include_timestamp = include_timestamp

        self.file: Optional[TextIO] = None
        if log_file:
            os.makedirs(os.path.dirname(log_file) or '.', exist_ok=True)
            self.file = open(log_file, 'a')

        self.level_counts = Counter()
        self.category_counts = Counter()

    def set_level(self, level):
        self.level = LogLevel.parse(level)

    def is_enabled(self, level: LogLevel) -> bool:
        return level >= self.level

    def _render(self, level: LogLevel, message: str, category: Optional[str]) -> str:
        fields = []
        if self.include_timestamp:
            fields.append(datetime.now().strftime('%H:%M:%S.%f')[:-3])

        label = f"{level.name:<8}"
        if self.use_colors:
            label = self.LEVEL_COLORS[level] + label + self.RESET
        fields.append(label)
        fields.append(f"[{self.name}]")
        if category:
            fields.append(f"[{category}]")
        fields.append(message)
        return " ".join(fields)

    def log(self, level: LogLevel, message: str, category: Optional[str] = None):
        """Emit one line if the level is enabled."""
        if not self.is_enabled(level):
            return

        self.level_counts[level] += 1
        if category:
            self.category_counts[category] += 1

        line = self._render(level, message, category)
        print(line, file=self.stream)
        if self.file:
            self.file.write(_ANSI.sub('', line) + '\n')
            self.file.flush()

    def debug(self, message: str, category: Optional[str] = None):
        self.log(LogLevel.DEBUG, message, category)

    def info(self, message: str, category: Optional[str] = None):
        self.log(LogLevel.INFO, message, category)

    def warning(self, message: str, category: Optional[str] = None):
        self.log(LogLevel.WARNING, message, category)

    def error(self, message: str, category: Optional[str] = None):
        self.log(LogLevel.ERROR, message, category)

    def critical(self, message: str, category: Optional[str] = None):
        self.log(LogLevel.CRITICAL, message, category)

    # Pipeline and sweep events
    def stage(self, name: str, size: int):
        """A pipeline stage produced `size` bytes."""
        self.debug(f"{name}: {size} bytes", "STAGE")

    def corrections(self, corrected: int, total: int):
        self.debug(f"Corrected {corrected}/{total} codewords", "DECODE")

    def run_start(self, index: int, h: float, tau: float):
        self.info(f"Run {index}: h={h}, tau={tau}", "RUN")

    def run_end(self, index: int, channel_errors: int, residual_errors: int):
        self.info(
            f"Run {index} done: channel errors={channel_errors}, "
            f"residual errors={residual_errors}",
            "RUN"
        )

    def run_failed(self, index: int, error: Exception):
        """A configuration raised; the sweep goes on without it."""
        self.error(f"Run {index} failed: {type(error).__name__}: {error}", "RUN")

    def progress(self, completed: int, total: int):
        pct = 100.0 * completed / total if total else 100.0
        self.debug(f"{completed}/{total} runs ({pct:.0f}%)", "SWEEP")

    def get_summary(self) -> dict:
        """Message counts by level name and by category."""
        return {
            'levels': {level.name: self.level_counts[level] for level in LogLevel},
            'categories': dict(self.category_counts),
            'total_messages': sum(self.level_counts.values())
        }

    def close(self):
        if getattr(self, 'file', None):
            self.file.close()
            self.file = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def __del__(self):
        self.close()


_global_logger: Optional[SimulationLogger] = None


def get_logger() -> SimulationLogger:
    """Shared logger, created on first use."""
    global _global_logger
    if _global_logger is None:
        _global_logger = SimulationLogger()
    return _global_logger


def set_logger(logger: SimulationLogger):
    """Replace the shared logger."""
    global _global_logger
    _global_logger = logger
