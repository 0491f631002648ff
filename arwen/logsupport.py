"""Category-filtered diagnostic logging to standard error."""

from __future__ import annotations

import enum
import os
import sys
import threading
import time
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import ClassVar, TextIO

_SEPARATORS = ";,:"


class FatalError(RuntimeError):
    """Raised after a fatal message or a failed assertion has been logged."""


class LogLevel(enum.IntEnum):
    """Severity of a log message."""

    NONE = 0
    TRACE = 1
    INFO = 2
    WARNING = 3
    ERROR = 4
    FATAL = 5

    @property
    def label(self) -> str:
        return self.name.capitalize()

    def __str__(self) -> str:
        return self.label

    @classmethod
    def by_name(cls, name: str) -> LogLevel | None:
        """Return the level whose label is exactly ``name``, or None."""
        for level in cls:
            if level.label == name:
                return level
        return None


@dataclass(frozen=True)
class LogMessage:
    """One message with its origin, category and severity."""

    file: str
    line: int
    function: str
    category: str
    level: LogLevel
    message: str


def _split(text: str) -> list[str]:
    parts = [text]
    for sep in _SEPARATORS:
        parts = [piece for part in parts for piece in part.split(sep)]
    return [part for part in parts if part]


def _shorten_file(file: str) -> str:
    if file.startswith("/"):
        return file.rsplit("/", 1)[1][:19]
    return file


class Logger:
    """Writes messages at or above a level, for enabled categories only."""

    _instance: ClassVar[Logger | None] = None
    _instance_lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(
        self,
        level: LogLevel = LogLevel.TRACE,
        categories: Iterable[str] = (),
        logfile: str | None = None,
        stream: TextIO | None = None,
    ) -> None:
        self.level = level
        self.logfile = logfile
        self.stream = stream
        self.categories: set[str] = set()
        self.all_enabled = False
        self._lock = threading.RLock()
        for category in categories:
            self.add_categories(category)

    @classmethod
    def from_environment(
        cls,
        environ: Mapping[str, str] | None = None,
        options: Mapping[str, object] | None = None,
    ) -> Logger:
        """Configure a logger from options, falling back to EDDY_* variables."""
        environ = os.environ if environ is None else environ
        options = {} if options is None else options
        logger = cls()

        logfile = options.get("logfile")
        if logfile is not None:
            logger.logfile = str(logfile)
        elif environ.get("EDDY_LOGFILE") is not None:
            logger.logfile = environ["EDDY_LOGFILE"]

        level_name = options.get("loglevel")
        if level_name is None:
            level_name = environ.get("EDDY_LOGLEVEL") or None
        if level_name is not None:
            level = LogLevel.by_name(str(level_name))
            if level is not None:
                logger.level = level

        trace = options.get("trace", ())
        if isinstance(trace, str):
            trace = (trace,)
        for categories in trace:  # type: ignore[union-attr]
            logger.add_categories(str(categories))
        env_trace = environ.get("EDDY_TRACE")
        if env_trace is not None:
            logger.add_categories(env_trace)
        return logger

    @classmethod
    def get_logger(cls) -> Logger:
        """Return the process-wide logger, building it on first use."""
        with cls._instance_lock:
            if cls._instance is None:
                cls._instance = cls.from_environment()
            return cls._instance

    def add_categories(self, categories: str) -> None:
        """Enable categories given as a list separated by ';', ',' or ':'."""
        for category in _split(categories):
            if category == "all":
                self.all_enabled = True
            else:
                self.categories.add(category)

    def format_message(self, msg: LogMessage, *args: object) -> str:
        """Render a message as one output line, without the newline."""
        file_line = f"{_shorten_file(msg.file)}:{msg.line}"
        prefix = f"{file_line:<24}:{msg.function:<20}:{msg.level.label:<5}:"
        return prefix + msg.message.format(*args)

    def logmsg(self, msg: LogMessage, *args: object) -> bool:
        """Write the message if its category and level allow; report whether it was."""
        with self._lock:
            if msg.category and msg.category not in self.categories and not self.all_enabled:
                return False
            if msg.level < self.level:
                return False
            stream = self.stream if self.stream is not None else sys.stderr
            stream.write(self.format_message(msg, *args) + "\n")
            stream.flush()
            return True

    def error_msg(self, file: str, line: int, function: str, message: str, *args: object) -> None:
        """Log an error and exit with status 1."""
        self.logmsg(LogMessage(file, line, function, "", LogLevel.ERROR, message), *args)
        raise SystemExit(1)

    def fatal_msg(self, file: str, line: int, function: str, message: str, *args: object) -> None:
        """Log a fatal message and raise ``FatalError``."""
        self.logmsg(LogMessage(file, line, function, "", LogLevel.FATAL, message), *args)
        raise FatalError(message.format(*args))

    def assert_msg(
        self,
        file: str,
        line: int,
        function: str,
        condition: bool,
        message: str,
        *args: object,
    ) -> None:
        """Do nothing if ``condition`` holds; otherwise log and raise ``FatalError``."""
        if condition:
            return
        self.fatal_msg(file, line, function, message, *args)


class LogCategory:
    """A named source of messages, filtered by the logger's enabled categories."""

    def __init__(self, name: str, logger: Logger | None = None) -> None:
        self.name = name
        self._logger = logger

    @property
    def logger(self) -> Logger:
        return self._logger if self._logger is not None else Logger.get_logger()

    def _log(self, level: LogLevel, file: str, line: int, function: str, message: str, args: tuple) -> bool:
        return self.logger.logmsg(LogMessage(file, line, function, self.name, level, message), *args)

    def trace_msg(self, file: str, line: int, function: str, message: str, *args: object) -> bool:
        return self._log(LogLevel.TRACE, file, line, function, message, args)

    def info_msg(self, file: str, line: int, function: str, message: str, *args: object) -> bool:
        return self._log(LogLevel.INFO, file, line, function, message, args)

    def warning_msg(self, file: str, line: int, function: str, message: str, *args: object) -> bool:
        return self._log(LogLevel.WARNING, file, line, function, message, args)

    def error_msg(self, file: str, line: int, function: str, message: str, *args: object) -> bool:
        return self._log(LogLevel.ERROR, file, line, function, message, args)

    @staticmethod
    def start() -> float:
        """Return the processor-time mark that ``log_duration`` measures from."""
        return time.process_time()

    def log_duration(
        self,
        clock_start: float,
        file: str,
        line: int,
        caller: str,
        msg: str,
        *args: object,
    ) -> bool:
        """Trace ``msg`` followed by the processor time elapsed since ``clock_start``."""
        duration_ms = max(0, int(1000.0 * (time.process_time() - clock_start)))
        timed = msg + " {}.{:03d} sec"
        return self._log(
            LogLevel.TRACE, file, line, caller, timed, (*args, duration_ms // 1000, duration_ms % 1000)
        )