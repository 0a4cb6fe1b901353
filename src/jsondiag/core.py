"""
JsonDiagLogger: diagnostic logger that writes one JSON object per line.

Every call runs synchronously to completion:
    classify → resolve effective level → gate → build → format → sink

The gate runs before any rendering, so suppressed calls do no formatting
work. The logger never raises on the logging path.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional

from jsondiag.config import LoggerOptions
from jsondiag.entry import Clock, EntryBuilder
from jsondiag.formatters import JsonFormatter, LogFormatter
from jsondiag.policy import LevelOverridePolicy
from jsondiag.records import LogEntryInput, LogLevel, LogRecord, should_emit
from jsondiag.sinks import LineSink, StreamSink


class DiagLogger(ABC):
    """The five-method diagnostic logging contract."""

    @abstractmethod
    def debug(self, message: Any = None, *args: Any) -> None: ...

    @abstractmethod
    def verbose(self, message: Any = None, *args: Any) -> None: ...

    @abstractmethod
    def info(self, message: Any = None, *args: Any) -> None: ...

    @abstractmethod
    def warn(self, message: Any = None, *args: Any) -> None: ...

    @abstractmethod
    def error(self, message: Any = None, *args: Any) -> None: ...


class JsonDiagLogger(DiagLogger):
    """
    Policy-driven DiagLogger with JSON line output.

    Usage:
        log = JsonDiagLogger({"logger_name": "otel", "service_name": "checkout"})
        log.error("Service request", {"url": "/pay"})
        log.set_options(LoggerOptions.from_yaml("diag.yaml"))

    One instance is meant for one sequential caller; replacing options
    while another thread logs through the same instance is not supported.
    """

    def __init__(
        self,
        options: LoggerOptions | Mapping[str, Any],
        sink: LineSink | None = None,
        clock: Clock | None = None,
        formatter: LogFormatter | None = None,
    ):
        self._options = _coerce_options(options)
        self._sink = sink or StreamSink()
        self._clock = clock
        self._formatter = formatter or JsonFormatter()
        self._policy = LevelOverridePolicy()

    @classmethod
    def from_yaml(
        cls,
        path: str | Path,
        sink: LineSink | None = None,
        clock: Clock | None = None,
    ) -> "JsonDiagLogger":
        """Build a logger from a YAML options file."""
        return cls(LoggerOptions.from_yaml(path), sink=sink, clock=clock)

    # ── Configuration ─────────────────────────────────────────────

    @property
    def options(self) -> LoggerOptions:
        return self._options

    def set_options(self, options: LoggerOptions | Mapping[str, Any]) -> None:
        """
        Replace the options snapshot wholesale. Nothing from the previous
        snapshot carries over; if validation fails the previous snapshot
        stays in place.
        """
        self._options = _coerce_options(options)

    @property
    def sink(self) -> LineSink:
        return self._sink

    @property
    def first_incoming_request_logged(self) -> bool:
        return self._policy.first_incoming_request_logged

    # ── DiagLogger ────────────────────────────────────────────────

    def debug(self, message: Any = None, *args: Any) -> None:
        self._dispatch(LogLevel.DEBUG, message, args)

    def verbose(self, message: Any = None, *args: Any) -> None:
        self._dispatch(LogLevel.VERBOSE, message, args)

    def info(self, message: Any = None, *args: Any) -> None:
        self._dispatch(LogLevel.INFO, message, args)

    def warn(self, message: Any = None, *args: Any) -> None:
        self._dispatch(LogLevel.WARN, message, args)

    def error(self, message: Any = None, *args: Any) -> None:
        self._dispatch(LogLevel.ERROR, message, args)

    def _dispatch(self, requested: LogLevel, message: Any, args: tuple[Any, ...]) -> None:
        options = self._options
        for entry_input in self._policy.resolve(requested, message, args, options):
            self._emit(entry_input, options)

    # ── Emission ──────────────────────────────────────────────────

    def log_message(self, entry_input: LogEntryInput) -> None:
        """Gate, build and write one entry at its given level."""
        self._emit(entry_input, self._options)

    def create_log_entry(self, entry_input: LogEntryInput) -> LogRecord:
        """Build the record for an entry with the current options."""
        return EntryBuilder(self._options, self._clock).build(entry_input)

    def _emit(self, entry_input: LogEntryInput, options: LoggerOptions) -> None:
        if not should_emit(entry_input.level, options.min_log_level):
            return

        record = EntryBuilder(options, self._clock).build(entry_input)
        line = self._formatter.format(record)
        try:
            self._sink.write(line)
        except Exception:
            # A failing sink must never crash the caller
            pass

    # ── Status ────────────────────────────────────────────────────

    def status(self) -> dict:
        """Current options and adapter state, for display."""
        return {
            "options": self._options.to_dict(),
            "first_incoming_request_logged": self.first_incoming_request_logged,
            "sink": type(self._sink).__name__,
            "formatter": type(self._formatter).__name__,
        }

    def close(self) -> None:
        """Close the sink. Call during shutdown."""
        self._sink.close()


# ── Helpers ───────────────────────────────────────────────────────────

def _coerce_options(options: Optional[LoggerOptions | Mapping[str, Any]]) -> LoggerOptions:
    """Accept a snapshot or a mapping to validate into one."""
    if isinstance(options, LoggerOptions):
        return options
    if isinstance(options, Mapping):
        return LoggerOptions.from_dict(dict(options))
    raise TypeError(
        f"Expected LoggerOptions or mapping, got {type(options).__name__}"
    )
