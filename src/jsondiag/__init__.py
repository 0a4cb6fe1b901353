"""
jsondiag: policy-driven JSON diagnostic logger.

Turns free-form diagnostic calls (debug, verbose, info, warn, error) into
single-line JSON records, remapping the level of well-known noisy message
shapes and bounding message length.
"""

from jsondiag.core import DiagLogger, JsonDiagLogger
from jsondiag.config import LoggerOptions
from jsondiag.records import (
    LogEntryInput,
    LogLevel,
    LogRecord,
    is_at_least,
    rank,
    should_emit,
)
from jsondiag.entry import EntryBuilder, create_log_entry
from jsondiag.policy import LevelOverridePolicy
from jsondiag.rendering import format_message, render_value, truncate
from jsondiag.formatters import LogFormatter, JsonFormatter
from jsondiag.sinks import LineSink, StreamSink, ListSink
from jsondiag.bridge import DiagLoggingHandler, attach

__all__ = [
    "DiagLogger",
    "JsonDiagLogger",
    "LoggerOptions",
    "LogEntryInput",
    "LogLevel",
    "LogRecord",
    "is_at_least",
    "rank",
    "should_emit",
    "EntryBuilder",
    "create_log_entry",
    "LevelOverridePolicy",
    "format_message",
    "render_value",
    "truncate",
    "LogFormatter",
    "JsonFormatter",
    "LineSink",
    "StreamSink",
    "ListSink",
    "DiagLoggingHandler",
    "attach",
]
