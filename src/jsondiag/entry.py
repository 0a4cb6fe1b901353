"""
Log entry assembly.

Message text is built in a fixed order:
    format message → append rendered arguments → truncate
and the result is stamped with logger/service names and a timestamp.
"""

from typing import Any, Callable, Sequence

from jsondiag.config import LoggerOptions
from jsondiag.records import LogEntryInput, LogLevel, LogRecord, utc_timestamp
from jsondiag.rendering import DEFAULT_DEPTH, format_message, render_value, truncate

ARGUMENTS_SEPARATOR = ". Log arguments are: "

Clock = Callable[[], str]


def render_entry_text(message: Any, log_arguments: Sequence[Any] | None) -> str:
    """Formatted message followed by the rendered argument list."""
    if log_arguments is None:
        rendered = render_value(None)
    else:
        rendered = render_value(list(log_arguments), depth=DEFAULT_DEPTH)
    return format_message(message) + ARGUMENTS_SEPARATOR + rendered


class EntryBuilder:
    """Builds LogRecords for one options snapshot."""

    def __init__(self, options: LoggerOptions, clock: Clock | None = None):
        self.options = options
        self._clock = clock or utc_timestamp

    def build(self, entry_input: LogEntryInput) -> LogRecord:
        text = render_entry_text(entry_input.message, entry_input.log_arguments)
        text = truncate(text, self.options.truncate_limit, self.options.truncated_text)
        return LogRecord(
            logger=self.options.logger_name,
            service_name=self.options.service_name,
            level=entry_input.level,
            message=text,
            timestamp=self._clock(),
        )


def create_log_entry(
    message: Any,
    log_arguments: Sequence[Any] | None,
    level: LogLevel,
    logger_name: str,
    service_name: str,
    clock: Clock | None = None,
) -> LogRecord:
    """
    Build a record without an options snapshot: no truncation, no policy.

    ``log_arguments`` may be None, which renders as ``undefined``.
    """
    return LogRecord(
        logger=logger_name,
        service_name=service_name,
        level=level,
        message=render_entry_text(message, log_arguments),
        timestamp=(clock or utc_timestamp)(),
    )
