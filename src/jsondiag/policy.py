"""
Level override policy.

Decides the effective level of each diagnostic call. Operators use the
override options to demote noisy but expected shapes (transient timeouts,
service request failures, startup registration chatter) without lowering
the global floor. Unclassified calls keep their default level.

Debug calls (first match wins):
    1. "Registered a global" + override configured   → override level
    2. first-incoming-request mode:
       a. first marker call                           → synthetic INFO record
       b. floor set, DEBUG reaches it, not a marker   → DEBUG
       c. otherwise                                   → nothing
    3. otherwise                                      → DEBUG

Error calls (first match wins):
    service request → timeout → async attribute → ERROR
"""

from typing import Any, Sequence

from jsondiag.classify import (
    is_async_attribute_error,
    is_incoming_request_marker,
    is_registered_global_message,
    is_service_request_error,
    is_timeout,
)
from jsondiag.config import LoggerOptions
from jsondiag.records import LogEntryInput, LogLevel, is_at_least

FIRST_INCOMING_REQUEST_MESSAGE = "First incoming request"


class LevelOverridePolicy:
    """
    Computes effective levels. Holds the only mutable adapter state: whether
    the first incoming request has already been reported.
    """

    def __init__(self) -> None:
        self._first_incoming_request_logged = False

    @property
    def first_incoming_request_logged(self) -> bool:
        return self._first_incoming_request_logged

    def resolve(
        self,
        requested: LogLevel,
        message: Any,
        arguments: Sequence[Any],
        options: LoggerOptions,
    ) -> list[LogEntryInput]:
        """
        Return the entries a call should produce, with effective levels.

        Usually one entry; none when a debug call is suppressed in
        first-incoming-request mode.
        """
        args = tuple(arguments)

        if requested == LogLevel.DEBUG:
            return self._resolve_debug(message, args, options)

        if requested == LogLevel.VERBOSE:
            level = options.log_level_for_verbose
            if level is None:
                level = LogLevel.VERBOSE
        elif requested == LogLevel.ERROR:
            level = self.error_level(message, options)
        elif requested in (LogLevel.INFO, LogLevel.WARN):
            level = requested
        else:
            raise ValueError(f"No diagnostic call at level {requested.name}")

        return [LogEntryInput(message=message, log_arguments=args, level=level)]

    def _resolve_debug(
        self,
        message: Any,
        args: tuple[Any, ...],
        options: LoggerOptions,
    ) -> list[LogEntryInput]:
        override = options.log_level_for_register_global_messages
        if override is not None and is_registered_global_message(message):
            return [LogEntryInput(message=message, log_arguments=args, level=override)]

        if not options.log_first_incoming_request:
            return [LogEntryInput(message=message, log_arguments=args, level=LogLevel.DEBUG)]

        is_marker = is_incoming_request_marker(args)
        if not self._first_incoming_request_logged and is_marker:
            self._first_incoming_request_logged = True
            return [
                LogEntryInput(
                    message=FIRST_INCOMING_REQUEST_MESSAGE,
                    log_arguments=(),
                    level=LogLevel.INFO,
                )
            ]

        floor = options.min_log_level
        if floor is not None and is_at_least(LogLevel.DEBUG, floor) and not is_marker:
            return [LogEntryInput(message=message, log_arguments=args, level=LogLevel.DEBUG)]

        return []

    @staticmethod
    def error_level(message: Any, options: LoggerOptions) -> LogLevel:
        """Effective level for an error call."""
        override = options.log_level_for_service_request_error_messages
        if override is not None and is_service_request_error(message):
            return override

        override = options.log_level_for_timeout_error_messages
        if override is not None and is_timeout(message):
            return override

        override = options.log_level_for_async_attribute_error
        if override is not None and is_async_attribute_error(message):
            return override

        return LogLevel.ERROR
