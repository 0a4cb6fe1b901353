"""
Bridge from stdlib ``logging`` to a DiagLogger.

Python libraries (the OpenTelemetry SDK among them) report diagnostics
through stdlib loggers rather than a five-method facade. Attaching a
DiagLoggingHandler routes those records through the same level policy.

Usage:
    diag = JsonDiagLogger(options)
    attach(diag, "opentelemetry")
"""

from __future__ import annotations

import logging

from jsondiag.core import DiagLogger


class DiagLoggingHandler(logging.Handler):
    """
    Maps stdlib records onto the five DiagLogger methods.

        >= ERROR   → error
        >= WARNING → warn
        >= INFO    → info
        >= DEBUG   → debug
        below      → verbose
    """

    def __init__(self, diag_logger: DiagLogger, level: int = logging.NOTSET):
        super().__init__(level)
        self.diag_logger = diag_logger

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = record.getMessage()
            args = ()
            if record.exc_info and record.exc_info[0] is not None:
                args = (logging.Formatter().formatException(record.exc_info),)
            self._method_for(record.levelno)(message, *args)
        except Exception:
            self.handleError(record)

    def _method_for(self, levelno: int):
        if levelno >= logging.ERROR:
            return self.diag_logger.error
        if levelno >= logging.WARNING:
            return self.diag_logger.warn
        if levelno >= logging.INFO:
            return self.diag_logger.info
        if levelno >= logging.DEBUG:
            return self.diag_logger.debug
        return self.diag_logger.verbose


def attach(diag_logger: DiagLogger, logger_name: str | None = None) -> DiagLoggingHandler:
    """Install a DiagLoggingHandler on a stdlib logger and return it."""
    handler = DiagLoggingHandler(diag_logger)
    logging.getLogger(logger_name).addHandler(handler)
    return handler
