"""
Log formatters.

A formatter turns a LogRecord into one line of text for a sink.
The wire format is one JSON object per line with the keys
level, logger, message, serviceName, timestamp in that order.
"""

import json
from abc import ABC, abstractmethod

from jsondiag.records import LogRecord


class LogFormatter(ABC):
    """Base formatter. Transforms LogRecord → string."""

    @abstractmethod
    def format(self, record: LogRecord) -> str: ...


class JsonFormatter(LogFormatter):
    """
    Structured JSON for machine ingestion.
    Newlines and non-ASCII characters (lone surrogates included) are
    escaped by the encoder, so the result is a single line of ASCII.
    """

    def format(self, record: LogRecord) -> str:
        return json.dumps(record.to_dict())
