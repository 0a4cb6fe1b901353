"""
Line sinks (output destinations).

A sink takes one finished line of text and writes it somewhere.
The logger owns exactly one sink; there is no fan-out.
"""

import sys
from abc import ABC, abstractmethod
from typing import TextIO


class LineSink(ABC):
    """Base sink. Receives formatted lines."""

    @abstractmethod
    def write(self, line: str) -> None:
        """Write one line. The line carries no trailing newline."""
        ...

    def flush(self) -> None:
        """Flush any pending output. Override if the sink holds some."""
        pass

    def close(self) -> None:
        """Cleanup. Override if sink holds resources."""
        self.flush()


class StreamSink(LineSink):
    """
    Writes each line to a text stream.
    Without an explicit stream, uses whatever sys.stdout is at write time.
    """

    def __init__(self, stream: TextIO | None = None):
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def write(self, line: str) -> None:
        stream = self.stream
        stream.write(line + "\n")
        stream.flush()

    def flush(self) -> None:
        self.stream.flush()


class ListSink(LineSink):
    """Keeps written lines in memory, in write order."""

    def __init__(self) -> None:
        self._lines: list[str] = []

    def write(self, line: str) -> None:
        self._lines.append(line)

    @property
    def lines(self) -> list[str]:
        return list(self._lines)

    @property
    def count(self) -> int:
        return len(self._lines)

    def clear(self) -> None:
        self._lines.clear()
