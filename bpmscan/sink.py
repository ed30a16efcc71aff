"""Destinations for report lines.

The batch coordinator is the only writer; each sink still serializes its
own writes so a line is never split if one is shared between runners.
"""
from __future__ import annotations

import abc
import sys
import threading
from typing import List, Optional, TextIO


class OutputSink(abc.ABC):
    """Line-oriented report destination."""

    def __init__(self):
        self._lock = threading.Lock()

    def write(self, line: str, *, error: bool = False) -> None:
        with self._lock:
            self._emit(line, error)

    @abc.abstractmethod
    def _emit(self, line: str, error: bool) -> None:
        ...


class ConsoleSink(OutputSink):
    """Report lines to stdout, error lines to stderr."""

    def __init__(self, out: Optional[TextIO] = None, err: Optional[TextIO] = None):
        super().__init__()
        self._out = out
        self._err = err

    def _emit(self, line: str, error: bool) -> None:
        stream = (self._err or sys.stderr) if error else (self._out or sys.stdout)
        stream.write(line + "\n")
        stream.flush()


class MemorySink(OutputSink):
    """Collects lines in memory; used by the HTTP layer and tests."""

    def __init__(self):
        super().__init__()
        self.lines: List[str] = []
        self.errors: List[str] = []

    def _emit(self, line: str, error: bool) -> None:
        self.lines.append(line)
        if error:
            self.errors.append(line)
