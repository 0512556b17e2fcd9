"""Streaming line reporter for error series."""

from __future__ import annotations

from typing import IO, Iterable, Iterator, List

from ..config import ERROR_FORMAT
from ..models.results import ErrorPoint


class ErrorReporter:
    """
    Write one ``<sampleCount> <meanError>`` line per error point.

    Every line is flushed as soon as it is written so a long run can be
    followed incrementally. With ``include_max`` the maximum error is appended
    as a third column. Write errors propagate to the caller.
    """

    def __init__(self, sink: IO[str], *, include_max: bool = False, float_format: str = ERROR_FORMAT) -> None:
        self.sink = sink
        self.include_max = include_max
        self.float_format = float_format
        self.lines_written = 0

    def format(self, point: ErrorPoint) -> str:
        line = f"{point.sample_count:d} " + self.float_format % point.mean_error
        if self.include_max:
            line += " " + self.float_format % point.max_error
        return line

    def emit(self, point: ErrorPoint) -> None:
        self.sink.write(self.format(point) + "\n")
        self.sink.flush()
        self.lines_written += 1

    def emit_all(self, points: Iterable[ErrorPoint]) -> int:
        """Consume ``points`` and emit each one; returns the number of lines written."""
        for point in points:
            self.emit(point)
        return self.lines_written


class SeriesRecorder:
    """Pass error points through unchanged while keeping a copy for export."""

    def __init__(self, points: Iterable[ErrorPoint]) -> None:
        self._points = points
        self.recorded: List[ErrorPoint] = []

    def __iter__(self) -> Iterator[ErrorPoint]:
        for point in self._points:
            self.recorded.append(point)
            yield point


__all__ = ["ErrorReporter", "SeriesRecorder"]
