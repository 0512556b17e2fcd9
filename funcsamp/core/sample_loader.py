"""Parsing of fixed-format sample tables.

A sample file starts with a short descriptive header, followed by one block
per sequence: a marker line (``// Sequence 0:``, ``Sequence 0:`` or just a
sequence number) and then one point per line as two whitespace separated
reals::

    // Table of 100 sequences of 1024 uniform random 2D samples
    // Each sample is generated with drand48().
    // Sequence 0:
    0.000000000000 0.000985394675
    0.041631001595 0.176642642543
    ...
    // Sequence 1:
    ...
"""

from __future__ import annotations

import logging
from math import isfinite
from pathlib import Path
from typing import IO, Iterable, List, Optional, Tuple, Union

from ..config import DEFAULT_HEADER_LINES
from ..models.samples import SampleTable
from .validator import MalformedInput, SourceUnavailable, validate_counts

LOGGER = logging.getLogger(__name__)

MARKER_PREFIXES = ("//", "#")

SampleSource = Union[str, Path, IO[str]]


def _is_point(line: str) -> bool:
    tokens = line.split()
    if len(tokens) < 2:
        return False
    try:
        float(tokens[0]), float(tokens[1])
    except ValueError:
        return False
    return True


def _parse_point(line: str, line_number: int) -> Tuple[float, float]:
    tokens = line.split()
    if len(tokens) < 2:
        raise MalformedInput(f"Line {line_number}: expected two numbers, got {line.strip()!r}")
    try:
        x, y = float(tokens[0]), float(tokens[1])
    except ValueError as exc:
        raise MalformedInput(f"Line {line_number}: cannot parse point {line.strip()!r}") from exc
    if not (isfinite(x) and isfinite(y)):
        raise MalformedInput(f"Line {line_number}: non-finite coordinate in {line.strip()!r}")
    return x, y


class SampleLoader:
    """Load tables of 2D sample sequences from text sources.

    With ``strict=False`` (the default) a truncated source yields a partial
    table flagged ``truncated``; the estimator then refuses to run on counts the
    table cannot supply. With ``strict=True`` truncation raises
    ``MalformedInput`` immediately.
    """

    def __init__(self, header_lines: int = DEFAULT_HEADER_LINES, *, strict: bool = False) -> None:
        if header_lines < 0:
            raise ValueError("header_lines must be non-negative")
        self.header_lines = header_lines
        self.strict = strict

    def load(self, source: SampleSource, sequence_count: int, sample_count: int) -> SampleTable:
        """Read ``sequence_count`` sequences of ``sample_count`` points from ``source``."""
        validate_counts(sample_count, sequence_count)
        if isinstance(source, (str, Path)):
            path = Path(source)
            try:
                handle = path.open("r", encoding="utf-8")
            except OSError as exc:
                raise SourceUnavailable(f"cannot open file '{path}': {exc.strerror or exc}") from exc
            with handle:
                try:
                    return self.load_lines(handle, sequence_count, sample_count, source_name=str(path))
                except UnicodeDecodeError as exc:
                    raise MalformedInput(f"Not UTF-8 text in {path}: {exc.reason} at byte {exc.start}") from exc
        return self.load_lines(source, sequence_count, sample_count)

    def load_lines(
        self,
        lines: Iterable[str],
        sequence_count: int,
        sample_count: int,
        *,
        source_name: Optional[str] = None,
    ) -> SampleTable:
        """Parse an iterable of text lines (e.g. an open file).

        A line opens a new sequence when it carries a marker prefix, or when
        it is not a point and the current sequence is empty or already holds
        ``sample_count`` points. Anything else that is not a point is an error.
        """
        validate_counts(sample_count, sequence_count)
        sequences: List[List[Tuple[float, float]]] = []
        current: Optional[List[Tuple[float, float]]] = None
        complete = 0

        for line_number, line in enumerate(lines, start=1):
            if line_number <= self.header_lines:
                continue
            stripped = line.strip()
            if not stripped:
                continue
            filling = current is not None and 0 < len(current) < sample_count
            if stripped.startswith(MARKER_PREFIXES) or (not filling and not _is_point(stripped)):
                if current is not None and not current:
                    continue  # consecutive markers describe the same sequence
                if current is not None:
                    complete += 1
                if complete >= sequence_count:
                    break
                current = []
                sequences.append(current)
                continue
            if current is None:
                current = []
                sequences.append(current)
            if len(current) < sample_count:
                current.append(_parse_point(stripped, line_number))

        sequences = sequences[:sequence_count]
        lengths = [len(seq) for seq in sequences]
        truncated = len(sequences) < sequence_count or any(n < sample_count for n in lengths)
        if truncated:
            message = (
                f"Sample source {source_name or '<stream>'} is truncated: "
                f"{len(sequences)}/{sequence_count} sequences, "
                f"shortest {min(lengths, default=0)}/{sample_count} samples"
            )
            if self.strict:
                raise MalformedInput(message)
            LOGGER.warning(message)

        LOGGER.info(
            "Loaded %d sequences (%d samples requested) from %s",
            len(sequences),
            sample_count,
            source_name or "<stream>",
        )
        return SampleTable(sequences, truncated=truncated, source=source_name)


def load_samples(
    source: SampleSource,
    sequence_count: int,
    sample_count: int,
    *,
    header_lines: int = DEFAULT_HEADER_LINES,
    strict: bool = False,
) -> SampleTable:
    """Convenience wrapper around :meth:`SampleLoader.load`."""
    return SampleLoader(header_lines, strict=strict).load(source, sequence_count, sample_count)


__all__ = ["MARKER_PREFIXES", "SampleLoader", "load_samples"]
