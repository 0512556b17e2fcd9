"""Error taxonomy and input validation utilities."""

from __future__ import annotations

from typing import Sequence


class FuncSampError(Exception):
    """Base class for all errors raised by the convergence tooling."""


class UnknownIntegrand(FuncSampError, KeyError):
    """Raised when an integrand name is not registered in the catalog."""

    def __init__(self, name: str, known: Sequence[str] = ()) -> None:
        self.name = name
        self.known = tuple(known)
        super().__init__(name)

    def __str__(self) -> str:
        message = f"Unknown function: {self.name!r}"
        if self.known:
            message += f" (known: {', '.join(self.known)})"
        return message


class SourceUnavailable(FuncSampError, OSError):
    """Raised when a sample source cannot be opened."""


class MalformedInput(FuncSampError, ValueError):
    """Raised when a sample source does not follow the expected layout."""


class InsufficientData(FuncSampError, ValueError):
    """Raised when a run requests more sequences or samples than were loaded."""


def validate_counts(sample_count: int, sequence_count: int) -> None:
    """Ensure requested counts are positive integers."""
    for label, value in (("sample_count", sample_count), ("sequence_count", sequence_count)):
        if isinstance(value, bool) or int(value) != value:
            raise ValueError(f"{label} must be an integer, got {value!r}")
        if value < 1:
            raise ValueError(f"{label} must be at least 1, got {value}")


def validate_table_capacity(lengths: Sequence[int], sample_count: int, sequence_count: int) -> None:
    """Ensure ``sequence_count`` sequences of ``sample_count`` points are available.

    ``lengths`` holds the number of points loaded for each sequence.
    """
    validate_counts(sample_count, sequence_count)
    if len(lengths) < sequence_count:
        raise InsufficientData(
            f"Requested {sequence_count} sequences but only {len(lengths)} were loaded"
        )
    short = [idx for idx, length in enumerate(lengths[:sequence_count]) if length < sample_count]
    if short:
        first = short[0]
        raise InsufficientData(
            f"Sequence {first} holds {lengths[first]} samples, {sample_count} requested"
            + (f" ({len(short)} short sequences)" if len(short) > 1 else "")
        )


__all__ = [
    "FuncSampError",
    "UnknownIntegrand",
    "SourceUnavailable",
    "MalformedInput",
    "InsufficientData",
    "validate_counts",
    "validate_table_capacity",
]
