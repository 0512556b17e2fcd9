"""Point, sequence and sample table models."""

from __future__ import annotations

from typing import Iterator, List, NamedTuple, Sequence, Union

import numpy as np

from ..core.validator import validate_table_capacity


class Point(NamedTuple):
    """A 2D sample point. Coordinates outside [0, 1) are passed through unchanged."""

    x: float
    y: float


def _freeze(points: Union[np.ndarray, Sequence[Sequence[float]]]) -> np.ndarray:
    array = np.array(points, dtype=float).reshape(-1, 2)
    array.setflags(write=False)
    return array


class SampleTable:
    """
    Ordered collection of independently generated point sequences.

    Each sequence is stored as a read-only array of shape ``(n, 2)`` in draw
    order. Sequences may differ in length when the source was truncated; the
    estimator validates the counts it needs before reading anything.
    """

    def __init__(
        self,
        sequences: Sequence[Union[np.ndarray, Sequence[Sequence[float]]]],
        *,
        truncated: bool = False,
        source: str | None = None,
    ) -> None:
        self._sequences: List[np.ndarray] = [_freeze(seq) for seq in sequences]
        self.truncated = truncated
        self.source = source

    # ------------------------------------------------------------------ access
    def __len__(self) -> int:
        return len(self._sequences)

    def __iter__(self) -> Iterator[np.ndarray]:
        return iter(self._sequences)

    def __getitem__(self, index: int) -> np.ndarray:
        return self._sequences[index]

    @property
    def sequence_count(self) -> int:
        return len(self._sequences)

    @property
    def lengths(self) -> List[int]:
        return [int(seq.shape[0]) for seq in self._sequences]

    @property
    def sample_count(self) -> int:
        """Number of samples available in every sequence (the shortest length)."""
        return min(self.lengths, default=0)

    def point(self, sequence: int, sample: int) -> Point:
        x, y = self._sequences[sequence][sample]
        return Point(float(x), float(y))

    def as_array(self, sample_count: int, sequence_count: int) -> np.ndarray:
        """
        Return a dense ``(sequence_count, sample_count, 2)`` view of the table.

        Raises ``InsufficientData`` when the table cannot supply the requested
        counts.
        """
        validate_table_capacity(self.lengths, sample_count, sequence_count)
        dense = np.stack([seq[:sample_count] for seq in self._sequences[:sequence_count]])
        dense.setflags(write=False)
        return dense


__all__ = ["Point", "SampleTable"]
