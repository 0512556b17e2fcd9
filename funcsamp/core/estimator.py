"""Running Monte Carlo error estimation over many sample sequences."""

from __future__ import annotations

from typing import Iterator, Optional, Union

import numpy as np

from ..config import REPORT_STRIDE
from ..models.results import ErrorPoint
from ..models.samples import SampleTable
from .integrands import Integrand, get_integrand
from .validator import InsufficientData


def serial_sum(values: np.ndarray) -> float:
    """Sum ``values`` strictly left to right.

    ``np.sum`` uses pairwise summation; ``np.cumsum`` accumulates in order, so
    its last element matches a plain sequential loop bit for bit.
    """
    if values.size == 0:
        return 0.0
    return float(np.cumsum(values)[-1])


def run(
    integrand: Union[Integrand, str],
    table: SampleTable,
    sample_count: Optional[int] = None,
    sequence_count: Optional[int] = None,
    *,
    stride: int = REPORT_STRIDE,
) -> Iterator[ErrorPoint]:
    """
    Estimate the integration error for increasing sample counts.

    For every sample index ``s`` each sequence's running sum is advanced by
    one integrand evaluation, the running estimate ``sum / (s + 1)`` is
    compared with the reference value, and the absolute errors are reduced to
    a mean and a maximum over sequences. A triple is yielded whenever
    ``s + 1`` is a multiple of ``stride``.

    Parameters
    ----------
    integrand:
        Integrand definition or catalog name.
    table:
        Loaded sample sequences.
    sample_count, sequence_count:
        Counts to use; default to everything the table holds.
    stride:
        Reporting interval in samples.

    Counts are validated eagerly, so ``InsufficientData`` is raised by this
    call rather than by the first ``next()`` on the returned iterator.
    """
    if isinstance(integrand, str):
        integrand = get_integrand(integrand)
    if sequence_count is None or sample_count is None:
        if not table.sequence_count or not table.sample_count:
            raise InsufficientData(
                f"Sample table {table.source or '<memory>'} is empty; pass explicit counts or load more data"
            )
    if sequence_count is None:
        sequence_count = table.sequence_count
    if sample_count is None:
        sample_count = table.sample_count
    if stride < 1:
        raise ValueError("stride must be at least 1")

    samples = table.as_array(sample_count, sequence_count)
    return _iterate_errors(integrand, samples, stride)


def _iterate_errors(integrand: Integrand, samples: np.ndarray, stride: int) -> Iterator[ErrorPoint]:
    sequence_count, sample_count = samples.shape[0], samples.shape[1]
    reference = float(integrand.reference)
    running_sums = np.zeros(sequence_count, dtype=float)

    for s in range(sample_count):
        column = samples[:, s, :]
        values = np.asarray(integrand.evaluate_many(column[:, 0], column[:, 1]), dtype=float)
        running_sums += values
        estimates = running_sums / (s + 1)
        errors = np.abs(estimates - reference)

        if (s + 1) % stride == 0:
            mean_error = serial_sum(errors) / sequence_count
            max_error = float(max(errors.max(), 0.0))
            yield ErrorPoint(sample_count=s + 1, mean_error=mean_error, max_error=max_error)


__all__ = ["run", "serial_sum"]
