"""Numerical cross-checks of catalog reference values."""

from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

import numpy as np
from scipy import integrate

from .integrands import DEFAULT_CATALOG, Integrand, IntegrandCatalog

LOGGER = logging.getLogger(__name__)

DEFAULT_TOLERANCE = 1e-4


@dataclass
class ValidationResult:
    """Outcome of integrating one integrand numerically."""

    name: str
    reference: float
    numeric: float
    estimated_error: float
    status: str
    warnings: List[str]

    @property
    def difference(self) -> float:
        return abs(self.numeric - self.reference)

    def to_dict(self) -> Dict[str, object]:
        return {
            "name": self.name,
            "reference": self.reference,
            "numeric": self.numeric,
            "difference": self.difference,
            "estimated_error": self.estimated_error,
            "status": self.status,
            "warnings": list(self.warnings),
        }


def _scalar(integrand: Integrand):
    def f(*coords: float) -> float:
        if integrand.projection is None:
            return float(integrand.rule(np.float64(coords[0]), np.float64(coords[1])))
        return float(integrand.rule(np.float64(coords[0])))

    return f


def validate_reference(
    integrand: Integrand,
    *,
    tolerance: float = DEFAULT_TOLERANCE,
    limit: int = 200,
) -> ValidationResult:
    """Integrate ``integrand`` over the unit square and compare with its reference.

    1D integrands are integrated over their projected coordinate only. Status is
    ``PASS`` when the difference is within ``tolerance`` and ``WARN`` otherwise;
    quadrature warnings (e.g. slow convergence near a singularity) are recorded.
    """
    notes: List[str] = []
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always", integrate.IntegrationWarning)
        if integrand.projection is None:
            value, abserr = integrate.nquad(_scalar(integrand), [[0.0, 1.0], [0.0, 1.0]], opts={"limit": limit})
        else:
            value, abserr = integrate.quad(_scalar(integrand), 0.0, 1.0, limit=limit)
    for warning in caught:
        if issubclass(warning.category, integrate.IntegrationWarning):
            notes.append("quadrature_not_converged")
            break

    difference = abs(value - integrand.reference)
    if difference > tolerance:
        notes.append("reference_mismatch")
    status = "PASS" if difference <= tolerance else "WARN"
    if status != "PASS":
        LOGGER.warning(
            "Reference for %s differs from quadrature by %.3g (%.8f vs %.8f)",
            integrand.name,
            difference,
            integrand.reference,
            value,
        )
    return ValidationResult(
        name=integrand.name,
        reference=float(integrand.reference),
        numeric=float(value),
        estimated_error=float(abserr),
        status=status,
        warnings=notes,
    )


def validate_catalog(
    names: Optional[Iterable[str]] = None,
    *,
    catalog: Optional[IntegrandCatalog] = None,
    tolerance: float = DEFAULT_TOLERANCE,
) -> List[ValidationResult]:
    """Validate several integrands (all of the catalog by default)."""
    catalog = catalog if catalog is not None else DEFAULT_CATALOG
    selected = list(names) if names else catalog.names()
    return [validate_reference(catalog.lookup(name), tolerance=tolerance) for name in selected]


__all__ = ["DEFAULT_TOLERANCE", "ValidationResult", "validate_catalog", "validate_reference"]
